"""Project API: listing, dashboard, create/edit/delete, reconciliation, founder presence."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response

from helpfromfounder.api.v1.dependencies import (
    IdentityDep,
    get_access_policy,
    get_presence_service,
    get_project_service,
    get_reconciliation_service,
)
from helpfromfounder.application.dtos.project import ProjectCreate
from helpfromfounder.application.services import (
    AccessPolicy,
    CounterReconciliationService,
    PresenceService,
    ProjectService,
)
from helpfromfounder.schemas.presence import PresenceResponse
from helpfromfounder.schemas.project import (
    ProjectCreateRequest,
    ProjectResponse,
    ReconciliationResponse,
)

router = APIRouter()

ProjectServiceDep = Annotated[ProjectService, Depends(get_project_service)]


def _to_create(body: ProjectCreateRequest) -> ProjectCreate:
    return ProjectCreate(
        name=body.name,
        description=body.description,
        website=body.website,
        logo_url=body.logo_url,
        twitter_url=body.twitter_url,
        linkedin_url=body.linkedin_url,
        github_url=body.github_url,
    )


@router.get("", response_model=list[ProjectResponse])
async def list_projects(
    projects: ProjectServiceDep,
    limit: int = Query(default=100, ge=1, le=500),
):
    """All projects, newest first."""
    return [ProjectResponse.model_validate(p) for p in await projects.list_projects(limit)]


@router.post("", response_model=ProjectResponse, status_code=201)
async def create_project(body: ProjectCreateRequest, identity: IdentityDep, projects: ProjectServiceDep):
    """Create a project owned by the signed-in caller."""
    project = await projects.create_project(identity, _to_create(body))
    return ProjectResponse.model_validate(project)


@router.get("/mine", response_model=list[ProjectResponse])
async def list_my_projects(identity: IdentityDep, projects: ProjectServiceDep):
    """Projects owned by the caller (dashboard)."""
    return [ProjectResponse.model_validate(p) for p in await projects.list_for_owner(identity)]


@router.get("/{slug}", response_model=ProjectResponse)
async def get_project(slug: str, projects: ProjectServiceDep):
    return ProjectResponse.model_validate(await projects.get_by_slug(slug))


@router.patch("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: str,
    body: ProjectCreateRequest,
    identity: IdentityDep,
    projects: ProjectServiceDep,
):
    """Edit a project (owner only)."""
    project = await projects.update_project(project_id, identity, _to_create(body))
    return ProjectResponse.model_validate(project)


@router.delete("/{project_id}", status_code=204)
async def delete_project(project_id: str, identity: IdentityDep, projects: ProjectServiceDep):
    """Delete a project with its threads and responses (owner only)."""
    await projects.delete_project(project_id, identity)
    return Response(status_code=204)


@router.post("/{project_id}/reconcile", response_model=ReconciliationResponse)
async def reconcile_project(
    project_id: str,
    identity: IdentityDep,
    projects: ProjectServiceDep,
    policy: Annotated[AccessPolicy, Depends(get_access_policy)],
    reconciler: Annotated[CounterReconciliationService, Depends(get_reconciliation_service)],
):
    """Recompute the project's issue counters and every thread's responseCount (owner only)."""
    project = await projects.get_by_id(project_id)
    policy.require_project_owner(identity, project, "reconcile")
    result = await reconciler.reconcile_project(project.id)
    return ReconciliationResponse.model_validate(result)


@router.get("/{slug}/founder-presence", response_model=PresenceResponse)
async def founder_presence(
    slug: str,
    projects: ProjectServiceDep,
    presence: Annotated[PresenceService, Depends(get_presence_service)],
):
    """Online state and last-seen label of the project's owner."""
    project = await projects.get_by_slug(slug)
    return PresenceResponse.model_validate(await presence.describe(project.owner_id))
