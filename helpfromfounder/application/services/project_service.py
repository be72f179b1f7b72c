"""Project use cases: create, edit, look up by slug, dashboard listing, delete."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from helpfromfounder.application.dtos.project import ProjectCreate, ProjectResult
from helpfromfounder.application.interfaces.repositories import (
    IProjectRepository,
    IResponseRepository,
    IThreadRepository,
    IUserRepository,
)
from helpfromfounder.application.services.access_policy import AccessPolicy
from helpfromfounder.application.services.slug import generate_slug, get_unique_slug
from helpfromfounder.application.services.store_errors import MAX_BATCH_WRITES, store_errors
from helpfromfounder.domain.entities.identity import Identity
from helpfromfounder.domain.exceptions import ResourceNotFoundException, ValidationException
from helpfromfounder.shared.utils.datetime import utc_now
from helpfromfounder.shared.utils.generators import generate_cuid
from helpfromfounder.shared.utils.sanitization import sanitize_input

logger = logging.getLogger(__name__)

# Used when a name has no ASCII letters or digits
FALLBACK_SLUG = "project"


def _validate(data: ProjectCreate) -> tuple[str, str]:
    name = sanitize_input(data.name)
    if not name:
        raise ValidationException("Project name is required", field="name")
    description = (data.description or "").strip()
    if not description:
        raise ValidationException("Project description is required", field="description")
    return name, description


class ProjectService:
    def __init__(
        self,
        projects: IProjectRepository,
        threads: IThreadRepository,
        responses: IResponseRepository,
        users: IUserRepository,
        policy: AccessPolicy,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._projects = projects
        self._threads = threads
        self._responses = responses
        self._users = users
        self._policy = policy
        self._clock = clock

    async def get_by_slug(self, slug: str) -> ProjectResult:
        with store_errors("Failed to load project. Please try again."):
            project = await self._projects.get_by_slug(slug)
        if project is None:
            raise ResourceNotFoundException("project", slug)
        return project

    async def get_by_id(self, project_id: str) -> ProjectResult:
        with store_errors("Failed to load project. Please try again."):
            project = await self._projects.get_by_id(project_id)
        if project is None:
            raise ResourceNotFoundException("project", project_id)
        return project

    async def list_projects(self, limit: int = 100) -> list[ProjectResult]:
        with store_errors("Failed to load projects. Please try again."):
            return await self._projects.list_all(limit)

    async def list_for_owner(self, identity: Identity) -> list[ProjectResult]:
        """Dashboard: the caller's projects, newest first."""
        owner_id = self._policy.require_authenticated(identity, "You must be logged in to view your projects")
        with store_errors("Failed to load projects. Please try again."):
            return await self._projects.list_by_owner(owner_id)

    async def create_project(self, identity: Identity, data: ProjectCreate) -> ProjectResult:
        """Create a project owned by the caller with a unique slug and zeroed counters."""
        owner_id = self._policy.require_authenticated(identity, "You must be logged in to create a project")
        name, description = _validate(data)
        with store_errors("Failed to create project. Please try again."):
            slug = await get_unique_slug(self._projects, generate_slug(name) or FALLBACK_SLUG)
            owner_email = identity.email
            if not owner_email:
                owner = await self._users.get_by_id(owner_id)
                owner_email = owner.email if owner else None
            now = self._clock()
            project_id = generate_cuid()
            project = await self._projects.create(project_id, {
                "name": name,
                "description": description,
                "website": data.website or None,
                "logoUrl": data.logo_url or None,
                "twitterUrl": data.twitter_url or None,
                "linkedinUrl": data.linkedin_url or None,
                "githubUrl": data.github_url or None,
                "slug": slug,
                "ownerId": owner_id,
                "ownerEmail": owner_email,
                "createdAt": now,
                "updatedAt": now,
                "totalIssues": 0,
                "closedIssues": 0,
            })
        logger.info("Project %s created with slug %s", project_id, slug)
        return project

    async def update_project(
        self, project_id: str, identity: Identity, data: ProjectCreate
    ) -> ProjectResult:
        """Edit a project (owner only); the slug changes only when the name's slug does."""
        self._policy.require_authenticated(identity, "You must be logged in to edit a project")
        project = await self.get_by_id(project_id)
        changes = {
            "name", "description", "website", "logo_url",
            "twitter_url", "linkedin_url", "github_url",
        }
        self._policy.require_project_update(identity, project, changes)
        name, description = _validate(data)

        with store_errors("Failed to update project. Please try again."):
            slug = project.slug
            base_slug = generate_slug(name) or FALLBACK_SLUG
            if base_slug != project.slug:
                slug = await get_unique_slug(self._projects, base_slug, exclude_project_id=project.id)
            await self._projects.update(project.id, {
                "name": name,
                "description": description,
                "website": data.website or None,
                "logo_url": data.logo_url or None,
                "twitter_url": data.twitter_url or None,
                "linkedin_url": data.linkedin_url or None,
                "github_url": data.github_url or None,
                "slug": slug,
                "updated_at": self._clock(),
            })
        return await self.get_by_id(project.id)

    async def delete_project(self, project_id: str, identity: Identity) -> None:
        """Delete a project with all of its threads and responses (owner only)."""
        project = await self.get_by_id(project_id)
        self._policy.require_project_owner(identity, project, "delete")
        with store_errors("Failed to delete project. Please try again."):
            threads = await self._threads.list_by_project(project.id)
            batch = self._projects.new_batch()
            for thread in threads:
                for response_id in await self._responses.list_ids_by_thread(thread.id):
                    self._responses.stage_delete(batch, response_id)
                    if len(batch) >= MAX_BATCH_WRITES:
                        await batch.commit()
                        batch = self._projects.new_batch()
                self._threads.stage_delete(batch, thread.id)
                if len(batch) >= MAX_BATCH_WRITES:
                    await batch.commit()
                    batch = self._projects.new_batch()
            await batch.commit()
            await self._projects.delete(project.id)
        logger.info("Project %s deleted with %d threads", project.id, len(threads))
