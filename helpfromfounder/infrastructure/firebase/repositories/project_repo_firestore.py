"""Firestore-backed project repository (implements IProjectRepository)."""

from __future__ import annotations

from typing import Any

from helpfromfounder.application.dtos.project import ProjectResult
from helpfromfounder.infrastructure.firebase import Increment
from helpfromfounder.infrastructure.firebase.client import DocumentClient
from helpfromfounder.infrastructure.firebase.collections import COLLECTION_PROJECTS
from helpfromfounder.shared.utils.datetime import parse_datetime

_EDITABLE_FIELDS = {
    "name": "name",
    "slug": "slug",
    "description": "description",
    "website": "website",
    "logo_url": "logoUrl",
    "twitter_url": "twitterUrl",
    "linkedin_url": "linkedinUrl",
    "github_url": "githubUrl",
    "updated_at": "updatedAt",
}


class FirestoreProjectRepository:
    """Project documents; counters are only changed through stage_counters."""

    def __init__(self, client: DocumentClient) -> None:
        self._client = client
        self._coll = client.collection(COLLECTION_PROJECTS)

    def _to_result(self, doc_id: str, data: dict) -> ProjectResult:
        closed = data.get("closedIssues")
        stored = closed is not None
        if not stored:
            closed = data.get("solvedIssues", 0)
        return ProjectResult(
            id=doc_id,
            name=data.get("name", ""),
            slug=data.get("slug", ""),
            description=data.get("description", ""),
            owner_id=data.get("ownerId", ""),
            owner_email=data.get("ownerEmail") or None,
            website=data.get("website") or None,
            logo_url=data.get("logoUrl") or None,
            twitter_url=data.get("twitterUrl") or None,
            linkedin_url=data.get("linkedinUrl") or None,
            github_url=data.get("githubUrl") or None,
            total_issues=int(data.get("totalIssues") or 0),
            closed_issues=int(closed or 0),
            created_at=parse_datetime(data.get("createdAt")),
            updated_at=parse_datetime(data.get("updatedAt")),
            closed_issues_stored=stored,
        )

    def new_batch(self):
        return self._client.batch()

    async def get_by_id(self, project_id: str) -> ProjectResult | None:
        doc = await self._coll.document(project_id).get()
        if not doc:
            return None
        return self._to_result(doc.id, doc.to_dict())

    async def get_by_slug(self, slug: str) -> ProjectResult | None:
        async for snapshot in self._coll.where("slug", "==", slug).limit(1).stream():
            return self._to_result(snapshot.id, snapshot.to_dict())
        return None

    async def slug_exists(self, slug: str, exclude_id: str | None = None) -> bool:
        async for snapshot in self._coll.where("slug", "==", slug).limit(2).stream():
            if snapshot.id != exclude_id:
                return True
        return False

    async def list_all(self, limit: int = 100) -> list[ProjectResult]:
        """Return projects, newest first."""
        q = self._coll.order_by("createdAt", "DESCENDING").limit(limit)
        return [self._to_result(s.id, s.to_dict()) async for s in q.stream()]

    async def list_by_owner(self, owner_id: str) -> list[ProjectResult]:
        """Return the owner's projects, newest first."""
        q = self._coll.where("ownerId", "==", owner_id)
        projects = [self._to_result(s.id, s.to_dict()) async for s in q.stream()]
        return sorted(
            projects,
            key=lambda p: p.created_at.timestamp() if p.created_at else 0.0,
            reverse=True,
        )

    async def list_ids(self) -> list[str]:
        return [s.id async for s in self._coll.stream()]

    async def create(self, project_id: str, data: dict[str, Any]) -> ProjectResult:
        await self._coll.create(project_id, data)
        return self._to_result(project_id, data)

    async def update(self, project_id: str, changes: dict[str, Any]) -> None:
        """Apply editable field changes (snake_case keys)."""
        fields = {
            _EDITABLE_FIELDS[key]: value
            for key, value in changes.items()
            if key in _EDITABLE_FIELDS
        }
        if fields:
            await self._coll.document(project_id).update(fields)

    async def delete(self, project_id: str) -> None:
        await self._coll.document(project_id).delete()

    def stage_counters(
        self, batch, project: ProjectResult, *, total_delta: int = 0, closed_delta: int = 0
    ) -> None:
        """Add atomic totalIssues / closedIssues increments to a batch.

        A project still counting in legacy solvedIssues gets closedIssues
        seeded from that count instead of incremented from zero.
        """
        fields: dict[str, Any] = {}
        if total_delta:
            fields["totalIssues"] = Increment(total_delta)
        if closed_delta:
            if project.closed_issues_stored:
                fields["closedIssues"] = Increment(closed_delta)
            else:
                fields["closedIssues"] = max(project.closed_issues + closed_delta, 0)
        if fields:
            batch.update(self._coll.document(project.id), fields)

    def stage_set_counters(
        self, batch, project_id: str, *, total_issues: int, closed_issues: int
    ) -> None:
        """Add absolute counter values to a batch (reconciliation)."""
        batch.update(
            self._coll.document(project_id),
            {"totalIssues": total_issues, "closedIssues": closed_issues},
        )
