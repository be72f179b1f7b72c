"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
stage_* methods add writes to a batch obtained from new_batch(); nothing is
written until the batch is committed, and all staged writes commit atomically.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from helpfromfounder.application.dtos.project import ProjectResult
    from helpfromfounder.application.dtos.thread import ResponseResult, ThreadResult
    from helpfromfounder.application.dtos.user import UserResult


class IWriteBatch(Protocol):
    """Atomic group of document writes."""

    def __len__(self) -> int: ...

    async def commit(self) -> None:
        """Apply all staged writes or none of them."""


class IUserRepository(Protocol):
    async def get_by_id(self, user_id: str) -> UserResult | None:
        """Return user by ID."""

    async def create(
        self,
        user_id: str,
        email: str | None,
        display_name: str | None,
        photo_url: str | None = None,
    ) -> UserResult:
        """Write the user document."""

    async def get_or_create(
        self,
        user_id: str,
        email: str | None,
        display_name: str | None,
        photo_url: str | None = None,
    ) -> tuple[UserResult, bool]:
        """Return (user, created)."""

    async def update_profile(self, user_id: str, changes: dict[str, Any]) -> UserResult | None:
        """Apply profile changes and return the updated user."""

    async def update_last_seen(self, user_id: str, when: datetime) -> None:
        """Persist the last time the user was seen online."""


class IProjectRepository(Protocol):
    def new_batch(self) -> IWriteBatch: ...

    async def get_by_id(self, project_id: str) -> ProjectResult | None: ...

    async def get_by_slug(self, slug: str) -> ProjectResult | None: ...

    async def slug_exists(self, slug: str, exclude_id: str | None = None) -> bool: ...

    async def list_all(self, limit: int = 100) -> list[ProjectResult]: ...

    async def list_by_owner(self, owner_id: str) -> list[ProjectResult]: ...

    async def list_ids(self) -> list[str]: ...

    async def create(self, project_id: str, data: dict[str, Any]) -> ProjectResult: ...

    async def update(self, project_id: str, changes: dict[str, Any]) -> None: ...

    async def delete(self, project_id: str) -> None: ...

    def stage_counters(
        self,
        batch: IWriteBatch,
        project: ProjectResult,
        *,
        total_delta: int = 0,
        closed_delta: int = 0,
    ) -> None:
        """Stage atomic totalIssues / closedIssues increments (seeding a missing closedIssues)."""

    def stage_set_counters(
        self, batch: IWriteBatch, project_id: str, *, total_issues: int, closed_issues: int
    ) -> None:
        """Stage absolute counter values."""


class IThreadRepository(Protocol):
    def new_batch(self) -> IWriteBatch: ...

    async def get_by_id(self, thread_id: str) -> ThreadResult | None: ...

    async def list_by_project(self, project_id: str) -> list[ThreadResult]:
        """Return threads of a project, newest first."""

    async def list_ids_by_anonymous_id(self, anonymous_id: str) -> list[str]: ...

    def stage_create(self, batch: IWriteBatch, thread_id: str, data: dict[str, Any]) -> None: ...

    def stage_update(self, batch: IWriteBatch, thread_id: str, fields: dict[str, Any]) -> None: ...

    def stage_delete(self, batch: IWriteBatch, thread_id: str) -> None: ...

    def stage_response_count(self, batch: IWriteBatch, thread_id: str, delta: int) -> None: ...

    def stage_set_response_count(self, batch: IWriteBatch, thread_id: str, count: int) -> None: ...


class IResponseRepository(Protocol):
    def new_batch(self) -> IWriteBatch: ...

    async def get_by_id(self, response_id: str) -> ResponseResult | None: ...

    async def list_by_thread(self, thread_id: str) -> list[ResponseResult]:
        """Return responses of a thread, oldest first."""

    async def list_recent_by_thread(self, thread_id: str, limit: int) -> list[ResponseResult]:
        """Return the newest responses, newest first."""

    async def get_latest_by_thread(self, thread_id: str) -> ResponseResult | None: ...

    async def list_ids_by_thread(self, thread_id: str) -> list[str]: ...

    async def list_ids_by_anonymous_id(self, anonymous_id: str) -> list[str]: ...

    def stage_create(self, batch: IWriteBatch, response_id: str, data: dict[str, Any]) -> None: ...

    def stage_update(self, batch: IWriteBatch, response_id: str, fields: dict[str, Any]) -> None: ...

    def stage_delete(self, batch: IWriteBatch, response_id: str) -> None: ...
