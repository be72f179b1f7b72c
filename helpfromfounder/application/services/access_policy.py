"""Access policy: who may write which documents.

Reads are public. Every write path in the services calls one of the
require_* methods before staging writes.
"""

from __future__ import annotations

from collections.abc import Iterable

from helpfromfounder.application.dtos.project import ProjectResult
from helpfromfounder.application.dtos.thread import ResponseResult, ThreadResult
from helpfromfounder.domain.entities.identity import Identity
from helpfromfounder.domain.exceptions import AuthenticationException, AuthorizationException

# Fields anyone may change on a project (denormalized counters)
COUNTER_FIELDS = frozenset({"totalIssues", "closedIssues"})


class AccessPolicy:
    """Stateless permission checks over identities and documents."""

    @staticmethod
    def is_project_owner(identity: Identity, project: ProjectResult) -> bool:
        return identity.user_id is not None and identity.user_id == project.owner_id

    def can_update_user(self, identity: Identity, user_id: str) -> bool:
        return identity.user_id is not None and identity.user_id == user_id

    def can_update_project(
        self, identity: Identity, project: ProjectResult, fields: Iterable[str]
    ) -> bool:
        """Owner may change anything; others only the issue counters."""
        if self.is_project_owner(identity, project):
            return True
        return set(fields) <= COUNTER_FIELDS

    def can_change_thread_status(self, identity: Identity, project: ProjectResult) -> bool:
        return self.is_project_owner(identity, project)

    def can_delete_thread(
        self, identity: Identity, thread: ThreadResult, project: ProjectResult | None
    ) -> bool:
        if project is not None and self.is_project_owner(identity, project):
            return True
        return identity.is_author_of(thread.author_id, thread.anonymous_id)

    def can_delete_response(
        self, identity: Identity, response: ResponseResult, project: ProjectResult | None
    ) -> bool:
        if project is not None and self.is_project_owner(identity, project):
            return True
        return identity.is_author_of(response.author_id, response.anonymous_id)

    def require_authenticated(self, identity: Identity, message: str) -> str:
        """Return the user id or raise AuthenticationException."""
        if identity.user_id is None:
            raise AuthenticationException(message)
        return identity.user_id

    def require_user_update(self, identity: Identity, user_id: str) -> None:
        if not self.can_update_user(identity, user_id):
            raise AuthorizationException(resource="user", action="update")

    def require_project_update(
        self, identity: Identity, project: ProjectResult, fields: Iterable[str]
    ) -> None:
        if not self.can_update_project(identity, project, fields):
            raise AuthorizationException(resource="project", action="update")

    def require_project_owner(self, identity: Identity, project: ProjectResult, action: str) -> None:
        if not self.is_project_owner(identity, project):
            raise AuthorizationException(resource="project", action=action)

    def require_thread_status_change(self, identity: Identity, project: ProjectResult) -> None:
        if not self.can_change_thread_status(identity, project):
            raise AuthorizationException(
                resource="thread",
                action="update_status",
                message="Only the project owner can change thread status",
            )

    def require_thread_delete(
        self, identity: Identity, thread: ThreadResult, project: ProjectResult | None
    ) -> None:
        if not self.can_delete_thread(identity, thread, project):
            raise AuthorizationException(resource="thread", action="delete")

    def require_response_delete(
        self, identity: Identity, response: ResponseResult, project: ProjectResult | None
    ) -> None:
        if not self.can_delete_response(identity, response, project):
            raise AuthorizationException(resource="response", action="delete")
