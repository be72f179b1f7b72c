"""Firestore repositories for users, projects, threads, and responses."""

from helpfromfounder.infrastructure.firebase.repositories.project_repo_firestore import (
    FirestoreProjectRepository,
)
from helpfromfounder.infrastructure.firebase.repositories.response_repo_firestore import (
    FirestoreResponseRepository,
)
from helpfromfounder.infrastructure.firebase.repositories.thread_repo_firestore import (
    FirestoreThreadRepository,
)
from helpfromfounder.infrastructure.firebase.repositories.user_repo_firestore import (
    FirestoreUserRepository,
)

__all__ = [
    "FirestoreProjectRepository",
    "FirestoreResponseRepository",
    "FirestoreThreadRepository",
    "FirestoreUserRepository",
]
