"""Firestore collection names (schema-in-code).

Firestore has no DDL or migrations. Collections are created automatically
when the first document is written. Field names inside documents are
camelCase so existing web clients keep reading them.
"""

COLLECTION_USERS = "users"
COLLECTION_PROJECTS = "projects"
COLLECTION_THREADS = "threads"
COLLECTION_RESPONSES = "responses"
