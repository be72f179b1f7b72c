"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from helpfromfounder.api.v1.dependencies (no manual
repo/service construction). Threads and responses carry full paths since
they nest under projects and threads respectively.

The notification dispatcher and image relay are not part of v1; main.py
mounts them at their public /api paths.
"""

from fastapi import APIRouter

from helpfromfounder.api.v1.endpoints import (
    auth,
    health,
    presence,
    projects,
    responses,
    threads,
    users,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(projects.router, prefix="/projects", tags=["projects"])
api_router.include_router(threads.router, tags=["threads"])
api_router.include_router(responses.router, tags=["responses"])
api_router.include_router(presence.router, prefix="/presence", tags=["presence"])
