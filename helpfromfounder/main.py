"""FastAPI application entry point.

Wiring only: lifespan, exception handlers, middleware, routers.
No business logic here. See helpfromfounder.core.lifespan and
helpfromfounder.core.exception_handlers.

Settings are loaded inside create_app() so that tests can set env (and clear
the get_settings cache) before calling create_app().
"""

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from helpfromfounder.api.v1 import api_router
from helpfromfounder.api.v1.endpoints import images, notifications
from helpfromfounder.core.config import get_settings
from helpfromfounder.core.exception_handlers import register_exception_handlers
from helpfromfounder.core.lifespan import create_lifespan
from helpfromfounder.middleware import (
    RequestIDMiddleware,
    RequestSizeLimitMiddleware,
    SecurityHeadersMiddleware,
)
from helpfromfounder.shared.telemetry.logging import setup_logging


def create_app() -> FastAPI:
    """Build and return the FastAPI application. Settings are resolved here (deferred from import)."""
    settings = get_settings()
    setup_logging()
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
    )

    register_exception_handlers(app)

    # Middleware: first added = innermost. Resulting order: size limit -> request ID -> security -> CORS.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.allowed_origins.split(",") if o.strip()],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIDMiddleware, header_name=settings.request_id_header)
    app.add_middleware(RequestSizeLimitMiddleware, max_bytes=settings.max_upload_size)

    app.include_router(api_router, prefix="/api/v1")
    app.include_router(notifications.router, tags=["notifications"])
    app.include_router(images.router, prefix="/api/images", tags=["images"])

    if settings.send_email_path:
        legacy = APIRouter()
        notifications.mount_legacy_route(legacy, settings.send_email_path)
        app.include_router(legacy, tags=["notifications"])

    return app


app = create_app()
