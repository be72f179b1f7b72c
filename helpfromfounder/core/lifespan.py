"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic. Used by main.py; no business
logic here, only wiring of infrastructure (document store, image storage,
email provider, identity provider, presence store, background tasks,
telemetry).
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI

from helpfromfounder.core.config import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: shared HTTP client, document store, image storage,
    email sender, identity provider, presence store, background task
    runner, WebSocket manager, telemetry (if enabled). Shutdown drains
    pending notification tasks before closing clients.
    """
    settings = get_settings()

    # ---- Startup ----
    # Shared HTTP client for SendGrid, Identity Toolkit and dispatcher calls (connection reuse).
    app.state.http_client = httpx.AsyncClient(timeout=30.0)

    from helpfromfounder.infrastructure.firebase import init_firebase
    from helpfromfounder.infrastructure.firebase.client import load_service_account

    if not init_firebase():
        logger.error("Document store not initialized; data routes will answer 503")

    from helpfromfounder.infrastructure.external.storage import StorageFactory

    app.state.image_storage = StorageFactory.create_storage_service(settings)

    from helpfromfounder.infrastructure.external.email import (
        NotificationTemplateRenderer,
        SendGridEmailSender,
    )

    app.state.template_renderer = NotificationTemplateRenderer()
    if settings.sendgrid_api_key and settings.sendgrid_api_key.get_secret_value():
        app.state.email_sender = SendGridEmailSender(
            settings.sendgrid_api_key.get_secret_value(),
            settings.email_from_address,
            settings.email_from_name,
            api_url=settings.sendgrid_api_url,
            http_client=app.state.http_client,
        )
    else:
        app.state.email_sender = None
        logger.warning("SENDGRID_API_KEY not set; notification emails are disabled")

    from helpfromfounder.infrastructure.external.identity import FirebaseIdentityProvider

    service_account = None
    if settings.database_backend == "firestore":
        try:
            service_account = load_service_account()
        except ValueError:
            logger.exception("Invalid Firebase service account; token revocation disabled")
    app.state.identity_provider = FirebaseIdentityProvider(
        project_id=(service_account or {}).get("project_id", ""),
        api_key=settings.firebase_web_api_key.get_secret_value()
        if settings.firebase_web_api_key
        else None,
        service_account_info=service_account,
        http_client=app.state.http_client,
    )

    from helpfromfounder.infrastructure.cache import InMemoryPresenceStore, RedisPresenceStore

    if settings.redis_enabled:
        presence_store = RedisPresenceStore(settings=settings)
        await presence_store.connect()
        app.state.presence_store = presence_store
    else:
        app.state.presence_store = InMemoryPresenceStore()

    from helpfromfounder.api.websocket import ConnectionManager
    from helpfromfounder.application.services.background_tasks import BackgroundTaskRunner

    app.state.task_runner = BackgroundTaskRunner()
    app.state.ws_manager = ConnectionManager()

    app.state.telemetry = None
    if settings.telemetry_enabled:
        from helpfromfounder.shared.telemetry.telemetry import TelemetryConfig, build_exporter

        telemetry = TelemetryConfig.from_settings(settings)
        if telemetry.start(
            build_exporter(settings.telemetry_exporter, settings.telemetry_otlp_endpoint)
        ):
            telemetry.instrument(app, redis=settings.redis_enabled)
            app.state.telemetry = telemetry

    yield

    # ---- Shutdown ----
    pending = app.state.task_runner.pending
    if pending:
        logger.info("Waiting for %d notification tasks", pending)
    await app.state.task_runner.drain()

    if isinstance(app.state.presence_store, RedisPresenceStore):
        await app.state.presence_store.disconnect()

    await app.state.http_client.aclose()
    logger.info("HTTP client closed")

    from helpfromfounder.infrastructure.firebase import close_firebase

    await close_firebase()

    if app.state.telemetry is not None:
        app.state.telemetry.shutdown()
        logger.info("Telemetry flushed")
