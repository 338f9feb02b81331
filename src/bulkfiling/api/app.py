"""FastAPI application with lifespan and router mounting."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from bulkfiling.agents.idp.main import IntakeAgent
from bulkfiling.agents.orchestrator.sync import SubmissionSync
from bulkfiling.api.routes import admin, health, intake, orders, pricing
from bulkfiling.core.config import AppSettings
from bulkfiling.core.exceptions import InvalidFileError, ManualEntryError
from bulkfiling.core.logging import configure_logging, get_logger
from bulkfiling.core.protocols import ICRMClient, IFileStore, IPricingStore, IProfileService
from bulkfiling.integrations.highlevel import HighLevelClient
from bulkfiling.integrations.profile_service import ProfileServiceClient
from bulkfiling.persistence import create_persistence

logger = get_logger(__name__)


def create_app(
    settings: AppSettings | None = None,
    *,
    pricing_store: IPricingStore | None = None,
    file_store: IFileStore | None = None,
    profile_service: IProfileService | None = None,
    crm: ICRMClient | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Collaborators passed in are used as-is; anything omitted is built from
    settings when the app starts.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Initialize and tear down application resources."""
        app_settings = settings or AppSettings()
        configure_logging(app_settings)
        app.state.settings = app_settings

        stores = create_persistence(app_settings) if file_store is None else (pricing_store, file_store)
        app.state.pricing_store = pricing_store if pricing_store is not None else stores[0]
        app.state.file_store = stores[1]

        owned = []
        profiles = profile_service
        if profiles is None:
            profiles = ProfileServiceClient(app_settings.profile)
            owned.append(profiles)
        crm_client = crm
        if crm_client is None and app_settings.crm.api_key:
            crm_client = HighLevelClient(app_settings.crm)
            owned.append(crm_client)

        app.state.intake = IntakeAgent(
            settings=app_settings, profile_service=profiles, file_store=app.state.file_store
        )
        app.state.sync = (
            SubmissionSync(crm_client, location_id=app_settings.crm.location_id)
            if crm_client is not None else None
        )
        logger.info(
            "app_started",
            environment=app_settings.environment,
            pricing_source=app_settings.pricing.source,
            crm_sync=app.state.sync is not None,
        )
        yield

        if app.state.sync is not None:
            await app.state.sync.drain()
        for client in owned:
            await client.aclose()

    app = FastAPI(
        title="Bulk Filing Intake & Pricing",
        version="0.1.0",
        lifespan=lifespan,
    )

    @app.exception_handler(InvalidFileError)
    async def invalid_file(request: Request, exc: InvalidFileError) -> JSONResponse:
        logger.warning("upload_rejected", filename=exc.filename, reason=exc.reason)
        return JSONResponse(
            status_code=422,
            content={"detail": exc.reason, "filename": exc.filename},
        )

    @app.exception_handler(ManualEntryError)
    async def incomplete_entry(request: Request, exc: ManualEntryError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": str(exc), "missing": exc.missing})

    app.include_router(health.router)
    app.include_router(intake.router, prefix="/intake")
    app.include_router(pricing.router, prefix="/pricing")
    app.include_router(orders.router, prefix="/orders")
    app.include_router(admin.router, prefix="/admin")
    return app
