"""FastAPI application exposing the campus form engine.

The presentation layer creates form instances, forwards field edits and
submit actions, and renders the returned snapshots.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from campusforms.core.config import Settings
from campusforms.forms.catalog import FormCatalog
from campusforms.forms.store import FormInstanceStore
from campusforms.submission.gateway import SubmissionGateway
from campusforms.submission.mail import MailSender, MockMailSender
from campusforms.web.forms_router import router as forms_router


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    service: str
    version: str = "0.1.0"


def create_app(
    settings: Settings | None = None,
    gateway: SubmissionGateway | None = None,
    mail_sender: MailSender | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Uses the factory pattern so tests can create isolated app instances
    with mock dependencies.

    Args:
        settings: Application settings. Defaults to Settings().
        gateway: Optional pre-built SubmissionGateway.
        mail_sender: Optional mail collaborator. Defaults to MockMailSender.

    Returns:
        A configured FastAPI instance.
    """
    if settings is None:
        settings = Settings()

    logging.getLogger("campusforms").setLevel(settings.log_level.upper())

    catalog = FormCatalog.from_config(settings.forms)
    if gateway is None:
        gateway = SubmissionGateway(catalog, config=settings.gateway)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await gateway.close()

    app = FastAPI(
        title="Campus Forms",
        description="Validation and submission engine for campus forms",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
    )

    # CORS for development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.settings = settings
    app.state.form_catalog = catalog
    app.state.form_store = FormInstanceStore()
    app.state.submission_gateway = gateway
    app.state.mail_sender = mail_sender or MockMailSender()

    app.include_router(forms_router)

    @app.get("/health")
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", service="campusforms")

    return app
