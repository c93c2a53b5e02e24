"""
ingress_admission.api.app

FastAPI app factory for the ingress admission webhook.

Responsibilities:
- Build the FastAPI application and register routers/middleware.
- Build the admission gate from settings and bind its authorizer once.
- Own the lifetime of the authorizer's HTTP client.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from ingress_admission import __version__
from ingress_admission.admission.config import admission_config_from_settings
from ingress_admission.admission.plugin import IngressAdmission
from ingress_admission.api.routers.admission import router as admission_router
from ingress_admission.api.routers.health import router as health_router
from ingress_admission.authorizer.base import Authorizer
from ingress_admission.authorizer.factory import build_authorizer, build_http_client
from ingress_admission.observability.logging import configure_logging, get_logger
from ingress_admission.observability.middleware import AdmissionContextMiddleware
from ingress_admission.settings import Settings

log = get_logger(__name__)


def create_app(*, settings: Settings, authorizer: Authorizer | None = None) -> FastAPI:
    configure_logging(
        service_name=settings.service_name, env=settings.env, level=settings.log_level
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        config = admission_config_from_settings(settings)
        gate = IngressAdmission(config)
        app.state.gate = gate

        http: httpx.AsyncClient | None = None
        bound = authorizer
        if bound is None:
            if settings.authorizer == "subjectaccessreview":
                http = build_http_client(settings)
            bound = build_authorizer(settings, http=http)
        gate.set_authorizer(bound)
        gate.validate_initialization()

        log.info(
            "startup",
            env=settings.env,
            configured=config is not None,
            allow_hostname_changes=gate.hostname_changes_allowed(),
            authorizer=type(bound).__name__,
        )
        try:
            yield
        finally:
            if http is not None:
                await http.aclose()
            log.info("shutdown")

    app = FastAPI(
        title="Ingress Hostname Admission",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(AdmissionContextMiddleware)
    app.include_router(health_router, tags=["health"])
    app.include_router(admission_router)

    return app


# --- Module Notes -----------------------------------------------------------
# This file is intentionally small: app composition stays here; the decision rule stays
# in `admission.plugin`.
