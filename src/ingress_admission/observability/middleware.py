"""
ingress_admission.observability.middleware

Request-scoped logging context for the webhook.

Responsibilities:
- Generate/propagate request IDs.
- Log one `webhook_request` line per admission call (status, latency); probes stay quiet.
- Bind AdmissionReview identity (uid, object, caller) for the decision log lines.
"""

from __future__ import annotations

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from ingress_admission.admission.models import AdmissionRequest
from ingress_admission.observability.logging import get_logger

log = get_logger(__name__)

PROBE_PATHS = frozenset({"/healthz", "/readyz"})


class AdmissionContextMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, *, quiet_paths: frozenset[str] = PROBE_PATHS) -> None:
        super().__init__(app)
        self._quiet_paths = quiet_paths

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            path=request.url.path,
            method=request.method,
        )
        started = time.perf_counter()
        try:
            response: Response = await call_next(request)
            if request.url.path not in self._quiet_paths:
                log.info(
                    "webhook_request",
                    status_code=response.status_code,
                    duration_ms=round((time.perf_counter() - started) * 1000, 2),
                )
        finally:
            # Avoid leaking context across requests under async concurrency.
            structlog.contextvars.clear_contextvars()

        response.headers["x-request-id"] = request_id
        return response


def bind_admission_context(request: AdmissionRequest) -> None:
    structlog.contextvars.bind_contextvars(
        admission_uid=request.uid,
        namespace=request.namespace,
        name=request.object_name,
        operation=request.operation.value,
        user=request.user_info.username,
        dry_run=request.dry_run,
    )
