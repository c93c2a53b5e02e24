"""
ingress_admission.api.routers.health

Health and readiness endpoints.

Responsibilities:
- Provide liveness probe (`/healthz`).
- Provide readiness probe (`/readyz`): the gate has its authorizer bound.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from starlette.status import HTTP_503_SERVICE_UNAVAILABLE

from ingress_admission.admission.errors import AuthorizerNotBound
from ingress_admission.admission.plugin import IngressAdmission
from ingress_admission.api.deps import gate_from_app

router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(gate: IngressAdmission = Depends(gate_from_app)) -> dict[str, str]:
    try:
        gate.validate_initialization()
    except AuthorizerNotBound as e:
        raise HTTPException(status_code=HTTP_503_SERVICE_UNAVAILABLE, detail=e.message) from e
    return {"status": "ready"}


# --- Module Notes -----------------------------------------------------------
# Kubernetes typically uses /healthz for liveness and /readyz for readiness gating.
