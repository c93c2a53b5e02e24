"""
ingress_admission.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Encapsulate app.state access patterns (the admission gate).
"""

from __future__ import annotations

from fastapi import Request

from ingress_admission.admission.plugin import IngressAdmission


def gate_from_app(request: Request) -> IngressAdmission:
    # The gate is created on app startup in `ingress_admission.api.app.create_app`.
    return request.app.state.gate  # type: ignore[attr-defined]
