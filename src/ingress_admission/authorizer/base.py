"""
ingress_admission.authorizer.base

The authorizer capability consumed by the admission gate.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ingress_admission.authorizer.types import AuthorizationAttributes, AuthorizationResult


@runtime_checkable
class Authorizer(Protocol):
    """
    Opaque policy oracle.

    Implementations must be safe to call concurrently and must not mutate global state.
    Failures are raised; the gate treats any exception as a rejection.
    """

    async def authorize(self, attributes: AuthorizationAttributes) -> AuthorizationResult: ...
