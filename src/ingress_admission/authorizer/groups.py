"""
ingress_admission.authorizer.groups

Group-membership authorizer.

Responsibilities:
- Allow callers that belong to any configured privileged group.
- Express no opinion otherwise, so the gate falls back to rejection.
"""

from __future__ import annotations

from collections.abc import Iterable

from ingress_admission.authorizer.types import (
    AuthorizationAttributes,
    AuthorizationResult,
    Decision,
)


class GroupAuthorizer:
    def __init__(self, groups: Iterable[str]) -> None:
        self._groups: frozenset[str] = frozenset(g.strip() for g in groups if g.strip())

    @property
    def groups(self) -> frozenset[str]:
        return self._groups

    async def authorize(self, attributes: AuthorizationAttributes) -> AuthorizationResult:
        matched = sorted(self._groups & attributes.groups)
        if matched:
            return AuthorizationResult(
                decision=Decision.ALLOW,
                reason=f"user {attributes.user!r} is a member of {', '.join(matched)}",
            )
        return AuthorizationResult(
            decision=Decision.NO_OPINION,
            reason=f"user {attributes.user!r} is not in a group allowed to {attributes.verb} "
            f"{attributes.resource}/{attributes.subresource}",
        )


# --- Module Notes -----------------------------------------------------------
# Mirrors role-set checks on an authenticated principal; intended for clusters without
# an RBAC rule for the custom-host subresource.
