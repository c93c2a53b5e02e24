from __future__ import annotations

from ingress_admission.authorizer.types import (
    AuthorizationAttributes,
    AuthorizationResult,
    Decision,
)


class StaticAuthorizer:
    """
    Returns the same decision for every request, or raises a fixed error.

    With the default NoOpinion answer this is the "deny everything" deployment mode.
    """

    def __init__(
        self,
        decision: Decision = Decision.NO_OPINION,
        reason: str = "",
        *,
        error: Exception | None = None,
    ) -> None:
        self._decision = decision
        self._reason = reason
        self._error = error

    async def authorize(self, attributes: AuthorizationAttributes) -> AuthorizationResult:
        if self._error is not None:
            raise self._error
        return AuthorizationResult(decision=self._decision, reason=self._reason)
