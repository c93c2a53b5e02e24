"""
ingress_admission.admission.errors

Rejection types raised by the admission gate.

Responsibilities:
- Carry a human-readable message plus the HTTP-style code/reason the webhook reports.
- Distinguish policy denials from authorizer failures.
"""

from __future__ import annotations

from ingress_admission.authorizer.types import Decision


class AdmissionError(Exception):
    code: int = 403
    reason: str = "Forbidden"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class HostnameChangeForbidden(AdmissionError):
    """The authorizer denied, or did not allow, a hostname change."""

    def __init__(
        self,
        *,
        old_host: str,
        new_host: str,
        decision: Decision,
        authorizer_reason: str = "",
    ) -> None:
        self.old_host = old_host
        self.new_host = new_host
        self.decision = decision
        self.authorizer_reason = authorizer_reason
        super().__init__(self._render())

    def _render(self) -> str:
        if not self.old_host:
            change = f"set host {self.new_host!r}"
        elif not self.new_host:
            change = f"remove host {self.old_host!r}"
        else:
            change = f"change host from {self.old_host!r} to {self.new_host!r}"

        if self.decision is Decision.DENY:
            outcome = "permission denied by authorizer"
        else:
            outcome = "no authorizer allowed the change"
        msg = f"cannot {change} on this ingress: {outcome}"
        if self.authorizer_reason:
            msg = f"{msg}: {self.authorizer_reason}"
        return msg


class AuthorizerFailure(AdmissionError):
    """The authorizer could not be consulted; the request is rejected (fail closed)."""

    code = 500
    reason = "InternalError"


class AuthorizerNotBound(AdmissionError):
    """The plugin was used before an authorizer was bound."""

    code = 500
    reason = "InternalError"

    def __init__(self, message: str = "ingress admission plugin has no authorizer bound") -> None:
        super().__init__(message)
