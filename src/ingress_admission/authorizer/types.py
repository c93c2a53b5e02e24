"""
ingress_admission.authorizer.types

Value types exchanged with an authorizer.

Responsibilities:
- Tri-state `Decision` and the per-call `AuthorizationResult`.
- `AuthorizationAttributes` describing who wants to do what to which resource.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field


class Decision(str, enum.Enum):
    ALLOW = "Allow"
    DENY = "Deny"
    NO_OPINION = "NoOpinion"


@dataclass(frozen=True, slots=True)
class AuthorizationResult:
    decision: Decision
    reason: str = ""

    @property
    def allowed(self) -> bool:
        return self.decision is Decision.ALLOW


@dataclass(frozen=True, slots=True)
class AuthorizationAttributes:
    """
    Request attributes in the shape of a Kubernetes `ResourceAttributes` check.
    """

    user: str
    verb: str
    resource: str
    groups: frozenset[str] = field(default_factory=frozenset)
    uid: str = ""
    namespace: str = ""
    name: str = ""
    api_group: str = ""
    subresource: str = ""
    extra: dict[str, tuple[str, ...]] = field(default_factory=dict, hash=False)


class AuthorizerUnavailable(Exception):
    """The authorizer could not produce a decision (transport or protocol failure)."""
