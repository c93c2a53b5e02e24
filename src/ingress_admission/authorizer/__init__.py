"""
ingress_admission.authorizer

Authorizer port and concrete adapters.

Responsibilities:
- Define the `Authorizer` capability the admission gate consumes.
- Provide static, group-based and SubjectAccessReview-backed implementations.
"""

from ingress_admission.authorizer.base import Authorizer
from ingress_admission.authorizer.types import (
    AuthorizationAttributes,
    AuthorizationResult,
    AuthorizerUnavailable,
    Decision,
)

__all__ = [
    "AuthorizationAttributes",
    "AuthorizationResult",
    "Authorizer",
    "AuthorizerUnavailable",
    "Decision",
]
