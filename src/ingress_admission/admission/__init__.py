"""
ingress_admission.admission

Admission gate package.

Responsibilities:
- Request/object models consumed by the gate.
- Static admission configuration.
- The hostname-change decision rule and its error types.
"""

from ingress_admission.admission.config import AdmissionConfig
from ingress_admission.admission.errors import (
    AdmissionError,
    AuthorizerFailure,
    AuthorizerNotBound,
    HostnameChangeForbidden,
)
from ingress_admission.admission.models import (
    AdmissionRequest,
    IngressObject,
    IngressRule,
    Operation,
    UserInfo,
)
from ingress_admission.admission.plugin import IngressAdmission

__all__ = [
    "AdmissionConfig",
    "AdmissionError",
    "AdmissionRequest",
    "AuthorizerFailure",
    "AuthorizerNotBound",
    "HostnameChangeForbidden",
    "IngressAdmission",
    "IngressObject",
    "IngressRule",
    "Operation",
    "UserInfo",
]
