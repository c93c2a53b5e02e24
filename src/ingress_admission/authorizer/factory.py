"""
ingress_admission.authorizer.factory

Builds the configured authorizer from settings.
"""

from __future__ import annotations

import ssl

import httpx

from ingress_admission.authorizer.base import Authorizer
from ingress_admission.authorizer.groups import GroupAuthorizer
from ingress_admission.authorizer.static import StaticAuthorizer
from ingress_admission.authorizer.subject_access_review import SubjectAccessReviewAuthorizer
from ingress_admission.settings import Settings


def build_http_client(settings: Settings) -> httpx.AsyncClient:
    verify: ssl.SSLContext | bool = True
    if settings.authorizer_ca_file:
        verify = ssl.create_default_context(cafile=settings.authorizer_ca_file)
    return httpx.AsyncClient(
        base_url=settings.authorizer_url,
        verify=verify,
        timeout=settings.authorizer_timeout_seconds,
    )


def build_authorizer(settings: Settings, *, http: httpx.AsyncClient | None = None) -> Authorizer:
    if settings.authorizer == "groups":
        return GroupAuthorizer(settings.privileged_groups)
    if settings.authorizer == "subjectaccessreview":
        if http is None:
            raise ValueError("subjectaccessreview authorizer requires an HTTP client")
        return SubjectAccessReviewAuthorizer(http=http, token=settings.authorizer_token)
    return StaticAuthorizer()
