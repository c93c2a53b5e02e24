"""
ingress_admission.authorizer.subject_access_review

Authorizer backed by the Kubernetes SubjectAccessReview API.

Responsibilities:
- Translate `AuthorizationAttributes` into an `authorization.k8s.io/v1` SubjectAccessReview.
- Map the review status onto the tri-state `Decision`.
- Surface transport/protocol failures as `AuthorizerUnavailable`.
"""

from __future__ import annotations

from typing import Any

import httpx

from ingress_admission.authorizer.types import (
    AuthorizationAttributes,
    AuthorizationResult,
    AuthorizerUnavailable,
    Decision,
)

SUBJECT_ACCESS_REVIEW_PATH = "/apis/authorization.k8s.io/v1/subjectaccessreviews"


def build_review(attributes: AuthorizationAttributes) -> dict[str, Any]:
    resource_attributes: dict[str, str] = {
        "verb": attributes.verb,
        "group": attributes.api_group,
        "resource": attributes.resource,
    }
    # Empty strings are wildcards on the API side; only send what is set.
    if attributes.namespace:
        resource_attributes["namespace"] = attributes.namespace
    if attributes.subresource:
        resource_attributes["subresource"] = attributes.subresource
    if attributes.name:
        resource_attributes["name"] = attributes.name

    spec: dict[str, Any] = {
        "resourceAttributes": resource_attributes,
        "user": attributes.user,
        "groups": sorted(attributes.groups),
    }
    if attributes.uid:
        spec["uid"] = attributes.uid
    if attributes.extra:
        spec["extra"] = {k: list(v) for k, v in attributes.extra.items()}

    return {
        "apiVersion": "authorization.k8s.io/v1",
        "kind": "SubjectAccessReview",
        "spec": spec,
    }


def parse_review_status(payload: dict[str, Any]) -> AuthorizationResult:
    status = payload.get("status")
    if not isinstance(status, dict):
        raise AuthorizerUnavailable("SubjectAccessReview response has no status")

    reason = str(status.get("reason") or "")
    evaluation_error = str(status.get("evaluationError") or "")
    if evaluation_error:
        reason = f"{reason} (evaluation error: {evaluation_error})" if reason else evaluation_error

    if status.get("allowed") is True:
        return AuthorizationResult(decision=Decision.ALLOW, reason=reason)
    if status.get("denied") is True:
        return AuthorizationResult(decision=Decision.DENY, reason=reason)
    return AuthorizationResult(decision=Decision.NO_OPINION, reason=reason)


class SubjectAccessReviewAuthorizer:
    """
    Delegates the decision to the cluster's authorizer chain.

    The HTTP client is owned by the caller (base_url, TLS and timeouts configured there);
    this class never retries.
    """

    def __init__(self, *, http: httpx.AsyncClient, token: str | None = None) -> None:
        self._http = http
        self._token = token

    def _headers(self) -> dict[str, str]:
        if not self._token:
            return {}
        return {"Authorization": f"Bearer {self._token}"}

    async def authorize(self, attributes: AuthorizationAttributes) -> AuthorizationResult:
        try:
            r = await self._http.post(
                SUBJECT_ACCESS_REVIEW_PATH,
                headers=self._headers(),
                json=build_review(attributes),
            )
            r.raise_for_status()
            payload = r.json()
        except httpx.HTTPStatusError as e:
            raise AuthorizerUnavailable(
                f"SubjectAccessReview returned HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise AuthorizerUnavailable(f"SubjectAccessReview request failed: {e}") from e
        except ValueError as e:
            raise AuthorizerUnavailable("SubjectAccessReview response is not JSON") from e

        if not isinstance(payload, dict):
            raise AuthorizerUnavailable("SubjectAccessReview response is not an object")
        return parse_review_status(payload)


# --- Module Notes -----------------------------------------------------------
# In-cluster, the token is the service account token and the CA is the cluster CA bundle;
# see `authorizer.factory.build_http_client`.
