"""
ingress_admission.admission.plugin

The ingress hostname admission gate.

Responsibilities:
- Detect a hostname being set, changed or removed on an ingress.
- Let the change through when policy pre-approves it; otherwise ask the authorizer once.
- Reject (raise) on deny, no-opinion, or authorizer failure.
"""

from __future__ import annotations

from ingress_admission.admission.config import AdmissionConfig
from ingress_admission.admission.errors import (
    AuthorizerFailure,
    AuthorizerNotBound,
    HostnameChangeForbidden,
)
from ingress_admission.admission.models import (
    INGRESSES,
    LEGACY_INGRESSES,
    AdmissionRequest,
    GroupVersionResource,
    Operation,
)
from ingress_admission.authorizer.base import Authorizer
from ingress_admission.authorizer.types import AuthorizationAttributes
from ingress_admission.observability.logging import get_logger

log = get_logger(__name__)

# The "set ingress host" permission: the same check the cluster applies to custom route hosts.
HOST_PERMISSION_GROUP = "route.openshift.io"
HOST_PERMISSION_RESOURCE = "routes"
HOST_PERMISSION_SUBRESOURCE = "custom-host"

_VERBS = {Operation.CREATE: "create", Operation.UPDATE: "update"}


class IngressAdmission:
    """
    Two-phase setup: construct with the (optional) config, then bind the authorizer once.

    The instance is read-only afterwards and safe to share across concurrent requests.
    """

    def __init__(
        self,
        config: AdmissionConfig | None,
        *,
        resources: tuple[GroupVersionResource, ...] = (INGRESSES, LEGACY_INGRESSES),
    ) -> None:
        self._config = config
        self._resources = resources
        self._authorizer: Authorizer | None = None

    @property
    def config(self) -> AdmissionConfig | None:
        return self._config

    @property
    def authorizer(self) -> Authorizer | None:
        return self._authorizer

    def set_authorizer(self, authorizer: Authorizer) -> None:
        if self._authorizer is not None:
            raise RuntimeError("authorizer is already bound to this admission plugin")
        self._authorizer = authorizer

    def validate_initialization(self) -> None:
        if self._authorizer is None:
            raise AuthorizerNotBound()

    def handles(self, request: AdmissionRequest) -> bool:
        if request.operation not in _VERBS:
            return False
        return any(request.resource.matches(r) for r in self._resources)

    def hostname_changes_allowed(self) -> bool:
        # An unconfigured plugin is the strictest policy, never an implicit allow.
        if self._config is None:
            return False
        return self._config.allow_hostname_changes

    async def admit(self, request: AdmissionRequest) -> None:
        if not self.handles(request):
            return

        new_host = request.new_host
        if request.operation is Operation.CREATE:
            old_host = ""
        else:
            old_host = request.old_host

        if old_host == new_host:
            return

        bound = dict(
            namespace=request.namespace,
            name=request.object_name,
            operation=request.operation.value,
            old_host=old_host,
            new_host=new_host,
            user=request.user_info.username,
        )
        log.info("hostname_change_detected", **bound)

        if self.hostname_changes_allowed():
            log.info("hostname_change_preapproved", **bound)
            return

        if self._authorizer is None:
            log.error("authorizer_failed", error="no authorizer bound", **bound)
            raise AuthorizerFailure(
                "cannot authorize ingress host change: no authorizer is bound to the plugin"
            )

        attributes = self.authorization_attributes(request)
        try:
            result = await self._authorizer.authorize(attributes)
        except Exception as e:
            log.warning("authorizer_failed", error=str(e), **bound)
            raise AuthorizerFailure(f"cannot authorize ingress host change: {e}") from e

        if result.allowed:
            log.info("hostname_change_authorized", reason=result.reason, **bound)
            return

        log.info(
            "hostname_change_rejected",
            decision=result.decision.value,
            reason=result.reason,
            **bound,
        )
        raise HostnameChangeForbidden(
            old_host=old_host,
            new_host=new_host,
            decision=result.decision,
            authorizer_reason=result.reason,
        )

    @staticmethod
    def authorization_attributes(request: AdmissionRequest) -> AuthorizationAttributes:
        user = request.user_info
        return AuthorizationAttributes(
            user=user.username,
            groups=user.groups,
            uid=user.uid,
            extra=user.extra,
            verb=_VERBS[request.operation],
            namespace=request.namespace,
            name=request.object_name,
            api_group=HOST_PERMISSION_GROUP,
            resource=HOST_PERMISSION_RESOURCE,
            subresource=HOST_PERMISSION_SUBRESOURCE,
        )


# --- Module Notes -----------------------------------------------------------
# No retries and no caching: every gated request produces exactly one authorize call.
# asyncio.CancelledError is a BaseException and passes through the `except Exception`
# above, so caller timeouts reach the authorizer await untouched.
