"""
ingress_admission.api.schemas

`admission.k8s.io/v1` AdmissionReview wire models.

Responsibilities:
- Validate the subset of an AdmissionReview the gate needs.
- Convert the review into the gate's `AdmissionRequest`.
- Build the review response.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from ingress_admission.admission.errors import AdmissionError
from ingress_admission.admission.models import (
    AdmissionRequest,
    GroupVersionKind,
    GroupVersionResource,
    IngressObject,
    IngressRule,
    Operation,
    UserInfo,
)


class _Wire(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class GroupVersionKindIn(_Wire):
    group: str = ""
    version: str = ""
    kind: str = ""


class GroupVersionResourceIn(_Wire):
    group: str = ""
    version: str = ""
    resource: str = ""


class UserInfoIn(_Wire):
    username: str = ""
    uid: str = ""
    groups: list[str] = Field(default_factory=list)
    extra: dict[str, list[str]] = Field(default_factory=dict)


class ObjectMetaIn(_Wire):
    name: str | None = None
    namespace: str | None = None


class IngressRuleIn(_Wire):
    host: str | None = None


class IngressSpecIn(_Wire):
    rules: list[IngressRuleIn] | None = None


class IngressManifestIn(_Wire):
    """
    The slice of an ingress the gate reads. Wrong shapes fail validation (HTTP 422).
    """

    metadata: ObjectMetaIn | None = None
    spec: IngressSpecIn | None = None

    def to_domain(self) -> IngressObject:
        name = self.metadata.name if self.metadata is not None else None
        rules = self.spec.rules if self.spec is not None else None
        return IngressObject(
            name=name or "",
            rules=tuple(IngressRule(host=r.host or "") for r in (rules or [])),
        )


class AdmissionRequestIn(_Wire):
    uid: str
    kind: GroupVersionKindIn = Field(default_factory=GroupVersionKindIn)
    resource: GroupVersionResourceIn
    name: str = ""
    namespace: str = ""
    operation: Operation
    user_info: UserInfoIn = Field(default_factory=UserInfoIn, alias="userInfo")
    obj: IngressManifestIn | None = Field(default=None, alias="object")
    old_object: IngressManifestIn | None = Field(default=None, alias="oldObject")
    dry_run: bool = Field(default=False, alias="dryRun")

    def to_domain(self) -> AdmissionRequest:
        user = self.user_info
        return AdmissionRequest(
            operation=self.operation,
            resource=GroupVersionResource(
                group=self.resource.group,
                version=self.resource.version,
                resource=self.resource.resource,
            ),
            kind=GroupVersionKind(
                group=self.kind.group, version=self.kind.version, kind=self.kind.kind
            ),
            user_info=UserInfo(
                username=user.username,
                uid=user.uid,
                groups=frozenset(user.groups),
                extra={k: tuple(v) for k, v in user.extra.items()},
            ),
            namespace=self.namespace,
            name=self.name,
            obj=self.obj.to_domain() if self.obj is not None else None,
            old_obj=self.old_object.to_domain() if self.old_object is not None else None,
            uid=self.uid,
            dry_run=self.dry_run,
        )


class StatusOut(_Wire):
    code: int
    reason: str
    message: str


class AdmissionResponseOut(_Wire):
    uid: str
    allowed: bool
    status: StatusOut | None = None


class AdmissionReview(_Wire):
    api_version: str = Field(default="admission.k8s.io/v1", alias="apiVersion")
    kind: str = "AdmissionReview"
    request: AdmissionRequestIn | None = None
    response: AdmissionResponseOut | None = None


def review_response(*, api_version: str, uid: str, error: AdmissionError | None) -> AdmissionReview:
    status = None
    if error is not None:
        status = StatusOut(code=error.code, reason=error.reason, message=error.message)
    return AdmissionReview(
        api_version=api_version,
        response=AdmissionResponseOut(uid=uid, allowed=error is None, status=status),
    )
