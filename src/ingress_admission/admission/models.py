"""
ingress_admission.admission.models

Admission domain models.

Responsibilities:
- Describe one admission request (operation, resource identity, objects, caller).
- Provide the minimal ingress view the gate compares: a name and host-carrying rules.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


class Operation(str, enum.Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    CONNECT = "CONNECT"


@dataclass(frozen=True, slots=True)
class GroupVersionResource:
    group: str
    version: str
    resource: str

    def matches(self, other: GroupVersionResource) -> bool:
        # Version is irrelevant for admission; the stored object is the same.
        return self.group == other.group and self.resource == other.resource


@dataclass(frozen=True, slots=True)
class GroupVersionKind:
    group: str
    version: str
    kind: str


INGRESSES = GroupVersionResource(group="networking.k8s.io", version="v1", resource="ingresses")
LEGACY_INGRESSES = GroupVersionResource(group="extensions", version="v1beta1", resource="ingresses")


@dataclass(frozen=True, slots=True)
class UserInfo:
    """
    Caller identity as reported by the API server.
    """

    username: str
    uid: str = ""
    groups: frozenset[str] = field(default_factory=frozenset)
    extra: dict[str, tuple[str, ...]] = field(default_factory=dict, hash=False)


@dataclass(frozen=True, slots=True)
class IngressRule:
    host: str = ""


@dataclass(frozen=True, slots=True)
class IngressObject:
    name: str
    rules: tuple[IngressRule, ...] = ()

    @property
    def host(self) -> str:
        """
        Host bound to this ingress: the first rule's host, or "" when there are no rules.

        Hosts on later rules are not considered.
        """
        if not self.rules:
            return ""
        return self.rules[0].host

    @classmethod
    def from_manifest(cls, manifest: Mapping[str, Any]) -> IngressObject:
        metadata = _section(manifest, "metadata")
        spec = _section(manifest, "spec")
        raw_rules = spec.get("rules") or []
        if not isinstance(raw_rules, list):
            raise ValueError("ingress spec.rules must be a list")

        rules: list[IngressRule] = []
        for rule in raw_rules:
            if not isinstance(rule, Mapping):
                raise ValueError("ingress spec.rules entries must be objects")
            host = rule.get("host") or ""
            if not isinstance(host, str):
                raise ValueError("ingress rule host must be a string")
            rules.append(IngressRule(host=host))
        return cls(name=str(metadata.get("name") or ""), rules=tuple(rules))


def _section(manifest: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = manifest.get(key) or {}
    if not isinstance(value, Mapping):
        raise ValueError(f"ingress {key} must be an object")
    return value


@dataclass(frozen=True, slots=True)
class AdmissionRequest:
    """
    Immutable snapshot of one API operation, consumed once by the gate.
    """

    operation: Operation
    resource: GroupVersionResource
    user_info: UserInfo
    namespace: str = ""
    name: str = ""
    kind: GroupVersionKind | None = None
    obj: IngressObject | None = None
    old_obj: IngressObject | None = None
    uid: str = ""
    dry_run: bool = False

    @property
    def new_host(self) -> str:
        return self.obj.host if self.obj is not None else ""

    @property
    def old_host(self) -> str:
        return self.old_obj.host if self.old_obj is not None else ""

    @property
    def object_name(self) -> str:
        if self.name:
            return self.name
        if self.obj is not None:
            return self.obj.name
        return ""


# --- Module Notes -----------------------------------------------------------
# Only the fields the decision rule reads are modelled; the rest of the ingress spec
# (backends, TLS, paths) passes through the webhook untouched.
