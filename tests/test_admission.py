"""
tests.test_admission

Decision-rule tests for the ingress hostname admission gate.

Responsibilities:
- Cover every create/update/delete path, with the authorizer verdict stated per case.
- Assert when the authorizer is (and is not) consulted.
"""

from __future__ import annotations

import asyncio

import pytest

from ingress_admission.admission.config import AdmissionConfig
from ingress_admission.admission.errors import (
    AuthorizerFailure,
    AuthorizerNotBound,
    HostnameChangeForbidden,
)
from ingress_admission.admission.models import (
    INGRESSES,
    AdmissionRequest,
    GroupVersionResource,
    IngressObject,
    IngressRule,
    Operation,
    UserInfo,
)
from ingress_admission.admission.plugin import IngressAdmission
from ingress_admission.authorizer.static import StaticAuthorizer
from ingress_admission.authorizer.types import (
    AuthorizationAttributes,
    AuthorizationResult,
    Decision,
)


class RecordingAuthorizer:
    def __init__(self, decision: Decision = Decision.NO_OPINION, reason: str = "") -> None:
        self.decision = decision
        self.reason = reason
        self.calls: list[AuthorizationAttributes] = []

    async def authorize(self, attributes: AuthorizationAttributes) -> AuthorizationResult:
        self.calls.append(attributes)
        return AuthorizationResult(decision=self.decision, reason=self.reason)


class HangingAuthorizer:
    async def authorize(self, attributes: AuthorizationAttributes) -> AuthorizationResult:
        await asyncio.sleep(10)
        return AuthorizationResult(decision=Decision.ALLOW)


def _ingress(host: str) -> IngressObject:
    if not host:
        return IngressObject(name="test")
    return IngressObject(name="test", rules=(IngressRule(host=host),))


def _request(
    op: Operation,
    *,
    new_host: str = "",
    old_host: str = "",
    resource: GroupVersionResource = INGRESSES,
) -> AdmissionRequest:
    obj = None if op is Operation.DELETE else _ingress(new_host)
    old_obj = _ingress(old_host) if old_host else None
    return AdmissionRequest(
        operation=op,
        resource=resource,
        user_info=UserInfo(username="alice", uid="u-1", groups=frozenset({"dev"})),
        namespace="namespace",
        name="test",
        obj=obj,
        old_obj=old_obj,
    )


def _empty_config() -> AdmissionConfig:
    return AdmissionConfig()


def _allow_config() -> AdmissionConfig:
    return AdmissionConfig(allow_hostname_changes=True)


CASES = [
    # (name, config, op, old_host, new_host, authorizer verdict, admit)
    ("no errors on create", _empty_config(), Operation.CREATE, "", "", Decision.NO_OPINION, True),
    (
        "keeping the host the same passes",
        _empty_config(),
        Operation.UPDATE,
        "foo.com",
        "foo.com",
        Decision.NO_OPINION,
        True,
    ),
    (
        "removing a hostname passes when the authorizer allows",
        _empty_config(),
        Operation.UPDATE,
        "foo.com",
        "",
        Decision.ALLOW,
        True,
    ),
    (
        "removing a hostname is rejected without permission",
        _empty_config(),
        Operation.UPDATE,
        "foo.com",
        "",
        Decision.NO_OPINION,
        False,
    ),
    (
        "changing hostname fails with no opinion",
        _empty_config(),
        Operation.UPDATE,
        "bar.com",
        "foo.com",
        Decision.NO_OPINION,
        False,
    ),
    (
        "changing hostname fails when denied",
        _empty_config(),
        Operation.UPDATE,
        "bar.com",
        "foo.com",
        Decision.DENY,
        False,
    ),
    (
        "changing hostname succeeds if the user has permission",
        _empty_config(),
        Operation.UPDATE,
        "bar.com",
        "foo.com",
        Decision.ALLOW,
        True,
    ),
    (
        "unconfigured plugin still fails",
        None,
        Operation.UPDATE,
        "bar.com",
        "foo.com",
        Decision.NO_OPINION,
        False,
    ),
    (
        "unconfigured plugin defers to the authorizer",
        None,
        Operation.UPDATE,
        "bar.com",
        "foo.com",
        Decision.ALLOW,
        True,
    ),
    (
        "hostname updates enabled by config",
        _allow_config(),
        Operation.UPDATE,
        "bar.com",
        "foo.com",
        Decision.DENY,
        True,
    ),
    (
        "adding a hostname with updates enabled",
        _allow_config(),
        Operation.UPDATE,
        "",
        "foo.com",
        Decision.DENY,
        True,
    ),
    (
        "explicitly disabled config behaves like empty config",
        AdmissionConfig(allow_hostname_changes=False),
        Operation.UPDATE,
        "bar.com",
        "foo.com",
        Decision.NO_OPINION,
        False,
    ),
    (
        "setting the host requires permission",
        _empty_config(),
        Operation.CREATE,
        "",
        "foo.com",
        Decision.NO_OPINION,
        False,
    ),
    (
        "setting the host passes if the user has permission",
        _empty_config(),
        Operation.CREATE,
        "",
        "foo.com",
        Decision.ALLOW,
        True,
    ),
    ("delete always passes", None, Operation.DELETE, "foo.com", "", Decision.DENY, True),
    ("connect always passes", None, Operation.CONNECT, "foo.com", "bar.com", Decision.DENY, True),
]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "config,op,old_host,new_host,verdict,admit",
    [c[1:] for c in CASES],
    ids=[c[0] for c in CASES],
)
async def test_admission(config, op, old_host, new_host, verdict, admit) -> None:
    gate = IngressAdmission(config)
    gate.set_authorizer(StaticAuthorizer(verdict))

    req = _request(op, old_host=old_host, new_host=new_host)
    if admit:
        await gate.admit(req)
    else:
        with pytest.raises(HostnameChangeForbidden):
            await gate.admit(req)


@pytest.mark.asyncio
@pytest.mark.parametrize("config", [None, AdmissionConfig(), AdmissionConfig(allow_hostname_changes=True)])
@pytest.mark.parametrize("host", ["", "foo.com"])
async def test_unchanged_host_never_consults_authorizer(config, host) -> None:
    authz = RecordingAuthorizer(Decision.DENY)
    gate = IngressAdmission(config)
    gate.set_authorizer(authz)

    await gate.admit(_request(Operation.UPDATE, old_host=host, new_host=host))
    assert authz.calls == []


@pytest.mark.asyncio
async def test_preapproved_change_skips_authorizer() -> None:
    authz = RecordingAuthorizer(Decision.DENY)
    gate = IngressAdmission(AdmissionConfig(allow_hostname_changes=True))
    gate.set_authorizer(authz)

    await gate.admit(_request(Operation.UPDATE, old_host="bar.com", new_host="foo.com"))
    await gate.admit(_request(Operation.CREATE, new_host="foo.com"))
    assert authz.calls == []


@pytest.mark.asyncio
async def test_change_consults_authorizer_once_with_host_permission() -> None:
    authz = RecordingAuthorizer(Decision.ALLOW)
    gate = IngressAdmission(None)
    gate.set_authorizer(authz)

    await gate.admit(_request(Operation.UPDATE, old_host="bar.com", new_host="foo.com"))

    assert len(authz.calls) == 1
    attrs = authz.calls[0]
    assert attrs.user == "alice"
    assert attrs.uid == "u-1"
    assert attrs.groups == frozenset({"dev"})
    assert attrs.verb == "update"
    assert attrs.namespace == "namespace"
    assert attrs.name == "test"
    assert attrs.api_group == "route.openshift.io"
    assert attrs.resource == "routes"
    assert attrs.subresource == "custom-host"


@pytest.mark.asyncio
async def test_create_uses_create_verb() -> None:
    authz = RecordingAuthorizer(Decision.ALLOW)
    gate = IngressAdmission(AdmissionConfig())
    gate.set_authorizer(authz)

    await gate.admit(_request(Operation.CREATE, new_host="foo.com"))
    assert [a.verb for a in authz.calls] == ["create"]


@pytest.mark.asyncio
async def test_rejection_message_names_change_and_verdict() -> None:
    gate = IngressAdmission(AdmissionConfig())
    gate.set_authorizer(RecordingAuthorizer(Decision.DENY, reason="rbac says no"))

    with pytest.raises(HostnameChangeForbidden) as exc:
        await gate.admit(_request(Operation.UPDATE, old_host="bar.com", new_host="foo.com"))

    err = exc.value
    assert err.old_host == "bar.com"
    assert err.new_host == "foo.com"
    assert err.decision is Decision.DENY
    assert err.code == 403
    assert "'bar.com'" in err.message and "'foo.com'" in err.message
    assert "denied" in err.message
    assert "rbac says no" in err.message


@pytest.mark.asyncio
async def test_no_opinion_message_differs_from_deny() -> None:
    deny_gate = IngressAdmission(AdmissionConfig())
    deny_gate.set_authorizer(StaticAuthorizer(Decision.DENY))
    none_gate = IngressAdmission(AdmissionConfig())
    none_gate.set_authorizer(StaticAuthorizer(Decision.NO_OPINION))
    req = _request(Operation.CREATE, new_host="foo.com")

    with pytest.raises(HostnameChangeForbidden) as denied:
        await deny_gate.admit(req)
    with pytest.raises(HostnameChangeForbidden) as deferred:
        await none_gate.admit(req)

    assert denied.value.message != deferred.value.message
    assert "no authorizer allowed" in deferred.value.message
    assert "set host 'foo.com'" in deferred.value.message


@pytest.mark.asyncio
async def test_authorizer_error_fails_closed() -> None:
    boom = RuntimeError("policy engine unreachable")
    gate = IngressAdmission(AdmissionConfig())
    gate.set_authorizer(StaticAuthorizer(Decision.ALLOW, error=boom))

    with pytest.raises(AuthorizerFailure) as exc:
        await gate.admit(_request(Operation.UPDATE, old_host="bar.com", new_host="foo.com"))

    assert exc.value.__cause__ is boom
    assert "policy engine unreachable" in exc.value.message


@pytest.mark.asyncio
async def test_authorizer_error_not_reached_when_host_unchanged() -> None:
    gate = IngressAdmission(None)
    gate.set_authorizer(StaticAuthorizer(error=RuntimeError("unreachable")))

    await gate.admit(_request(Operation.UPDATE, old_host="foo.com", new_host="foo.com"))


@pytest.mark.asyncio
async def test_missing_authorizer_fails_closed_on_change() -> None:
    gate = IngressAdmission(None)

    await gate.admit(_request(Operation.CREATE))
    with pytest.raises(AuthorizerFailure):
        await gate.admit(_request(Operation.CREATE, new_host="foo.com"))


@pytest.mark.asyncio
async def test_caller_timeout_propagates_through_authorizer() -> None:
    gate = IngressAdmission(None)
    gate.set_authorizer(HangingAuthorizer())

    with pytest.raises(asyncio.TimeoutError):
        await asyncio.wait_for(
            gate.admit(_request(Operation.UPDATE, old_host="bar.com", new_host="foo.com")),
            timeout=0.01,
        )


@pytest.mark.asyncio
async def test_admit_is_idempotent() -> None:
    authz = RecordingAuthorizer(Decision.NO_OPINION)
    gate = IngressAdmission(AdmissionConfig())
    gate.set_authorizer(authz)
    req = _request(Operation.UPDATE, old_host="bar.com", new_host="foo.com")

    messages = []
    for _ in range(2):
        with pytest.raises(HostnameChangeForbidden) as exc:
            await gate.admit(req)
        messages.append(exc.value.message)

    assert messages[0] == messages[1]
    assert len(authz.calls) == 2


@pytest.mark.asyncio
async def test_concurrent_admits_are_independent() -> None:
    authz = RecordingAuthorizer(Decision.ALLOW)
    gate = IngressAdmission(None)
    gate.set_authorizer(authz)

    reqs = [
        _request(Operation.UPDATE, old_host="a.com", new_host=f"{i}.example.com") for i in range(20)
    ]
    await asyncio.gather(*(gate.admit(r) for r in reqs))
    assert len(authz.calls) == 20


@pytest.mark.asyncio
async def test_other_resources_pass_through() -> None:
    authz = RecordingAuthorizer(Decision.DENY)
    gate = IngressAdmission(None)
    gate.set_authorizer(authz)
    routes = GroupVersionResource(group="route.openshift.io", version="v1", resource="routes")

    await gate.admit(
        _request(Operation.UPDATE, old_host="bar.com", new_host="foo.com", resource=routes)
    )
    assert authz.calls == []


@pytest.mark.asyncio
async def test_only_first_rule_host_is_compared() -> None:
    authz = RecordingAuthorizer(Decision.DENY)
    gate = IngressAdmission(None)
    gate.set_authorizer(authz)
    old = IngressObject(name="test", rules=(IngressRule("foo.com"), IngressRule("a.com")))
    new = IngressObject(name="test", rules=(IngressRule("foo.com"), IngressRule("b.com")))
    req = AdmissionRequest(
        operation=Operation.UPDATE,
        resource=INGRESSES,
        user_info=UserInfo(username="alice"),
        obj=new,
        old_obj=old,
    )

    await gate.admit(req)
    assert authz.calls == []


def test_handles_create_and_update_on_ingresses() -> None:
    gate = IngressAdmission(None)
    legacy = GroupVersionResource(group="extensions", version="v1beta1", resource="ingresses")

    assert gate.handles(_request(Operation.CREATE))
    assert gate.handles(_request(Operation.UPDATE, resource=legacy))
    assert not gate.handles(_request(Operation.DELETE))
    assert not gate.handles(_request(Operation.CONNECT))


def test_authorizer_binds_once() -> None:
    gate = IngressAdmission(None)
    with pytest.raises(AuthorizerNotBound):
        gate.validate_initialization()

    first = StaticAuthorizer()
    gate.set_authorizer(first)
    gate.validate_initialization()

    with pytest.raises(RuntimeError):
        gate.set_authorizer(StaticAuthorizer(Decision.ALLOW))
    assert gate.authorizer is first


def test_unconfigured_plugin_is_strictest() -> None:
    assert IngressAdmission(None).hostname_changes_allowed() is False
    assert IngressAdmission(AdmissionConfig()).hostname_changes_allowed() is False
    assert IngressAdmission(_allow_config()).hostname_changes_allowed() is True


# --- Module Notes -----------------------------------------------------------
# Every case states the authorizer verdict it runs with; none relies on a default answer.
