"""Unit tests for the RBACRule validator."""

import pytest

from fakes import (
    CONTRIBUTOR_ID,
    OTHER_SUBSCRIPTION_ID,
    OWNER_ID,
    PRINCIPAL_ID,
    READER_ID,
    SUBSCRIPTION_ID,
    FakeAuthorizationAPI,
    make_grant,
)
from rbac_validator.errors import (
    AuthorizationAPIError,
    MalformedGrantError,
    MissingRoleIdentifier,
    ScopeParseError,
    UnknownRoleName,
)
from rbac_validator.models import PermissionSet, RBACRule, Role, ValidationState
from rbac_validator.resolver import StaticRoleLookupProvider
from rbac_validator.results import MESSAGE_MISSING_ROLES
from rbac_validator.validators import RBACRuleService

SUB_SCOPE = f"/subscriptions/{SUBSCRIPTION_ID}"
RG_SCOPE = f"/subscriptions/{SUBSCRIPTION_ID}/resourceGroups/rg-app"
OTHER_SCOPE = f"/subscriptions/{OTHER_SUBSCRIPTION_ID}/resourceGroups/rg-data"


def make_rule(*sets: tuple[str, Role]) -> RBACRule:
    return RBACRule(
        principal_id=PRINCIPAL_ID,
        permissions=[PermissionSet(scope=scope, role=role) for scope, role in sets],
    )


@pytest.fixture
def scope_grants():
    """Grants per scope; the RG scope also sees the subscription grant."""
    return {
        SUB_SCOPE: [make_grant(READER_ID)],
        RG_SCOPE: [make_grant(READER_ID), make_grant(CONTRIBUTOR_ID)],
        OTHER_SCOPE: [make_grant(OWNER_ID, OTHER_SUBSCRIPTION_ID)],
    }


@pytest.fixture
def api(scope_grants):
    return FakeAuthorizationAPI(scope_grants=scope_grants)


@pytest.fixture
def service(api, lookup_provider):
    return RBACRuleService(api, lookup_provider)


class TestRBACRuleSuccess:
    """Rules whose permission sets are all satisfied."""

    @pytest.mark.asyncio
    async def test_all_sets_satisfied(self, service, api):
        """Every set satisfied means success."""
        result = await service.reconcile(make_rule(
            (SUB_SCOPE, Role(role_name="Reader")),
            (RG_SCOPE, Role(name=CONTRIBUTOR_ID)),
        ))

        assert result.state == ValidationState.SUCCEEDED
        assert result.failures == []
        assert result.rule_identifier == f"validation-{PRINCIPAL_ID}"
        assert result.validation_type == "azure-rbac"

    @pytest.mark.asyncio
    async def test_one_fetch_per_set(self, service, api):
        """Each set is fetched at its own scope with the principal filter."""
        await service.reconcile(make_rule(
            (SUB_SCOPE, Role(name=READER_ID)),
            (RG_SCOPE, Role(name=READER_ID)),
        ))
        query = f"principalId eq '{PRINCIPAL_ID}'"
        assert api.calls == [("scope", SUB_SCOPE, query), ("scope", RG_SCOPE, query)]

    @pytest.mark.asyncio
    async def test_inherited_grant_counts(self, service):
        """A grant inherited from the subscription satisfies a narrower scope."""
        result = await service.reconcile(make_rule((RG_SCOPE, Role(role_name="Reader"))))
        assert result.state == ValidationState.SUCCEEDED

    @pytest.mark.asyncio
    async def test_lookup_uses_set_subscription(self, service, lookup_provider):
        """Role names are looked up in the subscription of each scope."""
        await service.reconcile(make_rule(
            (RG_SCOPE, Role(role_name="Reader")),
            (OTHER_SCOPE, Role(role_name="Owner")),
        ))
        assert lookup_provider.requested == [SUBSCRIPTION_ID, OTHER_SUBSCRIPTION_ID]

    @pytest.mark.asyncio
    async def test_no_permission_sets(self, service, api):
        """A rule without sets succeeds without fetching anything."""
        result = await service.reconcile(make_rule())
        assert result.state == ValidationState.SUCCEEDED
        assert api.calls == []


class TestRBACRuleFailures:
    """Rules with unmet permission sets."""

    @pytest.mark.asyncio
    async def test_second_set_missing(self, service):
        """Only the unmet set contributes a failure."""
        result = await service.reconcile(make_rule(
            (SUB_SCOPE, Role(role_name="Reader")),
            (SUB_SCOPE, Role(role_name="Contributor")),
        ))

        assert result.state == ValidationState.FAILED
        assert result.failures == [f"missing role {CONTRIBUTOR_ID} at scope {SUB_SCOPE}"]
        assert result.message == MESSAGE_MISSING_ROLES
        assert result.condition_is_true is False
        assert result.details == [
            f"principal {PRINCIPAL_ID}",
            f"scope {SUB_SCOPE}",
            f"scope {SUB_SCOPE}",
        ]

    @pytest.mark.asyncio
    async def test_failures_accumulate_across_sets(self, service):
        """Misses across sets are kept in order."""
        result = await service.reconcile(make_rule(
            (SUB_SCOPE, Role(role_name="Owner")),
            (RG_SCOPE, Role(role_name="Reader")),
            (OTHER_SCOPE, Role(name=READER_ID)),
        ))
        assert result.failures == [
            f"missing role {OWNER_ID} at scope {SUB_SCOPE}",
            f"missing role {READER_ID} at scope {OTHER_SCOPE}",
        ]

    @pytest.mark.asyncio
    async def test_grant_at_other_scope_does_not_count(self, service):
        """Grants from another subscription don't satisfy a set."""
        result = await service.reconcile(make_rule((SUB_SCOPE, Role(name=OWNER_ID))))
        assert result.state == ValidationState.FAILED

    @pytest.mark.asyncio
    async def test_idempotent(self, service):
        """Same input, same result."""
        rule = make_rule((SUB_SCOPE, Role(role_name="Owner")), (RG_SCOPE, Role(role_name="Reader")))
        assert (await service.reconcile(rule)) == (await service.reconcile(rule))


class TestRBACRuleHardErrors:
    """Errors that abort the whole rule."""

    @pytest.mark.asyncio
    async def test_unknown_role_aborts_rule(self, service, api):
        """A resolution error stops processing of later sets."""
        with pytest.raises(UnknownRoleName):
            await service.reconcile(make_rule(
                (SUB_SCOPE, Role(role_name="Owner")),
                (RG_SCOPE, Role(role_name="NoSuchRole")),
                (OTHER_SCOPE, Role(role_name="Owner")),
            ))
        assert [call[1] for call in api.calls] == [SUB_SCOPE, RG_SCOPE]

    @pytest.mark.asyncio
    async def test_missing_role_identifier(self, service):
        """Sets without a role identifier abort the rule."""
        with pytest.raises(MissingRoleIdentifier):
            await service.reconcile(make_rule((SUB_SCOPE, Role())))

    @pytest.mark.asyncio
    async def test_unparsable_scope_for_lookup(self, lookup_provider):
        """Role names need a subscription in the scope."""
        scope = "/providers/Microsoft.Management/managementGroups/mg"
        api = FakeAuthorizationAPI(scope_grants={scope: []})
        service = RBACRuleService(api, lookup_provider)
        with pytest.raises(ScopeParseError):
            await service.reconcile(make_rule((scope, Role(role_name="Reader"))))

    @pytest.mark.asyncio
    async def test_scope_outside_subscription(self, lookup_provider):
        """A canonical id at a scope without a subscription aborts before fetching."""
        scope = "/providers/Microsoft.Management/managementGroups/mg"
        api = FakeAuthorizationAPI(scope_grants={scope: [make_grant(READER_ID)]})
        service = RBACRuleService(api, StaticRoleLookupProvider({}))
        with pytest.raises(ScopeParseError):
            await service.reconcile(make_rule((scope, Role(name=READER_ID))))
        assert api.calls == []

    @pytest.mark.asyncio
    async def test_bad_scope_aborts_later_sets(self, service, api):
        """An unparsable scope stops the rule even after satisfied sets."""
        with pytest.raises(ScopeParseError):
            await service.reconcile(make_rule(
                (SUB_SCOPE, Role(name=READER_ID)),
                ("resourceGroups/rg-app", Role(name=READER_ID)),
                (RG_SCOPE, Role(name=READER_ID)),
            ))
        assert [call[1] for call in api.calls] == [SUB_SCOPE]

    @pytest.mark.asyncio
    async def test_malformed_grant(self, lookup_provider):
        """Malformed grants abort even when another grant matches."""
        api = FakeAuthorizationAPI(
            scope_grants={SUB_SCOPE: [make_grant(READER_ID), make_grant(None)]}
        )
        service = RBACRuleService(api, lookup_provider)
        with pytest.raises(MalformedGrantError):
            await service.reconcile(make_rule((SUB_SCOPE, Role(name=READER_ID))))

    @pytest.mark.asyncio
    async def test_backend_error(self, lookup_provider):
        """Backend errors propagate."""
        api = FakeAuthorizationAPI(error=AuthorizationAPIError("throttled", status_code=429))
        service = RBACRuleService(api, lookup_provider)
        with pytest.raises(AuthorizationAPIError) as exc_info:
            await service.reconcile(make_rule((SUB_SCOPE, Role(name=READER_ID))))
        assert exc_info.value.status_code == 429
