"""Validator for RBACRules: one role per scope, many scopes."""

from ..models import RBACRule, ValidationResult
from ..results import VALIDATION_TYPE_RBAC, build_validation_result
from ..utils import principal_filter, subscription_from_scope
from .base import BaseRuleService


class RBACRuleService(BaseRuleService[RBACRule]):
    """Checks a security principal's roles at individual scopes.

    Every permission set gets its own listing of role assignments at its
    scope. Those listings also include assignments made at enclosing scopes,
    so a subscription-wide role satisfies a resource group permission set.
    Scopes must live inside a subscription; anything else aborts the rule.
    """

    validation_type = VALIDATION_TYPE_RBAC

    async def reconcile(self, rule: RBACRule) -> ValidationResult:
        result = build_validation_result(rule.principal_id, self.validation_type)
        query = principal_filter(rule.principal_id)

        failures: list[str] = []
        for i, permission_set in enumerate(rule.permissions, start=1):
            self.logger.debug(
                "Processing permission set %d of rule for %s", i, rule.principal_id
            )
            subscription_id = subscription_from_scope(permission_set.scope)
            grants = await self.api.list_grants_for_principal_at_scope(
                permission_set.scope, query
            )
            missing = await self._missing_roles(
                grants, [permission_set.role.reference()], subscription_id
            )
            failures.extend(
                f"missing role {role_id} at scope {permission_set.scope}"
                for role_id in missing
            )
        details = [f"principal {rule.principal_id}"]
        details.extend(f"scope {ps.scope}" for ps in rule.permissions)
        return self._finish(result, failures, details)
