"""Validator for RoleAssignmentRules: many roles within one subscription."""

from ..models import RoleAssignmentRule, ValidationResult
from ..results import VALIDATION_TYPE_ROLE_ASSIGNMENT, build_validation_result
from ..utils import principal_filter
from .base import BaseRuleService


class RoleAssignmentRuleService(BaseRuleService[RoleAssignmentRule]):
    """Checks that a service principal holds roles across a subscription.

    A single listing of the principal's role assignments in the subscription
    is compared against every desired role.

    Example:
        service = RoleAssignmentRuleService(api, BuiltInRoleLookupProvider(api))
        result = await service.reconcile(rule)
    """

    validation_type = VALIDATION_TYPE_ROLE_ASSIGNMENT

    async def reconcile(self, rule: RoleAssignmentRule) -> ValidationResult:
        result = build_validation_result(
            rule.service_principal_id, self.validation_type
        )

        # Assignments in the subscription implicitly have its scope, so the
        # principal filter is the only one needed.
        grants = await self.api.list_grants_for_principal_in_subscription(
            rule.subscription_id, principal_filter(rule.service_principal_id)
        )
        missing = await self._missing_roles(
            grants,
            [role.reference() for role in rule.roles],
            rule.subscription_id,
        )
        failures = [f"missing role {role_id}" for role_id in missing]
        details = [
            f"principal {rule.service_principal_id}",
            f"subscription {rule.subscription_id}",
        ]
        return self._finish(result, failures, details)
