"""Shared machinery for the rule validators.

Both validators boil down to the same step repeated over different input
shapes: fetch the principal's grants for a scope, resolve the desired roles
and collect the ones that aren't held. BaseRuleService implements that step
once in ``_missing_roles``; subclasses fold over their rules with it.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Generic, Optional, TypeVar, Union

from navconfig.logging import logging

from ..client import AuthorizationAPI
from ..grants import build_grant_set
from ..models import Grant, RoleReference, ValidationResult
from ..resolver import LookupFunction, RoleLookupProvider, RoleResolver
from ..results import MESSAGE_MISSING_ROLES, fail_validation_result

RuleT = TypeVar("RuleT")


class BaseRuleService(ABC, Generic[RuleT]):
    """Abstract validator for one kind of rule.

    Subclasses must implement:
    - validation_type: Type recorded in every result
    - reconcile(): Validate one rule and return its result

    Hard errors (backend failures, malformed grants, unresolvable roles)
    propagate out of ``reconcile``; missing roles are accumulated and turn the
    result into a failed one.
    """

    validation_type: str = ""

    def __init__(
        self,
        api: AuthorizationAPI,
        lookup_provider: Union[RoleLookupProvider, LookupFunction],
    ):
        """Initialize the service.

        Args:
            api: Facade used to list role assignments.
            lookup_provider: Source of role name lookup tables, used when a
                rule gives a friendly role name instead of a role id.
        """
        self.api = api
        self.resolver = RoleResolver(lookup_provider)
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    async def reconcile(self, rule: RuleT) -> ValidationResult:
        """Validate a rule.

        Args:
            rule: The rule to validate.

        Returns:
            A succeeded result, or a failed one listing the missing roles.
        """
        ...

    async def _missing_roles(
        self,
        grants: Sequence[Grant],
        roles: Sequence[RoleReference],
        scope_or_subscription: str,
    ) -> list[str]:
        """Canonical ids of the desired roles not held through ``grants``.

        Roles are resolved in order and the result keeps that order. The
        first resolution error aborts the check.
        """
        held = build_grant_set(grants)
        missing: list[str] = []
        for ref in roles:
            role_id = await self.resolver.resolve(ref, scope_or_subscription)
            if role_id not in held:
                self.logger.info(
                    "Role %s (%s) not found for %s", role_id, ref.label, scope_or_subscription
                )
                missing.append(role_id)
        return missing

    def _finish(
        self,
        result: ValidationResult,
        failures: list[str],
        details: Optional[list[str]] = None,
    ) -> ValidationResult:
        """Fail the result when roles are missing, attaching ``details``."""
        if failures:
            fail_validation_result(result, MESSAGE_MISSING_ROLES, failures, details)
        return result
