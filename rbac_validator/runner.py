"""Runs every rule of a validator spec.

Each rule yields one RuleOutcome. A rule whose check could not be performed
carries the hard error message instead of a result, so a backend outage is
never reported as "role not found".
"""

from typing import Optional, Union

from navconfig.logging import logging
from pydantic import BaseModel, Field

from .errors import RBACValidatorError
from .models import AzureValidatorSpec, RBACRule, RoleAssignmentRule, ValidationResult
from .validators import RBACRuleService, RoleAssignmentRuleService


class RuleOutcome(BaseModel):
    """Result of a single rule: either a validation result or an error."""

    rule_kind: str = Field(..., description="Validation type of the rule")
    index: int = Field(..., description="Position of the rule within its kind")
    result: Optional[ValidationResult] = Field(
        default=None, description="Result when the check completed"
    )
    error: Optional[str] = Field(
        default=None, description="Hard error when the check could not complete"
    )

    model_config = {"extra": "ignore"}

    @property
    def succeeded(self) -> bool:
        return self.error is None and self.result is not None and self.result.succeeded


class ValidatorRunner:
    """Validates all the rules of an AzureValidatorSpec in order.

    Example:
        runner = ValidatorRunner(
            RoleAssignmentRuleService(api, provider),
            RBACRuleService(api, provider),
        )
        outcomes = await runner.run(spec)
    """

    def __init__(
        self,
        role_assignment_service: RoleAssignmentRuleService,
        rbac_service: RBACRuleService,
    ):
        self.role_assignment_service = role_assignment_service
        self.rbac_service = rbac_service
        self.logger = logging.getLogger(self.__class__.__name__)

    async def _run_rule(
        self,
        service: Union[RoleAssignmentRuleService, RBACRuleService],
        rule: Union[RoleAssignmentRule, RBACRule],
        index: int,
    ) -> RuleOutcome:
        kind = service.validation_type
        try:
            result = await service.reconcile(rule)
        except RBACValidatorError as exc:
            self.logger.error("Rule %s #%d could not be validated: %s", kind, index, exc)
            return RuleOutcome(rule_kind=kind, index=index, error=exc.message)
        except Exception as exc:
            self.logger.exception(
                "Unexpected error validating rule %s #%d", kind, index
            )
            return RuleOutcome(
                rule_kind=kind, index=index, error=f"{type(exc).__name__}: {exc}"
            )
        self.logger.info(
            "Rule %s #%d: %s", kind, index, result.state.value
        )
        return RuleOutcome(rule_kind=kind, index=index, result=result)

    async def run(self, spec: AzureValidatorSpec) -> list[RuleOutcome]:
        """Validate every rule of the spec.

        Returns:
            One outcome per rule, role assignment rules first.
        """
        outcomes: list[RuleOutcome] = []
        for i, rule in enumerate(spec.role_assignment_rules):
            outcomes.append(
                await self._run_rule(self.role_assignment_service, rule, i)
            )
        for i, rule in enumerate(spec.rbac_rules):
            outcomes.append(await self._run_rule(self.rbac_service, rule, i))
        return outcomes
