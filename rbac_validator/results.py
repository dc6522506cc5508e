"""Validation result construction.

Results start out optimistic (Succeeded) and may be moved to Failed exactly
once. The transition always sets the state, the condition flag, the message
and the failures together.
"""

from typing import Optional

from .models import ValidationResult, ValidationState

VALIDATION_RULE_PREFIX = "validation"
VALIDATION_TYPE_ROLE_ASSIGNMENT = "azure-role-assignment"
VALIDATION_TYPE_RBAC = "azure-rbac"

MESSAGE_ALL_ROLES_FOUND = "Security principal has all required roles."
MESSAGE_MISSING_ROLES = "Security principal missing one or more required roles."


def rule_identifier(identifier: str) -> str:
    """Prefix an identifier the way validation rules are named."""
    return f"{VALIDATION_RULE_PREFIX}-{identifier}"


def build_validation_result(
    identifier: str,
    validation_type: str,
    message: str = MESSAGE_ALL_ROLES_FOUND,
) -> ValidationResult:
    """Create a succeeded result; callers fail it if the check finds gaps.

    Args:
        identifier: Rule-derived identifier (prefixed automatically).
        validation_type: One of the VALIDATION_TYPE_* constants.
        message: Message kept if the validation succeeds.
    """
    return ValidationResult(
        state=ValidationState.SUCCEEDED,
        validation_type=validation_type,
        rule_identifier=rule_identifier(identifier),
        message=message,
        condition_is_true=True,
    )


def fail_validation_result(
    result: ValidationResult,
    message: str,
    failures: list[str],
    details: Optional[list[str]] = None,
) -> ValidationResult:
    """Move a result to the Failed state.

    Args:
        result: A result still in the Succeeded state.
        message: Replacement message describing the failure.
        failures: Non-empty list of compliance failures, in discovery order.
        details: Optional extra context.

    Raises:
        ValueError: If the result already failed or no failures are given.
    """
    if result.state == ValidationState.FAILED:
        raise ValueError(f"Validation result {result.rule_identifier} already failed")
    if not failures:
        raise ValueError("A failed validation result needs at least one failure")
    result.state = ValidationState.FAILED
    result.condition_is_true = False
    result.message = message
    result.failures = list(failures)
    if details:
        result.details = list(details)
    return result
