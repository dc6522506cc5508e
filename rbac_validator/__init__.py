"""Azure RBAC Validator.

Checks whether security principals hold the Azure role assignments they are
expected to hold, and reports a pass/fail result listing every missing role.
It never creates, deletes or modifies role assignments.

Usage:
    from rbac_validator import (
        AzureAuthorizationAPI,
        BuiltInRoleLookupProvider,
        RoleAssignmentRule,
        RoleAssignmentRuleService,
    )

    async with AzureAuthorizationAPI(credential) as api:
        service = RoleAssignmentRuleService(api, BuiltInRoleLookupProvider(api))
        result = await service.reconcile(
            RoleAssignmentRule(
                servicePrincipalId="11111111-1111-1111-1111-111111111111",
                subscriptionId="00000000-0000-0000-0000-000000000000",
                roles=[{"roleName": "Contributor"}],
            )
        )
        print(result.state, result.failures)
"""

from .client import AuthorizationAPI, AzureAuthorizationAPI, BuiltInRoleLookupProvider
from .errors import (
    AuthorizationAPIError,
    ConfigurationError,
    MalformedGrantError,
    MissingRoleIdentifier,
    RBACValidatorError,
    RoleResolutionError,
    ScopeParseError,
    UnknownRoleName,
)
from .grants import build_grant_set
from .models import (
    AzureAuth,
    AzureValidatorSpec,
    Grant,
    PermissionSet,
    RBACRule,
    Role,
    RoleAssignmentRule,
    RoleReference,
    RoleReferenceKind,
    ValidationResult,
    ValidationState,
)
from .resolver import (
    FunctionRoleLookupProvider,
    RoleLookupProvider,
    RoleResolver,
    StaticRoleLookupProvider,
)
from .results import build_validation_result, fail_validation_result
from .runner import RuleOutcome, ValidatorRunner
from .validators import RBACRuleService, RoleAssignmentRuleService
from .version import __version__

__all__ = [
    # Models
    "AzureAuth",
    "AzureValidatorSpec",
    "Grant",
    "PermissionSet",
    "RBACRule",
    "Role",
    "RoleAssignmentRule",
    "RoleReference",
    "RoleReferenceKind",
    "ValidationResult",
    "ValidationState",
    # Errors
    "RBACValidatorError",
    "AuthorizationAPIError",
    "ConfigurationError",
    "MalformedGrantError",
    "RoleResolutionError",
    "MissingRoleIdentifier",
    "UnknownRoleName",
    "ScopeParseError",
    # Resolution
    "RoleLookupProvider",
    "StaticRoleLookupProvider",
    "FunctionRoleLookupProvider",
    "RoleResolver",
    "build_grant_set",
    # Results
    "build_validation_result",
    "fail_validation_result",
    # Authorization API
    "AuthorizationAPI",
    "AzureAuthorizationAPI",
    "BuiltInRoleLookupProvider",
    # Validators
    "RoleAssignmentRuleService",
    "RBACRuleService",
    "ValidatorRunner",
    "RuleOutcome",
    "__version__",
]
