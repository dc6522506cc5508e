"""Hard errors raised while validating RBAC rules.

A hard error means the check itself could not be performed (backend outage,
malformed data, misconfigured rule). It always propagates to the caller and is
never recorded as a compliance failure in a ValidationResult.
"""

from typing import Optional


class RBACValidatorError(Exception):
    """Base error for all hard validation errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(RBACValidatorError):
    """Credentials or the validator spec could not be loaded."""
    pass


class AuthorizationAPIError(RBACValidatorError):
    """The authorization backend failed to answer a request.

    Wraps transport and backend errors raised by the Azure SDK, including
    failures retrieving any page of a paginated listing.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class MalformedGrantError(RBACValidatorError):
    """A role assignment returned by the backend has no role definition id."""

    def __init__(self, message: str, grant_id: Optional[str] = None):
        super().__init__(message)
        self.grant_id = grant_id


class ScopeParseError(RBACValidatorError):
    """A subscription id could not be derived from a scope string."""

    def __init__(self, scope: str):
        super().__init__(
            f"failed to parse subscription ID from scope {scope!r}"
        )
        self.scope = scope


class RoleResolutionError(RBACValidatorError):
    """A role reference could not be turned into a canonical role id."""
    pass


class UnknownRoleName(RoleResolutionError):
    """The friendly role name is not a built-in role the backend recognizes."""

    def __init__(self, role_name: str, subscription_id: Optional[str] = None):
        super().__init__(
            f"no built-in role with role name {role_name!r}"
        )
        self.role_name = role_name
        self.subscription_id = subscription_id


class MissingRoleIdentifier(RoleResolutionError):
    """Neither a role name nor a role definition name was specified."""

    def __init__(self):
        super().__init__("neither role name nor name specified for role")
