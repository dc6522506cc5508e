"""Data models for RBAC validation rules and their results.

Rules mirror the AzureValidator configuration schema, so both snake_case
field names and the camelCase keys of the YAML/JSON documents are accepted.
Results follow the validator condition shape: a state, a rule identifier, a
message and the list of failures that made the rule fail.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

# Placeholder used when a role carries no usable identifier.
INVALID_CONFIG_LABEL = "invalid-config"


class RoleReferenceKind(str, Enum):
    """How a desired role has been identified by the user."""

    CANONICAL_ID = "canonical_id"
    FRIENDLY_NAME = "friendly_name"
    UNSPECIFIED = "unspecified"


class RoleReference(BaseModel):
    """Tagged reference to a role definition.

    Exactly one of three cases: the canonical role definition name
    (e.g. "b24988ac-6180-42a0-ab88-20f7382dd24c"), the friendly role name
    (e.g. "Contributor") which needs a lookup, or nothing at all.
    """

    kind: RoleReferenceKind = Field(..., description="Which identifier was given")
    value: Optional[str] = Field(
        default=None, description="Canonical id or friendly name, None if unspecified"
    )
    role_name: Optional[str] = Field(
        default=None, description="Friendly name given alongside a canonical id"
    )

    model_config = ConfigDict(frozen=True)

    @classmethod
    def canonical(cls, role_id: str, role_name: Optional[str] = None) -> "RoleReference":
        return cls(kind=RoleReferenceKind.CANONICAL_ID, value=role_id, role_name=role_name)

    @classmethod
    def friendly(cls, role_name: str) -> "RoleReference":
        return cls(kind=RoleReferenceKind.FRIENDLY_NAME, value=role_name)

    @classmethod
    def unspecified(cls) -> "RoleReference":
        return cls(kind=RoleReferenceKind.UNSPECIFIED)

    @property
    def label(self) -> str:
        """Human readable label for logs: friendly name, else canonical id."""
        return self.role_name or self.value or INVALID_CONFIG_LABEL


class Role(BaseModel):
    """A desired role as written in the validator configuration.

    Users may give a role's name (its canonical id) or its role name (the
    friendly name). If both are present, the name wins. This allows custom
    roles to be validated too, not just built-in roles.
    """

    name: Optional[str] = Field(
        default=None, description="Role definition name (canonical id)"
    )
    role_name: Optional[str] = Field(
        default=None,
        alias="roleName",
        description="Friendly role name, e.g. 'Contributor'",
    )

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def reference(self) -> RoleReference:
        """Convert the two optional fields into a tagged RoleReference."""
        if self.name:
            return RoleReference.canonical(self.name, self.role_name or None)
        if self.role_name:
            return RoleReference.friendly(self.role_name)
        return RoleReference.unspecified()


class RoleAssignmentRule(BaseModel):
    """Desired roles for a service principal within a whole subscription."""

    roles: list[Role] = Field(default_factory=list, description="Desired roles")
    service_principal_id: str = Field(
        ..., alias="servicePrincipalId", description="Object id of the principal"
    )
    subscription_id: str = Field(
        ..., alias="subscriptionId", description="Subscription to check"
    )

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class PermissionSet(BaseModel):
    """One desired role at one scope."""

    scope: str = Field(
        ...,
        description=(
            "Scope path, e.g. /subscriptions/<id>/resourceGroups/<name>"
        ),
    )
    role: Role = Field(..., description="Desired role at this scope")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class RBACRule(BaseModel):
    """Desired (scope, role) permission sets for a security principal."""

    principal_id: str = Field(
        ..., alias="principalId", description="Object id of the principal"
    )
    permissions: list[PermissionSet] = Field(
        default_factory=list, description="Permission sets to check, in order"
    )

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class Grant(BaseModel):
    """A role assignment as reported by the authorization backend.

    Only the role definition id is consulted when validating; the remaining
    fields are kept for logging and traceability.
    """

    role_definition_id: Optional[str] = Field(
        default=None, description="Full resource id of the role definition"
    )
    id: Optional[str] = Field(default=None, description="Role assignment id")
    scope: Optional[str] = Field(default=None, description="Assignment scope")
    principal_id: Optional[str] = Field(
        default=None, description="Principal the role is assigned to"
    )

    model_config = {"extra": "ignore"}


class ValidationState(str, Enum):
    """Terminal states of a validation."""

    SUCCEEDED = "Succeeded"
    FAILED = "Failed"


class ValidationResult(BaseModel):
    """Outcome of validating a single rule."""

    state: ValidationState = Field(
        default=ValidationState.SUCCEEDED, description="Validation state"
    )
    validation_type: str = Field(..., description="Kind of rule validated")
    rule_identifier: str = Field(..., description="Identifier of the rule")
    message: str = Field(default="", description="Human readable outcome")
    failures: list[str] = Field(
        default_factory=list, description="Compliance failures, in discovery order"
    )
    details: list[str] = Field(
        default_factory=list, description="Additional context for the outcome"
    )
    condition_is_true: bool = Field(
        default=True, description="Status of the validation condition"
    )

    model_config = {"extra": "ignore"}

    @property
    def succeeded(self) -> bool:
        return self.state == ValidationState.SUCCEEDED


class AzureAuth(BaseModel):
    """How the validator authenticates against Azure.

    With ``implicit`` the SDK default credential chain is used (environment,
    workload identity, managed identity, CLI). Otherwise a client secret
    credential is built from these fields, falling back to configuration.
    """

    implicit: bool = Field(default=False, description="Use default credential chain")
    tenant_id: Optional[str] = Field(
        default=None, alias="tenantId", description="Azure AD tenant ID"
    )
    client_id: Optional[str] = Field(
        default=None, alias="clientId", description="Azure AD application (client) ID"
    )
    client_secret: Optional[str] = Field(
        default=None, alias="clientSecret", description="Azure AD client secret"
    )

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class AzureValidatorSpec(BaseModel):
    """A complete set of rules to validate with one set of credentials."""

    auth: AzureAuth = Field(default_factory=AzureAuth)
    role_assignment_rules: list[RoleAssignmentRule] = Field(
        default_factory=list, alias="roleAssignmentRules"
    )
    rbac_rules: list[RBACRule] = Field(default_factory=list, alias="rbacRules")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def result_count(self) -> int:
        """Number of validation results a full run produces."""
        return len(self.role_assignment_rules) + len(self.rbac_rules)
