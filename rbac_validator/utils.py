"""Helpers for Azure resource ids and role assignment queries."""

from .errors import ScopeParseError


def role_name_from_role_definition_id(role_definition_id: str) -> str:
    """Return the canonical role name from a role definition resource id.

    Role definition ids look like
    ``/subscriptions/<sub>/providers/Microsoft.Authorization/roleDefinitions/<name>``;
    the canonical name is the last path segment.
    """
    return role_definition_id.rstrip("/").rsplit("/", 1)[-1]


def subscription_from_scope(scope: str) -> str:
    """Extract the subscription id from a role assignment scope.

    Args:
        scope: Scope path such as ``/subscriptions/<sub>`` or
            ``/subscriptions/<sub>/resourceGroups/<rg>``.

    Returns:
        The subscription id segment.

    Raises:
        ScopeParseError: If the scope has no ``subscriptions/<id>`` prefix.
    """
    segments = scope.strip().split("/")
    # A valid scope starts with "/" so the first segment is empty.
    if len(segments) < 3 or segments[0] != "" or segments[1].lower() != "subscriptions":
        raise ScopeParseError(scope)
    subscription_id = segments[2].strip()
    if not subscription_id:
        raise ScopeParseError(scope)
    return subscription_id


def lookup_subscription(scope_or_subscription: str) -> str:
    """Subscription to use for role lookups.

    A bare subscription id is returned as is, a scope path is parsed.
    """
    if scope_or_subscription.startswith("/"):
        return subscription_from_scope(scope_or_subscription)
    if not scope_or_subscription.strip():
        raise ScopeParseError(scope_or_subscription)
    return scope_or_subscription


def principal_filter(principal_id: str) -> str:
    """OData filter selecting the role assignments of one principal.

    Principal ids are object UUIDs, so they are inserted verbatim.
    """
    return f"principalId eq '{principal_id}'"
