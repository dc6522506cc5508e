"""Role identifier resolution.

This module provides the resolver and the lookup table abstraction it uses:
- RoleLookupProvider: Pluggable ABC returning a role name -> role id table
- StaticRoleLookupProvider: Fixed table, for tests and offline checks
- FunctionRoleLookupProvider: Adapts a plain (sync or async) callable
- RoleResolver: Turns a RoleReference into the canonical role id

Resolution failures are hard errors: a role name that doesn't exist or a role
without any identifier is a misconfiguration, not a compliance failure.
"""

import inspect
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Union

from navconfig.logging import logging

from .errors import MissingRoleIdentifier, UnknownRoleName
from .models import RoleReference, RoleReferenceKind
from .utils import lookup_subscription

RoleLookupTable = dict[str, str]
LookupFunction = Callable[[str], Union[RoleLookupTable, Awaitable[RoleLookupTable]]]


class RoleLookupProvider(ABC):
    """Resolves a subscription to its role lookup table.

    The table maps friendly role names (e.g. "Contributor") to canonical role
    definition names. Implementations may query a live catalog; any error
    they raise propagates to the caller unchanged.

    Example:
        >>> class CatalogProvider(RoleLookupProvider):
        ...     async def provide(self, subscription_id):
        ...         return await catalog.fetch(subscription_id)
    """

    @abstractmethod
    async def provide(self, subscription_id: str) -> RoleLookupTable:
        """Return the role lookup table for a subscription.

        Args:
            subscription_id: Subscription whose role definitions are used.

        Returns:
            Mapping of friendly role name to canonical role id.
        """
        ...


class StaticRoleLookupProvider(RoleLookupProvider):
    """Serves the same lookup table for every subscription."""

    def __init__(self, table: RoleLookupTable):
        self._table = dict(table)

    async def provide(self, subscription_id: str) -> RoleLookupTable:
        return dict(self._table)


class FunctionRoleLookupProvider(RoleLookupProvider):
    """Wraps a function ``func(subscription_id) -> table``.

    The function may be a coroutine function or a regular one.
    """

    def __init__(self, func: LookupFunction):
        self._func = func

    async def provide(self, subscription_id: str) -> RoleLookupTable:
        table = self._func(subscription_id)
        if inspect.isawaitable(table):
            table = await table
        return table


def as_lookup_provider(
    provider: Union[RoleLookupProvider, LookupFunction]
) -> RoleLookupProvider:
    """Accept either a provider instance or a bare lookup function."""
    if isinstance(provider, RoleLookupProvider):
        return provider
    if callable(provider):
        return FunctionRoleLookupProvider(provider)
    raise TypeError(
        f"Expected a RoleLookupProvider or a callable, got {type(provider).__name__}"
    )


class RoleResolver:
    """Resolves role references to canonical role ids.

    Canonical ids are trusted as given and never checked against a role
    catalog. Friendly names are looked up in the table of the subscription the
    check runs in.
    """

    def __init__(self, lookup_provider: Union[RoleLookupProvider, LookupFunction]):
        self.lookup_provider = as_lookup_provider(lookup_provider)
        self.logger = logging.getLogger(self.__class__.__name__)

    async def resolve(self, ref: RoleReference, scope_or_subscription: str) -> str:
        """Resolve a role reference.

        Args:
            ref: The role reference to resolve.
            scope_or_subscription: Subscription id, or a scope path the
                subscription is parsed from. Only used for friendly names.

        Returns:
            Canonical role id.

        Raises:
            MissingRoleIdentifier: The reference carries no identifier.
            ScopeParseError: No subscription could be derived for the lookup.
            UnknownRoleName: The friendly name is not in the lookup table.
        """
        if ref.kind == RoleReferenceKind.CANONICAL_ID:
            return ref.value
        if ref.kind == RoleReferenceKind.UNSPECIFIED:
            err = MissingRoleIdentifier()
            self.logger.error("Cannot validate: %s", err)
            raise err

        subscription_id = lookup_subscription(scope_or_subscription)
        table = await self.lookup_provider.provide(subscription_id)
        role_id = table.get(ref.value)
        if role_id is None:
            err = UnknownRoleName(ref.value, subscription_id)
            self.logger.error("Cannot validate: %s", err)
            raise err
        self.logger.debug(
            "Resolved role name %r to %s in subscription %s",
            ref.value, role_id, subscription_id,
        )
        return role_id
