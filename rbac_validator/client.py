"""Authorization API facade.

The validators only talk to the narrow AuthorizationAPI interface defined
here. AzureAuthorizationAPI implements it on top of the Azure SDK management
client, draining every page of a listing before returning, so the validators
always see a fully materialized list of grants.

Usage:
    from azure.identity.aio import DefaultAzureCredential

    async with AzureAuthorizationAPI(DefaultAzureCredential()) as api:
        grants = await api.list_grants_for_principal_in_subscription(
            "00000000-0000-0000-0000-000000000000",
            principal_filter("11111111-1111-1111-1111-111111111111"),
        )
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from azure.core.exceptions import AzureError, HttpResponseError
from azure.mgmt.authorization.aio import AuthorizationManagementClient
from navconfig.logging import logging

from .errors import AuthorizationAPIError
from .models import Grant
from .resolver import RoleLookupProvider, RoleLookupTable
from .utils import subscription_from_scope

# The SDK logs every HTTP request at INFO.
logging.getLogger("azure").setLevel(logging.WARNING)

BUILT_IN_ROLE_FILTER = "type eq 'BuiltInRole'"


class AuthorizationAPI(ABC):
    """Read-only view of the role assignments held by principals.

    Implementations must return every grant matching the query, however many
    pages the backend splits them into, and raise AuthorizationAPIError when
    any page can't be retrieved.
    """

    @abstractmethod
    async def list_grants_for_principal_in_subscription(
        self, subscription_id: str, principal_filter: str
    ) -> list[Grant]:
        """List the grants matching a principal filter within a subscription.

        Args:
            subscription_id: Subscription to list role assignments for.
            principal_filter: OData filter selecting a single principal.

        Returns:
            All matching grants.
        """
        ...

    @abstractmethod
    async def list_grants_for_principal_at_scope(
        self, scope: str, principal_filter: str
    ) -> list[Grant]:
        """List the grants matching a principal filter that apply to a scope.

        Grants inherited from enclosing scopes (e.g. a subscription-level grant
        seen from a resource group) are included.

        Args:
            scope: Scope path to list role assignments for.
            principal_filter: OData filter selecting a single principal.

        Returns:
            All matching grants.
        """
        ...


def grant_from_role_assignment(assignment: Any) -> Grant:
    """Convert an SDK RoleAssignment into a Grant."""
    return Grant(
        id=getattr(assignment, "id", None),
        scope=getattr(assignment, "scope", None),
        principal_id=getattr(assignment, "principal_id", None),
        role_definition_id=getattr(assignment, "role_definition_id", None),
    )


class AzureAuthorizationAPI(AuthorizationAPI):
    """AuthorizationAPI backed by the Azure Authorization management client.

    One management client is created lazily per subscription and reused for
    the lifetime of the facade. The credential is owned by the caller and is
    not closed here.
    """

    def __init__(self, credential: Any, **client_kwargs):
        """Initialize the facade.

        Args:
            credential: An async Azure TokenCredential.
            **client_kwargs: Extra arguments for AuthorizationManagementClient
                (e.g. base_url for sovereign clouds).
        """
        self.credential = credential
        self._client_kwargs = client_kwargs
        self._clients: dict[str, AuthorizationManagementClient] = {}
        self.logger = logging.getLogger(self.__class__.__name__)

    def _client(self, subscription_id: str) -> AuthorizationManagementClient:
        client = self._clients.get(subscription_id)
        if client is None:
            client = AuthorizationManagementClient(
                self.credential, subscription_id, **self._client_kwargs
            )
            self._clients[subscription_id] = client
        return client

    async def _drain(self, pager, what: str) -> list:
        items = []
        try:
            async for item in pager:
                items.append(item)
        except HttpResponseError as exc:
            raise AuthorizationAPIError(
                f"failed to retrieve {what}: {exc.message}",
                status_code=exc.status_code,
            ) from exc
        except AzureError as exc:
            raise AuthorizationAPIError(f"failed to retrieve {what}: {exc}") from exc
        return items

    async def list_grants_for_principal_in_subscription(
        self, subscription_id: str, principal_filter: str
    ) -> list[Grant]:
        client = self._client(subscription_id)
        pager = client.role_assignments.list_for_subscription(filter=principal_filter)
        assignments = await self._drain(pager, "role assignments for subscription")
        self.logger.debug(
            "Found %d role assignments in subscription %s",
            len(assignments), subscription_id,
        )
        return [grant_from_role_assignment(ra) for ra in assignments]

    async def list_grants_for_principal_at_scope(
        self, scope: str, principal_filter: str
    ) -> list[Grant]:
        client = self._client(subscription_from_scope(scope))
        pager = client.role_assignments.list_for_scope(scope, filter=principal_filter)
        assignments = await self._drain(pager, "role assignments for scope")
        self.logger.debug(
            "Found %d role assignments at scope %s", len(assignments), scope
        )
        return [grant_from_role_assignment(ra) for ra in assignments]

    async def list_role_definitions(
        self, subscription_id: str, role_filter: Optional[str] = None
    ) -> list[Any]:
        """List role definitions visible in a subscription."""
        client = self._client(subscription_id)
        pager = client.role_definitions.list(
            f"/subscriptions/{subscription_id}", filter=role_filter
        )
        return await self._drain(pager, "role definitions")

    async def close(self) -> None:
        for client in self._clients.values():
            await client.close()
        self._clients.clear()

    async def __aenter__(self) -> "AzureAuthorizationAPI":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()


class BuiltInRoleLookupProvider(RoleLookupProvider):
    """Builds lookup tables from the built-in role definitions of Azure.

    Each call queries the catalog; wrap the provider to cache tables across
    checks if needed.
    """

    def __init__(self, api: AzureAuthorizationAPI):
        self.api = api
        self.logger = logging.getLogger(self.__class__.__name__)

    async def provide(self, subscription_id: str) -> RoleLookupTable:
        definitions = await self.api.list_role_definitions(
            subscription_id, BUILT_IN_ROLE_FILTER
        )
        table: RoleLookupTable = {}
        for definition in definitions:
            role_name = getattr(definition, "role_name", None)
            name = getattr(definition, "name", None)
            if role_name and name:
                table[role_name] = name
        self.logger.debug(
            "Loaded %d built-in roles for subscription %s", len(table), subscription_id
        )
        return table
