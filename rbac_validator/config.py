"""Configuration and Azure credentials.

Settings are read through navconfig, so they can come from the environment or
from the ``env/.env`` file of the project.
"""

from typing import Any, Optional

from azure.identity.aio import ClientSecretCredential, DefaultAzureCredential
from navconfig import config

from .errors import ConfigurationError
from .models import AzureAuth

AZURE_TENANT_ID: Optional[str] = config.get("AZURE_TENANT_ID")
AZURE_CLIENT_ID: Optional[str] = config.get("AZURE_CLIENT_ID")
AZURE_CLIENT_SECRET: Optional[str] = config.get("AZURE_CLIENT_SECRET")
AZURE_AUTHORITY_HOST: Optional[str] = config.get("AZURE_AUTHORITY_HOST")


def build_credential(auth: AzureAuth) -> Any:
    """Build the async credential used to call the Azure management API.

    Args:
        auth: Authentication settings of the validator spec. Values missing
            here are taken from the configuration.

    Returns:
        A DefaultAzureCredential when ``auth.implicit`` is set, otherwise a
        ClientSecretCredential.

    Raises:
        ConfigurationError: If a client secret credential is requested but
            tenant, client id or secret are missing.
    """
    kwargs = {}
    if AZURE_AUTHORITY_HOST:
        kwargs["authority"] = AZURE_AUTHORITY_HOST

    if auth.implicit:
        return DefaultAzureCredential(**kwargs)

    tenant_id = auth.tenant_id or AZURE_TENANT_ID
    client_id = auth.client_id or AZURE_CLIENT_ID
    client_secret = auth.client_secret or AZURE_CLIENT_SECRET
    missing = [
        name for name, value in (
            ("AZURE_TENANT_ID", tenant_id),
            ("AZURE_CLIENT_ID", client_id),
            ("AZURE_CLIENT_SECRET", client_secret),
        ) if not value
    ]
    if missing:
        raise ConfigurationError(
            f"Missing Azure credentials: {', '.join(missing)}"
        )
    return ClientSecretCredential(
        tenant_id=tenant_id,
        client_id=client_id,
        client_secret=client_secret,
        **kwargs,
    )
