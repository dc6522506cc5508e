"""Shared fixtures for the RBAC validator tests."""
import os
from pathlib import Path

import pytest

# navconfig locates env/.env relative to SITE_ROOT; point it at this project.
os.environ.setdefault("SITE_ROOT", str(Path(__file__).resolve().parent.parent))

from fakes import CONTRIBUTOR_ID, OWNER_ID, READER_ID, CountingLookupProvider


@pytest.fixture
def lookup_table() -> dict[str, str]:
    """Built-in roles by friendly name."""
    return {
        "Contributor": CONTRIBUTOR_ID,
        "Reader": READER_ID,
        "Owner": OWNER_ID,
    }


@pytest.fixture
def lookup_provider(lookup_table) -> CountingLookupProvider:
    """Lookup provider serving the fixture table."""
    return CountingLookupProvider(lookup_table)
