"""Grant set construction."""

from collections.abc import Iterable

from .errors import MalformedGrantError
from .models import Grant
from .utils import role_name_from_role_definition_id


def build_grant_set(grants: Iterable[Grant]) -> set[str]:
    """Canonical role ids held through the given grants.

    Raises:
        MalformedGrantError: If any grant lacks its role definition id. The
            whole set is rejected, even if other grants would satisfy a rule.
    """
    held: set[str] = set()
    for grant in grants:
        if not grant.role_definition_id:
            raise MalformedGrantError(
                "data from Azure API response malformed; missing role definition id",
                grant_id=grant.id,
            )
        held.add(role_name_from_role_definition_id(grant.role_definition_id))
    return held
