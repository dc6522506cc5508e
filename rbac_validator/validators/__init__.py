"""Rule validators.

Usage:
    from rbac_validator.validators import RBACRuleService, RoleAssignmentRuleService

    service = RBACRuleService(api, lookup_provider)
    result = await service.reconcile(rule)
"""

from .base import BaseRuleService
from .rbac import RBACRuleService
from .role_assignment import RoleAssignmentRuleService

__all__ = [
    "BaseRuleService",
    "RBACRuleService",
    "RoleAssignmentRuleService",
]
