"""
Permission Strategy Pattern implementation for stored objects.

Usage:
    from objects_api.services.permissions import PermissionContext, RolePermissionGate

    ctx = PermissionContext(user)
    gate = RolePermissionGate(ctx, lookup=lookup_object)
    if not gate.can_update("page", 5):
        raise ForbiddenError("page", "edit", status_code=gate.authorization_required_code())
"""

from .strategies import (
    PermissionStrategy,
    AdminStrategy,
    EditorStrategy,
    AuthorStrategy,
    ReadOnlyStrategy,
    get_highest_privilege_strategy,
)
from .context import PermissionContext, Action
from .gate import PermissionGate, RolePermissionGate, ObjectLookup

__all__ = [
    # Strategies
    "PermissionStrategy",
    "AdminStrategy",
    "EditorStrategy",
    "AuthorStrategy",
    "ReadOnlyStrategy",
    "get_highest_privilege_strategy",
    # Context
    "PermissionContext",
    "Action",
    # Gate
    "PermissionGate",
    "RolePermissionGate",
    "ObjectLookup",
]
