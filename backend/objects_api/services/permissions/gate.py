"""
Permission gate: the boolean contract the object controller depends on.

The controller asks about object identities (type + ID), never about roles.
``RolePermissionGate`` answers by loading the object through a lookup
callable and delegating to the requester's role strategy.

Usage:
    gate = RolePermissionGate(PermissionContext(user), lookup=lambda t, i: repo.get(t, i))
    if not gate.can_delete("page", 12):
        raise ForbiddenError("page", "delete", status_code=gate.authorization_required_code())
"""

from typing import Any, Callable, Protocol

from fastapi import status

from .context import Action, PermissionContext

# (object_type, object_id) -> object or None
ObjectLookup = Callable[[str, int], Any]


class PermissionGate(Protocol):
    """Allow/deny answers for one requester."""

    def can_read(self, object_type: str, object_id: int) -> bool:
        ...

    def can_update(self, object_type: str, object_id: int) -> bool:
        ...

    def can_delete(self, object_type: str, object_id: int) -> bool:
        ...

    def can_create(self, object_type: str) -> bool:
        ...

    def can_edit(self, object_type: str) -> bool:
        """Whether the requester counts as privileged for query vars."""
        ...

    def authorization_required_code(self) -> int:
        """Status code a denial carries for this requester."""
        ...


class RolePermissionGate:
    """
    Role strategy backed permission gate.

    Args:
        context: Requester permission context
        lookup: Loads an object of any status by type and ID
    """

    def __init__(self, context: PermissionContext, lookup: ObjectLookup):
        self._context = context
        self._lookup = lookup

    @property
    def context(self) -> PermissionContext:
        return self._context

    def can_read(self, object_type: str, object_id: int) -> bool:
        return self._check(Action.READ, object_type, object_id)

    def can_update(self, object_type: str, object_id: int) -> bool:
        return self._check(Action.UPDATE, object_type, object_id)

    def can_delete(self, object_type: str, object_id: int) -> bool:
        return self._check(Action.DELETE, object_type, object_id)

    def can_create(self, object_type: str) -> bool:
        return self._context.can(Action.CREATE, object_type)

    def can_edit(self, object_type: str) -> bool:
        return self._context.can_edit_any

    def authorization_required_code(self) -> int:
        if self._context.is_anonymous:
            return status.HTTP_401_UNAUTHORIZED
        return status.HTTP_403_FORBIDDEN

    def _check(self, action: Action, object_type: str, object_id: int) -> bool:
        obj = self._lookup(object_type, object_id)
        if obj is None:
            return False
        return self._context.can(action, obj)
