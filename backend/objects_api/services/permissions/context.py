"""
Permission Context - Main entry point for role checks.
"""

from enum import Enum, auto
from typing import Any

from shared.config.constants import Roles
from .strategies import (
    PermissionStrategy,
    get_highest_privilege_strategy,
)


class Action(Enum):
    """Available actions for permission checks."""
    CREATE = auto()
    READ = auto()
    UPDATE = auto()
    DELETE = auto()


class PermissionContext:
    """
    Context for performing permission checks.

    Automatically selects the appropriate strategy based on user roles.
    An empty user dict is the anonymous requester.

    Usage:
        ctx = PermissionContext(user)

        if ctx.can(Action.UPDATE, obj):
            ...

        print(ctx.user_id, ctx.roles, ctx.is_anonymous)
    """

    def __init__(self, user: dict | None):
        self._user = user or {}
        self._roles = list(self._user.get("roles", []))
        self._strategy = get_highest_privilege_strategy(self._roles)

    @property
    def user(self) -> dict:
        """Get raw user dict."""
        return self._user

    @property
    def user_id(self) -> int:
        """Get user ID (0 for anonymous)."""
        sub = self._user.get("sub")
        if sub is None:
            return 0
        return int(sub) if isinstance(sub, str) else sub

    @property
    def roles(self) -> list[str]:
        """Get user roles."""
        return self._roles

    @property
    def strategy(self) -> PermissionStrategy:
        """Get current permission strategy."""
        return self._strategy

    @property
    def is_anonymous(self) -> bool:
        return not self.user_id

    @property
    def is_admin(self) -> bool:
        """Check if user is admin."""
        return Roles.ADMIN in self._roles

    @property
    def can_edit_any(self) -> bool:
        """Check if user may edit every object (and use private query vars)."""
        return self._strategy.can_edit_any

    def can(self, action: Action, obj_or_type: Any) -> bool:
        """
        Check if user can perform action.

        Args:
            action: The action to check (CREATE, READ, UPDATE, DELETE)
            obj_or_type: An object, or an object type name (str) for CREATE

        Returns:
            True if action is allowed
        """
        if action == Action.CREATE:
            object_type = obj_or_type if isinstance(obj_or_type, str) else getattr(obj_or_type, "object_type", "")
            return self._strategy.can_create(self._user, object_type)

        elif action == Action.READ:
            return self._strategy.can_read(self._user, obj_or_type)

        elif action == Action.UPDATE:
            return self._strategy.can_update(self._user, obj_or_type)

        elif action == Action.DELETE:
            return self._strategy.can_delete(self._user, obj_or_type)

        return False
