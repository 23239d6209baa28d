"""
Permission Strategy implementations.
Strategy Pattern for role-based access control.

Each strategy defines what a role can do with stored objects. Read access
depends on the object's status: published objects are public, everything
else is visible to editors and to the object's own author.

Mixins supply the common "never" answers.
"""

from abc import ABC, abstractmethod
from typing import Any, Protocol, runtime_checkable

from shared.config.constants import ObjectStatus, Roles


# =============================================================================
# Object Protocols
# =============================================================================


@runtime_checkable
class HasAuthor(Protocol):
    """Protocol for objects that record their author."""
    author_id: int | None


@runtime_checkable
class HasStatus(Protocol):
    """Protocol for objects with a status."""
    status: str


# =============================================================================
# Default Mixins for Common Patterns
# =============================================================================


class NoCreateMixin:
    """Mixin for roles that cannot create anything."""

    def can_create(self, user: dict, object_type: str) -> bool:
        return False


class NoUpdateMixin:
    """Mixin for roles that cannot update anything."""

    def can_update(self, user: dict, obj: Any) -> bool:
        return False


class NoDeleteMixin:
    """Mixin for roles that cannot delete anything."""

    def can_delete(self, user: dict, obj: Any) -> bool:
        return False


class OwnershipMixin:
    """Mixin providing ownership helper methods."""

    def _user_id(self, user: dict) -> int:
        sub = user.get("sub")
        if sub is None:
            return 0
        return int(sub) if isinstance(sub, str) else sub

    def _is_owner(self, user: dict, obj: Any) -> bool:
        user_id = self._user_id(user)
        if not user_id:
            return False
        author_id = obj.author_id if isinstance(obj, HasAuthor) else getattr(obj, "author_id", None)
        return author_id == user_id

    def _is_public(self, obj: Any) -> bool:
        status = obj.status if isinstance(obj, HasStatus) else getattr(obj, "status", None)
        # Types without a status concept are always public
        return status is None or status in ObjectStatus.PUBLIC


# =============================================================================
# Base Permission Strategy
# =============================================================================


class PermissionStrategy(ABC, OwnershipMixin):
    """
    Abstract base for permission strategies.

    Each implementation defines access rules for a specific role.
    """

    @property
    @abstractmethod
    def role_name(self) -> str:
        """Return the role this strategy handles."""
        ...

    @property
    def can_edit_any(self) -> bool:
        """Whether the role may use private query vars and edit any object."""
        return False

    @abstractmethod
    def can_create(self, user: dict, object_type: str) -> bool:
        ...

    @abstractmethod
    def can_read(self, user: dict, obj: Any) -> bool:
        ...

    @abstractmethod
    def can_update(self, user: dict, obj: Any) -> bool:
        ...

    @abstractmethod
    def can_delete(self, user: dict, obj: Any) -> bool:
        ...


class AdminStrategy(PermissionStrategy):
    """Admin has full access to every object."""

    @property
    def role_name(self) -> str:
        return Roles.ADMIN

    @property
    def can_edit_any(self) -> bool:
        return True

    def can_create(self, user: dict, object_type: str) -> bool:
        return True

    def can_read(self, user: dict, obj: Any) -> bool:
        return True

    def can_update(self, user: dict, obj: Any) -> bool:
        return True

    def can_delete(self, user: dict, obj: Any) -> bool:
        return True


class EditorStrategy(AdminStrategy):
    """
    Editor can manage every object's content.
    Same object access as admin.
    """

    @property
    def role_name(self) -> str:
        return Roles.EDITOR


class AuthorStrategy(PermissionStrategy):
    """
    Author can create objects and manage only their own.
    Reads published objects plus their own in any status.
    """

    @property
    def role_name(self) -> str:
        return Roles.AUTHOR

    def can_create(self, user: dict, object_type: str) -> bool:
        return True

    def can_read(self, user: dict, obj: Any) -> bool:
        return self._is_public(obj) or self._is_owner(user, obj)

    def can_update(self, user: dict, obj: Any) -> bool:
        return self._is_owner(user, obj)

    def can_delete(self, user: dict, obj: Any) -> bool:
        return self._is_owner(user, obj)


class ReadOnlyStrategy(NoCreateMixin, NoUpdateMixin, NoDeleteMixin, PermissionStrategy):
    """
    Viewers and anonymous requesters: published objects only.
    """

    @property
    def role_name(self) -> str:
        return Roles.VIEWER

    def can_read(self, user: dict, obj: Any) -> bool:
        return self._is_public(obj)


# Strategy registry
STRATEGY_REGISTRY: dict[str, type[PermissionStrategy]] = {
    Roles.ADMIN: AdminStrategy,
    Roles.EDITOR: EditorStrategy,
    Roles.AUTHOR: AuthorStrategy,
    Roles.VIEWER: ReadOnlyStrategy,
}


def get_strategy_for_role(role: str) -> PermissionStrategy:
    """Get permission strategy for a role."""
    strategy_class = STRATEGY_REGISTRY.get(role, ReadOnlyStrategy)
    return strategy_class()


def get_highest_privilege_strategy(roles: list[str]) -> PermissionStrategy:
    """
    Get strategy for highest privilege role.
    Priority: ADMIN > EDITOR > AUTHOR > VIEWER
    """
    priority = [Roles.ADMIN, Roles.EDITOR, Roles.AUTHOR]

    for role in priority:
        if role in roles:
            return get_strategy_for_role(role)

    return ReadOnlyStrategy()
