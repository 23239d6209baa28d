"""
Domain object adapter.

The controller never touches domain objects directly: it resolves, builds,
saves and deletes them through a ``DomainObjectAdapter``. Validation
problems cross this boundary as returned ``AppException`` values, not as
raised exceptions.

``StoredObjectAdapter`` is the adapter for ``StoredObject`` rows.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping, Protocol

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from objects_api.models import StoredObject, utcnow
from objects_api.schemas import ObjectInput, ObjectOutput, parse_object_input
from shared.config.constants import Context, ObjectStatus, TRASH_STATUS_META_KEY
from shared.config.logging import get_logger
from shared.infrastructure.db import safe_commit
from shared.utils.exceptions import AppException, InternalError, NotFoundError, ValidationError
from shared.utils.validators import sanitize_slug
from .descriptor import ResourceDescriptor

logger = get_logger(__name__)


class DomainObjectAdapter(Protocol):
    """Capabilities the controller needs from a domain object type."""

    def resolve(self, object_id: int) -> Any | None:
        """Load an object by ID; None when it does not exist."""
        ...

    def build_from_input(self, params: Mapping[str, Any], creating: bool) -> Any:
        """Validate input and return a prepared (unsaved) object or an AppException."""
        ...

    def save(self, obj: Any) -> AppException | None:
        """Persist the object; returns an error instead of raising."""
        ...

    def delete(self, obj: Any, hard: bool) -> None:
        """Trash the object, or remove it permanently when ``hard``."""
        ...

    def get_id(self, obj: Any) -> int:
        ...

    def get_status(self, obj: Any) -> str | None:
        """Current status, or None for types without a status concept."""
        ...

    def to_response(self, obj: Any, context: str) -> dict[str, Any]:
        """Domain-specific response fields for ``obj``."""
        ...


def object_exists(adapter: DomainObjectAdapter, obj: Any) -> bool:
    """True unless ``obj`` is missing or carries the sentinel ID 0."""
    return obj is not None and bool(adapter.get_id(obj))


class StoredObjectAdapter:
    """
    Adapter for ``StoredObject`` rows of one resource type.

    Args:
        session: Request-scoped database session
        descriptor: Resource the adapter serves
        author_id: Requester ID recorded on created objects
    """

    def __init__(self, session: Session, descriptor: ResourceDescriptor, author_id: int | None = None):
        self._session = session
        self._descriptor = descriptor
        self._author_id = author_id

    # =========================================================================
    # Read
    # =========================================================================

    def resolve(self, object_id: int) -> StoredObject | None:
        if not object_id:
            return None
        obj = self._session.get(StoredObject, int(object_id))
        if obj is None or obj.object_type != self._descriptor.type:
            return None
        return obj

    def get_id(self, obj: StoredObject) -> int:
        return obj.id or 0

    def get_status(self, obj: StoredObject) -> str | None:
        return obj.status

    def to_response(self, obj: StoredObject, context: str) -> dict[str, Any]:
        data = ObjectOutput.model_validate(obj).model_dump(mode="json")
        if not self._descriptor.hierarchical:
            data.pop("parent", None)
        if context == Context.EDIT:
            data["meta"] = {
                item.meta_key: item.meta_value
                for item in obj.meta
                if not item.meta_key.startswith("_")
            }
            taxonomies = sorted({term.taxonomy for term in obj.terms})
            data["terms"] = {taxonomy: obj.get_terms(taxonomy) for taxonomy in taxonomies}
        else:
            data.pop("author", None)
        return data

    # =========================================================================
    # Write
    # =========================================================================

    def build_from_input(self, params: Mapping[str, Any], creating: bool) -> StoredObject | AppException:
        data = parse_object_input(params)
        if isinstance(data, AppException):
            return data

        if creating:
            obj = StoredObject(
                object_type=self._descriptor.type,
                author_id=self._author_id,
                status=ObjectStatus.DRAFT,
                title="",
                content="",
                name="",
                parent_id=0,
                menu_order=0,
                sticky=False,
            )
        else:
            obj = self.resolve(params.get("id") or 0)
            if obj is None:
                return NotFoundError(self._descriptor.type, params.get("id"))

        error = self._apply_input(obj, data, creating)
        if error is not None and not creating:
            # Discard partial changes so a later commit cannot flush them
            self._session.rollback()
        return error or obj

    def save(self, obj: StoredObject) -> AppException | None:
        obj.touch()
        self._session.add(obj)
        try:
            safe_commit(self._session)
            self._session.refresh(obj)
        except SQLAlchemyError as e:
            logger.error(
                "Failed to save object",
                object_type=self._descriptor.type,
                object_id=obj.id,
                error=str(e),
            )
            return InternalError("save_failed", f"Could not save {self._descriptor.type}.")
        return None

    def delete(self, obj: StoredObject, hard: bool) -> None:
        if hard:
            self._session.delete(obj)
            safe_commit(self._session)
            # Permanently deleted objects resolve to the sentinel ID
            obj.id = 0
            return

        obj.set_meta(TRASH_STATUS_META_KEY, obj.status)
        obj.status = ObjectStatus.TRASH
        obj.touch()
        safe_commit(self._session)
        self._session.refresh(obj)

    # =========================================================================
    # Internal Helpers
    # =========================================================================

    def _apply_input(self, obj: StoredObject, data: ObjectInput, creating: bool) -> AppException | None:
        fields = data.model_fields_set

        if "title" in fields and data.title is not None:
            obj.title = data.title.strip()
        if "content" in fields and data.content is not None:
            obj.content = data.content
        if "status" in fields and data.status is not None:
            obj.status = data.status
        if "menu_order" in fields and data.menu_order is not None:
            obj.menu_order = data.menu_order
        if "sticky" in fields and data.sticky is not None:
            obj.sticky = data.sticky

        if "parent" in fields and data.parent is not None:
            error = self._validate_parent(obj, data.parent)
            if error is not None:
                return error
            obj.parent_id = data.parent

        if "date" in fields and data.date is not None:
            obj.date = _naive_utc(data.date)
            if "date_gmt" not in fields:
                obj.date_gmt = obj.date
        if "date_gmt" in fields and data.date_gmt is not None:
            obj.date_gmt = _naive_utc(data.date_gmt)
        if creating and "date" not in fields and "date_gmt" not in fields:
            now = utcnow()
            obj.date = now
            obj.date_gmt = now

        if "slug" in fields and data.slug:
            slug = sanitize_slug(data.slug)
        elif creating or not obj.name:
            slug = sanitize_slug(obj.title) or ""
        else:
            slug = obj.name
        if not slug and creating:
            slug = self._descriptor.type
        obj.name = self._unique_slug(slug, obj.id)

        if data.meta:
            for key, value in data.meta.items():
                if key.startswith("_"):
                    return ValidationError(
                        "rest_invalid_meta",
                        f"Meta key {key} is protected.",
                        data={"params": {"meta": key}},
                    )
                obj.set_meta(key, value)

        if data.terms:
            for taxonomy, terms in data.terms.items():
                obj.set_terms(taxonomy, [term.strip() for term in terms if term.strip()])

        return None

    def _validate_parent(self, obj: StoredObject, parent_id: int) -> AppException | None:
        if parent_id == 0:
            return None
        if not self._descriptor.hierarchical:
            return ValidationError(
                f"{self._descriptor.type}_invalid_parent",
                f"The {self._descriptor.type} type does not support parents.",
                data={"params": {"parent": parent_id}},
            )
        if obj.id and parent_id == obj.id:
            return ValidationError(
                f"{self._descriptor.type}_invalid_parent",
                "An object cannot be its own parent.",
                data={"params": {"parent": parent_id}},
            )
        if self.resolve(parent_id) is None:
            return ValidationError(
                f"{self._descriptor.type}_invalid_parent",
                "Invalid parent ID.",
                data={"params": {"parent": parent_id}},
            )
        return None

    def _unique_slug(self, slug: str, object_id: int | None) -> str:
        """Append -2, -3, ... until no other object of this type uses the slug."""
        candidate = slug
        suffix = 2
        while True:
            stmt = select(StoredObject.id).where(
                StoredObject.object_type == self._descriptor.type,
                StoredObject.name == candidate,
            )
            if object_id:
                stmt = stmt.where(StoredObject.id != object_id)
            if self._session.scalar(stmt.limit(1)) is None:
                return candidate
            candidate = f"{slug}-{suffix}"
            suffix += 1


def _naive_utc(value: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive values are taken as UTC already."""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value
