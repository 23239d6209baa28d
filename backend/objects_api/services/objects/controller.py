"""
Resource controller: list, read, create, update and delete for one resource type.

Orchestrates the permission gate, the query translator, the pagination
engine and the domain adapter. Precondition failures are raised as
``AppException`` subclasses; create and update return a ``MutationOutcome``
so the caller can tell a validation/post-processing failure from a
precondition failure.

Architecture:
    Router (thin) -> ObjectsController -> (translator, pagination, adapter, gate)

Usage:
    controller = ObjectsController(config, adapter, SqlObjectQuery(db), gate)

    listing = controller.list_items(params)
    outcome = controller.create_item({"title": "About"})
    if outcome.error:
        return JSONResponse(outcome.error.to_dict(), status_code=outcome.error.status_code)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

from fastapi import status

from shared.config.constants import Context, ObjectStatus
from shared.config.logging import get_logger
from shared.config.settings import Settings, settings as default_settings
from shared.utils.exceptions import (
    AlreadyDeletedError,
    AppException,
    BatchLimitError,
    ConflictError,
    DeleteFailedError,
    ForbiddenError,
    NotFoundError,
    NotSupportedError,
)
from objects_api.services.permissions import PermissionGate
from .adapter import DomainObjectAdapter, object_exists
from .descriptor import ResourceConfig
from .events import ObjectEvent, ObjectEventBus
from .pagination import PaginationEngine
from .query_executor import ObjectQuery
from .query_translator import translate
from .response import ResponseBuilder

logger = get_logger(__name__)


@dataclass(slots=True)
class MutationOutcome:
    """
    Result of a create or update: the hydrated object or an error, never both.

    Attributes:
        obj: The persisted object (None on failure)
        data: Response envelope rendered in edit context
        error: Failure reported by the adapter or post-processing
        status_code: 201 for created objects, 200 otherwise
        location: Canonical URL of a created object
    """

    obj: Any = None
    data: dict[str, Any] | None = None
    error: AppException | None = None
    status_code: int = status.HTTP_200_OK
    location: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, error: AppException) -> "MutationOutcome":
        return cls(error=error, status_code=error.status_code)


@dataclass(slots=True)
class CollectionResult:
    """One page of a collection plus its store-level counts and headers."""

    items: list[dict[str, Any]] = field(default_factory=list)
    total_count: int = 0
    page_count: int = 0
    headers: dict[str, str] = field(default_factory=dict)


class ObjectsController:
    """
    Generic CRUD controller for one resource type.

    Args:
        config: Resource configuration snapshot
        adapter: Domain object adapter
        executor: Store query capability
        gate: Permission gate for the current requester
        events: Lifecycle event bus (a private bus when omitted)
        app_settings: Application settings (trash support, batch limit, URLs)
    """

    def __init__(
        self,
        config: ResourceConfig,
        adapter: DomainObjectAdapter,
        executor: ObjectQuery,
        gate: PermissionGate,
        events: ObjectEventBus | None = None,
        app_settings: Settings | None = None,
    ):
        self._config = config
        self._adapter = adapter
        self._gate = gate
        self._events = events or ObjectEventBus()
        self._settings = app_settings or default_settings
        self._pagination = PaginationEngine(executor, adapter, config.descriptor)
        self._builder = ResponseBuilder(config, adapter, self._settings)

    @property
    def config(self) -> ResourceConfig:
        return self._config

    @property
    def object_type(self) -> str:
        return self._config.descriptor.type

    @property
    def builder(self) -> ResponseBuilder:
        return self._builder

    # =========================================================================
    # Permission Checks
    # =========================================================================

    def get_items_permissions_check(self, params: Mapping[str, Any]) -> None:
        """Edit context on a collection requires edit rights on the type."""
        if params.get("context") == Context.EDIT and not self._gate.can_edit(self.object_type):
            raise self._forbidden("edit")

    def get_item_permissions_check(self, object_id: int, context: str = Context.VIEW) -> Any:
        """Resolve the object, then check read (or edit, in edit context) rights."""
        obj = self._get_object(object_id)
        if context == Context.EDIT:
            if not self._gate.can_update(self.object_type, object_id):
                raise self._forbidden("edit", object_id)
        elif not self._gate.can_read(self.object_type, object_id):
            raise self._forbidden("read", object_id)
        return obj

    def create_item_permissions_check(self, params: Mapping[str, Any]) -> None:
        if params.get("id"):
            raise ConflictError(self.object_type, object_id=params.get("id"))
        if not self._gate.can_create(self.object_type):
            raise self._forbidden("create")

    def update_item_permissions_check(self, object_id: int) -> Any:
        obj = self._get_object(object_id)
        if not self._gate.can_update(self.object_type, object_id):
            raise self._forbidden("edit", object_id)
        return obj

    def delete_item_permissions_check(self, object_id: int) -> Any:
        obj = self._get_object(object_id)
        if not self._gate.can_delete(self.object_type, object_id):
            raise self._forbidden("delete", object_id)
        return obj

    # =========================================================================
    # Read Operations
    # =========================================================================

    def list_items(
        self,
        params: Mapping[str, Any],
        query: Mapping[str, Any] | None = None,
    ) -> CollectionResult:
        """
        List one page of the collection.

        Items the requester cannot read are left out of the page, but the
        totals still count them.

        Args:
            params: Validated collection parameters
            query: Raw query string values, reused in pagination links

        Returns:
            Page envelopes, store totals and pagination headers.
        """
        self.get_items_permissions_check(params)

        is_privileged = self._gate.can_edit(self.object_type)
        query_args = translate(params, self._config, is_privileged)
        logger.debug("Translated collection query", object_type=self.object_type, query_args=query_args)

        page = self._pagination.fetch_page(query_args)
        objects = self._pagination.hydrate(page.ids, query_args)

        context = params.get("context") or Context.VIEW
        items = [
            self._builder.envelope(obj, context)
            for obj in objects
            if self._gate.can_read(self.object_type, self._adapter.get_id(obj))
        ]

        headers = self._builder.pagination_headers(
            total_count=page.total_count,
            page_count=page.page_count,
            page=int(params.get("page") or 1),
            query=query,
        )
        return CollectionResult(
            items=items,
            total_count=page.total_count,
            page_count=page.page_count,
            headers=headers,
        )

    def get_item(self, object_id: int, context: str = Context.VIEW) -> dict[str, Any]:
        """
        Get a single object envelope.

        Raises:
            NotFoundError: Missing object or sentinel ID.
            ForbiddenError: Requester cannot read the object.
        """
        obj = self.get_item_permissions_check(object_id, context)
        return self._builder.envelope(obj, context)

    # =========================================================================
    # Write Operations
    # =========================================================================

    def create_item(self, params: Mapping[str, Any]) -> MutationOutcome:
        """
        Create an object.

        A failure after the object was saved (additional field update or
        created-event handler) permanently deletes the new object before the
        failure is returned.

        Raises:
            ConflictError: The request carries an ID. Nothing is created.
            ForbiddenError: Requester cannot create objects of this type.
        """
        self.create_item_permissions_check(params)

        prepared = self._adapter.build_from_input(params, creating=True)
        if isinstance(prepared, AppException):
            return MutationOutcome.failure(prepared)

        error = self._adapter.save(prepared)
        if error is not None:
            return MutationOutcome.failure(error)

        object_id = self._adapter.get_id(prepared)
        obj = self._adapter.resolve(object_id)
        if not object_exists(self._adapter, obj):
            return MutationOutcome.failure(NotFoundError(self.object_type, object_id))

        error = self._post_process(obj, params, creating=True)
        if error is not None:
            logger.warning(
                "Rolling back created object after post-processing failure",
                object_type=self.object_type,
                object_id=object_id,
                code=error.code,
            )
            self._adapter.delete(obj, hard=True)
            return MutationOutcome.failure(error)

        logger.info("Object created", object_type=self.object_type, object_id=object_id)
        return MutationOutcome(
            obj=obj,
            data=self._builder.envelope(obj, Context.EDIT),
            status_code=status.HTTP_201_CREATED,
            location=self._builder.location(obj),
        )

    def update_item(self, object_id: int, params: Mapping[str, Any]) -> MutationOutcome:
        """
        Update an object.

        Saved changes are kept when post-processing fails; the failure is
        still returned.

        Raises:
            NotFoundError: Missing object. Checked before anything is saved.
            ForbiddenError: Requester cannot edit the object.
        """
        self.update_item_permissions_check(object_id)

        prepared = self._adapter.build_from_input({**params, "id": object_id}, creating=False)
        if isinstance(prepared, AppException):
            return MutationOutcome.failure(prepared)

        error = self._adapter.save(prepared)
        if error is not None:
            return MutationOutcome.failure(error)

        obj = self._adapter.resolve(object_id)
        if not object_exists(self._adapter, obj):
            return MutationOutcome.failure(NotFoundError(self.object_type, object_id))

        error = self._post_process(obj, params, creating=False)
        if error is not None:
            logger.warning(
                "Post-processing failed after update, changes kept",
                object_type=self.object_type,
                object_id=object_id,
                code=error.code,
            )
            return MutationOutcome.failure(error)

        return MutationOutcome(obj=obj, data=self._builder.envelope(obj, Context.EDIT))

    def delete_item(
        self,
        object_id: int,
        force: bool = False,
        request: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Trash an object, or delete it permanently with ``force``.

        Returns:
            ``{"deleted": True, "previous": <envelope before deletion>}``

        Raises:
            NotFoundError: Missing object (checked before permissions).
            ForbiddenError: Requester cannot delete the object.
            NotSupportedError: Soft delete requested but not supported (501).
            AlreadyDeletedError: Soft delete of a trashed object (410).
            DeleteFailedError: The object did not reach the deleted state (500).
        """
        obj = self.delete_item_permissions_check(object_id)
        request = request or {}

        previous = self._builder.envelope(obj, Context.EDIT)

        if force:
            self._delete(obj, hard=True)
            deleted = self._adapter.get_id(obj) == 0
        else:
            if not self.supports_trash(obj):
                raise NotSupportedError(self.object_type, object_id=object_id)
            if self._adapter.get_status(obj) == ObjectStatus.TRASH:
                raise AlreadyDeletedError(self.object_type, object_id)

            self._delete(obj, hard=False)
            current_status = self._adapter.get_status(obj)
            # Types without a status concept count as deleted once delete returns
            deleted = current_status is None or current_status == ObjectStatus.TRASH

        if not deleted:
            raise DeleteFailedError(self.object_type, object_id)

        logger.info("Object deleted", object_type=self.object_type, object_id=object_id, force=force)
        response = {"deleted": True, "previous": previous}
        self._events.emit(ObjectEvent.deleted(self.object_type, object_id, obj, response, request))

        return response

    def batch_items(self, batch: Any, force: bool = False) -> dict[str, list[dict[str, Any]]]:
        """
        Run creates, updates and deletes of one batch request.

        Each item goes through the single-item operation and is reported on
        its own: an envelope on success, an error body otherwise.

        Raises:
            BatchLimitError: More items than ``max_batch_items``.
        """
        limit = self._settings.max_batch_items
        if batch.item_count > limit:
            raise BatchLimitError(limit, batch.item_count)

        results: dict[str, list[dict[str, Any]]] = {"create": [], "update": [], "delete": []}

        for params in batch.create:
            results["create"].append(self._run_batch_item(lambda p=params: self.create_item(p)))

        for item in batch.update:
            changes = item.model_dump(exclude={"id"})
            results["update"].append(
                self._run_batch_item(lambda i=item.id, c=changes: self.update_item(i, c))
            )

        for object_id in batch.delete:
            results["delete"].append(
                self._run_batch_item(lambda i=object_id: self.delete_item(i, force=force))
            )

        return results

    def supports_trash(self, obj: Any) -> bool:
        """Soft delete support: global retention setting, then the resource hook."""
        default = self._settings.supports_trash
        if self._config.trashable is None:
            return default
        return bool(self._config.trashable(default, obj))

    # =========================================================================
    # Internal Helpers
    # =========================================================================

    def _get_object(self, object_id: int) -> Any:
        obj = self._adapter.resolve(object_id)
        if not object_exists(self._adapter, obj):
            raise NotFoundError(self.object_type, object_id)
        return obj

    def _forbidden(self, action: str, object_id: int | None = None) -> ForbiddenError:
        return ForbiddenError(
            self.object_type,
            action,
            status_code=self._gate.authorization_required_code(),
            object_id=object_id,
        )

    def _post_process(self, obj: Any, params: Mapping[str, Any], creating: bool) -> AppException | None:
        """Additional field updates, then the created/updated event."""
        object_id = self._adapter.get_id(obj)
        try:
            error = self._config.fields.update_values(obj, params)
            if error is not None:
                return error
            if creating:
                event = ObjectEvent.created(self.object_type, object_id, obj, params)
            else:
                event = ObjectEvent.updated(self.object_type, object_id, obj, params)
            self._events.emit(event)
        except AppException as exc:
            return exc
        return None

    def _delete(self, obj: Any, hard: bool) -> None:
        object_id = self._adapter.get_id(obj)
        try:
            self._adapter.delete(obj, hard=hard)
        except AppException:
            raise
        except Exception as e:
            logger.error(
                "Failed to delete object",
                object_type=self.object_type,
                object_id=object_id,
                force=hard,
                exc_info=True,
            )
            raise DeleteFailedError(self.object_type, object_id, error=str(e)) from e

    @staticmethod
    def _run_batch_item(operation: Callable[[], Any]) -> dict[str, Any]:
        try:
            result = operation()
        except AppException as exc:
            return exc.to_dict()
        if isinstance(result, MutationOutcome):
            if result.error is not None:
                return result.error.to_dict()
            return result.data or {}
        return result
