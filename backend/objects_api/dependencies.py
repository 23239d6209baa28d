"""
FastAPI dependencies for the object routers.

The requester is whatever upstream authentication stored in
``request.state.user`` (a dict with ``sub`` and ``roles``); no user means
the anonymous requester.

Usage:
    get_controller = controller_dependency(PAGES)

    @router.get("/pages/{object_id}")
    def get_page(object_id: int, controller: ObjectsController = Depends(get_controller)):
        return controller.get_item(object_id)
"""

from typing import Any, Callable

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from objects_api.models import StoredObject
from objects_api.services.objects import (
    ObjectEventBus,
    ObjectsController,
    ResourceConfig,
    SqlObjectQuery,
    StoredObjectAdapter,
)
from objects_api.services.permissions import ObjectLookup, PermissionContext, RolePermissionGate
from shared.config.settings import settings
from shared.infrastructure.db import get_db

# Process-wide lifecycle event bus; subscribers register at startup
event_bus = ObjectEventBus()


def get_requester(request: Request) -> dict:
    """Requester dict set by upstream authentication, empty for anonymous."""
    return getattr(request.state, "user", None) or {}


def get_event_bus() -> ObjectEventBus:
    return event_bus


def make_object_lookup(db: Session) -> ObjectLookup:
    """Lookup used by the permission gate; loads objects of any status."""

    def lookup(object_type: str, object_id: int) -> Any:
        if not object_id:
            return None
        obj = db.get(StoredObject, int(object_id))
        if obj is None or obj.object_type != object_type:
            return None
        return obj

    return lookup


def get_permission_gate(
    db: Session = Depends(get_db),
    user: dict = Depends(get_requester),
) -> RolePermissionGate:
    return RolePermissionGate(PermissionContext(user), make_object_lookup(db))


def controller_dependency(config: ResourceConfig) -> Callable[..., ObjectsController]:
    """Build the controller dependency for one resource type."""

    def get_controller(
        db: Session = Depends(get_db),
        gate: RolePermissionGate = Depends(get_permission_gate),
        events: ObjectEventBus = Depends(get_event_bus),
    ) -> ObjectsController:
        adapter = StoredObjectAdapter(db, config.descriptor, author_id=gate.context.user_id or None)
        return ObjectsController(
            config,
            adapter,
            SqlObjectQuery(db, settings.max_page_size),
            gate,
            events=events,
            app_settings=settings,
        )

    return get_controller
