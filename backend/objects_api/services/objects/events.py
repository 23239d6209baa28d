"""
Object lifecycle events.
Immutable value objects plus a synchronous observer bus.

Usage:
    bus = ObjectEventBus()
    bus.subscribe(ObjectEventType.OBJECT_CREATED, lambda event: audit(event.object_id))
    bus.emit(ObjectEvent.created("page", obj.id, obj, request_params))
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Mapping

from shared.config.logging import get_logger

logger = get_logger(__name__)


class ObjectEventType(str, Enum):
    """Event type enumeration for type safety."""

    OBJECT_CREATED = "OBJECT_CREATED"
    OBJECT_UPDATED = "OBJECT_UPDATED"
    OBJECT_DELETED = "OBJECT_DELETED"


@dataclass(frozen=True, slots=True)
class ObjectEvent:
    """
    Immutable object lifecycle event.

    Attributes:
        event_type: Type of event (from ObjectEventType enum)
        object_type: Resource type of the object
        object_id: ID of the object (the pre-delete ID for deletions)
        obj: The domain object itself
        request: Request parameters that triggered the mutation
        creating: True when the object was just created
        response: Body returned to the client (deletions only)
        timestamp: When the event occurred
    """

    event_type: ObjectEventType
    object_type: str
    object_id: int
    obj: Any
    request: Mapping[str, Any] = field(default_factory=dict)
    creating: bool = False
    response: dict[str, Any] | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        return {
            "type": self.event_type.value,
            "object_type": self.object_type,
            "object_id": self.object_id,
            "creating": self.creating,
            "timestamp": self.timestamp.isoformat(),
        }

    # ==========================================================================
    # Factory methods
    # ==========================================================================

    @classmethod
    def created(cls, object_type: str, object_id: int, obj: Any, request: Mapping[str, Any]) -> "ObjectEvent":
        """Create OBJECT_CREATED event."""
        return cls(
            event_type=ObjectEventType.OBJECT_CREATED,
            object_type=object_type,
            object_id=object_id,
            obj=obj,
            request=request,
            creating=True,
        )

    @classmethod
    def updated(cls, object_type: str, object_id: int, obj: Any, request: Mapping[str, Any]) -> "ObjectEvent":
        """Create OBJECT_UPDATED event."""
        return cls(
            event_type=ObjectEventType.OBJECT_UPDATED,
            object_type=object_type,
            object_id=object_id,
            obj=obj,
            request=request,
        )

    @classmethod
    def deleted(
        cls,
        object_type: str,
        object_id: int,
        obj: Any,
        response: dict[str, Any],
        request: Mapping[str, Any],
    ) -> "ObjectEvent":
        """Create OBJECT_DELETED event."""
        return cls(
            event_type=ObjectEventType.OBJECT_DELETED,
            object_type=object_type,
            object_id=object_id,
            obj=obj,
            request=request,
            response=response,
        )


ObjectEventHandler = Callable[[ObjectEvent], None]


class ObjectEventBus:
    """
    Synchronous observer bus.

    Handlers run in subscription order inside the request. A handler that
    raises propagates to the caller, which for created/updated events turns
    into a post-processing failure.
    """

    def __init__(self) -> None:
        self._handlers: dict[ObjectEventType, list[ObjectEventHandler]] = defaultdict(list)

    def subscribe(self, event_type: ObjectEventType, handler: ObjectEventHandler) -> None:
        self._handlers[event_type].append(handler)

    def emit(self, event: ObjectEvent) -> None:
        handlers = list(self._handlers.get(event.event_type, ()))
        logger.debug("Emitting object event", handlers=len(handlers), **event.to_dict())
        for handler in handlers:
            handler(event)
