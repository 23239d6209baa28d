"""
Additional fields attached to a resource type.

Extensions register extra fields without touching the adapter: a
``get_callback`` adds a value to each response envelope and an
``update_callback`` stores a value sent in a create/update request. Update
callbacks run as the post-processing step of a mutation, after the object
has been saved.

Usage:
    registry = FieldRegistry()
    registry.register(
        "subtitle",
        get_callback=lambda obj, name, context: obj.get_meta("subtitle"),
        update_callback=save_subtitle,
    )
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping

from shared.utils.exceptions import AppException

# (obj, field_name, context) -> value
GetCallback = Callable[[Any, str, str], Any]
# (value, obj, field_name) -> error or None
UpdateCallback = Callable[[Any, Any, str], "AppException | None"]


@dataclass(frozen=True, slots=True)
class AdditionalField:
    """A registered extra field."""

    name: str
    get_callback: GetCallback | None = None
    update_callback: UpdateCallback | None = None


class FieldRegistry:
    """Ordered registry of additional fields for one resource type."""

    def __init__(self, fields: list[AdditionalField] | None = None):
        self._fields: dict[str, AdditionalField] = {}
        for item in fields or []:
            self._fields[item.name] = item

    def register(
        self,
        name: str,
        get_callback: GetCallback | None = None,
        update_callback: UpdateCallback | None = None,
    ) -> AdditionalField:
        item = AdditionalField(name, get_callback, update_callback)
        self._fields[name] = item
        return item

    def get_values(self, obj: Any, context: str) -> dict[str, Any]:
        """Values of every readable field for ``obj``."""
        return {
            name: item.get_callback(obj, name, context)
            for name, item in self._fields.items()
            if item.get_callback is not None
        }

    def update_values(self, obj: Any, params: Mapping[str, Any]) -> AppException | None:
        """
        Apply every writable field present in ``params``.

        Stops at the first failing callback and returns its error. Callbacks
        may also raise ``AppException``; the caller handles both the same way.
        """
        for name, item in self._fields.items():
            if item.update_callback is None or name not in params:
                continue
            error = item.update_callback(params[name], obj, name)
            if isinstance(error, AppException):
                return error
        return None
