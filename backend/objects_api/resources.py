"""
Resource types exposed by the API.

Each entry is a ``ResourceConfig`` snapshot; routers and controllers are
built from it at startup. Adding a resource type means adding a config
here, nothing else.

Usage:
    from objects_api.resources import RESOURCES

    config = RESOURCES["page"]
"""

from typing import Any

from sqlalchemy.orm import object_session

from objects_api.models import StoredObject
from objects_api.services.objects import (
    AdditionalField,
    FieldRegistry,
    ResourceConfig,
    ResourceDescriptor,
)
from shared.config.constants import Limits
from shared.infrastructure.db import safe_commit
from shared.utils.exceptions import AppException, ValidationError


# =============================================================================
# Additional Field Callbacks
# =============================================================================


def _meta_field_getter(meta_key: str):
    def get_value(obj: StoredObject, name: str, context: str) -> Any:
        return obj.get_meta(meta_key)

    return get_value


def _meta_field_updater(meta_key: str, max_length: int):
    def update_value(value: Any, obj: StoredObject, name: str) -> AppException | None:
        if value is not None and not isinstance(value, str):
            return ValidationError(
                "rest_invalid_param",
                f"Invalid parameter(s): {name}",
                data={"params": {name: "Must be a string"}},
            )
        if value is not None and len(value) > max_length:
            return ValidationError(
                "rest_invalid_param",
                f"Invalid parameter(s): {name}",
                data={"params": {name: f"At most {max_length} characters"}},
            )

        obj.set_meta(meta_key, value or None)
        session = object_session(obj)
        if session is not None:
            safe_commit(session)
        return None

    return update_value


# =============================================================================
# Resource Types
# =============================================================================

PAGES = ResourceConfig(
    descriptor=ResourceDescriptor(type="page", hierarchical=True, supports_eager_loading=True),
    rest_base="pages",
    fields=FieldRegistry([
        AdditionalField(
            "template",
            get_callback=_meta_field_getter("template"),
            update_callback=_meta_field_updater("template", Limits.MAX_SLUG_LENGTH),
        ),
    ]),
)

POSTS = ResourceConfig(
    descriptor=ResourceDescriptor(type="post"),
    rest_base="posts",
    fields=FieldRegistry([
        AdditionalField(
            "subtitle",
            get_callback=_meta_field_getter("subtitle"),
            update_callback=_meta_field_updater("subtitle", Limits.MAX_TITLE_LENGTH),
        ),
    ]),
)

RESOURCES: dict[str, ResourceConfig] = {
    config.object_type: config for config in (PAGES, POSTS)
}
