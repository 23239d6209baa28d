"""
Pydantic schemas for the object API.

Collection parameters are validated here, before the query translator runs;
the translator trusts what comes out of ``parse_collection_params``.
"""

from __future__ import annotations

from datetime import datetime
from types import MappingProxyType
from typing import Any, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError, field_validator

from shared.config.constants import Limits
from shared.config.settings import settings
from shared.utils.exceptions import ValidationError
from shared.utils.validators import parse_id_list

# =============================================================================
# Common Types
# =============================================================================

ContextParam = Literal["view", "edit"]
OrderParam = Literal["asc", "desc"]
OrderByParam = Literal["date", "modified", "id", "include", "title", "slug"]
DateColumnParam = Literal["date", "date_gmt", "modified", "modified_gmt"]
StatusParam = Literal["any", "publish", "draft", "pending", "private", "trash"]
# Statuses a client may set directly; trash is reached through DELETE only
WritableStatus = Literal["publish", "draft", "pending", "private"]


# =============================================================================
# Collection Parameters
# =============================================================================


class CollectionParams(BaseModel):
    """Query parameters accepted by every collection endpoint."""

    model_config = ConfigDict(extra="ignore")

    context: ContextParam = "view"
    page: int = Field(default=1, ge=1)
    per_page: int = Field(default=settings.default_page_size, ge=1, le=settings.max_page_size)
    search: Optional[str] = Field(default=None, max_length=Limits.MAX_SEARCH_TERM_LENGTH)
    after: Optional[datetime] = None
    before: Optional[datetime] = None
    date_column: DateColumnParam = "date"
    exclude: list[int] = Field(default_factory=list)
    include: list[int] = Field(default_factory=list)
    offset: Optional[int] = Field(default=None, ge=0)
    order: OrderParam = "desc"
    orderby: OrderByParam = "date"
    slug: Optional[str] = Field(default=None, max_length=Limits.MAX_SLUG_LENGTH)
    status: Optional[StatusParam] = None

    @field_validator("exclude", "include", mode="before")
    @classmethod
    def _parse_ids(cls, value: Any) -> list[int]:
        return parse_id_list(value)

    @field_validator("search", "slug", mode="before")
    @classmethod
    def _strip_text(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip() or None
        return value


class HierarchicalCollectionParams(CollectionParams):
    """Collection parameters for resources whose objects have parents."""

    parent: list[int] = Field(default_factory=list)
    parent_exclude: list[int] = Field(default_factory=list)

    @field_validator("parent", "parent_exclude", mode="before")
    @classmethod
    def _parse_parent_ids(cls, value: Any) -> list[int]:
        return parse_id_list(value)


def _invalid_params_error(exc: PydanticValidationError) -> ValidationError:
    params: dict[str, str] = {}
    for error in exc.errors():
        name = ".".join(str(part) for part in error.get("loc", ())) or "body"
        params.setdefault(name, error.get("msg", "Invalid value"))
    return ValidationError(
        "rest_invalid_param",
        f"Invalid parameter(s): {', '.join(params)}",
        data={"params": params},
    )


def parse_collection_params(raw: Mapping[str, Any], hierarchical: bool) -> Mapping[str, Any]:
    """
    Validate raw collection parameters.

    Args:
        raw: Parameter name -> value (strings or lists of strings)
        hierarchical: Accept ``parent``/``parent_exclude``

    Returns:
        Read-only mapping of typed parameters with defaults applied.

    Raises:
        ValidationError: If any parameter is invalid.
    """
    model = HierarchicalCollectionParams if hierarchical else CollectionParams
    try:
        parsed = model.model_validate(dict(raw))
    except PydanticValidationError as exc:
        raise _invalid_params_error(exc) from exc
    return MappingProxyType(parsed.model_dump())


# =============================================================================
# Object Input / Output
# =============================================================================


class ObjectInput(BaseModel):
    """Writable object fields. Unknown keys are left for additional fields."""

    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = Field(default=None, max_length=Limits.MAX_TITLE_LENGTH)
    slug: Optional[str] = Field(default=None, max_length=Limits.MAX_SLUG_LENGTH)
    content: Optional[str] = None
    status: Optional[WritableStatus] = None
    parent: Optional[int] = Field(default=None, ge=0)
    menu_order: Optional[int] = None
    date: Optional[datetime] = None
    date_gmt: Optional[datetime] = None
    sticky: Optional[bool] = None
    meta: Optional[dict[str, Optional[str]]] = None
    terms: Optional[dict[str, list[str]]] = None


def parse_object_input(raw: Mapping[str, Any]) -> ObjectInput | ValidationError:
    """Validate a create/update body, returning the error instead of raising."""
    try:
        return ObjectInput.model_validate(dict(raw))
    except PydanticValidationError as exc:
        return _invalid_params_error(exc)


class ObjectOutput(BaseModel):
    """Response fields shared by every resource type."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    type: str = Field(validation_alias="object_type")
    slug: str = Field(validation_alias="name")
    status: str
    title: str
    content: str
    parent: int = Field(validation_alias="parent_id")
    menu_order: int
    sticky: bool
    author: Optional[int] = Field(default=None, validation_alias="author_id")
    date: datetime
    date_gmt: datetime
    modified: datetime
    modified_gmt: Optional[datetime] = None


# =============================================================================
# Delete / Batch
# =============================================================================


class DeleteResponse(BaseModel):
    """Body returned by a successful delete."""

    deleted: bool = True
    previous: dict[str, Any]


class BatchUpdateItem(BaseModel):
    """An update entry of a batch request: the object ID plus its changes."""

    model_config = ConfigDict(extra="allow")

    id: int = Field(ge=1)


class BatchRequest(BaseModel):
    """Batch body: creates, updates and deletes processed in that order."""

    create: list[dict[str, Any]] = Field(default_factory=list)
    update: list[BatchUpdateItem] = Field(default_factory=list)
    delete: list[int] = Field(default_factory=list)

    @property
    def item_count(self) -> int:
        return len(self.create) + len(self.update) + len(self.delete)
