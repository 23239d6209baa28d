"""
Centralized constants for the object API.

Usage:
    from shared.config.constants import ObjectStatus, OrderBy, CORE_QUERY_VARS

    if status == ObjectStatus.TRASH:
        ...
"""

from typing import Final


# =============================================================================
# Requester Roles
# =============================================================================


class Roles:
    """Requester role constants."""

    ADMIN: Final[str] = "ADMIN"
    EDITOR: Final[str] = "EDITOR"
    AUTHOR: Final[str] = "AUTHOR"
    VIEWER: Final[str] = "VIEWER"

    ALL: Final[list[str]] = [ADMIN, EDITOR, AUTHOR, VIEWER]


# Roles allowed to use private query vars and edit any object
EDITING_ROLES: Final[frozenset[str]] = frozenset({Roles.ADMIN, Roles.EDITOR})


# =============================================================================
# Object Status Constants
# =============================================================================


class ObjectStatus:
    """Stored object status constants."""

    PUBLISH: Final[str] = "publish"
    DRAFT: Final[str] = "draft"
    PENDING: Final[str] = "pending"
    PRIVATE: Final[str] = "private"
    TRASH: Final[str] = "trash"

    # Pseudo status used by batch fetches: do not filter by status
    ANY: Final[str] = "any"

    ALL: Final[list[str]] = [PUBLISH, DRAFT, PENDING, PRIVATE, TRASH]
    # Visible to anonymous requesters
    PUBLIC: Final[list[str]] = [PUBLISH]


# Meta key holding the status an object had before being trashed
TRASH_STATUS_META_KEY: Final[str] = "_trash_meta_status"


# =============================================================================
# Collection Parameters
# =============================================================================


class Context:
    """Response context constants."""

    VIEW: Final[str] = "view"
    EDIT: Final[str] = "edit"

    ALL: Final[list[str]] = [VIEW, EDIT]


class Order:
    """Sort direction constants."""

    ASC: Final[str] = "asc"
    DESC: Final[str] = "desc"


class OrderBy:
    """Collection `orderby` request values."""

    DATE: Final[str] = "date"
    MODIFIED: Final[str] = "modified"
    ID: Final[str] = "id"
    INCLUDE: Final[str] = "include"
    TITLE: Final[str] = "title"
    SLUG: Final[str] = "slug"

    ALL: Final[list[str]] = [DATE, MODIFIED, ID, INCLUDE, TITLE, SLUG]


# Request `orderby` value -> store `orderby` value
ORDERBY_NORMALIZATION: Final[dict[str, str]] = {
    OrderBy.DATE: "date,ID",
    OrderBy.INCLUDE: "id_in",
    OrderBy.ID: "ID",
    OrderBy.SLUG: "name",
}


class DateColumn:
    """Columns a date filter may compare against."""

    DATE: Final[str] = "date"
    DATE_GMT: Final[str] = "date_gmt"
    MODIFIED: Final[str] = "modified"
    MODIFIED_GMT: Final[str] = "modified_gmt"

    ALL: Final[list[str]] = [DATE, DATE_GMT, MODIFIED, MODIFIED_GMT]
    DEFAULT: Final[str] = DATE


# =============================================================================
# Query Vars
# =============================================================================

# Request parameter -> store query var, copied only when allowed
REQUEST_TO_QUERY_VAR: Final[dict[str, str]] = {
    "offset": "offset",
    "order": "order",
    "orderby": "orderby",
    "page": "paged",
    "include": "id_in",
    "exclude": "id_not_in",
    "per_page": "page_size",
    "slug": "name",
    "search": "search",
    "status": "status",
}

# Only mapped for hierarchical resources
HIERARCHICAL_REQUEST_TO_QUERY_VAR: Final[dict[str, str]] = {
    "parent": "parent_id_in",
    "parent_exclude": "parent_id_not_in",
}

# Query vars every request may set, in addition to the public ones
CORE_QUERY_VARS: Final[frozenset[str]] = frozenset({
    "date_filter",
    "ignore_sticky",
    "offset",
    "id_in",
    "id_not_in",
    "parent_id",
    "parent_id_in",
    "parent_id_not_in",
    "page_size",
    "meta_filter",
    "taxonomy_filter",
    "meta_key",
    "meta_value",
    "meta_compare",
    "meta_value_numeric",
})

# Default snapshot of publicly settable query vars
DEFAULT_PUBLIC_QUERY_VARS: Final[frozenset[str]] = frozenset({
    "search",
    "paged",
    "order",
    "orderby",
    "name",
    "object_type",
})

# Default snapshot of query vars reserved for requesters who can edit
DEFAULT_PRIVATE_QUERY_VARS: Final[frozenset[str]] = frozenset({
    "status",
    "title",
    "author",
})


class MetaCompare:
    """Supported meta value comparison operators."""

    EQ: Final[str] = "="
    NE: Final[str] = "!="
    GT: Final[str] = ">"
    GTE: Final[str] = ">="
    LT: Final[str] = "<"
    LTE: Final[str] = "<="
    LIKE: Final[str] = "LIKE"
    IN: Final[str] = "IN"
    NOT_IN: Final[str] = "NOT IN"
    EXISTS: Final[str] = "EXISTS"
    NOT_EXISTS: Final[str] = "NOT EXISTS"

    ALL: Final[list[str]] = [EQ, NE, GT, GTE, LT, LTE, LIKE, IN, NOT_IN, EXISTS, NOT_EXISTS]


# =============================================================================
# Validation Constants
# =============================================================================


class Limits:
    """Validation limits."""

    MAX_TITLE_LENGTH: Final[int] = 200
    MAX_SLUG_LENGTH: Final[int] = 200
    MAX_SEARCH_TERM_LENGTH: Final[int] = 100

    # Pagination defaults
    DEFAULT_PAGE_SIZE: Final[int] = 10
    MAX_PAGE_SIZE: Final[int] = 100

    MAX_BATCH_ITEMS: Final[int] = 100
