"""
Generic object CRUD core.

Provides:
- ResourceConfig / ResourceDescriptor / QueryVarPolicy: per-type configuration
- compute_allowed_vars / translate: request parameters -> store query args
- SqlObjectQuery: SQLAlchemy query executor
- PaginationEngine: ID page, out-of-bounds recount, hydration
- StoredObjectAdapter: domain adapter for stored objects
- ResponseBuilder: envelopes, links, pagination headers
- ObjectsController: list/get/create/update/delete/batch
"""

from .descriptor import QueryVarPolicy, ResourceConfig, ResourceDescriptor
from .fields import AdditionalField, FieldRegistry
from .query_vars import compute_allowed_vars
from .query_translator import build_date_filter, normalize_orderby, translate
from .query_executor import ObjectQuery, QueryResult, SqlObjectQuery
from .adapter import DomainObjectAdapter, StoredObjectAdapter, object_exists
from .pagination import PageResult, PaginationEngine, calculate_page_count
from .events import ObjectEvent, ObjectEventBus, ObjectEventType
from .response import ResponseBuilder
from .controller import CollectionResult, MutationOutcome, ObjectsController

__all__ = [
    # Configuration
    "QueryVarPolicy",
    "ResourceConfig",
    "ResourceDescriptor",
    "AdditionalField",
    "FieldRegistry",
    # Query translation
    "compute_allowed_vars",
    "build_date_filter",
    "normalize_orderby",
    "translate",
    # Store access
    "ObjectQuery",
    "QueryResult",
    "SqlObjectQuery",
    "DomainObjectAdapter",
    "StoredObjectAdapter",
    "object_exists",
    # Pagination
    "PageResult",
    "PaginationEngine",
    "calculate_page_count",
    # Events
    "ObjectEvent",
    "ObjectEventBus",
    "ObjectEventType",
    # Controller
    "ResponseBuilder",
    "CollectionResult",
    "MutationOutcome",
    "ObjectsController",
]
