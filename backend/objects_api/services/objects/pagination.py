"""
Pagination engine: ID page first, hydration second.

Fetching IDs and the total count first keeps any expensive join off the
whole table; only the objects of the current page are then loaded, either
with one batch fetch (eager loading) or one at a time through the adapter.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from shared.config.constants import ObjectStatus
from shared.config.logging import get_logger
from .adapter import DomainObjectAdapter, object_exists
from .descriptor import ResourceDescriptor
from .query_executor import ObjectQuery

logger = get_logger(__name__)

# Query vars that select a window of the matching set
PAGINATION_VARS = frozenset({"paged", "offset"})


def _skips_rows(query_args: Mapping[str, Any]) -> bool:
    """True when the query starts after the first matching row."""
    return int(query_args.get("paged") or 1) > 1 or int(query_args.get("offset") or 0) > 0


@dataclass(slots=True)
class PageResult:
    """
    IDs of one page plus store-level counts.

    ``total_count`` covers the whole matching set, even when the requested
    page is past the end and ``ids`` is empty.
    """

    ids: list[int] = field(default_factory=list)
    total_count: int = 0
    page_count: int = 0


def calculate_page_count(total_count: int, page_size: int) -> int:
    """
    Number of pages for ``total_count`` items.

    A non-positive page size means everything fits in one page.
    """
    if total_count <= 0:
        return 0
    if page_size <= 0:
        return 1
    return math.ceil(total_count / page_size)


class PaginationEngine:
    """
    Executes paginated queries and hydrates the resulting IDs.

    Args:
        executor: Store query capability
        adapter: Domain object adapter, used when eager loading is off
        descriptor: Resource identity and capabilities
    """

    def __init__(
        self,
        executor: ObjectQuery,
        adapter: DomainObjectAdapter,
        descriptor: ResourceDescriptor,
    ):
        self._executor = executor
        self._adapter = adapter
        self._descriptor = descriptor

    def fetch_page(self, query_args: Mapping[str, Any]) -> PageResult:
        """
        Execute the query and compute counts.

        When the store reports no matches for a query past the first page
        (``paged`` above 1 or a non-zero ``offset``) the query is run again
        without pagination to tell an out-of-bounds page apart from an empty
        collection.
        """
        result = self._executor.execute(query_args)
        total_count = result.total_count

        if total_count < 1 and _skips_rows(query_args):
            count_args = {
                key: value for key, value in query_args.items() if key not in PAGINATION_VARS
            }
            total_count = self._executor.execute(count_args).total_count
            if total_count:
                logger.info(
                    "Out-of-bounds page, recounted without pagination",
                    object_type=self._descriptor.type,
                    page=query_args.get("paged"),
                    total_count=total_count,
                )

        return PageResult(
            ids=list(result.ids),
            total_count=total_count,
            page_count=calculate_page_count(total_count, result.effective_page_size),
        )

    def hydrate(self, ids: Sequence[int], query_args: Mapping[str, Any] | None = None) -> list[Any]:
        """
        Load the objects for ``ids`` in the same order.

        IDs that no longer resolve (e.g. deleted between query and fetch)
        are dropped.
        """
        if not ids:
            return []

        if self._descriptor.supports_eager_loading:
            status = (query_args or {}).get("status") or ObjectStatus.ANY
            objects = self._eager_load(ids, status)
        else:
            objects = [self._adapter.resolve(object_id) for object_id in ids]

        return [obj for obj in objects if object_exists(self._adapter, obj)]

    def _eager_load(self, ids: Sequence[int], status: Any) -> list[Any | None]:
        """Batch fetch, then restore the ID order; missing IDs become None."""
        fetched = self._executor.batch_fetch(list(ids), self._descriptor.type, status)
        by_id = {self._adapter.get_id(obj): obj for obj in fetched}
        return [by_id.get(object_id) for object_id in ids]
