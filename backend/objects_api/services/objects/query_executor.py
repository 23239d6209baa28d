"""
Query executor for the object store.

``ObjectQuery`` is the contract the pagination engine needs; ``SqlObjectQuery``
implements it on the ``stored_object`` table with SQLAlchemy.

Usage:
    executor = SqlObjectQuery(db)
    result = executor.execute({"object_type": "page", "paged": 2, "page_size": 10})
    result.ids, result.total_count, result.effective_page_size

Store conventions worth knowing:
- a non-positive ``page_size`` means no limit;
- ``page_size`` is clamped to ``settings.max_page_size``;
- ``offset`` wins over ``paged`` when both are present;
- when the requested page holds no rows the total is reported as 0 without
  counting, so callers that need the true total of an out-of-bounds page
  must query again without ``paged`` and ``offset``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping, Protocol, Sequence

from sqlalchemy import Float, Select, and_, case, cast, exists, func, or_, select
from sqlalchemy.orm import Session

from objects_api.models import ObjectMeta, ObjectTerm, StoredObject
from shared.config.constants import DateColumn, MetaCompare, ObjectStatus
from shared.config.logging import get_logger
from shared.config.settings import settings
from shared.utils.validators import escape_like_pattern

logger = get_logger(__name__)


@dataclass(slots=True)
class QueryResult:
    """One executed page of IDs."""

    ids: list[int] = field(default_factory=list)
    total_count: int = 0
    effective_page_size: int = 0


class ObjectQuery(Protocol):
    """Store query capability required by the pagination engine."""

    def execute(self, query_args: Mapping[str, Any]) -> QueryResult:
        ...

    def batch_fetch(self, ids: Sequence[int], object_type: str, status: str | list[str]) -> Sequence[Any]:
        ...


# Store orderby token -> column
_ORDER_COLUMNS = {
    "date": StoredObject.date,
    "ID": StoredObject.id,
    "modified": StoredObject.modified,
    "title": StoredObject.title,
    "name": StoredObject.name,
    "menu_order": StoredObject.menu_order,
    "parent": StoredObject.parent_id,
}

_DATE_COLUMNS = {
    DateColumn.DATE: StoredObject.date,
    DateColumn.DATE_GMT: StoredObject.date_gmt,
    DateColumn.MODIFIED: StoredObject.modified,
    DateColumn.MODIFIED_GMT: StoredObject.modified_gmt,
}


def _as_list(value: Any) -> list[Any]:
    if isinstance(value, (list, tuple, set)):
        return list(value)
    return [value]


def _to_storage_datetime(value: Any) -> datetime:
    """Date filter bound -> naive UTC datetime."""
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class SqlObjectQuery:
    """
    SQLAlchemy implementation of ``ObjectQuery``.

    Args:
        session: Request-scoped database session
        max_page_size: Upper bound applied to every page size
    """

    def __init__(self, session: Session, max_page_size: int | None = None):
        self._session = session
        self._max_page_size = max_page_size or settings.max_page_size

    # =========================================================================
    # ObjectQuery
    # =========================================================================

    def execute(self, query_args: Mapping[str, Any]) -> QueryResult:
        """
        Run a paginated ID query.

        Returns:
            The page of IDs, the total of matching objects (0 when the page
            is empty) and the page size actually applied.
        """
        stmt = self._filtered_query(query_args)
        page_size = self._effective_page_size(query_args)

        paged_stmt = self._apply_order(stmt, query_args)
        if page_size > 0:
            paged_stmt = paged_stmt.limit(page_size).offset(self._offset(query_args, page_size))

        ids = list(self._session.scalars(paged_stmt).all())

        if not ids:
            total = 0
        elif page_size <= 0:
            total = len(ids)
        else:
            count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
            total = self._session.scalar(count_stmt) or 0

        return QueryResult(ids=ids, total_count=int(total), effective_page_size=page_size)

    def batch_fetch(
        self,
        ids: Sequence[int],
        object_type: str,
        status: str | list[str] = ObjectStatus.ANY,
    ) -> Sequence[StoredObject]:
        """
        Load objects by ID in one round trip.

        Rows come back in store order; ``status="any"`` applies no status
        filter at all.
        """
        if not ids:
            return []

        stmt = select(StoredObject).where(
            StoredObject.id.in_(list(ids)),
            StoredObject.object_type == object_type,
        )
        if status != ObjectStatus.ANY:
            stmt = stmt.where(StoredObject.status.in_(_as_list(status)))

        return self._session.scalars(stmt).all()

    # =========================================================================
    # Filters
    # =========================================================================

    def _filtered_query(self, query_args: Mapping[str, Any]) -> Select:
        stmt = select(StoredObject.id)

        if query_args.get("object_type"):
            stmt = stmt.where(StoredObject.object_type == query_args["object_type"])

        stmt = self._apply_status(stmt, query_args.get("status"))

        if query_args.get("id_in"):
            stmt = stmt.where(StoredObject.id.in_(query_args["id_in"]))
        if query_args.get("id_not_in"):
            stmt = stmt.where(StoredObject.id.not_in(query_args["id_not_in"]))

        if query_args.get("parent_id") is not None:
            stmt = stmt.where(StoredObject.parent_id == int(query_args["parent_id"]))
        if query_args.get("parent_id_in"):
            stmt = stmt.where(StoredObject.parent_id.in_(query_args["parent_id_in"]))
        if query_args.get("parent_id_not_in"):
            stmt = stmt.where(StoredObject.parent_id.not_in(query_args["parent_id_not_in"]))

        if query_args.get("name"):
            stmt = stmt.where(StoredObject.name.in_(_as_list(query_args["name"])))
        if query_args.get("title"):
            stmt = stmt.where(StoredObject.title == query_args["title"])
        if query_args.get("author") is not None:
            stmt = stmt.where(StoredObject.author_id.in_(_as_list(query_args["author"])))

        if query_args.get("search"):
            pattern = f"%{escape_like_pattern(query_args['search'])}%"
            stmt = stmt.where(
                or_(
                    StoredObject.title.ilike(pattern, escape="\\"),
                    StoredObject.content.ilike(pattern, escape="\\"),
                )
            )

        for clause in query_args.get("date_filter") or []:
            stmt = stmt.where(*self._date_conditions(clause))

        for clause in self._meta_clauses(query_args):
            stmt = stmt.where(self._meta_condition(clause))

        for clause in query_args.get("taxonomy_filter") or []:
            stmt = stmt.where(self._taxonomy_condition(clause))

        return stmt

    def _apply_status(self, stmt: Select, status: Any) -> Select:
        if status is None:
            return stmt.where(StoredObject.status.in_(ObjectStatus.PUBLIC))
        statuses = _as_list(status)
        if ObjectStatus.ANY in statuses:
            return stmt.where(StoredObject.status != ObjectStatus.TRASH)
        return stmt.where(StoredObject.status.in_(statuses))

    def _date_conditions(self, clause: Mapping[str, Any]) -> list[Any]:
        column = _DATE_COLUMNS.get(clause.get("column") or DateColumn.DEFAULT, StoredObject.date)
        conditions = []
        if clause.get("after") is not None:
            conditions.append(column > _to_storage_datetime(clause["after"]))
        if clause.get("before") is not None:
            conditions.append(column < _to_storage_datetime(clause["before"]))
        return conditions

    def _meta_clauses(self, query_args: Mapping[str, Any]) -> list[Mapping[str, Any]]:
        clauses = list(query_args.get("meta_filter") or [])
        if query_args.get("meta_key"):
            numeric = "meta_value_numeric" in query_args
            clauses.append({
                "key": query_args["meta_key"],
                "value": query_args.get("meta_value_numeric") if numeric else query_args.get("meta_value"),
                "compare": query_args.get("meta_compare")
                or (MetaCompare.EQ if ("meta_value" in query_args or numeric) else MetaCompare.EXISTS),
                "numeric": numeric,
            })
        return clauses

    def _meta_condition(self, clause: Mapping[str, Any]) -> Any:
        compare = str(clause.get("compare") or MetaCompare.EQ).upper()
        key_match = and_(
            ObjectMeta.object_id == StoredObject.id,
            ObjectMeta.meta_key == clause["key"],
        )

        if compare == MetaCompare.EXISTS:
            return exists().where(key_match)
        if compare == MetaCompare.NOT_EXISTS:
            return ~exists().where(key_match)

        value_column: Any = ObjectMeta.meta_value
        value = clause.get("value")
        if clause.get("numeric"):
            value_column = cast(ObjectMeta.meta_value, Float)

        if compare == MetaCompare.IN:
            condition = value_column.in_(_as_list(value))
        elif compare == MetaCompare.NOT_IN:
            condition = value_column.not_in(_as_list(value))
        elif compare == MetaCompare.LIKE:
            condition = value_column.like(f"%{escape_like_pattern(str(value))}%", escape="\\")
        elif compare == MetaCompare.NE:
            condition = value_column != value
        elif compare == MetaCompare.GT:
            condition = value_column > value
        elif compare == MetaCompare.GTE:
            condition = value_column >= value
        elif compare == MetaCompare.LT:
            condition = value_column < value
        elif compare == MetaCompare.LTE:
            condition = value_column <= value
        else:
            condition = value_column == value

        return exists().where(key_match, condition)

    def _taxonomy_condition(self, clause: Mapping[str, Any]) -> Any:
        terms = _as_list(clause.get("terms") or [])
        operator = str(clause.get("operator") or "IN").upper()

        def has_terms(selected: list[Any]) -> Any:
            return exists().where(
                ObjectTerm.object_id == StoredObject.id,
                ObjectTerm.taxonomy == clause["taxonomy"],
                ObjectTerm.term.in_(selected),
            )

        if operator == "NOT IN":
            return ~has_terms(terms)
        if operator == "AND":
            return and_(*[has_terms([term]) for term in terms])
        return has_terms(terms)

    # =========================================================================
    # Ordering and pagination
    # =========================================================================

    def _apply_order(self, stmt: Select, query_args: Mapping[str, Any]) -> Select:
        descending = str(query_args.get("order") or "desc").lower() != "asc"

        if query_args.get("ignore_sticky") is False:
            stmt = stmt.order_by(StoredObject.sticky.desc())

        orderby = query_args.get("orderby") or "date"
        if orderby == "none":
            return stmt

        if orderby == "id_in":
            id_in = list(query_args.get("id_in") or [])
            if not id_in:
                return stmt
            position = case({object_id: index for index, object_id in enumerate(id_in)}, value=StoredObject.id)
            return stmt.order_by(position)

        tokens = [token for token in str(orderby).replace(" ", ",").split(",") if token]
        columns = [_ORDER_COLUMNS[token] for token in tokens if token in _ORDER_COLUMNS]
        if not columns:
            columns = [StoredObject.date]

        return stmt.order_by(*[column.desc() if descending else column.asc() for column in columns])

    def _effective_page_size(self, query_args: Mapping[str, Any]) -> int:
        page_size = query_args.get("page_size")
        if page_size is None:
            page_size = settings.default_page_size
        page_size = int(page_size)
        if page_size <= 0:
            return page_size
        return min(page_size, self._max_page_size)

    def _offset(self, query_args: Mapping[str, Any], page_size: int) -> int:
        if query_args.get("offset") is not None:
            return max(0, int(query_args["offset"]))
        page = max(1, int(query_args.get("paged") or 1))
        return (page - 1) * page_size
