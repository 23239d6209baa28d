"""
Query translator: request parameters -> store query args.

The translation runs in a fixed order:

1. copy the recognized request parameters under their store names
   (parent filters only for hierarchical resources);
2. normalize ``orderby`` to the store's vocabulary;
3. fold ``after``/``before``/``date_column`` into one date filter clause;
4. let the resource's query hook rewrite the result;
5. keep only allow-listed vars, passing each through its var filter;
6. force ``ignore_sticky`` and ``object_type``.

Nothing here raises: parameter validation has already happened in the
request schemas.
"""

from __future__ import annotations

from typing import Any, Mapping

from shared.config.constants import (
    DateColumn,
    HIERARCHICAL_REQUEST_TO_QUERY_VAR,
    ORDERBY_NORMALIZATION,
    REQUEST_TO_QUERY_VAR,
)
from shared.config.logging import get_logger
from .descriptor import ResourceConfig
from .query_vars import compute_allowed_vars

logger = get_logger(__name__)


def _is_set(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, (list, tuple, set, str)) and len(value) == 0:
        return False
    return True


def normalize_orderby(orderby: str) -> str:
    """Map a request ``orderby`` value to the store's; unknown values pass through."""
    return ORDERBY_NORMALIZATION.get(orderby, orderby)


def build_date_filter(params: Mapping[str, Any]) -> list[dict[str, Any]]:
    """
    Build the date filter from ``after``, ``before`` and ``date_column``.

    Both bounds share a single clause so they combine as an AND range.
    Returns an empty list when neither bound is present.
    """
    clause: dict[str, Any] = {}
    if _is_set(params.get("after")):
        clause["after"] = params["after"]
    if _is_set(params.get("before")):
        clause["before"] = params["before"]

    if not clause:
        return []

    clause["column"] = params.get("date_column") or DateColumn.DEFAULT
    return [clause]


def prepare_query_args(params: Mapping[str, Any], config: ResourceConfig) -> dict[str, Any]:
    """Steps 1-4: map, normalize and hook, before the allow-list applies."""
    args: dict[str, Any] = {}

    mapping = dict(REQUEST_TO_QUERY_VAR)
    if config.descriptor.hierarchical:
        mapping.update(HIERARCHICAL_REQUEST_TO_QUERY_VAR)

    for param_name, var_name in mapping.items():
        value = params.get(param_name)
        if _is_set(value):
            args[var_name] = list(value) if isinstance(value, (list, tuple)) else value

    if "orderby" in args:
        args["orderby"] = normalize_orderby(args["orderby"])

    date_filter = build_date_filter(params)
    if date_filter:
        args["date_filter"] = date_filter

    if config.query_hook is not None:
        args = config.query_hook(dict(args), params)

    return args


def filter_allowed_vars(
    args: Mapping[str, Any],
    config: ResourceConfig,
    is_privileged: bool,
) -> dict[str, Any]:
    """Step 5: keep allow-listed vars only, applying per-var filters."""
    allowed = compute_allowed_vars(config.query_vars, is_privileged)
    var_filters = config.query_vars.var_filters

    query_args: dict[str, Any] = {}
    for var_name, value in args.items():
        if var_name not in allowed:
            continue
        var_filter = var_filters.get(var_name)
        query_args[var_name] = var_filter(value) if var_filter else value
    return query_args


def translate(
    params: Mapping[str, Any],
    config: ResourceConfig,
    is_privileged: bool,
) -> dict[str, Any]:
    """
    Translate validated request parameters into store query args.

    Args:
        params: Read-only request parameters
        config: Resource configuration
        is_privileged: Requester can edit objects of this type

    Returns:
        Query args containing allow-listed vars plus the forced
        ``ignore_sticky`` and ``object_type``.
    """
    args = prepare_query_args(params, config)
    query_args = filter_allowed_vars(args, config, is_privileged)

    dropped = sorted(set(args) - set(query_args) - {"object_type"})
    if dropped:
        logger.debug("Dropped disallowed query vars", object_type=config.object_type, dropped=dropped)

    query_args["ignore_sticky"] = True
    # Never settable by request input
    query_args["object_type"] = config.descriptor.type

    return query_args
