"""
Input validation helpers shared by request schemas and the SQL executor.
"""

import re
from typing import Any

_SLUG_INVALID_CHARS = re.compile(r"[^a-z0-9_-]+")
_SLUG_DASHES = re.compile(r"-{2,}")


def escape_like_pattern(value: str) -> str:
    """
    Escape special characters in LIKE patterns.

    SQL LIKE uses % and _ as wildcards. Escaping them keeps a search term
    literal and avoids pattern-driven full table scans.

    Args:
        value: The search string to escape

    Returns:
        The escaped string safe for use in LIKE patterns
    """
    if not value:
        return value

    value = value.replace("\\", "\\\\")
    value = value.replace("%", "\\%")
    value = value.replace("_", "\\_")
    return value


def parse_id_list(value: Any) -> list[int]:
    """
    Normalize an ID list parameter.

    Accepts a list, a single value, or a comma/space separated string.
    Every entry is converted to its absolute integer value and duplicates
    are dropped, keeping first occurrence order.

    Raises:
        ValueError: If an entry is not an integer.
    """
    if value is None or value == "":
        return []

    if isinstance(value, str):
        items: list[Any] = [part for part in re.split(r"[\s,]+", value) if part]
    elif isinstance(value, (list, tuple, set)):
        items = list(value)
    else:
        items = [value]

    result: list[int] = []
    for item in items:
        if isinstance(item, bool):
            raise ValueError(f"Invalid ID: {item!r}")
        object_id = abs(int(item))
        if object_id not in result:
            result.append(object_id)
    return result


def sanitize_slug(value: str) -> str:
    """
    Turn a title or user supplied slug into a URL-safe slug.

    Usage:
        sanitize_slug("About Us!")  # "about-us"
    """
    slug = value.strip().lower().replace(" ", "-")
    slug = _SLUG_INVALID_CHARS.sub("", slug)
    slug = _SLUG_DASHES.sub("-", slug)
    return slug.strip("-")
