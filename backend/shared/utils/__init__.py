"""
Utilities module: Exceptions, validators.
"""

from shared.utils.exceptions import (
    AppException,
    NotFoundError,
    ForbiddenError,
    ValidationError,
    ConflictError,
    NotSupportedError,
    AlreadyDeletedError,
    DeleteFailedError,
)
from shared.utils.validators import (
    escape_like_pattern,
    parse_id_list,
    sanitize_slug,
)

__all__ = [
    # exceptions
    "AppException",
    "NotFoundError",
    "ForbiddenError",
    "ValidationError",
    "ConflictError",
    "NotSupportedError",
    "AlreadyDeletedError",
    "DeleteFailedError",
    # validators
    "escape_like_pattern",
    "parse_id_list",
    "sanitize_slug",
]
