"""
Centralized HTTP exceptions for consistent error handling.

Every error carries a machine-readable ``code``, a human ``detail`` message,
the HTTP status and optional extra ``data``. The same classes are raised by
the controller and returned as values across the domain adapter boundary.

Usage:
    from shared.utils.exceptions import NotFoundError, ForbiddenError, ValidationError

    raise NotFoundError("page", 123)
    raise ForbiddenError("page", "delete", status_code=401)
    return ValidationError("invalid_title", "Title is required", status_code=400)
"""

from typing import Any

from fastapi import HTTPException, status

from shared.config.logging import get_logger

logger = get_logger(__name__)


class AppException(HTTPException):
    """
    Base exception with automatic logging.

    All custom exceptions should inherit from this class
    to ensure consistent logging and response format.
    """

    def __init__(
        self,
        status_code: int,
        code: str,
        detail: str,
        data: dict[str, Any] | None = None,
        log_level: str = "warning",
        headers: dict[str, str] | None = None,
        **log_context: Any,
    ):
        self.code = code
        self.data = dict(data or {})

        log_fn = getattr(logger, log_level, logger.warning)
        log_fn(detail, code=code, status_code=status_code, **log_context)

        super().__init__(status_code=status_code, detail=detail, headers=headers)

    @property
    def message(self) -> str:
        return self.detail

    def to_dict(self) -> dict[str, Any]:
        """Error envelope returned to clients."""
        return {
            "code": self.code,
            "message": self.detail,
            "data": {"status": self.status_code, **self.data},
        }


# =============================================================================
# 404 Not Found Errors
# =============================================================================


class NotFoundError(AppException):
    """
    Object not found, or resolved to the sentinel ID 0 (404).

    Usage:
        raise NotFoundError("page", 123)
    """

    def __init__(self, object_type: str, object_id: int | None = None, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            code=f"{object_type}_invalid_id",
            detail="Invalid ID.",
            object_type=object_type,
            object_id=object_id,
            **log_context,
        )


# =============================================================================
# 401 / 403 Authorization Errors
# =============================================================================


class ForbiddenError(AppException):
    """
    Permission gate denial.

    The status is 401 for anonymous requesters and 403 otherwise; the
    permission gate decides which through ``authorization_required_code``.

    Usage:
        raise ForbiddenError("page", "delete", status_code=gate.authorization_required_code())
    """

    def __init__(
        self,
        object_type: str,
        action: str,
        status_code: int = status.HTTP_403_FORBIDDEN,
        object_id: int | None = None,
        **log_context: Any,
    ):
        super().__init__(
            status_code=status_code,
            code=f"user_cannot_{action}_{object_type}",
            detail=f"Sorry, you are not allowed to {action} {object_type}.",
            object_type=object_type,
            object_id=object_id,
            **log_context,
        )


# =============================================================================
# 400 Bad Request Errors
# =============================================================================


class ValidationError(AppException):
    """
    Field or data problem reported by the domain adapter.

    Code, message, status and extra data are passed through verbatim.

    Usage:
        ValidationError("invalid_parent", "Parent does not exist", data={"param": "parent_id"})
    """

    def __init__(
        self,
        code: str,
        detail: str,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        data: dict[str, Any] | None = None,
        **log_context: Any,
    ):
        super().__init__(
            status_code=status_code,
            code=code,
            detail=detail,
            data=data,
            **log_context,
        )


class ConflictError(AppException):
    """
    Create request targeting an existing identity (400).

    Usage:
        raise ConflictError("page")
    """

    def __init__(self, object_type: str, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            code=f"{object_type}_exists",
            detail=f"Cannot create existing {object_type}.",
            object_type=object_type,
            **log_context,
        )


class BatchLimitError(AppException):
    """Batch request carries more items than allowed (413)."""

    def __init__(self, limit: int, received: int, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            code="request_entity_too_large",
            detail=f"Unable to accept more than {limit} items for this request.",
            data={"limit": limit},
            received=received,
            **log_context,
        )


# =============================================================================
# Delete State Errors
# =============================================================================


class AlreadyDeletedError(AppException):
    """Soft delete requested on an object already in the trash (410)."""

    def __init__(self, object_type: str, object_id: int | None = None, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_410_GONE,
            code="already_trashed",
            detail=f"The {object_type} has already been deleted.",
            object_type=object_type,
            object_id=object_id,
            **log_context,
        )


class NotSupportedError(AppException):
    """Soft delete is not supported for this resource type (501)."""

    def __init__(self, object_type: str, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_501_NOT_IMPLEMENTED,
            code="trash_not_supported",
            detail=f"The {object_type} does not support trashing.",
            object_type=object_type,
            **log_context,
        )


# =============================================================================
# 500 Internal Server Errors
# =============================================================================


class DeleteFailedError(AppException):
    """The delete mutation did not reach the expected state (500)."""

    def __init__(self, object_type: str, object_id: int | None = None, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            code="cannot_delete",
            detail=f"The {object_type} cannot be deleted.",
            log_level="error",
            object_type=object_type,
            object_id=object_id,
            **log_context,
        )


class InternalError(AppException):
    """
    Internal server error (500).

    Usage:
        raise InternalError("save_failed", "Failed to persist object", object_id=123)
    """

    def __init__(
        self,
        code: str = "internal_error",
        detail: str = "Internal server error.",
        **log_context: Any,
    ):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            code=code,
            detail=detail,
            log_level="error",
            **log_context,
        )
