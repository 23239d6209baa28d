"""
Infrastructure module: database sessions and request correlation.
"""

from shared.infrastructure.db import (
    engine,
    SessionLocal,
    get_db,
    safe_commit,
)
from shared.infrastructure.correlation import (
    CorrelationIdMiddleware,
    CorrelationIdFilter,
    get_request_id,
)

__all__ = [
    "engine",
    "SessionLocal",
    "get_db",
    "safe_commit",
    "CorrelationIdMiddleware",
    "CorrelationIdFilter",
    "get_request_id",
]
