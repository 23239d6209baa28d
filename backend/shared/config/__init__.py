"""
Configuration module: Settings, logging, constants.
"""

from shared.config.settings import settings, get_settings, DATABASE_URL
from shared.config.logging import get_logger, setup_logging
from shared.config.constants import (
    Roles,
    ObjectStatus,
    Context,
    OrderBy,
    DateColumn,
    Limits,
    EDITING_ROLES,
    CORE_QUERY_VARS,
)

__all__ = [
    # settings
    "settings",
    "get_settings",
    "DATABASE_URL",
    # logging
    "get_logger",
    "setup_logging",
    # constants
    "Roles",
    "ObjectStatus",
    "Context",
    "OrderBy",
    "DateColumn",
    "Limits",
    "EDITING_ROLES",
    "CORE_QUERY_VARS",
]
