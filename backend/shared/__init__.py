"""
Shared module for common utilities used by the object API.

STRUCTURE:
- shared.config: Configuration
  - settings.py: Environment config (Pydantic)
  - logging.py: Structured logging
  - constants.py: Roles, object statuses, query vars

- shared.infrastructure: Database and request plumbing
  - db.py: SQLAlchemy sessions, safe_commit()
  - correlation.py: Request correlation IDs

- shared.utils: Utilities
  - exceptions.py: HTTP exceptions with auto-logging
  - validators.py: ID lists, LIKE escaping, slugs

IMPORT EXAMPLES:
    from shared.infrastructure.db import get_db, safe_commit
    from shared.config.settings import settings
    from shared.config.constants import ObjectStatus
    from shared.utils.exceptions import NotFoundError, ForbiddenError
"""
