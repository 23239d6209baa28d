"""
CORS configuration.

Browser clients need to read the pagination and location headers, so they
are exposed explicitly.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.config.settings import settings

# Used when ALLOWED_ORIGINS is empty (local frontends)
DEVELOPMENT_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
]

ALLOWED_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
ALLOWED_HEADERS = ["Authorization", "Content-Type", "Accept", "X-Request-ID"]
EXPOSED_HEADERS = ["X-Request-ID", "X-Total-Count", "X-Total-Pages", "Link", "Location"]


def get_cors_origins() -> list[str]:
    """Origins from ALLOWED_ORIGINS (comma-separated), else the development list."""
    origins = [origin.strip() for origin in settings.allowed_origins.split(",") if origin.strip()]
    return origins or DEVELOPMENT_ORIGINS


def configure_cors(app: FastAPI) -> None:
    origins = get_cors_origins()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # Browsers reject credentials with a wildcard origin
        allow_credentials="*" not in origins,
        allow_methods=ALLOWED_METHODS,
        allow_headers=ALLOWED_HEADERS,
        expose_headers=EXPOSED_HEADERS,
        max_age=0 if settings.debug else 600,
    )
