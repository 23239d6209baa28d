"""
Objects API main application.
Entry point for the FastAPI REST server.
"""

from fastapi import FastAPI

from objects_api.core import (
    configure_cors,
    lifespan,
    register_exception_handlers,
    register_middlewares,
)
from objects_api.routers import build_api_router
from shared.config.settings import settings


# Create FastAPI application
app = FastAPI(
    title="Objects API",
    description="Generic CRUD API for paginated, permission-gated object collections",
    version="0.1.0",
    lifespan=lifespan,
)

register_exception_handlers(app)
register_middlewares(app)
configure_cors(app)


# =============================================================================
# Health Check
# =============================================================================


@app.get("/api/health")
def health_check():
    """Basic health check endpoint."""
    return {
        "status": "healthy",
        "service": "objects-api",
        "environment": settings.environment,
    }


# =============================================================================
# Include Routers
# =============================================================================

app.include_router(build_api_router())


# =============================================================================
# Development entry point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "objects_api.main:app",
        host="0.0.0.0",
        port=settings.rest_api_port,
        reload=True,
    )
