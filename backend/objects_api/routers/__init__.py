"""
Object API routers - one router per registered resource type.
"""

from fastapi import APIRouter

from objects_api.resources import RESOURCES
from .objects import build_router


def build_api_router() -> APIRouter:
    """Router combining the routers of every registered resource type."""
    router = APIRouter()
    for config in RESOURCES.values():
        router.include_router(build_router(config))
    return router


__all__ = ["build_router", "build_api_router"]
