"""
Object collection endpoints, one router per resource type.

Routes (under /{api_namespace}/{rest_base}):
    GET     ""              list
    POST    ""              create (201 + Location)
    POST    "/batch"        batch create/update/delete
    GET     "/{object_id}"  get
    PUT     "/{object_id}"  update
    PATCH   "/{object_id}"  update
    DELETE  "/{object_id}"  trash, or delete with ?force=true
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, Request, status
from fastapi.responses import JSONResponse

from objects_api.dependencies import controller_dependency
from objects_api.schemas import BatchRequest, ContextParam, DeleteResponse, parse_collection_params
from objects_api.services.objects import MutationOutcome, ObjectsController, ResourceConfig
from shared.config.settings import settings


def _query_values(request: Request) -> dict[str, Any]:
    """
    Raw query string values.

    Repeated keys (``include=1&include=2``) and ``key[]`` keys become lists;
    everything else stays a single string.
    """
    values: dict[str, Any] = {}
    for key in request.query_params.keys():
        items = request.query_params.getlist(key)
        name = key[:-2] if key.endswith("[]") else key
        if name in values:
            continue
        values[name] = items if len(items) > 1 or key.endswith("[]") else items[0]
    return values


def _mutation_response(outcome: MutationOutcome) -> JSONResponse:
    if outcome.error is not None:
        return JSONResponse(
            content=outcome.error.to_dict(),
            status_code=outcome.error.status_code,
            headers=outcome.error.headers,
        )
    headers = {"Location": outcome.location} if outcome.location else None
    return JSONResponse(content=outcome.data, status_code=outcome.status_code, headers=headers)


def build_router(config: ResourceConfig) -> APIRouter:
    """Create the router exposing one resource type."""
    router = APIRouter(
        prefix=f"/{settings.api_namespace.strip('/')}/{config.rest_base}",
        tags=[config.rest_base],
    )
    get_controller = controller_dependency(config)

    @router.get("")
    def list_items(
        request: Request,
        controller: ObjectsController = Depends(get_controller),
    ) -> JSONResponse:
        """List objects. Pagination counts are returned in headers."""
        raw = _query_values(request)
        params = parse_collection_params(raw, config.descriptor.hierarchical)
        result = controller.list_items(params, query=raw)
        return JSONResponse(content=result.items, headers=result.headers)

    @router.post("", status_code=status.HTTP_201_CREATED)
    def create_item(
        body: dict[str, Any] = Body(default_factory=dict),
        controller: ObjectsController = Depends(get_controller),
    ) -> JSONResponse:
        """Create an object."""
        return _mutation_response(controller.create_item(body))

    @router.post("/batch")
    def batch_items(
        body: BatchRequest,
        force: bool = False,
        controller: ObjectsController = Depends(get_controller),
    ) -> dict[str, list[dict[str, Any]]]:
        """Run several creates, updates and deletes in one request."""
        return controller.batch_items(body, force=force)

    @router.get("/{object_id}")
    def get_item(
        object_id: int,
        context: ContextParam = "view",
        controller: ObjectsController = Depends(get_controller),
    ) -> dict[str, Any]:
        """Get a single object."""
        return controller.get_item(object_id, context)

    @router.api_route("/{object_id}", methods=["PUT", "PATCH"])
    def update_item(
        object_id: int,
        body: dict[str, Any] = Body(default_factory=dict),
        controller: ObjectsController = Depends(get_controller),
    ) -> JSONResponse:
        """Update an object. Only fields present in the body change."""
        return _mutation_response(controller.update_item(object_id, body))

    @router.delete("/{object_id}", response_model=DeleteResponse)
    def delete_item(
        object_id: int,
        request: Request,
        force: bool = False,
        controller: ObjectsController = Depends(get_controller),
    ) -> dict[str, Any]:
        """Move an object to the trash, or delete it permanently with force."""
        return controller.delete_item(object_id, force=force, request=dict(request.query_params))

    return router
