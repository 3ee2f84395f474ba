"""FastAPI app factory.

Endpoints are intentionally thin wrappers over `WorkflowService`. Domain errors
map to HTTP as: validation/transition rejections -> 400, unknown ids -> 404,
duplicate definition ids and lost update races -> 409.
"""

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from fastapi import Body, FastAPI, HTTPException, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from workflow_engine import __version__
from workflow_engine.engine.errors import (
    ConflictError,
    NotFoundError,
    TransitionError,
    ValidationError,
    WorkflowError,
)
from workflow_engine.engine.service import WorkflowService
from workflow_engine.server.config import ServerSettings
from workflow_engine.server.models import ApiDefinition, ApiHealth, ApiInstance

logger = logging.getLogger(__name__)


def _http_error(status_code: int, error: WorkflowError) -> HTTPException:
    return HTTPException(
        status_code=status_code, detail={"error": error.message, "kind": error.kind}
    )


def _service(request: Request) -> WorkflowService:
    service = getattr(request.app.state, "service", None)
    if not isinstance(service, WorkflowService):
        # This should never happen for the real app, but keeps the API fail-fast.
        raise HTTPException(status_code=500, detail="Workflow service not configured")
    return service


def create_app(
    settings: ServerSettings | None = None, service: WorkflowService | None = None
) -> FastAPI:
    settings = settings if settings is not None else ServerSettings()
    if service is None:
        service = WorkflowService(max_transition_retries=settings.max_transition_retries)

    app = FastAPI(
        title="Workflow Engine",
        version=__version__,
        description="REST API for defining finite-state workflows and driving their instances.",
    )

    app.state.settings = settings
    app.state.service = service
    logger.debug(
        "Created app",
        extra={"max_transition_retries": settings.max_transition_retries},
    )

    origins = settings.parsed_cors_origins()
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.get("/health", response_model=ApiHealth)
    def health() -> ApiHealth:
        return ApiHealth(status="ok", version=__version__)

    @app.post("/definitions", response_model=ApiDefinition, status_code=201)
    def create_definition(
        request: Request,
        response: Response,
        payload: Any = Body(default=None),
    ) -> ApiDefinition:
        try:
            definition = _service(request).create_definition_from_json(payload)
        except ValidationError as e:
            raise _http_error(400, e) from e
        except ConflictError as e:
            raise _http_error(409, e) from e
        response.headers["Location"] = f"/definitions/{definition.id}"
        return ApiDefinition.from_definition(definition)

    @app.get("/definitions", response_model=list[ApiDefinition])
    def list_definitions(request: Request) -> list[ApiDefinition]:
        return [ApiDefinition.from_definition(d) for d in _service(request).list_definitions()]

    @app.get("/definitions/{definition_id}", response_model=ApiDefinition)
    def get_definition(request: Request, definition_id: UUID) -> ApiDefinition:
        try:
            return ApiDefinition.from_definition(_service(request).get_definition(definition_id))
        except NotFoundError as e:
            raise _http_error(404, e) from e

    @app.post(
        "/definitions/{definition_id}/instances", response_model=ApiInstance, status_code=201
    )
    def start_instance(request: Request, response: Response, definition_id: UUID) -> ApiInstance:
        try:
            instance = _service(request).start_instance(definition_id)
        except NotFoundError as e:
            raise _http_error(404, e) from e
        except TransitionError as e:
            raise _http_error(400, e) from e
        except ConflictError as e:
            raise _http_error(409, e) from e
        response.headers["Location"] = f"/instances/{instance.id}"
        return ApiInstance.from_instance(instance)

    @app.get("/instances", response_model=list[ApiInstance])
    def list_instances(request: Request) -> list[ApiInstance]:
        return [ApiInstance.from_instance(i) for i in _service(request).list_instances()]

    @app.get("/instances/{instance_id}", response_model=ApiInstance)
    def get_instance(request: Request, instance_id: UUID) -> ApiInstance:
        try:
            return ApiInstance.from_instance(_service(request).get_instance(instance_id))
        except NotFoundError as e:
            raise _http_error(404, e) from e

    @app.post("/instances/{instance_id}/actions/{action_id}", response_model=ApiInstance)
    def execute_action(request: Request, instance_id: UUID, action_id: UUID) -> ApiInstance:
        try:
            instance = _service(request).execute_action(instance_id, action_id)
        except NotFoundError as e:
            raise _http_error(404, e) from e
        except TransitionError as e:
            raise _http_error(400, e) from e
        except ConflictError as e:
            raise _http_error(409, e) from e
        return ApiInstance.from_instance(instance)

    return app
