"""Summary: FastAPI application for TaskPilot.

Importance: Exposes the login and task routes behind bearer authentication.
Alternatives: Use a CLI-only workflow or a different web framework.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from taskpilot.app import AppServices, build_services
from taskpilot.config import AppConfig
from taskpilot.errors import ErrorKind
from taskpilot.middleware import AccessPolicyMiddleware, AuthenticationMiddleware
from taskpilot.models import Credentials, Task


logger = logging.getLogger(__name__)

CORS_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
CORS_HEADERS = ["Origin", "Content-Type", "Accept", "Authorization"]


class LoginRequest(BaseModel):
    """Summary: Request payload for login.

    Importance: Missing fields count as wrong credentials rather than a validation error.
    Alternatives: Require both fields and return 422 when absent.
    """

    username: str = ""
    password: str = ""

    @classmethod
    def from_body(cls, body: bytes) -> "LoginRequest":
        """Summary: Parse a raw login body, treating any unusable shape as empty.

        Importance: Every non-matching body fails as wrong credentials (401), never 422.
        Alternatives: Let FastAPI validate the body and reject bad shapes with 422.
        """

        try:
            return cls.model_validate_json(body)
        except ValidationError:
            return cls()


class TaskRequest(BaseModel):
    """Summary: Request payload for task creation and update.

    Importance: Accepts the camelCase field names used by browser clients; id is ignored.
    Alternatives: Use snake_case JSON throughout.
    """

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(min_length=1)
    description: str | None = None
    status: str | None = None
    due_date: datetime | None = Field(default=None, alias="dueDate")

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("title must not be blank")
        return value

    def to_task(self) -> Task:
        return Task(
            title=self.title,
            description=self.description,
            status=self.status,
            due_date=self.due_date,
        )


def _task_payload(task: Task) -> dict[str, Any]:
    """Summary: Serialize a task for JSON responses.

    Importance: Keeps the wire format stable and camelCased.
    Alternatives: Return a Pydantic response model.
    """

    return {
        "id": task.id,
        "title": task.title,
        "description": task.description,
        "createdAt": task.created_at.isoformat() if task.created_at else None,
        "dueDate": task.due_date.isoformat() if task.due_date else None,
        "status": task.status,
    }


def _raise_for(kind: ErrorKind) -> None:
    raise HTTPException(status_code=kind.status_code, detail=kind.message)


def create_app(config: AppConfig, services: AppServices | None = None) -> FastAPI:
    """Summary: Create a FastAPI app wired to TaskPilot services.

    Importance: Ensures the API layer shares one token service and one store per process.
    Alternatives: Instantiate services globally outside the factory.
    """

    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=config.log_level.upper(), format="%(levelname)s %(name)s: %(message)s"
        )
    app = FastAPI(title="TaskPilot API", version="0.1.0")
    services = services or build_services(config)
    app.state.services = services

    # Added last so it runs first: CORS, then authentication, then policy.
    app.add_middleware(AccessPolicyMiddleware, policy=services.policy)
    app.add_middleware(AuthenticationMiddleware, tokens=services.tokens)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=CORS_METHODS,
        allow_headers=CORS_HEADERS,
    )

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
        """Summary: Map unexpected errors to a generic 500.

        Importance: Keeps stack traces and internals out of response bodies.
        Alternatives: Rely on the framework's default error page.
        """

        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    @app.get("/health")
    def health() -> dict[str, str]:
        """Summary: Health check endpoint.

        Importance: Supports uptime checks in local and container deployments.
        Alternatives: Use a metrics endpoint only.
        """

        return {"status": "ok"}

    @app.post("/api/auth/login")
    async def login(request: Request) -> dict[str, str]:
        """Summary: Exchange the fixed credentials for a bearer token.

        Importance: The only way to obtain a token.
        Alternatives: Use OAuth or session cookies.
        """

        payload = LoginRequest.from_body(await request.body())
        outcome = services.auth.login(Credentials(username=payload.username, password=payload.password))
        if not outcome.ok:
            _raise_for(outcome.error)
        return {"token": outcome.value}

    @app.get("/api/tasks")
    def list_tasks() -> list[dict[str, Any]]:
        """Summary: List all tasks.

        Importance: Provides data for UI clients.
        Alternatives: Paginate results.
        """

        return [_task_payload(task) for task in services.tasks.list_tasks()]

    @app.post("/api/tasks", status_code=201)
    def create_task(payload: TaskRequest) -> dict[str, Any]:
        """Summary: Create a task, enriching a blank description.

        Importance: Always succeeds even when the suggestion endpoint is down.
        Alternatives: Require clients to send a description.
        """

        return _task_payload(services.tasks.create_task(payload.to_task()))

    @app.put("/api/tasks/{task_id}")
    def update_task(task_id: int, payload: TaskRequest) -> dict[str, Any]:
        """Summary: Update an existing task.

        Importance: Returns 404 when the task does not exist.
        Alternatives: Create the task when missing.
        """

        outcome = services.tasks.update_task(task_id, payload.to_task())
        if not outcome.ok:
            _raise_for(outcome.error)
        return _task_payload(outcome.value)

    @app.delete("/api/tasks/{task_id}", status_code=204)
    def delete_task(task_id: int) -> Response:
        """Summary: Delete a task.

        Importance: Idempotent; unknown ids also return 204.
        Alternatives: Return 404 for unknown ids.
        """

        services.tasks.delete_task(task_id)
        return Response(status_code=204)

    return app


def create_app_from_env() -> FastAPI:
    """Summary: Build the app from environment configuration.

    Importance: Factory target for uvicorn so importing this module has no side effects.
    Alternatives: Create a module-level app at import time.
    """

    return create_app(AppConfig.from_env())
