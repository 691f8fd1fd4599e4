"""Global exception handlers: map the error taxonomy to HTTP responses."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from tasklist.core.errors import ErrorKind, TaskListError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register domain, validation and catch-all handlers on the app."""

    @app.exception_handler(TaskListError)
    async def tasklist_error_handler(request: Request, exc: TaskListError) -> JSONResponse:
        if exc.http_status >= 500:
            logger.error("%s on %s: %s", exc.kind.value, request.url.path, exc.message)
        headers = {"WWW-Authenticate": "Bearer"} if exc.kind is ErrorKind.INVALID_CREDENTIALS else None
        return JSONResponse(
            status_code=exc.http_status,
            content={"detail": exc.message},
            headers=headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.info("Validation error on %s: %s", request.url.path, exc.errors())
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "detail": "Invalid request data",
                "errors": [
                    {"field": ".".join(str(loc) for loc in e["loc"]), "message": e["msg"]}
                    for e in exc.errors()
                ],
            },
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception on %s", request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )
