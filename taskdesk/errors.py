"""
Exception types and FastAPI handlers for the record API.

Validation failures become 400s carrying every field error, missing rows
404s, and database or unexpected errors 500s. Every error body uses the
same `{"error": ...}` envelope.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from taskdesk.models import ValidationFailure

log = logging.getLogger(__name__)


class RecordValidationError(Exception):
    def __init__(self, failure: ValidationFailure):
        self.failure = failure
        super().__init__(failure.first_message())


class RecordNotFoundError(Exception):
    def __init__(self, kind: str):
        self.kind = kind
        super().__init__(f"{kind} not found")


async def record_validation_error_handler(request: Request, exc: RecordValidationError):
    return JSONResponse(
        {
            "error": exc.failure.first_message(),
            "errors": [e.model_dump() for e in exc.failure.errors],
        },
        status_code=400,
    )


async def record_not_found_handler(request: Request, exc: RecordNotFoundError):
    return JSONResponse({"error": str(exc)}, status_code=404)


async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    # malformed JSON or a non-integer path id
    errors = exc.errors()
    message = errors[0]["msg"] if errors else "Invalid request"
    return JSONResponse({"error": message}, status_code=400)


async def database_error_handler(request: Request, exc: SQLAlchemyError):
    log.error("%s %s failed", request.method, request.url.path, exc_info=exc)
    return JSONResponse({"error": str(exc)}, status_code=500)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # auth failures, unknown routes, wrong methods
    return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=exc.headers)


async def generic_exception_handler(request: Request, exc: Exception):
    log.error("Unhandled %s on %s %s", type(exc).__name__, request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        {"error": f"An unexpected server error occurred: {type(exc).__name__}"},
        status_code=500,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RecordValidationError, record_validation_error_handler)
    app.add_exception_handler(RecordNotFoundError, record_not_found_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
