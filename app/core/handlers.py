# app/core/handlers.py
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from app.core.exceptions import BaseAPIException
from app.core.logging import logger


def error_response(status_code: int, code: str, message: str, details: Any = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": {
                "code": code,
                "message": message,
                "details": details
            }
        },
    )

# 1. Errors raised on purpose (validation, not found, storage)
async def custom_api_exception_handler(request: Request, exc: BaseAPIException):
    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
    return error_response(exc.status_code, exc.code, exc.message, exc.details)

# 2. Request shape errors (bad JSON, wrong types, non-numeric id)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    details = []
    for error in exc.errors():
        # "body.email" -> "email", "path.student_id" -> "student_id"
        field = ".".join(str(x) for x in error["loc"] if x not in ("body", "path", "query"))
        details.append({"field": field or "body", "reason": error["msg"]})

    return error_response(
        status.HTTP_400_BAD_REQUEST,
        "VALIDATION_ERROR",
        "Invalid input data",
        details,
    )

# 3. Standard HTTP errors (unknown URL, wrong method)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, "HTTP_ERROR", str(exc.detail))

# 4. Anything else is a bug: log the traceback, hide internals from the client
async def general_exception_handler(request: Request, exc: Exception):
    logger.critical(f"Unhandled Exception: {exc}", exc_info=True)

    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_SERVER_ERROR",
        "An unexpected error occurred. Please contact support.",
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BaseAPIException, custom_api_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
