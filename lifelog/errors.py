"""Error taxonomy and FastAPI exception handlers."""

import logging
from typing import Optional

from fastapi import HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.requests import Request

logger = logging.getLogger("lifelog")


class AppError(Exception):
    code = "app_error"
    status_code = 500

    def __init__(self, message: str, *, code: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        if status_code:
            self.status_code = status_code


class NotAuthorized(AppError):
    code = "unauthorized"
    status_code = 401


class ValidationError(AppError, ValueError):
    code = "validation_error"
    status_code = 400


class NotFoundError(AppError, LookupError):
    code = "not_found"
    status_code = 404


class ConflictError(AppError):
    code = "conflict"
    status_code = 409


class InternalError(AppError):
    code = "internal_error"
    status_code = 500


def _error_payload(code: str, message: str, details=None) -> dict:
    payload = {
        "error": {"code": code, "message": message},
        "detail": message,
    }
    if details is not None:
        payload["error"]["details"] = details
    return payload


async def app_error_handler(request: Request, exc: AppError):
    log_level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
    logger.log(
        log_level,
        "app.error %s %s -> %s %s: %s",
        request.method, request.url.path, exc.status_code, exc.code, exc.message,
        exc_info=exc.status_code >= 500,
    )
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(status_code=exc.status_code, content=_error_payload(exc.code, exc.message), headers=headers)


async def http_error_handler(request: Request, exc: HTTPException):
    code = "not_found" if exc.status_code == 404 else "http_error"
    message = exc.detail if exc.detail else "HTTP error"
    logger.warning("http.error %s %s -> %s", request.method, request.url.path, exc.status_code)
    return JSONResponse(status_code=exc.status_code, content=_error_payload(code, message), headers=exc.headers)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    # Malformed query parameters and bodies are client errors (400), not 422
    details = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
    logger.warning("validation.error %s %s: %s", request.method, request.url.path, details)
    return JSONResponse(status_code=400, content=_error_payload("validation_error", "Validation error", details))


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error("unhandled.exception %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content=_error_payload("internal_error", "Internal server error"))


def register_error_handlers(app) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(HTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
