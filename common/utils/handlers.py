"""
Exception handlers rendering every error with the standard envelope.

Example:
    from common.utils import register_exception_handlers

    app = FastAPI()
    register_exception_handlers(app)
"""

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from common.utils.exceptions import APIException
from common.utils.responses import error_response

logger = logging.getLogger(__name__)

_STATUS_TO_CODE = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    409: "conflict",
    422: "validation_error",
    500: "server_error",
    503: "service_unavailable",
}


def _json_error(status_code: int, message: str, code: str, details=None, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(error_response(message, code=code, details=details)),
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install envelope-producing handlers for API, HTTP, validation and uncaught errors."""

    @app.exception_handler(APIException)
    async def handle_api_exception(request: Request, exc: APIException):
        log_fn = logger.error if exc.status_code >= 500 else logger.info
        log_fn(f"{request.method} {request.url.path} -> {exc.status_code} {exc.code}")
        return _json_error(
            exc.status_code,
            exc.message,
            exc.code or _STATUS_TO_CODE.get(exc.status_code, "server_error"),
            exc.details,
            exc.headers,
        )

    @app.exception_handler(HTTPException)
    async def handle_http_exception(request: Request, exc: HTTPException):
        message = exc.detail if isinstance(exc.detail, str) else "HTTP error"
        return _json_error(
            exc.status_code,
            message,
            _STATUS_TO_CODE.get(exc.status_code, "server_error"),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        errors = [
            {"field": ".".join(str(p) for p in err.get("loc", ())[1:]), "message": err.get("msg")}
            for err in exc.errors()
        ]
        logger.info(f"{request.method} {request.url.path} -> 422 validation_error")
        return _json_error(422, "Validation error", "validation_error", {"errors": errors})

    @app.exception_handler(Exception)
    async def handle_uncaught(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        return _json_error(500, "Internal server error", "server_error")
