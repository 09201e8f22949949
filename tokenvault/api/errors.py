"""Structured error responses for vault exceptions."""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import structlog

from ..adapters.base import StoreError, TokenNotFound
from ..middleware import get_correlation_id
from ..services.crypto import CryptoError, CryptoInitError, DecodeError, AuthenticationError
from ..services.vault import BadRequest

log = structlog.get_logger()

# Server-side messages stay generic; details go to the log only
_CRYPTO_MESSAGES = {
    CryptoInitError: "Vault encryption is misconfigured",
    DecodeError: "Stored token payload is corrupt",
    AuthenticationError: "Stored token payload failed authentication",
}


def error_response(request: Request, status_code: int, error: str, message) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": error,
            "message": message,
            "status_code": status_code,
            "correlation_id": get_correlation_id(),
            "path": str(request.url.path),
        },
    )


async def bad_request_handler(request: Request, exc: BadRequest):
    log.warning("http.bad_request", detail=str(exc), path=request.url.path)
    return error_response(request, 400, "BadRequest", str(exc) or "Bad request")


async def token_not_found_handler(request: Request, exc: TokenNotFound):
    log.info("http.token_not_found", path=request.url.path)
    return error_response(request, 404, "TokenNotFound", "token not found")


async def crypto_error_handler(request: Request, exc: CryptoError):
    log.error(
        "http.crypto_error",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
    )
    message = _CRYPTO_MESSAGES.get(type(exc), "Cryptographic operation failed")
    return error_response(request, 500, type(exc).__name__, message)


async def store_error_handler(request: Request, exc: StoreError):
    log.error("http.store_error", error=str(exc), path=request.url.path)
    return error_response(request, 503, "StoreError", "Token store unavailable")


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # Only location, message and type: echoing the input could leak the payload
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]
    log.warning("http.validation_error", errors=len(errors), path=request.url.path)
    return error_response(request, 422, "ValidationError", errors)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    log.warning(
        "http.exception",
        status_code=exc.status_code,
        detail=exc.detail,
        path=request.url.path,
    )
    response = error_response(request, exc.status_code, "HTTPException", exc.detail)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def unhandled_exception_handler(request: Request, exc: Exception):
    log.error(
        "unhandled.exception",
        error=str(exc),
        error_type=exc.__class__.__name__,
        path=request.url.path,
        exc_info=exc,
    )
    return error_response(request, 500, "InternalServerError", "An unexpected error occurred")


def register_error_handlers(app: FastAPI) -> None:
    """Map vault exceptions to HTTP responses."""
    app.add_exception_handler(BadRequest, bad_request_handler)
    app.add_exception_handler(TokenNotFound, token_not_found_handler)
    app.add_exception_handler(CryptoError, crypto_error_handler)
    app.add_exception_handler(StoreError, store_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
