"""Exception handlers that render errors as JSON responses."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError

from storefront.exceptions import StorefrontError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

VALIDATION_MESSAGE = "Validation error"


def _request_errors(errors) -> dict[str, list[str]]:
    """Group pydantic errors by dotted field path, dropping the ``body`` prefix."""
    grouped: dict[str, list[str]] = {}
    for error in errors:
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path", "header")]
        field = ".".join(location) or "body"
        grouped.setdefault(field, []).append(error.get("msg", "Invalid value"))
    return grouped


def _domain_errors(messages) -> dict[str, list[str]]:
    grouped = {}
    for field, value in dict(messages).items():
        if isinstance(value, (list, tuple)):
            grouped[str(field)] = [str(item) for item in value]
        else:
            grouped[str(field)] = [str(value)]
    return grouped


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"message": VALIDATION_MESSAGE, "errors": _request_errors(exc.errors())},
        )

    @app.exception_handler(ValidationError)
    async def domain_validation_error(request: Request, exc: ValidationError):
        return JSONResponse(
            status_code=400,
            content={"message": VALIDATION_MESSAGE, "errors": _domain_errors(exc.messages)},
        )

    @app.exception_handler(StorefrontError)
    async def storefront_error(request: Request, exc: StorefrontError):
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(ObjectNotFoundError)
    async def not_found(request: Request, exc: ObjectNotFoundError):
        return JSONResponse(status_code=404, content={"message": "Resource not found"})

    @app.exception_handler(Exception)
    async def server_error(request: Request, exc: Exception):
        logger.error(
            "Unhandled error",
            method=request.method,
            path=request.url.path,
            error=str(exc),
            exc_info=exc,
        )
        return JSONResponse(status_code=500, content={"message": "Server Error"})
