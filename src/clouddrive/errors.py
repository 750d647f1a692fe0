"""Error taxonomy of the API and the handlers that turn errors into JSON responses."""

import logging

import pydantic
from fastapi import (
    Request,
    status,
)
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class CloudDriveError(Exception):
    """Base class for errors reported to API callers as `{"error": <message>}`."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(CloudDriveError):
    """A required field is missing or empty, e.g. no files or no object key."""

    status_code = status.HTTP_400_BAD_REQUEST


class ConfigurationError(CloudDriveError):
    """The server is missing configuration it needs, e.g. the bucket name."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class UpstreamError(CloudDriveError):
    """A call to the storage service failed. The message is passed through verbatim."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


async def handle_clouddrive_errors(request: Request, exc: CloudDriveError) -> JSONResponse:
    """Render a domain error with its own status code."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message},
    )


def _describe_validation_errors(errors) -> str:
    parts = []
    for error in errors:
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        parts.append(f"{location}: {error['msg']}" if location else error["msg"])
    return "; ".join(parts) or "Invalid request"


async def handle_request_validation_errors(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies are rejected with 400, like missing required fields."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": _describe_validation_errors(exc.errors())},
    )


async def handle_pydantic_validation_errors(request: Request, exc: pydantic.ValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": _describe_validation_errors(exc.errors())},
    )


async def handle_broad_exceptions(request: Request, call_next):
    """Handle any exception that propagates out of the route handlers."""
    try:
        return await call_next(request)
    except Exception as err:
        logger.exception(err)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )
