from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront.core.exceptions import APIException, UpstreamAPIError, ValidationException
from storefront.core.logging import get_logger

# Initialize logger
logger = get_logger(__name__)


async def handle_api_exception(request: Request, exc: APIException) -> JSONResponse:
    """
    Handle APIException instances.

    Args:
        request: FastAPI request object
        exc: APIException instance

    Returns:
        JSONResponse: Formatted error response
    """
    log = logger.warning if exc.status_code < 500 else logger.error
    log(
        f"API Exception: {exc.detail}",
        extra={
            "request_path": request.url.path,
            "status_code": exc.status_code,
            "error_code": exc.code,
        }
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def handle_upstream_exception(request: Request, exc: UpstreamAPIError) -> JSONResponse:
    """
    Handle error responses from external APIs.

    The upstream status code is passed through to the caller.
    """
    logger.error(
        f"Upstream error from {exc.service}: {exc.detail}",
        extra={
            "request_path": request.url.path,
            "upstream_status": exc.status_code,
            "service": exc.service,
        }
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Handle request bodies that cannot be parsed into the endpoint's model.

    Malformed JSON and wrongly typed fields are client errors, answered with
    400 in the same envelope as every other error.
    """
    errors = [
        {
            "loc": [str(part) for part in error.get("loc", ())],
            "msg": error.get("msg"),
            "type": error.get("type"),
        }
        for error in exc.errors()
    ]
    logger.warning("Request validation error", extra={"request_path": request.url.path, "errors": errors})

    error = ValidationException("Invalid request body", context={"errors": errors})
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error.to_dict()
    )


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render routing errors (unknown path, wrong method) in the common error shape."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": exc.detail,
            "code": "http_error",
        },
        headers=getattr(exc, "headers", None)
    )


async def handle_unhandled_exception(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "error": "Internal server error",
            "code": "internal_server_error",
        }
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Configure global exception handlers for the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(UpstreamAPIError, handle_upstream_exception)
    app.add_exception_handler(APIException, handle_api_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unhandled_exception)
