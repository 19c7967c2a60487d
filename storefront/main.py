from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
import time
from typing import Callable

from storefront.api.error_handlers import handle_unhandled_exception, register_exception_handlers
from storefront.core.config import get_settings, load_env_file
from storefront.core.logging import configure_logging, get_logger, set_correlation_id


# Load environment variables and configure logging early
load_env_file()
configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logger.info(f"Starting up {settings.PROJECT_NAME}")
    yield
    logger.info(f"Shutting down {settings.PROJECT_NAME}")

    http_client = getattr(app.state, "http_client", None)
    if http_client is not None:
        await http_client.aclose()


def create_application() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    settings = get_settings()

    # Create FastAPI app with metadata
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        docs_url=f"{settings.API_PREFIX}/docs",
        redoc_url=None,
        debug=settings.DEBUG,
        lifespan=lifespan
    )

    # Register middleware
    configure_middleware(app)

    # Register exception handlers
    register_exception_handlers(app)

    # Register routers
    register_routers(app)

    return app


def configure_middleware(app: FastAPI) -> None:
    """
    Configure middleware components for the FastAPI application.

    CORS is registered last so it wraps everything else, including the 500
    responses the request tracking middleware renders for unhandled errors.

    Args:
        app: FastAPI application instance
    """
    settings = get_settings()

    # Request tracking middleware
    @app.middleware("http")
    async def add_correlation_id(request: Request, call_next: Callable):
        # Extract or generate correlation ID
        correlation_id = set_correlation_id(request.headers.get("X-Correlation-ID"))

        # Track request timing
        start_time = time.time()

        # Process request
        try:
            response = await call_next(request)
        except Exception as e:
            process_time = time.time() - start_time
            logger.error(
                f"Request failed: {str(e)}",
                extra={
                    "request_path": request.url.path,
                    "method": request.method,
                    "process_time_ms": round(process_time * 1000, 2),
                }
            )
            response = await handle_unhandled_exception(request, e)

        # Add correlation ID to response headers
        response.headers["X-Correlation-ID"] = correlation_id

        # Log request completion
        process_time = time.time() - start_time
        logger.info(
            "Request completed",
            extra={
                "request_path": request.url.path,
                "method": request.method,
                "status_code": response.status_code,
                "process_time_ms": round(process_time * 1000, 2)
            }
        )

        return response

    # CORS middleware; without credentials a wildcard origin is sent as a literal "*"
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )



def register_routers(app: FastAPI) -> None:
    """
    Register API routers with the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    settings = get_settings()

    # Import routers here to avoid circular imports
    from storefront.api.routes.health import health_router
    from storefront.api.routes.orders import orders_router
    from storefront.api.routes.payments import payments_router
    from storefront.api.routes.tracking import tracking_router
    from storefront.api.routes.uploads import uploads_router

    app.include_router(health_router, prefix=f"{settings.API_PREFIX}/health", tags=["Health"])
    app.include_router(payments_router, prefix=settings.API_PREFIX, tags=["Payments"])
    app.include_router(orders_router, prefix=settings.API_PREFIX, tags=["Orders"])
    app.include_router(uploads_router, prefix=f"{settings.API_PREFIX}/uploads", tags=["Uploads"])
    app.include_router(tracking_router, prefix=f"{settings.API_PREFIX}/tracking", tags=["Tracking"])


app = create_application()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("storefront.main:app", host="0.0.0.0", port=8000, reload=get_settings().DEBUG)
