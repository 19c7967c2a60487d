from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from typing import List

from storefront.core.config import Settings, get_settings
from storefront.core.logging import get_logger

# Initialize router and logger
health_router = APIRouter()
logger = get_logger(__name__)


class HealthStatus(BaseModel):
    """Basic health status response model."""
    status: str
    version: str
    service: str


class IntegrationStatus(BaseModel):
    """Whether an external integration has the credentials it needs."""
    name: str
    configured: bool
    mode: str


class DetailedHealthStatus(HealthStatus):
    """Detailed health status with integration information."""
    integrations: List[IntegrationStatus]


@health_router.get(
    "",
    response_model=HealthStatus,
    status_code=status.HTTP_200_OK,
    summary="Basic health check",
    description="Returns basic health status of the service."
)
async def get_health(settings: Settings = Depends(get_settings)) -> HealthStatus:
    """
    Basic health check endpoint.

    Returns:
        HealthStatus: Basic service health status
    """
    logger.debug("Health check requested")
    return HealthStatus(status="ok", version=settings.VERSION, service=settings.PROJECT_NAME)


@health_router.get(
    "/detailed",
    response_model=DetailedHealthStatus,
    status_code=status.HTTP_200_OK,
    summary="Detailed health check",
    description="Returns health status including which integrations are configured."
)
async def get_detailed_health(settings: Settings = Depends(get_settings)) -> DetailedHealthStatus:
    """
    Detailed health check endpoint.

    Only reports whether credentials are present, never their values.
    Upstream APIs are not called.
    """
    logger.debug("Detailed health check requested")

    if settings.razorpay_configured:
        razorpay_mode = "live"
    elif settings.PAYMENT_TEST_MODE:
        razorpay_mode = "mock"
    else:
        razorpay_mode = "disabled"

    if settings.shopify_static_token_configured:
        shopify_mode = "static_token"
    elif settings.shopify_client_credentials_configured:
        shopify_mode = "client_credentials"
    else:
        shopify_mode = "disabled"

    if not settings.cloudinary_configured:
        cloudinary_mode = "disabled"
    elif settings.cloudinary_signed_uploads:
        cloudinary_mode = "signed"
    else:
        cloudinary_mode = "unsigned"

    integrations = [
        IntegrationStatus(name="razorpay", configured=settings.razorpay_configured, mode=razorpay_mode),
        IntegrationStatus(name="shopify", configured=settings.shopify_configured, mode=shopify_mode),
        IntegrationStatus(name="cloudinary", configured=settings.cloudinary_configured, mode=cloudinary_mode),
    ]

    return DetailedHealthStatus(
        status="ok" if all(i.configured for i in integrations) else "degraded",
        version=settings.VERSION,
        service=settings.PROJECT_NAME,
        integrations=integrations
    )
