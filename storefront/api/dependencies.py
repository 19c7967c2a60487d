import httpx
from fastapi import Depends, Request

from storefront.adapters.carriers import EkartTrackingClient
from storefront.adapters.cloudinary import CloudinaryClient
from storefront.adapters.razorpay import RazorpayClient
from storefront.adapters.shopify import ShopifyAdminClient
from storefront.core.config import Settings, get_settings
from storefront.core.logging import get_logger
from storefront.infrastructure.auth.oauth import ShopifyTokenProvider
from storefront.infrastructure.cache.memory_cache import MemoryCache
from storefront.infrastructure.http import build_async_client
from storefront.services.checkout_service import CheckoutService
from storefront.services.tracking_service import TrackingService
from storefront.services.upload_service import UploadService

# Initialize logger
logger = get_logger(__name__)


def get_http_client(
    request: Request,
    settings: Settings = Depends(get_settings)
) -> httpx.AsyncClient:
    """
    Dependency for providing the shared outbound HTTP client.

    The client is created on first use and kept on the application state,
    where the shutdown hook closes it.

    Returns:
        httpx.AsyncClient: Shared client
    """
    client = getattr(request.app.state, "http_client", None)
    if client is None or client.is_closed:
        logger.debug("Creating shared HTTP client")
        client = build_async_client(settings)
        request.app.state.http_client = client
    return client


def get_token_provider(
    request: Request,
    settings: Settings = Depends(get_settings),
    http_client: httpx.AsyncClient = Depends(get_http_client)
) -> ShopifyTokenProvider:
    """
    Dependency for providing the Shopify access token provider.

    One provider lives for the lifetime of the application so that an
    acquired token is reused across requests.
    """
    provider = getattr(request.app.state, "token_provider", None)
    if provider is None:
        provider = ShopifyTokenProvider(settings, http_client)
        request.app.state.token_provider = provider
    return provider


def get_payment_client(
    settings: Settings = Depends(get_settings),
    http_client: httpx.AsyncClient = Depends(get_http_client)
) -> RazorpayClient:
    return RazorpayClient(settings, http_client)


def get_commerce_client(
    settings: Settings = Depends(get_settings),
    http_client: httpx.AsyncClient = Depends(get_http_client)
) -> ShopifyAdminClient:
    return ShopifyAdminClient(settings, http_client)


def get_checkout_service(
    settings: Settings = Depends(get_settings),
    payment_client: RazorpayClient = Depends(get_payment_client),
    commerce_client: ShopifyAdminClient = Depends(get_commerce_client),
    token_provider: ShopifyTokenProvider = Depends(get_token_provider)
) -> CheckoutService:
    """Dependency for providing the checkout service."""
    return CheckoutService(settings, payment_client, commerce_client, token_provider)


def get_image_client(
    settings: Settings = Depends(get_settings),
    http_client: httpx.AsyncClient = Depends(get_http_client)
) -> CloudinaryClient:
    return CloudinaryClient(settings, http_client)


def get_upload_service(
    settings: Settings = Depends(get_settings),
    image_client: CloudinaryClient = Depends(get_image_client)
) -> UploadService:
    """Dependency for providing the design upload service."""
    return UploadService(settings, image_client)


def get_tracking_cache(
    request: Request,
    settings: Settings = Depends(get_settings)
) -> MemoryCache:
    """
    Dependency for providing the tracking result cache.

    The cache is process-local and only saves repeated carrier lookups.
    """
    cache = getattr(request.app.state, "tracking_cache", None)
    if cache is None:
        cache = MemoryCache(default_ttl=settings.TRACKING_CACHE_TTL)
        request.app.state.tracking_cache = cache
    return cache


def get_tracking_service(
    settings: Settings = Depends(get_settings),
    cache: MemoryCache = Depends(get_tracking_cache),
    http_client: httpx.AsyncClient = Depends(get_http_client)
) -> TrackingService:
    """Dependency for providing the shipment tracking service."""
    return TrackingService(settings, cache, EkartTrackingClient(settings, http_client))
