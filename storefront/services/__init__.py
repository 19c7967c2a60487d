"""Business services sitting between the API routes and the provider adapters."""

from storefront.services.checkout_service import CheckoutService
from storefront.services.tracking_service import TrackingService
from storefront.services.upload_service import UploadService

__all__ = ["CheckoutService", "TrackingService", "UploadService"]
