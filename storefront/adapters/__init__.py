"""
Adapters for the external APIs the storefront depends on.

Each adapter owns the wire format of one provider and raises the service's
own exceptions, so callers never deal with provider-specific errors.
"""

from storefront.adapters.carriers import EkartTrackingClient
from storefront.adapters.cloudinary import CloudinaryClient
from storefront.adapters.razorpay import RazorpayClient
from storefront.adapters.shopify import ShopifyAdminClient

__all__ = [
    "CloudinaryClient",
    "EkartTrackingClient",
    "RazorpayClient",
    "ShopifyAdminClient",
]
