from storefront.domain.schemas.requests import (
    CartItem,
    CreateOrderRequest,
    CustomerAddress,
    PaymentOrderRequest,
    TrackingRequest,
    UploadRequest,
)

__all__ = [
    "CartItem",
    "CreateOrderRequest",
    "CustomerAddress",
    "PaymentOrderRequest",
    "TrackingRequest",
    "UploadRequest",
]
