from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from storefront.api.dependencies import get_checkout_service
from storefront.domain.schemas.requests import PaymentOrderRequest
from storefront.services.checkout_service import CheckoutService

# Initialize router
payments_router = APIRouter()


@payments_router.post(
    "/razorpay/order",
    status_code=status.HTTP_200_OK,
    summary="Create payment order",
    description="Creates the Razorpay order a checkout payment is collected against."
)
@payments_router.post("/create-razorpay-order", include_in_schema=False)
async def create_payment_order(
    body: PaymentOrderRequest,
    checkout_service: CheckoutService = Depends(get_checkout_service)
) -> Dict[str, Any]:
    """
    Create a payment order.

    Args:
        body: Amount in paise, currency and optional receipt
        checkout_service: Checkout service dependency

    Returns:
        The Razorpay order
    """
    return await checkout_service.create_payment_order(body)
