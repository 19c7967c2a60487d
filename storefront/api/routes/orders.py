from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from storefront.api.dependencies import get_checkout_service
from storefront.domain.schemas.requests import CreateOrderRequest
from storefront.services.checkout_service import CheckoutService

# Initialize router
orders_router = APIRouter()


@orders_router.post(
    "/shopify/create-order",
    status_code=status.HTTP_200_OK,
    summary="Confirm payment and create order",
    description=(
        "Verifies the Razorpay payment signature and creates the paid order "
        "in Shopify."
    )
)
@orders_router.post("/create-shopify-order", include_in_schema=False)
async def create_order(
    body: CreateOrderRequest,
    checkout_service: CheckoutService = Depends(get_checkout_service)
) -> Dict[str, Any]:
    """Confirm a paid checkout and create the Shopify order."""
    return await checkout_service.confirm_order(body)
