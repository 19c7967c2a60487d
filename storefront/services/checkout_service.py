import math
from typing import Any, Dict

from storefront.adapters.razorpay import RazorpayClient, to_minor_units
from storefront.adapters.shopify import ShopifyAdminClient
from storefront.core.config import Settings
from storefront.core.exceptions import (
    ConfigurationError,
    PaymentVerificationError,
    UpstreamAPIError,
    ValidationException,
)
from storefront.core.logging import get_logger
from storefront.domain.schemas.requests import CreateOrderRequest, PaymentOrderRequest
from storefront.infrastructure.auth.oauth import ShopifyTokenProvider
from storefront.services.order_mapping import build_order_payload, summarise_order

logger = get_logger(__name__)


class CheckoutService:
    """
    Orchestrates checkout across the payment gateway and the commerce backend.

    Checkout happens in two calls from the storefront. First a payment order
    is created so the Razorpay widget can collect payment. Once the shopper has
    paid, the payment is confirmed: the request is validated, the Razorpay
    signature checked, an Admin API token obtained and the paid order submitted
    to Shopify.

    The steps run in sequence and nothing is retried. If Shopify rejects an
    order after Razorpay has taken the money, the failure is logged with both
    payment identifiers for manual follow-up and the error is returned as-is.
    """

    def __init__(
        self,
        settings: Settings,
        payment_client: RazorpayClient,
        commerce_client: ShopifyAdminClient,
        token_provider: ShopifyTokenProvider,
    ):
        self.settings = settings
        self.payment_client = payment_client
        self.commerce_client = commerce_client
        self.token_provider = token_provider

    async def create_payment_order(self, request: PaymentOrderRequest) -> Dict[str, Any]:
        """
        Create the payment order a checkout is paid against.

        Raises:
            ValidationException: If no positive amount is given
        """
        if not request.amount or not math.isfinite(request.amount) or request.amount <= 0:
            raise ValidationException("Amount is required", field="amount")

        amount = to_minor_units(request.amount)
        if amount <= 0:
            raise ValidationException("Amount is required", field="amount")

        currency = request.currency or self.settings.DEFAULT_CURRENCY
        logger.info(
            "Creating payment order",
            extra={"amount": amount, "currency": currency, "receipt": request.receipt}
        )
        return await self.payment_client.create_order(amount, currency, request.receipt)

    async def confirm_order(self, request: CreateOrderRequest) -> Dict[str, Any]:
        """
        Confirm a paid checkout by creating the order in Shopify.

        Returns:
            ``{"success": True, "message": ..., "order": <summary>}``

        Raises:
            ValidationException: If required checkout data is missing
            ConfigurationError: If Shopify credentials are missing
            PaymentVerificationError: If the payment signature does not match
            UpstreamAPIError: If Shopify rejects the order
        """
        logger.info(
            "Order creation requested",
            extra={
                "razorpay_payment_id": request.razorpay_payment_id,
                "email": request.email,
                "item_count": len(request.cart_items or []),
            }
        )

        self.validate_order_request(request)
        self.token_provider.ensure_configured()
        payment_verified = self.verify_payment(request)

        access_token = await self.token_provider.get_token()
        payload = build_order_payload(request, payment_verified=payment_verified)

        try:
            order = await self.commerce_client.create_order(payload, access_token)
        except UpstreamAPIError as e:
            if e.status_code == 401:
                self.token_provider.invalidate()
            logger.error(
                "Shopify order creation failed for a paid checkout",
                extra={
                    "razorpay_payment_id": request.razorpay_payment_id,
                    "razorpay_order_id": request.razorpay_order_id,
                    "upstream_status": e.status_code,
                }
            )
            raise

        logger.info(
            "Shopify order created",
            extra={
                "shopify_order_id": order.get("id"),
                "shopify_order_name": order.get("name"),
                "razorpay_payment_id": request.razorpay_payment_id,
            }
        )

        return {
            "success": True,
            "message": "Order created successfully",
            "order": summarise_order(order),
        }

    @staticmethod
    def validate_order_request(request: CreateOrderRequest) -> None:
        if not request.razorpay_payment_id:
            raise ValidationException("Missing razorpay_payment_id", field="razorpay_payment_id")
        if not request.cart_items:
            raise ValidationException("Missing or empty cartItems", field="cartItems")
        if not request.email:
            raise ValidationException("Missing email", field="email")

    def verify_payment(self, request: CreateOrderRequest) -> bool:
        """
        Check the Razorpay signature when there is enough to check it with.

        Returns:
            True when the signature was checked and matched, False when the
            check was skipped
        """
        has_signature = bool(request.razorpay_signature and request.razorpay_order_id)
        can_verify = self.payment_client.can_verify_signatures

        if not (has_signature and can_verify):
            if self.settings.REQUIRE_PAYMENT_SIGNATURE:
                if not can_verify:
                    raise ConfigurationError(
                        "Razorpay not configured",
                        message="Missing RAZORPAY_KEY_SECRET"
                    )
                raise PaymentVerificationError("Missing payment signature. Payment verification failed.")
            logger.warning(
                "Skipping payment signature verification",
                extra={"razorpay_payment_id": request.razorpay_payment_id}
            )
            return False

        if not self.payment_client.verify_payment_signature(
            request.razorpay_order_id,
            request.razorpay_payment_id,
            request.razorpay_signature,
        ):
            logger.error(
                "Invalid Razorpay signature",
                extra={"razorpay_payment_id": request.razorpay_payment_id}
            )
            raise PaymentVerificationError()

        logger.info("Razorpay signature verified", extra={"razorpay_payment_id": request.razorpay_payment_id})
        return True
