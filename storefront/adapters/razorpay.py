import secrets
import string
import time
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Optional, Union

import httpx

from storefront.core.config import Settings, is_configured
from storefront.core.exceptions import ConfigurationError, IntegrationException, UpstreamAPIError
from storefront.core.logging import get_logger
from storefront.infrastructure.auth.basic_auth import BasicAuthHandler
from storefront.infrastructure.auth.signatures import verify_razorpay_signature
from storefront.infrastructure.http import parse_response_body

logger = get_logger(__name__, integration="razorpay")

_MOCK_ID_ALPHABET = string.ascii_uppercase + string.digits


def to_minor_units(amount: Union[int, float, str, Decimal]) -> int:
    """Round an amount to a whole number of minor units, halves away from zero."""
    return int(Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class RazorpayClient:
    """Client for the Razorpay Orders API."""

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient):
        """
        Initialize the Razorpay client.

        Args:
            settings: Application settings holding the Razorpay key pair
            http_client: HTTP client for API requests
        """
        self.settings = settings
        self.http_client = http_client
        self.auth = BasicAuthHandler(settings.RAZORPAY_KEY_ID, settings.RAZORPAY_KEY_SECRET)

    @property
    def is_configured(self) -> bool:
        return self.settings.razorpay_configured

    @property
    def can_verify_signatures(self) -> bool:
        return is_configured(self.settings.RAZORPAY_KEY_SECRET)

    def generate_receipt(self) -> str:
        return f"{self.settings.RECEIPT_PREFIX}{int(time.time() * 1000)}"

    async def create_order(
        self,
        amount: int,
        currency: str,
        receipt: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Create a Razorpay order the checkout widget can collect payment against.

        Args:
            amount: Amount in minor units (paise)
            currency: ISO currency code
            receipt: Merchant receipt reference; generated when omitted

        Returns:
            The order as returned by Razorpay

        Raises:
            ConfigurationError: If the key pair is missing outside test mode
            UpstreamAPIError: If Razorpay rejects the order
            IntegrationException: If Razorpay cannot be reached
        """
        receipt = receipt or self.generate_receipt()

        if not self.is_configured:
            if self.settings.PAYMENT_TEST_MODE:
                logger.warning("Razorpay secret not configured, returning mock order")
                return self.build_mock_order(amount, currency, receipt)
            logger.error("Razorpay credentials not configured")
            raise ConfigurationError(
                "Razorpay not configured",
                message="Missing RAZORPAY_KEY_ID or RAZORPAY_KEY_SECRET"
            )

        payload = {
            "amount": amount,
            "currency": currency,
            "receipt": receipt,
            "payment_capture": 1,
        }

        try:
            response = await self.http_client.post(
                f"{self.settings.RAZORPAY_API_URL}/orders",
                json=payload,
                headers=self.auth.generate_header(),
            )
        except httpx.RequestError as e:
            logger.error(f"Request error creating Razorpay order: {str(e)}")
            raise IntegrationException("Failed to create order", original_exception=e)

        if response.is_error:
            error_data = parse_response_body(response)
            logger.error(
                "Razorpay API error",
                extra={"upstream_status": response.status_code, "upstream_error": error_data}
            )
            raise UpstreamAPIError(
                "Failed to create Razorpay order",
                status_code=response.status_code,
                service="razorpay",
                details=error_data,
            )

        order = parse_response_body(response)
        if not isinstance(order, dict) or not order.get("id"):
            logger.error("Razorpay returned an unexpected response", extra={"upstream_status": response.status_code})
            raise IntegrationException(
                "Razorpay returned an unexpected response",
                context={"upstream_status": response.status_code}
            )

        logger.info("Razorpay order created", extra={"razorpay_order_id": order.get("id")})
        return order

    def verify_payment_signature(self, order_id: str, payment_id: str, signature: str) -> bool:
        """Check the checkout signature against the configured key secret."""
        if not self.can_verify_signatures:
            raise ConfigurationError(
                "Razorpay not configured",
                message="Missing RAZORPAY_KEY_SECRET"
            )
        return verify_razorpay_signature(order_id, payment_id, signature, self.settings.RAZORPAY_KEY_SECRET)

    @staticmethod
    def build_mock_order(amount: int, currency: str, receipt: str) -> Dict[str, Any]:
        """Build an order shaped like Razorpay's, for test mode without credentials."""
        order_id = "order_" + "".join(secrets.choice(_MOCK_ID_ALPHABET) for _ in range(14))
        return {
            "id": order_id,
            "entity": "order",
            "amount": amount,
            "amount_paid": 0,
            "amount_due": amount,
            "currency": currency,
            "receipt": receipt,
            "status": "created",
        }
