from typing import Any, Dict, Optional, Tuple

import httpx

from storefront.core.config import Settings
from storefront.core.exceptions import IntegrationException, UpstreamAPIError
from storefront.core.logging import get_logger
from storefront.infrastructure.http import parse_response_body

logger = get_logger(__name__, integration="shopify")

DEFAULT_ORDER_ERROR = "Failed to create order in Shopify"


def extract_shopify_error(body: Any) -> Tuple[str, Optional[Any]]:
    """
    Turn a Shopify error body into a readable message and optional details.

    Shopify answers either ``{"errors": "message"}`` or
    ``{"errors": {"field": ["problem", ...]}}``; anything that is not JSON is
    reported verbatim.
    """
    if isinstance(body, str):
        return body or "Unknown Shopify error", None
    if not isinstance(body, dict) or not body.get("errors"):
        return DEFAULT_ORDER_ERROR, None

    errors = body["errors"]
    if isinstance(errors, str):
        return errors, None
    if isinstance(errors, dict):
        field, problem = next(iter(errors.items()))
        if isinstance(problem, list):
            problem = ", ".join(str(p) for p in problem)
        return f"{field}: {problem}", errors
    return DEFAULT_ORDER_ERROR, errors


class ShopifyAdminClient:
    """Client for the Shopify Admin REST API."""

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient):
        self.settings = settings
        self.http_client = http_client

    @property
    def base_url(self) -> str:
        return (
            f"https://{self.settings.SHOPIFY_STORE_DOMAIN}"
            f"/admin/api/{self.settings.SHOPIFY_API_VERSION}"
        )

    async def create_order(self, payload: Dict[str, Any], access_token: str) -> Dict[str, Any]:
        """
        Create an order through the Admin API.

        Args:
            payload: Order payload, ``{"order": {...}}``
            access_token: Admin API access token

        Returns:
            The created order object

        Raises:
            UpstreamAPIError: If Shopify rejects the order
            IntegrationException: If Shopify cannot be reached
        """
        try:
            response = await self.http_client.post(
                f"{self.base_url}/orders.json",
                json=payload,
                headers={"X-Shopify-Access-Token": access_token},
            )
        except httpx.RequestError as e:
            logger.error(f"Request error creating Shopify order: {str(e)}")
            raise IntegrationException(DEFAULT_ORDER_ERROR, original_exception=e)

        body = parse_response_body(response)

        if response.is_error:
            message, details = extract_shopify_error(body)
            logger.error(
                "Shopify API error",
                extra={"upstream_status": response.status_code, "upstream_error": body}
            )
            raise UpstreamAPIError(
                message,
                status_code=response.status_code,
                service="shopify",
                details=details,
            )

        if not isinstance(body, dict) or not isinstance(body.get("order"), dict):
            raise IntegrationException(
                "Shopify returned an unexpected response",
                context={"upstream_status": response.status_code}
            )

        return body["order"]
