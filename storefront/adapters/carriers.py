from typing import Any, Dict, Optional

import httpx

from storefront.core.config import Settings
from storefront.core.logging import get_logger

logger = get_logger(__name__, integration="ekart")


class EkartTrackingClient:
    """Reads live shipment status from Ekart's public tracking endpoint."""

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient):
        self.settings = settings
        self.http_client = http_client

    async def fetch(self, tracking_number: str) -> Optional[Dict[str, Any]]:
        """
        Fetch tracking details for a shipment.

        Returns:
            The carrier's tracking payload, or None when the carrier has nothing
            usable for us (unreachable, error status or a non-JSON body)
        """
        try:
            response = await self.http_client.get(
                self.settings.EKART_TRACKING_URL,
                params={"trackingId": tracking_number},
            )
        except httpx.RequestError as e:
            logger.warning(f"Ekart tracking endpoint not reachable: {str(e)}")
            return None

        if response.is_error:
            logger.warning("Ekart tracking lookup failed", extra={"upstream_status": response.status_code})
            return None

        try:
            data = response.json()
        except ValueError:
            logger.warning("Ekart tracking response was not JSON")
            return None

        return data if isinstance(data, dict) else None
