"""
Shipment tracking.

Carriers report status as free text, so statuses are normalised by keyword
onto the storefront's delivery timeline. When no live data can be had, the
fulfillment status Shopify holds for the order is used instead.
"""

import re
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

from storefront.adapters.carriers import EkartTrackingClient
from storefront.core.config import Settings
from storefront.core.exceptions import ValidationException
from storefront.core.logging import get_logger
from storefront.domain.models.tracking import Carrier, DeliveryStatus, DeliveryStatuses
from storefront.domain.schemas.requests import TrackingRequest
from storefront.infrastructure.cache.memory_cache import MemoryCache

logger = get_logger(__name__)

CACHE_NAMESPACE = "tracking"

CARRIER_PATTERNS: Tuple[Tuple[Carrier, "re.Pattern[str]"], ...] = (
    (Carrier.EKART, re.compile(r"ekart|flipkart|fmpp", re.IGNORECASE)),
    (Carrier.DELHIVERY, re.compile(r"delhivery", re.IGNORECASE)),
    (Carrier.BLUEDART, re.compile(r"bluedart|blue dart", re.IGNORECASE)),
    (Carrier.DTDC, re.compile(r"dtdc", re.IGNORECASE)),
    (Carrier.ECOM_EXPRESS, re.compile(r"ecom express|ecom", re.IGNORECASE)),
    (Carrier.XPRESSBEES, re.compile(r"xpressbees|xpress bees", re.IGNORECASE)),
    (Carrier.SHADOWFAX, re.compile(r"shadowfax", re.IGNORECASE)),
    (Carrier.INDIA_POST, re.compile(r"india post|speed post", re.IGNORECASE)),
    (Carrier.FEDEX, re.compile(r"fedex", re.IGNORECASE)),
    (Carrier.DHL, re.compile(r"dhl", re.IGNORECASE)),
    (Carrier.SHIPROCKET, re.compile(r"shiprocket", re.IGNORECASE)),
)

TRACKING_URLS: Dict[Carrier, str] = {
    Carrier.EKART: "https://ekartlogistics.com/track/{number}",
    Carrier.DELHIVERY: "https://www.delhivery.com/track/package/{number}",
    Carrier.BLUEDART: "https://www.bluedart.com/tracking/{number}",
    Carrier.DTDC: "https://www.dtdc.in/tracking/shipment-tracking.asp?strCnno={number}",
    Carrier.ECOM_EXPRESS: "https://ecomexpress.in/tracking/?awb_field={number}",
    Carrier.XPRESSBEES: "https://www.xpressbees.com/track?awbNo={number}",
    Carrier.INDIA_POST: "https://www.indiapost.gov.in/_layouts/15/dop.portal.tracking/trackconsignment.aspx",
    Carrier.FEDEX: "https://www.fedex.com/fedextrack/?trknbr={number}",
    Carrier.DHL: "https://www.dhl.com/in-en/home/tracking.html?tracking-id={number}",
}

# Checked in order; the first group with a matching keyword wins.
STATUS_KEYWORDS: Tuple[Tuple[DeliveryStatus, Tuple[str, ...]], ...] = (
    (DeliveryStatuses.FAILED, (
        "undelivered", "not delivered", "delivery failed", "failed",
        "refused", "delivery attempt",
    )),
    (DeliveryStatuses.DELIVERED, (
        "delivered", "dlvd", "received by", "handed over",
    )),
    (DeliveryStatuses.OUT_FOR_DELIVERY, (
        "out for delivery", "out-for-delivery", "ofd", "with delivery boy",
        "dispatched to customer", "on vehicle for delivery",
    )),
    (DeliveryStatuses.IN_TRANSIT, (
        "in transit", "in-transit", "reached", "arrived", "departed",
        "forwarded", "hub", "received at", "facility",
    )),
    (DeliveryStatuses.SHIPPED, (
        "shipped", "picked up", "pickup", "manifested", "dispatched",
        "shipment created",
    )),
    (DeliveryStatuses.RTO, (
        "rto", "return to origin", "returning", "cancelled",
    )),
)

FULFILLMENT_STATUSES: Dict[str, DeliveryStatus] = {
    "delivered": DeliveryStatuses.DELIVERED,
    "complete": DeliveryStatuses.DELIVERED,
    "completed": DeliveryStatuses.DELIVERED,
    "out_for_delivery": DeliveryStatuses.OUT_FOR_DELIVERY,
    "out for delivery": DeliveryStatuses.OUT_FOR_DELIVERY,
    "in_transit": DeliveryStatuses.IN_TRANSIT,
    "fulfilled": DeliveryStatuses.SHIPPED,
    "shipped": DeliveryStatuses.SHIPPED,
    "cancelled": DeliveryStatuses.CANCELLED,
    "canceled": DeliveryStatuses.CANCELLED,
    "restocked": DeliveryStatuses.CANCELLED,
}


def detect_carrier(company_name: Optional[str], tracking_number: Optional[str] = "") -> Carrier:
    """Work out the carrier from its name, falling back to tracking number formats."""
    if company_name:
        for carrier, pattern in CARRIER_PATTERNS:
            if pattern.search(company_name):
                return carrier

    number = (tracking_number or "").strip()
    if number.upper().startswith(("FMPP", "FMPR")):
        return Carrier.EKART
    if re.fullmatch(r"\d{11}", number):
        return Carrier.DELHIVERY

    return Carrier.UNKNOWN


def parse_tracking_status(status: Optional[str], details: Optional[str] = "") -> DeliveryStatus:
    """Map a carrier's free-text status onto the delivery timeline."""
    status_text = (status or "").lower().strip()
    combined = f"{status_text} {(details or '').lower().strip()}"

    # Carrier short codes for a completed delivery
    if status_text in ("dl", "pod"):
        return DeliveryStatuses.DELIVERED

    for delivery_status, keywords in STATUS_KEYWORDS:
        if any(keyword in combined for keyword in keywords):
            return delivery_status

    return DeliveryStatuses.PROCESSING


def status_from_fulfillment(fulfillment_status: Optional[str]) -> DeliveryStatus:
    """Map a Shopify fulfillment status onto the delivery timeline."""
    return FULFILLMENT_STATUSES.get((fulfillment_status or "").lower().strip(), DeliveryStatuses.PROCESSING)


def carrier_tracking_url(tracking_number: str, company_name: Optional[str] = None) -> Optional[str]:
    carrier = detect_carrier(company_name, tracking_number)
    template = TRACKING_URLS.get(carrier)
    return template.format(number=tracking_number) if template else None


class TrackingService:
    """Reports the delivery status of a shipment."""

    def __init__(
        self,
        settings: Settings,
        cache: MemoryCache,
        ekart_client: EkartTrackingClient,
        clock=lambda: datetime.now(timezone.utc),
    ):
        self.settings = settings
        self.cache = cache
        self.ekart_client = ekart_client
        self.clock = clock

    async def get_status(self, request: TrackingRequest) -> Dict[str, Any]:
        """
        Get the current delivery status of a shipment.

        Live carrier results are cached for ``TRACKING_CACHE_TTL`` seconds.
        Fallback results derived from the fulfillment status are not cached,
        so a carrier that recovers is picked up on the next request.
        """
        tracking_number = (request.tracking_number or "").strip()
        if not tracking_number:
            raise ValidationException("Missing trackingNumber", field="trackingNumber")

        cached = await self.cache.get(tracking_number, namespace=CACHE_NAMESPACE)
        if cached:
            logger.debug("Using cached tracking data", extra={"tracking_number": tracking_number})
            return cached

        carrier = detect_carrier(request.carrier, tracking_number)
        tracking_url = carrier_tracking_url(tracking_number, request.carrier)

        tracking_data = None
        if carrier == Carrier.EKART:
            tracking_data = await self.ekart_client.fetch(tracking_number)

        if tracking_data:
            result = {
                "success": True,
                "carrier": carrier.value,
                "trackingNumber": tracking_number,
                "status": parse_tracking_status(
                    tracking_data.get("currentStatus"),
                    tracking_data.get("statusDetails"),
                ).to_dict(),
                "lastUpdate": tracking_data.get("lastUpdate") or self.clock().isoformat(),
                "location": tracking_data.get("currentLocation") or "",
                "deliveryDate": tracking_data.get("deliveryDate"),
                "events": tracking_data.get("events") or [],
                "trackingUrl": tracking_url,
            }
            await self.cache.set(
                tracking_number,
                result,
                ttl=self.settings.TRACKING_CACHE_TTL,
                namespace=CACHE_NAMESPACE,
            )
            return result

        return {
            "success": False,
            "carrier": carrier.value,
            "trackingNumber": tracking_number,
            "status": status_from_fulfillment(request.fulfillment_status).to_dict(),
            "lastUpdate": self.clock().isoformat(),
            "location": "",
            "events": [],
            "trackingUrl": tracking_url,
            "isFallback": True,
        }

    async def clear(self, tracking_number: str) -> bool:
        """Forget the cached status of a shipment."""
        return await self.cache.delete(tracking_number.strip(), namespace=CACHE_NAMESPACE)
