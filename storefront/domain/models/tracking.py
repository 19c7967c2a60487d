from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict


class Carrier(str, Enum):
    """Shipping carriers the storefront knows how to recognise."""
    EKART = "EKART"
    DELHIVERY = "DELHIVERY"
    BLUEDART = "BLUEDART"
    DTDC = "DTDC"
    ECOM_EXPRESS = "ECOM_EXPRESS"
    XPRESSBEES = "XPRESSBEES"
    SHADOWFAX = "SHADOWFAX"
    INDIA_POST = "INDIA_POST"
    FEDEX = "FEDEX"
    DHL = "DHL"
    SHIPROCKET = "SHIPROCKET"
    UNKNOWN = "UNKNOWN"


@dataclass(frozen=True)
class DeliveryStatus:
    """A point on the delivery timeline, with the stage used for progress bars."""
    stage: int
    label: str
    status: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class DeliveryStatuses:
    CANCELLED = DeliveryStatus(0, "Cancelled", "cancelled")
    ORDERED = DeliveryStatus(1, "Order Placed", "ordered")
    PROCESSING = DeliveryStatus(2, "Processing", "processing")
    SHIPPED = DeliveryStatus(3, "Shipped", "shipped")
    IN_TRANSIT = DeliveryStatus(3, "In Transit", "in_transit")
    OUT_FOR_DELIVERY = DeliveryStatus(4, "Out for Delivery", "out_for_delivery")
    FAILED = DeliveryStatus(4, "Delivery Failed", "failed")
    RTO = DeliveryStatus(4, "Return to Origin", "rto")
    DELIVERED = DeliveryStatus(5, "Delivered", "delivered")
