from storefront.domain.models.tracking import Carrier, DeliveryStatus, DeliveryStatuses

__all__ = ["Carrier", "DeliveryStatus", "DeliveryStatuses"]
