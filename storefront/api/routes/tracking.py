from typing import Any, Dict

from fastapi import APIRouter, Depends

from storefront.api.dependencies import get_tracking_service
from storefront.domain.schemas.requests import TrackingRequest
from storefront.services.tracking_service import TrackingService

tracking_router = APIRouter()


@tracking_router.post(
    "/status",
    summary="Shipment status",
    description=(
        "Returns the delivery status of a shipment, from the carrier when it can "
        "be reached and from the order's fulfillment status otherwise."
    )
)
async def get_tracking_status(
    body: TrackingRequest,
    tracking_service: TrackingService = Depends(get_tracking_service)
) -> Dict[str, Any]:
    return await tracking_service.get_status(body)


@tracking_router.delete(
    "/cache/{tracking_number}",
    summary="Clear cached shipment status",
    description="Forgets the cached carrier status so the next lookup goes to the carrier."
)
async def clear_tracking_cache(
    tracking_number: str,
    tracking_service: TrackingService = Depends(get_tracking_service)
) -> Dict[str, Any]:
    cleared = await tracking_service.clear(tracking_number)
    return {"success": True, "cleared": cleared}
