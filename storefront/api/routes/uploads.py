from typing import Any, Dict

from fastapi import APIRouter, Depends

from storefront.api.dependencies import get_upload_service
from storefront.domain.schemas.requests import UploadRequest
from storefront.services.upload_service import UploadService

uploads_router = APIRouter()


@uploads_router.post("/image", summary="Upload design image")
async def upload_image(
    body: UploadRequest,
    upload_service: UploadService = Depends(get_upload_service)
) -> Dict[str, Any]:
    return await upload_service.upload_design(body)
