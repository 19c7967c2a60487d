import base64
import binascii
import re
import time
from typing import Any, Dict, Optional

from storefront.adapters.cloudinary import CloudinaryClient
from storefront.core.config import Settings
from storefront.core.exceptions import ValidationException
from storefront.core.logging import get_logger
from storefront.domain.schemas.requests import UploadRequest

logger = get_logger(__name__)

INVALID_FILE_MESSAGE = "Invalid file format. Please upload an image."

_SAFE_NAME = re.compile(r"[^A-Za-z0-9_\-]+")


class UploadService:
    """Uploads customer design artwork to the image host."""

    def __init__(self, settings: Settings, image_client: CloudinaryClient, clock=time.time):
        self.settings = settings
        self.image_client = image_client
        self.clock = clock

    async def upload_design(self, request: UploadRequest) -> Dict[str, Any]:
        """
        Upload a design image and return where it can be fetched from.

        Returns:
            ``{"success": True, "url", "publicId", "width", "height"}``

        Raises:
            ValidationException: If the file is missing or not an image source
        """
        file = self.normalise_file(request.file)
        folder = request.folder or self.settings.CLOUDINARY_FOLDER
        public_id = self.build_public_id(request.filename)
        logger.info("Uploading design image", extra={"folder": folder, "public_id": public_id})

        result = await self.image_client.upload(file, folder=folder, public_id=public_id)

        return {
            "success": True,
            "url": result.get("secure_url"),
            "publicId": result.get("public_id"),
            "width": result.get("width"),
            "height": result.get("height"),
        }

    @staticmethod
    def normalise_file(file: Optional[str]) -> str:
        """
        Accept a data URL, a remote http(s) URL or bare base64 image data.

        Browser-local ``blob:`` URLs cannot be fetched from here and are
        rejected along with anything else that is not an image source.
        """
        if not file or not file.strip():
            raise ValidationException(INVALID_FILE_MESSAGE, field="file")

        value = file.strip()
        if value.startswith("data:"):
            if not value.startswith("data:image/"):
                raise ValidationException(INVALID_FILE_MESSAGE, field="file")
            return value
        if value.startswith(("http://", "https://")):
            return value
        if value.startswith("blob:"):
            raise ValidationException(
                INVALID_FILE_MESSAGE,
                field="file",
                context={"reason": "blob URLs only exist in the browser"}
            )

        compact = "".join(value.split())
        try:
            base64.b64decode(compact, validate=True)
        except (binascii.Error, ValueError):
            raise ValidationException(INVALID_FILE_MESSAGE, field="file")
        return f"data:image/png;base64,{compact}"

    def build_public_id(self, filename: Optional[str]) -> Optional[str]:
        if not filename:
            return None
        safe_name = _SAFE_NAME.sub("-", filename.rsplit(".", 1)[0]).strip("-") or "custom-design"
        return f"{safe_name}_{int(self.clock() * 1000)}"
