import time
from typing import Any, Dict, Optional

import httpx

from storefront.core.config import Settings
from storefront.core.exceptions import ConfigurationError, IntegrationException, UpstreamAPIError
from storefront.core.logging import get_logger
from storefront.infrastructure.auth.signatures import cloudinary_signature
from storefront.infrastructure.http import parse_response_body

logger = get_logger(__name__, integration="cloudinary")


class CloudinaryClient:
    """
    Client for Cloudinary's image upload API.

    Uploads are signed when an API key and secret are configured, and go
    through the unsigned upload preset otherwise.
    """

    def __init__(
        self,
        settings: Settings,
        http_client: httpx.AsyncClient,
        clock=time.time,
    ):
        self.settings = settings
        self.http_client = http_client
        self.clock = clock

    @property
    def upload_url(self) -> str:
        return f"{self.settings.CLOUDINARY_API_URL}/{self.settings.CLOUDINARY_CLOUD_NAME}/image/upload"

    def build_form(self, file: str, folder: str, public_id: Optional[str] = None) -> Dict[str, Any]:
        """Build the upload form fields, signing them when a secret is available."""
        params: Dict[str, Any] = {
            "folder": folder,
            "timestamp": int(self.clock()),
        }
        if public_id:
            params["public_id"] = public_id
        if self.settings.CLOUDINARY_UPLOAD_PRESET:
            params["upload_preset"] = self.settings.CLOUDINARY_UPLOAD_PRESET

        if self.settings.cloudinary_signed_uploads:
            params["signature"] = cloudinary_signature(params, self.settings.CLOUDINARY_API_SECRET)
            params["api_key"] = self.settings.CLOUDINARY_API_KEY

        params["file"] = file
        return {key: str(value) for key, value in params.items()}

    async def upload(self, file: str, folder: str, public_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Upload an image.

        Args:
            file: Data URI or remote URL of the image
            folder: Destination folder
            public_id: Optional public ID for the asset

        Returns:
            Upload result as returned by Cloudinary

        Raises:
            ConfigurationError: If Cloudinary is not configured
            UpstreamAPIError: If Cloudinary rejects the upload
            IntegrationException: If Cloudinary cannot be reached
        """
        if not self.settings.cloudinary_configured:
            logger.error("Cloudinary credentials not configured")
            raise ConfigurationError(
                "Image uploads are not configured",
                message="Missing CLOUDINARY_CLOUD_NAME and an upload preset or API key"
            )

        try:
            response = await self.http_client.post(self.upload_url, data=self.build_form(file, folder, public_id))
        except httpx.RequestError as e:
            logger.error(f"Request error uploading to Cloudinary: {str(e)}")
            raise IntegrationException("Failed to upload file to cloud storage", original_exception=e)

        body = parse_response_body(response)

        if response.is_error:
            message = f"Upload failed ({response.status_code})"
            if isinstance(body, dict) and isinstance(body.get("error"), dict):
                message = body["error"].get("message") or message
            logger.error(
                "Cloudinary error response",
                extra={"upstream_status": response.status_code, "upstream_error": body}
            )
            raise UpstreamAPIError(
                message,
                status_code=response.status_code,
                service="cloudinary",
                details=body,
            )

        if not isinstance(body, dict) or not body.get("secure_url"):
            raise IntegrationException("Upload failed", context={"upstream_status": response.status_code})

        logger.info("Uploaded image", extra={"public_id": body.get("public_id")})
        return body
