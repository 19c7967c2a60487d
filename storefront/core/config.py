from functools import lru_cache
from typing import List, Optional
import json
import os

from dotenv import load_dotenv
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PLACEHOLDER_MARKER = "YOUR_"


def is_configured(value: Optional[str]) -> bool:
    """Return True when a credential is present and not a template placeholder."""
    return bool(value and value.strip()) and PLACEHOLDER_MARKER not in value


class Settings(BaseSettings):
    """Application configuration settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        populate_by_name=True,
    )

    # API settings
    API_PREFIX: str = "/api"
    PROJECT_NAME: str = "Storefront Checkout Service"
    VERSION: str = "0.1.0"
    DEBUG: bool = False

    # CORS settings
    BACKEND_CORS_ORIGINS: str = "*"

    # Logging settings
    LOG_LEVEL: str = "INFO"
    ENABLE_STRUCTURED_LOGGING: bool = True

    # External API timeout settings
    DEFAULT_TIMEOUT: float = 10.0  # seconds

    # Payment gateway (Razorpay)
    RAZORPAY_KEY_ID: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("RAZORPAY_KEY_ID", "VITE_RAZORPAY_KEY_ID"),
    )
    RAZORPAY_KEY_SECRET: Optional[str] = None
    RAZORPAY_API_URL: str = "https://api.razorpay.com/v1"
    PAYMENT_TEST_MODE: bool = False
    REQUIRE_PAYMENT_SIGNATURE: bool = False
    DEFAULT_CURRENCY: str = "INR"
    RECEIPT_PREFIX: str = "DRS_"

    # Commerce backend (Shopify Admin API)
    SHOPIFY_STORE_DOMAIN: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("SHOPIFY_STORE_DOMAIN", "SHOPIFY_STORE_URL"),
    )
    SHOPIFY_ACCESS_TOKEN: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("SHOPIFY_ACCESS_TOKEN", "SHOPIFY_ADMIN_ACCESS_TOKEN"),
    )
    SHOPIFY_CLIENT_ID: Optional[str] = None
    SHOPIFY_CLIENT_SECRET: Optional[str] = None
    SHOPIFY_API_VERSION: str = "2024-01"
    TOKEN_EXPIRY_MARGIN_SECONDS: int = 60

    # Image hosting (Cloudinary)
    CLOUDINARY_CLOUD_NAME: Optional[str] = None
    CLOUDINARY_UPLOAD_PRESET: Optional[str] = None
    CLOUDINARY_API_KEY: Optional[str] = None
    CLOUDINARY_API_SECRET: Optional[str] = None
    CLOUDINARY_FOLDER: str = "custom-blueprints"
    CLOUDINARY_API_URL: str = "https://api.cloudinary.com/v1_1"

    # Shipment tracking
    TRACKING_CACHE_TTL: int = 300  # seconds
    EKART_TRACKING_URL: str = "https://ekartlogistics.com/ws/getTrackingDetails"

    @field_validator("SHOPIFY_STORE_DOMAIN")
    @classmethod
    def normalise_store_domain(cls, v: Optional[str]) -> Optional[str]:
        """Accept the store as a bare domain or as a URL."""
        if not v:
            return None
        domain = v.strip()
        for scheme in ("https://", "http://"):
            if domain.startswith(scheme):
                domain = domain[len(scheme):]
        return domain.rstrip("/") or None

    @property
    def cors_origins(self) -> List[str]:
        """Parse CORS origins from a comma separated string or a JSON list."""
        value = self.BACKEND_CORS_ORIGINS.strip()
        if value.startswith("["):
            try:
                origins = [str(origin).strip() for origin in json.loads(value)]
            except ValueError:
                origins = []
            return [origin for origin in origins if origin] or ["*"]
        origins = [origin.strip() for origin in value.split(",")]
        return [origin for origin in origins if origin] or ["*"]

    @property
    def razorpay_configured(self) -> bool:
        return is_configured(self.RAZORPAY_KEY_ID) and is_configured(self.RAZORPAY_KEY_SECRET)

    @property
    def shopify_static_token_configured(self) -> bool:
        return is_configured(self.SHOPIFY_ACCESS_TOKEN)

    @property
    def shopify_client_credentials_configured(self) -> bool:
        return is_configured(self.SHOPIFY_CLIENT_ID) and is_configured(self.SHOPIFY_CLIENT_SECRET)

    @property
    def shopify_configured(self) -> bool:
        return bool(self.SHOPIFY_STORE_DOMAIN) and (
            self.shopify_static_token_configured or self.shopify_client_credentials_configured
        )

    @property
    def cloudinary_signed_uploads(self) -> bool:
        return is_configured(self.CLOUDINARY_API_KEY) and is_configured(self.CLOUDINARY_API_SECRET)

    @property
    def cloudinary_configured(self) -> bool:
        return bool(self.CLOUDINARY_CLOUD_NAME) and (
            self.cloudinary_signed_uploads or bool(self.CLOUDINARY_UPLOAD_PRESET)
        )


def load_env_file(env_file: str = ".env") -> None:
    """
    Load environment variables from specified .env file.

    Args:
        env_file: Path to the .env file. Defaults to ".env".
    """
    env_path = os.path.join(os.getcwd(), env_file)
    if os.path.exists(env_path):
        load_dotenv(env_path)


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings with caching for efficiency.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
