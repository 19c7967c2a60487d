from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import httpx
from pydantic import BaseModel

from storefront.core.config import Settings
from storefront.core.exceptions import AuthenticationError, ConfigurationError
from storefront.core.logging import get_logger
from storefront.infrastructure.http import parse_response_body

logger = get_logger(__name__, integration="shopify")

SHOPIFY_NOT_CONFIGURED = (
    "Shopify is not configured. Missing SHOPIFY_ACCESS_TOKEN environment variable."
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AccessToken(BaseModel):
    """Model representing an admin API access token."""
    access_token: str
    scope: Optional[str] = None
    expires_in: Optional[int] = None
    expires_at: Optional[datetime] = None

    def is_expired(self, now: datetime, margin_seconds: int = 0) -> bool:
        """Check if the token is expired, or will be within the margin."""
        if not self.expires_at:
            return False
        return now >= self.expires_at - timedelta(seconds=margin_seconds)


class ShopifyTokenProvider:
    """
    Supplies the access token for the Shopify Admin API.

    A statically configured token is used as-is. Otherwise a token is obtained
    with the client-credentials grant and kept in memory until shortly before
    it expires. The cache is a single value for the lifetime of the process;
    concurrent first requests may both fetch a token, and the last one wins.
    """

    def __init__(
        self,
        settings: Settings,
        http_client: httpx.AsyncClient,
        clock: Callable[[], datetime] = utcnow,
    ):
        """
        Initialize the token provider.

        Args:
            settings: Application settings holding the Shopify credentials
            http_client: HTTP client for token requests
            clock: Source of the current time
        """
        self.settings = settings
        self.http_client = http_client
        self.clock = clock
        self._token: Optional[AccessToken] = None

    @property
    def token_url(self) -> str:
        return f"https://{self.settings.SHOPIFY_STORE_DOMAIN}/admin/oauth/access_token"

    @property
    def cached_token(self) -> Optional[AccessToken]:
        return self._token

    def ensure_configured(self) -> None:
        """
        Fail fast when no way of obtaining a token is configured.

        Raises:
            ConfigurationError: If neither a static token nor client credentials are set
        """
        if not self.settings.shopify_configured:
            logger.error("Shopify credentials not configured")
            raise ConfigurationError(SHOPIFY_NOT_CONFIGURED)

    async def get_token(self) -> str:
        """
        Obtain an access token, reusing the cached one while it is fresh.

        Returns:
            Access token string

        Raises:
            ConfigurationError: If Shopify is not configured
            AuthenticationError: If token acquisition fails
        """
        self.ensure_configured()

        if self.settings.shopify_static_token_configured:
            return self.settings.SHOPIFY_ACCESS_TOKEN

        now = self.clock()
        if self._token and not self._token.is_expired(now, self.settings.TOKEN_EXPIRY_MARGIN_SECONDS):
            logger.debug("Using cached Shopify access token")
            return self._token.access_token

        self._token = await self._request_token(now)
        return self._token.access_token

    def invalidate(self) -> None:
        """Drop the cached token so the next call acquires a fresh one."""
        if self._token is not None:
            logger.info("Invalidating cached Shopify access token")
        self._token = None

    async def _request_token(self, now: datetime) -> AccessToken:
        data = {
            "client_id": self.settings.SHOPIFY_CLIENT_ID,
            "client_secret": self.settings.SHOPIFY_CLIENT_SECRET,
            "grant_type": "client_credentials",
        }

        try:
            response = await self.http_client.post(self.token_url, json=data)
        except httpx.RequestError as e:
            logger.error(f"Request error during token acquisition: {str(e)}")
            raise AuthenticationError(
                "Failed to connect to Shopify token endpoint",
                original_exception=e
            )

        if response.is_error:
            logger.error(
                "Shopify token request rejected",
                extra={"upstream_status": response.status_code}
            )
            raise AuthenticationError(
                "Failed to obtain Shopify access token",
                context={
                    "upstream_status": response.status_code,
                    "upstream_error": parse_response_body(response),
                }
            )

        token_data = parse_response_body(response)
        if not isinstance(token_data, dict) or not token_data.get("access_token"):
            raise AuthenticationError("Shopify token response did not include an access token")

        expires_in = token_data.get("expires_in")
        token = AccessToken(
            access_token=token_data["access_token"],
            scope=token_data.get("scope"),
            expires_in=expires_in,
            expires_at=now + timedelta(seconds=int(expires_in)) if expires_in else None,
        )

        logger.info(
            "Obtained Shopify access token",
            extra={"expires_in": expires_in, "scope": token.scope}
        )
        return token
