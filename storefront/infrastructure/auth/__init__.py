"""Authentication mechanisms for external API integrations."""

from storefront.infrastructure.auth.basic_auth import BasicAuthHandler
from storefront.infrastructure.auth.oauth import AccessToken, ShopifyTokenProvider

__all__ = ["AccessToken", "BasicAuthHandler", "ShopifyTokenProvider"]
