import base64
from typing import Dict, Optional

from storefront.core.exceptions import ConfigurationError
from storefront.core.logging import get_logger

logger = get_logger(__name__)


class BasicAuthHandler:
    """Handles basic authentication for external APIs."""

    def __init__(self, username: Optional[str] = None, password: Optional[str] = None):
        """
        Initialize the basic authentication handler.

        Args:
            username: Username (API key id) for basic authentication
            password: Password (API key secret) for basic authentication
        """
        self.username = username
        self.password = password

    def generate_header(self) -> Dict[str, str]:
        """
        Generate an Authorization header for basic authentication.

        Returns:
            Authorization header dict

        Raises:
            ConfigurationError: If credentials are missing
        """
        if not self.username or not self.password:
            logger.error("Missing credentials for basic authentication")
            raise ConfigurationError("Username and password are required for basic authentication")

        return {"Authorization": f"Basic {self.encode_credentials(self.username, self.password)}"}

    @staticmethod
    def encode_credentials(username: str, password: str) -> str:
        """
        Encode credentials to base64 for basic authentication.

        Args:
            username: Username
            password: Password

        Returns:
            Base64 encoded credentials
        """
        credentials = f"{username}:{password}".encode("utf-8")
        return base64.b64encode(credentials).decode("utf-8")
