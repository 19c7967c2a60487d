"""Shared outbound HTTP client for the upstream integrations."""

from typing import Any, Dict, Optional

import httpx

from storefront.core.config import Settings, get_settings


def build_async_client(
    settings: Optional[Settings] = None,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    extra_headers: Optional[Dict[str, str]] = None,
) -> httpx.AsyncClient:
    """
    Create the `httpx.AsyncClient` every adapter talks through.

    Args:
        settings: Application settings, used for the request timeout
        transport: Optional transport override (tests pass `httpx.MockTransport`)
        extra_headers: Headers added to every request

    Returns:
        httpx.AsyncClient: Configured client
    """
    settings = settings or get_settings()
    headers = {
        "Accept": "application/json",
        "User-Agent": f"{settings.PROJECT_NAME.replace(' ', '-').lower()}/{settings.VERSION}",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.DEFAULT_TIMEOUT),
        headers=headers,
        transport=transport,
    )


def parse_response_body(response: httpx.Response) -> Any:
    """Return the decoded JSON body, or the raw text when it is not JSON."""
    try:
        return response.json()
    except ValueError:
        return response.text or None
