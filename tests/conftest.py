import asyncio
import json as jsonlib
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import httpx
import pytest
from fastapi.testclient import TestClient

from storefront.api.dependencies import get_http_client
from storefront.core.config import Settings, get_settings
from storefront.infrastructure.http import build_async_client
from storefront.main import create_application

RAZORPAY_ORDERS_URL = "https://api.razorpay.com/v1/orders"
SHOPIFY_ORDERS_URL = "https://demo-store.myshopify.com/admin/api/2024-01/orders.json"
SHOPIFY_TOKEN_URL = "https://demo-store.myshopify.com/admin/oauth/access_token"
CLOUDINARY_UPLOAD_URL = "https://api.cloudinary.com/v1_1/demo/image/upload"
EKART_TRACKING_URL = "https://ekartlogistics.com/ws/getTrackingDetails"


def make_settings(**overrides: Any) -> Settings:
    """Settings with every integration configured, ignoring any local .env file."""
    values: Dict[str, Any] = {
        "ENABLE_STRUCTURED_LOGGING": False,
        "RAZORPAY_KEY_ID": "rzp_test_key",
        "RAZORPAY_KEY_SECRET": "rzp_test_secret",
        "PAYMENT_TEST_MODE": False,
        "REQUIRE_PAYMENT_SIGNATURE": False,
        "SHOPIFY_STORE_DOMAIN": "demo-store.myshopify.com",
        "SHOPIFY_ACCESS_TOKEN": "shpat_static_token",
        "SHOPIFY_CLIENT_ID": None,
        "SHOPIFY_CLIENT_SECRET": None,
        "CLOUDINARY_CLOUD_NAME": "demo",
        "CLOUDINARY_UPLOAD_PRESET": "storefront_unsigned",
        "CLOUDINARY_API_KEY": None,
        "CLOUDINARY_API_SECRET": None,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


Responder = Union[Callable[[httpx.Request], httpx.Response], Tuple[int, Any]]


class FakeUpstream:
    """
    Stands in for every external API behind an `httpx.MockTransport`.

    Routes are keyed by method and URL without the query string. A route is
    either a ``(status, body)`` pair or a callable taking the request.
    """

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Responder] = {}
        self.requests: List[httpx.Request] = []

    def add(self, method: str, url: str, responder: Responder) -> None:
        self.routes[(method.upper(), url)] = responder

    def calls(self, method: str, url: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == method.upper() and self._url(r) == url]

    @staticmethod
    def _url(request: httpx.Request) -> str:
        return f"{request.url.scheme}://{request.url.host}{request.url.path}"

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        responder = self.routes.get((request.method, self._url(request)))
        if responder is None:
            return httpx.Response(500, text=f"unexpected request {request.method} {request.url}")
        if callable(responder):
            return responder(request)

        status_code, body = responder
        if isinstance(body, str):
            return httpx.Response(status_code, text=body)
        return httpx.Response(status_code, json=body)


def request_json(request: httpx.Request) -> Dict[str, Any]:
    return jsonlib.loads(request.content.decode("utf-8"))


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def http_client(settings, upstream):
    client = build_async_client(settings, transport=httpx.MockTransport(upstream.handler))
    yield client
    run(client.aclose())


@pytest.fixture
def app(settings, http_client):
    application = create_application()
    application.dependency_overrides[get_settings] = lambda: settings
    application.dependency_overrides[get_http_client] = lambda: http_client
    return application


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


def configure(app, **overrides: Any) -> Settings:
    """Swap the settings an app's dependencies see for a test."""
    new_settings = make_settings(**overrides)
    app.dependency_overrides[get_settings] = lambda: new_settings
    return new_settings


def error_of(response) -> Optional[str]:
    return response.json().get("error")
