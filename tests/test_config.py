import pytest

from storefront.core.config import Settings, is_configured

ALIASED = (
    "RAZORPAY_KEY_ID",
    "VITE_RAZORPAY_KEY_ID",
    "SHOPIFY_STORE_DOMAIN",
    "SHOPIFY_STORE_URL",
    "SHOPIFY_ACCESS_TOKEN",
    "SHOPIFY_ADMIN_ACCESS_TOKEN",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in ALIASED + ("BACKEND_CORS_ORIGINS",):
        monkeypatch.delenv(name, raising=False)


def test_frontend_and_admin_variable_names_are_accepted(monkeypatch):
    monkeypatch.setenv("VITE_RAZORPAY_KEY_ID", "rzp_live_frontend")
    monkeypatch.setenv("SHOPIFY_STORE_URL", "https://demo-store.myshopify.com/")
    monkeypatch.setenv("SHOPIFY_ADMIN_ACCESS_TOKEN", "shpat_admin")

    settings = Settings(_env_file=None)

    assert settings.RAZORPAY_KEY_ID == "rzp_live_frontend"
    assert settings.SHOPIFY_STORE_DOMAIN == "demo-store.myshopify.com"
    assert settings.SHOPIFY_ACCESS_TOKEN == "shpat_admin"


def test_primary_variable_name_wins(monkeypatch):
    monkeypatch.setenv("RAZORPAY_KEY_ID", "rzp_live_server")
    monkeypatch.setenv("VITE_RAZORPAY_KEY_ID", "rzp_live_frontend")

    assert Settings(_env_file=None).RAZORPAY_KEY_ID == "rzp_live_server"


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.API_PREFIX == "/api"
    assert settings.DEFAULT_CURRENCY == "INR"
    assert settings.SHOPIFY_API_VERSION == "2024-01"
    assert settings.CLOUDINARY_FOLDER == "custom-blueprints"
    assert settings.TRACKING_CACHE_TTL == 300
    assert settings.cors_origins == ["*"]


def test_cors_origins_from_comma_list(monkeypatch):
    monkeypatch.setenv("BACKEND_CORS_ORIGINS", "https://shop.example.com, https://www.shop.example.com,")

    assert Settings(_env_file=None).cors_origins == [
        "https://shop.example.com",
        "https://www.shop.example.com",
    ]


def test_cors_origins_from_json_list(monkeypatch):
    monkeypatch.setenv("BACKEND_CORS_ORIGINS", '["https://shop.example.com"]')

    assert Settings(_env_file=None).cors_origins == ["https://shop.example.com"]


@pytest.mark.parametrize(
    "value, expected",
    [("rzp_live_abc", True), ("YOUR_RAZORPAY_KEY_ID", False), ("", False), ("  ", False), (None, False)],
)
def test_is_configured(value, expected):
    assert is_configured(value) is expected


def test_shopify_needs_a_store_and_a_credential():
    assert not Settings(_env_file=None, SHOPIFY_ACCESS_TOKEN="shpat_admin").shopify_configured
    assert Settings(
        _env_file=None,
        SHOPIFY_STORE_DOMAIN="demo-store.myshopify.com",
        SHOPIFY_CLIENT_ID="client",
        SHOPIFY_CLIENT_SECRET="secret",
    ).shopify_configured
