import copy

import httpx
import pytest

from conftest import SHOPIFY_ORDERS_URL, SHOPIFY_TOKEN_URL, configure, error_of, request_json
from storefront.infrastructure.auth.oauth import SHOPIFY_NOT_CONFIGURED
from storefront.infrastructure.auth.signatures import razorpay_payment_signature

SHOPIFY_ORDER = {
    "id": 5512345678901,
    "name": "#1042",
    "order_number": 1042,
    "confirmation_number": "X7K2PLQ9A",
    "email": "asha@example.com",
    "phone": "+919800000000",
    "total_price": "2998.00",
    "subtotal_price": "2998.00",
    "total_tax": "457.32",
    "currency": "INR",
    "financial_status": "paid",
    "fulfillment_status": None,
    "order_status_url": "https://demo-store.myshopify.com/orders/abc/authenticate?key=xyz",
    "created_at": "2024-05-01T10:00:00+05:30",
    "line_items": [],
}


@pytest.fixture
def order_body():
    return {
        "razorpay_payment_id": "pay_NXa1b2c3d4e5f6",
        "razorpay_order_id": "order_NXz1Y2pQ4rS5tU",
        "razorpay_signature": razorpay_payment_signature(
            "order_NXz1Y2pQ4rS5tU", "pay_NXa1b2c3d4e5f6", "rzp_test_secret"
        ),
        "cartItems": [
            {
                "title": "Walnut Blueprint Frame",
                "quantity": 2,
                "price": 1499,
                "variant": {
                    "id": "gid://shopify/ProductVariant/44556677",
                    "title": "Large",
                    "price": {"amount": "1499.00", "currencyCode": "INR"},
                },
                "customAttributes": [{"key": "Engraving", "value": "A & R"}],
            }
        ],
        "customerAddress": {
            "firstName": "Asha",
            "lastName": "Rao",
            "address": "12 MG Road",
            "apartment": "Flat 4",
            "city": "Bengaluru",
            "state": "Karnataka",
            "pincode": "560001",
        },
        "email": "asha@example.com",
        "phone": "+919800000000",
        "totalAmount": 2998,
    }


def test_creates_paid_order(client, upstream, order_body):
    upstream.add("POST", SHOPIFY_ORDERS_URL, (201, {"order": SHOPIFY_ORDER}))

    response = client.post("/api/shopify/create-order", json=order_body)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Order created successfully"
    assert body["order"]["id"] == SHOPIFY_ORDER["id"]
    assert body["order"]["name"] == "#1042"
    assert body["order"]["customer"] == {"email": "asha@example.com", "phone": "+919800000000"}

    [sent] = upstream.calls("POST", SHOPIFY_ORDERS_URL)
    assert sent.headers["X-Shopify-Access-Token"] == "shpat_static_token"

    order = request_json(sent)["order"]
    assert order["financial_status"] == "paid"
    assert order["line_items"][0]["variant_id"] == 44556677
    assert order["line_items"][0]["price"] == "1499.00"
    assert order["line_items"][0]["properties"] == [{"name": "Engraving", "value": "A & R"}]
    assert order["shipping_address"]["province_code"] == "KA"
    assert order["transactions"][0]["amount"] == "2998.00"
    assert {"name": "payment_verified", "value": "true"} in order["note_attributes"]


def test_legacy_path_is_served(client, upstream, order_body):
    upstream.add("POST", SHOPIFY_ORDERS_URL, (201, {"order": SHOPIFY_ORDER}))

    response = client.post("/api/create-shopify-order", json=order_body)

    assert response.status_code == 200


@pytest.mark.parametrize(
    "field, value, message",
    [
        ("razorpay_payment_id", None, "Missing razorpay_payment_id"),
        ("cartItems", [], "Missing or empty cartItems"),
        ("email", "", "Missing email"),
    ],
)
def test_required_fields(client, upstream, order_body, field, value, message):
    order_body[field] = value

    response = client.post("/api/shopify/create-order", json=order_body)

    assert response.status_code == 400
    assert error_of(response) == message
    assert upstream.requests == []


def test_cart_items_must_be_a_list(client, order_body):
    order_body["cartItems"] = "Walnut Blueprint Frame"

    response = client.post("/api/shopify/create-order", json=order_body)

    assert response.status_code == 400


def test_invalid_signature_is_rejected(client, upstream, order_body):
    order_body["razorpay_signature"] = "0" * 64

    response = client.post("/api/shopify/create-order", json=order_body)

    assert response.status_code == 400
    assert error_of(response) == "Invalid payment signature. Payment verification failed."
    assert upstream.requests == []


def test_unsigned_checkout_is_recorded_as_unverified(client, upstream, order_body):
    upstream.add("POST", SHOPIFY_ORDERS_URL, (201, {"order": SHOPIFY_ORDER}))
    del order_body["razorpay_signature"]

    response = client.post("/api/shopify/create-order", json=order_body)

    assert response.status_code == 200
    order = request_json(upstream.calls("POST", SHOPIFY_ORDERS_URL)[0])["order"]
    assert {"name": "payment_verified", "value": "false"} in order["note_attributes"]


def test_strict_mode_requires_a_signature(app, client, upstream, order_body):
    configure(app, REQUIRE_PAYMENT_SIGNATURE=True)
    del order_body["razorpay_signature"]

    response = client.post("/api/shopify/create-order", json=order_body)

    assert response.status_code == 400
    assert error_of(response) == "Missing payment signature. Payment verification failed."
    assert upstream.requests == []


def test_unconfigured_shopify_fails_before_payment_checks(app, client, upstream, order_body):
    configure(app, SHOPIFY_ACCESS_TOKEN=None)
    order_body["razorpay_signature"] = "0" * 64

    response = client.post("/api/shopify/create-order", json=order_body)

    assert response.status_code == 500
    assert error_of(response) == SHOPIFY_NOT_CONFIGURED
    assert upstream.requests == []


def test_shopify_field_errors_are_passed_through(client, upstream, order_body):
    errors = {"line_items": ["must have at least one line item", "is invalid"]}
    upstream.add("POST", SHOPIFY_ORDERS_URL, (422, {"errors": errors}))

    response = client.post("/api/shopify/create-order", json=order_body)

    assert response.status_code == 422
    body = response.json()
    assert body["error"] == "line_items: must have at least one line item, is invalid"
    assert body["details"] == errors
    assert body["shopifyStatus"] == 422


def test_shopify_message_error_is_passed_through(client, upstream, order_body):
    upstream.add("POST", SHOPIFY_ORDERS_URL, (402, {"errors": "Unavailable Shop"}))

    response = client.post("/api/shopify/create-order", json=order_body)

    assert response.status_code == 402
    assert error_of(response) == "Unavailable Shop"


def test_non_json_shopify_error_keeps_raw_text(client, upstream, order_body):
    upstream.add("POST", SHOPIFY_ORDERS_URL, (503, "Service Temporarily Unavailable"))

    response = client.post("/api/shopify/create-order", json=order_body)

    assert response.status_code == 503
    assert error_of(response) == "Service Temporarily Unavailable"


def test_client_credentials_token_is_reused(app, client, upstream, order_body):
    configure(
        app,
        SHOPIFY_ACCESS_TOKEN=None,
        SHOPIFY_CLIENT_ID="shopify-client",
        SHOPIFY_CLIENT_SECRET="shopify-secret",
    )
    upstream.add(
        "POST",
        SHOPIFY_TOKEN_URL,
        (200, {"access_token": "shpat_granted", "scope": "write_orders", "expires_in": 86399}),
    )
    upstream.add("POST", SHOPIFY_ORDERS_URL, (201, {"order": SHOPIFY_ORDER}))

    first = client.post("/api/shopify/create-order", json=order_body)
    second = client.post("/api/shopify/create-order", json=copy.deepcopy(order_body))

    assert first.status_code == 200
    assert second.status_code == 200

    [token_request] = upstream.calls("POST", SHOPIFY_TOKEN_URL)
    assert request_json(token_request) == {
        "client_id": "shopify-client",
        "client_secret": "shopify-secret",
        "grant_type": "client_credentials",
    }
    order_requests = upstream.calls("POST", SHOPIFY_ORDERS_URL)
    assert [r.headers["X-Shopify-Access-Token"] for r in order_requests] == ["shpat_granted"] * 2


def test_rejected_token_is_dropped(app, client, upstream, order_body):
    configure(
        app,
        SHOPIFY_ACCESS_TOKEN=None,
        SHOPIFY_CLIENT_ID="shopify-client",
        SHOPIFY_CLIENT_SECRET="shopify-secret",
    )
    upstream.add("POST", SHOPIFY_TOKEN_URL, (200, {"access_token": "shpat_granted"}))
    responses = iter([
        httpx.Response(401, json={"errors": "[API] Invalid API key or access token"}),
        httpx.Response(201, json={"order": SHOPIFY_ORDER}),
    ])
    upstream.add("POST", SHOPIFY_ORDERS_URL, lambda request: next(responses))

    first = client.post("/api/shopify/create-order", json=order_body)
    second = client.post("/api/shopify/create-order", json=order_body)

    assert first.status_code == 401
    assert second.status_code == 200
    assert len(upstream.calls("POST", SHOPIFY_TOKEN_URL)) == 2


def test_failed_token_request_is_bad_gateway(app, client, upstream, order_body):
    configure(
        app,
        SHOPIFY_ACCESS_TOKEN=None,
        SHOPIFY_CLIENT_ID="shopify-client",
        SHOPIFY_CLIENT_SECRET="wrong-secret",
    )
    upstream.add("POST", SHOPIFY_TOKEN_URL, (400, {"error": "invalid_client"}))

    response = client.post("/api/shopify/create-order", json=order_body)

    assert response.status_code == 502
    assert response.json()["code"] == "authentication_error"
    assert upstream.calls("POST", SHOPIFY_ORDERS_URL) == []


def test_placeholder_key_secret_skips_verification(app, client, upstream, order_body):
    configure(app, RAZORPAY_KEY_SECRET="YOUR_RAZORPAY_KEY_SECRET")
    upstream.add("POST", SHOPIFY_ORDERS_URL, (201, {"order": SHOPIFY_ORDER}))

    response = client.post("/api/shopify/create-order", json=order_body)

    assert response.status_code == 200
    order = request_json(upstream.calls("POST", SHOPIFY_ORDERS_URL)[0])["order"]
    assert {"name": "payment_verified", "value": "false"} in order["note_attributes"]


def test_placeholder_key_secret_fails_strict_mode(app, client, upstream, order_body):
    configure(app, RAZORPAY_KEY_SECRET="YOUR_RAZORPAY_KEY_SECRET", REQUIRE_PAYMENT_SIGNATURE=True)

    response = client.post("/api/shopify/create-order", json=order_body)

    assert response.status_code == 500
    assert error_of(response) == "Razorpay not configured"
    assert upstream.requests == []


def test_non_ascii_signature_is_rejected(client, upstream, order_body):
    order_body["razorpay_signature"] = "é" * 64

    response = client.post("/api/shopify/create-order", json=order_body)

    assert response.status_code == 400
    assert error_of(response) == "Invalid payment signature. Payment verification failed."
    assert upstream.requests == []


def test_non_finite_total_is_rejected(client, upstream):
    response = client.post(
        "/api/shopify/create-order",
        content=b'{"razorpay_payment_id": "pay_NXa1b2c3d4e5f6", "cartItems": [], "totalAmount": NaN}',
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["success"] is False
    assert upstream.requests == []
