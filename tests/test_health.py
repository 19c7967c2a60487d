from conftest import configure


def test_health(client, settings):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "version": settings.VERSION, "service": settings.PROJECT_NAME}


def test_detailed_health_reports_configuration_only(client):
    response = client.get("/api/health/detailed")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert {i["name"]: i["mode"] for i in body["integrations"]} == {
        "razorpay": "live",
        "shopify": "static_token",
        "cloudinary": "unsigned",
    }
    for secret in ("rzp_test_secret", "shpat_static_token", "storefront_unsigned"):
        assert secret not in response.text


def test_detailed_health_is_degraded_without_credentials(app, client):
    configure(app, RAZORPAY_KEY_SECRET=None, PAYMENT_TEST_MODE=True, SHOPIFY_ACCESS_TOKEN=None)

    body = client.get("/api/health/detailed").json()

    assert body["status"] == "degraded"
    modes = {i["name"]: (i["configured"], i["mode"]) for i in body["integrations"]}
    assert modes["razorpay"] == (False, "mock")
    assert modes["shopify"] == (False, "disabled")


def test_cors_headers(client):
    response = client.get("/api/health", headers={"Origin": "https://shop.example.com"})

    assert response.headers["access-control-allow-origin"] == "*"


def test_cors_preflight(client):
    response = client.options(
        "/api/razorpay/order",
        headers={
            "Origin": "https://shop.example.com",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Content-Type",
        },
    )

    assert response.status_code == 200
    assert "POST" in response.headers["access-control-allow-methods"]


def test_correlation_id_is_echoed(client):
    response = client.get("/api/health", headers={"X-Correlation-ID": "checkout-7f3a"})

    assert response.headers["X-Correlation-ID"] == "checkout-7f3a"


def test_correlation_id_is_generated(client):
    response = client.get("/api/health")

    assert response.headers["X-Correlation-ID"]


def test_unknown_route_uses_error_shape(client):
    response = client.get("/api/nowhere")

    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Not Found", "code": "http_error"}


def test_wrong_method(client):
    response = client.get("/api/razorpay/order")

    assert response.status_code == 405
    assert response.json()["success"] is False
