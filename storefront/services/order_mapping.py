"""Mapping from storefront checkout data to Shopify Admin API order payloads."""

import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, List, Optional, Union

from storefront.domain.schemas.requests import CartItem, CreateOrderRequest, CustomerAddress, Money

DEFAULT_LINE_ITEM_TITLE = "Product"
DEFAULT_VARIANT_TITLE = "Default Title"
ORDER_TAGS = "razorpay, online-payment, website-order"

_GID_TAIL = re.compile(r"/(\d+)$")

INDIAN_STATE_CODES: Dict[str, str] = {
    "Andhra Pradesh": "AP", "Arunachal Pradesh": "AR", "Assam": "AS",
    "Bihar": "BR", "Chhattisgarh": "CT", "Goa": "GA", "Gujarat": "GJ",
    "Haryana": "HR", "Himachal Pradesh": "HP", "Jharkhand": "JH",
    "Karnataka": "KA", "Kerala": "KL", "Madhya Pradesh": "MP",
    "Maharashtra": "MH", "Manipur": "MN", "Meghalaya": "ML",
    "Mizoram": "MZ", "Nagaland": "NL", "Odisha": "OR", "Punjab": "PB",
    "Rajasthan": "RJ", "Sikkim": "SK", "Tamil Nadu": "TN",
    "Telangana": "TG", "Tripura": "TR", "Uttar Pradesh": "UP",
    "Uttarakhand": "UK", "West Bengal": "WB", "Delhi": "DL",
    "Jammu and Kashmir": "JK", "Ladakh": "LA", "Puducherry": "PY",
    "Chandigarh": "CH", "Andaman and Nicobar Islands": "AN",
    "Dadra and Nagar Haveli and Daman and Diu": "DN", "Lakshadweep": "LD",
}


def format_amount(value: Any) -> str:
    """Format a price as a 2-decimal string; unparseable values become 0.00."""
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        amount = Decimal("0")
    if not amount.is_finite():
        amount = Decimal("0")
    return str(amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def extract_variant_id(gid: Union[int, str, None]) -> Optional[int]:
    """
    Extract the numeric variant ID from a Shopify global ID.

    ``gid://shopify/ProductVariant/123`` and ``"123"`` both give ``123``;
    anything without a numeric ID gives None.
    """
    if gid is None or isinstance(gid, bool):
        return None
    if isinstance(gid, int):
        return gid

    value = gid.strip()
    match = _GID_TAIL.search(value)
    if match:
        return int(match.group(1))
    return int(value) if value.isdigit() else None


def parse_quantity(quantity: Union[int, str, None]) -> int:
    try:
        parsed = int(float(str(quantity).strip()))
    except (TypeError, ValueError, OverflowError):
        return 1
    return parsed or 1


def _item_price(item: CartItem) -> Any:
    variant_price = item.variant.price if item.variant else None
    if isinstance(variant_price, Money):
        variant_price = variant_price.amount
    return variant_price or item.price or 0


def map_cart_items_to_line_items(cart_items: List[CartItem]) -> List[Dict[str, Any]]:
    """Map storefront cart items to Shopify ``line_items``."""
    line_items = []
    for item in cart_items:
        title = item.title or DEFAULT_LINE_ITEM_TITLE
        line_item: Dict[str, Any] = {
            "title": title,
            "name": title,
            "quantity": parse_quantity(item.quantity),
            "price": format_amount(_item_price(item)),
            "requires_shipping": True,
            "taxable": True,
            "fulfillment_status": None,
        }

        if item.variant:
            # Keep the variant link when we have one, for inventory tracking
            variant_id = extract_variant_id(item.variant.id)
            if variant_id is not None:
                line_item["variant_id"] = variant_id
            if item.variant.title and item.variant.title != DEFAULT_VARIANT_TITLE:
                line_item["variant_title"] = item.variant.title

        # Engraving, gift wrap and other per-item options
        if item.custom_attributes:
            line_item["properties"] = [
                {"name": attr.key, "value": attr.value}
                for attr in item.custom_attributes
            ]

        line_items.append(line_item)
    return line_items


def get_province_code(state_name: Optional[str]) -> str:
    return INDIAN_STATE_CODES.get((state_name or "").strip(), "")


def map_to_shopify_address(address: Optional[CustomerAddress], phone: Optional[str]) -> Dict[str, Any]:
    """Map the checkout address form to a Shopify address."""
    address = address or CustomerAddress()
    return {
        "first_name": address.first_name or "",
        "last_name": address.last_name or "",
        "address1": address.address1 or "",
        "address2": address.address2 or "",
        "city": address.city or "",
        "province": address.province or "",
        "province_code": get_province_code(address.province),
        "zip": address.zip or "",
        "country": "India",
        "country_code": "IN",
        "phone": phone or address.phone or "",
    }


def build_order_payload(request: CreateOrderRequest, payment_verified: bool) -> Dict[str, Any]:
    """
    Build the Admin API payload for a storefront order that has been paid.

    The order is created as paid and unfulfilled, with the Razorpay identifiers
    recorded in the note and note attributes so staff can reconcile payments.
    """
    payment_id = request.razorpay_payment_id
    phone = request.phone or (request.customer_address.phone if request.customer_address else None) or ""
    shipping_address = map_to_shopify_address(request.customer_address, phone)

    order: Dict[str, Any] = {
        "email": request.email,
        "phone": phone,
        "financial_status": "paid",
        "fulfillment_status": None,
        "line_items": map_cart_items_to_line_items(request.cart_items or []),
        "shipping_address": shipping_address,
        "billing_address": dict(shipping_address),
        "note": f"Paid via Razorpay (Payment ID: {payment_id})",
        "note_attributes": [
            {"name": "razorpay_payment_id", "value": payment_id},
            {"name": "razorpay_order_id", "value": request.razorpay_order_id or "N/A"},
            {"name": "payment_method", "value": "Razorpay"},
            {"name": "payment_verified", "value": "true" if payment_verified else "false"},
        ],
        "tags": ORDER_TAGS,
        "send_receipt": True,
        "send_fulfillment_receipt": True,
        "inventory_behaviour": "decrement_obeying_policy",
    }

    if request.total_amount:
        order["transactions"] = [{
            "kind": "sale",
            "status": "success",
            "amount": format_amount(request.total_amount),
            "gateway": "Razorpay",
            "source_name": "web",
            "authorization": payment_id,
        }]

    if request.discount_code and request.discount_amount and request.discount_amount > 0:
        order["discount_codes"] = [{
            "code": request.discount_code,
            "amount": format_amount(request.discount_amount),
            "type": "fixed_amount",
        }]

    return {"order": order}


def summarise_order(order: Dict[str, Any]) -> Dict[str, Any]:
    """Pick the fields of a created order the storefront confirmation page shows."""
    return {
        "id": order.get("id"),
        "name": order.get("name"),
        "order_number": order.get("order_number"),
        "confirmation_number": order.get("confirmation_number"),
        "total_price": order.get("total_price"),
        "subtotal_price": order.get("subtotal_price"),
        "total_tax": order.get("total_tax"),
        "currency": order.get("currency"),
        "financial_status": order.get("financial_status"),
        "fulfillment_status": order.get("fulfillment_status"),
        "order_status_url": order.get("order_status_url"),
        "created_at": order.get("created_at"),
        "customer": {
            "email": order.get("email"),
            "phone": order.get("phone"),
        },
    }
