"""Request signing and signature verification for the upstream providers."""

import hashlib
import hmac
from typing import Any, Mapping


def razorpay_payment_signature(order_id: str, payment_id: str, secret: str) -> str:
    """Hex HMAC-SHA256 of ``order_id|payment_id`` keyed by the Razorpay key secret."""
    body = f"{order_id}|{payment_id}".encode("utf-8")
    return hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()


def verify_razorpay_signature(order_id: str, payment_id: str, signature: str, secret: str) -> bool:
    """
    Verify the signature Razorpay checkout hands back after a payment.

    Args:
        order_id: Razorpay order ID the payment was made against
        payment_id: Razorpay payment ID
        signature: Signature returned by the checkout widget
        secret: Razorpay key secret

    Returns:
        True when the signature matches
    """
    expected_signature = razorpay_payment_signature(order_id, payment_id, secret)

    # Compare as bytes; compare_digest rejects non-ASCII str input
    return hmac.compare_digest(
        expected_signature.encode("utf-8"),
        signature.strip().lower().encode("utf-8"),
    )


def cloudinary_signature(params: Mapping[str, Any], api_secret: str) -> str:
    """
    Sign Cloudinary upload parameters.

    Parameters are sorted by name, joined as ``k=v`` pairs with ``&`` and the
    API secret is appended before hashing with SHA-1. Empty values are left
    out, as Cloudinary ignores them when checking the signature.
    """
    to_sign = "&".join(
        f"{key}={params[key]}"
        for key in sorted(params)
        if params[key] not in (None, "")
    )
    return hashlib.sha1(f"{to_sign}{api_secret}".encode("utf-8")).hexdigest()
