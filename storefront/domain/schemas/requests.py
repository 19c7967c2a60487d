"""Request bodies accepted by the storefront endpoints.

Field names follow what the storefront SPA sends (camelCase for cart and
customer data, Razorpay's own snake_case for payment identifiers). Most
fields are optional here; the services decide which ones are required so
they can answer with the same error messages the storefront already shows.
"""

from typing import Any, List, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class StorefrontModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", coerce_numbers_to_str=True)


class Money(StorefrontModel):
    amount: Union[float, str, None] = None
    currency_code: Optional[str] = Field(default=None, alias="currencyCode")


class CartVariant(StorefrontModel):
    id: Union[int, str, None] = None
    title: Optional[str] = None
    price: Union[Money, float, str, None] = None


class CustomAttribute(StorefrontModel):
    key: Optional[str] = Field(default=None, validation_alias=AliasChoices("key", "name"))
    value: Any = None


class CartItem(StorefrontModel):
    title: Optional[str] = None
    quantity: Union[int, str, None] = None
    price: Union[float, str, None] = None
    variant: Optional[CartVariant] = None
    custom_attributes: List[CustomAttribute] = Field(default_factory=list, alias="customAttributes")


class CustomerAddress(StorefrontModel):
    first_name: Optional[str] = Field(default=None, validation_alias=AliasChoices("firstName", "first_name"))
    last_name: Optional[str] = Field(default=None, validation_alias=AliasChoices("lastName", "last_name"))
    address1: Optional[str] = Field(default=None, validation_alias=AliasChoices("address", "address1"))
    address2: Optional[str] = Field(default=None, validation_alias=AliasChoices("apartment", "address2"))
    city: Optional[str] = None
    province: Optional[str] = Field(default=None, validation_alias=AliasChoices("state", "province"))
    zip: Optional[str] = Field(default=None, validation_alias=AliasChoices("zip", "pincode"))
    phone: Optional[str] = None


class PaymentOrderRequest(StorefrontModel):
    """Body of the payment-order endpoint. `amount` is in minor units (paise)."""
    amount: Optional[float] = Field(default=None, allow_inf_nan=False)
    currency: Optional[str] = None
    receipt: Optional[str] = None


class CreateOrderRequest(StorefrontModel):
    """Body of the order-confirmation endpoint, sent after checkout succeeds."""
    razorpay_payment_id: Optional[str] = None
    razorpay_order_id: Optional[str] = None
    razorpay_signature: Optional[str] = None
    cart_items: Optional[List[CartItem]] = Field(default=None, alias="cartItems")
    customer_address: Optional[CustomerAddress] = Field(default=None, alias="customerAddress")
    email: Optional[str] = None
    phone: Optional[str] = None
    total_amount: Optional[float] = Field(default=None, alias="totalAmount", allow_inf_nan=False)
    discount_code: Optional[str] = Field(default=None, alias="discountCode")
    discount_amount: Optional[float] = Field(default=None, alias="discountAmount", allow_inf_nan=False)


class UploadRequest(StorefrontModel):
    file: Optional[str] = None
    folder: Optional[str] = None
    filename: Optional[str] = None


class TrackingRequest(StorefrontModel):
    tracking_number: Optional[str] = Field(default=None, alias="trackingNumber")
    carrier: Optional[str] = None
    fulfillment_status: Optional[str] = Field(default=None, alias="fulfillmentStatus")
