"""
Ordering Service — Pydantic schemas for orders and checkout
"""
from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, EmailStr, Field

from ordering.models.order import OrderStatus

SpiceLevel = Literal["mild", "medium", "hot"]


class OrderItemSchema(BaseModel):
    menu_item_id: str | None = None
    name: str = Field(..., min_length=1, max_length=255)
    unit_price: Decimal = Field(..., ge=0, decimal_places=2)
    quantity: int = Field(..., ge=1)
    spice_level: SpiceLevel | None = None
    addons: list[str] | None = None


class OrderCreateRequest(BaseModel):
    items: list[OrderItemSchema] = Field(..., min_length=1)
    total: Decimal = Field(..., ge=0)
    user_id: str | None = None
    special_instructions: str | None = Field(None, max_length=1000)
    customer_name: str | None = Field(None, max_length=255)
    customer_email: EmailStr | None = None
    customer_phone: str | None = Field(None, max_length=64)


class OrderResponse(BaseModel):
    id: str
    user_id: str | None = None
    items: list[OrderItemSchema]
    total: Decimal
    status: OrderStatus
    payment_status: str | None = None
    stripe_session_id: str | None = None
    special_instructions: str | None = None
    customer_name: str | None = None
    customer_email: str | None = None
    customer_phone: str | None = None
    created_at: datetime
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class StatusUpdateRequest(BaseModel):
    status: OrderStatus


class StatusEventResponse(BaseModel):
    from_status: OrderStatus
    to_status: OrderStatus
    source: str
    created_at: datetime

    model_config = {"from_attributes": True}


class SweepResponse(BaseModel):
    success: bool = True
    message: str
    examined: int
    updated_count: int


# ── Checkout ─────────────────────────────────────────────────────────────────

class CartLine(BaseModel):
    menu_item_id: str = Field(..., min_length=1, examples=["665f1c2e9b1d4a0012ab34cd"])
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=1000)
    price: Decimal = Field(..., ge=0, decimal_places=2)
    quantity: int = Field(..., ge=1, le=50)
    spice_level: SpiceLevel | None = None
    addons: list[str] | None = None


class CheckoutRequest(BaseModel):
    items: list[CartLine] = Field(..., min_length=1, max_length=50)
    total: Decimal = Field(..., ge=0)
    special_instructions: str | None = Field(None, max_length=1000)
    customer_name: str | None = Field(None, max_length=255)
    customer_email: EmailStr | None = None
    customer_phone: str | None = Field(None, max_length=64)


class CheckoutResponse(BaseModel):
    session_id: str
    url: str
    order_id: str
    computed_total: Decimal


# ── Confirmation email ───────────────────────────────────────────────────────

class ConfirmationEmailRequest(BaseModel):
    customer_email: EmailStr
    customer_name: str | None = Field(None, max_length=255)
    order_number: str = Field(..., min_length=1, max_length=64)
    items: list[OrderItemSchema] = Field(..., min_length=1)
    subtotal: Decimal | None = Field(None, ge=0)
    delivery_fee: Decimal | None = Field(None, ge=0)
    total: Decimal = Field(..., ge=0)
    special_instructions: str | None = Field(None, max_length=1000)


class ConfirmationEmailResponse(BaseModel):
    success: bool = True
