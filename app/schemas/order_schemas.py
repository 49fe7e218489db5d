from pydantic import BaseModel, Field
from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional, Union
from datetime import datetime
from typing_extensions import Annotated
from app.models.order_models import OrderStatus, PaymentStatus
from app.schemas.tax_schemas import ApplicableTax, CustomerType, DiningType

NonNegativeDecimal = Annotated[Decimal, Field(ge=0, max_digits=14, decimal_places=2)]


# --------------------------
# Customizations captured on a cart line
# --------------------------
class SizeChoice(BaseModel):
    kind: Literal["size"] = "size"
    name: str
    price: NonNegativeDecimal

class OptionSelection(BaseModel):
    kind: Literal["options"] = "options"
    group: str
    values: List[str]

class AddOn(BaseModel):
    kind: Literal["add_on"] = "add_on"
    name: str
    price: NonNegativeDecimal

class NoteEntry(BaseModel):
    kind: Literal["note"] = "note"
    text: str

Customization = Annotated[Union[SizeChoice, OptionSelection, AddOn, NoteEntry], Field(discriminator="kind")]


class CartLineIn(BaseModel):
    product_id: Optional[str] = None
    name: str = Field(..., min_length=1)
    unit_price: NonNegativeDecimal  # includes size/customization modifiers
    quantity: int = Field(..., ge=1)
    customizations: List[Customization] = Field(default_factory=list)
    notes: Optional[str] = None


class PricingRequest(BaseModel):
    items: List[CartLineIn] = Field(..., min_length=1)
    table_number: Optional[int] = Field(default=None, ge=1)
    dining_type: DiningType = "dine_in"
    customer_type: Optional[CustomerType] = None
    customer_phone: Optional[str] = None
    discount_code: Optional[str] = None
    order_time: Optional[datetime] = None


class CheckoutRequest(PricingRequest):
    table_number: int = Field(..., ge=1)
    payment_method: Literal["cash", "card"]
    customer_name: Optional[str] = None


class QuoteResponse(BaseModel):
    subtotal: Decimal
    discount_code: Optional[str] = None
    discount_amount: Decimal
    discount_reason: Optional[str] = None
    discount_message: Optional[str] = None
    service_charge: Decimal
    taxable_amount: Decimal
    tax_amount: Decimal
    total_tax_rate: Decimal
    applicable_taxes: List[ApplicableTax]
    tax_fallback: bool = False
    final_total: Decimal
    required_minimum: Decimal
    eligible: bool
    shortfall: Decimal


# --------------------------
# Persisted orders
# --------------------------
class OrderItemOut(BaseModel):
    id: int
    product_id: Optional[str] = None
    product_name: str
    quantity: int
    unit_price: Decimal
    total_price: Decimal
    customizations: List[Dict[str, Any]]
    notes: Optional[str] = None

    class Config:
        from_attributes = True


class OrderOut(BaseModel):
    id: int
    table_number: int
    dining_type: str
    subtotal: Decimal
    discount_code: Optional[str] = None
    discount_amount: Decimal
    service_charge: Decimal
    tax_amount: Decimal
    total_amount: Decimal
    tax_breakdown: Optional[List[Dict[str, Any]]] = None
    status: OrderStatus
    payment_method: str
    payment_status: PaymentStatus
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    created_at: Optional[datetime] = None
    items: List[OrderItemOut] = Field(default_factory=list)

    class Config:
        from_attributes = True


class OrderStatusUpdate(BaseModel):
    status: Optional[OrderStatus] = None
    payment_status: Optional[PaymentStatus] = None
