from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Literal, Optional
from typing_extensions import Annotated
from datetime import datetime, timezone
from decimal import Decimal

PositiveDecimal = Annotated[Decimal, Field(gt=0, max_digits=14, decimal_places=2)]
NonNegativeDecimal = Annotated[Decimal, Field(ge=0, max_digits=14, decimal_places=2)]


def _upper(code):
    return code.strip().upper() if isinstance(code, str) else code


def _to_utc(value):
    # SQLite drops the offset on write, so store UTC wall-clock time
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


Code = Annotated[str, BeforeValidator(_upper), Field(min_length=1, max_length=50)]
UtcDatetime = Annotated[datetime, AfterValidator(_to_utc)]


class DiscountCodeBase(BaseModel):
    code: Code
    description: Optional[str] = None
    type: Literal["percentage", "fixed"]
    value: PositiveDecimal
    applies_to: Literal["order", "product", "category"] = "order"
    active: bool = True
    expires_at: Optional[UtcDatetime] = None
    usage_limit: Optional[int] = Field(default=None, ge=1)
    min_order_amount: Optional[NonNegativeDecimal] = None
    max_discount_amount: Optional[PositiveDecimal] = None


class DiscountCodeCreate(DiscountCodeBase):
    pass


class DiscountCodeUpdate(BaseModel):
    code: Optional[Code] = None
    description: Optional[str] = None
    type: Optional[Literal["percentage", "fixed"]] = None
    value: Optional[PositiveDecimal] = None
    applies_to: Optional[Literal["order", "product", "category"]] = None
    active: Optional[bool] = None
    expires_at: Optional[UtcDatetime] = None
    usage_limit: Optional[int] = Field(default=None, ge=1)
    min_order_amount: Optional[NonNegativeDecimal] = None
    max_discount_amount: Optional[PositiveDecimal] = None


class DiscountCodeOut(DiscountCodeBase):
    id: int
    used_count: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class DiscountValidateRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    code: str = Field(..., min_length=1)
    order_total: NonNegativeDecimal


class DiscountValidateResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    ok: bool
    code: str
    type: Optional[str] = None
    value: Optional[Decimal] = None
    discount_amount: Decimal = Decimal("0.00")
    description: Optional[str] = None
    reason: Optional[str] = None
    message: Optional[str] = None
