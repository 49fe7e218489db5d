from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel
from typing import List, Literal, Optional
from typing_extensions import Annotated
from datetime import datetime
from decimal import Decimal

Rate = Annotated[Decimal, Field(ge=0, le=100, max_digits=5, decimal_places=2)]
NonNegativeDecimal = Annotated[Decimal, Field(ge=0, max_digits=14, decimal_places=2)]
HHMM = Annotated[str, Field(pattern=r"^([01]\d|2[0-3]):[0-5]\d$")]
Weekday = Annotated[int, Field(ge=0, le=6)]  # 0 = Sunday

DiningType = Literal["dine_in", "takeaway", "reservation"]
CustomerType = Literal["regular", "vip", "staff"]


class TaxRuleBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    rate: Rate
    priority: int = 0
    is_active: bool = True
    min_order_amount: Optional[NonNegativeDecimal] = None
    max_order_amount: Optional[NonNegativeDecimal] = None
    dining_type: Literal["dine_in", "takeaway", "reservation", "all"] = "all"
    customer_type: Literal["regular", "vip", "staff", "all"] = "all"
    specific_tables: Optional[List[int]] = None
    exclude_tables: Optional[List[int]] = None
    time_start: Optional[HHMM] = None
    time_end: Optional[HHMM] = None
    days_of_week: Optional[List[Weekday]] = None

    @model_validator(mode="after")
    def check_bounds(self):
        if (
            self.min_order_amount is not None
            and self.max_order_amount is not None
            and self.min_order_amount > self.max_order_amount
        ):
            raise ValueError("Minimum order amount cannot be greater than maximum order amount")
        if (self.time_start is None) != (self.time_end is None):
            raise ValueError("time_start and time_end must be set together")
        return self


class TaxRuleCreate(TaxRuleBase):
    pass


class TaxRuleOut(TaxRuleBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# --------------------------
# Tax calculation endpoint (camelCase wire format)
# --------------------------
class TaxCalculationRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    order_amount: NonNegativeDecimal
    dining_type: DiningType
    table_number: Optional[int] = None
    customer_type: Optional[CustomerType] = None
    order_time: Optional[datetime] = None


class ApplicableTax(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: Optional[int] = None
    name: str
    rate: Decimal
    amount: Decimal
    priority: int = 0


class TaxCalculationResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    order_amount: Decimal
    applicable_taxes: List[ApplicableTax]
    total_tax_rate: Decimal
    total_tax_amount: Decimal
    final_total: Decimal
    calculated_at: datetime


class TaxRuleDeleted(BaseModel):
    id: int
    message: str
