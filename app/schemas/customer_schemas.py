from pydantic import BaseModel, EmailStr, Field
from typing import List, Literal, Optional
from typing_extensions import Annotated
from datetime import datetime
from decimal import Decimal

NonNegativeDecimal = Annotated[Decimal, Field(ge=0, max_digits=14, decimal_places=2)]

class CustomerBase(BaseModel):
    name: str
    phone: str = Field(..., min_length=3, max_length=30)
    email: Optional[EmailStr] = None
    customer_type: Literal["regular", "vip", "staff"] = "regular"
    min_order_amount: Optional[NonNegativeDecimal] = None

class CustomerCreate(CustomerBase):
    pass

class CustomerUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    customer_type: Optional[Literal["regular", "vip", "staff"]] = None
    min_order_amount: Optional[NonNegativeDecimal] = None
    is_active: Optional[bool] = None

class CustomerOut(CustomerBase):
    id: int
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class CustomerResponse(BaseModel):
    message: str
    data: Optional[CustomerOut] = None

class CustomerListResponse(BaseModel):
    message: str
    total: int
    data: List[CustomerOut]
