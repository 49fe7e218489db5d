from typing import Optional

from fastapi import HTTPException
from sqlalchemy import func, desc
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.models.customer_models import Customer
from app.schemas.customer_schemas import (
    CustomerCreate,
    CustomerOut,
    CustomerResponse,
    CustomerListResponse,
)


async def get_customer_by_phone(db: AsyncSession, phone: str) -> Optional[Customer]:
    result = await db.execute(
        select(Customer).where(Customer.phone == phone.strip(), Customer.is_active == True)
    )
    return result.scalars().first()


async def create_customer(db: AsyncSession, customer_data: CustomerCreate) -> CustomerResponse:
    customer = Customer(**customer_data.model_dump())
    customer.phone = customer.phone.strip()
    db.add(customer)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=400, detail="Customer with this phone already exists.")
    await db.refresh(customer)

    return CustomerResponse(
        message="Customer created successfully",
        data=CustomerOut.model_validate(customer, from_attributes=True),
    )


async def get_customer(db: AsyncSession, customer_id: int) -> CustomerResponse:
    customer = await db.get(Customer, customer_id)
    if not customer or not customer.is_active:
        raise HTTPException(status_code=404, detail="Customer not found")
    return CustomerResponse(
        message="Customer retrieved successfully",
        data=CustomerOut.model_validate(customer, from_attributes=True),
    )


async def get_all_customers(
    db: AsyncSession,
    name: str = None,
    phone: str = None,
    limit: int = 50,
    offset: int = 0,
) -> CustomerListResponse:
    query = select(Customer).where(Customer.is_active == True)

    # Apply search filters
    if name:
        query = query.where(Customer.name.ilike(f"%{name}%"))
    if phone:
        query = query.where(Customer.phone.ilike(f"%{phone.strip()}%"))

    # Total count
    count_query = select(func.count()).select_from(query.subquery())
    total = (await db.execute(count_query)).scalar() or 0

    query = query.order_by(desc(Customer.created_at), desc(Customer.id)).offset(offset).limit(limit)
    result = await db.execute(query)

    return CustomerListResponse(
        message="Customers retrieved successfully",
        total=total,
        data=[CustomerOut.model_validate(c, from_attributes=True) for c in result.scalars().all()],
    )


CLEARABLE_FIELDS = {"email", "min_order_amount"}


async def update_customer(db: AsyncSession, customer_id: int, data: dict) -> CustomerResponse:
    customer = await db.get(Customer, customer_id)
    if not customer or not customer.is_active:
        raise HTTPException(status_code=404, detail="Customer not found")
    for key, value in data.items():
        # explicit null only clears optional columns
        if value is None and key not in CLEARABLE_FIELDS:
            continue
        setattr(customer, key, value)
    await db.commit()
    await db.refresh(customer)

    return CustomerResponse(
        message="Customer updated successfully",
        data=CustomerOut.model_validate(customer, from_attributes=True),
    )
