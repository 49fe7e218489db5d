from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from app.schemas.customer_schemas import (
    CustomerCreate, CustomerUpdate,
    CustomerOut, CustomerResponse, CustomerListResponse
)
from app.services import customer_service
from app.core.db import get_db
from app.utils.get_user import get_current_user
from app.utils.check_roles import require_role, STAFF, ADMIN

router = APIRouter(prefix="/customers", tags=["Customers"])

# LOOKUP BY PHONE (checkout uses this for the per-customer minimum)
@router.get("/lookup", response_model=CustomerOut)
async def lookup_customer_route(
    phone: str = Query(..., min_length=3, description="Customer phone number"),
    db: AsyncSession = Depends(get_db),
):
    customer = await customer_service.get_customer_by_phone(db, phone)
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    return customer


# CREATE
@router.post("/", response_model=CustomerResponse, status_code=201)
@require_role(STAFF)
async def create_customer_route(
    customer: CustomerCreate,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user)
):
    return await customer_service.create_customer(db, customer)


# GET SINGLE
@router.get("/{customer_id}", response_model=CustomerResponse)
@require_role(STAFF)
async def get_customer_route(
    customer_id: int,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user)
):
    return await customer_service.get_customer(db, customer_id)


# GET ALL WITH SEARCH, PAGINATION
@router.get("/", response_model=CustomerListResponse)
@require_role(STAFF)
async def list_customers_route(
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
    name: str = Query(None, description="Filter by name"),
    phone: str = Query(None, description="Filter by phone"),
    limit: int = Query(50, ge=1, le=100, description="Limit number of results"),
    offset: int = Query(0, ge=0, description="Offset for pagination"),
):
    return await customer_service.get_all_customers(db, name, phone, limit, offset)


# UPDATE
@router.put("/{customer_id}", response_model=CustomerResponse)
@require_role(ADMIN)
async def update_customer_route(
    customer_id: int,
    customer: CustomerUpdate,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user)
):
    return await customer_service.update_customer(db, customer_id, customer.model_dump(exclude_unset=True))
