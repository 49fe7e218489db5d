from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.core.db import get_db
from app.schemas.tax_schemas import (
    TaxRuleCreate,
    TaxRuleOut,
    TaxCalculationRequest,
    TaxCalculationResponse,
    TaxRuleDeleted,
)
from app.services import tax_rule_service
from app.utils.check_roles import require_role, ADMIN
from app.utils.get_user import get_current_user

router = APIRouter(prefix="/tax-rules", tags=["Tax Rules"])


@router.get("/", response_model=List[TaxRuleOut])
async def route_get_tax_rules(
    db: AsyncSession = Depends(get_db),
    active: bool = Query(False, description="Only return active rules"),
):
    """
    All tax rules, highest priority first.
    Example: /tax-rules?active=true
    """
    return await tax_rule_service.get_all_tax_rules(db, active_only=active)


@router.post("/calculate", response_model=TaxCalculationResponse)
async def route_calculate_taxes(payload: TaxCalculationRequest, db: AsyncSession = Depends(get_db)):
    """
    Apply every matching active rule to an order amount.
    All matching rules stack; the response lists them by priority.
    """
    return await tax_rule_service.calculate_taxes(db, payload)


@router.get("/{rule_id}", response_model=TaxRuleOut)
async def route_get_tax_rule(rule_id: int, db: AsyncSession = Depends(get_db)):
    return await tax_rule_service.get_tax_rule_by_id(db, rule_id)


@router.post("/", response_model=TaxRuleOut, status_code=201)
@require_role(ADMIN)
async def route_create_tax_rule(
    payload: TaxRuleCreate,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await tax_rule_service.create_tax_rule(db, payload, _user)


@router.put("/{rule_id}", response_model=TaxRuleOut)
@require_role(ADMIN)
async def route_update_tax_rule(
    rule_id: int,
    payload: TaxRuleCreate,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    """Replace all fields of a tax rule."""
    return await tax_rule_service.update_tax_rule(db, rule_id, payload, _user)


@router.delete("/{rule_id}", response_model=TaxRuleDeleted)
@require_role(ADMIN)
async def route_delete_tax_rule(
    rule_id: int,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await tax_rule_service.delete_tax_rule(db, rule_id, _user)
