from dataclasses import asdict
from datetime import datetime, timezone
from typing import List
import logging

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.tax_models import TaxRule
from app.schemas.tax_schemas import (
    TaxRuleCreate,
    TaxRuleOut,
    TaxCalculationRequest,
    TaxCalculationResponse,
    ApplicableTax,
)
from app.services.pricing_services import OrderContext, match_rules, aggregate
from app.utils.activity_helpers import log_user_activity

logger = logging.getLogger(__name__)


# -----------------------
# READ
# -----------------------
async def get_all_tax_rules(db: AsyncSession, active_only: bool = False) -> List[TaxRule]:
    query = select(TaxRule).order_by(TaxRule.priority.desc(), TaxRule.created_at.desc(), TaxRule.id.desc())
    if active_only:
        query = query.where(TaxRule.is_active == True)
    result = await db.execute(query)
    return result.scalars().all()


async def get_tax_rule_by_id(db: AsyncSession, rule_id: int) -> TaxRule:
    rule = await db.get(TaxRule, rule_id)
    if not rule:
        raise HTTPException(status_code=404, detail="Tax rule not found")
    return rule


async def fetch_active_rules(db: AsyncSession) -> List[TaxRuleOut]:
    """Snapshot of active rules, highest priority first, detached from the session."""
    rules = await get_all_tax_rules(db, active_only=True)
    return [TaxRuleOut.model_validate(rule, from_attributes=True) for rule in rules]


# -----------------------
# CREATE / UPDATE / DELETE
# -----------------------
async def create_tax_rule(db: AsyncSession, payload: TaxRuleCreate, _user) -> TaxRule:
    rule = TaxRule(**payload.model_dump())
    db.add(rule)
    await db.flush()

    await log_user_activity(db, _user, message=f"Created tax rule '{rule.name}' ({rule.rate}%)", entity_type="tax_rule", entity_key=rule.id)

    await db.commit()
    await db.refresh(rule)
    logger.info("Tax rule %s created by %s", rule.id, _user.username)
    return rule


async def update_tax_rule(db: AsyncSession, rule_id: int, payload: TaxRuleCreate, _user) -> TaxRule:
    rule = await get_tax_rule_by_id(db, rule_id)

    for key, value in payload.model_dump().items():
        setattr(rule, key, value)

    await log_user_activity(db, _user, message=f"Updated tax rule '{rule.name}' (ID: {rule.id})", entity_type="tax_rule", entity_key=rule.id)

    await db.commit()
    await db.refresh(rule)
    return rule


async def delete_tax_rule(db: AsyncSession, rule_id: int, _user) -> dict:
    # Orders keep their own tax amounts, so rules can be removed outright
    rule = await get_tax_rule_by_id(db, rule_id)
    name = rule.name
    await db.delete(rule)

    await log_user_activity(db, _user, message=f"Deleted tax rule '{name}' (ID: {rule_id})", entity_type="tax_rule", entity_key=rule_id)

    await db.commit()
    return {"id": rule_id, "message": "Tax rule deleted successfully"}


# -----------------------
# CALCULATE
# -----------------------
async def calculate_taxes(db: AsyncSession, request: TaxCalculationRequest) -> TaxCalculationResponse:
    try:
        rules = await fetch_active_rules(db)
    except SQLAlchemyError:
        logger.exception("Error fetching tax rules")
        raise HTTPException(status_code=500, detail="Failed to fetch tax rules")

    context = OrderContext(
        order_amount=request.order_amount,
        dining_type=request.dining_type,
        table_number=request.table_number,
        customer_type=request.customer_type,
        timestamp=request.order_time,
    )
    breakdown = aggregate(match_rules(rules, context), request.order_amount)

    return TaxCalculationResponse(
        order_amount=request.order_amount,
        applicable_taxes=[ApplicableTax(**asdict(line)) for line in breakdown.per_rule],
        total_tax_rate=breakdown.total_rate,
        total_tax_amount=breakdown.total_amount,
        final_total=request.order_amount + breakdown.total_amount,
        calculated_at=datetime.now(timezone.utc),
    )
