# app/models/tax_models.py
from decimal import Decimal
from sqlalchemy import Column, Integer, String, Numeric, Boolean, DateTime, JSON, Index
from sqlalchemy.sql import func
from app.core.db import Base


class TaxRule(Base):
    __tablename__ = "tax_rules"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    description = Column(String(255), nullable=True)
    rate = Column(Numeric(5, 2), nullable=False, default=Decimal("0.00"))  # percent, 0-100
    priority = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)

    # Conditions; NULL / "all" / empty list means unconstrained
    min_order_amount = Column(Numeric(14, 2), nullable=True)
    max_order_amount = Column(Numeric(14, 2), nullable=True)
    dining_type = Column(String(20), nullable=False, default="all")
    customer_type = Column(String(20), nullable=False, default="all")
    specific_tables = Column(JSON, nullable=True)   # [int]
    exclude_tables = Column(JSON, nullable=True)    # [int]
    time_start = Column(String(5), nullable=True)   # "HH:MM"
    time_end = Column(String(5), nullable=True)
    days_of_week = Column(JSON, nullable=True)      # [0..6], 0 = Sunday

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), server_default=func.now())

    __table_args__ = (
        Index("ix_tax_rules_active_priority", "is_active", "priority"),
    )
