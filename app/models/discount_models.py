from sqlalchemy import Column, Integer, String, Numeric, DateTime, Boolean
from sqlalchemy.sql import func
from app.core.db import Base


class DiscountCode(Base):
    __tablename__ = "discount_codes"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(50), unique=True, nullable=False, index=True)  # stored upper-case
    description = Column(String(255), nullable=True)
    type = Column(String(20), nullable=False)  # 'percentage' or 'fixed'
    value = Column(Numeric(10, 2), nullable=False)
    applies_to = Column(String(20), nullable=False, default="order")  # 'order', 'product' or 'category'
    active = Column(Boolean, nullable=False, default=True)
    expires_at = Column(DateTime(timezone=True), nullable=True)
    usage_limit = Column(Integer, nullable=True)
    used_count = Column(Integer, nullable=False, default=0)
    min_order_amount = Column(Numeric(14, 2), nullable=True)
    max_discount_amount = Column(Numeric(14, 2), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), server_default=func.now())
