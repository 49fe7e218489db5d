from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.sql import func
from app.core.db import Base

class UserActivity(Base):
    """Audit trail of staff changes to pricing configuration."""
    __tablename__ = "user_activity"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    username = Column(String, nullable=False)

    # What was touched: "tax_rule", "discount_code", "setting"
    entity_type = Column(String(50), nullable=True, index=True)
    entity_key = Column(String(100), nullable=True)
    message = Column(String, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
