"""
Subscription plan model
"""
from sqlalchemy import Column, String, Boolean, Integer, DECIMAL, JSON
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.models.base import TimestampMixin


# Permission map written when an admin creates a plan without one
DEFAULT_PLAN_PERMISSIONS = {
    "dashboard": True,
    "appointments": True,
    "services": True,
    "professionals": True,
    "clients": True,
    "reviews": False,
    "tasks": False,
    "pointsProgram": False,
    "loyalty": False,
    "inventory": False,
    "messages": False,
    "coupons": False,
    "financial": False,
    "reports": False,
    "settings": True,
    "support": True,
}


class Plan(Base, TimestampMixin):
    """
    Subscription plan offered by the platform
    Companies reference a plan; the permission map gates feature areas
    """

    __tablename__ = "plans"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    price = Column(DECIMAL(10, 2), nullable=False)
    annual_price = Column(DECIMAL(10, 2), nullable=True)
    free_days = Column(Integer, default=0, nullable=False)
    max_professionals = Column(Integer, default=1, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    permissions = Column(JSON, nullable=True, default=lambda: dict(DEFAULT_PLAN_PERMISSIONS))

    companies = relationship("Company", back_populates="plan")

    def __repr__(self):
        return f"<Plan {self.name} ({self.price})>"
