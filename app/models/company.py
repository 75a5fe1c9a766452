"""
Company (tenant) and payment alert models
"""
from sqlalchemy import Column, String, Boolean, Integer, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.models.base import TimestampMixin


class Company(Base, TimestampMixin):
    """
    Company model - each company is a tenant of the platform
    Soft-deactivated through is_active / is_blocked, never hard-deleted
    """

    __tablename__ = "companies"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Identity
    fantasy_name = Column(String(255), nullable=False)
    document = Column(String(20), unique=True, nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)

    # Contact / address
    phone = Column(String(20), nullable=True)
    address = Column(Text, nullable=True)
    zip_code = Column(String(10), nullable=True)
    city = Column(String(255), nullable=True)
    state = Column(String(2), nullable=True)

    # Plan
    plan_id = Column(Integer, ForeignKey("plans.id", ondelete="RESTRICT"), nullable=True)

    # Administrative flags
    is_active = Column(Boolean, default=True, nullable=False)
    is_blocked = Column(Boolean, default=False, nullable=False)

    # Trial & billing status
    subscription_status = Column(
        String(20), default="trial", nullable=False
    )  # trial, active, past_due, cancelled, blocked
    payment_status = Column(String(50), nullable=True)  # failed, requires_payment_method, ...
    trial_expires_at = Column(DateTime, nullable=True)
    billing_subscription_id = Column(String(100), nullable=True)
    next_billing_date = Column(DateTime, nullable=True)
    billing_value = Column(String(20), nullable=True)
    billing_cycle = Column(String(20), nullable=True)  # MONTHLY, YEARLY

    # Relationships
    plan = relationship("Plan", back_populates="companies")
    payment_alerts = relationship(
        "PaymentAlert", back_populates="company", cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"<Company {self.fantasy_name}>"


class PaymentAlert(Base):
    """Trial expiry reminder shown to the company on its next page load"""

    __tablename__ = "payment_alerts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    company_id = Column(
        Integer, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True
    )
    alert_type = Column(String(20), nullable=False)  # 5_days ... 1_day
    created_at = Column(DateTime, nullable=False)
    shown_at = Column(DateTime, nullable=True)
    is_shown = Column(Boolean, default=False, nullable=False)

    company = relationship("Company", back_populates="payment_alerts")

    def __repr__(self):
        return f"<PaymentAlert {self.company_id} {self.alert_type}>"
