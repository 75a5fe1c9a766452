"""
Coupon model
"""
from sqlalchemy import Column, String, Boolean, Integer, Date, DECIMAL, Text, UniqueConstraint

from app.core.database import Base
from app.models.base import TimestampMixin, CompanyMixin


class Coupon(Base, TimestampMixin, CompanyMixin):
    """
    Discount coupon owned by a company
    Effective status (inactive/expired/exhausted/valid) is derived, never stored
    """

    __tablename__ = "coupons"
    __table_args__ = (
        UniqueConstraint("company_id", "code", name="uq_coupons_company_code"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    code = Column(String(50), nullable=False)
    description = Column(Text, nullable=True)

    discount_type = Column(String(20), nullable=False)  # percentage, fixed
    discount_value = Column(DECIMAL(10, 2), nullable=False)
    min_order_value = Column(DECIMAL(10, 2), nullable=True)
    max_discount = Column(DECIMAL(10, 2), nullable=True)

    usage_limit = Column(Integer, nullable=True)
    used_count = Column(Integer, default=0, nullable=False)
    valid_until = Column(Date, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    def __repr__(self):
        return f"<Coupon {self.code}>"
