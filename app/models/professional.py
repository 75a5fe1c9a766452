"""
Professional model
"""
from sqlalchemy import Column, String, Boolean, Integer, JSON

from app.core.database import Base
from app.models.base import TimestampMixin, CompanyMixin


class Professional(Base, TimestampMixin, CompanyMixin):
    """
    Professional model - staff members who attend appointments
    Active professionals count against the plan's max_professionals
    """

    __tablename__ = "professionals"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(20), nullable=True)
    specialties = Column(JSON, nullable=True)
    work_days = Column(JSON, nullable=True)
    work_start_time = Column(String(10), nullable=True)
    work_end_time = Column(String(10), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    def __repr__(self):
        return f"<Professional {self.name}>"
