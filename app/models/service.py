"""
Service model
"""
from sqlalchemy import Column, String, Boolean, Integer, DECIMAL, Text

from app.core.database import Base
from app.models.base import TimestampMixin, CompanyMixin


class Service(Base, TimestampMixin, CompanyMixin):
    """
    Service model - a bookable service offered by the company
    """

    __tablename__ = "services"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(DECIMAL(10, 2), nullable=False)
    duration = Column(Integer, nullable=False)  # minutes
    color = Column(String(7), default="#3B82F6", nullable=False)
    points = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    def __repr__(self):
        return f"<Service {self.name}>"
