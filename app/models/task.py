"""
Task model
"""
from sqlalchemy import Column, String, Boolean, Integer, Date, Text

from app.core.database import Base
from app.models.base import TimestampMixin, CompanyMixin


class Task(Base, TimestampMixin, CompanyMixin):
    """Internal to-do with an optional WhatsApp reminder number"""

    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    due_date = Column(Date, nullable=False)
    recurrence = Column(String(50), default="none", nullable=False)  # none, daily, weekly, monthly
    whatsapp_number = Column(String(20), nullable=True)
    color = Column(String(7), default="#3b82f6", nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    def __repr__(self):
        return f"<Task {self.name} ({self.due_date})>"
