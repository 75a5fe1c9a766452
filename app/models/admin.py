"""
Platform administrator model
"""
from sqlalchemy import Column, String, Boolean, Integer

from app.core.database import Base
from app.models.base import TimestampMixin


class Admin(Base, TimestampMixin):
    """
    Platform administrator - manages plans and companies, answers tickets
    """

    __tablename__ = "admins"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    def __repr__(self):
        return f"<Admin {self.email}>"
