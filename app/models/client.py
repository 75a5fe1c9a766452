"""
Client model - the company's own customers
"""
from sqlalchemy import Column, String, Boolean, Integer, Date, Text

from app.core.database import Base
from app.models.base import TimestampMixin, CompanyMixin


class Client(Base, TimestampMixin, CompanyMixin):
    """
    Client model - stores the end customers of a company
    Phone is kept normalized (digits only) so lookups ignore formatting
    """

    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(20), nullable=True, index=True)
    birth_date = Column(Date, nullable=True)
    notes = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    def __repr__(self):
        return f"<Client {self.name}>"
