"""
Support ticket models
"""
from sqlalchemy import Column, String, Boolean, Integer, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.models.base import TimestampMixin, CompanyMixin


class SupportTicketType(Base, TimestampMixin):
    """Lookup table of ticket types managed by platform admins"""

    __tablename__ = "support_ticket_types"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)


class SupportTicketStatus(Base, TimestampMixin):
    """Lookup table of ticket statuses, ordered by sort_order"""

    __tablename__ = "support_ticket_statuses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    color = Column(String(7), default="#6b7280", nullable=False)
    sort_order = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)


class SupportTicket(Base, TimestampMixin, CompanyMixin):
    """
    Support ticket opened by a company and answered by a platform admin
    """

    __tablename__ = "support_tickets"

    id = Column(Integer, primary_key=True, autoincrement=True)
    type_id = Column(Integer, ForeignKey("support_ticket_types.id"), nullable=True)
    status_id = Column(Integer, ForeignKey("support_ticket_statuses.id"), nullable=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    priority = Column(String(20), default="medium", nullable=False)  # low, medium, high, urgent
    category = Column(String(100), default="general", nullable=False)
    admin_response = Column(Text, nullable=True)
    resolved_at = Column(DateTime, nullable=True)

    type = relationship("SupportTicketType")
    status = relationship("SupportTicketStatus")

    def __repr__(self):
        return f"<SupportTicket {self.id} {self.title}>"
