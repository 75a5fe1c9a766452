"""
SQLAlchemy models for the application
"""
from app.models.base import Base, TimestampMixin, CompanyMixin
from app.models.plan import Plan, DEFAULT_PLAN_PERMISSIONS
from app.models.company import Company, PaymentAlert
from app.models.admin import Admin
from app.models.client import Client
from app.models.professional import Professional
from app.models.service import Service
from app.models.task import Task
from app.models.appointment import Appointment
from app.models.coupon import Coupon
from app.models.support import SupportTicket, SupportTicketType, SupportTicketStatus

__all__ = [
    "Base",
    "TimestampMixin",
    "CompanyMixin",
    "Plan",
    "DEFAULT_PLAN_PERMISSIONS",
    "Company",
    "PaymentAlert",
    "Admin",
    "Client",
    "Professional",
    "Service",
    "Task",
    "Appointment",
    "Coupon",
    "SupportTicket",
    "SupportTicketType",
    "SupportTicketStatus",
]
