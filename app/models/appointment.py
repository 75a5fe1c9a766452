"""
Appointment model
"""
from sqlalchemy import Column, String, Integer, Date, DECIMAL, Text, ForeignKey
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.models.base import TimestampMixin, CompanyMixin


class Appointment(Base, TimestampMixin, CompanyMixin):
    """
    Appointment model - one booked slot of a service with a professional

    Client contact is copied onto the row so walk-in bookings without a
    registered client still carry a name and phone.
    """

    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    professional_id = Column(Integer, ForeignKey("professionals.id"), nullable=False, index=True)
    service_id = Column(Integer, ForeignKey("services.id"), nullable=False)
    client_id = Column(Integer, ForeignKey("clients.id", ondelete="SET NULL"), nullable=True)

    client_name = Column(String(255), nullable=False)
    client_phone = Column(String(20), nullable=True)
    client_email = Column(String(255), nullable=True)

    appointment_date = Column(Date, nullable=False, index=True)
    appointment_time = Column(String(5), nullable=False)  # HH:MM
    duration = Column(Integer, default=30, nullable=False)  # minutes
    total_price = Column(DECIMAL(10, 2), default=0, nullable=False)
    status = Column(String(20), default="agendado", nullable=False)  # agendado, confirmado, concluido, cancelado
    notes = Column(Text, nullable=True)

    professional = relationship("Professional")
    service = relationship("Service")
    client = relationship("Client")

    def __repr__(self):
        return f"<Appointment {self.appointment_date} {self.appointment_time} ({self.status})>"
