"""
Appointment schemas
"""
from datetime import date
from decimal import Decimal
from typing import Optional, Literal
from pydantic import BaseModel, EmailStr, Field, field_validator

from app.schemas.common import clean_phone

AppointmentStatus = Literal["agendado", "confirmado", "concluido", "cancelado"]

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class AppointmentCreate(BaseModel):
    """
    Booking request

    Either clientId (a registered client) or clientName is required.
    Duration and price default to the service's own values.
    """
    professionalId: int
    serviceId: int
    clientId: Optional[int] = None
    clientName: Optional[str] = Field(None, min_length=2, max_length=255)
    clientPhone: Optional[str] = None
    clientEmail: Optional[EmailStr] = None
    appointmentDate: date
    appointmentTime: str = Field(..., pattern=TIME_PATTERN)
    duration: Optional[int] = Field(None, ge=5, le=24 * 60)
    totalPrice: Optional[Decimal] = Field(None, ge=0)
    status: AppointmentStatus = "agendado"
    notes: Optional[str] = None

    @field_validator('clientPhone')
    @classmethod
    def validate_phone(cls, v: Optional[str]) -> Optional[str]:
        return clean_phone(v)

    class Config:
        json_schema_extra = {
            "example": {
                "professionalId": 1,
                "serviceId": 2,
                "clientName": "Maria Souza",
                "clientPhone": "(11) 98765-4321",
                "appointmentDate": "2026-10-20",
                "appointmentTime": "14:30"
            }
        }


class AppointmentUpdate(BaseModel):
    professionalId: Optional[int] = None
    serviceId: Optional[int] = None
    clientName: Optional[str] = Field(None, min_length=2, max_length=255)
    clientPhone: Optional[str] = None
    clientEmail: Optional[EmailStr] = None
    appointmentDate: Optional[date] = None
    appointmentTime: Optional[str] = Field(None, pattern=TIME_PATTERN)
    duration: Optional[int] = Field(None, ge=5, le=24 * 60)
    totalPrice: Optional[Decimal] = Field(None, ge=0)
    status: Optional[AppointmentStatus] = None
    notes: Optional[str] = None

    @field_validator('clientPhone')
    @classmethod
    def validate_phone(cls, v: Optional[str]) -> Optional[str]:
        return clean_phone(v)


class AppointmentResponse(BaseModel):
    id: int
    professionalId: int
    professionalName: Optional[str]
    serviceId: int
    serviceName: Optional[str]
    clientId: Optional[int]
    clientName: str
    clientPhone: Optional[str]
    clientEmail: Optional[str]
    appointmentDate: date
    appointmentTime: str
    duration: int
    totalPrice: str
    status: str
    notes: Optional[str]
