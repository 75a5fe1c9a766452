import logging
from typing import List, Optional
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.dependencies import require_permission
from app.models.appointment import Appointment
from app.models.client import Client
from app.models.company import Company
from app.models.professional import Professional
from app.models.service import Service
from app.schemas.appointment import AppointmentCreate, AppointmentUpdate, AppointmentResponse
from app.services.permissions import FeatureKey

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/company/appointments", tags=["Appointments"])

can_use_appointments = require_permission(FeatureKey.APPOINTMENTS)

CANCELLED = "cancelado"


def _to_response(appointment: Appointment) -> AppointmentResponse:
    return AppointmentResponse(
        id=appointment.id,
        professionalId=appointment.professional_id,
        professionalName=appointment.professional.name if appointment.professional else None,
        serviceId=appointment.service_id,
        serviceName=appointment.service.name if appointment.service else None,
        clientId=appointment.client_id,
        clientName=appointment.client_name,
        clientPhone=appointment.client_phone,
        clientEmail=appointment.client_email,
        appointmentDate=appointment.appointment_date,
        appointmentTime=appointment.appointment_time,
        duration=appointment.duration,
        totalPrice=str(appointment.total_price),
        status=appointment.status,
        notes=appointment.notes,
    )


def _get_appointment_or_404(db: Session, company_id: int, appointment_id: int) -> Appointment:
    appointment = db.query(Appointment).filter(
        Appointment.id == appointment_id,
        Appointment.company_id == company_id
    ).first()
    if not appointment:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Appointment not found"
        )
    return appointment


def _get_active(db: Session, model, company_id: int, record_id: int, field: str, label: str):
    """Active row of the company or 400 naming the offending field"""
    record = db.query(model).filter(
        model.id == record_id,
        model.company_id == company_id,
        model.is_active == True  # noqa: E712
    ).first()
    if not record:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={field: f"{label} não encontrado"}
        )
    return record


def _minutes(hhmm: str) -> int:
    hours, minutes = hhmm.split(":")
    return int(hours) * 60 + int(minutes)


def _check_slot(db: Session, company_id: int, professional_id: int, day: date, hhmm: str,
                duration: int, booking_status: str, exclude_id: Optional[int] = None):
    """409 when the professional already has an overlapping, non-cancelled booking"""
    if booking_status == CANCELLED:
        return

    start = _minutes(hhmm)
    end = start + duration
    others = db.query(Appointment).filter(
        Appointment.company_id == company_id,
        Appointment.professional_id == professional_id,
        Appointment.appointment_date == day,
        Appointment.status != CANCELLED
    )
    if exclude_id is not None:
        others = others.filter(Appointment.id != exclude_id)

    for other in others.all():
        other_start = _minutes(other.appointment_time)
        if start < other_start + other.duration and other_start < end:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail={
                    "appointmentTime": "Profissional já possui agendamento neste horário",
                    "conflictId": other.id
                }
            )


@router.get("", response_model=List[AppointmentResponse])
def list_appointments(
    dateFrom: Optional[date] = Query(default=None),
    dateTo: Optional[date] = Query(default=None),
    professionalId: Optional[int] = Query(default=None),
    status_filter: Optional[str] = Query(default=None, alias="status"),
    company: Company = Depends(can_use_appointments),
    db: Session = Depends(get_db)
):
    """Appointments ordered by date and time, with optional filters"""
    query = db.query(Appointment).filter(Appointment.company_id == company.id)
    if dateFrom:
        query = query.filter(Appointment.appointment_date >= dateFrom)
    if dateTo:
        query = query.filter(Appointment.appointment_date <= dateTo)
    if professionalId is not None:
        query = query.filter(Appointment.professional_id == professionalId)
    if status_filter:
        query = query.filter(Appointment.status == status_filter)

    results = query.order_by(
        Appointment.appointment_date.asc(), Appointment.appointment_time.asc()
    ).all()
    return [_to_response(appointment) for appointment in results]


@router.post("", response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
def create_appointment(
    payload: AppointmentCreate,
    company: Company = Depends(can_use_appointments),
    db: Session = Depends(get_db)
):
    professional = _get_active(db, Professional, company.id, payload.professionalId,
                               "professionalId", "Profissional")
    service = _get_active(db, Service, company.id, payload.serviceId, "serviceId", "Serviço")

    client = None
    if payload.clientId is not None:
        client = _get_active(db, Client, company.id, payload.clientId, "clientId", "Cliente")
    elif not payload.clientName:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"clientName": "Informe o cliente"}
        )

    duration = payload.duration or service.duration
    _check_slot(db, company.id, professional.id, payload.appointmentDate, payload.appointmentTime,
                duration, payload.status)

    appointment = Appointment(
        company_id=company.id,
        professional_id=professional.id,
        service_id=service.id,
        client_id=client.id if client else None,
        client_name=payload.clientName or client.name,
        client_phone=payload.clientPhone or (client.phone if client else None),
        client_email=payload.clientEmail or (client.email if client else None),
        appointment_date=payload.appointmentDate,
        appointment_time=payload.appointmentTime,
        duration=duration,
        total_price=payload.totalPrice if payload.totalPrice is not None else service.price,
        status=payload.status,
        notes=payload.notes,
    )
    db.add(appointment)
    db.commit()
    db.refresh(appointment)

    logger.info(f"Appointment {appointment.id} booked for company {company.id}")
    return _to_response(appointment)


@router.get("/{appointment_id}", response_model=AppointmentResponse)
def get_appointment(
    appointment_id: int,
    company: Company = Depends(can_use_appointments),
    db: Session = Depends(get_db)
):
    return _to_response(_get_appointment_or_404(db, company.id, appointment_id))


@router.put("/{appointment_id}", response_model=AppointmentResponse)
def update_appointment(
    appointment_id: int,
    payload: AppointmentUpdate,
    company: Company = Depends(can_use_appointments),
    db: Session = Depends(get_db)
):
    """Reschedule or change status; the slot is checked before anything is written"""
    appointment = _get_appointment_or_404(db, company.id, appointment_id)

    changes = {}
    if payload.professionalId is not None:
        changes["professional_id"] = _get_active(
            db, Professional, company.id, payload.professionalId, "professionalId", "Profissional"
        ).id
    if payload.serviceId is not None:
        changes["service_id"] = _get_active(
            db, Service, company.id, payload.serviceId, "serviceId", "Serviço"
        ).id
    for field, column in (
        ("clientName", "client_name"),
        ("clientPhone", "client_phone"),
        ("clientEmail", "client_email"),
        ("appointmentDate", "appointment_date"),
        ("appointmentTime", "appointment_time"),
        ("duration", "duration"),
        ("totalPrice", "total_price"),
        ("status", "status"),
        ("notes", "notes"),
    ):
        value = getattr(payload, field)
        if value is not None:
            changes[column] = value

    def effective(column):
        return changes.get(column, getattr(appointment, column))

    _check_slot(
        db,
        company.id,
        effective("professional_id"),
        effective("appointment_date"),
        effective("appointment_time"),
        effective("duration"),
        effective("status"),
        exclude_id=appointment.id,
    )

    for column, value in changes.items():
        setattr(appointment, column, value)

    db.commit()
    db.refresh(appointment)
    return _to_response(appointment)


@router.delete("/{appointment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_appointment(
    appointment_id: int,
    company: Company = Depends(can_use_appointments),
    db: Session = Depends(get_db)
):
    appointment = _get_appointment_or_404(db, company.id, appointment_id)
    db.delete(appointment)
    db.commit()
    return None
