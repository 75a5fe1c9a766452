import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.dependencies import (
    check_professionals_limit,
    count_active_professionals,
    get_permission_resolver,
    require_permission,
)
from app.models.company import Company
from app.models.professional import Professional
from app.schemas.professional import (
    ProfessionalCreate,
    ProfessionalUpdate,
    ProfessionalResponse,
    ProfessionalsLimitResponse,
)
from app.services.permissions import FeatureKey, PermissionResolver

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/company/professionals", tags=["Professionals"])

can_use_professionals = require_permission(FeatureKey.PROFESSIONALS)


def _to_response(professional: Professional) -> ProfessionalResponse:
    return ProfessionalResponse(
        id=professional.id,
        name=professional.name,
        email=professional.email,
        phone=professional.phone,
        specialties=professional.specialties or [],
        workDays=professional.work_days or [],
        workStartTime=professional.work_start_time,
        workEndTime=professional.work_end_time,
        isActive=professional.is_active,
    )


def _get_professional_or_404(db: Session, company_id: int, professional_id: int) -> Professional:
    professional = db.query(Professional).filter(
        Professional.id == professional_id,
        Professional.company_id == company_id,
        Professional.is_active == True  # noqa: E712
    ).first()
    if not professional:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Professional not found"
        )
    return professional


@router.get("", response_model=List[ProfessionalResponse])
def list_professionals(
    company: Company = Depends(can_use_professionals),
    db: Session = Depends(get_db)
):
    professionals = db.query(Professional).filter(
        Professional.company_id == company.id,
        Professional.is_active == True  # noqa: E712
    ).order_by(Professional.name.asc()).all()
    return [_to_response(professional) for professional in professionals]


@router.get("/limit", response_model=ProfessionalsLimitResponse)
def get_professionals_limit(
    company: Company = Depends(can_use_professionals),
    resolver: PermissionResolver = Depends(get_permission_resolver),
    db: Session = Depends(get_db)
):
    """Headcount usage, so the form can disable its submit action"""
    info = resolver.get_professionals_limit_info(count_active_professionals(db, company.id))
    return info.as_dict()


@router.post("", response_model=ProfessionalResponse, status_code=status.HTTP_201_CREATED)
def create_professional(
    payload: ProfessionalCreate,
    company: Company = Depends(check_professionals_limit),
    db: Session = Depends(get_db)
):
    """Create a professional; rejected with 403 once the plan limit is reached"""
    professional = Professional(
        company_id=company.id,
        name=payload.name,
        email=payload.email,
        phone=payload.phone,
        specialties=payload.specialties,
        work_days=payload.workDays,
        work_start_time=payload.workStartTime,
        work_end_time=payload.workEndTime,
        is_active=True,
    )
    db.add(professional)
    db.commit()
    db.refresh(professional)

    logger.info(f"Professional {professional.id} created for company {company.id}")
    return _to_response(professional)


@router.put("/{professional_id}", response_model=ProfessionalResponse)
def update_professional(
    professional_id: int,
    payload: ProfessionalUpdate,
    company: Company = Depends(can_use_professionals),
    db: Session = Depends(get_db)
):
    professional = _get_professional_or_404(db, company.id, professional_id)

    if payload.name is not None:
        professional.name = payload.name
    if payload.email is not None:
        professional.email = payload.email
    if payload.phone is not None:
        professional.phone = payload.phone
    if payload.specialties is not None:
        professional.specialties = payload.specialties
    if payload.workDays is not None:
        professional.work_days = payload.workDays
    if payload.workStartTime is not None:
        professional.work_start_time = payload.workStartTime
    if payload.workEndTime is not None:
        professional.work_end_time = payload.workEndTime

    db.commit()
    db.refresh(professional)
    return _to_response(professional)


@router.delete("/{professional_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_professional(
    professional_id: int,
    company: Company = Depends(can_use_professionals),
    db: Session = Depends(get_db)
):
    """Soft delete; frees a seat in the plan headcount"""
    professional = _get_professional_or_404(db, company.id, professional_id)
    professional.is_active = False
    db.commit()
    return None
