from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.dependencies import require_permission
from app.models.company import Company
from app.models.service import Service
from app.schemas.service import ServiceCreate, ServiceUpdate, ServiceResponse
from app.services.permissions import FeatureKey

router = APIRouter(prefix="/company/services", tags=["Services"])

can_use_services = require_permission(FeatureKey.SERVICES)


def _to_response(service: Service) -> ServiceResponse:
    return ServiceResponse(
        id=service.id,
        name=service.name,
        description=service.description,
        price=str(service.price),
        duration=service.duration,
        color=service.color,
        points=service.points,
        isActive=service.is_active,
    )


def _get_service_or_404(db: Session, company_id: int, service_id: int) -> Service:
    service = db.query(Service).filter(
        Service.id == service_id,
        Service.company_id == company_id,
        Service.is_active == True  # noqa: E712
    ).first()
    if not service:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Service not found"
        )
    return service


@router.get("", response_model=List[ServiceResponse])
def list_services(
    company: Company = Depends(can_use_services),
    db: Session = Depends(get_db)
):
    services = db.query(Service).filter(
        Service.company_id == company.id,
        Service.is_active == True  # noqa: E712
    ).order_by(Service.name.asc()).all()
    return [_to_response(service) for service in services]


@router.post("", response_model=ServiceResponse, status_code=status.HTTP_201_CREATED)
def create_service(
    payload: ServiceCreate,
    company: Company = Depends(can_use_services),
    db: Session = Depends(get_db)
):
    service = Service(
        company_id=company.id,
        name=payload.name,
        description=payload.description,
        price=payload.price,
        duration=payload.duration,
        color=payload.color,
        points=payload.points,
        is_active=True,
    )
    db.add(service)
    db.commit()
    db.refresh(service)
    return _to_response(service)


@router.put("/{service_id}", response_model=ServiceResponse)
def update_service(
    service_id: int,
    payload: ServiceUpdate,
    company: Company = Depends(can_use_services),
    db: Session = Depends(get_db)
):
    service = _get_service_or_404(db, company.id, service_id)

    for field, column in (
        ("name", "name"),
        ("description", "description"),
        ("price", "price"),
        ("duration", "duration"),
        ("color", "color"),
        ("points", "points"),
    ):
        value = getattr(payload, field)
        if value is not None:
            setattr(service, column, value)

    db.commit()
    db.refresh(service)
    return _to_response(service)


@router.delete("/{service_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_service(
    service_id: int,
    company: Company = Depends(can_use_services),
    db: Session = Depends(get_db)
):
    """Soft delete; past appointments keep pointing at the row"""
    service = _get_service_or_404(db, company.id, service_id)
    service.is_active = False
    db.commit()
    return None
