from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.dependencies import require_permission
from app.models.client import Client
from app.models.company import Company
from app.schemas.client import ClientCreate, ClientUpdate, ClientResponse
from app.schemas.common import ListResponse
from app.services.permissions import FeatureKey
from app.utils.phone import format_brazilian_phone, normalize_phone

router = APIRouter(prefix="/company/clients", tags=["Clients"])

can_use_clients = require_permission(FeatureKey.CLIENTS)


def _to_response(client: Client) -> ClientResponse:
    """Convert Client model to response schema"""
    return ClientResponse(
        id=client.id,
        name=client.name,
        email=client.email,
        phone=client.phone,
        phoneFormatted=format_brazilian_phone(client.phone) or None,
        birthDate=client.birth_date,
        notes=client.notes,
        isActive=client.is_active,
    )


def _get_client_or_404(db: Session, company_id: int, client_id: int) -> Client:
    client = db.query(Client).filter(
        Client.id == client_id,
        Client.company_id == company_id,
        Client.is_active == True  # noqa: E712
    ).first()
    if not client:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Client not found"
        )
    return client


def _ensure_phone_unique(db: Session, company_id: int, phone: Optional[str], exclude_id: Optional[int] = None):
    if not phone:
        return
    query = db.query(Client).filter(
        Client.company_id == company_id,
        Client.phone == phone,
        Client.is_active == True  # noqa: E712
    )
    if exclude_id is not None:
        query = query.filter(Client.id != exclude_id)
    if query.first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"phone": "Já existe um cliente com este telefone"}
        )


@router.get("", response_model=ListResponse)
def list_clients(
    search: Optional[str] = Query(default=None),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    company: Company = Depends(can_use_clients),
    db: Session = Depends(get_db)
):
    """Paginated client list; search matches name, email or phone digits"""
    query = db.query(Client).filter(
        Client.company_id == company.id,
        Client.is_active == True  # noqa: E712
    )

    if search:
        search_pattern = f"%{search}%"
        conditions = [Client.name.ilike(search_pattern), Client.email.ilike(search_pattern)]
        digits = normalize_phone(search)
        if digits:
            conditions.append(Client.phone.like(f"%{digits}%"))
        query = query.filter(or_(*conditions))

    total = query.count()
    results = query.order_by(Client.name.asc()).offset((page - 1) * limit).limit(limit).all()
    total_pages = (total + limit - 1) // limit

    return ListResponse(
        data=[_to_response(client) for client in results],
        pagination={
            "total": total,
            "page": page,
            "limit": limit,
            "totalPages": total_pages,
            "hasMore": page < total_pages
        }
    )


@router.get("/{client_id}", response_model=ClientResponse)
def get_client(
    client_id: int,
    company: Company = Depends(can_use_clients),
    db: Session = Depends(get_db)
):
    return _to_response(_get_client_or_404(db, company.id, client_id))


@router.post("", response_model=ClientResponse, status_code=status.HTTP_201_CREATED)
def create_client(
    payload: ClientCreate,
    company: Company = Depends(can_use_clients),
    db: Session = Depends(get_db)
):
    """Create a client; phone (already normalized) must be unique per company"""
    _ensure_phone_unique(db, company.id, payload.phone)

    client = Client(
        company_id=company.id,
        name=payload.name,
        email=payload.email,
        phone=payload.phone,
        birth_date=payload.birthDate,
        notes=payload.notes,
        is_active=True,
    )
    db.add(client)
    db.commit()
    db.refresh(client)
    return _to_response(client)


@router.put("/{client_id}", response_model=ClientResponse)
def update_client(
    client_id: int,
    payload: ClientUpdate,
    company: Company = Depends(can_use_clients),
    db: Session = Depends(get_db)
):
    client = _get_client_or_404(db, company.id, client_id)

    if payload.phone is not None:
        _ensure_phone_unique(db, company.id, payload.phone, exclude_id=client.id)
        client.phone = payload.phone
    if payload.name is not None:
        client.name = payload.name
    if payload.email is not None:
        client.email = payload.email
    if payload.birthDate is not None:
        client.birth_date = payload.birthDate
    if payload.notes is not None:
        client.notes = payload.notes

    db.commit()
    db.refresh(client)
    return _to_response(client)


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_client(
    client_id: int,
    company: Company = Depends(can_use_clients),
    db: Session = Depends(get_db)
):
    """Soft delete"""
    client = _get_client_or_404(db, company.id, client_id)
    client.is_active = False
    db.commit()
    return None
