import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.dependencies import require_permission
from app.core.security import require_admin
from app.models.admin import Admin
from app.models.company import Company
from app.models.support import SupportTicket, SupportTicketStatus, SupportTicketType
from app.schemas.common import ListResponse
from app.schemas.support import SupportTicketCreate, SupportTicketAdminUpdate, SupportTicketResponse
from app.services.permissions import FeatureKey

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/company/support-tickets", tags=["Support"])
admin_router = APIRouter(prefix="/admin/support-tickets", tags=["Support Admin"])

can_use_support = require_permission(FeatureKey.SUPPORT)


def _to_response(ticket: SupportTicket) -> SupportTicketResponse:
    return SupportTicketResponse(
        id=ticket.id,
        companyId=ticket.company_id,
        title=ticket.title,
        description=ticket.description,
        typeId=ticket.type_id,
        typeName=ticket.type.name if ticket.type else None,
        statusId=ticket.status_id,
        statusName=ticket.status.name if ticket.status else None,
        priority=ticket.priority,
        category=ticket.category,
        adminResponse=ticket.admin_response,
        createdAt=ticket.created_at,
        resolvedAt=ticket.resolved_at,
    )


def _initial_status(db: Session) -> Optional[SupportTicketStatus]:
    """First active status by sort order, or None when none are configured"""
    return db.query(SupportTicketStatus).filter(
        SupportTicketStatus.is_active == True  # noqa: E712
    ).order_by(SupportTicketStatus.sort_order.asc(), SupportTicketStatus.id.asc()).first()


# -------------------------
# COMPANY
# -------------------------
@router.get("", response_model=List[SupportTicketResponse])
def list_my_tickets(
    company: Company = Depends(can_use_support),
    db: Session = Depends(get_db)
):
    tickets = db.query(SupportTicket).filter(
        SupportTicket.company_id == company.id
    ).order_by(SupportTicket.created_at.desc(), SupportTicket.id.desc()).all()
    return [_to_response(ticket) for ticket in tickets]


@router.post("", response_model=SupportTicketResponse, status_code=status.HTTP_201_CREATED)
def open_ticket(
    payload: SupportTicketCreate,
    company: Company = Depends(can_use_support),
    db: Session = Depends(get_db)
):
    if payload.typeId is not None:
        ticket_type = db.query(SupportTicketType).filter(
            SupportTicketType.id == payload.typeId,
            SupportTicketType.is_active == True  # noqa: E712
        ).first()
        if not ticket_type:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={"typeId": "Tipo de chamado inválido"}
            )

    initial = _initial_status(db)
    ticket = SupportTicket(
        company_id=company.id,
        type_id=payload.typeId,
        status_id=initial.id if initial else None,
        title=payload.title,
        description=payload.description,
        priority=payload.priority,
        category=payload.category,
    )
    db.add(ticket)
    db.commit()
    db.refresh(ticket)

    logger.info(f"Support ticket {ticket.id} opened by company {company.id}")
    return _to_response(ticket)


@router.get("/{ticket_id}", response_model=SupportTicketResponse)
def get_my_ticket(
    ticket_id: int,
    company: Company = Depends(can_use_support),
    db: Session = Depends(get_db)
):
    ticket = db.query(SupportTicket).filter(
        SupportTicket.id == ticket_id,
        SupportTicket.company_id == company.id
    ).first()
    if not ticket:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Ticket not found"
        )
    return _to_response(ticket)


@router.delete("/{ticket_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_my_ticket(
    ticket_id: int,
    company: Company = Depends(can_use_support),
    db: Session = Depends(get_db)
):
    ticket = db.query(SupportTicket).filter(
        SupportTicket.id == ticket_id,
        SupportTicket.company_id == company.id
    ).first()
    if not ticket:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Ticket not found"
        )
    db.delete(ticket)
    db.commit()
    return None


# -------------------------
# ADMIN
# -------------------------
@admin_router.get("", response_model=ListResponse)
def list_all_tickets(
    companyId: Optional[int] = Query(default=None),
    statusId: Optional[int] = Query(default=None),
    priority: Optional[str] = Query(default=None),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    admin: Admin = Depends(require_admin)
):
    query = db.query(SupportTicket)
    if companyId is not None:
        query = query.filter(SupportTicket.company_id == companyId)
    if statusId is not None:
        query = query.filter(SupportTicket.status_id == statusId)
    if priority:
        query = query.filter(SupportTicket.priority == priority)

    total = query.count()
    results = query.order_by(
        SupportTicket.created_at.desc(), SupportTicket.id.desc()
    ).offset((page - 1) * limit).limit(limit).all()
    total_pages = (total + limit - 1) // limit

    return ListResponse(
        data=[_to_response(ticket) for ticket in results],
        pagination={
            "total": total,
            "page": page,
            "limit": limit,
            "totalPages": total_pages,
            "hasMore": page < total_pages
        }
    )


@admin_router.put("/{ticket_id}", response_model=SupportTicketResponse)
def respond_ticket(
    ticket_id: int,
    payload: SupportTicketAdminUpdate,
    db: Session = Depends(get_db),
    admin: Admin = Depends(require_admin)
):
    """Admin answer: change status, write a response, mark resolved"""
    ticket = db.query(SupportTicket).filter(SupportTicket.id == ticket_id).first()
    if not ticket:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Ticket not found"
        )

    if payload.statusId is not None:
        ticket_status = db.query(SupportTicketStatus).filter(
            SupportTicketStatus.id == payload.statusId
        ).first()
        if not ticket_status:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={"statusId": "Status inválido"}
            )
        ticket.status_id = ticket_status.id
    if payload.adminResponse is not None:
        ticket.admin_response = payload.adminResponse
    if payload.resolved is not None:
        ticket.resolved_at = datetime.utcnow() if payload.resolved else None

    db.commit()
    db.refresh(ticket)

    logger.info(f"Admin {admin.id} updated support ticket {ticket.id}")
    return _to_response(ticket)
