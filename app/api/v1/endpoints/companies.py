import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.security import require_admin
from app.models.admin import Admin
from app.models.company import Company
from app.models.plan import Plan
from app.schemas.common import ListResponse
from app.schemas.company import CompanyCreate, CompanyResponse, CompanyStatusUpdate, CompanyPlanUpdate
from app.api.v1.endpoints.auth import company_to_response, create_company

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/companies", tags=["Companies"])


def _get_company_or_404(db: Session, company_id: int) -> Company:
    company = db.query(Company).filter(Company.id == company_id).first()
    if not company:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Company not found"
        )
    return company


@router.get("", response_model=ListResponse)
def list_companies(
    search: Optional[str] = Query(default=None),
    isBlocked: Optional[bool] = Query(default=None),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    admin: Admin = Depends(require_admin)
):
    """Paginated list of companies with optional search"""
    query = db.query(Company)

    if search:
        search_pattern = f"%{search}%"
        query = query.filter(
            or_(
                Company.fantasy_name.ilike(search_pattern),
                Company.email.ilike(search_pattern),
                Company.document.ilike(search_pattern)
            )
        )
    if isBlocked is not None:
        query = query.filter(Company.is_blocked == isBlocked)

    total = query.count()
    results = query.order_by(Company.fantasy_name.asc()).offset((page - 1) * limit).limit(limit).all()
    total_pages = (total + limit - 1) // limit

    return ListResponse(
        data=[company_to_response(company) for company in results],
        pagination={
            "total": total,
            "page": page,
            "limit": limit,
            "totalPages": total_pages,
            "hasMore": page < total_pages
        }
    )


@router.post("", response_model=CompanyResponse, status_code=status.HTTP_201_CREATED)
def admin_create_company(
    payload: CompanyCreate,
    db: Session = Depends(get_db),
    admin: Admin = Depends(require_admin)
):
    """Create a company on behalf of a customer"""
    return company_to_response(create_company(db, payload, payload.subscriptionStatus))


@router.get("/{company_id}", response_model=CompanyResponse)
def get_company(
    company_id: int,
    db: Session = Depends(get_db),
    admin: Admin = Depends(require_admin)
):
    return company_to_response(_get_company_or_404(db, company_id))


@router.put("/{company_id}/status", response_model=CompanyResponse)
def update_company_status(
    company_id: int,
    payload: CompanyStatusUpdate,
    db: Session = Depends(get_db),
    admin: Admin = Depends(require_admin)
):
    """
    Administrative status change

    is_blocked set here overrides whatever the billing status says.
    """
    company = _get_company_or_404(db, company_id)

    if payload.isActive is not None:
        company.is_active = payload.isActive
    if payload.isBlocked is not None:
        company.is_blocked = payload.isBlocked
    if payload.subscriptionStatus is not None:
        company.subscription_status = payload.subscriptionStatus
    if payload.paymentStatus is not None:
        company.payment_status = payload.paymentStatus or None

    db.commit()
    db.refresh(company)

    logger.info(
        f"Admin {admin.id} updated company {company.id}: active={company.is_active} "
        f"blocked={company.is_blocked} status={company.subscription_status}"
    )
    return company_to_response(company)


@router.put("/{company_id}/plan", response_model=CompanyResponse)
def update_company_plan(
    company_id: int,
    payload: CompanyPlanUpdate,
    db: Session = Depends(get_db),
    admin: Admin = Depends(require_admin)
):
    """Assign (or clear, with planId null) the company's plan"""
    company = _get_company_or_404(db, company_id)

    if payload.planId is not None:
        plan = db.query(Plan).filter(Plan.id == payload.planId).first()
        if not plan:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Plan not found"
            )
        company.plan_id = plan.id
    else:
        company.plan_id = None

    db.commit()
    db.refresh(company)
    return company_to_response(company)
