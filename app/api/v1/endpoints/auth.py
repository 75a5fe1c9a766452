import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.security import (
    ROLE_ADMIN,
    ROLE_COMPANY,
    create_access_token,
    get_current_company,
    hash_password,
    verify_password,
)
from app.models.admin import Admin
from app.models.company import Company
from app.models.plan import Plan
from app.schemas.auth import LoginRequest, TokenResponse, CompanyRegisterRequest
from app.schemas.company import CompanyResponse
from app.utils.date import calculate_trial_end_date

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def company_to_response(company: Company) -> CompanyResponse:
    """Convert Company model to response schema"""
    return CompanyResponse(
        id=company.id,
        fantasyName=company.fantasy_name,
        document=company.document,
        email=company.email,
        phone=company.phone,
        city=company.city,
        state=company.state,
        planId=company.plan_id,
        planName=company.plan.name if company.plan else None,
        isActive=company.is_active,
        isBlocked=company.is_blocked,
        subscriptionStatus=company.subscription_status,
        paymentStatus=company.payment_status,
        trialExpiresAt=company.trial_expires_at,
        createdAt=company.created_at,
    )


def create_company(db: Session, payload: CompanyRegisterRequest, subscription_status: str = "trial") -> Company:
    """
    Create a company on trial

    The trial lasts the chosen plan's free days, or TRIAL_DAYS when the plan
    has none (or no plan was chosen).
    """
    if db.query(Company).filter(Company.email == payload.email).first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"email": "E-mail já cadastrado"}
        )
    if db.query(Company).filter(Company.document == payload.document).first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"document": "Documento já cadastrado"}
        )

    plan = None
    if payload.planId is not None:
        plan = db.query(Plan).filter(Plan.id == payload.planId, Plan.is_active == True).first()  # noqa: E712
        if not plan:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Plano não encontrado"
            )

    trial_days = plan.free_days if plan and plan.free_days else settings.TRIAL_DAYS
    now = datetime.utcnow()

    company = Company(
        fantasy_name=payload.fantasyName,
        document=payload.document,
        email=payload.email,
        password_hash=hash_password(payload.password),
        phone=payload.phone,
        address=payload.address,
        city=payload.city,
        state=payload.state,
        plan_id=plan.id if plan else None,
        is_active=True,
        is_blocked=False,
        subscription_status=subscription_status,
        trial_expires_at=calculate_trial_end_date(now, trial_days),
    )
    db.add(company)
    db.commit()
    db.refresh(company)

    logger.info(f"Company {company.id} registered with {trial_days} trial days")
    return company


@router.post("/admin/login", response_model=TokenResponse)
def admin_login(payload: LoginRequest, db: Session = Depends(get_db)):
    """Platform administrator login"""
    admin = db.query(Admin).filter(Admin.email == payload.email).first()

    if not admin or not verify_password(payload.password, admin.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Credenciais inválidas"
        )
    if not admin.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Administrador inativo"
        )

    return TokenResponse(accessToken=create_access_token(admin.id, ROLE_ADMIN), role=ROLE_ADMIN)


@router.post("/company/login", response_model=TokenResponse)
def company_login(payload: LoginRequest, db: Session = Depends(get_db)):
    """
    Company login

    Blocked companies can still log in; the subscription gate shows them the
    block screen and keeps them out of gated routes.
    """
    company = db.query(Company).filter(Company.email == payload.email).first()

    if not company or not verify_password(payload.password, company.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Credenciais inválidas"
        )

    return TokenResponse(accessToken=create_access_token(company.id, ROLE_COMPANY), role=ROLE_COMPANY)


@router.post("/company/register", response_model=CompanyResponse, status_code=status.HTTP_201_CREATED)
def register_company(payload: CompanyRegisterRequest, db: Session = Depends(get_db)):
    """Company self-registration"""
    return company_to_response(create_company(db, payload))


@router.get("/company/me", response_model=CompanyResponse)
def get_me(company: Company = Depends(get_current_company)):
    """Current company profile"""
    return company_to_response(company)
