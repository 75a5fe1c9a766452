"""
Company (tenant) schemas
"""
from datetime import datetime
from typing import Optional, Dict, List
from pydantic import BaseModel, EmailStr, field_validator

from app.schemas.auth import CompanyRegisterRequest

SUBSCRIPTION_STATUSES = {"trial", "active", "past_due", "cancelled", "blocked"}


def _check_subscription_status(v: Optional[str]) -> Optional[str]:
    if v is not None and v not in SUBSCRIPTION_STATUSES:
        raise ValueError(f"subscriptionStatus must be one of: {', '.join(sorted(SUBSCRIPTION_STATUSES))}")
    return v


class CompanyCreate(CompanyRegisterRequest):
    """Admin-created company; same fields as self-registration"""
    subscriptionStatus: str = "trial"

    @field_validator('subscriptionStatus')
    @classmethod
    def validate_subscription_status(cls, v: str) -> str:
        return _check_subscription_status(v)


class CompanyStatusUpdate(BaseModel):
    """PUT /api/companies/{id}/status"""
    isActive: Optional[bool] = None
    isBlocked: Optional[bool] = None
    subscriptionStatus: Optional[str] = None
    paymentStatus: Optional[str] = None

    @field_validator('subscriptionStatus')
    @classmethod
    def validate_subscription_status(cls, v: Optional[str]) -> Optional[str]:
        return _check_subscription_status(v)


class CompanyPlanUpdate(BaseModel):
    planId: Optional[int] = None


class CompanyResponse(BaseModel):
    id: int
    fantasyName: str
    document: str
    email: EmailStr
    phone: Optional[str]
    city: Optional[str]
    state: Optional[str]
    planId: Optional[int]
    planName: Optional[str]
    isActive: bool
    isBlocked: bool
    subscriptionStatus: str
    paymentStatus: Optional[str]
    trialExpiresAt: Optional[datetime]
    createdAt: Optional[datetime]


class PlanInfo(BaseModel):
    id: Optional[int]
    name: str
    maxProfessionals: int
    permissions: Dict[str, bool]


class PlanUsage(BaseModel):
    professionalsCount: int
    professionalsLimit: int


class PlanInfoResponse(BaseModel):
    """GET /api/company/plan-info"""
    plan: PlanInfo
    usage: PlanUsage


class NavEntryResponse(BaseModel):
    title: str
    href: str
    feature: str


class NavigationResponse(BaseModel):
    entries: List[NavEntryResponse]


class PaymentAlertResponse(BaseModel):
    id: int
    alertType: str
    createdAt: datetime
    isShown: bool
    shownAt: Optional[datetime]
