from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.dependencies import (
    count_active_professionals,
    get_company_plan,
    get_permission_resolver,
    require_active_subscription,
)
from app.core.security import get_current_company
from app.models.company import Company, PaymentAlert
from app.models.plan import Plan
from app.schemas.company import (
    NavigationResponse,
    PaymentAlertResponse,
    PlanInfoResponse,
)
from app.schemas.subscription import SubscriptionStatusResponse
from app.services.navigation import visible_entries
from app.services.permissions import PermissionResolver
from app.services.subscription_service import SubscriptionService

router = APIRouter(prefix="/company", tags=["Company"])


def _alert_to_response(alert: PaymentAlert) -> PaymentAlertResponse:
    return PaymentAlertResponse(
        id=alert.id,
        alertType=alert.alert_type,
        createdAt=alert.created_at,
        isShown=alert.is_shown,
        shownAt=alert.shown_at,
    )


@router.get("/subscription-status", response_model=SubscriptionStatusResponse)
def get_subscription_status(
    company: Company = Depends(get_current_company),
    db: Session = Depends(get_db)
):
    """
    Subscription status consumed by the frontend gate

    Not gated itself: a blocked company must be able to read why.
    """
    return SubscriptionService(db).status_payload(company)


@router.get("/plan-info", response_model=PlanInfoResponse)
def get_plan_info(
    company: Company = Depends(get_current_company),
    plan: Optional[Plan] = Depends(get_company_plan),
    resolver: PermissionResolver = Depends(get_permission_resolver),
    db: Session = Depends(get_db)
):
    """Plan permissions and professional headcount usage"""
    current = count_active_professionals(db, company.id)

    return {
        "plan": {
            "id": plan.id if plan else None,
            "name": plan.name if plan else "Plano não identificado",
            "maxProfessionals": resolver.max_professionals or 0,
            "permissions": resolver.granted(),
        },
        "usage": {
            "professionalsCount": current,
            "professionalsLimit": resolver.max_professionals or 0,
        },
    }


@router.get("/navigation", response_model=NavigationResponse)
def get_navigation(
    company: Company = Depends(require_active_subscription),
    resolver: PermissionResolver = Depends(get_permission_resolver)
):
    """Company menu entries the plan grants"""
    return {"entries": [entry.as_dict() for entry in visible_entries(resolver)]}


@router.get("/payment-alerts", response_model=List[PaymentAlertResponse])
def list_payment_alerts(
    company: Company = Depends(get_current_company),
    db: Session = Depends(get_db)
):
    """Trial reminders not yet shown"""
    return [_alert_to_response(alert) for alert in SubscriptionService(db).pending_alerts(company.id)]


@router.post("/payment-alerts/{alert_id}/shown", response_model=PaymentAlertResponse)
def mark_payment_alert_shown(
    alert_id: int,
    company: Company = Depends(get_current_company),
    db: Session = Depends(get_db)
):
    alert = SubscriptionService(db).mark_alert_shown(company.id, alert_id)
    if not alert:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Alert not found"
        )
    return _alert_to_response(alert)
