import logging
from functools import lru_cache
from typing import Optional

from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.security import get_current_company
from app.models.company import Company
from app.models.plan import Plan
from app.models.professional import Professional
from app.services.permissions import (
    FeatureKey,
    PermissionResolver,
    denied_message,
    limit_reached_message,
)
from app.services.subscription_gate import BlockReason
from app.services.subscription_service import SubscriptionService

logger = logging.getLogger(__name__)


# -------------------------
# PLAN DEPENDENCIES
# -------------------------
def get_company_plan(
    company: Company = Depends(get_current_company),
    db: Session = Depends(get_db)
) -> Optional[Plan]:
    """Load the company's plan, or None when it has none assigned"""
    if not company.plan_id:
        return None
    return db.query(Plan).filter(Plan.id == company.plan_id).first()


def get_permission_resolver(
    plan: Optional[Plan] = Depends(get_company_plan)
) -> PermissionResolver:
    return PermissionResolver.from_plan(plan)


def count_active_professionals(db: Session, company_id: int) -> int:
    return db.query(Professional).filter(
        Professional.company_id == company_id,
        Professional.is_active == True  # noqa: E712
    ).count()


# -------------------------
# SUBSCRIPTION GATE
# -------------------------
def require_active_subscription(
    company: Company = Depends(get_current_company),
    db: Session = Depends(get_db)
) -> Company:
    """
    Server-side subscription gate

    Raises:
        HTTPException: 403 when the company is blocked by an admin or by billing
    """
    decision = SubscriptionService(db).evaluate(company)
    if decision.is_blocked:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "message": decision.message,
                "status": "blocked",
                "reason": decision.reason.value,
                "needsPayment": decision.reason != BlockReason.ADMIN_BLOCKED,
            }
        )
    return company


# -------------------------
# PLAN PERMISSION
# -------------------------
@lru_cache(maxsize=None)
def require_permission(feature: FeatureKey):
    """
    Dependency factory for plan feature gating

    The subscription gate runs first, so a blocked company gets the block
    response even when its plan includes the feature.

    Usage:
        @router.get("", dependencies=[Depends(require_permission(FeatureKey.CLIENTS))])
    """
    def permission_checker(
        company: Company = Depends(require_active_subscription),
        resolver: PermissionResolver = Depends(get_permission_resolver)
    ) -> Company:
        if not resolver.has_permission(feature):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail={
                    "message": denied_message(resolver.plan_name, feature),
                    "requiredPermission": feature.value,
                }
            )
        return company

    return permission_checker


# -------------------------
# PROFESSIONALS LIMIT
# -------------------------
def check_professionals_limit(
    company: Company = Depends(require_permission(FeatureKey.PROFESSIONALS)),
    resolver: PermissionResolver = Depends(get_permission_resolver),
    db: Session = Depends(get_db)
) -> Company:
    """
    Block creation of a professional once the plan headcount is reached

    Raises:
        HTTPException: 403 carrying the configured limit and current count
    """
    current = count_active_professionals(db, company.id)
    info = resolver.get_professionals_limit_info(current)

    if info is None or not info.can_add:
        limit = info.limit if info else 0
        logger.info(f"Company {company.id} hit professionals limit ({current}/{limit})")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "message": limit_reached_message(info) if info else "Acesso negado - plano não encontrado",
                "limit": limit,
                "current": current,
            }
        )
    return company
