# app/services/subscription_service.py
"""
Subscription status service - server side of the subscription gate
"""
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.config import settings
from app.models.company import Company, PaymentAlert
from app.services.subscription_gate import (
    GateDecision,
    SubscriptionSnapshot,
    TRIAL_STATUSES,
    evaluate_gate,
)
from app.utils.date import trial_days_remaining

logger = logging.getLogger(__name__)


def alert_type_for(days_remaining: int) -> str:
    return f"{days_remaining}_day{'s' if days_remaining > 1 else ''}"


class SubscriptionService:
    """Builds subscription status payloads and evaluates the gate for a company"""

    def __init__(self, db: Session):
        self.db = db

    # ========================================================================
    # STATUS PAYLOAD
    # ========================================================================

    def status_payload(self, company: Company, now: Optional[datetime] = None) -> dict:
        """Body of GET /api/company/subscription-status"""
        now = now or datetime.utcnow()
        plan = company.plan
        is_on_trial = (company.subscription_status or "").lower() in TRIAL_STATUSES

        billing = None
        if company.billing_subscription_id:
            billing = {
                "status": company.payment_status,
                "value": company.billing_value,
                "cycle": company.billing_cycle,
                "nextDueDate": company.next_billing_date.date().isoformat()
                if company.next_billing_date else None,
            }

        return {
            "isActive": bool(company.is_active),
            "isBlocked": bool(company.is_blocked),
            "status": company.subscription_status,
            "paymentStatus": company.payment_status,
            "planId": plan.id if plan else None,
            "planName": plan.name if plan else None,
            "planPrice": str(plan.price) if plan else None,
            "asaasData": billing,
            "isOnTrial": is_on_trial,
            "trialEndsAt": company.trial_expires_at.isoformat() if company.trial_expires_at else None,
            "trialDaysRemaining": trial_days_remaining(company.trial_expires_at, now) if is_on_trial else 0,
        }

    # ========================================================================
    # GATE
    # ========================================================================

    def evaluate(self, company: Company, now: Optional[datetime] = None) -> GateDecision:
        """
        Evaluate the gate for a company row and record trial reminders.
        The row itself is never mutated; an expired trial is blocked on read.
        """
        now = now or datetime.utcnow()
        decision = evaluate_gate(SubscriptionSnapshot.from_company(company), now=now)

        if decision.is_blocked:
            logger.info(
                f"Company {company.id} blocked: {decision.reason.value} "
                f"(status={company.subscription_status}, payment={company.payment_status})"
            )
            return decision

        if (company.subscription_status or "").lower() in TRIAL_STATUSES:
            days_remaining = trial_days_remaining(company.trial_expires_at, now)
            if 0 < days_remaining <= settings.PAYMENT_ALERT_DAYS:
                self.record_payment_alert(company, days_remaining, now)

        return decision

    # ========================================================================
    # PAYMENT ALERTS
    # ========================================================================

    def record_payment_alert(self, company: Company, days_remaining: int, now: datetime) -> PaymentAlert:
        """Create today's alert of this type unless it already exists"""
        alert_type = alert_type_for(days_remaining)
        existing = self.db.query(PaymentAlert).filter(
            PaymentAlert.company_id == company.id,
            PaymentAlert.alert_type == alert_type,
            func.date(PaymentAlert.created_at) == now.date(),
        ).first()
        if existing:
            return existing

        alert = PaymentAlert(
            company_id=company.id,
            alert_type=alert_type,
            created_at=now,
            is_shown=False,
        )
        self.db.add(alert)
        self.db.commit()
        self.db.refresh(alert)
        logger.info(f"Payment alert {alert_type} created for company {company.id}")
        return alert

    def pending_alerts(self, company_id: int) -> List[PaymentAlert]:
        return self.db.query(PaymentAlert).filter(
            PaymentAlert.company_id == company_id,
            PaymentAlert.is_shown == False,  # noqa: E712
        ).order_by(PaymentAlert.created_at.desc()).all()

    def mark_alert_shown(self, company_id: int, alert_id: int) -> Optional[PaymentAlert]:
        alert = self.db.query(PaymentAlert).filter(
            PaymentAlert.id == alert_id,
            PaymentAlert.company_id == company_id,
        ).first()
        if not alert:
            return None
        alert.is_shown = True
        alert.shown_at = datetime.utcnow()
        self.db.commit()
        self.db.refresh(alert)
        return alert
