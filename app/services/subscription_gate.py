"""
Subscription status gate

Decides whether a company may use the application: allowed, blocked, or
still loading. Administrative blocks win over billing state, billing state
wins over plan permissions, and a failed status fetch never lets a tenant in.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping, Optional


class GateState(str, Enum):
    LOADING = "loading"
    ALLOWED = "allowed"
    BLOCKED = "blocked"


class BlockReason(str, Enum):
    ADMIN_BLOCKED = "admin_blocked"
    PAST_DUE = "past_due"
    CANCELLED = "cancelled"
    PAYMENT_FAILED = "payment_failed"
    SUSPENDED = "suspended"
    TRIAL_EXPIRED = "trial_expired"
    UNKNOWN_STATUS = "unknown_status"
    FETCH_FAILED = "fetch_failed"


BLOCK_MESSAGES = {
    BlockReason.ADMIN_BLOCKED: "Acesso negado. Empresa bloqueada pelo administrador.",
    BlockReason.PAST_DUE: "Sua assinatura está com pagamento em atraso.",
    BlockReason.CANCELLED: "Sua assinatura foi cancelada.",
    BlockReason.PAYMENT_FAILED: "O pagamento da sua assinatura foi recusado.",
    BlockReason.SUSPENDED: "Acesso bloqueado. Sua conta foi suspensa por falta de pagamento.",
    BlockReason.TRIAL_EXPIRED: (
        "Seu período gratuito expirou. Para continuar usando o sistema, "
        "escolha um plano e efetue o pagamento."
    ),
    BlockReason.UNKNOWN_STATUS: "Problema detectado com sua assinatura.",
    BlockReason.FETCH_FAILED: (
        "Não foi possível verificar sua assinatura. Recarregue a página para tentar novamente."
    ),
}

ALLOWED_STATUSES = frozenset({"active", "trialing", "trial"})
TRIAL_STATUSES = frozenset({"trialing", "trial"})
PAST_DUE_STATUSES = frozenset({"past_due", "overdue"})
CANCELLED_STATUSES = frozenset({"cancelled", "canceled"})
SUSPENDED_STATUSES = frozenset({"blocked", "suspended"})
FAILED_PAYMENT_STATUSES = frozenset({"failed", "payment_failed", "requires_payment_method", "overdue"})


def _normalize(value: Optional[str]) -> str:
    return (value or "").strip().lower()


def _to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _parse_datetime(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return _to_naive_utc(value)
    text = str(value)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return _to_naive_utc(datetime.fromisoformat(text))
    except ValueError:
        return None


@dataclass(frozen=True)
class SubscriptionSnapshot:
    """What the gate needs to know about one company, at one fetch"""

    is_active: bool
    is_blocked: bool
    status: Optional[str]
    payment_status: Optional[str] = None
    is_on_trial: bool = False
    trial_ends_at: Optional[datetime] = None
    plan_id: Optional[int] = None
    plan_name: Optional[str] = None
    plan_price: Optional[Decimal] = None

    @classmethod
    def from_payload(cls, data: Mapping[str, Any]) -> "SubscriptionSnapshot":
        """Build from the JSON of GET /api/company/subscription-status"""
        billing = data.get("asaasData") or {}
        payment_status = data.get("paymentStatus") or billing.get("status")
        price = data.get("planPrice")
        return cls(
            is_active=data.get("isActive") is True,
            is_blocked=data.get("isBlocked") is True,
            status=data.get("status"),
            payment_status=payment_status,
            is_on_trial=data.get("isOnTrial") is True,
            trial_ends_at=_parse_datetime(data.get("trialEndsAt")),
            plan_id=data.get("planId"),
            plan_name=data.get("planName"),
            plan_price=Decimal(str(price)) if price is not None else None,
        )

    @classmethod
    def from_company(cls, company) -> "SubscriptionSnapshot":
        """Build from a Company row (server side)"""
        plan = company.plan
        status = company.subscription_status
        return cls(
            is_active=bool(company.is_active),
            is_blocked=bool(company.is_blocked),
            status=status,
            payment_status=company.payment_status,
            is_on_trial=_normalize(status) in TRIAL_STATUSES,
            trial_ends_at=_to_naive_utc(company.trial_expires_at),
            plan_id=plan.id if plan else None,
            plan_name=plan.name if plan else None,
            plan_price=plan.price if plan else None,
        )


@dataclass(frozen=True)
class GateDecision:
    state: GateState
    reason: Optional[BlockReason] = None
    message: Optional[str] = None
    status: Optional[str] = None
    payment_status: Optional[str] = None

    @property
    def is_allowed(self) -> bool:
        return self.state == GateState.ALLOWED

    @property
    def is_blocked(self) -> bool:
        return self.state == GateState.BLOCKED

    def as_dict(self) -> dict:
        return {
            "state": self.state.value,
            "reason": self.reason.value if self.reason else None,
            "message": self.message,
            "subscriptionStatus": self.status,
            "paymentStatus": self.payment_status,
        }


def _blocked(reason: BlockReason, snapshot: Optional[SubscriptionSnapshot] = None) -> GateDecision:
    return GateDecision(
        state=GateState.BLOCKED,
        reason=reason,
        message=BLOCK_MESSAGES[reason],
        status=snapshot.status if snapshot else None,
        payment_status=snapshot.payment_status if snapshot else None,
    )


def evaluate_gate(
    snapshot: Optional[SubscriptionSnapshot] = None,
    error: Optional[BaseException] = None,
    now: Optional[datetime] = None,
) -> GateDecision:
    """
    Evaluate one fetch outcome. Never raises.

    ``error`` is the exception the status fetch failed with; a failure maps
    to BLOCKED(fetch_failed), never to ALLOWED. No snapshot and no error
    means the fetch is still in flight.
    """
    if error is not None:
        return _blocked(BlockReason.FETCH_FAILED)
    if snapshot is None:
        return GateDecision(state=GateState.LOADING)

    # Administrative block overrides any billing state
    if snapshot.is_blocked or not snapshot.is_active:
        return _blocked(BlockReason.ADMIN_BLOCKED, snapshot)

    status = _normalize(snapshot.status)
    payment_status = _normalize(snapshot.payment_status)

    if status in PAST_DUE_STATUSES:
        return _blocked(BlockReason.PAST_DUE, snapshot)
    if status in CANCELLED_STATUSES:
        return _blocked(BlockReason.CANCELLED, snapshot)
    if status in SUSPENDED_STATUSES:
        return _blocked(BlockReason.SUSPENDED, snapshot)
    if payment_status in FAILED_PAYMENT_STATUSES:
        return _blocked(BlockReason.PAYMENT_FAILED, snapshot)

    if status in TRIAL_STATUSES:
        current = _to_naive_utc(now) if now else datetime.utcnow()
        if snapshot.trial_ends_at is not None and snapshot.trial_ends_at <= current:
            return _blocked(BlockReason.TRIAL_EXPIRED, snapshot)

    if status in ALLOWED_STATUSES:
        return GateDecision(
            state=GateState.ALLOWED,
            status=snapshot.status,
            payment_status=snapshot.payment_status,
        )

    return _blocked(BlockReason.UNKNOWN_STATUS, snapshot)
