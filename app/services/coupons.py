"""
Coupon validity evaluation
"""
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Optional, Union

CENTS = Decimal("0.01")

Number = Union[Decimal, int, float, str]


class CouponStatus(str, Enum):
    VALID = "valid"
    INACTIVE = "inactive"
    EXPIRED = "expired"
    EXHAUSTED = "exhausted"
    BELOW_MINIMUM = "below_minimum"


class DiscountType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


STATUS_LABELS = {
    CouponStatus.VALID: "Ativo",
    CouponStatus.INACTIVE: "Inativo",
    CouponStatus.EXPIRED: "Expirado",
    CouponStatus.EXHAUSTED: "Esgotado",
    CouponStatus.BELOW_MINIMUM: "Valor mínimo não atingido",
}


@dataclass(frozen=True)
class CouponEvaluation:
    status: CouponStatus
    discount: Optional[Decimal] = None
    message: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        return self.status == CouponStatus.VALID


def _money(value: Optional[Number]) -> Optional[Decimal]:
    if value is None:
        return None
    return Decimal(str(value))


def _as_date(value) -> date:
    return value.date() if isinstance(value, datetime) else value


def coupon_status(coupon, now: datetime) -> CouponStatus:
    """
    Derived status of the stored coupon: inactive > expired > exhausted > valid.
    A coupon stays valid through the whole of its valid_until day.
    """
    if not coupon.is_active:
        return CouponStatus.INACTIVE
    if coupon.valid_until is not None and _as_date(now) > _as_date(coupon.valid_until):
        return CouponStatus.EXPIRED
    if coupon.usage_limit is not None and (coupon.used_count or 0) >= coupon.usage_limit:
        return CouponStatus.EXHAUSTED
    return CouponStatus.VALID


def compute_discount(coupon, subtotal: Number) -> Decimal:
    """Discount for a subtotal; never more than the subtotal itself"""
    subtotal = _money(subtotal)
    value = _money(coupon.discount_value)

    if DiscountType(coupon.discount_type) == DiscountType.PERCENTAGE:
        discount = subtotal * value / Decimal(100)
        max_discount = _money(coupon.max_discount)
        if max_discount is not None:
            discount = min(discount, max_discount)
    else:
        discount = min(value, subtotal)

    return max(discount, Decimal(0)).quantize(CENTS, rounding=ROUND_HALF_UP)


def evaluate_coupon(coupon, now: datetime, subtotal: Optional[Number] = None) -> CouponEvaluation:
    status = coupon_status(coupon, now)
    if status != CouponStatus.VALID:
        return CouponEvaluation(status=status, message=f"Cupom {STATUS_LABELS[status].lower()}.")

    if subtotal is None:
        return CouponEvaluation(status=status)

    min_order = _money(coupon.min_order_value)
    if min_order is not None and _money(subtotal) < min_order:
        return CouponEvaluation(
            status=CouponStatus.BELOW_MINIMUM,
            message=f"Pedido mínimo de R$ {min_order:.2f} para usar este cupom.",
        )

    return CouponEvaluation(status=status, discount=compute_discount(coupon, subtotal))
