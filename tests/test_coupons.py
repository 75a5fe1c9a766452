"""
Coupon validity evaluator tests
"""
from datetime import date, datetime
from decimal import Decimal

from app.models.coupon import Coupon
from app.services.coupons import CouponStatus, compute_discount, coupon_status, evaluate_coupon

NOW = datetime(2026, 10, 19, 15, 30, 0)


def make_coupon(**overrides):
    fields = {
        "name": "Promo",
        "code": "PROMO",
        "discount_type": "percentage",
        "discount_value": Decimal("10"),
        "min_order_value": None,
        "max_discount": None,
        "usage_limit": None,
        "used_count": 0,
        "valid_until": date(2026, 12, 31),
        "is_active": True,
    }
    fields.update(overrides)
    return Coupon(**fields)


class TestCouponStatus:
    """Stored-state precedence: inactive > expired > exhausted > valid"""

    def test_valid(self):
        assert coupon_status(make_coupon(), NOW) == CouponStatus.VALID

    def test_inactive_wins_over_expired(self):
        """
        Test: Coupon both inactive and past its valid_until
        Expected: Reported as inactive
        """
        coupon = make_coupon(is_active=False, valid_until=date(2026, 1, 1))
        assert coupon_status(coupon, NOW) == CouponStatus.INACTIVE

    def test_expired_wins_over_exhausted(self):
        coupon = make_coupon(valid_until=date(2026, 10, 18), usage_limit=1, used_count=1)
        assert coupon_status(coupon, NOW) == CouponStatus.EXPIRED

    def test_exhausted(self):
        """
        Test: usageLimit 1, usedCount 1
        Expected: exhausted
        """
        coupon = make_coupon(usage_limit=1, used_count=1)
        assert coupon_status(coupon, NOW) == CouponStatus.EXHAUSTED

    def test_valid_through_end_of_last_day(self):
        coupon = make_coupon(valid_until=date(2026, 10, 19))
        assert coupon_status(coupon, datetime(2026, 10, 19, 23, 59, 59)) == CouponStatus.VALID
        assert coupon_status(coupon, datetime(2026, 10, 20, 0, 0, 0)) == CouponStatus.EXPIRED

    def test_unlimited_usage(self):
        coupon = make_coupon(usage_limit=None, used_count=10_000)
        assert coupon_status(coupon, NOW) == CouponStatus.VALID


class TestDiscount:
    """Discount arithmetic"""

    def test_percentage_capped_by_max_discount(self):
        """
        Test: 50% with maxDiscount 20 on subtotal 100
        Expected: Discount 20
        """
        coupon = make_coupon(discount_value=Decimal("50"), max_discount=Decimal("20"))
        assert compute_discount(coupon, Decimal("100")) == Decimal("20.00")

    def test_percentage_without_cap(self):
        coupon = make_coupon(discount_value=Decimal("15"))
        assert compute_discount(coupon, Decimal("80")) == Decimal("12.00")

    def test_percentage_rounds_half_up_to_cents(self):
        coupon = make_coupon(discount_value=Decimal("10"))
        assert compute_discount(coupon, Decimal("0.25")) == Decimal("0.03")

    def test_fixed_discount(self):
        coupon = make_coupon(discount_type="fixed", discount_value=Decimal("15"))
        assert compute_discount(coupon, Decimal("100")) == Decimal("15.00")

    def test_fixed_discount_capped_at_subtotal(self):
        coupon = make_coupon(discount_type="fixed", discount_value=Decimal("50"))
        assert compute_discount(coupon, Decimal("30")) == Decimal("30.00")


class TestEvaluateCoupon:

    def test_valid_with_subtotal(self):
        coupon = make_coupon(discount_value=Decimal("50"), max_discount=Decimal("20"))
        result = evaluate_coupon(coupon, NOW, Decimal("100"))
        assert result.is_valid
        assert result.discount == Decimal("20.00")

    def test_valid_without_subtotal_has_no_discount(self):
        result = evaluate_coupon(make_coupon(), NOW)
        assert result.is_valid
        assert result.discount is None

    def test_below_minimum(self):
        """
        Test: Subtotal under the coupon's minimum order value
        Expected: below_minimum, no discount
        """
        coupon = make_coupon(min_order_value=Decimal("50"))
        result = evaluate_coupon(coupon, NOW, Decimal("49.99"))
        assert result.status == CouponStatus.BELOW_MINIMUM
        assert result.discount is None
        assert "50.00" in result.message

    def test_minimum_exactly_met(self):
        coupon = make_coupon(min_order_value=Decimal("50"))
        assert evaluate_coupon(coupon, NOW, Decimal("50")).is_valid

    def test_stored_state_checked_before_minimum(self):
        coupon = make_coupon(is_active=False, min_order_value=Decimal("50"))
        result = evaluate_coupon(coupon, NOW, Decimal("10"))
        assert result.status == CouponStatus.INACTIVE
        assert result.discount is None
