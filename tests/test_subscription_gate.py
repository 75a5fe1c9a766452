"""
Subscription status gate tests
"""
from datetime import datetime, timedelta

import pytest

from app.services.subscription_gate import (
    BLOCK_MESSAGES,
    BlockReason,
    GateState,
    SubscriptionSnapshot,
    evaluate_gate,
)

NOW = datetime(2026, 10, 19, 12, 0, 0)


def snapshot(**overrides):
    fields = {
        "is_active": True,
        "is_blocked": False,
        "status": "active",
        "payment_status": None,
        "trial_ends_at": None,
    }
    fields.update(overrides)
    return SubscriptionSnapshot(**fields)


class TestGateStates:
    """Loading, allowed and blocked outcomes"""

    def test_loading_without_snapshot(self):
        decision = evaluate_gate(None, now=NOW)
        assert decision.state == GateState.LOADING
        assert not decision.is_allowed
        assert not decision.is_blocked

    def test_fetch_failure_blocks(self):
        """
        Test: Status fetch raised
        Expected: BLOCKED(fetch_failed), never allowed
        """
        decision = evaluate_gate(None, error=RuntimeError("timeout"), now=NOW)
        assert decision.is_blocked
        assert decision.reason == BlockReason.FETCH_FAILED

    def test_fetch_failure_wins_over_stale_snapshot(self):
        decision = evaluate_gate(snapshot(), error=RuntimeError("boom"), now=NOW)
        assert decision.reason == BlockReason.FETCH_FAILED

    @pytest.mark.parametrize("status", ["active", "ACTIVE", "trialing", "trial"])
    def test_allowed_statuses(self, status):
        decision = evaluate_gate(snapshot(status=status, trial_ends_at=NOW + timedelta(days=3)), now=NOW)
        assert decision.is_allowed

    def test_unknown_status_fails_closed(self):
        decision = evaluate_gate(snapshot(status="paused"), now=NOW)
        assert decision.is_blocked
        assert decision.reason == BlockReason.UNKNOWN_STATUS

    def test_missing_status_fails_closed(self):
        decision = evaluate_gate(snapshot(status=None), now=NOW)
        assert decision.reason == BlockReason.UNKNOWN_STATUS


class TestBlockReasons:
    """Precedence between administrative and billing blocks"""

    def test_admin_block_overrides_active_billing(self):
        """
        Test: isBlocked=true with subscription active
        Expected: Blocked for administrative reasons
        """
        decision = evaluate_gate(snapshot(is_blocked=True), now=NOW)
        assert decision.reason == BlockReason.ADMIN_BLOCKED
        assert decision.message == BLOCK_MESSAGES[BlockReason.ADMIN_BLOCKED]

    def test_inactive_company_is_admin_blocked(self):
        decision = evaluate_gate(snapshot(is_active=False), now=NOW)
        assert decision.reason == BlockReason.ADMIN_BLOCKED

    def test_admin_block_overrides_past_due(self):
        decision = evaluate_gate(snapshot(is_blocked=True, status="past_due"), now=NOW)
        assert decision.reason == BlockReason.ADMIN_BLOCKED

    @pytest.mark.parametrize("status,reason", [
        ("past_due", BlockReason.PAST_DUE),
        ("overdue", BlockReason.PAST_DUE),
        ("cancelled", BlockReason.CANCELLED),
        ("canceled", BlockReason.CANCELLED),
        ("blocked", BlockReason.SUSPENDED),
        ("suspended", BlockReason.SUSPENDED),
    ])
    def test_billing_statuses(self, status, reason):
        decision = evaluate_gate(snapshot(status=status), now=NOW)
        assert decision.reason == reason
        assert decision.status == status

    def test_failed_payment_blocks_active_subscription(self):
        decision = evaluate_gate(snapshot(payment_status="requires_payment_method"), now=NOW)
        assert decision.reason == BlockReason.PAYMENT_FAILED
        assert decision.payment_status == "requires_payment_method"

    def test_expired_trial(self):
        """
        Test: Trial whose end date has passed
        Expected: BLOCKED(trial_expired) even though the stored status is still trial
        """
        decision = evaluate_gate(snapshot(status="trial", trial_ends_at=NOW - timedelta(minutes=1)), now=NOW)
        assert decision.reason == BlockReason.TRIAL_EXPIRED

    def test_trial_ending_exactly_now_is_expired(self):
        decision = evaluate_gate(snapshot(status="trialing", trial_ends_at=NOW), now=NOW)
        assert decision.reason == BlockReason.TRIAL_EXPIRED

    def test_active_status_ignores_old_trial_date(self):
        decision = evaluate_gate(snapshot(status="active", trial_ends_at=NOW - timedelta(days=30)), now=NOW)
        assert decision.is_allowed


class TestSnapshotFromPayload:
    """Parsing the subscription-status JSON"""

    def test_payload_fields(self):
        snap = SubscriptionSnapshot.from_payload({
            "isActive": True,
            "isBlocked": False,
            "status": "trial",
            "paymentStatus": None,
            "planId": 2,
            "planName": "Profissional",
            "planPrice": "99.90",
            "isOnTrial": True,
            "trialEndsAt": "2026-10-25T12:00:00Z",
        })
        assert snap.is_on_trial is True
        assert snap.trial_ends_at == datetime(2026, 10, 25, 12, 0, 0)
        assert str(snap.plan_price) == "99.90"

    def test_billing_status_fallback(self):
        snap = SubscriptionSnapshot.from_payload({
            "isActive": True,
            "isBlocked": False,
            "status": "active",
            "asaasData": {"status": "failed"},
        })
        assert snap.payment_status == "failed"
        assert evaluate_gate(snap, now=NOW).reason == BlockReason.PAYMENT_FAILED

    def test_non_boolean_flags_are_not_true(self):
        snap = SubscriptionSnapshot.from_payload({"isActive": "yes", "isBlocked": False, "status": "active"})
        assert snap.is_active is False
        assert evaluate_gate(snap, now=NOW).reason == BlockReason.ADMIN_BLOCKED

    def test_as_dict(self):
        decision = evaluate_gate(snapshot(status="cancelled"), now=NOW)
        data = decision.as_dict()
        assert data["state"] == "blocked"
        assert data["reason"] == "cancelled"
        assert data["subscriptionStatus"] == "cancelled"
