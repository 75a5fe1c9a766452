"""
Tenant session: the subscription and plan snapshot behind one page load

Results are tagged with the LoadToken they were requested under. Once the
session moves on (a newer load or navigate_away) older results are dropped
instead of overwriting fresher state.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Mapping, Optional

from app.client.platform_client import PlatformClient, PlatformClientError
from app.services.navigation import (
    BlockScreen,
    BrandingConfig,
    NavEntry,
    render_block_screen,
    visible_entries,
)
from app.services.permissions import FeatureKey, PermissionResolver, ProfessionalsLimitInfo
from app.services.subscription_gate import (
    GateDecision,
    GateState,
    SubscriptionSnapshot,
    evaluate_gate,
)

logger = logging.getLogger(__name__)

# What a 200 response with the wrong shape raises while being read
PAYLOAD_ERRORS = (AttributeError, TypeError, ValueError, ArithmeticError)


def _read_plan_info(payload: dict):
    """Resolver and active professionals count from a plan-info payload"""
    plan = payload.get("plan") or {}
    usage = payload.get("usage") or {}
    if not isinstance(plan, Mapping) or not isinstance(usage, Mapping):
        raise TypeError("plan and usage must be objects")
    permissions = plan.get("permissions")
    if permissions is not None and not isinstance(permissions, Mapping):
        raise TypeError("permissions must be an object")

    if plan.get("id") is None:
        resolver = PermissionResolver.no_plan()
    else:
        resolver = PermissionResolver.from_plan(plan)
    count = usage.get("professionalsCount")
    return resolver, int(count) if count is not None else None


@dataclass(frozen=True)
class LoadToken:
    generation: int


class TenantSession:

    def __init__(self, client: PlatformClient):
        self.client = client
        self._generation = 0
        self._snapshot: Optional[SubscriptionSnapshot] = None
        self._status_error: Optional[BaseException] = None
        self._resolver = PermissionResolver.loading()
        self._professionals_count: Optional[int] = None

    # -------------------------
    # LOAD LIFECYCLE
    # -------------------------
    def begin_load(self) -> LoadToken:
        """Start a new load; everything previously fetched goes back to loading"""
        self._generation += 1
        self._snapshot = None
        self._status_error = None
        self._resolver = PermissionResolver.loading()
        self._professionals_count = None
        return LoadToken(self._generation)

    def navigate_away(self):
        """Invalidate in-flight results without clearing what is shown"""
        self._generation += 1

    def is_current(self, token: LoadToken) -> bool:
        return token.generation == self._generation

    def _accept(self, token: LoadToken, what: str) -> bool:
        if self.is_current(token):
            return True
        logger.debug(
            f"Discarding stale {what} (generation {token.generation}, current {self._generation})"
        )
        return False

    def apply_subscription_status(self, token: LoadToken, payload: dict) -> bool:
        if not self._accept(token, "subscription status"):
            return False
        try:
            snapshot = SubscriptionSnapshot.from_payload(payload)
        except PAYLOAD_ERRORS as e:
            logger.error(f"Malformed subscription status payload: {str(e)}")
            self._snapshot = None
            self._status_error = PlatformClientError(f"Malformed subscription status: {str(e)}")
            return True
        self._snapshot = snapshot
        self._status_error = None
        return True

    def fail_subscription_status(self, token: LoadToken, error: BaseException) -> bool:
        if not self._accept(token, "subscription status failure"):
            return False
        self._snapshot = None
        self._status_error = error
        return True

    def apply_plan_info(self, token: LoadToken, payload: dict) -> bool:
        if not self._accept(token, "plan info"):
            return False
        try:
            resolver, count = _read_plan_info(payload)
        except PAYLOAD_ERRORS as e:
            logger.error(f"Malformed plan info payload: {str(e)}")
            self._resolver = PermissionResolver.failed()
            self._professionals_count = None
            return True
        self._resolver = resolver
        self._professionals_count = count
        return True

    def fail_plan_info(self, token: LoadToken, error: BaseException) -> bool:
        if not self._accept(token, "plan info failure"):
            return False
        self._resolver = PermissionResolver.failed()
        self._professionals_count = None
        return True

    def refresh(self) -> LoadToken:
        """
        Fetch subscription status and plan info for a fresh load

        Failures are recorded, not raised: a failed status fetch blocks the
        gate and a failed plan fetch denies every gated feature. Nothing is
        retried until the next refresh().
        """
        token = self.begin_load()

        try:
            payload = self.client.get_subscription_status()
        except PlatformClientError as e:
            logger.error(f"Subscription status fetch failed: {str(e)}")
            self.fail_subscription_status(token, e)
        else:
            self.apply_subscription_status(token, payload)

        try:
            payload = self.client.get_plan_info()
        except PlatformClientError as e:
            logger.error(f"Plan info fetch failed: {str(e)}")
            self.fail_plan_info(token, e)
        else:
            self.apply_plan_info(token, payload)

        return token

    # -------------------------
    # QUERIES
    # -------------------------
    @property
    def resolver(self) -> PermissionResolver:
        return self._resolver

    @property
    def snapshot(self) -> Optional[SubscriptionSnapshot]:
        return self._snapshot

    def gate_decision(self, now: Optional[datetime] = None) -> GateDecision:
        return evaluate_gate(self._snapshot, error=self._status_error, now=now)

    def subscription_gate_state(self, now: Optional[datetime] = None) -> GateState:
        return self.gate_decision(now).state

    def has_permission(self, key: FeatureKey) -> bool:
        return self._resolver.has_permission(key)

    def get_professionals_limit_info(self) -> Optional[ProfessionalsLimitInfo]:
        return self._resolver.get_professionals_limit_info(self._professionals_count)

    def can_add_professional(self) -> bool:
        return self._resolver.can_add_professional(self._professionals_count)

    def navigation(self, now: Optional[datetime] = None) -> List[NavEntry]:
        """Visible menu entries; none until the gate allows access"""
        if not self.gate_decision(now).is_allowed:
            return []
        return visible_entries(self._resolver)

    def block_screen(self, branding: BrandingConfig, now: Optional[datetime] = None) -> Optional[BlockScreen]:
        return render_block_screen(self.gate_decision(now), branding)
