"""
Tenant session client tests
Platform API is replaced by an httpx.MockTransport
"""
import json

import httpx
import pytest

from app.client.platform_client import PlatformClient, PlatformClientError
from app.client.session import TenantSession
from app.services.navigation import BrandingConfig
from app.services.permissions import FeatureKey, ResolverState
from app.services.subscription_gate import BlockReason, GateState

ACTIVE_STATUS = {
    "isActive": True,
    "isBlocked": False,
    "status": "active",
    "paymentStatus": None,
    "planId": 1,
    "planName": "Profissional",
    "planPrice": "99.90",
    "isOnTrial": False,
    "trialEndsAt": None,
    "trialDaysRemaining": 0,
}

PLAN_INFO = {
    "plan": {
        "id": 1,
        "name": "Profissional",
        "maxProfessionals": 3,
        "permissions": {"dashboard": True, "clients": True, "professionals": True, "financial": False},
    },
    "usage": {"professionalsCount": 3, "professionalsLimit": 3},
}


def make_client(routes, calls=None):
    """PlatformClient whose requests are answered from a {path: response} map"""

    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        route = routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={"detail": "Not Found"})
        if callable(route):
            return route(request)
        return httpx.Response(route.status_code, content=route.content, headers=route.headers)

    return PlatformClient(token="tkn", base_url="http://platform.test", transport=httpx.MockTransport(handler))


class TestPlatformClient:
    """HTTP layer"""

    def test_sends_bearer_token(self):
        calls = []
        client = make_client({"/api/company/subscription-status": httpx.Response(200, json=ACTIVE_STATUS)}, calls)
        assert client.get_subscription_status()["status"] == "active"
        assert calls[0].headers["Authorization"] == "Bearer tkn"

    def test_server_error_raises(self):
        client = make_client({"/api/company/plan-info": httpx.Response(503, text="down")})
        with pytest.raises(PlatformClientError) as exc_info:
            client.get_plan_info()
        assert exc_info.value.status_code == 503

    def test_invalid_json_raises(self):
        client = make_client({"/api/company/plan-info": httpx.Response(200, content=b"<html>")})
        with pytest.raises(PlatformClientError):
            client.get_plan_info()

    def test_transport_error_raises(self):
        def refuse(request):
            raise httpx.ConnectError("refused", request=request)

        client = make_client({"/api/company/subscription-status": refuse})
        with pytest.raises(PlatformClientError):
            client.get_subscription_status()

    def test_public_plans(self):
        client = make_client({"/api/public-plans": httpx.Response(200, json=[{"id": 1, "name": "Básico"}])})
        assert client.get_public_plans() == [{"id": 1, "name": "Básico"}]


class TestTenantSessionRefresh:
    """Full refresh against the mocked platform"""

    def test_active_tenant(self):
        session = TenantSession(make_client({
            "/api/company/subscription-status": httpx.Response(200, json=ACTIVE_STATUS),
            "/api/company/plan-info": httpx.Response(200, json=PLAN_INFO),
        }))
        session.refresh()

        assert session.subscription_gate_state() == GateState.ALLOWED
        assert session.has_permission(FeatureKey.CLIENTS) is True
        assert session.has_permission(FeatureKey.FINANCIAL) is False
        titles = [entry.title for entry in session.navigation()]
        assert "Clientes" in titles
        assert "Financeiro" not in titles
        assert session.block_screen(BrandingConfig()) is None

    def test_professionals_limit_reached(self):
        """
        Test: maxProfessionals 3 with 3 active professionals
        Expected: canAdd False
        """
        session = TenantSession(make_client({
            "/api/company/subscription-status": httpx.Response(200, json=ACTIVE_STATUS),
            "/api/company/plan-info": httpx.Response(200, json=PLAN_INFO),
        }))
        session.refresh()

        info = session.get_professionals_limit_info()
        assert info.limit == 3
        assert info.current == 3
        assert info.can_add is False
        assert session.can_add_professional() is False

    def test_status_fetch_failure_blocks(self):
        """
        Test: subscription-status returns 500
        Expected: Gate blocked with fetch_failed, no navigation
        """
        session = TenantSession(make_client({
            "/api/company/subscription-status": httpx.Response(500, text="oops"),
            "/api/company/plan-info": httpx.Response(200, json=PLAN_INFO),
        }))
        session.refresh()

        decision = session.gate_decision()
        assert decision.is_blocked
        assert decision.reason == BlockReason.FETCH_FAILED
        assert session.navigation() == []
        assert session.block_screen(BrandingConfig()) is not None

    def test_plan_fetch_failure_denies(self):
        session = TenantSession(make_client({
            "/api/company/subscription-status": httpx.Response(200, json=ACTIVE_STATUS),
            "/api/company/plan-info": httpx.Response(502, text="bad gateway"),
        }))
        session.refresh()

        assert session.subscription_gate_state() == GateState.ALLOWED
        assert session.has_permission(FeatureKey.CLIENTS) is False
        assert session.has_permission(FeatureKey.SUPPORT) is False
        assert session.navigation() == []
        assert session.can_add_professional() is False

    def test_malformed_status_body_blocks(self):
        """
        Test: subscription-status answers 200 with an unparseable planPrice
        Expected: Gate blocked with fetch_failed instead of an exception
        """
        status = dict(ACTIVE_STATUS, planPrice="R$ 99,90")
        session = TenantSession(make_client({
            "/api/company/subscription-status": httpx.Response(200, json=status),
            "/api/company/plan-info": httpx.Response(200, json=PLAN_INFO),
        }))
        session.refresh()

        decision = session.gate_decision()
        assert decision.is_blocked
        assert decision.reason == BlockReason.FETCH_FAILED
        assert session.navigation() == []

    def test_status_body_not_an_object_blocks(self):
        session = TenantSession(make_client({
            "/api/company/subscription-status": httpx.Response(200, json=["active"]),
            "/api/company/plan-info": httpx.Response(200, json=PLAN_INFO),
        }))
        session.refresh()

        assert session.gate_decision().reason == BlockReason.FETCH_FAILED

    @pytest.mark.parametrize("plan_info", [
        {"plan": {"id": 1, "name": "Profissional", "permissions": ["clients"]}, "usage": {}},
        {"plan": ["Profissional"], "usage": {}},
        {"plan": {"id": 1, "name": "Profissional", "maxProfessionals": "muitos"}, "usage": {}},
        {"plan": {"id": 1, "name": "Profissional"}, "usage": {"professionalsCount": "três"}},
    ])
    def test_malformed_plan_info_denies(self, plan_info):
        """
        Test: plan-info answers 200 with a body of the wrong shape
        Expected: Resolver failed, every feature denied, no exception
        """
        session = TenantSession(make_client({
            "/api/company/subscription-status": httpx.Response(200, json=ACTIVE_STATUS),
            "/api/company/plan-info": httpx.Response(200, json=plan_info),
        }))
        session.refresh()

        assert session.resolver.state == ResolverState.FAILED
        assert session.has_permission(FeatureKey.CLIENTS) is False
        assert session.has_permission(FeatureKey.SUPPORT) is False
        assert session.can_add_professional() is False

    def test_blocked_tenant_gets_no_navigation(self):
        """
        Test: isBlocked=true with dashboard granted by the plan
        Expected: Block screen, empty menu
        """
        status = dict(ACTIVE_STATUS, isBlocked=True)
        session = TenantSession(make_client({
            "/api/company/subscription-status": httpx.Response(200, json=status),
            "/api/company/plan-info": httpx.Response(200, json=PLAN_INFO),
        }))
        session.refresh()

        assert session.has_permission(FeatureKey.DASHBOARD) is True
        assert session.navigation() == []
        screen = session.block_screen(BrandingConfig())
        assert screen is not None
        assert session.gate_decision().reason == BlockReason.ADMIN_BLOCKED

    def test_no_plan_shows_always_visible_only(self):
        plan_info = {
            "plan": {"id": None, "name": "Plano não identificado", "maxProfessionals": 0, "permissions": {}},
            "usage": {"professionalsCount": 0, "professionalsLimit": 0},
        }
        session = TenantSession(make_client({
            "/api/company/subscription-status": httpx.Response(200, json=ACTIVE_STATUS),
            "/api/company/plan-info": httpx.Response(200, json=plan_info),
        }))
        session.refresh()

        assert [entry.title for entry in session.navigation()] == ["Suporte", "Assinatura"]
        assert session.get_professionals_limit_info() is None


class TestStaleResponses:
    """Results tagged with an outdated LoadToken are dropped"""

    def test_initial_state_is_loading(self):
        session = TenantSession(make_client({}))
        assert session.subscription_gate_state() == GateState.LOADING
        assert session.navigation() == []
        assert session.resolver.is_loading

    def test_stale_result_does_not_overwrite_newer_state(self):
        session = TenantSession(make_client({}))
        old = session.begin_load()
        new = session.begin_load()

        assert session.apply_subscription_status(new, ACTIVE_STATUS) is True
        blocked = dict(ACTIVE_STATUS, status="cancelled")
        assert session.apply_subscription_status(old, blocked) is False

        assert session.subscription_gate_state() == GateState.ALLOWED

    def test_stale_failure_ignored(self):
        session = TenantSession(make_client({}))
        old = session.begin_load()
        new = session.begin_load()
        session.apply_plan_info(new, PLAN_INFO)

        assert session.fail_plan_info(old, RuntimeError("late")) is False
        assert session.has_permission(FeatureKey.CLIENTS) is True

    def test_navigate_away_discards_in_flight_response(self):
        """
        Test: User navigates away while the plan fetch is in flight
        Expected: The late plan info is not applied
        """
        holder = {}

        def plan_info_after_navigation(request):
            holder["session"].navigate_away()
            return httpx.Response(200, content=json.dumps(PLAN_INFO).encode())

        session = TenantSession(make_client({
            "/api/company/subscription-status": httpx.Response(200, json=ACTIVE_STATUS),
            "/api/company/plan-info": plan_info_after_navigation,
        }))
        holder["session"] = session
        token = session.refresh()

        assert not session.is_current(token)
        assert session.resolver.is_loading
        assert session.has_permission(FeatureKey.CLIENTS) is False

    def test_refresh_after_failure_recovers(self):
        responses = {"status": httpx.Response(500)}

        def status_route(request):
            return responses["status"]

        session = TenantSession(make_client({
            "/api/company/subscription-status": status_route,
            "/api/company/plan-info": httpx.Response(200, json=PLAN_INFO),
        }))
        session.refresh()
        assert session.gate_decision().reason == BlockReason.FETCH_FAILED

        responses["status"] = httpx.Response(200, json=ACTIVE_STATUS)
        session.refresh()
        assert session.subscription_gate_state() == GateState.ALLOWED
