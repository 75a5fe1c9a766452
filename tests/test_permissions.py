"""
Plan permission resolver tests
"""
from app.models.plan import Plan
from app.services.permissions import (
    ALWAYS_VISIBLE,
    FEATURE_LABELS,
    Access,
    FeatureKey,
    PermissionResolver,
    denied_message,
    limit_reached_message,
    parse_permissions,
)


class TestParsePermissions:
    """Stored permission map parsing"""

    def test_missing_keys_are_denied(self):
        """
        Test: Permission map with only one key
        Expected: Every other key resolves to False
        """
        parsed = parse_permissions({"clients": True})
        assert parsed[FeatureKey.CLIENTS] is True
        assert all(value is False for key, value in parsed.items() if key != FeatureKey.CLIENTS)

    def test_non_true_values_are_denied(self):
        """
        Test: Truthy values that are not a real boolean true
        Expected: Only True and integer 1 grant access
        """
        parsed = parse_permissions({
            "clients": "true",
            "services": "yes",
            "tasks": 1,
            "coupons": 2,
            "financial": None,
            "reports": True,
        })
        assert parsed[FeatureKey.CLIENTS] is False
        assert parsed[FeatureKey.SERVICES] is False
        assert parsed[FeatureKey.TASKS] is True
        assert parsed[FeatureKey.COUPONS] is False
        assert parsed[FeatureKey.FINANCIAL] is False
        assert parsed[FeatureKey.REPORTS] is True

    def test_unknown_keys_ignored(self):
        parsed = parse_permissions({"teleport": True})
        assert set(parsed) == set(FeatureKey)
        assert not any(parsed.values())

    def test_none_map(self):
        assert not any(parse_permissions(None).values())


class TestPermissionResolver:
    """has_permission semantics across resolver states"""

    def test_plan_grants_and_denies(self):
        resolver = PermissionResolver.from_plan(
            Plan(name="Básico", permissions={"clients": True, "financial": False}, max_professionals=2)
        )
        assert resolver.has_permission(FeatureKey.CLIENTS) is True
        assert resolver.has_permission(FeatureKey.FINANCIAL) is False
        assert resolver.has_permission(FeatureKey.REPORTS) is False

    def test_always_visible_without_plan(self):
        """
        Test: Company with no plan assigned
        Expected: Only support and subscription management are visible
        """
        resolver = PermissionResolver.no_plan()
        for key in FeatureKey:
            assert resolver.has_permission(key) is (key in ALWAYS_VISIBLE)

    def test_always_visible_even_when_plan_denies(self):
        resolver = PermissionResolver.from_plan({"name": "X", "permissions": {"support": False}})
        assert resolver.has_permission(FeatureKey.SUPPORT) is True
        assert resolver.has_permission(FeatureKey.SUBSCRIPTION_MANAGEMENT) is True

    def test_loading_denies_but_reports_loading(self):
        """
        Test: Resolver whose plan fetch has not completed
        Expected: has_permission False, check() reports LOADING instead of DENIED
        """
        resolver = PermissionResolver.loading()
        assert resolver.is_loading
        assert resolver.has_permission(FeatureKey.CLIENTS) is False
        assert resolver.has_permission(FeatureKey.SUPPORT) is False
        assert resolver.check(FeatureKey.CLIENTS) == Access.LOADING

    def test_failed_fetch_denies_everything(self):
        resolver = PermissionResolver.failed()
        assert not resolver.is_loading
        for key in FeatureKey:
            assert resolver.has_permission(key) is False
            assert resolver.check(key) == Access.DENIED

    def test_unknown_key_string_denied(self):
        resolver = PermissionResolver.from_plan({"name": "X", "permissions": {"clients": True}})
        assert resolver.has_permission("teleport") is False
        assert resolver.has_permission("clients") is True

    def test_granted_map_covers_every_key(self):
        resolver = PermissionResolver.from_plan({"name": "X", "permissions": {"clients": True}})
        granted = resolver.granted()
        assert set(granted) == {key.value for key in FeatureKey}
        assert granted["clients"] is True
        assert granted["support"] is True
        assert granted["financial"] is False

    def test_dict_plan_uses_camel_case_limit(self):
        resolver = PermissionResolver.from_plan(
            {"name": "X", "permissions": {}, "maxProfessionals": 5}
        )
        assert resolver.max_professionals == 5


class TestProfessionalsLimit:
    """Headcount limit info"""

    def test_limit_reached(self):
        """
        Test: maxProfessionals 3 with 3 active professionals
        Expected: canAdd False, remaining 0
        """
        resolver = PermissionResolver.from_plan(
            {"name": "X", "permissions": {"professionals": True}, "maxProfessionals": 3}
        )
        info = resolver.get_professionals_limit_info(3)
        assert info.as_dict() == {"limit": 3, "current": 3, "canAdd": False, "remaining": 0}
        assert resolver.can_add_professional(3) is False

    def test_below_limit(self):
        resolver = PermissionResolver.from_plan(
            {"name": "X", "permissions": {}, "maxProfessionals": 3}
        )
        info = resolver.get_professionals_limit_info(1)
        assert info.can_add is True
        assert info.remaining == 2
        assert resolver.can_add_professional(1) is True

    def test_unknown_count_or_no_plan(self):
        """
        Test: Count not loaded yet, or no plan
        Expected: No limit info, adding is not allowed
        """
        resolver = PermissionResolver.from_plan({"name": "X", "permissions": {}, "maxProfessionals": 3})
        assert resolver.get_professionals_limit_info(None) is None
        assert resolver.can_add_professional(None) is False
        assert PermissionResolver.no_plan().get_professionals_limit_info(0) is None
        assert PermissionResolver.loading().can_add_professional(0) is False

    def test_default_limit_is_one(self):
        resolver = PermissionResolver.from_plan({"name": "X", "permissions": {}})
        assert resolver.max_professionals == 1


class TestMessages:

    def test_denied_message_names_plan_and_feature(self):
        message = denied_message("Básico", FeatureKey.FINANCIAL)
        assert "Básico" in message
        assert "Financeiro" in message

    def test_denied_message_without_plan(self):
        assert "Clientes" in denied_message(None, FeatureKey.CLIENTS)

    def test_limit_message(self):
        resolver = PermissionResolver.from_plan({"name": "X", "permissions": {}, "maxProfessionals": 3})
        message = limit_reached_message(resolver.get_professionals_limit_info(3))
        assert "3/3" in message

    def test_every_feature_has_a_label(self):
        assert set(FEATURE_LABELS) == set(FeatureKey)
