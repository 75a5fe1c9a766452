"""
Plan permission resolution

Turns a company's plan (or the lack of one) into a total predicate over
FeatureKey. The same resolver backs the server dependencies and the tenant
session client, so the rules live in one place.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional


class FeatureKey(str, Enum):
    """Feature areas a plan can enable"""

    DASHBOARD = "dashboard"
    APPOINTMENTS = "appointments"
    SERVICES = "services"
    PROFESSIONALS = "professionals"
    CLIENTS = "clients"
    REVIEWS = "reviews"
    TASKS = "tasks"
    POINTS_PROGRAM = "pointsProgram"
    LOYALTY = "loyalty"
    INVENTORY = "inventory"
    MESSAGES = "messages"
    COUPONS = "coupons"
    FINANCIAL = "financial"
    REPORTS = "reports"
    SETTINGS = "settings"
    SUPPORT = "support"
    SUBSCRIPTION_MANAGEMENT = "subscriptionManagement"


# Visible regardless of plan, even for companies without one
ALWAYS_VISIBLE = frozenset({FeatureKey.SUPPORT, FeatureKey.SUBSCRIPTION_MANAGEMENT})

FEATURE_LABELS: Dict[FeatureKey, str] = {
    FeatureKey.DASHBOARD: "Dashboard",
    FeatureKey.APPOINTMENTS: "Agendamentos",
    FeatureKey.SERVICES: "Serviços",
    FeatureKey.PROFESSIONALS: "Profissionais",
    FeatureKey.CLIENTS: "Clientes",
    FeatureKey.REVIEWS: "Avaliações",
    FeatureKey.TASKS: "Tarefas",
    FeatureKey.POINTS_PROGRAM: "Programa de Pontos",
    FeatureKey.LOYALTY: "Fidelidade",
    FeatureKey.INVENTORY: "Inventário",
    FeatureKey.MESSAGES: "Mensagens",
    FeatureKey.COUPONS: "Cupons",
    FeatureKey.FINANCIAL: "Financeiro",
    FeatureKey.REPORTS: "Relatórios",
    FeatureKey.SETTINGS: "Configurações",
    FeatureKey.SUPPORT: "Suporte",
    FeatureKey.SUBSCRIPTION_MANAGEMENT: "Assinatura",
}


class ResolverState(str, Enum):
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class Access(str, Enum):
    GRANTED = "granted"
    DENIED = "denied"
    LOADING = "loading"


def parse_permissions(raw: Optional[Mapping[str, Any]]) -> Dict[FeatureKey, bool]:
    """
    Build a complete FeatureKey -> bool map from a stored permission map.

    Unknown keys are ignored, missing keys are denied, and only a real
    ``True`` (or the integer 1 MySQL-era rows carry) counts as granted.
    """
    raw = raw or {}
    parsed = {}
    for key in FeatureKey:
        value = raw.get(key.value)
        parsed[key] = value is True or (type(value) is int and value == 1)
    return parsed


@dataclass(frozen=True)
class ProfessionalsLimitInfo:
    limit: int
    current: int

    @property
    def can_add(self) -> bool:
        return self.current < self.limit

    @property
    def remaining(self) -> int:
        return max(0, self.limit - self.current)

    def as_dict(self) -> dict:
        return {
            "limit": self.limit,
            "current": self.current,
            "canAdd": self.can_add,
            "remaining": self.remaining,
        }


class PermissionResolver:
    """
    Answers ``has_permission(key)`` for one company snapshot.

    Construct through ``from_plan``, ``no_plan``, ``loading`` or ``failed``.
    While loading, ``check`` reports ``Access.LOADING`` so callers can render
    a neutral placeholder instead of a denied state.
    """

    def __init__(
        self,
        state: ResolverState,
        permissions: Optional[Dict[FeatureKey, bool]] = None,
        plan_name: Optional[str] = None,
        max_professionals: Optional[int] = None,
    ):
        self.state = state
        self.plan_name = plan_name
        self.max_professionals = max_professionals
        self._permissions = permissions

    @classmethod
    def from_plan(cls, plan) -> "PermissionResolver":
        """Resolver for a Plan model, a plan-info dict, or None (no plan)"""
        if plan is None:
            return cls.no_plan()
        if isinstance(plan, Mapping):
            name = plan.get("name")
            raw = plan.get("permissions")
            max_professionals = plan.get("maxProfessionals", plan.get("max_professionals"))
        else:
            name = plan.name
            raw = plan.permissions
            max_professionals = plan.max_professionals
        return cls(
            ResolverState.READY,
            permissions=parse_permissions(raw),
            plan_name=name,
            max_professionals=int(max_professionals) if max_professionals is not None else 1,
        )

    @classmethod
    def no_plan(cls) -> "PermissionResolver":
        return cls(ResolverState.READY, permissions=None)

    @classmethod
    def loading(cls) -> "PermissionResolver":
        return cls(ResolverState.LOADING)

    @classmethod
    def failed(cls) -> "PermissionResolver":
        return cls(ResolverState.FAILED)

    @property
    def is_loading(self) -> bool:
        return self.state == ResolverState.LOADING

    @property
    def has_plan(self) -> bool:
        return self._permissions is not None

    def check(self, key: FeatureKey) -> Access:
        if self.state == ResolverState.LOADING:
            return Access.LOADING
        return Access.GRANTED if self.has_permission(key) else Access.DENIED

    def has_permission(self, key: FeatureKey) -> bool:
        try:
            key = FeatureKey(key)
        except ValueError:
            return False
        if self.state != ResolverState.READY:
            return False
        if key in ALWAYS_VISIBLE:
            return True
        if self._permissions is None:
            return False
        return self._permissions.get(key, False)

    def granted(self) -> Dict[str, bool]:
        """Flat key -> bool map, as sent to the frontend"""
        return {key.value: self.has_permission(key) for key in FeatureKey}

    def get_professionals_limit_info(self, current: Optional[int]) -> Optional[ProfessionalsLimitInfo]:
        if self.state != ResolverState.READY or not self.has_plan or current is None:
            return None
        return ProfessionalsLimitInfo(limit=self.max_professionals, current=current)

    def can_add_professional(self, current: Optional[int]) -> bool:
        info = self.get_professionals_limit_info(current)
        return info is not None and info.can_add


def denied_message(plan_name: Optional[str], key: FeatureKey) -> str:
    label = FEATURE_LABELS[FeatureKey(key)]
    if not plan_name:
        return f'Acesso negado. Nenhum plano ativo inclui a funcionalidade de "{label}".'
    return f'Acesso negado. Seu plano "{plan_name}" não inclui a funcionalidade de "{label}".'


def limit_reached_message(info: ProfessionalsLimitInfo) -> str:
    return (
        f"Limite de profissionais atingido ({info.current}/{info.limit}). "
        f"Seu plano permite no máximo {info.limit} profissionais."
    )
