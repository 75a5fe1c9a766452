"""
Company menu and subscription block screen

Both are derived views: the menu from a PermissionResolver, the block screen
from a GateDecision plus explicit branding configuration.
"""
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from app.core.config import settings
from app.services.permissions import FeatureKey, PermissionResolver
from app.services.subscription_gate import GateDecision


@dataclass(frozen=True)
class NavEntry:
    title: str
    href: str
    feature: FeatureKey

    def as_dict(self) -> dict:
        return {"title": self.title, "href": self.href, "feature": self.feature.value}


COMPANY_MENU: Tuple[NavEntry, ...] = (
    NavEntry("Dashboard", "/company/dashboard", FeatureKey.DASHBOARD),
    NavEntry("Agendamentos", "/company/appointments", FeatureKey.APPOINTMENTS),
    NavEntry("Serviços", "/company/services", FeatureKey.SERVICES),
    NavEntry("Profissionais", "/company/professionals", FeatureKey.PROFESSIONALS),
    NavEntry("Clientes", "/company/clients", FeatureKey.CLIENTS),
    NavEntry("Avaliações", "/company/reviews", FeatureKey.REVIEWS),
    NavEntry("Tarefas", "/company/tasks", FeatureKey.TASKS),
    NavEntry("Programa de pontos", "/company/points-program", FeatureKey.POINTS_PROGRAM),
    NavEntry("Fidelidade", "/company/fidelidade", FeatureKey.LOYALTY),
    NavEntry("Estoque", "/company/estoque", FeatureKey.INVENTORY),
    NavEntry("Mensagens", "/company/messages", FeatureKey.MESSAGES),
    NavEntry("Cupons", "/company/cupons", FeatureKey.COUPONS),
    NavEntry("Financeiro", "/company/financial", FeatureKey.FINANCIAL),
    NavEntry("Relatórios", "/company/relatorios", FeatureKey.REPORTS),
    NavEntry("Configurações", "/company/configuracoes", FeatureKey.SETTINGS),
    NavEntry("Suporte", "/company/suporte", FeatureKey.SUPPORT),
    NavEntry("Assinatura", "/company/assinatura", FeatureKey.SUBSCRIPTION_MANAGEMENT),
)


def visible_entries(resolver: PermissionResolver) -> List[NavEntry]:
    """Menu entries the plan grants; denied entries are omitted, not disabled"""
    if resolver.is_loading:
        return []
    return [entry for entry in COMPANY_MENU if resolver.has_permission(entry.feature)]


@dataclass(frozen=True)
class BrandingConfig:
    """Read-only branding passed into views instead of fetched ambiently"""

    system_name: str = "Agenda SaaS"
    primary_color: str = "#3B82F6"
    support_email: str = "suporte@agendasaas.com.br"
    support_whatsapp: Optional[str] = None

    @classmethod
    def from_settings(cls) -> "BrandingConfig":
        return cls(
            system_name=settings.SYSTEM_NAME,
            primary_color=settings.PRIMARY_COLOR,
            support_email=settings.SUPPORT_EMAIL,
            support_whatsapp=settings.SUPPORT_WHATSAPP,
        )


@dataclass(frozen=True)
class BlockScreen:
    title: str
    message: str
    contact_url: str
    details: List[str] = field(default_factory=list)

    def as_dict(self) -> dict:
        return {
            "title": self.title,
            "message": self.message,
            "contactUrl": self.contact_url,
            "details": list(self.details),
        }


def render_block_screen(decision: GateDecision, branding: BrandingConfig) -> Optional[BlockScreen]:
    """Full-screen takeover for a blocked tenant; None unless blocked"""
    if not decision.is_blocked:
        return None

    details = []
    if decision.status:
        details.append(f"Status da Assinatura: {decision.status}")
    if decision.payment_status:
        details.append(f"Status do Pagamento: {decision.payment_status}")

    if branding.support_whatsapp:
        contact_url = f"https://wa.me/{branding.support_whatsapp}"
    else:
        contact_url = f"mailto:{branding.support_email}?subject=Problema com Pagamento"

    return BlockScreen(
        title=f"{branding.system_name} - Acesso Bloqueado",
        message=decision.message or "",
        contact_url=contact_url,
        details=details,
    )
