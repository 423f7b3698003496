"""
Decision layer: operational state, alert drafts, guidance, and the single
recommended action ("action-mother").

Two rule generations live side by side. The basic rules read raw
FinanceSummary / ProjectStats numbers through an OperationalContext; the
advanced rules read a full OperationalInsights. Callers may use either, so
neither is expressed in terms of the other.

Decision order matters everywhere in this module: first match wins.
"""

from typing import Iterable, List, Union

from bussola.config import DEFAULT_CONFIG, BussolaConfig
from bussola.entities import (
    Alert,
    AlertDraft,
    AlertType,
    CaixaStatus,
    Checkin,
    Energia,
    EnhancedFinanceSummary,
    EstadoCalculado,
    Guidance,
    GuidanceMode,
    OperationalContext,
    OperationalInsights,
    Pressao,
    ProjectStats,
)


AnyAlert = Union[Alert, AlertDraft]


# ---------------------------------------------------------------------------
# State classification
# ---------------------------------------------------------------------------

def classify_state(checkin: Checkin) -> EstadoCalculado:
    """
    Map a check-in onto CRITICAL / ATTACK / CAUTION.

        CRITICAL — caixa critico, or caixa atencao with energia baixa
        ATTACK   — caixa tranquilo, energia alta, pressao not alta
        CAUTION  — everything else
    """
    caixa, energia = checkin.caixa_status, checkin.energia

    if caixa is CaixaStatus.CRITICO:
        return EstadoCalculado.CRITICAL
    if caixa is CaixaStatus.ATENCAO and energia is Energia.BAIXA:
        return EstadoCalculado.CRITICAL
    if caixa is CaixaStatus.TRANQUILO and energia is Energia.ALTA and checkin.pressao is not Pressao.ALTA:
        return EstadoCalculado.ATTACK
    return EstadoCalculado.CAUTION


# ---------------------------------------------------------------------------
# Alerts
# ---------------------------------------------------------------------------

def generate_alerts(
    context: OperationalContext,
    user_id: str,
    cfg: BussolaConfig | None = None,
) -> List[AlertDraft]:
    """
    Basic rule set over raw finance and project numbers.

    The spending-spike baseline is a fraction of avg_daily_spending itself
    (avg > avg·0.8·1.5), so with the default constants it never fires for a
    non-negative average.
    """
    a = (cfg or DEFAULT_CONFIG).alerts
    finance, projects = context.finance, context.projects
    alerts: List[AlertDraft] = []

    baseline = finance.avg_daily_spending * a.spike_baseline_ratio
    if finance.avg_daily_spending > baseline * a.spike_multiplier:
        alerts.append(AlertDraft(user_id, AlertType.FINANCE, "Gastos acima do esperado. Revise suas despesas."))

    if 0 < finance.forecast_days < a.low_forecast_days:
        alerts.append(AlertDraft(
            user_id, AlertType.FINANCE,
            f"Caixa crítico: {finance.forecast_days} dias até saldo zero.",
        ))

    if projects.active_count > a.max_active_projects:
        alerts.append(AlertDraft(
            user_id, AlertType.OVERLOAD,
            f"Muitos projetos ativos ({projects.active_count}). Considere pausar alguns.",
        ))

    if projects.stalled_count > 0:
        alerts.append(AlertDraft(
            user_id, AlertType.PROJECT,
            f"{projects.stalled_count} projeto(s) travado(s). Defina próximas ações.",
        ))

    return alerts


def generate_advanced_alerts(
    insights: OperationalInsights,
    user_id: str,
    cfg: BussolaConfig | None = None,
) -> List[AlertDraft]:
    """Advanced rule set over aggregated insights; one project alert per warning."""
    a = (cfg or DEFAULT_CONFIG).alerts
    finance = insights.finance
    alerts: List[AlertDraft] = []

    if insights.health_score < a.critical_health:
        alerts.append(AlertDraft(
            user_id, AlertType.FINANCE,
            f"⚠️ Saúde operacional crítica: {insights.health_score}/100",
        ))
    elif insights.health_score < a.attention_health:
        alerts.append(AlertDraft(
            user_id, AlertType.FINANCE,
            f"⚡ Atenção à saúde operacional: {insights.health_score}/100",
        ))

    if finance.anomaly_detected:
        alerts.append(AlertDraft(user_id, AlertType.FINANCE, "🔍 Padrão incomum detectado nos gastos recentes"))

    if finance.spending_trend == "increasing":
        alerts.append(AlertDraft(user_id, AlertType.FINANCE, "📈 Tendência de aumento nos gastos detectada"))

    if finance.forecast_days < a.low_forecast_days:
        alerts.append(AlertDraft(
            user_id, AlertType.FINANCE,
            f"🚨 Caixa crítico: apenas {finance.forecast_days} dias de runway",
        ))

    if insights.energy_pattern.current_streak == 0:
        alerts.append(AlertDraft(
            user_id, AlertType.OVERLOAD,
            "😴 Energia baixa: considere descanso ou atividades leves hoje",
        ))

    for warning in insights.warnings:
        alerts.append(AlertDraft(user_id, AlertType.PROJECT, f"⚠️ {warning}"))

    return alerts


def _has_critical_alert(alerts: Iterable[AnyAlert]) -> bool:
    return any(
        not a.resolved and a.type in (AlertType.FINANCE, AlertType.OVERLOAD)
        for a in alerts
    )


# ---------------------------------------------------------------------------
# Guidance
# ---------------------------------------------------------------------------

def compute_guidance(
    insights: OperationalInsights,
    alerts: Iterable[AnyAlert] = (),
    cfg: BussolaConfig | None = None,
) -> Guidance:
    """
    CUT  — CRITICAL state, health below 40, or an open finance/overload alert
    DO   — ATTACK state with health above 70
    HOLD — otherwise; the text changes when spending is trending up
    """
    a = (cfg or DEFAULT_CONFIG).alerts
    state, health = insights.current_state, insights.health_score

    if state is EstadoCalculado.CRITICAL or health < a.cut_health or _has_critical_alert(alerts):
        actions = ". ".join(insights.recommended_actions[:2])
        return Guidance(
            GuidanceMode.CUT,
            f"Modo emergência: {actions or 'Resolver alertas críticos imediatamente'}",
        )

    if state is EstadoCalculado.ATTACK and health > a.do_health:
        top = insights.top_priority_project or "projetos prioritários"
        return Guidance(
            GuidanceMode.DO,
            f"Momento ideal: Energia alta + caixa estável. Avançar {top} com foco total.",
        )

    if insights.finance.spending_trend == "increasing":
        return Guidance(
            GuidanceMode.HOLD,
            "Modo atenção: Gastos crescendo. Revisar despesas e manter controle rigoroso.",
        )

    return Guidance(GuidanceMode.HOLD, "Modo estável: Manter rotina produtiva e monitorar métricas regularmente.")


def compute_basic_guidance(state: EstadoCalculado, alerts: Iterable[AnyAlert]) -> Guidance:
    """First-generation guidance from state and open alerts only."""
    if state is EstadoCalculado.CRITICAL or _has_critical_alert(alerts):
        return Guidance(GuidanceMode.CUT, "Modo contenção: pause novos projetos, resolva urgências, proteja energia.")
    if state is EstadoCalculado.ATTACK:
        return Guidance(GuidanceMode.DO, "Modo execução: avance projetos, aproveite energia alta, tome decisões.")
    return Guidance(GuidanceMode.HOLD, "Modo estável: mantenha ritmo, monitore indicadores, evite sobrecarga.")


# ---------------------------------------------------------------------------
# Action-mother
# ---------------------------------------------------------------------------

def compute_action_mother(insights: OperationalInsights, cfg: BussolaConfig | None = None) -> str:
    """The one thing to do today, chosen from aggregated insights."""
    a = (cfg or DEFAULT_CONFIG).alerts
    state = insights.current_state
    streak = insights.energy_pattern.current_streak

    if state is EstadoCalculado.CRITICAL:
        if insights.finance.forecast_days < a.low_forecast_days:
            return "🔴 URGENTE: Gerar entrada imediata ou cortar despesa crítica hoje"
        if insights.health_score < a.critical_health:
            return "🔴 Estabilizar: Pausar projetos novos, resolver alertas críticos, descansar"
        return "🔴 Recuperação: Focar em resolver alertas e estabilizar indicadores"

    if state is EstadoCalculado.ATTACK:
        if insights.top_priority_project:
            return f'🟢 EXECUTAR: Avançar "{insights.top_priority_project}" - momento ideal para progresso'
        if streak > a.strong_streak:
            return "🟢 Momento excelente: Aproveitar streak de energia para projetos complexos"
        return "🟢 Modo produtivo: Executar tarefas de alto impacto e avançar projetos"

    if insights.recommended_actions:
        return f"🟡 {insights.recommended_actions[0]}"
    if streak == 0:
        return "🟡 Preservar energia: Tarefas administrativas e organização hoje"
    return "🟡 Manter ritmo estável: Cumprir rotina e monitorar indicadores"


def compute_basic_action_mother(context: OperationalContext) -> str:
    """First-generation action from the check-in and project counts."""
    checkin = context.checkin
    state = checkin.estado_calculado or classify_state(checkin)

    if state is EstadoCalculado.CRITICAL:
        if checkin.caixa_status is CaixaStatus.CRITICO:
            return "🔴 Prioridade máxima: Resolver caixa (entradas urgentes ou cortar despesas grandes)"
        return "🔴 Recuperar energia e estabilizar caixa antes de avançar em projetos"

    if state is EstadoCalculado.ATTACK:
        return "🟢 Avançar projeto estratégico: executar próxima ação do projeto prioritário"

    if checkin.energia is Energia.BAIXA:
        return "🟡 Focar em tarefas leves e organização; evitar decisões complexas"
    if context.projects.active_count == 0:
        return "🟡 Definir objetivos: criar ou reativar um projeto prioritário"
    return "🟡 Manter ritmo: completar tarefas planejadas e monitorar caixa"


# ---------------------------------------------------------------------------
# Alternate composite health
# ---------------------------------------------------------------------------

def calculate_health_score(
    finance: EnhancedFinanceSummary,
    checkin: Checkin,
    projects: ProjectStats,
) -> int:
    """
    Penalty-based composite: half the finance shortfall, 30% of an energy
    penalty (baixa 30, media 10), and a project penalty (10 per stalled, 5 per
    active beyond three) capped at 20.
    """
    score = 100.0
    score -= (100 - finance.health_score) * 0.5

    energy_penalty = {Energia.BAIXA: 30, Energia.MEDIA: 10, Energia.ALTA: 0}[checkin.energia]
    score -= energy_penalty * 0.3

    project_penalty = projects.stalled_count * 10 + max(0, projects.active_count - 3) * 5
    score -= min(project_penalty, 20)

    return max(0, min(100, int(round(score))))
