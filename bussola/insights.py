"""
Insight aggregation: combines finance, pattern, and project analytics into a
single OperationalInsights for the decision layer.

Stages:
    1. State        — classify today's check-in
    2. Finance      — summary, health, trend, anomalies, 30/60/90 forecast
    3. Patterns     — weekday energy, streak, mood/productivity correlation
    4. Composite    — weighted health score
    5. Projects     — top priority and stalled projects
    6. Advice       — warnings and recommended actions
"""

import logging
from datetime import date, datetime
from typing import Mapping, Sequence

from bussola.config import DEFAULT_CONFIG, BussolaConfig
from bussola.entities import (
    Checkin,
    Energia,
    EnergyPattern,
    EnhancedFinanceSummary,
    EstadoCalculado,
    FinancialEntry,
    OperationalInsights,
    Project,
    ProjectStatus,
)
from bussola.finance import (
    compute_finance_summary,
    daily_spending,
    detect_anomalies,
    forecast_total,
    health_score,
    spending_trend,
)
from bussola.patterns import analyze_weekly_patterns, correlate_mood_and_productivity, energy_streak
from bussola.projects import find_stalled_projects, priority_score
from bussola.rules import classify_state


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Enhanced finance summary
# ---------------------------------------------------------------------------

def compute_enhanced_finance_summary(
    entries: Sequence[FinancialEntry],
    period_days: int = 30,
    today: date | None = None,
    cfg: BussolaConfig | None = None,
) -> EnhancedFinanceSummary:
    cfg = cfg or DEFAULT_CONFIG
    f = cfg.forecast
    today = today or date.today()

    base = compute_finance_summary(entries, period_days, today, cfg)
    series = daily_spending(entries, period_days, today)

    score = health_score(base, cfg.finance_health)
    trend = spending_trend(series, cfg)
    anomaly = any(detect_anomalies(series, f.anomaly_threshold))

    horizon = max(0, f.horizon_days)
    forecast_30d = forecast_total(series, min(30, horizon), cfg)
    forecast_60d = forecast_total(series, min(60, horizon), cfg)
    forecast_90d = forecast_total(series, horizon, cfg)

    if score < 30:
        action = "Urgente: Reduzir gastos e buscar entradas imediatas"
    elif score < 60:
        action = "Atenção: Revisar despesas não essenciais"
    elif anomaly:
        action = "Investigar gastos incomuns detectados"
    else:
        action = "Continue monitorando gastos"

    return EnhancedFinanceSummary(
        total_entradas=base.total_entradas,
        total_saidas=base.total_saidas,
        balance=base.balance,
        avg_daily_spending=base.avg_daily_spending,
        forecast_days=base.forecast_days,
        health_score=score,
        spending_trend=trend,
        forecast_30d=forecast_30d,
        forecast_60d=forecast_60d,
        forecast_90d=forecast_90d,
        anomaly_detected=anomaly,
        recommended_action=action,
    )


# ---------------------------------------------------------------------------
# Composite scores
# ---------------------------------------------------------------------------

def _state_score(state: EstadoCalculado, cfg: BussolaConfig) -> int:
    s = cfg.state_scores
    return {
        EstadoCalculado.ATTACK: s.attack,
        EstadoCalculado.CAUTION: s.caution,
        EstadoCalculado.CRITICAL: s.critical,
    }[state]


def _energy_score(energia: Energia, cfg: BussolaConfig) -> int:
    s = cfg.state_scores
    return {
        Energia.ALTA: s.energy_alta,
        Energia.MEDIA: s.energy_media,
        Energia.BAIXA: s.energy_baixa,
    }[energia]


def _top_priority_project(
    projects: Sequence[Project],
    now: datetime,
    cfg: BussolaConfig,
) -> str | None:
    # Impact and energy are fixed placeholders until projects carry real data;
    # with equal scores the first active project wins.
    p = cfg.priority
    best_name, best_score = None, None
    for project in projects:
        if project.status is not ProjectStatus.ACTIVE:
            continue
        score = priority_score(
            project,
            financial_impact=p.placeholder_financial_impact,
            energy_required=p.placeholder_energy_required,
            now=now,
            cfg=cfg,
        )
        if best_score is None or score > best_score:
            best_name, best_score = project.name, score
    return best_name


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------

def compute_operational_insights(
    checkin: Checkin,
    recent_checkins: Sequence[Checkin],
    entries: Sequence[FinancialEntry],
    projects: Sequence[Project],
    task_counts: Mapping[str, int] | None = None,
    today: date | None = None,
    now: datetime | None = None,
    cfg: BussolaConfig | None = None,
) -> OperationalInsights:
    """
    Build the full insight bundle for one user and one day.

    Overall health = finance·0.5 + state·0.3 + energy·0.2, rounded, where state
    scores ATTACK/CAUTION/CRITICAL as 100/60/20 and energy scores
    alta/media/baixa as 100/60/20.
    """
    cfg = cfg or DEFAULT_CONFIG
    today = today or date.today()
    now = now or datetime.now()
    w = cfg.insight_weights

    # Stage 1: State
    state = classify_state(checkin)

    # Stage 2: Finance
    finance = compute_enhanced_finance_summary(entries, cfg.forecast.period_days, today, cfg)

    # Stage 3: Patterns
    weekly = analyze_weekly_patterns(recent_checkins)
    energy_pattern = EnergyPattern(
        best_day=weekly.best_day,
        worst_day=weekly.worst_day,
        current_streak=energy_streak(recent_checkins),
    )
    correlation = correlate_mood_and_productivity(recent_checkins, task_counts or {})

    # Stage 4: Composite health
    overall = int(round(
        finance.health_score * w.finance
        + _state_score(state, cfg) * w.state
        + _energy_score(checkin.energia, cfg) * w.energy
    ))

    # Stage 5: Projects
    top_project = _top_priority_project(projects, now, cfg)
    stalled = find_stalled_projects(projects, cfg.stalled.threshold_days, now)

    # Stage 6: Advice
    warnings, actions = [], []

    if overall < cfg.alerts.cut_health:
        warnings.append("Saúde operacional crítica")
        actions.append(finance.recommended_action)

    if finance.spending_trend == "increasing":
        warnings.append("Gastos em tendência de alta")
        actions.append("Revisar despesas dos últimos 7 dias")

    if finance.anomaly_detected:
        warnings.append("Anomalia detectada nos gastos")

    if stalled:
        warnings.append(f"{len(stalled)} projeto(s) parado(s)")
        actions.append("Definir próximas ações para projetos travados")

    if state is EstadoCalculado.ATTACK and top_project:
        actions.append(f"Avançar projeto: {top_project}")

    logger.debug(
        "insights: state=%s health=%d finance=%d streak=%d warnings=%d",
        state.value, overall, finance.health_score, energy_pattern.current_streak, len(warnings),
    )

    return OperationalInsights(
        current_state=state,
        health_score=overall,
        finance=finance,
        energy_pattern=energy_pattern,
        productivity_correlation=correlation,
        top_priority_project=top_project,
        recommended_actions=actions,
        warnings=warnings,
    )
