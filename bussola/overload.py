"""
Overload (burnout) assessment.

Five independent factors each contribute severity (0-100) x weight. The
weighted sum maps to a level; high and critical levels may recommend pausing
projects. Only the most recent `window_days` check-ins are considered.
"""

import logging
from typing import List, Sequence

from bussola.config import DEFAULT_CONFIG, BussolaConfig
from bussola.entities import (
    CaixaStatus,
    Checkin,
    Energia,
    OverloadAssessment,
    OverloadFactor,
    Pressao,
    Project,
    ProjectStatus,
)
from bussola.patterns import newest_first


logger = logging.getLogger(__name__)


def _is_bad_day(c: Checkin) -> bool:
    return (
        c.energia is Energia.BAIXA
        or c.pressao is Pressao.ALTA
        or c.caixa_status is CaixaStatus.CRITICO
    )


def _longest_bad_run(window: Sequence[Checkin]) -> int:
    run = longest = 0
    for c in window:
        run = run + 1 if _is_bad_day(c) else 0
        longest = max(longest, run)
    return longest


def _overload_level(score: float, cfg: BussolaConfig) -> str:
    t = cfg.overload
    if score >= t.critical_level:
        return "critical"
    if score >= t.high_level:
        return "high"
    if score >= t.moderate_level:
        return "moderate"
    return "none"


def assess_overload(
    recent_checkins: Sequence[Checkin],
    projects: Sequence[Project],
    cfg: BussolaConfig | None = None,
) -> OverloadAssessment:
    """
    Score workload pressure from the last week of check-ins and active projects.

    Factors (trigger → severity, weight):
        low_energy            ≥3 baixa days      → count/7·100,          0.30
        high_pressure         ≥4 alta days       → count/7·100,          0.25
        too_many_projects     >5 active          → (n-5)/5·100,          0.20
        consecutive_bad_days  run ≥3             → run/7·100,            0.15
        no_rest_days          no leve in ≥5 days → 70,                   0.10
    """
    cfg = cfg or DEFAULT_CONFIG
    t = cfg.overload
    w = cfg.overload_weights

    window = newest_first(recent_checkins)[: t.window_days]
    active = [p for p in projects if p.status is ProjectStatus.ACTIVE]
    project_count = len(active)

    factors: List[OverloadFactor] = []
    total = 0.0

    def add(kind: str, severity: float, weight: float, description: str) -> None:
        nonlocal total
        factors.append(OverloadFactor(type=kind, severity=severity, description=description))
        total += severity * weight

    low_energy_days = sum(1 for c in window if c.energia is Energia.BAIXA)
    if low_energy_days >= t.low_energy_days:
        add(
            "low_energy",
            min(100.0, low_energy_days / t.window_days * 100),
            w.low_energy,
            f"{low_energy_days} dia(s) com baixa energia nos últimos 7 dias",
        )

    high_pressure_days = sum(1 for c in window if c.pressao is Pressao.ALTA)
    if high_pressure_days >= t.high_pressure_days:
        add(
            "high_pressure",
            min(100.0, high_pressure_days / t.window_days * 100),
            w.high_pressure,
            f"{high_pressure_days} dia(s) sob alta pressão",
        )

    if project_count > t.max_projects:
        add(
            "too_many_projects",
            min(100.0, (project_count - t.max_projects) / t.max_projects * 100),
            w.too_many_projects,
            f"{project_count} projetos ativos (recomendado: 3-5)",
        )

    longest_run = _longest_bad_run(window)
    if longest_run >= t.consecutive_bad_days:
        add(
            "consecutive_bad_days",
            min(100.0, longest_run / t.window_days * 100),
            w.consecutive_bad_days,
            f"{longest_run} dia(s) consecutivos difíceis",
        )

    rest_days = sum(1 for c in window if c.pressao is Pressao.LEVE)
    if rest_days == 0 and len(window) >= t.min_days_for_rest_check:
        add(
            "no_rest_days",
            float(t.no_rest_severity),
            w.no_rest_days,
            "Nenhum dia de descanso nos últimos 7 dias",
        )

    level = _overload_level(total, cfg)
    assessment = OverloadAssessment(overload_level=level, score=int(round(total)), factors=factors)

    if level in ("critical", "high"):
        recs = assessment.recommendations
        recs.append("🔴 Sobrecarga detectada! Ação imediata necessária.")
        if low_energy_days >= t.low_energy_days:
            recs.append("Priorize descanso e sono de qualidade")
        if project_count > t.keep_projects:
            excess = project_count - t.keep_projects
            assessment.should_pause_projects = True
            recs.append(f"Pausar {excess} projeto(s) para reduzir carga cognitiva")
            # Only projects without a next action are proposed.
            assessment.projects_to_pause = [p.id for p in active if not p.next_action][:excess]
        if high_pressure_days >= t.high_pressure_days:
            recs.append("Renegociar prazos ou delegar tarefas urgentes")
        recs.append("Considere 1-2 dias de pausa completa")
        logger.warning(
            "overload %s: score=%d, %d active project(s)", level, assessment.score, project_count,
        )
    elif level == "moderate":
        recs = assessment.recommendations
        recs.append("🟡 Sobrecarga moderada. Ajustes recomendados:")
        if project_count > t.max_projects:
            recs.append("Considere pausar 1-2 projetos secundários")
        if rest_days == 0:
            recs.append("Reserve pelo menos 1 dia de descanso por semana")
        recs.append("Monitore níveis de energia nos próximos dias")
    else:
        assessment.recommendations.append("✅ Carga de trabalho equilibrada. Continue assim!")

    return assessment


def is_overloaded(recent_checkins: Sequence[Checkin], cfg: BussolaConfig | None = None) -> bool:
    """Check-ins alone (no projects) already put the user at high or critical."""
    level = assess_overload(recent_checkins, [], cfg).overload_level
    return level in ("high", "critical")


def suggest_rest_day(recent_checkins: Sequence[Checkin], cfg: BussolaConfig | None = None) -> bool:
    """
    Recommend a rest day when the last week had no light-pressure day or the
    average energy (alta=1, media=0.5, baixa=0) is below the floor.
    """
    t = (cfg or DEFAULT_CONFIG).overload
    window = newest_first(recent_checkins)[: t.window_days]
    rest_days = sum(1 for c in window if c.pressao is Pressao.LEVE)
    if rest_days == 0:
        return True

    energy = {Energia.ALTA: 1.0, Energia.MEDIA: 0.5, Energia.BAIXA: 0.0}
    avg_energy = sum(energy[c.energia] for c in window) / len(window)
    return avg_energy < t.rest_day_energy_floor
