"""
Weekly summary: victories, blockers, money, wellbeing, and projects for one
[week_start, week_end] window (both ends inclusive).
"""

from datetime import date, timedelta
from typing import List, Sequence

import pandas as pd

from bussola.config import DEFAULT_CONFIG, BussolaConfig
from bussola.entities import (
    CaixaStatus,
    CategoryTotal,
    Checkin,
    Decision,
    Energia,
    EntryType,
    FinancialEntry,
    FinancialSnapshot,
    Pressao,
    Project,
    ProjectHighlight,
    ProjectStatus,
    ProjectsSnapshot,
    WeeklySummary,
    WellbeingSnapshot,
)


ENERGY_SCORE = {Energia.ALTA: 1.0, Energia.MEDIA: 0.5, Energia.BAIXA: 0.0}
CAIXA_SCORE = {CaixaStatus.TRANQUILO: 1.0, CaixaStatus.ATENCAO: 0.5, CaixaStatus.CRITICO: 0.0}


def week_start(day: date | None = None) -> date:
    """Monday of the week containing `day`."""
    day = day or date.today()
    return day - timedelta(days=day.weekday())


def week_end(day: date | None = None) -> date:
    """Sunday of the week containing `day`."""
    return week_start(day) + timedelta(days=6)


def _between(day: date, start: date, end: date) -> bool:
    return start <= day <= end


def _average(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def _money(cents: int) -> str:
    return f"R$ {cents / 100:.2f}"


def _top_categories(expenses: Sequence[FinancialEntry], n: int) -> List[CategoryTotal]:
    if not expenses:
        return []
    frame = pd.DataFrame({
        "category": [e.category for e in expenses],
        "amount": [e.value for e in expenses],
    })
    totals = frame.groupby("category", sort=False)["amount"].sum()
    top = totals.sort_values(ascending=False, kind="stable").head(n)
    return [CategoryTotal(category=c, amount=int(a)) for c, a in top.items()]


def generate_weekly_summary(
    start: date,
    end: date,
    checkins: Sequence[Checkin],
    entries: Sequence[FinancialEntry],
    projects: Sequence[Project],
    decisions: Sequence[Decision],
    cfg: BussolaConfig | None = None,
) -> WeeklySummary:
    t = (cfg or DEFAULT_CONFIG).weekly

    week_checkins = [c for c in checkins if _between(c.date, start, end)]
    week_entries = [e for e in entries if _between(e.date, start, end)]
    week_decisions = [d for d in decisions if _between(d.date, start, end)]

    income = sum(e.value for e in week_entries if e.type is EntryType.ENTRADA)
    expenses = [e for e in week_entries if e.type is EntryType.SAIDA]
    total_expenses = sum(e.value for e in expenses)

    # -- Victories ------------------------------------------------------------

    victories: List[str] = []
    good_days = [
        c for c in week_checkins
        if c.energia is Energia.ALTA and c.caixa_status is CaixaStatus.TRANQUILO
    ]
    if good_days:
        victories.append(f"{len(good_days)} dia(s) com alta energia e caixa tranquilo")

    completed = [
        p for p in projects
        if p.status is ProjectStatus.DONE and _between(p.updated_at.date(), start, end)
    ]
    if completed:
        victories.append(f"{len(completed)} projeto(s) finalizado(s)")

    if income > 0:
        victories.append(f"Receita de {_money(income)}")

    # -- Blockers -------------------------------------------------------------

    blockers: List[str] = []
    bad_days = [
        c for c in week_checkins
        if c.energia is Energia.BAIXA or c.caixa_status is CaixaStatus.CRITICO
    ]
    if len(bad_days) >= t.bad_days:
        blockers.append(f"{len(bad_days)} dia(s) com baixa energia ou caixa crítico")

    high_pressure = [c for c in week_checkins if c.pressao is Pressao.ALTA]
    if len(high_pressure) >= t.high_pressure_days:
        blockers.append(f"{len(high_pressure)} dia(s) sob alta pressão")

    # -- Wellbeing ------------------------------------------------------------

    energy = _average([ENERGY_SCORE[c.energia] for c in week_checkins])
    caixa = _average([CAIXA_SCORE[c.caixa_status] for c in week_checkins])

    prev_start, prev_end = start - timedelta(days=7), end - timedelta(days=7)
    prev_checkins = [c for c in checkins if _between(c.date, prev_start, prev_end)]
    trend = "stable"
    if prev_checkins and week_checkins:
        prev_energy = _average([ENERGY_SCORE[c.energia] for c in prev_checkins])
        if energy > prev_energy + t.trend_band:
            trend = "improving"
        elif energy < prev_energy - t.trend_band:
            trend = "declining"

    # -- Projects -------------------------------------------------------------

    active = [p for p in projects if p.status is ProjectStatus.ACTIVE]
    highlights = [
        ProjectHighlight(name=p.name, progress=p.next_action or "Sem ação definida")
        for p in active[: t.top_n]
    ]

    # -- Insights -------------------------------------------------------------

    insights: List[str] = []
    if len(week_checkins) < t.min_checkins:
        insights.append("⚠️ Baixa frequência de check-ins. Tente registrar diariamente.")
    if total_expenses > income > 0:
        insights.append(
            f"⚠️ Déficit de {_money(total_expenses - income)} nesta semana. Revise gastos."
        )
    if week_checkins and energy < t.low_energy:
        insights.append("💡 Energia baixa persistente. Considere pausar projetos secundários.")
    if len(active) > t.max_active_projects:
        insights.append(
            "💡 Muitos projetos ativos. Considere pausar ou finalizar alguns para manter foco."
        )
    if trend == "improving":
        insights.append("✅ Tendência positiva! Continue assim.")

    return WeeklySummary(
        week_start=start,
        week_end=end,
        victories=victories,
        blockers=blockers,
        decisions=week_decisions,
        financial_snapshot=FinancialSnapshot(
            total_income=income,
            total_expenses=total_expenses,
            net_cashflow=income - total_expenses,
            top_categories=_top_categories(expenses, t.top_n),
        ),
        wellbeing_snapshot=WellbeingSnapshot(
            average_energy=energy,
            average_caixa_score=caixa,
            checkins_completed=len(week_checkins),
            trend=trend,
        ),
        projects_snapshot=ProjectsSnapshot(
            active_count=len(active),
            completed_this_week=len(completed),
            top_projects=highlights,
        ),
        insights=insights,
    )
