"""
30/60/90-day financial projections under three scenarios.

Growth is estimated by splitting the lookback window in two halves and
comparing their totals; it is capped at ±50% before being applied. The
optimistic scenario improves income growth by 10% and expense growth by 10%,
the pessimistic one does the reverse.
"""

import logging
import math
from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Sequence

import numpy as np

from bussola.config import DEFAULT_CONFIG, BussolaConfig
from bussola.entities import (
    EntryType,
    FinancialEntry,
    FinancialProjection,
    ProjectionAssumptions,
    ProjectionScenario,
    ProjectionSummary,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Trends:
    income_growth: float
    expense_growth: float
    monthly_income: float
    monthly_expenses: float


def _totals(entries: Sequence[FinancialEntry]):
    income = sum(e.value for e in entries if e.type is EntryType.ENTRADA)
    expenses = sum(e.value for e in entries if e.type is EntryType.SAIDA)
    return income, expenses


def _growth(first: int, second: int, cap: float) -> float:
    raw = (second - first) / first if first > 0 else 0.0
    return float(np.clip(raw, -cap, cap))


def calculate_trends(
    entries: Sequence[FinancialEntry],
    lookback_days: int,
    today: date,
    cfg: BussolaConfig,
) -> _Trends:
    cutoff = today - timedelta(days=lookback_days)
    midpoint = cutoff + timedelta(days=lookback_days / 2)

    recent = [e for e in entries if e.date >= cutoff]
    first_income, first_expenses = _totals([e for e in recent if e.date < midpoint])
    second_income, second_expenses = _totals([e for e in recent if e.date >= midpoint])

    months = lookback_days / 30
    cap = cfg.projection.growth_cap
    return _Trends(
        income_growth=_growth(first_income, second_income, cap),
        expense_growth=_growth(first_expenses, second_expenses, cap),
        monthly_income=(first_income + second_income) / months,
        monthly_expenses=(first_expenses + second_expenses) / months,
    )


def _runway(balance: float, monthly_burn: float):
    if monthly_burn <= 0:
        return math.inf
    return int(math.floor(balance / monthly_burn * 30))


def _confidence(entry_count: int, cfg: BussolaConfig) -> float:
    p = cfg.projection
    if entry_count < p.low_data_entries:
        return 0.4
    if entry_count < p.mid_data_entries:
        return 0.6
    if entry_count >= p.rich_data_entries:
        return 0.8
    return 0.7


def project_finances(
    current_balance: int,
    entries: Sequence[FinancialEntry],
    days: int,
    lookback_days: int | None = None,
    today: date | None = None,
    cfg: BussolaConfig | None = None,
) -> FinancialProjection:
    """Three scenarios for one horizon; the lookback defaults to cfg.projection.lookback_days."""
    cfg = cfg or DEFAULT_CONFIG
    p = cfg.projection
    if lookback_days is None:
        lookback_days = p.lookback_days
    if days not in p.horizons:
        raise ValueError(f"Projection horizon must be one of {p.horizons}, got {days}")

    trends = calculate_trends(entries, lookback_days, today or date.today(), cfg)
    months = days / 30
    confidence = _confidence(len(entries), cfg)

    def scenario(income_growth: float, expense_growth: float, warnings: List[str]) -> ProjectionScenario:
        income = trends.monthly_income * months * (1 + income_growth)
        expenses = trends.monthly_expenses * months * (1 + expense_growth)
        balance = current_balance + income - expenses
        burn = (
            trends.monthly_expenses * (1 + expense_growth)
            - trends.monthly_income * (1 + income_growth)
        )
        return ProjectionScenario(
            estimated_balance=int(round(balance)),
            estimated_income=int(round(income)),
            estimated_expenses=int(round(expenses)),
            runway=_runway(balance, burn),
            confidence=confidence,
            warnings=warnings,
        )

    monthly_burn = trends.monthly_expenses - trends.monthly_income
    realistic_balance = (
        current_balance
        + trends.monthly_income * months * (1 + trends.income_growth)
        - trends.monthly_expenses * months * (1 + trends.expense_growth)
    )

    warnings: List[str] = []
    if realistic_balance < 0:
        warnings.append(f"Saldo negativo projetado em {days} dias")
    if realistic_balance < current_balance * p.balance_drop_ratio:
        warnings.append("Redução de 50%+ no saldo esperada")
    if trends.expense_growth > p.expense_growth_warning:
        warnings.append(f"Despesas crescendo {trends.expense_growth * 100:.0f}%")
    if monthly_burn > trends.monthly_income:
        warnings.append(f"Queima de caixa mensal: {monthly_burn / 100:.2f}")

    optimistic = scenario(trends.income_growth * p.optimism, trends.expense_growth * p.pessimism, [])
    realistic = scenario(trends.income_growth, trends.expense_growth, warnings)
    # Realistic runway uses the unadjusted monthly burn.
    realistic.runway = _runway(realistic_balance, monthly_burn)
    pessimistic = scenario(trends.income_growth * p.pessimism, trends.expense_growth * p.optimism, list(warnings))
    if pessimistic.estimated_balance < 0:
        pessimistic.warnings.append("Risco alto de saldo negativo")

    if realistic.estimated_balance < 0:
        logger.warning("negative balance projected in %d days: %d", days, realistic.estimated_balance)

    return FinancialProjection(
        days=days,
        optimistic=optimistic,
        realistic=realistic,
        pessimistic=pessimistic,
        assumptions=ProjectionAssumptions(
            average_income=int(round(trends.monthly_income)),
            average_expenses=int(round(trends.monthly_expenses)),
            income_growth_rate=trends.income_growth,
            expense_growth_rate=trends.expense_growth,
        ),
    )


def projection_summary(
    current_balance: int,
    entries: Sequence[FinancialEntry],
    today: date | None = None,
    cfg: BussolaConfig | None = None,
) -> ProjectionSummary:
    """Realistic balances at 30/60/90 days plus a one-line recommendation."""
    p = (cfg or DEFAULT_CONFIG).projection
    p30, p60, p90 = (
        project_finances(current_balance, entries, days, today=today, cfg=cfg).realistic.estimated_balance
        for days in (30, 60, 90)
    )

    if p30 < 0:
        recommendation = "🔴 Ação urgente: Reduzir despesas ou aumentar receita"
    elif p60 < current_balance * p.summary_low_ratio:
        recommendation = "🟡 Atenção: Revisar despesas e buscar novas receitas"
    elif p90 > current_balance * p.summary_high_ratio:
        recommendation = "🟢 Excelente: Considere investir o excedente"
    else:
        recommendation = "🟢 Estável: Continue monitorando"

    return ProjectionSummary(days30=p30, days60=p60, days90=p90, recommendation=recommendation)
