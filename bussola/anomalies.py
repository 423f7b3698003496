"""
Per-entry spending anomalies, burn rate, and runway.

Complements finance.detect_anomalies (which works on a daily series) by
looking at individual expenses against the history of their own category.
"""

import math
from datetime import date
from typing import Dict, List, Sequence

import pandas as pd

from bussola.config import DEFAULT_CONFIG, BussolaConfig
from bussola.entities import EntryType, FinancialEntry, SpendingAnomaly, SpendingStats
from bussola.finance import in_window


SEVERITY_ORDER = {"high": 3, "medium": 2, "low": 1}


def calculate_category_stats(entries: Sequence[FinancialEntry]) -> Dict[str, SpendingStats]:
    """Count, total, mean, population std, min and max of expenses per category."""
    rows = [(e.category, e.value) for e in entries if e.type is EntryType.SAIDA]
    if not rows:
        return {}

    frame = pd.DataFrame(rows, columns=["category", "value"])
    grouped = frame.groupby("category", sort=False)["value"]
    table = grouped.agg(["count", "sum", "mean", "min", "max"])
    table["std"] = grouped.std(ddof=0).fillna(0.0)

    return {
        category: SpendingStats(
            category=category,
            count=int(row["count"]),
            total=int(row["sum"]),
            average=float(row["mean"]),
            std_dev=float(row["std"]),
            min=int(row["min"]),
            max=int(row["max"]),
        )
        for category, row in table.iterrows()
    }


def _z_score(value: float, stats: SpendingStats) -> float:
    diff = abs(value - stats.average)
    if stats.std_dev == 0:
        return math.inf if diff > 0 else 0.0
    return diff / stats.std_dev


def detect_spending_anomalies(
    entries: Sequence[FinancialEntry],
    lookback_days: int = 30,
    today: date | None = None,
    cfg: BussolaConfig | None = None,
) -> List[SpendingAnomaly]:
    """
    Flag unusually large expenses and unusually frequent categories.

    Only expenses from the last 7 days are judged, against the statistics of
    the whole lookback window. Needs at least 5 expenses in the window and 3
    samples in the expense's category (defaults). Sorted high severity first.
    """
    a = (cfg or DEFAULT_CONFIG).anomaly
    today = today or date.today()
    recent = [
        e for e in entries
        if e.type is EntryType.SAIDA and in_window(e.date, today, lookback_days)
    ]
    if len(recent) < a.min_recent_expenses:
        return []

    stats = calculate_category_stats(recent)
    last_week = [e for e in recent if in_window(e.date, today, a.recent_days)]
    anomalies: List[SpendingAnomaly] = []

    for entry in last_week:
        category_stats = stats.get(entry.category)
        if category_stats is None or category_stats.count < a.min_category_samples:
            continue

        z = _z_score(entry.value, category_stats)
        if z > a.z_threshold and entry.value > category_stats.average:
            deviation = (entry.value - category_stats.average) / category_stats.average * 100
            severity = "high" if z > a.z_high else "medium" if z > a.z_medium else "low"
            anomalies.append(SpendingAnomaly(
                type="unusual_amount",
                severity=severity,
                category=entry.category,
                amount=entry.value,
                message=f"Gasto {deviation:.0f}% acima da média em {entry.category}",
                threshold=category_stats.average,
                deviation=deviation,
            ))

    weekly_counts = pd.Series([e.category for e in last_week], dtype=object).value_counts(sort=False)
    for category, count in weekly_counts.items():
        normal_weekly = stats[category].count / lookback_days * a.recent_days
        if count > normal_weekly * a.frequency_multiplier and count >= a.min_frequency_count:
            anomalies.append(SpendingAnomaly(
                type="unusual_frequency",
                severity="medium",
                category=category,
                amount=0,
                message=f"Frequência anormal em {category}: {count} transações em {a.recent_days} dias",
                threshold=normal_weekly,
                deviation=(count - normal_weekly) / normal_weekly * 100,
            ))

    return sorted(anomalies, key=lambda x: SEVERITY_ORDER[x.severity], reverse=True)


# ---------------------------------------------------------------------------
# Burn rate and runway
# ---------------------------------------------------------------------------

def _net_totals(entries: Sequence[FinancialEntry], days: int, today: date):
    recent = [e for e in entries if in_window(e.date, today, days)]
    income = sum(e.value for e in recent if e.type is EntryType.ENTRADA)
    expenses = sum(e.value for e in recent if e.type is EntryType.SAIDA)
    return income, expenses


def calculate_burn_rate(
    entries: Sequence[FinancialEntry],
    days: int = 30,
    today: date | None = None,
) -> int:
    """
    Average daily net cash change (income - expenses). Negative means burning.

    An empty window (days <= 0) has no rate: 0.
    """
    if days <= 0:
        return 0
    income, expenses = _net_totals(entries, days, today or date.today())
    return int(round((income - expenses) / days))


def predict_runway(
    current_balance: int,
    entries: Sequence[FinancialEntry],
    days: int = 30,
    today: date | None = None,
):
    """
    Days until the balance reaches zero at the current net burn; inf if not
    burning, including an empty window (days <= 0) with a positive balance.
    """
    if current_balance <= 0:
        return 0
    if days <= 0:
        return math.inf

    income, expenses = _net_totals(entries, days, today or date.today())
    burn = expenses - income
    if burn <= 0:
        return math.inf
    return (current_balance * days) // burn
