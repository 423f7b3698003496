"""
Finance analytics: smoothing, outliers, health score, spending forecast.

All functions are pure transforms over plain sequences or entry lists.
Amounts go in and come out as int minor units; float intermediates are
rounded at the boundary of every returned structure.
"""

import logging
from datetime import date, timedelta
from typing import List, Sequence

import numpy as np
import pandas as pd

from bussola.config import DEFAULT_CONFIG, BussolaConfig, FinanceHealthTiers
from bussola.entities import EntryType, FinanceSummary, FinancialEntry, SpendingBand


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Smoothing and dispersion
# ---------------------------------------------------------------------------

def ema(values: Sequence[float], period: int = 7) -> float:
    """
    Exponential moving average seeded with the first value.

    ema_t = v_t * k + ema_{t-1} * (1 - k),  k = 2 / (period + 1)

    This is exactly pandas' ewm(span=period, adjust=False).
    """
    if len(values) == 0:
        return 0.0
    if len(values) == 1:
        return float(values[0])
    series = pd.Series(values, dtype=np.float64)
    return float(series.ewm(span=period, adjust=False).mean().iloc[-1])


def population_std(values: Sequence[float]) -> float:
    if len(values) == 0:
        return 0.0
    return float(np.std(np.asarray(values, dtype=np.float64), ddof=0))


def detect_anomalies(values: Sequence[float], threshold: float = 2) -> List[bool]:
    """
    Flag values more than `threshold` population std-devs from the mean.

    Mean and std are taken over the whole array, so a flagged point also
    inflates the dispersion it is measured against.
    """
    if len(values) < 3:
        return [False] * len(values)

    arr = np.asarray(values, dtype=np.float64)
    std = arr.std(ddof=0)
    flags = np.abs(arr - arr.mean()) > threshold * std
    return [bool(f) for f in flags]


# ---------------------------------------------------------------------------
# Health score
# ---------------------------------------------------------------------------

def health_score(summary: FinanceSummary, tiers: FinanceHealthTiers | None = None) -> int:
    """
    Finance health in [0, 100]: 100 minus one penalty per dimension.

    Dimensions: balance, spending-to-income ratio, days of runway.
    """
    t = tiers or DEFAULT_CONFIG.finance_health
    score = 100

    if summary.balance < 0:
        score -= t.negative_balance_penalty
    else:
        for limit, penalty in t.balance_tiers:
            if summary.balance < limit:
                score -= penalty
                break

    ratio = summary.total_saidas / max(summary.total_entradas, 1)
    for above, penalty in t.spending_ratio_tiers:
        if ratio > above:
            score -= penalty
            break

    for below, penalty in t.forecast_tiers:
        if summary.forecast_days < below:
            score -= penalty
            break

    return int(np.clip(score, 0, 100))


# ---------------------------------------------------------------------------
# Forecast
# ---------------------------------------------------------------------------

def forecast_spending(
    daily_spending: Sequence[float],
    days_ahead: int = 30,
    cfg: BussolaConfig | None = None,
) -> List[SpendingBand]:
    """
    Flat extrapolation: every future day gets the same EMA ± band.

    The band is `band_width` population std-devs wide on each side; the lower
    edge never goes below zero.
    """
    f = (cfg or DEFAULT_CONFIG).forecast
    center = ema(daily_spending, f.ema_period)
    spread = population_std(daily_spending) * f.band_width

    band = SpendingBand(
        min=int(round(max(0.0, center - spread))),
        avg=int(round(center)),
        max=int(round(center + spread)),
    )
    return [SpendingBand(band.min, band.avg, band.max) for _ in range(max(0, days_ahead))]


def forecast_total(
    daily_spending: Sequence[float],
    days_ahead: int,
    cfg: BussolaConfig | None = None,
) -> int:
    """Expected spending over the next `days_ahead` days, rounded once on the sum."""
    f = (cfg or DEFAULT_CONFIG).forecast
    return int(round(ema(daily_spending, f.ema_period) * max(0, days_ahead)))


# ---------------------------------------------------------------------------
# Daily series and trend
# ---------------------------------------------------------------------------

def in_window(day: date, today: date, days: int) -> bool:
    """True when `day` falls after the start of the `days`-day window ending today."""
    return day > today - timedelta(days=days)


def daily_spending(entries: Sequence[FinancialEntry], days: int, today: date) -> np.ndarray:
    """
    Expense total per calendar day over the `days` days ending `today`.

    Oldest first, days without expenses filled with 0.
    """
    index = pd.date_range(end=pd.Timestamp(today), periods=max(0, days), freq="D")
    rows = [(pd.Timestamp(e.date), e.value) for e in entries if e.type is EntryType.SAIDA]
    if not rows:
        return np.zeros(len(index), dtype=np.int64)

    frame = pd.DataFrame(rows, columns=["date", "value"])
    per_day = frame.groupby("date")["value"].sum()
    return per_day.reindex(index, fill_value=0).to_numpy(dtype=np.int64)


def spending_trend(daily_values: Sequence[float], cfg: BussolaConfig | None = None) -> str:
    """
    Compare the mean of the second half of the series against the first.

    Returns "increasing", "decreasing" or "stable". Odd lengths put the extra
    day in the second half.
    """
    t = (cfg or DEFAULT_CONFIG).trend
    n = len(daily_values)
    if n < t.min_data_points:
        return "stable"

    arr = np.asarray(daily_values, dtype=np.float64)
    mid = n // 2
    first, second = arr[:mid].mean(), arr[mid:].mean()
    change = (second - first) / max(first, 1.0)

    if change > t.change_band:
        return "increasing"
    if change < -t.change_band:
        return "decreasing"
    return "stable"


# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------

def compute_finance_summary(
    entries: Sequence[FinancialEntry],
    period_days: int = 30,
    today: date | None = None,
    cfg: BussolaConfig | None = None,
) -> FinanceSummary:
    """
    Totals, balance, average daily spending and runway over the window.

    forecast_days = floor(balance / avg_daily_spending), evaluated as
    floor(balance * period_days / total_saidas) so it stays in integer
    arithmetic. With no spending the runway is reported as 999 days.
    """
    if period_days <= 0:
        raise ValueError(f"period_days must be positive, got {period_days}")

    f = (cfg or DEFAULT_CONFIG).forecast
    today = today or date.today()
    recent = [e for e in entries if in_window(e.date, today, period_days)]

    entradas = sum(e.value for e in recent if e.type is EntryType.ENTRADA)
    saidas = sum(e.value for e in recent if e.type is EntryType.SAIDA)
    balance = entradas - saidas

    if saidas > 0:
        forecast = (balance * period_days) // saidas
    else:
        forecast = f.no_spending_forecast_days

    summary = FinanceSummary(
        total_entradas=entradas,
        total_saidas=saidas,
        balance=balance,
        avg_daily_spending=int(round(saidas / period_days)),
        forecast_days=max(0, forecast),
    )
    logger.debug(
        "finance summary: %d entries in %dd window, balance=%d, forecast=%dd",
        len(recent), period_days, summary.balance, summary.forecast_days,
    )
    return summary
