"""
Centralized configuration for all thresholds, weights, tiers, and windows.

Every tunable constant lives here. Components receive a BussolaConfig and
read only their own section; nothing else in the package hard-codes a number
that a product decision could change.
"""

from dataclasses import dataclass, field
from typing import Tuple


def _check_unit_sum(name: str, *weights: float) -> None:
    total = sum(weights)
    if abs(total - 1.0) > 1e-9:
        raise ValueError(f"{name} must sum to 1.0, got {total}")


# ---------------------------------------------------------------------------
# Composite health score
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class InsightWeights:
    """Weights for blending finance, state, and energy into the overall score."""

    finance: float = 0.5
    state: float = 0.3
    energy: float = 0.2

    def __post_init__(self):
        _check_unit_sum("Insight weights", self.finance, self.state, self.energy)


@dataclass(frozen=True)
class StateScores:
    """0-100 contribution of the operational state and today's energia."""

    attack: int = 100
    caution: int = 60
    critical: int = 20

    energy_alta: int = 100
    energy_media: int = 60
    energy_baixa: int = 20


# ---------------------------------------------------------------------------
# Finance health
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FinanceHealthTiers:
    """
    Penalty tiers for the 0-100 finance health score.

    Each tier tuple is ordered from most to least severe; the first matching
    tier applies. Balances are in minor currency units.
    """

    negative_balance_penalty: int = 40
    balance_tiers: Tuple[Tuple[int, int], ...] = ((10_000, 20), (50_000, 10))

    # (ratio strictly above, penalty)
    spending_ratio_tiers: Tuple[Tuple[float, int], ...] = ((1.5, 30), (1.0, 20), (0.8, 10))

    # (forecast_days strictly below, penalty)
    forecast_tiers: Tuple[Tuple[int, int], ...] = ((7, 30), (15, 20), (30, 10))


@dataclass(frozen=True)
class ForecastParams:
    """Spending forecast and summary windows."""

    ema_period: int = 7
    band_width: float = 1.5          # ± std-devs around the EMA
    period_days: int = 30
    horizon_days: int = 90
    no_spending_forecast_days: int = 999
    anomaly_threshold: float = 2.0


@dataclass(frozen=True)
class TrendParams:
    """Half-vs-half spending trend classification."""

    min_data_points: int = 7
    change_band: float = 0.1


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StalledParams:
    threshold_days: int = 7


@dataclass(frozen=True)
class PriorityParams:
    """Priority score composition. Placeholder inputs are used by insights."""

    impact_multiplier: int = 4
    energy_multiplier: int = 2
    active_bonus: int = 10
    cap: int = 100
    # (days strictly below, bonus)
    deadline_tiers: Tuple[Tuple[int, int], ...] = ((7, 30), (30, 20), (90, 10))
    placeholder_financial_impact: int = 5
    placeholder_energy_required: int = 5


# ---------------------------------------------------------------------------
# Overload
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class OverloadWeights:
    """Factor weights for the burnout score."""

    low_energy: float = 0.30
    high_pressure: float = 0.25
    too_many_projects: float = 0.20
    consecutive_bad_days: float = 0.15
    no_rest_days: float = 0.10

    def __post_init__(self):
        _check_unit_sum(
            "Overload weights",
            self.low_energy,
            self.high_pressure,
            self.too_many_projects,
            self.consecutive_bad_days,
            self.no_rest_days,
        )


@dataclass(frozen=True)
class OverloadThresholds:
    """Factor triggers and level boundaries."""

    window_days: int = 7
    low_energy_days: int = 3
    high_pressure_days: int = 4
    max_projects: int = 5
    consecutive_bad_days: int = 3
    min_days_for_rest_check: int = 5
    no_rest_severity: int = 70

    critical_level: float = 75
    high_level: float = 50
    moderate_level: float = 25

    # Projects kept when pausing is recommended
    keep_projects: int = 3

    rest_day_energy_floor: float = 0.4


# ---------------------------------------------------------------------------
# Per-entry spending anomalies
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AnomalyParams:
    """Per-category z-score and frequency checks over individual expenses."""

    min_recent_expenses: int = 5
    min_category_samples: int = 3
    recent_days: int = 7
    z_threshold: float = 2.0
    z_medium: float = 2.5
    z_high: float = 3.0
    # Weekly count must exceed the normal weekly rate by this factor
    frequency_multiplier: float = 2.0
    min_frequency_count: int = 5


# ---------------------------------------------------------------------------
# Projections
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ProjectionParams:
    lookback_days: int = 90
    growth_cap: float = 0.5
    optimism: float = 1.1
    pessimism: float = 0.9
    horizons: Tuple[int, ...] = (30, 60, 90)

    # Confidence by number of entries
    low_data_entries: int = 30
    mid_data_entries: int = 60
    rich_data_entries: int = 90

    expense_growth_warning: float = 0.2
    balance_drop_ratio: float = 0.5

    # Summary recommendation: 60d below low ratio of today, 90d above high ratio
    summary_low_ratio: float = 0.3
    summary_high_ratio: float = 1.5


# ---------------------------------------------------------------------------
# Check-in suggestions
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SuggestionParams:
    lookback_days: int = 30
    trend_window: int = 7
    trend_band: float = 0.1
    min_weekday_samples: int = 2
    min_history_for_weekday: int = 7
    consistent_history: int = 21

    confidence_none: float = 0.3
    confidence_sparse: float = 0.4
    confidence_default: float = 0.6
    confidence_consistent: float = 0.7
    confidence_weekday: float = 0.75


# ---------------------------------------------------------------------------
# Weekly summary
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class WeeklyThresholds:
    bad_days: int = 3
    high_pressure_days: int = 4
    min_checkins: int = 5
    low_energy: float = 0.4
    max_active_projects: int = 5
    trend_band: float = 0.2
    top_n: int = 3


# ---------------------------------------------------------------------------
# Alerts and decisions
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AlertThresholds:
    """Thresholds shared by the basic and advanced rule sets."""

    # Basic: spending spike baseline is a fraction of the average itself
    spike_baseline_ratio: float = 0.8
    spike_multiplier: float = 1.5
    low_forecast_days: int = 7
    max_active_projects: int = 5

    # Advanced
    critical_health: int = 30
    attention_health: int = 60

    # Guidance / action-mother
    cut_health: int = 40
    do_health: int = 70
    strong_streak: int = 3


# ---------------------------------------------------------------------------
# Top-level config aggregate
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BussolaConfig:
    """Complete engine configuration. Pass to any component to override defaults."""

    insight_weights: InsightWeights = field(default_factory=InsightWeights)
    state_scores: StateScores = field(default_factory=StateScores)
    finance_health: FinanceHealthTiers = field(default_factory=FinanceHealthTiers)
    forecast: ForecastParams = field(default_factory=ForecastParams)
    trend: TrendParams = field(default_factory=TrendParams)
    stalled: StalledParams = field(default_factory=StalledParams)
    priority: PriorityParams = field(default_factory=PriorityParams)
    overload_weights: OverloadWeights = field(default_factory=OverloadWeights)
    overload: OverloadThresholds = field(default_factory=OverloadThresholds)
    anomaly: AnomalyParams = field(default_factory=AnomalyParams)
    projection: ProjectionParams = field(default_factory=ProjectionParams)
    suggestion: SuggestionParams = field(default_factory=SuggestionParams)
    weekly: WeeklyThresholds = field(default_factory=WeeklyThresholds)
    alerts: AlertThresholds = field(default_factory=AlertThresholds)


DEFAULT_CONFIG = BussolaConfig()
