"""
Value types shared by every component.

Inputs (Checkin, FinancialEntry, Project, Alert, Decision) are frozen
dataclasses built by the persistence side; the engine never mutates them.
Outputs are plain dataclasses computed fresh on every call.

Currency amounts are always int minor units.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Dict, List, Union


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class CaixaStatus(str, Enum):
    TRANQUILO = "tranquilo"
    ATENCAO = "atencao"
    CRITICO = "critico"


class Energia(str, Enum):
    ALTA = "alta"
    MEDIA = "media"
    BAIXA = "baixa"


class Pressao(str, Enum):
    LEVE = "leve"
    NORMAL = "normal"
    ALTA = "alta"


class EstadoCalculado(str, Enum):
    ATTACK = "ATTACK"
    CAUTION = "CAUTION"
    CRITICAL = "CRITICAL"


class EntryType(str, Enum):
    ENTRADA = "entrada"
    SAIDA = "saida"


class ProjectStatus(str, Enum):
    ACTIVE = "active"
    PAUSED = "paused"
    DONE = "done"


class AlertType(str, Enum):
    FINANCE = "finance"
    PROJECT = "project"
    SYSTEM = "system"
    OVERLOAD = "overload"


class GuidanceMode(str, Enum):
    DO = "DO"
    HOLD = "HOLD"
    CUT = "CUT"


# ---------------------------------------------------------------------------
# Persisted entities
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Checkin:
    id: str
    user_id: str
    date: date
    caixa_status: CaixaStatus
    energia: Energia
    pressao: Pressao
    estado_calculado: EstadoCalculado | None = None


@dataclass(frozen=True)
class FinancialEntry:
    id: str
    user_id: str
    type: EntryType
    value: int
    category: str
    date: date
    notes: str | None = None


@dataclass(frozen=True)
class Project:
    id: str
    user_id: str
    name: str
    status: ProjectStatus
    objective: str
    created_at: datetime
    updated_at: datetime
    next_action: str | None = None


@dataclass(frozen=True)
class Alert:
    id: str
    user_id: str
    type: AlertType
    message: str
    date: datetime
    resolved: bool = False


@dataclass(frozen=True)
class AlertDraft:
    """An alert without identity; the persistence side assigns id and date."""

    user_id: str
    type: AlertType
    message: str
    resolved: bool = False


@dataclass(frozen=True)
class Decision:
    id: str
    user_id: str
    context: str
    decision: str
    date: date


# ---------------------------------------------------------------------------
# Finance results
# ---------------------------------------------------------------------------

@dataclass
class FinanceSummary:
    total_entradas: int
    total_saidas: int
    balance: int
    avg_daily_spending: int
    forecast_days: int


@dataclass
class EnhancedFinanceSummary(FinanceSummary):
    health_score: int = 100
    spending_trend: str = "stable"    # increasing | stable | decreasing
    forecast_30d: int = 0
    forecast_60d: int = 0
    forecast_90d: int = 0
    anomaly_detected: bool = False
    recommended_action: str = ""


@dataclass
class SpendingBand:
    min: int
    avg: int
    max: int


@dataclass
class SpendingStats:
    category: str
    count: int
    total: int
    average: float
    std_dev: float
    min: int
    max: int


@dataclass
class SpendingAnomaly:
    type: str            # unusual_amount | unusual_frequency
    severity: str        # low | medium | high
    category: str
    amount: int
    message: str
    threshold: float
    deviation: float     # percent above normal


# ---------------------------------------------------------------------------
# Project results
# ---------------------------------------------------------------------------

@dataclass
class ProjectStats:
    active_count: int = 0
    paused_count: int = 0
    done_count: int = 0
    stalled_count: int = 0


@dataclass
class CompletionEstimate:
    weeks: float
    confidence: str      # low | medium | high


# ---------------------------------------------------------------------------
# Patterns and insights
# ---------------------------------------------------------------------------

@dataclass
class WeeklyPattern:
    best_day: str
    worst_day: str
    avg_energy_by_day: Dict[str, float] = field(default_factory=dict)


@dataclass
class EnergyPattern:
    best_day: str
    worst_day: str
    current_streak: int


@dataclass
class OperationalInsights:
    current_state: EstadoCalculado
    health_score: int
    finance: EnhancedFinanceSummary
    energy_pattern: EnergyPattern
    productivity_correlation: float
    top_priority_project: str | None = None
    recommended_actions: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


@dataclass
class OperationalContext:
    checkin: Checkin
    finance: FinanceSummary
    projects: ProjectStats


@dataclass
class Guidance:
    mode: GuidanceMode
    text: str


# ---------------------------------------------------------------------------
# Overload
# ---------------------------------------------------------------------------

@dataclass
class OverloadFactor:
    type: str
    severity: float
    description: str


@dataclass
class OverloadAssessment:
    overload_level: str          # none | moderate | high | critical
    score: int
    factors: List[OverloadFactor] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    should_pause_projects: bool = False
    projects_to_pause: List[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Projections
# ---------------------------------------------------------------------------

@dataclass
class ProjectionScenario:
    estimated_balance: int
    estimated_income: int
    estimated_expenses: int
    runway: Union[int, float]    # days; math.inf when not burning cash
    confidence: float
    warnings: List[str] = field(default_factory=list)


@dataclass
class ProjectionAssumptions:
    average_income: int
    average_expenses: int
    income_growth_rate: float
    expense_growth_rate: float


@dataclass
class FinancialProjection:
    days: int
    optimistic: ProjectionScenario
    realistic: ProjectionScenario
    pessimistic: ProjectionScenario
    assumptions: ProjectionAssumptions


@dataclass
class ProjectionSummary:
    days30: int
    days60: int
    days90: int
    recommendation: str


# ---------------------------------------------------------------------------
# Check-in suggestions
# ---------------------------------------------------------------------------

@dataclass
class WeekdayPattern:
    caixa_status: CaixaStatus
    energia: Energia
    pressao: Pressao


@dataclass
class CheckinPattern:
    most_common_caixa: CaixaStatus
    most_common_energia: Energia
    most_common_pressao: Pressao
    weekday_patterns: Dict[int, WeekdayPattern] = field(default_factory=dict)
    recent_trend: str = "stable"     # improving | stable | declining


@dataclass
class CheckinSuggestion:
    caixa: CaixaStatus
    energia: Energia
    pressao: Pressao
    confidence: float
    reasoning: str


# ---------------------------------------------------------------------------
# Weekly summary
# ---------------------------------------------------------------------------

@dataclass
class CategoryTotal:
    category: str
    amount: int


@dataclass
class FinancialSnapshot:
    total_income: int
    total_expenses: int
    net_cashflow: int
    top_categories: List[CategoryTotal] = field(default_factory=list)


@dataclass
class WellbeingSnapshot:
    average_energy: float
    average_caixa_score: float
    checkins_completed: int
    trend: str                   # improving | stable | declining


@dataclass
class ProjectHighlight:
    name: str
    progress: str


@dataclass
class ProjectsSnapshot:
    active_count: int
    completed_this_week: int
    top_projects: List[ProjectHighlight] = field(default_factory=list)


@dataclass
class WeeklySummary:
    week_start: date
    week_end: date
    victories: List[str]
    blockers: List[str]
    decisions: List[Decision]
    financial_snapshot: FinancialSnapshot
    wellbeing_snapshot: WellbeingSnapshot
    projects_snapshot: ProjectsSnapshot
    insights: List[str]
