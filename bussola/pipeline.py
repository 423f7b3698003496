"""
Pipeline orchestration: decode → analyze → decide → report.

This is the only module with I/O (snapshot loading, report formatting).
All analytical logic is delegated to the component modules.

analyze_data() is the entry point for callers that already hold rows from
storage; analyze() reads the same structure from a JSON snapshot file.
"""

import dataclasses
import json
import logging
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Union

from bussola.anomalies import detect_spending_anomalies
from bussola.config import DEFAULT_CONFIG, BussolaConfig
from bussola.entities import OperationalContext
from bussola.insights import compute_operational_insights
from bussola.overload import assess_overload, suggest_rest_day
from bussola.patterns import newest_first
from bussola.projections import project_finances, projection_summary
from bussola.projects import compute_project_stats
from bussola.records import (
    alert_from_row,
    checkin_from_row,
    decision_from_row,
    decode_all,
    entry_from_row,
    parse_day,
    project_from_row,
)
from bussola.rules import (
    classify_state,
    compute_action_mother,
    compute_basic_action_mother,
    compute_guidance,
    generate_advanced_alerts,
    generate_alerts,
)
from bussola.suggestions import suggest_checkin
from bussola.weekly import generate_weekly_summary, week_end, week_start


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Snapshot loading (CLI mode only)
# ---------------------------------------------------------------------------

def load_data(filepath: Union[str, Path]) -> Dict[str, Any]:
    """Load a user snapshot (checkins, entries, projects, ...) from a JSON file."""
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Data file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if not data:
        raise ValueError("Data file is empty")
    return data


# ---------------------------------------------------------------------------
# Plain-data conversion
# ---------------------------------------------------------------------------

def to_plain(value: Any) -> Any:
    """Recursively turn dataclasses, enums and dates into JSON-friendly values."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_plain(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k): to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(v) for v in value]
    return value


# ---------------------------------------------------------------------------
# Core analysis
# ---------------------------------------------------------------------------

def analyze_data(
    data: Dict[str, Any],
    today: date | None = None,
    cfg: BussolaConfig | None = None,
) -> Dict[str, Any]:
    """
    Run every component over one user's snapshot.

    `data` keys: checkins, entries, projects (required lists, entries and
    projects may be empty); decisions, alerts, task_counts, user_id,
    current_balance, today (optional). When `today` is given, "now" is the
    start of that day.

    Guidance considers the alerts already stored for the user (`alerts`)
    together with the basic and advanced drafts produced by this run.
    """
    if not isinstance(data, dict):
        raise ValueError("Snapshot must be a JSON object")
    cfg = cfg or DEFAULT_CONFIG

    checkins = decode_all(data.get("checkins"), checkin_from_row)
    if not checkins:
        raise ValueError("Input data must contain at least one checkin")

    entries = decode_all(data.get("entries"), entry_from_row)
    projects = decode_all(data.get("projects"), project_from_row)
    decisions = decode_all(data.get("decisions"), decision_from_row)
    stored_alerts = decode_all(data.get("alerts"), alert_from_row)
    task_counts = data.get("task_counts") or {}

    if today is None and data.get("today"):
        today = parse_day(data["today"])
    if today is None:
        today, now = date.today(), datetime.now()
    else:
        now = datetime.combine(today, datetime.min.time())

    history = newest_first(checkins)
    latest = history[0]
    user_id = str(data.get("user_id") or latest.user_id)

    logger.info(
        "analyzing %s: %d checkins, %d entries, %d projects (today=%s)",
        user_id, len(checkins), len(entries), len(projects), today.isoformat(),
    )

    insights = compute_operational_insights(
        latest, history, entries, projects, task_counts, today=today, now=now, cfg=cfg,
    )
    context = OperationalContext(
        checkin=latest,
        finance=insights.finance,
        projects=compute_project_stats(projects, now, cfg),
    )
    current_balance = int(data.get("current_balance", insights.finance.balance))
    alerts = generate_alerts(context, user_id, cfg)
    advanced = generate_advanced_alerts(insights, user_id, cfg)

    result = {
        "user_id": user_id,
        "date": today,
        "state": classify_state(latest),
        "health_score": insights.health_score,
        "insights": insights,
        "project_stats": context.projects,
        "alerts": alerts,
        "advanced_alerts": advanced,
        "guidance": compute_guidance(insights, [*stored_alerts, *alerts, *advanced], cfg),
        "action": compute_action_mother(insights, cfg),
        "basic_action": compute_basic_action_mother(context),
        "overload": assess_overload(history, projects, cfg),
        "rest_day": suggest_rest_day(history, cfg),
        "projections": {
            days: project_finances(current_balance, entries, days, today=today, cfg=cfg)
            for days in cfg.projection.horizons
        },
        "projection_summary": projection_summary(current_balance, entries, today, cfg),
        "spending_anomalies": detect_spending_anomalies(entries, cfg.forecast.period_days, today, cfg),
        "suggestion": suggest_checkin(history, today, cfg),
        "weekly_summary": generate_weekly_summary(
            week_start(today), week_end(today), history, entries, projects, decisions, cfg,
        ),
    }
    return to_plain(result)


# ---------------------------------------------------------------------------
# Public Entry Points
# ---------------------------------------------------------------------------

def analyze(
    filepath: Union[str, Path],
    today: date | None = None,
    cfg: BussolaConfig | None = None,
) -> Dict[str, Any]:
    """CLI-compatible entry point: read a JSON snapshot and run the analysis."""
    return analyze_data(load_data(filepath), today=today, cfg=cfg)


# ---------------------------------------------------------------------------
# Report generation
# ---------------------------------------------------------------------------

def _money(cents: int) -> str:
    return f"R$ {cents / 100:,.2f}"


def generate_report(result: Dict[str, Any]) -> str:
    """Format an analyze() result as a human-readable daily briefing."""
    ins = result["insights"]
    fin = ins["finance"]
    energy = ins["energy_pattern"]
    overload = result["overload"]
    guidance = result["guidance"]
    realistic = {d: p["realistic"] for d, p in result["projections"].items()}

    lines = [
        "BÚSSOLA DAILY BRIEFING",
        "=" * 58,
        "",
        f"  Date                : {result['date']}",
        f"  State               : {result['state']}",
        f"  Health Score        : {result['health_score']}/100 (finance {fin['health_score']}/100)",
        f"  Guidance            : {guidance['mode']} — {guidance['text']}",
        f"  Action              : {result['action']}",
        "",
        "  Finance (30d):",
        f"    Income            : {_money(fin['total_entradas'])}",
        f"    Expenses          : {_money(fin['total_saidas'])}",
        f"    Balance           : {_money(fin['balance'])}",
        f"    Avg daily spend   : {_money(fin['avg_daily_spending'])}",
        f"    Runway            : {fin['forecast_days']} days",
        f"    Spending trend    : {fin['spending_trend']}"
        f"{' (anomaly detected)' if fin['anomaly_detected'] else ''}",
        "",
        "  Projections (realistic):",
    ]

    for days, scenario in realistic.items():
        lines.append(
            f"    {days:>3}d             : {_money(scenario['estimated_balance'])}"
            f"  (runway: {scenario['runway']})"
        )

    lines += [
        "",
        f"  Energy              : best {energy['best_day']}, worst {energy['worst_day']},"
        f" streak {energy['current_streak']}d",
        f"  Productivity corr.  : {ins['productivity_correlation']:+.2f}",
        f"  Top project         : {ins['top_priority_project'] or '-'}",
        f"  Overload            : {overload['overload_level']} (score {overload['score']})",
    ]

    alerts = result["advanced_alerts"]
    if alerts:
        lines.append("")
        lines.append("  Alerts:")
        for alert in alerts:
            lines.append(f"    - [{alert['type']}] {alert['message']}")

    if overload["should_pause_projects"]:
        lines.append("")
        lines.append(f"  Consider pausing {len(overload['projects_to_pause'])} project(s)")

    lines.append("")
    lines.append("=" * 58)
    return "\n".join(lines)
