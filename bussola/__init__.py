"""
BÚSSOLA v1.0 — Operational Compass Engine

A deterministic, rule-based engine that turns a solo operator's daily
check-ins, cash entries, and projects into an operational state, a health
score, alerts, and one recommended action for the day.

Architecture:
    config       — All thresholds, weights, tiers, and windows (single source of truth)
    entities     — Enumerations, persisted entities, and result types
    records      — Typed decoding of persistence rows into entities
    finance      — EMA, outliers, finance health, spending forecast, summary
    anomalies    — Per-category spending anomalies, burn rate, runway
    patterns     — Weekday energy, energy streak, mood/productivity correlation
    projects     — Stalled detection, velocity, completion, priority
    overload     — Burnout scoring and project-pause recommendations
    projections  — 30/60/90-day optimistic / realistic / pessimistic scenarios
    suggestions  — Check-in pre-fill from historical patterns
    weekly       — Weekly review summary
    insights     — Aggregation of everything above into OperationalInsights
    rules        — State classification, alerts, guidance, action-mother
    pipeline     — Orchestration: decode → analyze → decide → report

Public API:
    analyze(filepath)        → CLI mode
    analyze_data(data)       → backend mode
    generate_report(result)  → formatted report
"""

from bussola.pipeline import analyze, analyze_data, generate_report

__version__ = "1.0.0"

__all__ = ["analyze", "analyze_data", "generate_report"]
