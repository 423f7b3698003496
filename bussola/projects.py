"""
Project analytics: staleness, velocity, completion estimates, priority.
"""

import math
from datetime import datetime, timedelta
from typing import List, Sequence

from bussola.config import DEFAULT_CONFIG, BussolaConfig
from bussola.entities import CompletionEstimate, Project, ProjectStats, ProjectStatus


def find_stalled_projects(
    projects: Sequence[Project],
    threshold_days: int = 7,
    now: datetime | None = None,
) -> List[Project]:
    """Active projects whose last update is strictly older than the threshold."""
    now = now or datetime.now()
    threshold = timedelta(days=threshold_days)
    return [
        p for p in projects
        if p.status is ProjectStatus.ACTIVE and now - p.updated_at > threshold
    ]


def velocity(completed_tasks: float, weeks: float) -> float:
    """Tasks completed per week; 0 for an empty or negative period."""
    return completed_tasks / weeks if weeks > 0 else 0.0


def estimate_completion(remaining_tasks: float, current_velocity: float) -> CompletionEstimate:
    if current_velocity == 0:
        return CompletionEstimate(weeks=math.inf, confidence="low")

    weeks = remaining_tasks / current_velocity
    if current_velocity >= 3:
        confidence = "high"
    elif current_velocity >= 1:
        confidence = "medium"
    else:
        confidence = "low"
    return CompletionEstimate(weeks=weeks, confidence=confidence)


def priority_score(
    project: Project,
    financial_impact: float,
    energy_required: float,
    deadline: datetime | None = None,
    now: datetime | None = None,
    cfg: BussolaConfig | None = None,
) -> float:
    """
    Weighted priority, capped at 100.

        impact * 4  +  deadline bonus  +  (10 - energy) * 2  +  10 if active

    Impact and energy are on a 0-10 scale. The uncapped sum can exceed 100.
    """
    p = (cfg or DEFAULT_CONFIG).priority
    score = financial_impact * p.impact_multiplier

    if deadline is not None:
        days_until = ((deadline - (now or datetime.now())).total_seconds()) / 86400
        for below, bonus in p.deadline_tiers:
            if days_until < below:
                score += bonus
                break

    score += (10 - energy_required) * p.energy_multiplier

    if project.status is ProjectStatus.ACTIVE:
        score += p.active_bonus

    return min(p.cap, score)


def compute_project_stats(
    projects: Sequence[Project],
    now: datetime | None = None,
    cfg: BussolaConfig | None = None,
) -> ProjectStats:
    cfg = cfg or DEFAULT_CONFIG
    stalled = find_stalled_projects(projects, cfg.stalled.threshold_days, now)
    return ProjectStats(
        active_count=sum(1 for p in projects if p.status is ProjectStatus.ACTIVE),
        paused_count=sum(1 for p in projects if p.status is ProjectStatus.PAUSED),
        done_count=sum(1 for p in projects if p.status is ProjectStatus.DONE),
        stalled_count=len(stalled),
    )
