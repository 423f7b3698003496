"""
Behavior patterns mined from check-in history.

Energy is mapped onto an ordinal scale (alta=3, media=2, baixa=1) for
averaging and correlation.
"""

from typing import Dict, List, Mapping, Sequence

import numpy as np
import pandas as pd

from bussola.entities import Checkin, Energia, WeeklyPattern


ENERGY_SCALE = {Energia.ALTA: 3, Energia.MEDIA: 2, Energia.BAIXA: 1}


def newest_first(checkins: Sequence[Checkin]) -> List[Checkin]:
    return sorted(checkins, key=lambda c: c.date, reverse=True)


# ---------------------------------------------------------------------------
# Weekday energy
# ---------------------------------------------------------------------------

def analyze_weekly_patterns(checkins: Sequence[Checkin]) -> WeeklyPattern:
    """
    Average energy per weekday and the best / worst weekday.

    Weekdays keep the order in which they first appear. Ranking is a stable
    descending sort, so on ties the best day is the first tied day seen and
    the worst day is the last one.
    """
    if not checkins:
        return WeeklyPattern(best_day="Unknown", worst_day="Unknown", avg_energy_by_day={})

    frame = pd.DataFrame({
        "day": pd.to_datetime([c.date for c in checkins]).day_name(),
        "energy": [ENERGY_SCALE[c.energia] for c in checkins],
    })
    averages = frame.groupby("day", sort=False)["energy"].mean()
    avg_by_day: Dict[str, float] = {day: float(v) for day, v in averages.items()}

    ranked = sorted(avg_by_day.items(), key=lambda kv: kv[1], reverse=True)
    return WeeklyPattern(
        best_day=ranked[0][0],
        worst_day=ranked[-1][0],
        avg_energy_by_day=avg_by_day,
    )


def energy_streak(checkins: Sequence[Checkin]) -> int:
    """Consecutive alta/media days counting back from the most recent check-in."""
    streak = 0
    for c in newest_first(checkins):
        if c.energia is Energia.BAIXA:
            break
        streak += 1
    return streak


# ---------------------------------------------------------------------------
# Mood vs productivity
# ---------------------------------------------------------------------------

def correlate_mood_and_productivity(
    checkins: Sequence[Checkin],
    task_counts: Mapping[str, int],
) -> float:
    """
    Pearson correlation between energy and tasks completed on the same day.

    `task_counts` maps ISO dates (YYYY-MM-DD) to completed task counts; days
    missing from it count as 0. Returns 0.0 with fewer than two pairs or when
    either series is constant.
    """
    if len(checkins) < 2:
        return 0.0

    x = np.array([ENERGY_SCALE[c.energia] for c in checkins], dtype=np.float64)
    y = np.array([task_counts.get(c.date.isoformat(), 0) for c in checkins], dtype=np.float64)
    n = len(x)

    numerator = n * np.dot(x, y) - x.sum() * y.sum()
    denominator = np.sqrt(
        (n * np.dot(x, x) - x.sum() ** 2) * (n * np.dot(y, y) - y.sum() ** 2)
    )
    if denominator == 0:
        return 0.0
    return float(np.clip(numerator / denominator, -1.0, 1.0))
