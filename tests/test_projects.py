import math
from datetime import timedelta

from bussola.projects import (
    compute_project_stats,
    estimate_completion,
    find_stalled_projects,
    priority_score,
    velocity,
)

from tests.factories import NOW, project


def test_stalled_is_strictly_older_than_threshold():
    old = project("Velho", days_since_update=8)
    edge = project("Limite", days_since_update=7)
    paused = project("Pausado", status="paused", days_since_update=30)
    assert find_stalled_projects([old, edge, paused], 7, NOW) == [old]


def test_velocity():
    assert velocity(10, 2) == 5
    assert velocity(10, 0) == 0
    assert velocity(10, -1) == 0


def test_completion_estimates():
    stuck = estimate_completion(10, 0)
    assert stuck.weeks == math.inf and stuck.confidence == "low"
    assert (estimate_completion(9, 3).weeks, estimate_completion(9, 3).confidence) == (3.0, "high")
    assert estimate_completion(5, 1).confidence == "medium"
    assert estimate_completion(1, 0.5).confidence == "low"


def test_priority_without_deadline():
    # 5*4 + (10-5)*2 + 10
    assert priority_score(project(), 5, 5, now=NOW) == 40
    assert priority_score(project(status="paused"), 5, 5, now=NOW) == 30


def test_priority_deadline_tiers():
    p = project()
    assert priority_score(p, 5, 5, NOW + timedelta(days=3), NOW) == 70
    assert priority_score(p, 5, 5, NOW + timedelta(days=20), NOW) == 60
    assert priority_score(p, 5, 5, NOW + timedelta(days=60), NOW) == 50
    assert priority_score(p, 5, 5, NOW + timedelta(days=100), NOW) == 40


def test_priority_is_capped():
    assert priority_score(project(), 20, 0, NOW + timedelta(days=1), NOW) == 100


def test_project_stats():
    stats = compute_project_stats([
        project("A"), project("B", days_since_update=9), project("C", status="paused"),
        project("D", status="done"), project("E", status="done"),
    ], NOW)
    assert (stats.active_count, stats.paused_count, stats.done_count, stats.stalled_count) == (2, 1, 2, 1)
