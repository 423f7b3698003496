from bussola.overload import assess_overload, is_overloaded, suggest_rest_day

from tests.factories import checkin, checkins, project


TERRIBLE_WEEK = [("critico", "baixa", "alta")] * 7
CALM_WEEK = [("tranquilo", "alta", "leve")] * 7


def test_terrible_week_with_many_projects_is_critical():
    projects = [project(f"P{i}", next_action="Fazer algo" if i < 4 else None) for i in range(10)]
    a = assess_overload(checkins(*TERRIBLE_WEEK), projects)
    # 30 + 25 + 20 + 15 + 7
    assert a.score == 97
    assert a.overload_level == "critical"
    assert [f.type for f in a.factors] == [
        "low_energy", "high_pressure", "too_many_projects", "consecutive_bad_days", "no_rest_days",
    ]
    assert a.should_pause_projects
    assert len(a.projects_to_pause) == 6
    assert set(a.projects_to_pause) == {p.id for p in projects[4:]}
    assert a.recommendations[0].startswith("🔴")


def test_pause_candidates_capped_at_excess():
    projects = [project(f"P{i}") for i in range(6)]
    a = assess_overload(checkins(*TERRIBLE_WEEK), projects)
    assert a.projects_to_pause == [p.id for p in projects[:3]]


def test_inactive_projects_are_not_counted():
    projects = [project(f"P{i}", status="paused") for i in range(10)]
    a = assess_overload(checkins(*TERRIBLE_WEEK), projects)
    assert a.score == 77
    assert not a.should_pause_projects
    assert a.projects_to_pause == []


def test_calm_week_is_balanced():
    a = assess_overload(checkins(*CALM_WEEK), [project("A"), project("B")])
    assert a.overload_level == "none"
    assert a.score == 0
    assert a.factors == []
    assert "equilibrada" in a.recommendations[0]


def test_moderate_overload():
    week = [("atencao", "baixa", "normal")] * 3 + [("atencao", "media", "normal")] * 4
    a = assess_overload(checkins(*week), [])
    # low_energy 42.86*0.30 + bad run 42.86*0.15 + no rest 70*0.10
    assert a.score == 26
    assert a.overload_level == "moderate"
    assert any("descanso" in r for r in a.recommendations)


def test_only_last_week_is_considered():
    history = checkins(*CALM_WEEK) + checkins(*TERRIBLE_WEEK, start=7)
    assert assess_overload(history, []).overload_level == "none"


def test_no_rest_needs_five_days():
    a = assess_overload(checkins(*[("atencao", "media", "normal")] * 4), [])
    assert a.factors == []


def test_is_overloaded():
    assert is_overloaded(checkins(*TERRIBLE_WEEK))
    assert not is_overloaded(checkins(*CALM_WEEK))


def test_rest_day_suggestion():
    assert suggest_rest_day(checkins(*[("atencao", "alta", "normal")] * 3))
    assert not suggest_rest_day(checkins(*CALM_WEEK))
    low = [checkin(0, "atencao", "baixa", "leve"), checkin(1, "atencao", "baixa", "normal")]
    assert suggest_rest_day(low)
