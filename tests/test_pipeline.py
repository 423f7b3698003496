import json
import tempfile
from datetime import date
from pathlib import Path

from bussola.config import BussolaConfig
from bussola.pipeline import analyze, analyze_data, generate_report, load_data


SAMPLE_DATA = Path(__file__).parent.parent / "sample_data.json"

RESULT_KEYS = {
    "user_id", "date", "state", "health_score", "insights", "project_stats",
    "alerts", "advanced_alerts", "guidance", "action", "basic_action",
    "overload", "rest_day", "projections", "projection_summary",
    "spending_anomalies", "suggestion", "weekly_summary",
}


def expected_mode(result):
    drafts = result["alerts"] + result["advanced_alerts"]
    return "CUT" if any(a["type"] in ("finance", "overload") for a in drafts) else "DO"


def minimal_data(**extra):
    data = {
        "user_id": "u1",
        "checkins": [
            {"id": "c1", "user_id": "u1", "date": "2024-06-11", "caixa_status": "critico",
             "energia": "baixa", "pressao": "alta"},
            {"id": "c2", "user_id": "u1", "date": "2024-06-12", "caixa_status": "tranquilo",
             "energia": "alta", "pressao": "leve"},
        ],
        "entries": [
            {"id": "e1", "user_id": "u1", "type": "entrada", "value": 100_000,
             "category": "Clientes", "date": "2024-06-07"},
            {"id": "e2", "user_id": "u1", "type": "saida", "value": 50_000,
             "category": "Aluguel", "date": "2024-06-10"},
        ],
        "projects": [],
    }
    data.update(extra)
    return data


def test_sample_snapshot_end_to_end():
    result = analyze(SAMPLE_DATA)
    assert set(result) == RESULT_KEYS
    assert result["date"] == "2026-10-16"
    assert result["state"] == "ATTACK"
    assert result["health_score"] == 100
    # ATTACK at full health: only an open finance or overload draft can cut
    assert result["guidance"]["mode"] == expected_mode(result)
    assert result["weekly_summary"]["week_start"] == "2026-10-12"
    assert set(result["projections"]) == {"30", "60", "90"}


def test_result_is_plain_json():
    result = analyze(SAMPLE_DATA)
    decoded = json.loads(json.dumps(result))
    assert decoded["insights"]["current_state"] == "ATTACK"


def test_latest_checkin_drives_state():
    result = analyze_data(minimal_data(), today=date(2024, 6, 12))
    assert result["state"] == "ATTACK"
    assert result["insights"]["finance"]["forecast_days"] == 30
    assert result["suggestion"]["confidence"] == 0.4


def test_stored_open_alert_forces_cut():
    alerts = [{"id": "a1", "user_id": "u1", "type": "finance", "message": "Caixa crítico",
               "date": "2024-06-12T08:00:00"}]
    result = analyze_data(minimal_data(alerts=alerts), today=date(2024, 6, 12))
    assert result["guidance"]["mode"] == "CUT"


def test_same_run_finance_alert_forces_cut():
    # ATTACK at full health, but the 50_000 expense two days ago is a spike
    result = analyze_data(minimal_data(), today=date(2024, 6, 12))
    assert result["state"] == "ATTACK"
    assert result["health_score"] == 100
    assert result["insights"]["finance"]["anomaly_detected"] is True
    assert any(a["type"] == "finance" for a in result["advanced_alerts"])
    assert result["guidance"]["mode"] == "CUT"


def test_quiet_day_stays_in_do_mode():
    data = minimal_data(entries=[
        {"id": "e1", "user_id": "u1", "type": "entrada", "value": 100_000,
         "category": "Clientes", "date": "2024-06-07"},
    ])
    result = analyze_data(data, today=date(2024, 6, 12))
    assert result["advanced_alerts"] == []
    assert result["guidance"]["mode"] == "DO"


def test_non_object_snapshot_raises():
    for data in ([], ["checkins"], "checkins", None):
        try:
            analyze_data(data, today=date(2024, 6, 12))
            raise RuntimeError("Should have raised ValueError")
        except ValueError as e:
            assert str(e) == "Snapshot must be a JSON object"


def test_current_balance_overrides_finance_balance():
    result = analyze_data(minimal_data(current_balance=0), today=date(2024, 6, 12))
    assert result["projection_summary"]["days30"] < 50_000


def test_no_checkins_raises():
    try:
        analyze_data(minimal_data(checkins=[]), today=date(2024, 6, 12))
        raise RuntimeError("Should have raised ValueError")
    except ValueError:
        pass


def test_missing_file_raises():
    try:
        analyze("nonexistent.json")
        raise RuntimeError("Should have raised FileNotFoundError")
    except FileNotFoundError:
        pass


def test_empty_file_raises():
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "empty.json"
        path.write_text("{}", encoding="utf-8")
        try:
            load_data(path)
            raise RuntimeError("Should have raised ValueError")
        except ValueError:
            pass


def test_custom_config_injection():
    result = analyze(SAMPLE_DATA, cfg=BussolaConfig())
    assert result["health_score"] > 0


def test_report_mentions_state_and_guidance():
    result = analyze(SAMPLE_DATA)
    report = generate_report(result)
    assert "BÚSSOLA DAILY BRIEFING" in report
    assert "State               : ATTACK" in report
    assert f"Guidance            : {result['guidance']['mode']} " in report
