from datetime import date, datetime

from bussola.entities import AlertType, CaixaStatus, Energia, EntryType, EstadoCalculado, ProjectStatus
from bussola.records import (
    alert_from_row,
    checkin_from_row,
    decision_from_row,
    decode_all,
    entry_from_row,
    parse_day,
    project_from_row,
)


CHECKIN_ROW = {
    "id": "c1",
    "user_id": "u1",
    "date": "2024-06-12",
    "caixa_status": "tranquilo",
    "energia": "alta",
    "pressao": "leve",
}

ENTRY_ROW = {
    "id": "e1",
    "user_id": "u1",
    "type": "saida",
    "value": 1500,
    "category": "Alimentação",
    "date": "2024-06-10",
}


def _raises_value_error(fn, *args):
    try:
        fn(*args)
    except ValueError as e:
        return str(e)
    raise RuntimeError("Should have raised ValueError")


def test_checkin_decodes_enums_and_date():
    c = checkin_from_row(CHECKIN_ROW)
    assert c.date == date(2024, 6, 12)
    assert c.caixa_status is CaixaStatus.TRANQUILO
    assert c.energia is Energia.ALTA
    assert c.estado_calculado is None


def test_checkin_keeps_stored_state():
    c = checkin_from_row({**CHECKIN_ROW, "estado_calculado": "ATTACK"})
    assert c.estado_calculado is EstadoCalculado.ATTACK


def test_checkin_missing_field_raises():
    row = {k: v for k, v in CHECKIN_ROW.items() if k != "pressao"}
    message = _raises_value_error(checkin_from_row, row)
    assert "pressao" in message


def test_checkin_null_field_counts_as_missing():
    _raises_value_error(checkin_from_row, {**CHECKIN_ROW, "energia": None})


def test_checkin_unknown_enum_raises():
    _raises_value_error(checkin_from_row, {**CHECKIN_ROW, "energia": "extrema"})


def test_entry_decodes_integer_amount():
    e = entry_from_row(ENTRY_ROW)
    assert e.type is EntryType.SAIDA
    assert e.value == 1500
    assert e.notes is None


def test_entry_rejects_non_positive_amount():
    _raises_value_error(entry_from_row, {**ENTRY_ROW, "value": 0})
    _raises_value_error(entry_from_row, {**ENTRY_ROW, "value": -10})


def test_entry_rejects_fractional_amount():
    _raises_value_error(entry_from_row, {**ENTRY_ROW, "value": 12.5})


def test_entry_accepts_integral_float():
    assert entry_from_row({**ENTRY_ROW, "value": 200.0}).value == 200


def test_project_updated_at_defaults_to_created_at():
    p = project_from_row({
        "id": "p1", "user_id": "u1", "name": "Site", "status": "active",
        "objective": "Lançar", "created_at": "2024-06-01T10:00:00",
    })
    assert p.status is ProjectStatus.ACTIVE
    assert p.updated_at == p.created_at == datetime(2024, 6, 1, 10, 0)
    assert p.next_action is None


def test_project_timezone_is_normalized_to_naive_utc():
    p = project_from_row({
        "id": "p1", "user_id": "u1", "name": "Site", "status": "paused",
        "objective": "Lançar", "created_at": "2024-06-01T10:00:00Z",
        "updated_at": "2024-06-02T10:00:00-03:00",
    })
    assert p.created_at == datetime(2024, 6, 1, 10, 0)
    assert p.updated_at == datetime(2024, 6, 2, 13, 0)
    assert p.updated_at.tzinfo is None


def test_alert_resolved_defaults_to_false():
    a = alert_from_row({
        "id": "a1", "user_id": "u1", "type": "overload",
        "message": "Muitos projetos", "date": "2024-06-12T08:00:00",
    })
    assert a.type is AlertType.OVERLOAD
    assert a.resolved is False


def test_decision_decodes():
    d = decision_from_row({
        "id": "d1", "user_id": "u1", "context": "ctx", "decision": "Pausar", "date": "2024-06-11",
    })
    assert d.date == date(2024, 6, 11)


def test_invalid_date_raises():
    _raises_value_error(parse_day, "not a date")


def test_decode_all_handles_missing_rows():
    assert decode_all(None, checkin_from_row) == []
    assert len(decode_all([CHECKIN_ROW, CHECKIN_ROW], checkin_from_row)) == 2
