"""
Typed decoding of persistence rows into entities.

One function per entity. Rows are plain mappings (sqlite rows, JSON objects).
Missing fields, unknown enum values, and non-positive or fractional amounts
raise ValueError here, so nothing downstream has to check them again.
"""

from datetime import date, datetime
from typing import Any, Iterable, List, Mapping

import pandas as pd

from bussola.entities import (
    Alert,
    AlertType,
    CaixaStatus,
    Checkin,
    Decision,
    Energia,
    EntryType,
    EstadoCalculado,
    FinancialEntry,
    Pressao,
    Project,
    ProjectStatus,
)


CHECKIN_FIELDS = {"id", "user_id", "date", "caixa_status", "energia", "pressao"}
ENTRY_FIELDS = {"id", "user_id", "type", "value", "category", "date"}
PROJECT_FIELDS = {"id", "user_id", "name", "status", "objective", "created_at"}
ALERT_FIELDS = {"id", "user_id", "type", "message", "date"}
DECISION_FIELDS = {"id", "user_id", "context", "decision", "date"}


def _require(row: Mapping[str, Any], required: set, entity: str) -> None:
    missing = required - {k for k, v in row.items() if v is not None}
    if missing:
        raise ValueError(f"{entity}: missing required fields: {sorted(missing)}")


def _timestamp(value: Any) -> pd.Timestamp:
    ts = pd.Timestamp(value)
    if pd.isna(ts):
        raise ValueError(f"Invalid date: {value!r}")
    if ts.tzinfo is not None:
        ts = ts.tz_convert(None)
    return ts


def parse_day(value: Any) -> date:
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    return _timestamp(value).date()


def parse_moment(value: Any) -> datetime:
    if isinstance(value, datetime) and value.tzinfo is None:
        return value
    return _timestamp(value).to_pydatetime()


def _minor_units(value: Any) -> int:
    amount = int(value)
    if amount != value:
        raise ValueError(f"Amount must be integer minor units, got {value!r}")
    if amount <= 0:
        raise ValueError(f"Amount must be positive, got {value!r}")
    return amount


def _optional_text(value: Any):
    if value is None or value == "":
        return None
    return str(value)


# ---------------------------------------------------------------------------
# Entity decoders
# ---------------------------------------------------------------------------

def checkin_from_row(row: Mapping[str, Any]) -> Checkin:
    _require(row, CHECKIN_FIELDS, "Checkin")
    estado = row.get("estado_calculado")
    return Checkin(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        date=parse_day(row["date"]),
        caixa_status=CaixaStatus(row["caixa_status"]),
        energia=Energia(row["energia"]),
        pressao=Pressao(row["pressao"]),
        estado_calculado=EstadoCalculado(estado) if estado else None,
    )


def entry_from_row(row: Mapping[str, Any]) -> FinancialEntry:
    _require(row, ENTRY_FIELDS, "FinancialEntry")
    return FinancialEntry(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        type=EntryType(row["type"]),
        value=_minor_units(row["value"]),
        category=str(row["category"]),
        date=parse_day(row["date"]),
        notes=_optional_text(row.get("notes")),
    )


def project_from_row(row: Mapping[str, Any]) -> Project:
    _require(row, PROJECT_FIELDS, "Project")
    created_at = parse_moment(row["created_at"])
    updated = row.get("updated_at")
    return Project(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        name=str(row["name"]),
        status=ProjectStatus(row["status"]),
        objective=str(row["objective"]),
        created_at=created_at,
        updated_at=parse_moment(updated) if updated is not None else created_at,
        next_action=_optional_text(row.get("next_action")),
    )


def alert_from_row(row: Mapping[str, Any]) -> Alert:
    _require(row, ALERT_FIELDS, "Alert")
    return Alert(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        type=AlertType(row["type"]),
        message=str(row["message"]),
        date=parse_moment(row["date"]),
        resolved=bool(row.get("resolved", False)),
    )


def decision_from_row(row: Mapping[str, Any]) -> Decision:
    _require(row, DECISION_FIELDS, "Decision")
    return Decision(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        context=str(row["context"]),
        decision=str(row["decision"]),
        date=parse_day(row["date"]),
    )


def decode_all(rows: Iterable[Mapping[str, Any]], decoder) -> List:
    return [decoder(row) for row in rows or ()]
