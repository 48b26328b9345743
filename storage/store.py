from __future__ import annotations

"""Parquet-backed notebook store using pandas + pyarrow.

One file per table: subjects, modules, mistake types, records and redo
attempts. Attempts are kept in their own table keyed by ``record_id`` and
joined back onto records on load.
"""

import json
from pathlib import Path
from typing import Any, Dict, List

import pandas as pd

from .schema import (
    ATTEMPT_DTYPES,
    RECORD_DTYPES,
    MistakeType,
    Module,
    Record,
    RedoAttempt,
    Subject,
)


SUBJECTS_FILE = "subjects.parquet"
MODULES_FILE = "modules.parquet"
TYPES_FILE = "mistake_types.parquet"
RECORDS_FILE = "records.parquet"
ATTEMPTS_FILE = "redo_attempts.parquet"

SUBJECT_DTYPES = {"id": "string", "name": "string", "icon": "string", "color": "string", "sort_order": "Int32"}
MODULE_DTYPES = {"id": "string", "subject_id": "string", "name": "string", "module_type": "string", "sort_order": "Int32"}
TYPE_DTYPES = {"id": "string", "name": "string", "color": "string"}
# mistake_types is stored as a JSON-encoded list
RECORD_TABLE_DTYPES = {**RECORD_DTYPES, "mistake_types": "string"}

TABLES = {
    SUBJECTS_FILE: SUBJECT_DTYPES,
    MODULES_FILE: MODULE_DTYPES,
    TYPES_FILE: TYPE_DTYPES,
    RECORDS_FILE: RECORD_TABLE_DTYPES,
    ATTEMPTS_FILE: ATTEMPT_DTYPES,
}


def _empty_df(dtypes: Dict[str, Any]) -> pd.DataFrame:
    return pd.DataFrame({k: pd.Series(dtype=v) for k, v in dtypes.items()})


def _fix_dtypes(df: pd.DataFrame, dtypes: Dict[str, Any]) -> pd.DataFrame:
    for col, dt in dtypes.items():
        if col not in df.columns:
            df[col] = pd.Series(pd.NA, index=df.index)
        if isinstance(dt, pd.DatetimeTZDtype):
            df[col] = pd.to_datetime(df[col], utc=True)
        else:
            df[col] = df[col].astype(dt)
    return df[list(dtypes.keys())]


def _read(data_path: Path, name: str) -> pd.DataFrame:
    f = Path(data_path) / name
    if not f.exists():
        return _empty_df(TABLES[name])
    return _fix_dtypes(pd.read_parquet(f, engine="pyarrow"), TABLES[name])


def _write(df: pd.DataFrame, data_path: Path, name: str) -> None:
    f = Path(data_path) / name
    df = _fix_dtypes(df.reset_index(drop=True), TABLES[name])
    df.to_parquet(f, engine="pyarrow", compression="zstd", index=False)


def _py(v: Any) -> Any:
    """Convert pandas scalars back to plain Python values."""
    if v is None or v is pd.NA or v is pd.NaT:
        return None
    if isinstance(v, pd.Timestamp):
        return v.to_pydatetime()
    if hasattr(v, "item"):
        return v.item()
    return v


def _rows(df: pd.DataFrame) -> List[Dict[str, Any]]:
    return [{k: _py(v) for k, v in row.items()} for row in df.to_dict(orient="records")]


def _upsert_row(row: Dict[str, Any], data_path: Path, name: str) -> None:
    df_new = _fix_dtypes(pd.DataFrame([row]), TABLES[name])
    df = _read(data_path, name)
    if not df.empty:
        # drop any existing with same id
        df = df[df["id"] != row["id"]]
        df = pd.concat([df, df_new], ignore_index=True)
    else:
        df = df_new
    _write(df, data_path, name)


def _delete_where(data_path: Path, name: str, col: str, value: str) -> int:
    df = _read(data_path, name)
    keep = df[col].isna() | (df[col] != value)
    removed = int((~keep).sum())
    if removed:
        _write(df[keep], data_path, name)
    return removed


def init_store(data_dir: Path) -> None:
    """Ensure data directory and empty Parquet files with correct schema exist."""
    data_dir = Path(data_dir)
    data_dir.mkdir(parents=True, exist_ok=True)
    for name, dtypes in TABLES.items():
        if not (data_dir / name).exists():
            _empty_df(dtypes).to_parquet(data_dir / name, engine="pyarrow", compression="zstd")


# --- Dictionaries ---

def load_subjects(data_path: Path) -> List[Subject]:
    df = _read(data_path, SUBJECTS_FILE).sort_values(["sort_order", "name"], kind="stable", na_position="last")
    return [Subject.model_validate({k: v for k, v in r.items() if v is not None}) for r in _rows(df)]


def load_modules(data_path: Path) -> List[Module]:
    df = _read(data_path, MODULES_FILE).sort_values(["sort_order", "name"], kind="stable", na_position="last")
    return [Module.model_validate({k: v for k, v in r.items() if v is not None}) for r in _rows(df)]


def load_mistake_types(data_path: Path) -> List[MistakeType]:
    df = _read(data_path, TYPES_FILE).sort_values("name", kind="stable")
    return [MistakeType.model_validate(r) for r in _rows(df)]


def upsert_subject(subject: Subject, data_path: Path) -> None:
    _upsert_row(Subject.model_validate(subject).model_dump(), data_path, SUBJECTS_FILE)


def upsert_module(module: Module, data_path: Path) -> None:
    _upsert_row(Module.model_validate(module).model_dump(), data_path, MODULES_FILE)


def upsert_mistake_type(mistake_type: MistakeType, data_path: Path) -> None:
    _upsert_row(MistakeType.model_validate(mistake_type).model_dump(), data_path, TYPES_FILE)


def delete_subject(subject_id: str, data_path: Path) -> None:
    _delete_where(data_path, SUBJECTS_FILE, "id", subject_id)


def delete_module(module_id: str, data_path: Path) -> None:
    _delete_where(data_path, MODULES_FILE, "id", module_id)


def delete_mistake_type(type_id: str, data_path: Path) -> None:
    _delete_where(data_path, TYPES_FILE, "id", type_id)


# --- Records and redo attempts ---

def _record_row(record: Record) -> Dict[str, Any]:
    row = record.model_dump(exclude={"redo_attempts"})
    row["mistake_types"] = json.dumps(row["mistake_types"])
    return row


def _attempt_row(attempt: RedoAttempt, record_id: str) -> Dict[str, Any]:
    return {**attempt.model_dump(), "record_id": record_id}


def load_records(data_path: Path) -> List[Record]:
    """Load all records, newest first, with redo attempts in the order they were appended."""
    df = _read(data_path, RECORDS_FILE).sort_values("created_at", ascending=False, kind="stable", na_position="last")
    attempts = _read(data_path, ATTEMPTS_FILE)
    by_record: Dict[str, List[Dict[str, Any]]] = {}
    for a in _rows(attempts):
        rid = a.pop("record_id")
        by_record.setdefault(rid, []).append({k: v for k, v in a.items() if v is not None})

    out: List[Record] = []
    for r in _rows(df):
        r["mistake_types"] = json.loads(r["mistake_types"]) if r.get("mistake_types") else []
        r["redo_attempts"] = by_record.get(r["id"], [])
        out.append(Record.model_validate({k: v for k, v in r.items() if v is not None}))
    return out


def get_record(record_id: str, data_path: Path) -> Record:
    for r in load_records(data_path):
        if r.id == record_id:
            return r
    raise KeyError(f"Unknown record: {record_id}")


def upsert_record(record: Record, data_path: Path) -> None:
    """Insert or replace a record row.

    Attempts not yet stored are appended; stored attempts are never rewritten.
    """
    record = Record.model_validate(record) if not isinstance(record, Record) else record
    _upsert_row(_record_row(record), data_path, RECORDS_FILE)
    stored = set(_read(data_path, ATTEMPTS_FILE)["id"].dropna())
    for a in record.redo_attempts:
        if a.id not in stored:
            _append_attempt_row(_attempt_row(a, record.id), data_path)


def update_record(record_id: str, data_path: Path, **fields: Any) -> Record:
    """Apply field-level updates (``scheduled_redo=None`` clears the date)."""
    current = get_record(record_id, data_path)
    fields.pop("id", None)
    fields.pop("redo_attempts", None)
    updated = Record.model_validate({**current.model_dump(), **fields})
    _upsert_row(_record_row(updated), data_path, RECORDS_FILE)
    return updated


def delete_record(record_id: str, data_path: Path) -> None:
    _delete_where(data_path, RECORDS_FILE, "id", record_id)
    _delete_where(data_path, ATTEMPTS_FILE, "record_id", record_id)


def _append_attempt_row(row: Dict[str, Any], data_path: Path) -> None:
    df_new = _fix_dtypes(pd.DataFrame([row]), ATTEMPT_DTYPES)
    df_old = _read(data_path, ATTEMPTS_FILE)
    combined = df_new if df_old.empty else pd.concat([df_old, df_new], ignore_index=True)
    _write(combined, data_path, ATTEMPTS_FILE)


def append_redo_attempt(record_id: str, attempt: RedoAttempt, data_path: Path) -> Record:
    """Append one attempt to a stored record and return the updated record."""
    record = get_record(record_id, data_path)
    attempt = RedoAttempt.model_validate(attempt) if not isinstance(attempt, RedoAttempt) else attempt
    _append_attempt_row(_attempt_row(attempt, record_id), data_path)
    return record.model_copy(update={"redo_attempts": [*record.redo_attempts, attempt]})


def hide_redo_attempt(attempt_id: str, data_path: Path) -> None:
    df = _read(data_path, ATTEMPTS_FILE)
    hit = df["id"] == attempt_id
    if not bool(hit.any()):
        raise KeyError(f"Unknown redo attempt: {attempt_id}")
    df.loc[hit, "hidden"] = True
    _write(df, data_path, ATTEMPTS_FILE)
