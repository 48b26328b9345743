from __future__ import annotations

"""Schema constants and Pydantic models for notebook records."""

from datetime import datetime, time, timezone
from typing import Any, Iterable, List, Literal, Optional

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

# --- Constants ---

PRIORITIES = ("high", "medium", "low")
ATTEMPT_STATUSES = ("success", "partial", "fail")
RECORD_KINDS = ("mistake", "tip")
TEXT_FIELDS = ["question", "my_answer", "correct_answer", "explanation", "notes", "topic"]

RECORD_DTYPES = {
    "id": "string",
    "kind": "string",
    "subject_id": "string",
    "module_id": "string",
    "question": "string",
    "my_answer": "string",
    "correct_answer": "string",
    "explanation": "string",
    "notes": "string",
    "topic": "string",
    "priority": "string",
    "is_important": "boolean",
    "is_resolved": "boolean",
    "created_at": pd.DatetimeTZDtype(tz="UTC"),
    "scheduled_redo": pd.DatetimeTZDtype(tz="UTC"),
    "sort_order": "Int32",
}

ATTEMPT_DTYPES = {
    "id": "string",
    "record_id": "string",
    "status": "string",
    "notes": "string",
    "image_url": "string",
    "attempted_at": pd.DatetimeTZDtype(tz="UTC"),
    "hidden": "boolean",
}


def _to_utc(v: Optional[datetime]) -> Optional[datetime]:
    if v is None:
        return None
    if v.tzinfo is None:
        return v.replace(tzinfo=timezone.utc)
    return v.astimezone(timezone.utc)


def _to_utc_midnight(v: Optional[datetime]) -> Optional[datetime]:
    # Redo dates carry no time of day: keep the calendar date as written
    if v is None:
        return None
    return datetime.combine(v.date(), time(), tzinfo=timezone.utc)


# --- Pydantic models ---

class _NotebookModel(BaseModel):
    # Backends hand out numeric ids; they are kept as strings
    model_config = ConfigDict(coerce_numbers_to_str=True)

    @classmethod
    def _default_for(cls, v: Any, info: ValidationInfo) -> Any:
        return cls.model_fields[info.field_name].get_default() if v is None else v


class RedoAttempt(_NotebookModel):
    id: str
    status: Literal["success", "partial", "fail"] = "fail"
    notes: str = ""
    image_url: Optional[str] = None
    attempted_at: datetime
    hidden: bool = False

    @field_validator("status", "notes", "hidden", mode="before")
    @classmethod
    def _none_to_default(cls, v: Any, info: ValidationInfo) -> Any:
        return cls._default_for(v, info)

    @field_validator("attempted_at")
    @classmethod
    def _ensure_utc(cls, v: datetime) -> datetime:
        return _to_utc(v)


class Record(_NotebookModel):
    """A mistake note or a tip.

    Every field except ``id`` is optional; absent or null text is the empty
    string, null flags are False, absent timestamps are None.
    ``scheduled_redo`` is a calendar date held as UTC midnight.
    """

    id: str
    kind: Literal["mistake", "tip"] = "mistake"
    subject_id: Optional[str] = None
    module_id: Optional[str] = None
    question: str = ""
    my_answer: str = ""
    correct_answer: str = ""
    explanation: str = ""
    notes: str = ""
    topic: str = ""
    mistake_types: List[str] = Field(default_factory=list)
    priority: str = "medium"
    is_important: bool = False
    is_resolved: bool = False
    created_at: Optional[datetime] = None
    scheduled_redo: Optional[datetime] = None
    redo_attempts: List[RedoAttempt] = Field(default_factory=list)
    sort_order: int = 0

    @field_validator(*TEXT_FIELDS, mode="before")
    @classmethod
    def _none_text(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("kind", "is_important", "is_resolved", "sort_order", mode="before")
    @classmethod
    def _none_to_default(cls, v: Any, info: ValidationInfo) -> Any:
        return cls._default_for(v, info)

    @field_validator("redo_attempts", mode="before")
    @classmethod
    def _none_attempts(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("priority", mode="before")
    @classmethod
    def _normalize_priority(cls, v: Any) -> str:
        # Unrecognized values are kept; ranking treats them as medium
        if v is None:
            return "medium"
        return str(v).strip().lower()

    @field_validator("mistake_types", mode="before")
    @classmethod
    def _dedupe_types(cls, v: Any) -> List[str]:
        if v is None:
            return []
        if isinstance(v, str):
            v = [v]
        seen: List[str] = []
        for label in v:
            label = str(label)
            if label not in seen:
                seen.append(label)
        return seen

    @field_validator("created_at")
    @classmethod
    def _ensure_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _to_utc(v)

    @field_validator("scheduled_redo")
    @classmethod
    def _redo_date(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _to_utc_midnight(v)


class Subject(_NotebookModel):
    id: str
    name: str
    icon: Optional[str] = None
    color: Optional[str] = None
    sort_order: int = 0

    @field_validator("sort_order", mode="before")
    @classmethod
    def _none_to_default(cls, v: Any, info: ValidationInfo) -> Any:
        return cls._default_for(v, info)


class Module(_NotebookModel):
    id: str
    subject_id: Optional[str] = None
    name: str
    module_type: Literal["mistake", "tip"] = "mistake"
    sort_order: int = 0

    @field_validator("module_type", "sort_order", mode="before")
    @classmethod
    def _none_to_default(cls, v: Any, info: ValidationInfo) -> Any:
        return cls._default_for(v, info)


class MistakeType(_NotebookModel):
    id: str
    name: str
    color: Optional[str] = None


# --- Coercion helpers ---

def _coerce(items: Iterable[Any], model: type[BaseModel], what: str) -> list:
    if items is None:
        return []
    if isinstance(items, (str, bytes, dict)):
        raise TypeError(f"{what} must be a list")
    return [model.model_validate(r) if not isinstance(r, model) else r for r in items]


def coerce_records(items: Iterable[Any]) -> List[Record]:
    """Validate records given as models or plain dicts."""
    return _coerce(items, Record, "records")


def coerce_subjects(items: Iterable[Any]) -> List[Subject]:
    return _coerce(items, Subject, "subjects")


def coerce_modules(items: Iterable[Any]) -> List[Module]:
    return _coerce(items, Module, "modules")


def coerce_mistake_types(items: Iterable[Any]) -> List[MistakeType]:
    return _coerce(items, MistakeType, "mistake types")


def append_attempt(record: Record, attempt: RedoAttempt) -> Record:
    """Return a copy of ``record`` with ``attempt`` appended to its history."""
    attempt = RedoAttempt.model_validate(attempt) if not isinstance(attempt, RedoAttempt) else attempt
    return record.model_copy(update={"redo_attempts": [*record.redo_attempts, attempt]})


def visible_attempts(record: Record) -> List[RedoAttempt]:
    return [a for a in record.redo_attempts if not a.hidden]
