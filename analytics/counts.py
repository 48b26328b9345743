from __future__ import annotations

"""Per-type, per-subject and per-module record counts."""

from dataclasses import dataclass
from typing import Any, Iterable, List

from storage.schema import (
    MistakeType,
    Module,
    Subject,
    coerce_mistake_types,
    coerce_modules,
    coerce_subjects,
)
from .prepare import records_frame


@dataclass(frozen=True)
class TypeCount:
    type: MistakeType
    count: int


@dataclass(frozen=True)
class SubjectCount:
    subject: Subject
    count: int


@dataclass(frozen=True)
class ModuleCount:
    module: Module
    count: int


def count_by_type(records: Iterable[Any], types: Iterable[Any]) -> List[TypeCount]:
    """Count records tagged with each mistake type, in dictionary order.

    A record's labels may reference a type by id or by name. Types with no
    matches are kept with count 0.
    """
    labels = records_frame(records)["mistake_types"]
    out: List[TypeCount] = []
    for t in coerce_mistake_types(types):
        keys = {t.id, t.name}
        n = int(sum(1 for ls in labels if not keys.isdisjoint(ls)))
        out.append(TypeCount(type=t, count=n))
    return out


def count_by_subject(records: Iterable[Any], subjects: Iterable[Any]) -> List[SubjectCount]:
    counts = records_frame(records)["subject_id"].value_counts()
    return [SubjectCount(subject=s, count=int(counts.get(s.id, 0))) for s in coerce_subjects(subjects)]


def count_by_module(records: Iterable[Any], modules: Iterable[Any]) -> List[ModuleCount]:
    counts = records_frame(records)["module_id"].value_counts()
    return [ModuleCount(module=m, count=int(counts.get(m.id, 0))) for m in coerce_modules(modules)]
