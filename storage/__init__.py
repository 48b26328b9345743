from .schema import (
    PRIORITIES,
    ATTEMPT_STATUSES,
    RECORD_KINDS,
    Record,
    RedoAttempt,
    Subject,
    Module,
    MistakeType,
    coerce_records,
    coerce_subjects,
    coerce_modules,
    coerce_mistake_types,
    append_attempt,
    visible_attempts,
)
from .store import (
    init_store,
    load_subjects,
    load_modules,
    load_mistake_types,
    load_records,
    get_record,
    upsert_subject,
    upsert_module,
    upsert_mistake_type,
    upsert_record,
    update_record,
    delete_subject,
    delete_module,
    delete_mistake_type,
    delete_record,
    append_redo_attempt,
    hide_redo_attempt,
)

__all__ = [
    "PRIORITIES",
    "ATTEMPT_STATUSES",
    "RECORD_KINDS",
    "Record",
    "RedoAttempt",
    "Subject",
    "Module",
    "MistakeType",
    "coerce_records",
    "coerce_subjects",
    "coerce_modules",
    "coerce_mistake_types",
    "append_attempt",
    "visible_attempts",
    "init_store",
    "load_subjects",
    "load_modules",
    "load_mistake_types",
    "load_records",
    "get_record",
    "upsert_subject",
    "upsert_module",
    "upsert_mistake_type",
    "upsert_record",
    "update_record",
    "delete_subject",
    "delete_module",
    "delete_mistake_type",
    "delete_record",
    "append_redo_attempt",
    "hide_redo_attempt",
]
