import tempfile
import unittest
from datetime import datetime, timezone
from pathlib import Path

from storage import (
    MistakeType,
    Module,
    Record,
    RedoAttempt,
    Subject,
    append_redo_attempt,
    delete_record,
    delete_subject,
    get_record,
    hide_redo_attempt,
    init_store,
    load_mistake_types,
    load_modules,
    load_records,
    load_subjects,
    update_record,
    upsert_mistake_type,
    upsert_module,
    upsert_record,
    upsert_subject,
)


class StoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.data = Path(self._tmp.name) / "data"
        init_store(self.data)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_init_creates_empty_tables(self) -> None:
        self.assertTrue((self.data / "records.parquet").exists())
        self.assertEqual(load_records(self.data), [])
        self.assertEqual(load_subjects(self.data), [])

    def test_dictionaries_round_trip(self) -> None:
        upsert_subject(Subject(id="phys", name="Physics", sort_order=1), self.data)
        upsert_subject(Subject(id="math", name="Math", icon="∑", sort_order=0), self.data)
        upsert_module(Module(id="m1", subject_id="math", name="Limits"), self.data)
        upsert_mistake_type(MistakeType(id="t1", name="Careless"), self.data)

        self.assertEqual([s.id for s in load_subjects(self.data)], ["math", "phys"])
        self.assertEqual(load_subjects(self.data)[0].icon, "∑")
        self.assertEqual(load_modules(self.data)[0].module_type, "mistake")
        self.assertEqual(load_mistake_types(self.data)[0].name, "Careless")

        upsert_subject(Subject(id="phys", name="Physics II", sort_order=1), self.data)
        self.assertEqual([s.name for s in load_subjects(self.data)], ["Math", "Physics II"])
        delete_subject("phys", self.data)
        self.assertEqual([s.id for s in load_subjects(self.data)], ["math"])

    def test_record_round_trip(self) -> None:
        rec = Record(
            id="r1",
            subject_id="math",
            question="lim x->0 sin x / x",
            mistake_types=["t1", "Concept"],
            priority="high",
            is_important=True,
            created_at=datetime(2024, 1, 5, 9, 30, tzinfo=timezone.utc),
            scheduled_redo=datetime(2024, 1, 8, tzinfo=timezone.utc),
        )
        upsert_record(rec, self.data)
        loaded = get_record("r1", self.data)
        self.assertEqual(loaded.mistake_types, ["t1", "Concept"])
        self.assertEqual(loaded.created_at, rec.created_at)
        self.assertEqual(loaded.scheduled_redo, rec.scheduled_redo)
        self.assertTrue(loaded.is_important)
        self.assertIsNone(loaded.module_id)

    def test_records_load_newest_first(self) -> None:
        upsert_record(Record(id="old", created_at="2024-01-01"), self.data)
        upsert_record(Record(id="new", created_at="2024-01-09"), self.data)
        upsert_record(Record(id="undated"), self.data)
        self.assertEqual([r.id for r in load_records(self.data)], ["new", "old", "undated"])

    def test_update_can_clear_scheduled_redo(self) -> None:
        upsert_record(Record(id="r1", scheduled_redo="2024-01-08"), self.data)
        updated = update_record("r1", self.data, scheduled_redo=None, is_resolved=True)
        self.assertIsNone(updated.scheduled_redo)
        reloaded = get_record("r1", self.data)
        self.assertIsNone(reloaded.scheduled_redo)
        self.assertTrue(reloaded.is_resolved)

    def test_update_unknown_record(self) -> None:
        with self.assertRaises(KeyError):
            update_record("missing", self.data, is_resolved=True)

    def test_attempts_append_in_order_and_hide(self) -> None:
        upsert_record(Record(id="r1"), self.data)
        append_redo_attempt("r1", RedoAttempt(id="a2", status="success", attempted_at="2024-01-03"), self.data)
        append_redo_attempt("r1", RedoAttempt(id="a1", status="fail", attempted_at="2024-01-02"), self.data)
        self.assertEqual([a.id for a in get_record("r1", self.data).redo_attempts], ["a2", "a1"])

        hide_redo_attempt("a1", self.data)
        attempts = get_record("r1", self.data).redo_attempts
        self.assertEqual([a.id for a in attempts], ["a2", "a1"])
        self.assertFalse(attempts[0].hidden)
        self.assertTrue(attempts[1].hidden)
        with self.assertRaises(KeyError):
            hide_redo_attempt("nope", self.data)

    def test_upsert_does_not_rewrite_stored_attempts(self) -> None:
        upsert_record(Record(id="r1"), self.data)
        append_redo_attempt("r1", RedoAttempt(id="a1", status="fail", notes="first", attempted_at="2024-01-02"), self.data)
        edited = get_record("r1", self.data)
        edited.redo_attempts[0].notes = "rewritten"
        upsert_record(edited, self.data)
        self.assertEqual(get_record("r1", self.data).redo_attempts[0].notes, "first")

    def test_delete_record_removes_attempts(self) -> None:
        upsert_record(Record(id="r1"), self.data)
        upsert_record(Record(id="r2"), self.data)
        append_redo_attempt("r1", RedoAttempt(id="a1", status="fail", attempted_at="2024-01-02"), self.data)
        delete_record("r1", self.data)
        self.assertEqual([r.id for r in load_records(self.data)], ["r2"])
        upsert_record(Record(id="r1"), self.data)
        self.assertEqual(get_record("r1", self.data).redo_attempts, [])


if __name__ == "__main__":
    unittest.main()
