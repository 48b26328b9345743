from __future__ import annotations

"""CLI for studynotes: notebook maintenance, due lists, stats and study decks."""

import argparse
import sys
from datetime import date, datetime, time, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional
from uuid import uuid4

from pydantic import ValidationError

from analytics import (
    AnalyticsConfig,
    SORT_KEYS,
    attempt_outcomes,
    count_by_module,
    count_by_subject,
    count_by_type,
    filter_and_sort,
    plot_subject_counts,
    plot_type_counts,
    plot_weekly_activity,
    summary_stats,
    weekly_activity,
)
from storage import (
    ATTEMPT_STATUSES,
    PRIORITIES,
    RECORD_KINDS,
    MistakeType,
    Module,
    Record,
    RedoAttempt,
    Subject,
    append_redo_attempt,
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

from .. import __version__
from ..config.config import load_config, validate_config
from ..scheduling import REDO_INTERVALS, DueStatus, calendar_date, classify, days_until, resolve_interval
from ..study.deck import FlashcardSession, build_study_deck
from ..util.randomness import make_rng

DUE_LABELS = {
    DueStatus.OVERDUE: "OVERDUE",
    DueStatus.DUE_TODAY: "today",
    DueStatus.DUE_SOON: "soon",
    DueStatus.UPCOMING: "upcoming",
}


def _now(value: Optional[str]) -> datetime:
    # The only place a clock is read; everything downstream takes "now" as input
    if value:
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            raise ValueError(f"Invalid --today date: {value}") from None
    return datetime.now().astimezone()


def _redo_at(d: date) -> datetime:
    return datetime.combine(d, time(), tzinfo=timezone.utc)


def _new_id() -> str:
    return str(uuid4())


def _short(text: str, width: int = 60) -> str:
    text = " ".join((text or "").split())
    return text if len(text) <= width else text[: width - 1] + "…"


def _format_record(r: Record, subjects: Dict[str, Subject], now: datetime, due_soon_days: int) -> str:
    subject = subjects.get(r.subject_id or "")
    subject_name = subject.name if subject else "-"
    status = classify(r.scheduled_redo, now, due_soon_days=due_soon_days, tz=now.tzinfo)
    flags = ("*" if r.is_important else " ") + ("✓" if r.is_resolved else " ")
    due = ""
    if status is not DueStatus.NONE:
        due = f" [{DUE_LABELS[status]} {calendar_date(r.scheduled_redo).isoformat()}]"
    return f"{r.id[:8]} {flags} {subject_name:<12} {r.priority:<6} {_short(r.question or r.topic)}{due}"


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="studynotes", description="Mistake notebook CLI")
    p.add_argument("--config", default=None, help="Path to YAML config")
    p.add_argument("--data-dir", dest="data_dir", default=None, help="Override storage.data_dir")
    p.add_argument("--today", default=None, help="Date (YYYY-MM-DD) used for all date math")
    p.add_argument("--version", action="version", version=f"studynotes {__version__}")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("init")
    sub.add_parser("intervals")

    sp = sub.add_parser("add-subject")
    sp.add_argument("--name", required=True)
    sp.add_argument("--id", default=None)
    sp.add_argument("--icon", default=None)
    sp.add_argument("--color", default=None)
    sp.add_argument("--order", type=int, default=0)

    tp = sub.add_parser("add-type")
    tp.add_argument("--name", required=True)
    tp.add_argument("--id", default=None)
    tp.add_argument("--color", default=None)

    mp = sub.add_parser("add-module")
    mp.add_argument("--subject", required=True)
    mp.add_argument("--name", required=True)
    mp.add_argument("--id", default=None)
    mp.add_argument("--kind", choices=list(RECORD_KINDS), default="mistake")
    mp.add_argument("--order", type=int, default=0)

    ap = sub.add_parser("add")
    ap.add_argument("--question", required=True)
    ap.add_argument("--kind", choices=list(RECORD_KINDS), default="mistake")
    ap.add_argument("--subject", default=None)
    ap.add_argument("--module", default=None)
    ap.add_argument("--my-answer", dest="my_answer", default="")
    ap.add_argument("--correct", dest="correct_answer", default="")
    ap.add_argument("--explanation", default="")
    ap.add_argument("--notes", default="")
    ap.add_argument("--topic", default="")
    ap.add_argument("--type", dest="types", action="append", default=[], help="Mistake type (repeatable)")
    ap.add_argument("--priority", choices=list(PRIORITIES), default="medium")
    ap.add_argument("--important", action="store_true")
    ap.add_argument("--redo", default=None, help="Interval key or label, e.g. 3d or weekend")

    sc = sub.add_parser("schedule")
    sc.add_argument("id")
    g = sc.add_mutually_exclusive_group()
    g.add_argument("--in", dest="interval", default=None, help="Interval key or label")
    g.add_argument("--on", dest="on", default=None, help="Explicit date YYYY-MM-DD")
    g.add_argument("--clear", action="store_true")

    rs = sub.add_parser("resolve")
    rs.add_argument("id")
    rs.add_argument("--undo", action="store_true")

    at = sub.add_parser("attempt")
    at.add_argument("id")
    at.add_argument("--status", choices=list(ATTEMPT_STATUSES), default="success")
    at.add_argument("--notes", default="")
    at.add_argument("--image-url", dest="image_url", default=None)

    lp = sub.add_parser("list")
    lp.add_argument("--search", default=None)
    lp.add_argument("--subject", default=None)
    lp.add_argument("--type", dest="type_id", default=None)
    lp.add_argument("--sort", choices=list(SORT_KEYS), default="newest")
    lp.add_argument("--important", action="store_true")

    sub.add_parser("due")
    sub.add_parser("stats")

    st = sub.add_parser("study")
    st.add_argument("--module", dest="modules", action="append", default=[], help="Module id (repeatable)")
    st.add_argument("--count", type=int, default=None)
    st.add_argument("--seed", type=int, default=None)
    st.add_argument("--interactive", action="store_true")

    rp = sub.add_parser("report")
    rp.add_argument("--out", default=None)
    return p


def _resolve_record_id(prefix: str, records: List[Record]) -> str:
    hits = [r.id for r in records if r.id == prefix] or [r.id for r in records if r.id.startswith(prefix)]
    if len(hits) != 1:
        raise KeyError(f"No unique record matches '{prefix}'")
    return hits[0]


def _run_flashcards(deck: List[Record]) -> None:
    session = FlashcardSession(deck)
    while session.current is not None:
        card = session.current
        _, total = session.progress()
        print(f"\n[{session.index + 1}/{total}] {card.question or card.topic}")
        cmd = input("(enter=reveal, n=next, p=prev, q=quit) ").strip().lower()
        if cmd == "q":
            break
        if cmd == "p":
            session.previous()
        elif cmd == "n":
            if session.at_end:
                break
            session.next()
        elif session.flip():
            print(f"  answer: {card.correct_answer or '-'}")
            if card.explanation:
                print(f"  why: {card.explanation}")
            if card.notes:
                print(f"  notes: {card.notes}")
    seen, total = session.progress()
    print(f"\nReviewed {seen}/{total} cards.")


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    cfg = validate_config(load_config(args.config))
    data_dir = Path(args.data_dir or cfg["storage"]["data_dir"])
    acfg = AnalyticsConfig(due_soon_days=cfg["schedule"]["due_soon_days"])

    try:
        now = _now(args.today)
        return _dispatch(args, cfg, acfg, data_dir, now, calendar_date(now))
    except (KeyError, ValueError, ValidationError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2


def _dispatch(args: argparse.Namespace, cfg: Dict[str, Any], acfg: AnalyticsConfig, data_dir: Path, now: datetime, today) -> int:
    if args.cmd == "init":
        init_store(data_dir)
        print(f"Store ready at: {data_dir.resolve()}")
        return 0

    if args.cmd == "intervals":
        for iv in REDO_INTERVALS:
            print(f"{iv.key:<8} {iv.label:<14} -> {resolve_interval(iv.key, today).isoformat()}")
        return 0

    init_store(data_dir)

    if args.cmd == "add-subject":
        s = Subject(id=args.id or _new_id(), name=args.name, icon=args.icon, color=args.color, sort_order=args.order)
        upsert_subject(s, data_dir)
        print(f"Subject {s.name}: {s.id}")
        return 0

    if args.cmd == "add-type":
        t = MistakeType(id=args.id or _new_id(), name=args.name, color=args.color)
        upsert_mistake_type(t, data_dir)
        print(f"Mistake type {t.name}: {t.id}")
        return 0

    if args.cmd == "add-module":
        m = Module(id=args.id or _new_id(), subject_id=args.subject, name=args.name, module_type=args.kind, sort_order=args.order)
        upsert_module(m, data_dir)
        print(f"Module {m.name}: {m.id}")
        return 0

    if args.cmd == "add":
        redo = resolve_interval(args.redo, today) if args.redo else None
        r = Record(
            id=_new_id(),
            kind=args.kind,
            subject_id=args.subject,
            module_id=args.module,
            question=args.question,
            my_answer=args.my_answer,
            correct_answer=args.correct_answer,
            explanation=args.explanation,
            notes=args.notes,
            topic=args.topic,
            mistake_types=args.types,
            priority=args.priority,
            is_important=args.important,
            created_at=now,
            scheduled_redo=_redo_at(redo) if redo else None,
        )
        upsert_record(r, data_dir)
        print(f"Added {r.kind}: {r.id}")
        return 0

    records = load_records(data_dir)

    if args.cmd == "schedule":
        rid = _resolve_record_id(args.id, records)
        if args.clear:
            when = None
        elif args.on:
            when = calendar_date(args.on)
            if when is None:
                raise ValueError(f"Invalid date: {args.on}")
        else:
            when = resolve_interval(args.interval or cfg["schedule"]["default_interval"], today)
        updated = update_record(rid, data_dir, scheduled_redo=_redo_at(when) if when else None)
        print(f"{updated.id[:8]} redo: {when.isoformat() if when else 'cleared'}")
        return 0

    if args.cmd == "resolve":
        rid = _resolve_record_id(args.id, records)
        updated = update_record(rid, data_dir, is_resolved=not args.undo)
        print(f"{updated.id[:8]} resolved: {updated.is_resolved}")
        return 0

    if args.cmd == "attempt":
        rid = _resolve_record_id(args.id, records)
        attempt = RedoAttempt(id=_new_id(), status=args.status, notes=args.notes, image_url=args.image_url, attempted_at=now)
        updated = append_redo_attempt(rid, attempt, data_dir)
        print(f"{updated.id[:8]} attempts: {len(updated.redo_attempts)}")
        return 0

    subjects = {s.id: s for s in load_subjects(data_dir)}

    if args.cmd == "list":
        rows = filter_and_sort(
            records,
            search_text=args.search,
            subject_id=args.subject,
            type_id=args.type_id,
            sort_key=args.sort,
            important_only=args.important,
        )
        for r in rows:
            print(_format_record(r, subjects, now, acfg.due_soon_days))
        print(f"{len(rows)} of {len(records)} records")
        return 0

    if args.cmd == "due":
        rows = filter_and_sort([r for r in records if not r.is_resolved], sort_key="due")
        shown = 0
        for r in rows:
            status = classify(r.scheduled_redo, now, due_soon_days=acfg.due_soon_days, tz=now.tzinfo)
            if status in (DueStatus.NONE, DueStatus.UPCOMING):
                continue
            delta = days_until(r.scheduled_redo, now, now.tzinfo)
            print(f"{DUE_LABELS[status]:<8} {delta:+d}d  {_format_record(r, subjects, now, acfg.due_soon_days)}")
            shown += 1
        if not shown:
            print("Nothing due.")
        return 0

    if args.cmd == "stats":
        stats = summary_stats(records, now, acfg)
        print(f"Total: {stats.total}  Completed: {stats.completed_count} ({stats.completion_rate:.0%})")
        print(f"Overdue: {stats.overdue_count}  Due today: {stats.due_today_count}  Due soon: {stats.due_soon_count}")
        print(f"Added in the last {acfg.rolling_window_days} days: {stats.this_week_count}")
        print("\nBy type:")
        for c in count_by_type(records, load_mistake_types(data_dir)):
            if c.count:
                print(f"  {c.type.name}: {c.count}")
        print("By subject:")
        for c in count_by_subject(records, subjects.values()):
            print(f"  {c.subject.name}: {c.count}")
        print("Last 7 days:")
        print("  " + "  ".join(f"{a.label} {a.count}" for a in weekly_activity(records, now)))
        outcomes = attempt_outcomes(records)
        print("Redo attempts: " + ", ".join(f"{k} {v}" for k, v in outcomes.items()))
        return 0

    if args.cmd == "study":
        if not args.modules:
            print("Modules (pick with --module ID):")
            for c in count_by_module(records, load_modules(data_dir)):
                print(f"  {c.module.id:<10} {c.module.name} [{c.module.module_type}]: {c.count}")
            return 0
        count = args.count if args.count is not None else cfg["study"]["item_count"]
        deck = build_study_deck(records, args.modules, count, make_rng(args.seed))
        if not deck:
            print("Please select at least one module with content")
            return 1
        if args.interactive:
            _run_flashcards(deck)
        else:
            for i, r in enumerate(deck, 1):
                print(f"{i:>3}. [{r.kind}] {_short(r.question or r.topic)}")
        return 0

    if args.cmd == "report":
        outdir = Path(args.out or cfg["report"]["output_dir"])
        outdir.mkdir(exist_ok=True, parents=True)
        plot_weekly_activity(weekly_activity(records, now), save_path=outdir / "weekly_activity.png")
        plot_type_counts(count_by_type(records, load_mistake_types(data_dir)), save_path=outdir / "mistakes_by_type.png")
        plot_subject_counts(count_by_subject(records, subjects.values()), save_path=outdir / "records_by_subject.png")
        print(f"Reports saved to: {outdir.resolve()}")
        return 0

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
