from __future__ import annotations

"""Matplotlib charts for weekly activity and per-type / per-subject counts."""

from typing import Optional, Sequence

import numpy as np
import matplotlib.pyplot as plt

from .activity import DayActivity
from .counts import SubjectCount, TypeCount


def _bar(labels: Sequence[str], values: Sequence[int], *, title: str, xlabel: str, save_path) -> None:
    plt.figure()
    x = np.arange(len(labels))
    plt.bar(x, values)
    plt.xticks(ticks=x, labels=labels, rotation=30 if len(labels) > 7 else 0)
    plt.xlabel(xlabel)
    plt.ylabel("Records")
    plt.title(title)
    if save_path:
        plt.savefig(save_path, bbox_inches="tight", dpi=150)
    plt.close()


def plot_weekly_activity(
    activity: Sequence[DayActivity],
    *,
    save_path: Optional[str | bytes | "os.PathLike[str]"] = None,
) -> None:
    if not activity:
        return
    _bar(
        [a.label for a in activity],
        [a.count for a in activity],
        title=f"Activity — week ending {activity[-1].day.isoformat()}",
        xlabel="Day",
        save_path=save_path,
    )


def plot_type_counts(
    counts: Sequence[TypeCount],
    *,
    hide_empty: bool = True,
    save_path: Optional[str | bytes | "os.PathLike[str]"] = None,
) -> None:
    rows = [c for c in counts if c.count > 0] if hide_empty else list(counts)
    if not rows:
        return
    _bar([c.type.name for c in rows], [c.count for c in rows], title="Mistakes by type", xlabel="Type", save_path=save_path)


def plot_subject_counts(
    counts: Sequence[SubjectCount],
    *,
    hide_empty: bool = True,
    save_path: Optional[str | bytes | "os.PathLike[str]"] = None,
) -> None:
    rows = [c for c in counts if c.count > 0] if hide_empty else list(counts)
    if not rows:
        return
    _bar([c.subject.name for c in rows], [c.count for c in rows], title="Records by subject", xlabel="Subject", save_path=save_path)
