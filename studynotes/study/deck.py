from __future__ import annotations

"""Study deck assembly and a flashcard cursor over it."""

import random
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional

from storage.schema import Record, coerce_records


def build_study_deck(
    records: Iterable[Any],
    module_ids: Iterable[str],
    limit: int,
    rng: Optional[random.Random] = None,
) -> List[Record]:
    """Collect mistakes and tips from the selected modules, shuffle, truncate.

    The input is never reordered in place.
    """
    selected = set(module_ids)
    pool = [r for r in coerce_records(records) if r.module_id is not None and r.module_id in selected]
    (rng or random.Random()).shuffle(pool)
    return pool[: max(0, int(limit))]


@dataclass
class FlashcardSession:
    """Cursor over a deck. Moving past either end stays on the edge card."""

    deck: List[Record]
    index: int = 0
    revealed: bool = False
    seen: set = field(default_factory=set)

    def __post_init__(self) -> None:
        if self.deck:
            self.seen.add(self.index)

    @property
    def current(self) -> Optional[Record]:
        if not self.deck:
            return None
        return self.deck[self.index]

    def flip(self) -> bool:
        self.revealed = not self.revealed
        return self.revealed

    def _move(self, step: int) -> Optional[Record]:
        if not self.deck:
            return None
        self.index = max(0, min(len(self.deck) - 1, self.index + step))
        self.revealed = False
        self.seen.add(self.index)
        return self.current

    def next(self) -> Optional[Record]:
        return self._move(1)

    def previous(self) -> Optional[Record]:
        return self._move(-1)

    @property
    def at_end(self) -> bool:
        return not self.deck or self.index == len(self.deck) - 1

    def progress(self) -> tuple[int, int]:
        """(cards seen, deck size)."""
        return len(self.seen), len(self.deck)
