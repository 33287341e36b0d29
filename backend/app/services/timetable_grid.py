from __future__ import annotations

import random
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import TypeVar, Union

T = TypeVar("T")


def random_order(items: Iterable[T], rng: random.Random) -> list[T]:
    """Return a uniformly random permutation of ``items``.

    ``random.Random.shuffle`` is a Fisher-Yates shuffle, so every permutation
    is equally likely. The input is never mutated.
    """
    ordered = list(items)
    rng.shuffle(ordered)
    return ordered


class SessionKind(str, Enum):
    theory = "Theory"
    lab = "Lab"


@dataclass(frozen=True)
class SectionAssignment:
    subject: str
    code: str
    teacher: str
    kind: SessionKind
    part: int | None = None
    parts: int | None = None

    @property
    def type_label(self) -> str:
        if self.kind == SessionKind.lab and self.part is not None:
            return f"Lab ({self.part}/{self.parts})"
        return self.kind.value

    def to_payload(self) -> dict:
        return {
            "subject": self.subject,
            "teacher": self.teacher,
            "code": self.code,
            "type": self.type_label,
        }


@dataclass(frozen=True)
class TeacherAssignment:
    subject: str
    code: str
    section: str
    kind: SessionKind

    @property
    def type_label(self) -> str:
        return self.kind.value

    def to_payload(self) -> dict:
        return {
            "section": self.section,
            "code": self.code,
            "subject": self.subject,
            "type": self.type_label,
        }


CellAssignment = Union[SectionAssignment, TeacherAssignment]


class TimetableGrid:
    """Day x slot matrix holding at most one assignment per cell.

    One grid exists per section and one per teacher for the lifetime of a
    single generation run.
    """

    def __init__(self, days: Sequence[str], slot_count: int, *, max_consecutive: int = 3) -> None:
        self.days = tuple(days)
        self.slot_count = slot_count
        self.max_consecutive = max_consecutive
        self._cells: dict[str, list[CellAssignment | None]] = {day: [None] * slot_count for day in self.days}

    def cell(self, day: str, slot: int) -> CellAssignment | None:
        return self._cells[day][slot]

    def is_occupied(self, day: str, slot: int) -> bool:
        return self._cells[day][slot] is not None

    def would_violate_consecutive(self, day: str, slot: int) -> bool:
        """True when filling ``(day, slot)`` would create a run above the limit."""
        row = self._cells[day]
        run = 1
        for index in range(slot - 1, -1, -1):
            if row[index] is None:
                break
            run += 1
        for index in range(slot + 1, self.slot_count):
            if row[index] is None:
                break
            run += 1
        return run > self.max_consecutive

    def place(self, day: str, slot: int, assignment: CellAssignment) -> None:
        # Callers check occupancy first; cells are never silently replaced.
        self._cells[day][slot] = assignment

    def clear(self, day: str, slot: int) -> None:
        self._cells[day][slot] = None

    def occupied_cells(self) -> Iterator[tuple[str, int, CellAssignment]]:
        for day in self.days:
            for slot, assignment in enumerate(self._cells[day]):
                if assignment is not None:
                    yield day, slot, assignment

    def longest_run(self, day: str) -> int:
        longest = current = 0
        for assignment in self._cells[day]:
            current = current + 1 if assignment is not None else 0
            longest = max(longest, current)
        return longest

    def to_payload(self) -> dict[str, list[dict | None]]:
        return {
            day: [assignment.to_payload() if assignment is not None else None for assignment in row]
            for day, row in self._cells.items()
        }
