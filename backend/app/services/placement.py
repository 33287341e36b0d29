from __future__ import annotations

import random
from dataclasses import dataclass, field

from app.schemas.scheduling import SchedulingConfig
from app.services.timetable_grid import (
    SectionAssignment,
    SessionKind,
    TeacherAssignment,
    TimetableGrid,
    random_order,
)


@dataclass(frozen=True)
class SubjectRequest:
    subject_id: int
    name: str
    code: str
    priority: int | None
    is_lab: bool


@dataclass
class PlacementOutcome:
    required: int
    cells: list[tuple[str, int]] = field(default_factory=list)

    @property
    def placed(self) -> int:
        return len(self.cells)

    @property
    def success(self) -> bool:
        return self.placed >= self.required


class TheoryPlacer:
    """Places the weekly single-period sessions of one subject.

    Candidates are every (day, slot) pair in random order. A candidate is
    taken when both grids are free there and the section day stays within the
    consecutive-class limit. Cells placed before a failure are kept unless the
    caller rolls them back.
    """

    def __init__(self, config: SchedulingConfig, rng: random.Random) -> None:
        self.config = config
        self.random = rng

    def place(
        self,
        subject: SubjectRequest,
        *,
        teacher_name: str,
        section_name: str,
        section_grid: TimetableGrid,
        teacher_grid: TimetableGrid,
    ) -> PlacementOutcome:
        outcome = PlacementOutcome(required=self.config.periods_for_priority(subject.priority))
        candidates = [(day, slot) for day in self.config.days for slot in range(self.config.slot_count)]

        for day, slot in random_order(candidates, self.random):
            if outcome.placed >= outcome.required:
                break
            if section_grid.is_occupied(day, slot):
                continue
            if teacher_grid.is_occupied(day, slot):
                continue
            if section_grid.would_violate_consecutive(day, slot):
                continue

            section_grid.place(
                day,
                slot,
                SectionAssignment(
                    subject=subject.name,
                    code=subject.code,
                    teacher=teacher_name,
                    kind=SessionKind.theory,
                ),
            )
            teacher_grid.place(
                day,
                slot,
                TeacherAssignment(
                    subject=subject.name,
                    code=subject.code,
                    section=section_name,
                    kind=SessionKind.theory,
                ),
            )
            outcome.cells.append((day, slot))

        return outcome

    @staticmethod
    def rollback(outcome: PlacementOutcome, *, section_grid: TimetableGrid, teacher_grid: TimetableGrid) -> None:
        for day, slot in outcome.cells:
            section_grid.clear(day, slot)
            teacher_grid.clear(day, slot)
        outcome.cells.clear()


class LabPlacer:
    """Places one contiguous lab block on a single day, all or nothing.

    The consecutive-class limit is not applied to labs.
    """

    def __init__(self, config: SchedulingConfig, rng: random.Random) -> None:
        self.config = config
        self.random = rng

    def _block_is_free(
        self,
        day: str,
        start: int,
        section_grid: TimetableGrid,
        teacher_grid: TimetableGrid,
    ) -> bool:
        for slot in range(start, start + self.config.lab_slot_size):
            if section_grid.is_occupied(day, slot) or teacher_grid.is_occupied(day, slot):
                return False
        return True

    def place(
        self,
        subject: SubjectRequest,
        *,
        teacher_name: str,
        section_name: str,
        section_grid: TimetableGrid,
        teacher_grid: TimetableGrid,
    ) -> PlacementOutcome:
        size = self.config.lab_slot_size
        outcome = PlacementOutcome(required=size)
        starts = range(self.config.slot_count - size + 1)

        for day in random_order(self.config.days, self.random):
            for start in random_order(starts, self.random):
                if not self._block_is_free(day, start, section_grid, teacher_grid):
                    continue
                for offset in range(size):
                    slot = start + offset
                    section_grid.place(
                        day,
                        slot,
                        SectionAssignment(
                            subject=subject.name,
                            code=subject.code,
                            teacher=teacher_name,
                            kind=SessionKind.lab,
                            part=offset + 1,
                            parts=size,
                        ),
                    )
                    teacher_grid.place(
                        day,
                        slot,
                        TeacherAssignment(
                            subject=subject.name,
                            code=subject.code,
                            section=section_name,
                            kind=SessionKind.lab,
                        ),
                    )
                    outcome.cells.append((day, slot))
                return outcome

        return outcome
