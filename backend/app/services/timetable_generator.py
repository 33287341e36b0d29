from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from time import perf_counter

from app.schemas.roster import RosterPayload
from app.schemas.scheduling import SchedulingConfig
from app.schemas.timetable import GeneratedTimetablePayload, UnplacedSubject
from app.services.placement import LabPlacer, SubjectRequest, TheoryPlacer
from app.services.timetable_grid import TimetableGrid, random_order

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TeacherRecord:
    teacher_id: int
    name: str
    subject_ids: frozenset[int]


@dataclass
class GenerationResult:
    sections: list[tuple[str, TimetableGrid]] = field(default_factory=list)
    teacher_schedules: dict[str, TimetableGrid] = field(default_factory=dict)
    unplaced: list[UnplacedSubject] = field(default_factory=list)

    def section_grid(self, section_name: str) -> TimetableGrid:
        for name, grid in self.sections:
            if name == section_name:
                return grid
        raise KeyError(section_name)

    def to_payload(self) -> dict:
        return {
            "sections": [
                {"sectionName": name, "timetable": grid.to_payload()}
                for name, grid in self.sections
            ],
            "teacherSchedules": {
                name: grid.to_payload() for name, grid in self.teacher_schedules.items()
            },
            "unplaced": [item.model_dump() for item in self.unplaced],
        }

    def to_schema(self) -> GeneratedTimetablePayload:
        return GeneratedTimetablePayload.model_validate(self.to_payload())


def build_subject_requests(roster: RosterPayload) -> list[SubjectRequest]:
    return [
        SubjectRequest(
            subject_id=index,
            name=subject.name,
            code=subject.code,
            priority=subject.priority,
            is_lab=subject.is_lab,
        )
        for index, subject in enumerate(roster.subjects)
        if not subject.is_blank
    ]


def build_teacher_records(roster: RosterPayload, subjects: list[SubjectRequest]) -> list[TeacherRecord]:
    """Assign integer ids to teachers, merging roster rows that share a name."""
    names_by_teacher: dict[str, set[str]] = {}
    for teacher in roster.teachers:
        if not teacher.name:
            continue
        names_by_teacher.setdefault(teacher.name, set()).update(teacher.subjects)

    records: list[TeacherRecord] = []
    for teacher_id, (name, subject_names) in enumerate(names_by_teacher.items()):
        subject_ids = frozenset(item.subject_id for item in subjects if item.name in subject_names)
        records.append(TeacherRecord(teacher_id=teacher_id, name=name, subject_ids=subject_ids))
    return records


def priority_order(subjects: list[SubjectRequest]) -> list[SubjectRequest]:
    # Stable: equal priorities keep roster order. A missing priority sorts as 0.
    return sorted(subjects, key=lambda item: item.priority if item.priority is not None else 0)


class TimetableGenerator:
    """Greedy, randomized, non-backtracking weekly timetable generator.

    Every call to :meth:`generate` works on freshly allocated grids. Teacher
    grids are shared by all sections of that call so a teacher is never
    booked twice in the same slot, but nothing is shared between calls.
    """

    def __init__(self, config: SchedulingConfig | None = None, *, rng: random.Random | None = None) -> None:
        self.config = config or SchedulingConfig()
        self.random = rng if rng is not None else random.Random(self.config.random_seed)
        self.theory_placer = TheoryPlacer(self.config, self.random)
        self.lab_placer = LabPlacer(self.config, self.random)

    def _new_grid(self) -> TimetableGrid:
        return TimetableGrid(
            self.config.days,
            self.config.slot_count,
            max_consecutive=self.config.max_consecutive_classes,
        )

    def _place_subject(
        self,
        subject: SubjectRequest,
        *,
        section_name: str,
        section_grid: TimetableGrid,
        candidates: list[TeacherRecord],
        teacher_grids: list[TimetableGrid],
    ) -> bool:
        placer = self.lab_placer if subject.is_lab else self.theory_placer
        for teacher in random_order(candidates, self.random):
            teacher_grid = teacher_grids[teacher.teacher_id]
            outcome = placer.place(
                subject,
                teacher_name=teacher.name,
                section_name=section_name,
                section_grid=section_grid,
                teacher_grid=teacher_grid,
            )
            if outcome.success:
                return True
            logger.debug(
                "Placement attempt failed | section=%s | subject=%s | teacher=%s | placed=%s/%s",
                section_name,
                subject.name,
                teacher.name,
                outcome.placed,
                outcome.required,
            )
            if outcome.cells and self.config.rollback_failed_theory:
                TheoryPlacer.rollback(outcome, section_grid=section_grid, teacher_grid=teacher_grid)
        return False

    def generate(self, roster: RosterPayload) -> GenerationResult:
        started = perf_counter()
        subjects = build_subject_requests(roster)
        teachers = build_teacher_records(roster, subjects)
        teacher_grids = [self._new_grid() for _ in teachers]
        ordered_subjects = priority_order(subjects)

        result = GenerationResult()
        for section_name in roster.sectionNames:
            section_grid = self._new_grid()

            for subject in ordered_subjects:
                candidates = [teacher for teacher in teachers if subject.subject_id in teacher.subject_ids]
                if not candidates:
                    logger.warning("No teachers for subject %s (section %s)", subject.name, section_name)
                    result.unplaced.append(
                        UnplacedSubject(
                            section=section_name,
                            subject=subject.name,
                            code=subject.code,
                            reason="no_eligible_teacher",
                        )
                    )
                    continue

                placed = self._place_subject(
                    subject,
                    section_name=section_name,
                    section_grid=section_grid,
                    candidates=candidates,
                    teacher_grids=teacher_grids,
                )
                if not placed:
                    logger.warning("Could not place subject %s (section %s)", subject.name, section_name)
                    result.unplaced.append(
                        UnplacedSubject(
                            section=section_name,
                            subject=subject.name,
                            code=subject.code,
                            reason="placement_failed",
                        )
                    )

            result.sections.append((section_name, section_grid))

        result.teacher_schedules = {teacher.name: teacher_grids[teacher.teacher_id] for teacher in teachers}
        logger.info(
            "TIMETABLE GENERATION DONE | sections=%s | subjects=%s | teachers=%s | unplaced=%s | elapsed_ms=%.1f",
            len(result.sections),
            len(subjects),
            len(teachers),
            len(result.unplaced),
            (perf_counter() - started) * 1000,
        )
        return result
