import re
from collections import defaultdict
from typing import Dict, List, Tuple

from app.schemas.conflict import ConflictDetail, ConflictReport
from app.schemas.scheduling import SchedulingConfig
from app.schemas.timetable import GeneratedTimetablePayload, SectionCell

LAB_PART_PATTERN = re.compile(r"^Lab \((\d+)/(\d+)\)$")


class TimetableAuditService:
    """Re-checks a generated timetable against the placement rules.

    Useful for payloads that were stored, edited or merged after generation.
    """

    def __init__(self, payload: GeneratedTimetablePayload, config: SchedulingConfig):
        self.payload = payload
        self.config = config

    def detect_conflicts(self) -> ConflictReport:
        conflicts: List[ConflictDetail] = []
        conflicts.extend(self._faculty_conflicts())
        conflicts.extend(self._section_conflicts())
        for section in self.payload.sections:
            for day, row in section.timetable.items():
                conflicts.extend(self._consecutive_conflicts(section.sectionName, day, row))
                conflicts.extend(self._lab_split_conflicts(section.sectionName, day, row))
        return ConflictReport(conflicts=conflicts)

    def _faculty_conflicts(self) -> List[ConflictDetail]:
        bookings: Dict[Tuple[str, str, int], List[str]] = defaultdict(list)
        for section in self.payload.sections:
            for day, row in section.timetable.items():
                for slot, cell in enumerate(row):
                    if cell is not None:
                        bookings[(cell.teacher, day, slot)].append(section.sectionName)

        conflicts = []
        for (teacher, day, slot), sections in bookings.items():
            if len(sections) < 2:
                continue
            conflicts.append(ConflictDetail(
                id=f"fac-{teacher}-{day}-{slot}",
                conflict_type="faculty_conflict",
                description=f"Teacher {teacher} booked for sections {', '.join(sections)} at the same time",
                severity="hard",
                teacher=teacher,
                day=day,
                slots=[slot],
            ))
        return conflicts

    def _section_conflicts(self) -> List[ConflictDetail]:
        conflicts = []
        schedules = self.payload.teacherSchedules
        for section in self.payload.sections:
            for day, row in section.timetable.items():
                for slot, cell in enumerate(row):
                    if cell is None:
                        continue
                    teacher_schedule = schedules.get(cell.teacher) or {}
                    teacher_row = teacher_schedule.get(day) or []
                    mirror = teacher_row[slot] if slot < len(teacher_row) else None
                    if mirror is not None and mirror.section == section.sectionName and mirror.code == cell.code:
                        continue
                    conflicts.append(ConflictDetail(
                        id=f"sec-{section.sectionName}-{day}-{slot}",
                        conflict_type="section_conflict",
                        description=(
                            f"Section {section.sectionName} has {cell.code} with {cell.teacher} "
                            "but the teacher schedule does not match"
                        ),
                        severity="hard",
                        section=section.sectionName,
                        teacher=cell.teacher,
                        day=day,
                        slots=[slot],
                    ))
        return conflicts

    def _consecutive_conflicts(self, section_name: str, day: str, row: List[SectionCell | None]) -> List[ConflictDetail]:
        conflicts = []
        run: List[int] = []
        # Sentinel None closes a trailing run.
        for slot, cell in enumerate(list(row) + [None]):
            if cell is not None:
                run.append(slot)
                continue
            if len(run) > self.config.max_consecutive_classes:
                conflicts.append(ConflictDetail(
                    id=f"run-{section_name}-{day}-{run[0]}",
                    conflict_type="consecutive_limit",
                    description=(
                        f"Section {section_name} has {len(run)} consecutive classes on {day} "
                        f"(limit {self.config.max_consecutive_classes})"
                    ),
                    severity="soft",
                    section=section_name,
                    day=day,
                    slots=list(run),
                ))
            run = []
        return conflicts

    def _lab_split_conflicts(self, section_name: str, day: str, row: List[SectionCell | None]) -> List[ConflictDetail]:
        conflicts = []
        covered: set[int] = set()
        for slot, cell in enumerate(row):
            if cell is None or slot in covered:
                continue
            match = LAB_PART_PATTERN.match(cell.type)
            if match is None:
                continue
            part, parts = int(match.group(1)), int(match.group(2))
            block = list(range(slot, slot + parts))
            intact = part == 1 and block[-1] < len(row) and all(
                row[index] is not None
                and row[index].code == cell.code
                and row[index].teacher == cell.teacher
                and row[index].type == f"Lab ({offset + 1}/{parts})"
                for offset, index in enumerate(block)
            )
            if intact:
                covered.update(block)
                continue
            conflicts.append(ConflictDetail(
                id=f"lab-{section_name}-{day}-{slot}",
                conflict_type="lab_split",
                description=f"Lab {cell.code} in section {section_name} is not a contiguous block on {day}",
                severity="hard",
                section=section_name,
                teacher=cell.teacher,
                day=day,
                slots=[slot],
            ))
            covered.add(slot)
        return conflicts
