from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class SectionCell(BaseModel):
    subject: str
    teacher: str
    code: str
    type: str


class TeacherCell(BaseModel):
    section: str
    code: str
    subject: str
    type: Literal["Theory", "Lab"]


class SectionTimetable(BaseModel):
    sectionName: str
    timetable: dict[str, list[SectionCell | None]]


class UnplacedSubject(BaseModel):
    section: str
    subject: str
    code: str
    reason: Literal["no_eligible_teacher", "placement_failed"]


class GeneratedTimetablePayload(BaseModel):
    sections: list[SectionTimetable] = Field(default_factory=list)
    teacherSchedules: dict[str, dict[str, list[TeacherCell | None]]] = Field(default_factory=dict)
    unplaced: list[UnplacedSubject] = Field(default_factory=list)


class GenerateTimetableRequest(BaseModel):
    courseId: int = Field(ge=1)


class GenerateTimetableResponse(BaseModel):
    ok: bool = True
    timetable: GeneratedTimetablePayload
    hardConflicts: int = 0
    softConflicts: int = 0


class StoredTimetableOut(BaseModel):
    id: int
    courseId: int
    createdAt: datetime | None = None
    timetable: GeneratedTimetablePayload
