from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class SubjectIn(BaseModel):
    name: str = Field(max_length=200)
    code: str = Field(max_length=50)
    priority: int | None = None
    type: str | None = Field(default=None, max_length=50)

    @field_validator("name", "code")
    @classmethod
    def strip_text(cls, value: str) -> str:
        return value.strip()

    @property
    def is_blank(self) -> bool:
        return not self.name or not self.code

    @property
    def is_lab(self) -> bool:
        return "lab" in (self.type or "").lower()


class TeacherIn(BaseModel):
    name: str = Field(max_length=200)
    subjects: list[str] = Field(default_factory=list)
    email: str | None = Field(default=None, max_length=255)

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        return value.strip()

    @field_validator("subjects")
    @classmethod
    def clean_subjects(cls, value: list[str]) -> list[str]:
        return [item.strip() for item in value if item and item.strip()]


# Blank rows are dropped rather than rejected, for sections, subjects and teachers alike.
def _drop_blank_sections(value: list[str]) -> list[str]:
    return [item.strip() for item in value if item and item.strip()]


def _drop_blank_subjects(value: list[SubjectIn]) -> list[SubjectIn]:
    return [item for item in value if not item.is_blank]


def _drop_blank_teachers(value: list[TeacherIn]) -> list[TeacherIn]:
    return [item for item in value if item.name]


class RosterPayload(BaseModel):
    """Input of one generation run: sections, subjects and teacher eligibility."""

    sectionNames: list[str] = Field(default_factory=list)
    subjects: list[SubjectIn] = Field(default_factory=list)
    teachers: list[TeacherIn] = Field(default_factory=list)

    @field_validator("sectionNames")
    @classmethod
    def clean_section_names(cls, value: list[str]) -> list[str]:
        return _drop_blank_sections(value)

    @field_validator("subjects")
    @classmethod
    def clean_subjects(cls, value: list[SubjectIn]) -> list[SubjectIn]:
        return _drop_blank_subjects(value)

    @field_validator("teachers")
    @classmethod
    def clean_teachers(cls, value: list[TeacherIn]) -> list[TeacherIn]:
        return _drop_blank_teachers(value)


class CourseRosterIn(BaseModel):
    course: str = Field(min_length=1, max_length=200)
    branch: str = Field(min_length=1, max_length=200)
    semester: int = Field(ge=1, le=20)
    sectionNames: list[str] = Field(default_factory=list)
    subjects: list[SubjectIn] = Field(default_factory=list)
    teachers: list[TeacherIn] = Field(default_factory=list)

    @field_validator("course", "branch")
    @classmethod
    def strip_text(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("Value must not be blank")
        return stripped

    @field_validator("sectionNames")
    @classmethod
    def clean_section_names(cls, value: list[str]) -> list[str]:
        return _drop_blank_sections(value)

    @field_validator("subjects")
    @classmethod
    def clean_subjects(cls, value: list[SubjectIn]) -> list[SubjectIn]:
        return _drop_blank_subjects(value)

    @field_validator("teachers")
    @classmethod
    def clean_teachers(cls, value: list[TeacherIn]) -> list[TeacherIn]:
        return _drop_blank_teachers(value)
