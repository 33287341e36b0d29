from pydantic import BaseModel
from typing import Literal, List

class ConflictDetail(BaseModel):
    id: str
    conflict_type: Literal[
        "section_conflict",
        "faculty_conflict",
        "consecutive_limit",
        "lab_split",
    ]
    description: str
    severity: Literal["hard", "soft"]
    section: str | None = None
    teacher: str | None = None
    day: str
    slots: List[int]  # zero-based slot indices involved

class ConflictReport(BaseModel):
    conflicts: List[ConflictDetail]

    @property
    def hard_count(self) -> int:
        return sum(1 for item in self.conflicts if item.severity == "hard")

    @property
    def soft_count(self) -> int:
        return sum(1 for item in self.conflicts if item.severity == "soft")
