from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, Field, field_validator, model_validator

from app.core.config import DEFAULT_DAYS, DEFAULT_PERIOD_REQUIREMENTS, DEFAULT_SLOTS

if TYPE_CHECKING:
    from app.core.config import Settings


class SchedulingConfig(BaseModel):
    """Calendar axes and placement rules for one generation run."""

    days: list[str] = Field(default_factory=lambda: list(DEFAULT_DAYS), min_length=1)
    slots: list[str] = Field(default_factory=lambda: list(DEFAULT_SLOTS), min_length=1)
    max_consecutive_classes: int = Field(default=3, ge=1)
    lab_slot_size: int = Field(default=2, ge=1)
    period_requirements: dict[int, int] = Field(default_factory=lambda: dict(DEFAULT_PERIOD_REQUIREMENTS))
    default_periods: int = Field(default=1, ge=1)
    random_seed: int | None = Field(default=None, ge=0)
    rollback_failed_theory: bool = False

    model_config = {"frozen": True}

    @field_validator("days", "slots")
    @classmethod
    def validate_unique_labels(cls, value: list[str]) -> list[str]:
        labels = [item.strip() for item in value]
        if any(not label for label in labels):
            raise ValueError("Labels must not be blank")
        if len(set(labels)) != len(labels):
            raise ValueError("Labels must be unique")
        return labels

    @field_validator("period_requirements")
    @classmethod
    def validate_period_requirements(cls, value: dict[int, int]) -> dict[int, int]:
        for priority, periods in value.items():
            if periods < 1:
                raise ValueError(f"Priority {priority} must require at least one period")
        return value

    @model_validator(mode="after")
    def validate_lab_fits_day(self) -> "SchedulingConfig":
        if self.lab_slot_size > len(self.slots):
            raise ValueError("lab_slot_size cannot exceed the number of slots per day")
        return self

    @property
    def slot_count(self) -> int:
        return len(self.slots)

    def periods_for_priority(self, priority: int | None) -> int:
        if priority is None:
            return self.default_periods
        return self.period_requirements.get(priority, self.default_periods)

    @classmethod
    def from_settings(cls, settings: "Settings") -> "SchedulingConfig":
        return cls(
            days=settings.schedule_days,
            slots=settings.schedule_slots,
            max_consecutive_classes=settings.max_consecutive_classes,
            lab_slot_size=settings.lab_slot_size,
            period_requirements=settings.period_requirements,
            default_periods=settings.default_periods,
            random_seed=settings.random_seed,
            rollback_failed_theory=settings.rollback_failed_theory,
        )
