from functools import lru_cache
import json
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


BACKEND_DIR = Path(__file__).resolve().parents[2]
BACKEND_ENV_FILE = BACKEND_DIR / ".env"

DEFAULT_DAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]
DEFAULT_SLOTS = [
    "8:00-8:55",
    "8:55-9:50",
    "10:10-11:05",
    "11:05-12:00",
    "12:00-12:55",
    "12:55-1:50",
    "2:10-3:05",
    "3:05-4:00",
    "4:00-4:55",
    "4:55-5:50",
]
DEFAULT_PERIOD_REQUIREMENTS = {1: 4, 2: 3, 3: 2, 4: 1}


def _split_list(value: str | list[str]) -> list[str]:
    if isinstance(value, str):
        stripped = value.strip()
        if stripped.startswith("["):
            try:
                parsed = json.loads(stripped)
                if isinstance(parsed, list):
                    return [str(item).strip() for item in parsed if str(item).strip()]
            except json.JSONDecodeError:
                pass
        return [item.strip() for item in value.split(",") if item.strip()]
    return value


class Settings(BaseSettings):
    # Resolve to backend/.env so `uvicorn --app-dir backend` works from any cwd.
    model_config = SettingsConfigDict(env_file=str(BACKEND_ENV_FILE), env_file_encoding="utf-8")

    project_name: str = "WeekGrid API"
    api_prefix: str = "/api"
    environment: str = "development"

    database_url: str = f"sqlite+pysqlite:///{BACKEND_DIR / 'weekgrid.db'}"

    max_request_size_bytes: int = 2_500_000

    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    # Scheduling defaults; a request may still pass its own SchedulingConfig.
    schedule_days: list[str] = DEFAULT_DAYS
    schedule_slots: list[str] = DEFAULT_SLOTS
    max_consecutive_classes: int = 3
    lab_slot_size: int = 2
    period_requirements: dict[int, int] = DEFAULT_PERIOD_REQUIREMENTS
    default_periods: int = 1
    random_seed: int | None = None
    rollback_failed_theory: bool = False

    @field_validator("cors_origins", "schedule_days", "schedule_slots", mode="before")
    @classmethod
    def split_list_values(cls, value: str | list[str]) -> list[str]:
        return _split_list(value)

    @field_validator("environment")
    @classmethod
    def normalize_environment(cls, value: str) -> str:
        return (value or "development").strip().lower()


@lru_cache
def get_settings() -> Settings:
    return Settings()
