from collections.abc import Generator

from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.exceptions import ConfigurationError
from app.db.session import SessionLocal
from app.schemas.scheduling import SchedulingConfig


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_scheduling_config() -> SchedulingConfig:
    try:
        return SchedulingConfig.from_settings(get_settings())
    except ValidationError as exc:
        raise ConfigurationError(
            "Invalid scheduling settings",
            details={"errors": [f"{'.'.join(map(str, err['loc']))}: {err['msg']}" for err in exc.errors()]},
        ) from exc
