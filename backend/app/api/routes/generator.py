import logging
from time import perf_counter

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_scheduling_config
from app.core.exceptions import ResourceNotFoundError
from app.models.timetable import GeneratedTimetable
from app.schemas.roster import RosterPayload
from app.schemas.scheduling import SchedulingConfig
from app.schemas.timetable import (
    GeneratedTimetablePayload,
    GenerateTimetableRequest,
    GenerateTimetableResponse,
    StoredTimetableOut,
)
from app.services.conflict_service import TimetableAuditService
from app.services.roster import load_course_roster
from app.services.timetable_generator import TimetableGenerator

router = APIRouter()
logger = logging.getLogger(__name__)


def _run_generation(roster: RosterPayload, config: SchedulingConfig) -> GenerateTimetableResponse:
    result = TimetableGenerator(config).generate(roster)
    timetable = result.to_schema()
    report = TimetableAuditService(timetable, config).detect_conflicts()
    if report.hard_count:
        logger.warning("Generated timetable failed audit | hard_conflicts=%s", report.hard_count)
    return GenerateTimetableResponse(
        timetable=timetable,
        hardConflicts=report.hard_count,
        softConflicts=report.soft_count,
    )


@router.post("/", response_model=GenerateTimetableResponse)
def generate_timetable(
    payload: GenerateTimetableRequest,
    db: Session = Depends(get_db),
    config: SchedulingConfig = Depends(get_scheduling_config),
) -> GenerateTimetableResponse:
    started = perf_counter()
    logger.info("TIMETABLE GENERATION START | course_id=%s", payload.courseId)
    roster = load_course_roster(db, payload.courseId)
    response = _run_generation(roster, config)

    try:
        db.add(GeneratedTimetable(course_id=payload.courseId, data=response.timetable.model_dump(mode="json")))
        db.commit()
    except Exception as exc:
        db.rollback()
        logger.exception("TIMETABLE GENERATION PERSIST FAILED | course_id=%s", payload.courseId)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not store generated timetable",
        ) from exc

    logger.info(
        "TIMETABLE GENERATION COMPLETE | course_id=%s | sections=%s | unplaced=%s | elapsed_ms=%.1f",
        payload.courseId,
        len(response.timetable.sections),
        len(response.timetable.unplaced),
        (perf_counter() - started) * 1000,
    )
    return response


@router.post("/preview", response_model=GenerateTimetableResponse)
def preview_timetable(
    payload: RosterPayload,
    config: SchedulingConfig = Depends(get_scheduling_config),
) -> GenerateTimetableResponse:
    return _run_generation(payload, config)


@router.get("/{course_id}/latest", response_model=StoredTimetableOut)
def latest_timetable(course_id: int, db: Session = Depends(get_db)) -> StoredTimetableOut:
    record = (
        db.execute(
            select(GeneratedTimetable)
            .where(GeneratedTimetable.course_id == course_id)
            .order_by(GeneratedTimetable.id.desc())
        )
        .scalars()
        .first()
    )
    if record is None:
        raise ResourceNotFoundError("GeneratedTimetable", course_id)
    return StoredTimetableOut(
        id=record.id,
        courseId=record.course_id,
        createdAt=record.created_at,
        timetable=GeneratedTimetablePayload.model_validate(record.data),
    )
