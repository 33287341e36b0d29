from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.core.exceptions import ResourceNotFoundError
from app.models.course import Course
from app.models.section import Section
from app.models.subject import Subject
from app.models.teacher import Teacher, TeacherSubject
from app.schemas.roster import CourseRosterIn, RosterPayload, SubjectIn, TeacherIn

logger = logging.getLogger(__name__)


def _find_or_create_course(db: Session, payload: CourseRosterIn) -> Course:
    course = (
        db.execute(
            select(Course).where(
                func.lower(Course.course_name) == payload.course.lower(),
                func.lower(Course.branch_name) == payload.branch.lower(),
                Course.semester == payload.semester,
            )
        )
        .scalars()
        .first()
    )
    if course is None:
        course = Course(course_name=payload.course, branch_name=payload.branch, semester=payload.semester)
        db.add(course)
    else:
        course.course_name = payload.course
        course.branch_name = payload.branch
    db.flush()
    return course


def _upsert_sections(db: Session, course: Course, labels: list[str]) -> None:
    existing = {
        label.upper()
        for label in db.execute(select(Section.section_label).where(Section.course_id == course.id)).scalars()
    }
    for raw_label in labels:
        label = raw_label.strip().upper()
        if not label or label in existing:
            continue
        db.add(Section(course_id=course.id, section_label=label))
        existing.add(label)


def _upsert_subjects(db: Session, course: Course, subjects: list[SubjectIn]) -> dict[str, int]:
    by_code = {
        (item.code or "").upper(): item
        for item in db.execute(select(Subject).where(Subject.course_id == course.id)).scalars()
    }
    subject_ids_by_name: dict[str, int] = {}
    for payload in subjects:
        if payload.is_blank:
            continue
        subject = by_code.get(payload.code.upper())
        if subject is None:
            subject = Subject(course_id=course.id, code=payload.code)
            db.add(subject)
            by_code[payload.code.upper()] = subject
        subject.name = payload.name
        subject.priority = payload.priority
        subject.type = payload.type
        db.flush()
        subject_ids_by_name[payload.name] = subject.id
    return subject_ids_by_name


def _resolve_subject_id(db: Session, course: Course, name: str, known: dict[str, int]) -> int | None:
    if name in known:
        return known[name]
    subject_id = (
        db.execute(
            select(Subject.id).where(Subject.course_id == course.id, func.lower(Subject.name) == name.lower())
        )
        .scalars()
        .first()
    )
    if subject_id is not None:
        known[name] = subject_id
    return subject_id


def _upsert_teachers(db: Session, course: Course, teachers: list[TeacherIn], subject_ids: dict[str, int]) -> None:
    by_name = {item.name.lower(): item for item in db.execute(select(Teacher)).scalars()}
    for payload in teachers:
        if not payload.name:
            continue
        teacher = by_name.get(payload.name.lower())
        if teacher is None:
            teacher = Teacher(name=payload.name, email=payload.email or "")
            db.add(teacher)
            db.flush()
            by_name[payload.name.lower()] = teacher
        elif payload.email:
            teacher.email = payload.email

        for subject_name in payload.subjects:
            subject_id = _resolve_subject_id(db, course, subject_name, subject_ids)
            if subject_id is None:
                logger.warning(
                    "Skipping teacher mapping | teacher=%s | subject=%s | course_id=%s | reason=subject_not_found",
                    payload.name,
                    subject_name,
                    course.id,
                )
                continue
            if db.get(TeacherSubject, (teacher.id, subject_id)) is None:
                db.add(TeacherSubject(teacher_id=teacher.id, subject_id=subject_id))
                db.flush()


def save_course_roster(db: Session, payload: CourseRosterIn) -> int:
    """Look up or create the course, then add whatever roster rows are missing.

    Runs as one transaction: nothing is committed if any step fails.
    """
    try:
        course = _find_or_create_course(db, payload)
        _upsert_sections(db, course, payload.sectionNames)
        subject_ids = _upsert_subjects(db, course, payload.subjects)
        _upsert_teachers(db, course, payload.teachers, subject_ids)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("Saved course roster | course_id=%s", course.id)
    return course.id


def load_course_roster(db: Session, course_id: int) -> RosterPayload:
    if db.get(Course, course_id) is None:
        raise ResourceNotFoundError("Course", course_id)

    section_names = list(
        db.execute(select(Section.section_label).where(Section.course_id == course_id).order_by(Section.id)).scalars()
    )
    subjects = [
        SubjectIn(name=item.name, code=item.code, priority=item.priority, type=item.type)
        for item in db.execute(select(Subject).where(Subject.course_id == course_id).order_by(Subject.id)).scalars()
    ]
    rows = db.execute(
        select(Teacher.name, Subject.name)
        .join(TeacherSubject, TeacherSubject.teacher_id == Teacher.id)
        .join(Subject, Subject.id == TeacherSubject.subject_id)
        .where(Subject.course_id == course_id)
        .order_by(Teacher.id, Subject.id)
    ).all()

    subjects_by_teacher: dict[str, list[str]] = {}
    for teacher_name, subject_name in rows:
        subjects_by_teacher.setdefault(teacher_name, []).append(subject_name)

    return RosterPayload(
        sectionNames=section_names,
        subjects=subjects,
        teachers=[TeacherIn(name=name, subjects=names) for name, names in subjects_by_teacher.items()],
    )
