from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.models.course import Course
from app.schemas.course import CourseOut, CourseSavedOut
from app.schemas.roster import CourseRosterIn
from app.services.roster import save_course_roster

router = APIRouter()


@router.get("/", response_model=list[CourseOut])
def list_courses(db: Session = Depends(get_db)) -> list[CourseOut]:
    return list(db.execute(select(Course).order_by(Course.id)).scalars())


@router.post("/", response_model=CourseSavedOut, status_code=status.HTTP_200_OK)
def save_course(payload: CourseRosterIn, db: Session = Depends(get_db)) -> CourseSavedOut:
    course_id = save_course_roster(db, payload)
    return CourseSavedOut(courseId=course_id)
