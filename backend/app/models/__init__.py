from app.models.course import Course  # noqa: F401
from app.models.section import Section  # noqa: F401
from app.models.subject import Subject  # noqa: F401
from app.models.teacher import Teacher, TeacherSubject  # noqa: F401
from app.models.timetable import GeneratedTimetable  # noqa: F401
