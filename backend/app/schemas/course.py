from pydantic import BaseModel


class CourseOut(BaseModel):
    id: int
    course_name: str
    branch_name: str
    semester: int

    model_config = {"from_attributes": True}


class CourseSavedOut(BaseModel):
    ok: bool = True
    courseId: int
