from pydantic import BaseModel


class TeacherOut(BaseModel):
    id: int
    name: str
    email: str

    model_config = {"from_attributes": True}
