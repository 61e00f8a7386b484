from pydantic import BaseModel, Field
from typing import Optional, List


class StudentCreate(BaseModel):
    student_id: str = Field(..., alias="studentId")
    first_name: str = Field(..., alias="firstName")
    last_name: str = Field(..., alias="lastName")
    enrolled_courses: List[str] = Field(default_factory=list, alias="enrolledCourses")

    class Config:
        populate_by_name = True  # Allow both snake_case and camelCase


class StudentUpdate(BaseModel):
    first_name: Optional[str] = Field(None, alias="firstName")
    last_name: Optional[str] = Field(None, alias="lastName")

    class Config:
        populate_by_name = True


class EnrollmentRequest(BaseModel):
    student_id: str = Field(..., alias="studentId")

    class Config:
        populate_by_name = True
