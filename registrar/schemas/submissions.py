from pydantic import BaseModel, Field, field_validator
from typing import Optional, List

from registrar.db.models import coerce_grade, is_invalid_grade


class SubmissionCreate(BaseModel):
    student_id: str = Field(..., alias="studentId")
    assignment_id: str = Field(..., alias="assignmentId")
    partner_ids: List[str] = Field(default_factory=list, alias="partnerIds")
    submission_text: str = Field("", alias="submissionText")
    file_name: str = Field("", alias="fileName")

    class Config:
        populate_by_name = True


class SubmissionUpdate(BaseModel):
    grade: Optional[float] = None
    comments: Optional[str] = None

    @field_validator("grade", mode="before")
    @classmethod
    def _blank_grade(cls, value):
        if is_invalid_grade(value):
            raise ValueError("Grade must be between 0 and 100")
        return coerce_grade(value)

    @field_validator("grade")
    @classmethod
    def _grade_in_range(cls, value):
        if value is not None and not 0 <= value <= 100:
            raise ValueError("Grade must be between 0 and 100")
        return value
