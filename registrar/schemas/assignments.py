from pydantic import BaseModel, Field
from typing import Optional
from datetime import date

from registrar.db.models import AssignmentType


class AssignmentCreate(BaseModel):
    assignment_id: Optional[str] = Field(None, alias="assignmentId")  # generated when omitted
    course_id: str = Field(..., alias="courseId")
    assignment_name: str = Field(..., alias="assignmentName")
    assignment_type: AssignmentType = Field(..., alias="assignmentType")
    weight: float
    min_participants: Optional[int] = Field(None, alias="minParticipants")
    max_participants: Optional[int] = Field(None, alias="maxParticipants")
    due_date: date = Field(..., alias="dueDate")
    description: Optional[str] = None
    file_name: Optional[str] = Field(None, alias="fileName")

    class Config:
        populate_by_name = True


class AssignmentUpdate(BaseModel):
    assignment_name: Optional[str] = Field(None, alias="assignmentName")
    assignment_type: Optional[AssignmentType] = Field(None, alias="assignmentType")
    weight: Optional[float] = None
    min_participants: Optional[int] = Field(None, alias="minParticipants")
    max_participants: Optional[int] = Field(None, alias="maxParticipants")
    due_date: Optional[date] = Field(None, alias="dueDate")
    description: Optional[str] = None
    file_name: Optional[str] = Field(None, alias="fileName")

    class Config:
        populate_by_name = True
