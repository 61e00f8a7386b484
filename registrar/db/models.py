from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Literal
from datetime import date, datetime, time

AssignmentType = Literal["Individual", "Group"]
Semester = Literal["A", "B", "Summer"]

STATUS_PENDING = "Pending"
STATUS_GRADED = "Graded"


def submission_key(student_id: str, course_id: str, assignment_id: str) -> str:
    """Composite business key of a submission document."""
    return f"{student_id}_{course_id}_{assignment_id}"


def coerce_grade(value) -> Optional[float]:
    """
    Normalise a stored grade to a float, or None when nothing numeric was recorded.
    Blank strings, non-numeric strings and booleans count as "no grade".
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        try:
            return float(value)
        except ValueError:
            return None
    return None


def is_invalid_grade(value) -> bool:
    """True for input that is neither blank nor numeric, e.g. "abc" or True."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return False
    return coerce_grade(value) is None


# Student document
class Student(BaseModel):
    student_id: str = Field(..., alias="studentId")
    first_name: str = Field(..., alias="firstName")
    last_name: str = Field(..., alias="lastName")
    enrolled_courses: List[str] = Field(default_factory=list, alias="enrolledCourses")

    class Config:
        populate_by_name = True

    @field_validator("enrolled_courses", mode="before")
    @classmethod
    def _courses_or_empty(cls, value):
        return value if value is not None else []

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


# Course document
class Course(BaseModel):
    course_id: str = Field(..., alias="courseId")
    course_name: str = Field(..., alias="courseName")
    professors_name: Optional[str] = Field(None, alias="professorsName")
    semester: Semester = "A"
    starting_date: Optional[date] = Field(None, alias="startingDate")
    end_date: Optional[date] = Field(None, alias="endDate")
    day_of_week: Optional[str] = Field(None, alias="dayOfWeek")
    start_time: Optional[time] = Field(None, alias="startTime")
    end_time: Optional[time] = Field(None, alias="endTime")
    credit_points: Optional[float] = Field(None, alias="creditPoints")
    description: Optional[str] = None

    class Config:
        populate_by_name = True


# Assignment document
class Assignment(BaseModel):
    assignment_id: str = Field(..., alias="assignmentId")
    course_id: str = Field(..., alias="courseId")
    assignment_name: str = Field(..., alias="assignmentName")
    assignment_type: AssignmentType = Field("Individual", alias="assignmentType")
    weight: float = 0  # percentage of the course grade
    min_participants: Optional[int] = Field(None, alias="minParticipants")
    max_participants: Optional[int] = Field(None, alias="maxParticipants")
    due_date: Optional[date] = Field(None, alias="dueDate")
    description: Optional[str] = None
    file_name: Optional[str] = Field(None, alias="fileName")

    class Config:
        populate_by_name = True

    @property
    def is_group(self) -> bool:
        return self.assignment_type == "Group"


# Submission document, one per participant
class Submission(BaseModel):
    submission_id: Optional[str] = Field(None, alias="submissionId")
    student_id: str = Field(..., alias="studentId")
    course_id: str = Field(..., alias="courseId")
    assignment_id: str = Field(..., alias="assignmentId")
    grade: Optional[float] = None
    comments: str = ""
    submission_text: str = Field("", alias="submissionText")
    file_name: str = Field("", alias="fileName")
    submitted: bool = False
    status: str = STATUS_PENDING
    group: bool = False
    partner_ids: List[str] = Field(default_factory=list, alias="partnerIds")
    submission_date: Optional[datetime] = Field(None, alias="submissionDate")

    class Config:
        populate_by_name = True

    @field_validator("grade", mode="before")
    @classmethod
    def _grade_or_none(cls, value):
        return coerce_grade(value)

    @field_validator("comments", "submission_text", "file_name", mode="before")
    @classmethod
    def _text_or_blank(cls, value):
        return value if value is not None else ""

    @field_validator("partner_ids", mode="before")
    @classmethod
    def _partners_or_empty(cls, value):
        return value if value is not None else []

    @property
    def key(self) -> str:
        return submission_key(self.student_id, self.course_id, self.assignment_id)

    @property
    def is_graded(self) -> bool:
        return self.grade is not None

    def involves(self, student_id: str) -> bool:
        """True when the student is the primary submitter or a listed partner."""
        student_id = str(student_id).strip()
        return str(self.student_id).strip() == student_id or student_id in self.partner_ids
