from pydantic import BaseModel, Field, field_validator
from typing import Optional, List

from registrar.db.models import coerce_grade, is_invalid_grade


class GradeBucket(BaseModel):
    label: str
    min: float
    max: float
    count: int = 0


class AssignmentStats(BaseModel):
    assignment_id: str
    assignment_name: str
    weight: float
    average: float
    median: float
    submitted_count: int
    graded_count: int
    distribution: List[GradeBucket]


class CourseStatistics(BaseModel):
    course_id: str
    average: float
    median: float
    pass_rate: float
    failing_rate: float
    submission_rate: float
    enrolled_count: int
    submitted_count: int
    graded_count: int
    weight_total: float
    weights_complete: bool
    distribution: List[GradeBucket]
    assignments: List[AssignmentStats]


class CourseGrade(BaseModel):
    course_id: str
    course_name: str
    student_average: Optional[float] = None
    class_average: Optional[float] = None
    top_grade: Optional[float] = None
    submission_rate: float = 0
    final_grade: Optional[int] = None


class StudentSummary(BaseModel):
    student_id: str
    full_name: str
    average: Optional[float] = None
    top_grade: Optional[float] = None
    submission_rate: float = 0
    active_courses: int = 0
    courses: List[CourseGrade] = []


class FinalGradeResponse(BaseModel):
    student_id: str
    course_id: str
    final_grade: Optional[int] = None
    graded_weight: float


class CourseRanking(BaseModel):
    course_id: str
    course_name: str
    value: float


class StudentRanking(BaseModel):
    student_id: str
    full_name: str
    average: float


class AssignmentRanking(BaseModel):
    assignment_id: str
    assignment_name: str
    course_id: str
    late_count: int


class CourseInsights(BaseModel):
    top_performing_course: Optional[CourseRanking] = None
    top_performing_student: Optional[StudentRanking] = None
    most_failed_course: Optional[CourseRanking] = None
    most_late_submissions: Optional[AssignmentRanking] = None


class GradeEntry(BaseModel):
    student_id: str = Field(..., alias="studentId")
    grade: Optional[float] = None  # blank means still pending
    comments: Optional[str] = None

    class Config:
        populate_by_name = True

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


class GradeEntryRequest(BaseModel):
    course_id: str = Field(..., alias="courseId")
    assignment_id: str = Field(..., alias="assignmentId")
    grades: List[GradeEntry]

    class Config:
        populate_by_name = True
