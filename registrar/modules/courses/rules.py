import re
from typing import Iterable

from registrar.core.exceptions import DuplicateRecordError, ValidationError
from registrar.db.models import Course

MIN_CREDIT_POINTS = 1
MAX_CREDIT_POINTS = 9


def expected_course_id_pattern(course_name: str) -> re.Pattern:
    """Course IDs are the course name's first letter followed by four digits."""
    return re.compile(rf"^{re.escape(course_name.strip()[0].upper())}\d{{4}}$")


def check_credit_points(value: float) -> None:
    if not float(value * 2).is_integer():
        raise ValidationError(
            "Credit Points must be a whole or half number (e.g., 1, 1.5, 2).", field="creditPoints"
        )
    if value < MIN_CREDIT_POINTS or value > MAX_CREDIT_POINTS:
        raise ValidationError(
            f"Credit Points must be between {MIN_CREDIT_POINTS} and {MAX_CREDIT_POINTS} (e.g., 1, 1.5, ..., 9).",
            field="creditPoints",
        )


def validate_course(course: Course, existing: Iterable[Course] = (), creating: bool = False) -> Course:
    if not course.course_id.strip():
        raise ValidationError("Course ID is required", field="courseId")
    if not course.course_name.strip():
        raise ValidationError("Course Name is required", field="courseName")
    if not (course.professors_name or "").strip():
        raise ValidationError("Professor Name is required", field="professorsName")
    if course.credit_points is None:
        raise ValidationError("Credit Points is required", field="creditPoints")
    check_credit_points(course.credit_points)

    if not course.day_of_week:
        raise ValidationError("Day of Week is required", field="dayOfWeek")
    if course.start_time is None or course.end_time is None:
        raise ValidationError("Start Time and End Time are required", field="startTime")
    if course.starting_date is None or course.end_date is None:
        raise ValidationError("Starting Date and End Date are required", field="startingDate")

    if course.start_time >= course.end_time:
        raise ValidationError("End Time must be after Start Time", field="endTime")
    if course.starting_date >= course.end_date:
        raise ValidationError("End Date must be after Starting Date", field="endDate")

    if creating:
        course_id = course.course_id.strip()
        if not expected_course_id_pattern(course.course_name).match(course_id):
            letter = course.course_name.strip()[0].upper()
            raise ValidationError(
                f"Course ID must start with '{letter}' (from the course name), "
                f"followed by exactly 4 digits, e.g. {letter}1234",
                field="courseId",
            )
        if any(c.course_id == course_id for c in existing):
            raise DuplicateRecordError("Course ID already exists", field="courseId")
        course = course.model_copy(update={"course_id": course_id})

    return course
