import re
from typing import Iterable

from registrar.core.exceptions import DuplicateRecordError, ValidationError
from registrar.db.models import Student

STUDENT_ID_LENGTH = 9
_LETTERS = re.compile(r"^[A-Za-z]+$")
_DIGITS = re.compile(r"^[0-9]+$")


def check_name(value: str, field: str, label: str) -> None:
    if not value:
        raise ValidationError(f"{label} is required.", field=field)
    if not _LETTERS.match(value):
        raise ValidationError(f"{label} must contain only letters.", field=field)


def validate_student(student: Student, existing: Iterable[Student]) -> Student:
    """Checks a new student record; existing students are used for the uniqueness check."""
    student_id = student.student_id.strip()
    if not student_id:
        raise ValidationError("Student ID is required.", field="studentId")
    if len(student_id) != STUDENT_ID_LENGTH:
        raise ValidationError(f"Student ID must be exactly {STUDENT_ID_LENGTH} digits.", field="studentId")
    if not _DIGITS.match(student_id):
        raise ValidationError("Student ID must contain only numbers.", field="studentId")
    if any(s.student_id == student_id for s in existing):
        raise DuplicateRecordError(f"Student ID {student_id} already exists.", field="studentId")

    check_name(student.first_name, "firstName", "First Name")
    check_name(student.last_name, "lastName", "Last Name")

    # Duplicate course IDs collapse to one enrollment
    enrolled = list(dict.fromkeys(student.enrolled_courses))
    return student.model_copy(update={"student_id": student_id, "enrolled_courses": enrolled})
