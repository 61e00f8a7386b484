"""
Keeps a student's enrolled-course list consistent with course rosters.

The pure helpers return updated copies; the functions at the bottom apply
them through the repository. Multi-record updates are not transactional:
records written before a failure stay written.
"""

import logging
from collections import Counter
from typing import Dict, Iterable, List

from registrar.core.exceptions import NotFoundError
from registrar.db.models import Assignment, Student, Submission
from registrar.db.repository import Repository

logger = logging.getLogger(__name__)


def enroll(student: Student, course_id: str) -> Student:
    """Add the course; enrolling twice leaves the list unchanged."""
    if course_id in student.enrolled_courses:
        return student
    return student.model_copy(update={"enrolled_courses": student.enrolled_courses + [course_id]})


def unenroll(student: Student, course_id: str) -> Student:
    if course_id not in student.enrolled_courses:
        return student
    remaining = [c for c in student.enrolled_courses if c != course_id]
    return student.model_copy(update={"enrolled_courses": remaining})


def remove_deleted_courses(students: Iterable[Student], course_ids: Iterable[str]) -> List[Student]:
    """
    Drop every deleted course ID from every student in one pass.
    Only students whose list changed are returned.
    """
    deleted = set(course_ids)
    changed = []
    for student in students:
        remaining = [c for c in student.enrolled_courses if c not in deleted]
        if len(remaining) != len(student.enrolled_courses):
            changed.append(student.model_copy(update={"enrolled_courses": remaining}))
    return changed


def roster(students: Iterable[Student], course_id: str) -> List[Student]:
    return sorted(
        (s for s in students if course_id in s.enrolled_courses),
        key=lambda s: (s.last_name.lower(), s.first_name.lower()),
    )


def enrollment_counts(students: Iterable[Student]) -> Dict[str, int]:
    counts = Counter()
    for student in students:
        counts.update(set(student.enrolled_courses))
    return dict(counts)


def assignments_for_student(assignments: Iterable[Assignment], student: Student) -> List[Assignment]:
    """Assignments of every course the student is enrolled in."""
    enrolled = set(student.enrolled_courses)
    return [a for a in assignments if a.course_id in enrolled]


def submissions_to_cascade(submissions: Iterable[Submission], student_ids: Iterable[str]) -> List[Submission]:
    # Partner references to the deleted students in other records are left as they are.
    deleted = {str(s).strip() for s in student_ids}
    return [s for s in submissions if str(s.student_id).strip() in deleted]


# --- repository-backed operations ---


def _require_student(repository: Repository, student_id: str) -> Student:
    student = repository.get_student(student_id)
    if student is None:
        raise NotFoundError(f"Student {student_id} not found")
    return student


def enroll_student(repository: Repository, student_id: str, course_id: str) -> Student:
    if repository.get_course(course_id) is None:
        raise NotFoundError(f"Course {course_id} not found")

    student = _require_student(repository, student_id)
    updated = enroll(student, course_id)
    if updated is student:
        return student
    logger.info("Enrolling %s in %s", student_id, course_id)
    return repository.update_student(updated)


def unenroll_student(repository: Repository, student_id: str, course_id: str) -> Student:
    student = _require_student(repository, student_id)
    updated = unenroll(student, course_id)
    if updated is student:
        raise NotFoundError(f"Student {student_id} is not enrolled in {course_id}")
    logger.info("Unenrolling %s from %s", student_id, course_id)
    return repository.update_student(updated)


def delete_courses(repository: Repository, course_ids: List[str]) -> List[Student]:
    """Delete courses, then remove them from every student's enrolled list."""
    repository.delete_courses(course_ids)

    changed = remove_deleted_courses(repository.list_students(), course_ids)
    for student in changed:
        repository.update_student(student)
    logger.info("Deleted %d course(s); %d student(s) unenrolled", len(course_ids), len(changed))
    return changed


def delete_students(repository: Repository, student_ids: List[str]) -> List[Submission]:
    """Delete students together with the submissions they made themselves."""
    cascaded = submissions_to_cascade(repository.list_submissions(), student_ids)
    for submission in cascaded:
        repository.delete_submission(submission.key)

    repository.delete_students(student_ids)
    logger.info("Deleted %d student(s) and %d submission(s)", len(student_ids), len(cascaded))
    return cascaded
