import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from registrar.core.exceptions import NotFoundError, ValidationError
from registrar.db.models import STATUS_GRADED, STATUS_PENDING, Submission, submission_key
from registrar.db.repository import Repository
from registrar.schemas.grades import GradeEntryRequest

logger = logging.getLogger(__name__)


def _grade_fields(grade: Optional[float], comments: Optional[str] = None) -> Dict:
    fields = {
        "grade": grade,
        "status": STATUS_GRADED if grade is not None else STATUS_PENDING,
    }
    if comments is not None:
        fields["comments"] = comments
    return fields


def _propagate_to_partners(repository: Repository, submission: Submission, grade: Optional[float]) -> List[Submission]:
    """Group members share one grade: copy it onto each partner's own record."""
    if not submission.group or not submission.partner_ids:
        return []

    updated = []
    for partner_id in submission.partner_ids:
        key = submission_key(partner_id, submission.course_id, submission.assignment_id)
        try:
            updated.append(repository.update_submission(key, _grade_fields(grade)))
        except NotFoundError:
            logger.warning("Group partner %s has no record for %s", partner_id, submission.assignment_id)
    return updated


def grade_submission(
    repository: Repository, key: str, grade: Optional[float], comments: Optional[str] = None
) -> Submission:
    """Set the grade of one submission and of its group partners' records."""
    submission = repository.update_submission(key, _grade_fields(grade, comments))
    _propagate_to_partners(repository, submission, grade)
    return submission


def record_grades(repository: Repository, request: GradeEntryRequest) -> List[Submission]:
    """
    Bulk grade entry for one assignment. Students without a submission get a
    record created for them; a blank grade leaves the record pending.
    """
    assignment = repository.get_assignment(request.assignment_id)
    if assignment is None or assignment.course_id != request.course_id:
        raise NotFoundError(f"Assignment {request.assignment_id} not found in course {request.course_id}")

    enrolled = {
        s.student_id for s in repository.list_students() if request.course_id in s.enrolled_courses
    }
    for entry in request.grades:
        if entry.student_id not in enrolled:
            raise ValidationError(
                f"Student {entry.student_id} is not enrolled in this course.", field="grades"
            )

    existing = {
        s.student_id: s
        for s in repository.list_submissions(course_id=request.course_id, assignment_id=request.assignment_id)
    }

    saved = []
    for entry in request.grades:
        current = existing.get(entry.student_id)
        if current is not None:
            saved.append(grade_submission(repository, current.key, entry.grade, entry.comments))
            continue

        record = Submission(
            student_id=entry.student_id,
            course_id=request.course_id,
            assignment_id=request.assignment_id,
            grade=entry.grade,
            comments=entry.comments or "",
            submitted=entry.grade is not None,
            status=STATUS_GRADED if entry.grade is not None else STATUS_PENDING,
            submission_date=datetime.now(timezone.utc),
        )
        record.submission_id = record.key
        saved.append(repository.create_submission(record))

    logger.info("Recorded %d grade(s) for %s", len(saved), request.assignment_id)
    return saved
