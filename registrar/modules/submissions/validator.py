"""
Validation and construction of assignment submissions.

An attempt moves Draft -> Validating -> Accepted | Rejected. Rules are
checked in a fixed order and the first failure rejects the attempt with a
message meant for the student; nothing is collected beyond that.
"""

import logging
from collections import defaultdict
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Iterable, List, Optional

from registrar.core.exceptions import NotFoundError, PersistenceError, SubmissionRejected
from registrar.db.models import STATUS_PENDING, Assignment, Student, Submission
from registrar.db.repository import Repository
from registrar.schemas.submissions import SubmissionCreate

logger = logging.getLogger(__name__)


class AttemptState(str, Enum):
    DRAFT = "Draft"
    VALIDATING = "Validating"
    ACCEPTED = "Accepted"
    REJECTED = "Rejected"


def _clean_id(value) -> str:
    return "" if value is None else str(value).strip()


class ParticipantIndex:
    """Reverse index from a participant ID to the submissions they appear in."""

    def __init__(self, submissions: Iterable[Submission]):
        self._by_participant: Dict[str, List[Submission]] = defaultdict(list)
        for submission in submissions:
            participants = {_clean_id(submission.student_id)}
            participants.update(_clean_id(p) for p in submission.partner_ids)
            for participant in participants:
                if participant:
                    self._by_participant[participant].append(submission)

    def submissions_for(self, student_id: str) -> List[Submission]:
        return list(self._by_participant.get(_clean_id(student_id), []))

    def keys_for(self, student_id: str) -> List[str]:
        return [s.key for s in self.submissions_for(student_id)]

    def has_submitted(self, student_id: str, assignment_id: str, course_id: str) -> bool:
        return any(
            _clean_id(s.assignment_id) == _clean_id(assignment_id)
            and _clean_id(s.course_id) == _clean_id(course_id)
            for s in self.submissions_for(student_id)
        )


def validate_participants(
    student_id: str,
    partner_ids: List[str],
    assignment: Assignment,
    students: Iterable[Student],
    existing: Iterable[Submission],
) -> List[str]:
    """
    Check a submission attempt and return its participants, submitter first.

    Raises:
        SubmissionRejected: naming the first rule the attempt breaks
    """
    submitter = _clean_id(student_id)
    partners = [_clean_id(p) for p in partner_ids]

    if not submitter or any(not p for p in partners):
        raise SubmissionRejected("All participant IDs must be filled.", field="partnerIds")

    if submitter in partners:
        raise SubmissionRejected("You cannot add yourself as a partner.", field="partnerIds")

    if len(partners) != len(set(partners)):
        raise SubmissionRejected("Duplicate partner IDs are not allowed.", field="partnerIds")

    if partners and not assignment.is_group:
        raise SubmissionRejected("Partners can only be added to group assignments.", field="partnerIds")

    participants = [submitter] + partners

    enrolled_ids = {
        _clean_id(s.student_id) for s in students if assignment.course_id in s.enrolled_courses
    }
    for participant in participants:
        if participant not in enrolled_ids:
            raise SubmissionRejected(f"ID {participant} is not enrolled in this course.", field="partnerIds")

    if assignment.is_group:
        min_p = assignment.min_participants or 1
        max_p = assignment.max_participants or 1
        if len(participants) < min_p:
            raise SubmissionRejected(f"At least {min_p} participants required (including you).", field="partnerIds")
        if len(participants) > max_p:
            raise SubmissionRejected(f"No more than {max_p} participants allowed.", field="partnerIds")

    index = ParticipantIndex(existing)
    for participant in participants:
        if index.has_submitted(participant, assignment.assignment_id, assignment.course_id):
            raise SubmissionRejected(f"Student ID {participant} has already submitted this assignment.")

    return participants


def build_submission_records(
    participants: List[str],
    assignment: Assignment,
    submission_text: str = "",
    file_name: str = "",
    submitted_at: Optional[datetime] = None,
) -> List[Submission]:
    """One pending record per participant, sharing text and file metadata."""
    submitted_at = submitted_at or datetime.now(timezone.utc)
    records = []
    for participant in participants:
        partners = [p for p in participants if p != participant] if assignment.is_group else []
        record = Submission(
            student_id=participant,
            course_id=assignment.course_id,
            assignment_id=assignment.assignment_id,
            grade=None,
            submission_text=submission_text,
            file_name=file_name,
            status=STATUS_PENDING,
            submitted=True,
            group=assignment.is_group,
            partner_ids=partners,
            submission_date=submitted_at,
        )
        record.submission_id = record.key
        records.append(record)
    return records


class SubmissionAttempt:
    """A single submit action and the state it reached."""

    def __init__(self, request: SubmissionCreate):
        self.request = request
        self.state = AttemptState.DRAFT
        self.reason: Optional[str] = None
        self.participants: List[str] = []

    @property
    def accepted(self) -> bool:
        return self.state == AttemptState.ACCEPTED

    def validate(self, assignment: Assignment, students: Iterable[Student], existing: Iterable[Submission]) -> List[str]:
        self.state = AttemptState.VALIDATING
        try:
            self.participants = validate_participants(
                self.request.student_id, self.request.partner_ids, assignment, students, existing
            )
        except SubmissionRejected as e:
            self.state = AttemptState.REJECTED
            self.reason = e.message
            raise
        self.state = AttemptState.ACCEPTED
        return self.participants

    def records(self, assignment: Assignment, submitted_at: Optional[datetime] = None) -> List[Submission]:
        if not self.accepted:
            raise SubmissionRejected(self.reason or "Submission has not been validated.")
        return build_submission_records(
            self.participants,
            assignment,
            submission_text=self.request.submission_text,
            file_name=self.request.file_name,
            submitted_at=submitted_at,
        )


def submit_assignment(
    repository: Repository, request: SubmissionCreate, submitted_at: Optional[datetime] = None
) -> List[Submission]:
    """
    Validate a submission against the stored records and write one document
    per participant. Records written before a failed write are kept.
    """
    assignment = repository.get_assignment(request.assignment_id)
    if assignment is None:
        raise NotFoundError(f"Assignment {request.assignment_id} not found")

    students = repository.list_students()
    existing = repository.list_submissions(course_id=assignment.course_id, assignment_id=assignment.assignment_id)

    attempt = SubmissionAttempt(request)
    try:
        attempt.validate(assignment, students, existing)
    except SubmissionRejected as e:
        logger.info("Rejected submission for %s by %s: %s", assignment.assignment_id, request.student_id, e.message)
        raise

    records = attempt.records(assignment, submitted_at)
    written = []
    for record in records:
        try:
            written.append(repository.create_submission(record))
        except PersistenceError:
            logger.error(
                "Submission for %s stopped after %d of %d records were written",
                assignment.assignment_id, len(written), len(records),
            )
            raise
    logger.info("Stored %d submission record(s) for %s", len(written), assignment.assignment_id)
    return written
