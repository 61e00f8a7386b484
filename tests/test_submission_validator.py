# tests/test_submission_validator.py

from datetime import datetime, timezone

import pytest

from registrar.core.exceptions import NotFoundError, PersistenceError, SubmissionRejected
from registrar.db.models import Submission
from registrar.modules.submissions.validator import (
    AttemptState,
    ParticipantIndex,
    SubmissionAttempt,
    build_submission_records,
    submit_assignment,
    validate_participants,
)
from registrar.schemas.submissions import SubmissionCreate

SUBMITTED_AT = datetime(2025, 3, 20, 12, 0, tzinfo=timezone.utc)


def rejection(student_id, partner_ids, assignment, students, existing=()):
    with pytest.raises(SubmissionRejected) as excinfo:
        validate_participants(student_id, partner_ids, assignment, students, existing)
    return excinfo.value.message


def test_individual_submission_accepted(homework, sample_students):
    participants = validate_participants("345678912", [], homework, sample_students, [])

    assert participants == ["345678912"]


def test_group_within_bounds_accepted(group_project, sample_students):
    participants = validate_participants("123456789", ["234567891"], group_project, sample_students, [])

    assert participants == ["123456789", "234567891"]


def test_blank_partner_rejected(group_project, sample_students):
    message = rejection("123456789", ["234567891", "  "], group_project, sample_students)

    assert message == "All participant IDs must be filled."


def test_self_as_partner_rejected(group_project, sample_students):
    message = rejection("123456789", ["123456789"], group_project, sample_students)

    assert message == "You cannot add yourself as a partner."


def test_duplicate_partners_rejected(group_project, sample_students):
    message = rejection("123456789", ["234567891", "234567891"], group_project, sample_students)

    assert message == "Duplicate partner IDs are not allowed."


def test_partner_not_enrolled_rejected(group_project, sample_students):
    message = rejection("123456789", ["456789123"], group_project, sample_students)

    assert message == "ID 456789123 is not enrolled in this course."


def test_submitter_not_enrolled_rejected(homework, sample_students):
    message = rejection("456789123", [], homework, sample_students)

    assert message == "ID 456789123 is not enrolled in this course."


def test_too_few_participants_rejected(group_project, sample_students):
    message = rejection("123456789", [], group_project, sample_students)

    assert message == "At least 2 participants required (including you)."


def test_too_many_participants_rejected(group_project, sample_students):
    project = group_project.model_copy(update={"max_participants": 2})

    message = rejection("123456789", ["234567891", "345678912"], project, sample_students)

    assert message == "No more than 2 participants allowed."


def test_partner_who_already_submitted_rejected(group_project, sample_students):
    existing = [
        Submission(
            student_id="345678912",
            course_id="C1234",
            assignment_id="proj",
            group=True,
            partner_ids=["234567891"],
        )
    ]

    message = rejection("123456789", ["234567891"], group_project, sample_students, existing)

    assert message == "Student ID 234567891 has already submitted this assignment."


def test_resubmission_rejected(homework, sample_students, sample_submissions):
    message = rejection("123456789", [], homework, sample_students, sample_submissions)

    assert message == "Student ID 123456789 has already submitted this assignment."


def test_first_failing_rule_wins(group_project, sample_students):
    # both a self-reference and a non-enrolled partner; the earlier rule is reported
    message = rejection("123456789", ["123456789", "456789123"], group_project, sample_students)

    assert message == "You cannot add yourself as a partner."


def test_participant_index_finds_partner_records():
    submission = Submission(
        student_id="123456789",
        course_id="C1234",
        assignment_id="proj",
        group=True,
        partner_ids=["234567891"],
    )
    index = ParticipantIndex([submission])

    assert index.keys_for("234567891") == ["123456789_C1234_proj"]
    assert index.has_submitted(" 234567891 ", "proj", "C1234")
    assert not index.has_submitted("234567891", "hw1", "C1234")


def test_group_records_share_content(group_project):
    records = build_submission_records(
        ["123456789", "234567891"], group_project, "our report", "report.pdf", SUBMITTED_AT
    )

    assert [r.submission_id for r in records] == ["123456789_C1234_proj", "234567891_C1234_proj"]
    assert records[0].partner_ids == ["234567891"]
    assert records[1].partner_ids == ["123456789"]
    for record in records:
        assert record.group
        assert record.submitted
        assert record.status == "Pending"
        assert record.grade is None
        assert record.submission_text == "our report"
        assert record.submission_date == SUBMITTED_AT


def test_attempt_states(group_project, sample_students):
    attempt = SubmissionAttempt(SubmissionCreate(student_id="123456789", assignment_id="proj"))
    assert attempt.state == AttemptState.DRAFT

    with pytest.raises(SubmissionRejected):
        attempt.validate(group_project, sample_students, [])

    assert attempt.state == AttemptState.REJECTED
    assert attempt.reason == "At least 2 participants required (including you)."
    with pytest.raises(SubmissionRejected):
        attempt.records(group_project)


def test_submit_assignment_writes_one_record_per_participant(repository):
    request = SubmissionCreate(
        student_id="123456789",
        assignment_id="proj",
        partner_ids=["234567891", "345678912"],
        submission_text="done",
    )

    written = submit_assignment(repository, request, submitted_at=SUBMITTED_AT)

    assert len(written) == 3
    assert "345678912_C1234_proj" in repository.submissions
    assert repository.submissions["345678912_C1234_proj"].partner_ids == ["123456789", "234567891"]


def test_rejected_submission_writes_nothing(repository):
    before = dict(repository.submissions)
    request = SubmissionCreate(student_id="123456789", assignment_id="proj", partner_ids=["456789123"])

    with pytest.raises(SubmissionRejected):
        submit_assignment(repository, request)

    assert repository.submissions == before


def test_submit_unknown_assignment(repository):
    with pytest.raises(NotFoundError):
        submit_assignment(repository, SubmissionCreate(student_id="123456789", assignment_id="nope"))


def test_partners_on_individual_assignment_rejected(homework, sample_students):
    message = rejection("345678912", ["234567891"], homework, sample_students)

    assert message == "Partners can only be added to group assignments."


def test_individual_submission_with_partner_writes_nothing(repository):
    before = dict(repository.submissions)
    request = SubmissionCreate(student_id="345678912", assignment_id="hw1", partner_ids=["234567891"])

    with pytest.raises(SubmissionRejected) as excinfo:
        submit_assignment(repository, request)

    assert excinfo.value.field == "partnerIds"
    assert repository.submissions == before


def test_failed_write_keeps_earlier_records(repository, monkeypatch):
    create = repository.create_submission
    calls = []

    def create_then_fail(submission):
        calls.append(submission.student_id)
        if len(calls) == 2:
            raise PersistenceError("Failed to create submission: timed out")
        return create(submission)

    monkeypatch.setattr(repository, "create_submission", create_then_fail)
    request = SubmissionCreate(student_id="123456789", assignment_id="proj", partner_ids=["234567891"])

    with pytest.raises(PersistenceError):
        submit_assignment(repository, request, submitted_at=SUBMITTED_AT)

    assert calls == ["123456789", "234567891"]
    assert "123456789_C1234_proj" in repository.submissions
    assert "234567891_C1234_proj" not in repository.submissions
