# tests/test_grading.py

import pytest
from pydantic import ValidationError as PydanticValidationError

from registrar.core.exceptions import NotFoundError, ValidationError
from registrar.modules.grades.grading import grade_submission, record_grades
from registrar.modules.grades.stats import final_grade
from registrar.modules.submissions.validator import submit_assignment
from registrar.schemas.grades import GradeEntry, GradeEntryRequest
from registrar.schemas.submissions import SubmissionCreate


def test_grade_submission_marks_graded(repository):
    graded = grade_submission(repository, "234567891_C1234_hw1", 65, "better")

    assert graded.grade == 65
    assert graded.status == "Graded"
    assert graded.comments == "better"


def test_clearing_a_grade_sets_pending(repository):
    cleared = grade_submission(repository, "234567891_C1234_hw1", None)

    assert cleared.grade is None
    assert cleared.status == "Pending"


def test_group_grade_reaches_partners(repository):
    submit_assignment(
        repository,
        SubmissionCreate(student_id="123456789", assignment_id="proj", partner_ids=["345678912"]),
    )

    grade_submission(repository, "123456789_C1234_proj", 88)

    assert repository.submissions["345678912_C1234_proj"].grade == 88
    assert repository.submissions["345678912_C1234_proj"].status == "Graded"


def test_grade_unknown_submission(repository):
    with pytest.raises(NotFoundError):
        grade_submission(repository, "999999999_C1234_hw1", 70)


def test_record_grades_creates_missing_records(repository):
    request = GradeEntryRequest(
        course_id="C1234",
        assignment_id="proj",
        grades=[GradeEntry(student_id="123456789", grade=70), GradeEntry(student_id="345678912", grade="")],
    )

    saved = record_grades(repository, request)

    assert [s.key for s in saved] == ["123456789_C1234_proj", "345678912_C1234_proj"]
    assert saved[1].status == "Pending"
    assert final_grade(repository.list_assignments("C1234"), repository.list_submissions(), "123456789") == 74


def test_record_grades_updates_existing_records(repository):
    request = GradeEntryRequest(
        course_id="C1234", assignment_id="hw1", grades=[GradeEntry(student_id="234567891", grade=58)]
    )

    record_grades(repository, request)

    assert repository.submissions["234567891_C1234_hw1"].grade == 58


def test_record_grades_rejects_students_outside_course(repository):
    request = GradeEntryRequest(
        course_id="C1234", assignment_id="hw1", grades=[GradeEntry(student_id="456789123", grade=90)]
    )

    with pytest.raises(ValidationError) as excinfo:
        record_grades(repository, request)

    assert excinfo.value.message == "Student 456789123 is not enrolled in this course."


def test_record_grades_assignment_must_belong_to_course(repository):
    request = GradeEntryRequest(course_id="M5678", assignment_id="hw1", grades=[])

    with pytest.raises(NotFoundError):
        record_grades(repository, request)


@pytest.mark.parametrize("grade", [-1, 101, "abc", True])
def test_grade_entry_range(grade):
    with pytest.raises(PydanticValidationError):
        GradeEntry(student_id="123456789", grade=grade)
