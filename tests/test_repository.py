# tests/test_repository.py

from unittest.mock import MagicMock

import pytest

from registrar.core.exceptions import NotFoundError, PersistenceError
from registrar.db.models import Submission
from registrar.db.repository import SupabaseRepository


def response(data):
    return MagicMock(data=data, error=None)


@pytest.fixture
def client():
    return MagicMock()


@pytest.fixture
def supabase_repository(client):
    return SupabaseRepository(client)


def test_list_students(client, supabase_repository):
    client.table.return_value.select.return_value.execute.return_value = response(
        [{"student_id": "123456789", "first_name": "Dana", "last_name": "Levi", "enrolled_courses": None}]
    )

    students = supabase_repository.list_students()

    client.table.assert_called_with("students")
    assert students[0].student_id == "123456789"
    assert students[0].enrolled_courses == []


def test_get_missing_course(client, supabase_repository):
    query = client.table.return_value.select.return_value.eq.return_value.limit.return_value
    query.execute.return_value = response([])

    assert supabase_repository.get_course("C1234") is None
    client.table.return_value.select.return_value.eq.assert_called_with("course_id", "C1234")


def test_list_assignments_skips_rows_without_id(client, supabase_repository):
    client.table.return_value.select.return_value.eq.return_value.execute.return_value = response([
        {"assignment_id": "hw1", "course_id": "C1234", "assignment_name": "Homework 1", "weight": 40},
        {"assignment_id": None, "course_id": "C1234", "assignment_name": "Broken"},
    ])

    assignments = supabase_repository.list_assignments("C1234")

    assert [a.assignment_id for a in assignments] == ["hw1"]


def test_create_submission_upserts_on_composite_key(client, supabase_repository):
    upsert = client.table.return_value.upsert
    upsert.return_value.execute.return_value = response([])

    stored = supabase_repository.create_submission(
        Submission(student_id="123456789", course_id="C1234", assignment_id="hw1")
    )

    document = upsert.call_args.args[0]
    assert document["submission_id"] == "123456789_C1234_hw1"
    assert upsert.call_args.kwargs == {"on_conflict": "submission_id"}
    assert stored.submission_id == "123456789_C1234_hw1"


def test_update_missing_submission(client, supabase_repository):
    client.table.return_value.update.return_value.eq.return_value.execute.return_value = response([])

    with pytest.raises(NotFoundError):
        supabase_repository.update_submission("123456789_C1234_hw1", {"grade": 90})


def test_client_failure_becomes_persistence_error(client, supabase_repository):
    client.table.return_value.select.return_value.execute.side_effect = ConnectionError("timed out")

    with pytest.raises(PersistenceError) as excinfo:
        supabase_repository.list_courses()

    assert excinfo.value.message == "Failed to list courses: timed out"


def test_delete_without_ids_skips_call(client, supabase_repository):
    supabase_repository.delete_courses([])

    client.table.assert_not_called()


def test_delete_courses_uses_in_filter(client, supabase_repository):
    client.table.return_value.delete.return_value.in_.return_value.execute.return_value = response([])

    supabase_repository.delete_courses(["C1234", "M5678"])

    client.table.return_value.delete.return_value.in_.assert_called_with("course_id", ["C1234", "M5678"])


def test_delete_assignments_uses_in_filter(client, supabase_repository):
    client.table.return_value.delete.return_value.in_.return_value.execute.return_value = response([])

    supabase_repository.delete_assignments(["hw1", "", "proj"])

    client.table.assert_called_with("assignments")
    client.table.return_value.delete.return_value.in_.assert_called_with("assignment_id", ["hw1", "proj"])


def test_empty_response_data_is_empty_list(client, supabase_repository):
    client.table.return_value.select.return_value.execute.return_value = response(None)

    assert supabase_repository.list_submissions() == []
