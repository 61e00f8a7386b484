# tests/conftest.py

from datetime import date, datetime, time, timezone
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from registrar.core.dependencies import get_repository
from registrar.core.exceptions import NotFoundError
from registrar.db.models import Assignment, Course, Student, Submission, submission_key
from registrar.db.repository import Repository
from registrar.main import app


class InMemoryRepository(Repository):
    """Repository over plain dicts, keyed the same way as the Supabase tables."""

    def __init__(self, students=(), courses=(), assignments=(), submissions=()):
        self.students: Dict[str, Student] = {s.student_id: s for s in students}
        self.courses: Dict[str, Course] = {c.course_id: c for c in courses}
        self.assignments: Dict[str, Assignment] = {a.assignment_id: a for a in assignments}
        self.submissions: Dict[str, Submission] = {s.key: s for s in submissions}

    # --- students ---

    def list_students(self) -> List[Student]:
        return list(self.students.values())

    def get_student(self, student_id: str) -> Optional[Student]:
        return self.students.get(student_id)

    def add_student(self, student: Student) -> Student:
        self.students[student.student_id] = student
        return student

    def update_student(self, student: Student) -> Student:
        if student.student_id not in self.students:
            raise NotFoundError(f"Student {student.student_id} not found")
        self.students[student.student_id] = student
        return student

    def delete_students(self, student_ids: List[str]) -> None:
        for student_id in student_ids:
            self.students.pop(student_id, None)

    # --- courses ---

    def list_courses(self) -> List[Course]:
        return list(self.courses.values())

    def get_course(self, course_id: str) -> Optional[Course]:
        return self.courses.get(course_id)

    def add_course(self, course: Course) -> Course:
        self.courses[course.course_id] = course
        return course

    def update_course(self, course_id: str, course: Course) -> Course:
        if course_id not in self.courses:
            raise NotFoundError(f"Course {course_id} not found")
        self.courses[course_id] = course
        return course

    def delete_courses(self, course_ids: List[str]) -> None:
        for course_id in course_ids:
            self.courses.pop(course_id, None)

    # --- assignments ---

    def list_assignments(self, course_id: Optional[str] = None) -> List[Assignment]:
        return [a for a in self.assignments.values() if course_id is None or a.course_id == course_id]

    def get_assignment(self, assignment_id: str) -> Optional[Assignment]:
        return self.assignments.get(assignment_id)

    def add_assignment(self, assignment: Assignment) -> Assignment:
        self.assignments[assignment.assignment_id] = assignment
        return assignment

    def update_assignment(self, assignment_id: str, assignment: Assignment) -> Assignment:
        if assignment_id not in self.assignments:
            raise NotFoundError(f"Assignment {assignment_id} not found")
        self.assignments[assignment_id] = assignment
        return assignment

    def delete_assignment(self, assignment_id: str) -> None:
        if self.assignments.pop(assignment_id, None) is None:
            raise NotFoundError(f"Assignment {assignment_id} not found")

    def delete_assignments(self, assignment_ids: List[str]) -> None:
        for assignment_id in assignment_ids:
            self.assignments.pop(assignment_id, None)

    # --- submissions ---

    def list_submissions(self, student_id=None, course_id=None, assignment_id=None) -> List[Submission]:
        return [
            s for s in self.submissions.values()
            if (student_id is None or s.student_id == student_id)
            and (course_id is None or s.course_id == course_id)
            and (assignment_id is None or s.assignment_id == assignment_id)
        ]

    def create_submission(self, submission: Submission) -> Submission:
        key = submission_key(submission.student_id, submission.course_id, submission.assignment_id)
        stored = submission.model_copy(update={"submission_id": key})
        self.submissions[key] = stored
        return stored

    def update_submission(self, key: str, fields: Dict[str, Any]) -> Submission:
        if key not in self.submissions:
            raise NotFoundError(f"Submission {key} not found")
        updated = self.submissions[key].model_copy(update=fields)
        self.submissions[key] = updated
        return updated

    def delete_submission(self, key: str) -> None:
        if self.submissions.pop(key, None) is None:
            raise NotFoundError(f"Submission {key} not found")


@pytest.fixture
def sample_students():
    return [
        Student(student_id="123456789", first_name="Dana", last_name="Levi", enrolled_courses=["C1234", "M5678"]),
        Student(student_id="234567891", first_name="Avi", last_name="Cohen", enrolled_courses=["C1234"]),
        Student(student_id="345678912", first_name="Noa", last_name="Bar", enrolled_courses=["C1234"]),
        Student(student_id="456789123", first_name="Tal", last_name="Mizrahi", enrolled_courses=[]),
    ]


@pytest.fixture
def sample_courses():
    return [
        Course(
            course_id="C1234",
            course_name="Calculus",
            professors_name="Ruth Katz",
            semester="A",
            starting_date=date(2025, 2, 1),
            end_date=date(2025, 6, 30),
            day_of_week="Monday",
            start_time=time(10, 0),
            end_time=time(12, 0),
            credit_points=4,
        ),
        Course(
            course_id="M5678",
            course_name="Marketing",
            professors_name="Yossi Adler",
            semester="B",
            starting_date=date(2025, 3, 1),
            end_date=date(2025, 7, 15),
            day_of_week="Wednesday",
            start_time=time(14, 0),
            end_time=time(16, 0),
            credit_points=2.5,
        ),
    ]


@pytest.fixture
def homework():
    return Assignment(
        assignment_id="hw1",
        course_id="C1234",
        assignment_name="Homework 1",
        assignment_type="Individual",
        weight=40,
        due_date=date(2025, 3, 1),
    )


@pytest.fixture
def group_project():
    return Assignment(
        assignment_id="proj",
        course_id="C1234",
        assignment_name="Final Project",
        assignment_type="Group",
        weight=60,
        min_participants=2,
        max_participants=3,
        due_date=date(2025, 4, 1),
    )


@pytest.fixture
def essay():
    return Assignment(
        assignment_id="essay",
        course_id="M5678",
        assignment_name="Essay",
        assignment_type="Individual",
        weight=100,
        due_date=date(2025, 5, 1),
    )


@pytest.fixture
def sample_assignments(homework, group_project, essay):
    return [homework, group_project, essay]


@pytest.fixture
def sample_submissions():
    return [
        Submission(
            submission_id="123456789_C1234_hw1",
            student_id="123456789",
            course_id="C1234",
            assignment_id="hw1",
            grade=80,
            submitted=True,
            status="Graded",
            submission_date=datetime(2025, 2, 28, 18, 0, tzinfo=timezone.utc),
        ),
        Submission(
            submission_id="234567891_C1234_hw1",
            student_id="234567891",
            course_id="C1234",
            assignment_id="hw1",
            grade=50,
            submitted=True,
            status="Graded",
            submission_date=datetime(2025, 3, 3, 9, 30, tzinfo=timezone.utc),
        ),
    ]


@pytest.fixture
def repository(sample_students, sample_courses, sample_assignments, sample_submissions):
    return InMemoryRepository(sample_students, sample_courses, sample_assignments, sample_submissions)


@pytest.fixture
def client(repository):
    app.dependency_overrides[get_repository] = lambda: repository
    yield TestClient(app)
    app.dependency_overrides.clear()
