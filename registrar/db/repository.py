"""
Document-store access for the four collections.

Routers receive a ``Repository`` through ``get_repository`` and pass the
records it returns into the pure grading and validation functions.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional

from supabase import Client

from registrar.core.exceptions import NotFoundError, PersistenceError
from registrar.db.models import Assignment, Course, Student, Submission, submission_key

logger = logging.getLogger(__name__)

STUDENTS_TABLE = "students"
COURSES_TABLE = "courses"
ASSIGNMENTS_TABLE = "assignments"
SUBMISSIONS_TABLE = "submissions"


class Repository(ABC):
    """CRUD capabilities over students, courses, assignments and submissions."""

    # --- students ---

    @abstractmethod
    def list_students(self) -> List[Student]:
        pass

    @abstractmethod
    def get_student(self, student_id: str) -> Optional[Student]:
        pass

    @abstractmethod
    def add_student(self, student: Student) -> Student:
        pass

    @abstractmethod
    def update_student(self, student: Student) -> Student:
        pass

    @abstractmethod
    def delete_students(self, student_ids: List[str]) -> None:
        pass

    # --- courses ---

    @abstractmethod
    def list_courses(self) -> List[Course]:
        pass

    @abstractmethod
    def get_course(self, course_id: str) -> Optional[Course]:
        pass

    @abstractmethod
    def add_course(self, course: Course) -> Course:
        pass

    @abstractmethod
    def update_course(self, course_id: str, course: Course) -> Course:
        pass

    @abstractmethod
    def delete_courses(self, course_ids: List[str]) -> None:
        pass

    # --- assignments ---

    @abstractmethod
    def list_assignments(self, course_id: Optional[str] = None) -> List[Assignment]:
        pass

    @abstractmethod
    def get_assignment(self, assignment_id: str) -> Optional[Assignment]:
        pass

    @abstractmethod
    def add_assignment(self, assignment: Assignment) -> Assignment:
        pass

    @abstractmethod
    def update_assignment(self, assignment_id: str, assignment: Assignment) -> Assignment:
        pass

    @abstractmethod
    def delete_assignment(self, assignment_id: str) -> None:
        pass

    @abstractmethod
    def delete_assignments(self, assignment_ids: List[str]) -> None:
        pass

    # --- submissions ---

    @abstractmethod
    def list_submissions(
        self,
        student_id: Optional[str] = None,
        course_id: Optional[str] = None,
        assignment_id: Optional[str] = None,
    ) -> List[Submission]:
        pass

    @abstractmethod
    def create_submission(self, submission: Submission) -> Submission:
        pass

    @abstractmethod
    def update_submission(self, key: str, fields: Dict[str, Any]) -> Submission:
        pass

    @abstractmethod
    def delete_submission(self, key: str) -> None:
        pass


def _to_document(record) -> Dict[str, Any]:
    return record.model_dump(mode="json")


class SupabaseRepository(Repository):
    """Repository backed by Supabase tables keyed by business identifiers."""

    def __init__(self, client: Client):
        self.client = client

    def _execute(self, action: str, query):
        try:
            response = query.execute()
        except Exception as e:
            logger.exception("Supabase error while trying to %s", action)
            raise PersistenceError(f"Failed to {action}: {str(e)}")

        return response.data or []

    def _select(self, table: str, action: str, filters: Optional[Dict[str, Any]] = None) -> List[dict]:
        query = self.client.table(table).select("*")
        for column, value in (filters or {}).items():
            if value is not None:
                query = query.eq(column, value)
        return self._execute(action, query)

    def _first(self, table: str, action: str, column: str, value: str) -> Optional[dict]:
        rows = self._execute(action, self.client.table(table).select("*").eq(column, value).limit(1))
        return rows[0] if rows else None

    def _update(self, table: str, action: str, column: str, value: str, data: Dict[str, Any]) -> dict:
        rows = self._execute(action, self.client.table(table).update(data).eq(column, value))
        if not rows:
            raise NotFoundError(f"{table[:-1].capitalize()} {value} not found")
        return rows[0]

    def _delete_in(self, table: str, action: str, column: str, values: Iterable[str]) -> None:
        values = [v for v in values if v]
        if not values:
            return
        self._execute(action, self.client.table(table).delete().in_(column, values))

    # --- students ---

    def list_students(self) -> List[Student]:
        rows = self._select(STUDENTS_TABLE, "list students")
        return [Student(**row) for row in rows]

    def get_student(self, student_id: str) -> Optional[Student]:
        row = self._first(STUDENTS_TABLE, "fetch student", "student_id", student_id)
        return Student(**row) if row else None

    def add_student(self, student: Student) -> Student:
        rows = self._execute("add student", self.client.table(STUDENTS_TABLE).insert(_to_document(student)))
        return Student(**rows[0]) if rows else student

    def update_student(self, student: Student) -> Student:
        row = self._update(STUDENTS_TABLE, "update student", "student_id", student.student_id, _to_document(student))
        return Student(**row)

    def delete_students(self, student_ids: List[str]) -> None:
        self._delete_in(STUDENTS_TABLE, "delete students", "student_id", student_ids)

    # --- courses ---

    def list_courses(self) -> List[Course]:
        rows = self._select(COURSES_TABLE, "list courses")
        return [Course(**row) for row in rows]

    def get_course(self, course_id: str) -> Optional[Course]:
        row = self._first(COURSES_TABLE, "fetch course", "course_id", course_id)
        return Course(**row) if row else None

    def add_course(self, course: Course) -> Course:
        rows = self._execute("add course", self.client.table(COURSES_TABLE).insert(_to_document(course)))
        return Course(**rows[0]) if rows else course

    def update_course(self, course_id: str, course: Course) -> Course:
        row = self._update(COURSES_TABLE, "update course", "course_id", course_id, _to_document(course))
        return Course(**row)

    def delete_courses(self, course_ids: List[str]) -> None:
        self._delete_in(COURSES_TABLE, "delete courses", "course_id", course_ids)

    # --- assignments ---

    def list_assignments(self, course_id: Optional[str] = None) -> List[Assignment]:
        rows = self._select(ASSIGNMENTS_TABLE, "list assignments", {"course_id": course_id})
        assignments = []
        for row in rows:
            if not row.get("assignment_id"):
                logger.warning("Skipping assignment without assignment_id: %s", row)
                continue
            assignments.append(Assignment(**row))
        return assignments

    def get_assignment(self, assignment_id: str) -> Optional[Assignment]:
        row = self._first(ASSIGNMENTS_TABLE, "fetch assignment", "assignment_id", assignment_id)
        return Assignment(**row) if row else None

    def add_assignment(self, assignment: Assignment) -> Assignment:
        rows = self._execute("add assignment", self.client.table(ASSIGNMENTS_TABLE).insert(_to_document(assignment)))
        return Assignment(**rows[0]) if rows else assignment

    def update_assignment(self, assignment_id: str, assignment: Assignment) -> Assignment:
        row = self._update(
            ASSIGNMENTS_TABLE, "update assignment", "assignment_id", assignment_id, _to_document(assignment)
        )
        return Assignment(**row)

    def delete_assignment(self, assignment_id: str) -> None:
        rows = self._execute(
            "delete assignment",
            self.client.table(ASSIGNMENTS_TABLE).delete().eq("assignment_id", assignment_id),
        )
        if not rows:
            raise NotFoundError(f"Assignment {assignment_id} not found")

    def delete_assignments(self, assignment_ids: List[str]) -> None:
        self._delete_in(ASSIGNMENTS_TABLE, "delete assignments", "assignment_id", assignment_ids)

    # --- submissions ---

    def list_submissions(
        self,
        student_id: Optional[str] = None,
        course_id: Optional[str] = None,
        assignment_id: Optional[str] = None,
    ) -> List[Submission]:
        rows = self._select(
            SUBMISSIONS_TABLE,
            "list submissions",
            {"student_id": student_id, "course_id": course_id, "assignment_id": assignment_id},
        )
        return [Submission(**row) for row in rows]

    def create_submission(self, submission: Submission) -> Submission:
        document = _to_document(submission)
        document["submission_id"] = submission_key(
            submission.student_id, submission.course_id, submission.assignment_id
        )
        # Keyed by the composite id, so a repeated write replaces the earlier document
        rows = self._execute(
            "create submission",
            self.client.table(SUBMISSIONS_TABLE).upsert(document, on_conflict="submission_id"),
        )
        return Submission(**rows[0]) if rows else Submission(**document)

    def update_submission(self, key: str, fields: Dict[str, Any]) -> Submission:
        row = self._update(SUBMISSIONS_TABLE, "update submission", "submission_id", key, fields)
        return Submission(**row)

    def delete_submission(self, key: str) -> None:
        rows = self._execute(
            "delete submission",
            self.client.table(SUBMISSIONS_TABLE).delete().eq("submission_id", key),
        )
        if not rows:
            raise NotFoundError(f"Submission {key} not found")
