import logging
import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from registrar.core.dependencies import get_repository, http_error
from registrar.core.exceptions import NotFoundError, RegistrarError
from registrar.db.models import Assignment
from registrar.db.repository import Repository
from registrar.modules.assignments.rules import validate_assignment
from registrar.modules.enrollment.helpers import assignments_for_student
from registrar.schemas.assignments import AssignmentCreate, AssignmentUpdate

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Assignments"])


@router.get("/", response_model=List[Assignment])
def list_assignments(
    course_id: Optional[str] = Query(None, alias="courseId", description="Only assignments of this course"),
    student_id: Optional[str] = Query(
        None, alias="studentId", description="Only assignments of courses this student is enrolled in"
    ),
    repository: Repository = Depends(get_repository),
):
    try:
        assignments = repository.list_assignments(course_id)
        if student_id:
            student = repository.get_student(student_id)
            if student is None:
                raise NotFoundError("Student not found")
            assignments = assignments_for_student(assignments, student)
        return sorted(assignments, key=lambda a: (a.course_id, a.due_date is None, a.due_date))
    except RegistrarError as e:
        raise http_error(e)
    except Exception:
        logger.exception("List assignments error")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/{assignment_id}", response_model=Assignment)
def get_assignment(assignment_id: str, repository: Repository = Depends(get_repository)):
    try:
        assignment = repository.get_assignment(assignment_id)
        if assignment is None:
            raise HTTPException(status_code=404, detail="Assignment not found")
        return assignment
    except HTTPException:
        raise
    except RegistrarError as e:
        raise http_error(e)
    except Exception:
        logger.exception("Get assignment error")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/", response_model=Assignment, status_code=201)
def create_assignment(assignment_data: AssignmentCreate, repository: Repository = Depends(get_repository)):
    """
    Create an assignment. The course's weights may not add up to more than 100.
    """
    try:
        if repository.get_course(assignment_data.course_id) is None:
            raise NotFoundError("Course not found")

        data = assignment_data.model_dump()
        if not data["assignment_id"]:
            data["assignment_id"] = str(uuid.uuid4())

        assignment = validate_assignment(
            Assignment(**data), repository.list_assignments(data["course_id"]), creating=True
        )
        return repository.add_assignment(assignment)
    except RegistrarError as e:
        raise http_error(e)
    except Exception:
        logger.exception("Create assignment error")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.put("/{assignment_id}", response_model=Assignment)
def update_assignment(
    assignment_id: str,
    assignment_data: AssignmentUpdate,
    repository: Repository = Depends(get_repository),
):
    try:
        assignment = repository.get_assignment(assignment_id)
        if assignment is None:
            raise NotFoundError("Assignment not found")

        updated = assignment.model_copy(update=assignment_data.model_dump(exclude_none=True))
        updated = validate_assignment(updated, repository.list_assignments(assignment.course_id))
        return repository.update_assignment(assignment_id, updated)
    except RegistrarError as e:
        raise http_error(e)
    except Exception:
        logger.exception("Update assignment error")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.delete("/{assignment_id}")
def delete_assignment(assignment_id: str, repository: Repository = Depends(get_repository)):
    try:
        repository.delete_assignment(assignment_id)
        return {"message": "Assignment deleted successfully"}
    except RegistrarError as e:
        raise http_error(e)
    except Exception:
        logger.exception("Delete assignment error")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.delete("/")
def delete_selected_assignments(
    assignment_ids: List[str] = Query(..., alias="assignmentId", description="Assignment IDs to delete"),
    repository: Repository = Depends(get_repository),
):
    try:
        repository.delete_assignments(assignment_ids)
        return {"message": f"{len(assignment_ids)} assignment(s) deleted successfully", "deleted": assignment_ids}
    except RegistrarError as e:
        raise http_error(e)
    except Exception:
        logger.exception("Delete assignments error")
        raise HTTPException(status_code=500, detail="Internal server error")
