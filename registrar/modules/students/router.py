import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query

from registrar.core.dependencies import get_repository, http_error
from registrar.core.exceptions import NotFoundError, RegistrarError
from registrar.db.models import Student
from registrar.db.repository import Repository
from registrar.modules.enrollment.helpers import delete_students
from registrar.modules.students.rules import check_name, validate_student
from registrar.schemas.students import StudentCreate, StudentUpdate

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Students"])


@router.get("/", response_model=List[Student])
def list_students(repository: Repository = Depends(get_repository)):
    """
    List all students, ordered by last name then first name.
    """
    try:
        students = repository.list_students()
        return sorted(students, key=lambda s: (s.last_name.lower(), s.first_name.lower()))
    except RegistrarError as e:
        raise http_error(e)
    except Exception:
        logger.exception("List students error")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/{student_id}", response_model=Student)
def get_student(student_id: str, repository: Repository = Depends(get_repository)):
    try:
        student = repository.get_student(student_id)
        if student is None:
            raise HTTPException(status_code=404, detail="Student not found")
        return student
    except HTTPException:
        raise
    except RegistrarError as e:
        raise http_error(e)
    except Exception:
        logger.exception("Get student error")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/", response_model=Student, status_code=201)
def create_student(student_data: StudentCreate, repository: Repository = Depends(get_repository)):
    """
    Create a student. IDs are 9 digits and must be unique; names are letters only.
    """
    try:
        student = validate_student(Student(**student_data.model_dump()), repository.list_students())
        return repository.add_student(student)
    except RegistrarError as e:
        raise http_error(e)
    except Exception:
        logger.exception("Create student error")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.put("/{student_id}", response_model=Student)
def update_student(
    student_id: str,
    student_data: StudentUpdate,
    repository: Repository = Depends(get_repository),
):
    try:
        student = repository.get_student(student_id)
        if student is None:
            raise NotFoundError("Student not found")

        update_data = student_data.model_dump(exclude_none=True)
        if "first_name" in update_data:
            check_name(update_data["first_name"], "firstName", "First Name")
        if "last_name" in update_data:
            check_name(update_data["last_name"], "lastName", "Last Name")

        if not update_data:
            return student
        return repository.update_student(student.model_copy(update=update_data))
    except RegistrarError as e:
        raise http_error(e)
    except Exception:
        logger.exception("Update student error")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.delete("/")
def delete_selected_students(
    student_ids: List[str] = Query(..., alias="studentId", description="Student IDs to delete"),
    repository: Repository = Depends(get_repository),
):
    """
    Delete students and the submissions they made.
    """
    try:
        removed = delete_students(repository, student_ids)
        return {
            "message": f"{len(student_ids)} student(s) and their submissions removed successfully.",
            "deleted_submissions": [s.key for s in removed],
        }
    except RegistrarError as e:
        raise http_error(e)
    except Exception:
        logger.exception("Delete students error")
        raise HTTPException(status_code=500, detail="Internal server error")
