import logging
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from registrar.core.dependencies import get_repository, http_error
from registrar.core.exceptions import NotFoundError, RegistrarError
from registrar.db.models import Course, Semester, Student
from registrar.db.repository import Repository
from registrar.modules.courses.rules import validate_course
from registrar.modules.enrollment.helpers import (
    delete_courses,
    enroll_student,
    enrollment_counts,
    roster,
    unenroll_student,
)
from registrar.schemas.courses import CourseCreate, CourseDeleteResponse, CourseUpdate
from registrar.schemas.students import EnrollmentRequest

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Courses"])


# -------------------------
# COURSE CATALOG
# -------------------------
@router.get("/", response_model=List[Course])
def list_courses(
    semester: Optional[Semester] = Query(None, description="Only courses of this semester"),
    repository: Repository = Depends(get_repository),
):
    try:
        courses = repository.list_courses()
        if semester:
            courses = [c for c in courses if c.semester == semester]
        return sorted(courses, key=lambda c: c.course_name.lower())
    except RegistrarError as e:
        raise http_error(e)
    except Exception:
        logger.exception("List courses error")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/enrollment-counts", response_model=Dict[str, int])
def get_enrollment_counts(repository: Repository = Depends(get_repository)):
    """
    Number of enrolled students per course ID.
    """
    try:
        return enrollment_counts(repository.list_students())
    except RegistrarError as e:
        raise http_error(e)
    except Exception:
        logger.exception("Enrollment counts error")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/{course_id}", response_model=Course)
def get_course(course_id: str, repository: Repository = Depends(get_repository)):
    try:
        course = repository.get_course(course_id)
        if course is None:
            raise HTTPException(status_code=404, detail="Course not found")
        return course
    except HTTPException:
        raise
    except RegistrarError as e:
        raise http_error(e)
    except Exception:
        logger.exception("Get course error")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/", response_model=Course, status_code=201)
def create_course(course_data: CourseCreate, repository: Repository = Depends(get_repository)):
    """
    Create a course. The course ID is the first letter of the name plus four digits.
    """
    try:
        course = validate_course(
            Course(**course_data.model_dump()), repository.list_courses(), creating=True
        )
        return repository.add_course(course)
    except RegistrarError as e:
        raise http_error(e)
    except Exception:
        logger.exception("Create course error")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.put("/{course_id}", response_model=Course)
def update_course(
    course_id: str,
    course_data: CourseUpdate,
    repository: Repository = Depends(get_repository),
):
    try:
        course = repository.get_course(course_id)
        if course is None:
            raise NotFoundError("Course not found")

        updated = validate_course(course.model_copy(update=course_data.model_dump(exclude_none=True)))
        return repository.update_course(course_id, updated)
    except RegistrarError as e:
        raise http_error(e)
    except Exception:
        logger.exception("Update course error")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.delete("/", response_model=CourseDeleteResponse)
def delete_selected_courses(
    course_ids: List[str] = Query(..., alias="courseId", description="Course IDs to delete"),
    repository: Repository = Depends(get_repository),
):
    """
    Delete courses and unenroll every student from them.
    """
    try:
        unenrolled = delete_courses(repository, course_ids)
        return CourseDeleteResponse(
            deleted=course_ids,
            unenrolled_students=[s.student_id for s in unenrolled],
        )
    except RegistrarError as e:
        raise http_error(e)
    except Exception:
        logger.exception("Delete courses error")
        raise HTTPException(status_code=500, detail="Internal server error")


# -------------------------
# ROSTER / ENROLLMENT
# -------------------------
@router.get("/{course_id}/students", response_model=List[Student])
def get_course_roster(course_id: str, repository: Repository = Depends(get_repository)):
    try:
        if repository.get_course(course_id) is None:
            raise NotFoundError("Course not found")
        return roster(repository.list_students(), course_id)
    except RegistrarError as e:
        raise http_error(e)
    except Exception:
        logger.exception("Get roster error")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/{course_id}/students", response_model=Student)
def add_student_to_course(
    course_id: str,
    enrollment: EnrollmentRequest,
    repository: Repository = Depends(get_repository),
):
    """
    Enroll a student. Enrolling an already enrolled student changes nothing.
    """
    try:
        return enroll_student(repository, enrollment.student_id, course_id)
    except RegistrarError as e:
        raise http_error(e)
    except Exception:
        logger.exception("Enroll student error")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.delete("/{course_id}/students/{student_id}", response_model=Student)
def remove_student_from_course(
    course_id: str,
    student_id: str,
    repository: Repository = Depends(get_repository),
):
    try:
        return unenroll_student(repository, student_id, course_id)
    except RegistrarError as e:
        raise http_error(e)
    except Exception:
        logger.exception("Unenroll student error")
        raise HTTPException(status_code=500, detail="Internal server error")
