import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from registrar.core.dependencies import get_repository, http_error
from registrar.core.exceptions import NotFoundError, RegistrarError
from registrar.db.models import Submission
from registrar.db.repository import Repository
from registrar.modules.grades import stats
from registrar.modules.grades.grading import record_grades
from registrar.schemas.grades import (
    CourseInsights,
    CourseStatistics,
    FinalGradeResponse,
    GradeEntryRequest,
    StudentSummary,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Grades"])


@router.get("/course/{course_id}", response_model=CourseStatistics)
def get_course_statistics(course_id: str, repository: Repository = Depends(get_repository)):
    """
    Average, median, pass rate, grade distribution and per-assignment breakdown of a course.
    """
    try:
        if repository.get_course(course_id) is None:
            raise NotFoundError("Course not found")

        # Any failed fetch fails the whole view
        assignments = repository.list_assignments(course_id)
        submissions = repository.list_submissions(course_id=course_id)
        students = repository.list_students()

        return stats.course_statistics(course_id, assignments, submissions, students)
    except RegistrarError as e:
        raise http_error(e)
    except Exception:
        logger.exception("Course statistics error")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/course/{course_id}/student/{student_id}", response_model=FinalGradeResponse)
def get_final_grade(course_id: str, student_id: str, repository: Repository = Depends(get_repository)):
    """
    Weighted final grade; null until graded assignments cover 100% of the weight.
    """
    try:
        student = repository.get_student(student_id)
        if student is None:
            raise NotFoundError("Student not found")
        if course_id not in student.enrolled_courses:
            raise NotFoundError(f"Student {student_id} is not enrolled in {course_id}")

        assignments = repository.list_assignments(course_id)
        submissions = repository.list_submissions(course_id=course_id)

        return FinalGradeResponse(
            student_id=student_id,
            course_id=course_id,
            final_grade=stats.final_grade(assignments, submissions, student_id, course_id),
            graded_weight=stats.graded_weight(assignments, submissions, student_id),
        )
    except RegistrarError as e:
        raise http_error(e)
    except Exception:
        logger.exception("Final grade error")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/student/{student_id}", response_model=StudentSummary)
def get_student_summary(student_id: str, repository: Repository = Depends(get_repository)):
    try:
        student = repository.get_student(student_id)
        if student is None:
            raise NotFoundError("Student not found")

        return stats.student_summary(
            student,
            repository.list_courses(),
            repository.list_assignments(),
            repository.list_submissions(),
        )
    except RegistrarError as e:
        raise http_error(e)
    except Exception:
        logger.exception("Student summary error")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/insights", response_model=CourseInsights)
def get_insights(repository: Repository = Depends(get_repository)):
    """
    Top course, top student, most failed course and most late assignment.
    """
    try:
        return stats.course_insights(
            repository.list_courses(),
            repository.list_students(),
            repository.list_assignments(),
            repository.list_submissions(),
        )
    except RegistrarError as e:
        raise http_error(e)
    except Exception:
        logger.exception("Insights error")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/entry", response_model=List[Submission])
def enter_grades(entry: GradeEntryRequest, repository: Repository = Depends(get_repository)):
    """
    Save grades for one assignment across the enrolled students.
    """
    try:
        return record_grades(repository, entry)
    except RegistrarError as e:
        raise http_error(e)
    except Exception:
        logger.exception("Grade entry error")
        raise HTTPException(status_code=500, detail="Internal server error")
