import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from registrar.core.dependencies import get_repository, http_error
from registrar.core.exceptions import RegistrarError
from registrar.db.models import Submission
from registrar.db.repository import Repository
from registrar.modules.grades.grading import grade_submission
from registrar.modules.submissions.validator import ParticipantIndex, submit_assignment
from registrar.schemas.submissions import SubmissionCreate, SubmissionUpdate

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Submissions"])


@router.post("/", response_model=List[Submission], status_code=201)
def submit(submission: SubmissionCreate, repository: Repository = Depends(get_repository)):
    """
    Submit an assignment, alone or with partners. One record is stored per participant.
    """
    try:
        return submit_assignment(repository, submission)
    except RegistrarError as e:
        raise http_error(e)
    except Exception:
        logger.exception("Submit assignment error")
        raise HTTPException(status_code=500, detail="Internal server error")


def _filter_submissions(
    submissions: List[Submission],
    status: Optional[str] = None,
    submitted_from: Optional[date] = None,
    submitted_to: Optional[date] = None,
) -> List[Submission]:
    """Status match and an inclusive submission-date range; records without a date fail any range."""
    filtered = []
    for submission in submissions:
        if status and submission.status != status:
            continue
        if submitted_from or submitted_to:
            if submission.submission_date is None:
                continue
            day = submission.submission_date.date()
            if submitted_from and day < submitted_from:
                continue
            if submitted_to and day > submitted_to:
                continue
        filtered.append(submission)
    return filtered


@router.get("/", response_model=List[Submission])
def list_submissions(
    student_id: Optional[str] = Query(None, alias="studentId"),
    course_id: Optional[str] = Query(None, alias="courseId"),
    assignment_id: Optional[str] = Query(None, alias="assignmentId"),
    status: Optional[str] = Query(None, description="Pending or Graded"),
    submitted_from: Optional[date] = Query(None, alias="from", description="First submission day, inclusive"),
    submitted_to: Optional[date] = Query(None, alias="to", description="Last submission day, inclusive"),
    repository: Repository = Depends(get_repository),
):
    try:
        if submitted_from and submitted_to and submitted_from > submitted_to:
            raise HTTPException(status_code=400, detail="'from' must not be after 'to'")

        submissions = repository.list_submissions(
            student_id=student_id, course_id=course_id, assignment_id=assignment_id
        )
        submissions = _filter_submissions(submissions, status, submitted_from, submitted_to)
        return sorted(
            submissions,
            key=lambda s: s.submission_date.timestamp() if s.submission_date else 0,
            reverse=True,
        )
    except HTTPException:
        raise
    except RegistrarError as e:
        raise http_error(e)
    except Exception:
        logger.exception("List submissions error")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/participant/{student_id}", response_model=List[Submission])
def get_participant_submissions(student_id: str, repository: Repository = Depends(get_repository)):
    """
    Submissions a student took part in, as submitter or as a group partner.
    """
    try:
        return ParticipantIndex(repository.list_submissions()).submissions_for(student_id)
    except RegistrarError as e:
        raise http_error(e)
    except Exception:
        logger.exception("Get participant submissions error")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.put("/{submission_key}", response_model=Submission)
def update_submission(
    submission_key: str,
    submission: SubmissionUpdate,
    repository: Repository = Depends(get_repository),
):
    """
    Grade or comment on a submission. Group partners receive the same grade.
    """
    try:
        if "grade" not in submission.model_fields_set:
            if submission.comments is None:
                raise HTTPException(status_code=400, detail="Nothing to update")
            return repository.update_submission(submission_key, {"comments": submission.comments})
        return grade_submission(repository, submission_key, submission.grade, submission.comments)
    except HTTPException:
        raise
    except RegistrarError as e:
        raise http_error(e)
    except Exception:
        logger.exception("Update submission error")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.delete("/{submission_key}")
def delete_submission(submission_key: str, repository: Repository = Depends(get_repository)):
    try:
        repository.delete_submission(submission_key)
        return {"message": "Submission deleted successfully"}
    except RegistrarError as e:
        raise http_error(e)
    except Exception:
        logger.exception("Delete submission error")
        raise HTTPException(status_code=500, detail="Internal server error")
