import math
from typing import Iterable

from registrar.core.exceptions import DuplicateRecordError, ValidationError
from registrar.db.models import Assignment


def course_weight_total(assignments: Iterable[Assignment], course_id: str, exclude_id: str = None) -> float:
    return sum(
        a.weight for a in assignments
        if a.course_id == course_id and a.assignment_id != exclude_id
    )


def validate_assignment(assignment: Assignment, stored: Iterable[Assignment], creating: bool = False) -> Assignment:
    """
    Checks one assignment against the assignments already stored.

    The weight total is a point-in-time check: deleting an assignment later
    can leave a course below 100, which course statistics report as
    incomplete weights.
    """
    stored = list(stored)

    if not assignment.assignment_name.strip():
        raise ValidationError("Assignment Name is required.", field="assignmentName")

    if creating and any(a.assignment_id == assignment.assignment_id for a in stored):
        raise DuplicateRecordError(f"Assignment ID {assignment.assignment_id} already exists.", field="assignmentId")

    if math.isnan(assignment.weight):
        raise ValidationError("Weight is required and must be a number.", field="weight")
    if assignment.weight < 0 or assignment.weight > 100:
        raise ValidationError("Weight must be between 0 and 100.", field="weight")

    total = course_weight_total(stored, assignment.course_id, exclude_id=assignment.assignment_id) + assignment.weight
    if total > 100 and not math.isclose(total, 100):
        raise ValidationError(
            f"Total weight for this course exceeds 100% (current total: {total:g}%)", field="weight"
        )

    if not assignment.is_group:
        return assignment.model_copy(update={"min_participants": None, "max_participants": None})

    min_p = assignment.min_participants
    max_p = assignment.max_participants
    if min_p is None or min_p < 1:
        raise ValidationError("Min Participants is required (min 1).", field="minParticipants")
    if max_p is None or max_p < 1:
        raise ValidationError("Max Participants is required (min 1).", field="maxParticipants")
    if min_p > max_p:
        raise ValidationError("Max Participants cannot be less than Min.", field="maxParticipants")

    return assignment
