"""
Grade aggregation over in-memory snapshots of assignments and submissions.

Every function here is pure: callers fetch records through the repository
and pass them in. Grades are floats in [0, 100]; a submission without a
numeric grade counts as submitted but not graded.
"""

import math
from typing import Dict, Iterable, List, Optional, Sequence

from registrar.db.models import Assignment, Course, Student, Submission
from registrar.schemas.grades import (
    AssignmentRanking,
    AssignmentStats,
    CourseGrade,
    CourseInsights,
    CourseRanking,
    CourseStatistics,
    GradeBucket,
    StudentRanking,
    StudentSummary,
)

FAILING_THRESHOLD = 55

# (label, lower bound, upper bound shown to users)
GRADE_BANDS = (
    ("0-54", 0, 54),
    ("55-64", 55, 64),
    ("65-74", 65, 74),
    ("75-84", 75, 84),
    ("85-100", 85, 100),
)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def numeric_grades(submissions: Iterable[Submission]) -> List[float]:
    return [s.grade for s in submissions if s.grade is not None]


def band_for(grade: float) -> Optional[str]:
    """
    Label of the band holding ``grade``, or None outside [0, 100].

    A band runs from its lower bound up to the next band's lower bound, so
    54.5 lands in "0-54" rather than between bands.
    """
    if grade < 0 or grade > 100:
        return None
    for index, (label, low, _) in enumerate(GRADE_BANDS):
        upper = GRADE_BANDS[index + 1][1] if index + 1 < len(GRADE_BANDS) else None
        if grade >= low and (upper is None or grade < upper):
            return label
    return None


def bucket_grades(grades: Iterable[float]) -> List[GradeBucket]:
    buckets = {label: GradeBucket(label=label, min=low, max=high) for label, low, high in GRADE_BANDS}
    for grade in grades:
        label = band_for(grade)
        if label is not None:
            buckets[label].count += 1
    return list(buckets.values())


def average(grades: Sequence[float]) -> float:
    if not grades:
        return 0.0
    return sum(grades) / len(grades)


def median(grades: Sequence[float]) -> float:
    if not grades:
        return 0.0
    ordered = sorted(grades)
    mid = len(ordered) // 2
    if len(ordered) % 2:
        return ordered[mid]
    return (ordered[mid - 1] + ordered[mid]) / 2


def pass_rate(grades: Sequence[float]) -> float:
    """Percentage of graded values at or above the failing threshold."""
    if not grades:
        return 0.0
    passed = sum(1 for g in grades if g >= FAILING_THRESHOLD)
    return passed / len(grades) * 100


def failing_rate(grades: Sequence[float]) -> float:
    if not grades:
        return 0.0
    return 100 - pass_rate(grades)


def submission_for(
    submissions: Iterable[Submission], student_id: str, assignment: Assignment
) -> Optional[Submission]:
    """
    The student's submission for an assignment: their own record first,
    otherwise a record that lists them as a partner.
    """
    as_partner = None
    for submission in submissions:
        if submission.assignment_id != assignment.assignment_id or submission.course_id != assignment.course_id:
            continue
        if submission.student_id == student_id:
            return submission
        if as_partner is None and student_id in submission.partner_ids:
            as_partner = submission
    return as_partner


def graded_weight(assignments: Iterable[Assignment], submissions: Sequence[Submission], student_id: str) -> float:
    """Sum of the weights of assignments the student has a numeric grade for."""
    total = 0.0
    for assignment in assignments:
        submission = submission_for(submissions, student_id, assignment)
        if submission is not None and submission.grade is not None:
            total += assignment.weight
    return total


def final_grade(
    assignments: Iterable[Assignment],
    submissions: Sequence[Submission],
    student_id: str,
    course_id: Optional[str] = None,
) -> Optional[int]:
    """
    Weighted final grade of one student.

    Only defined when the graded assignments' weights add up to 100;
    otherwise returns None so no partial grade is shown.
    """
    if course_id is not None:
        assignments = [a for a in assignments if a.course_id == course_id]

    total_weight = 0.0
    weighted_sum = 0.0
    for assignment in assignments:
        submission = submission_for(submissions, student_id, assignment)
        if submission is None or submission.grade is None:
            continue
        total_weight += assignment.weight
        weighted_sum += submission.grade * assignment.weight

    if not math.isclose(total_weight, 100):
        return None
    return round_half_up(weighted_sum / 100)


def submission_rate(
    assignments: Sequence[Assignment], submissions: Sequence[Submission], student_ids: Sequence[str]
) -> float:
    """Percentage of (student, assignment) pairs that have a submission record."""
    possible = len(assignments) * len(student_ids)
    if not possible:
        return 0.0
    submitted = 0
    for student_id in student_ids:
        for assignment in assignments:
            if submission_for(submissions, student_id, assignment) is not None:
                submitted += 1
    return submitted / possible * 100


def assignment_breakdown(assignments: Iterable[Assignment], submissions: Sequence[Submission]) -> List[AssignmentStats]:
    breakdown = []
    for assignment in assignments:
        related = [
            s for s in submissions
            if s.assignment_id == assignment.assignment_id and s.course_id == assignment.course_id
        ]
        grades = numeric_grades(related)
        breakdown.append(AssignmentStats(
            assignment_id=assignment.assignment_id,
            assignment_name=assignment.assignment_name,
            weight=assignment.weight,
            average=average(grades),
            median=median(grades),
            submitted_count=len(related),
            graded_count=len(grades),
            distribution=bucket_grades(grades),
        ))
    return breakdown


def course_statistics(
    course_id: str,
    assignments: Iterable[Assignment],
    submissions: Iterable[Submission],
    students: Iterable[Student],
) -> CourseStatistics:
    course_assignments = [a for a in assignments if a.course_id == course_id]
    assignment_ids = {a.assignment_id for a in course_assignments}
    course_submissions = [
        s for s in submissions if s.course_id == course_id and s.assignment_id in assignment_ids
    ]
    enrolled_ids = [s.student_id for s in students if course_id in s.enrolled_courses]
    grades = numeric_grades(course_submissions)
    weight_total = sum(a.weight for a in course_assignments)

    return CourseStatistics(
        course_id=course_id,
        average=average(grades),
        median=median(grades),
        pass_rate=pass_rate(grades),
        failing_rate=failing_rate(grades),
        submission_rate=submission_rate(course_assignments, course_submissions, enrolled_ids),
        enrolled_count=len(enrolled_ids),
        submitted_count=len(course_submissions),
        graded_count=len(grades),
        weight_total=weight_total,
        weights_complete=math.isclose(weight_total, 100),
        distribution=bucket_grades(grades),
        assignments=assignment_breakdown(course_assignments, course_submissions),
    )


def _average_or_none(grades: Sequence[float]) -> Optional[float]:
    return average(grades) if grades else None


def student_summary(
    student: Student,
    courses: Iterable[Course],
    assignments: Iterable[Assignment],
    submissions: Sequence[Submission],
) -> StudentSummary:
    enrolled = set(student.enrolled_courses)
    student_courses = [c for c in courses if c.course_id in enrolled]
    student_assignments = [a for a in assignments if a.course_id in enrolled]
    own = [s for s in submissions if s.student_id == student.student_id]
    grades = numeric_grades(own)

    course_grades = []
    for course in student_courses:
        course_assignments = [a for a in student_assignments if a.course_id == course.course_id]
        own_in_course = [s for s in own if s.course_id == course.course_id]
        class_grades = numeric_grades(s for s in submissions if s.course_id == course.course_id)
        own_grades = numeric_grades(own_in_course)
        course_grades.append(CourseGrade(
            course_id=course.course_id,
            course_name=course.course_name,
            student_average=_average_or_none(own_grades),
            class_average=_average_or_none(class_grades),
            top_grade=max(own_grades) if own_grades else None,
            submission_rate=submission_rate(course_assignments, own_in_course, [student.student_id]),
            final_grade=final_grade(course_assignments, submissions, student.student_id),
        ))

    return StudentSummary(
        student_id=student.student_id,
        full_name=student.full_name,
        average=_average_or_none(grades),
        top_grade=max(grades) if grades else None,
        submission_rate=submission_rate(student_assignments, own, [student.student_id]),
        active_courses=len(student_courses),
        courses=course_grades,
    )


def _is_late(submission: Submission, assignment: Assignment) -> bool:
    if submission.submission_date is None or assignment.due_date is None:
        return False
    return submission.submission_date.date() > assignment.due_date


def course_insights(
    courses: Sequence[Course],
    students: Sequence[Student],
    assignments: Sequence[Assignment],
    submissions: Sequence[Submission],
) -> CourseInsights:
    """Dashboard highlights across every course; ties go to the first record."""
    insights = CourseInsights()

    by_course: Dict[str, List[Submission]] = {}
    for submission in submissions:
        by_course.setdefault(submission.course_id, []).append(submission)

    if courses:
        averages = [
            (course, average(numeric_grades(by_course.get(course.course_id, []))))
            for course in courses
        ]
        course, value = max(averages, key=lambda pair: pair[1])
        insights.top_performing_course = CourseRanking(
            course_id=course.course_id, course_name=course.course_name, value=value
        )

        failures = [
            (course, sum(1 for g in numeric_grades(by_course.get(course.course_id, [])) if g < FAILING_THRESHOLD))
            for course in courses
        ]
        course, value = max(failures, key=lambda pair: pair[1])
        insights.most_failed_course = CourseRanking(
            course_id=course.course_id, course_name=course.course_name, value=value
        )

    if students:
        averages = [
            (student, average(numeric_grades(s for s in submissions if s.student_id == student.student_id)))
            for student in students
        ]
        student, value = max(averages, key=lambda pair: pair[1])
        insights.top_performing_student = StudentRanking(
            student_id=student.student_id, full_name=student.full_name, average=value
        )

    if assignments:
        late_counts = [
            (assignment, sum(
                1 for s in submissions
                if s.assignment_id == assignment.assignment_id and _is_late(s, assignment)
            ))
            for assignment in assignments
        ]
        assignment, count = max(late_counts, key=lambda pair: pair[1])
        insights.most_late_submissions = AssignmentRanking(
            assignment_id=assignment.assignment_id,
            assignment_name=assignment.assignment_name,
            course_id=assignment.course_id,
            late_count=count,
        )

    return insights
