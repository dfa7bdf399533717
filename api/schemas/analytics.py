from typing import Dict
from datetime import datetime
from api.schemas.base import BaseSchema, CamelModel


class UserDistribution(CamelModel):
    total: int
    by_role: Dict[str, int]


class CourseStatusCounts(CamelModel):
    total: int
    by_status: Dict[str, int]


class AssignmentCounts(CamelModel):
    total: int
    by_status: Dict[str, int]
    by_type: Dict[str, int]


class EnrollmentStats(CamelModel):
    total: int
    completed: int
    completion_rate: float  # percent of enrollments completed
    average_progress: float


class PopularCourse(CamelModel):
    course_id: int
    title: str
    enrollment_count: int


class FacultySummary(CamelModel):
    faculty_id: int
    course_count: int
    student_count: int
    assignment_count: int
    pending_submissions: int
    graded_submissions: int


class StudentSummary(CamelModel):
    student_id: int
    course_count: int
    assignment_count: int
    completed_assignments: int
    pending_assignments: int
    average_progress: float


class ActivityResponse(BaseSchema):
    id: int
    user_id: int
    action: str
    detail: str
    timestamp: datetime
