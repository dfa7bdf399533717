# Import all models here so Base.metadata is complete for create_all
from api.models.user import User, UserRole
from api.models.course import Course, CourseStatus
from api.models.enrollment import Enrollment, EnrollmentStatus
from api.models.assignment import Assignment, AssignmentStatus, AssignmentType
from api.models.submission import Submission, SubmissionStatus
from api.models.announcement import Announcement
from api.models.activity import Activity

__all__ = [
    "User",
    "UserRole",
    "Course",
    "CourseStatus",
    "Enrollment",
    "EnrollmentStatus",
    "Assignment",
    "AssignmentStatus",
    "AssignmentType",
    "Submission",
    "SubmissionStatus",
    "Announcement",
    "Activity",
]
