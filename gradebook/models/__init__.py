"""核心 SQLAlchemy 模型定义。"""

from gradebook.models.assignment import AssignmentRecord
from gradebook.models.course import Course, Enrollment
from gradebook.models.enums import CourseStatus, SubmissionStatus, SubmissionType, UserRole
from gradebook.models.submission import SubmissionRecord
from gradebook.models.user import User

__all__ = [
    "AssignmentRecord",
    "Course",
    "CourseStatus",
    "Enrollment",
    "SubmissionRecord",
    "SubmissionStatus",
    "SubmissionType",
    "User",
    "UserRole",
]
