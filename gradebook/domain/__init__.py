"""领域层：作业与提交实体，不依赖数据库或 HTTP。"""

from .assignment import Assignment, SubmissionType
from .clock import Clock, as_utc, utc_now
from .errors import (
    DomainError,
    DomainValidationError,
    InvalidStateError,
    VersionConflictError,
)
from .submission import Submission, SubmissionStatus, validate_grade

__all__ = [
    "Assignment",
    "Clock",
    "DomainError",
    "DomainValidationError",
    "InvalidStateError",
    "Submission",
    "SubmissionStatus",
    "SubmissionType",
    "VersionConflictError",
    "as_utc",
    "utc_now",
    "validate_grade",
]
