"""API 请求/响应模型。"""

from gradebook.schemas.assignments import (
    AssignmentCreate,
    AssignmentListResponse,
    AssignmentResponse,
    AssignmentUpdate,
)
from gradebook.schemas.common import ErrorBody, ErrorResponse
from gradebook.schemas.submissions import (
    GradeRequest,
    SubmissionListResponse,
    SubmissionResponse,
)

__all__ = [
    "AssignmentCreate",
    "AssignmentListResponse",
    "AssignmentResponse",
    "AssignmentUpdate",
    "ErrorBody",
    "ErrorResponse",
    "GradeRequest",
    "SubmissionListResponse",
    "SubmissionResponse",
]
