"""提交与评分相关的请求与响应模型。"""

from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, StrictFloat, StrictInt

from gradebook.domain import Submission, SubmissionStatus


class GradeRequest(BaseModel):
    """``version`` 为教师加载提交时看到的版本号，用于检测并发评分。"""

    # 严格数值：布尔值与字符串不做隐式转换
    grade: Union[StrictInt, StrictFloat]
    feedback: Optional[str] = None
    version: Optional[int] = None


class SubmissionResponse(BaseModel):
    id: str
    assignment_id: str
    student_id: str
    status: SubmissionStatus
    content: Optional[str]
    file_path: Optional[str]
    file_name: Optional[str]
    grade: Optional[float]
    feedback: Optional[str]
    is_late: bool
    version: int
    submitted_at: Optional[datetime]
    graded_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, submission: Submission) -> "SubmissionResponse":
        return cls(
            id=submission.id,
            assignment_id=submission.assignment_id,
            student_id=submission.student_id,
            status=submission.status,
            content=submission.content,
            file_path=submission.file_path,
            file_name=submission.file_name,
            grade=submission.grade,
            feedback=submission.feedback,
            is_late=submission.is_late,
            version=submission.version,
            submitted_at=submission.submitted_at,
            graded_at=submission.graded_at,
            created_at=submission.created_at,
            updated_at=submission.updated_at,
        )


class SubmissionListResponse(BaseModel):
    submissions: List[SubmissionResponse]
    total: int
