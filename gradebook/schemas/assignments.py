"""作业相关的请求与响应模型。"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from gradebook.domain import Assignment, SubmissionType


class AssignmentCreate(BaseModel):
    title: str
    description: str
    due_date: datetime
    submission_type: SubmissionType
    accepted_file_formats: List[str] = Field(default_factory=list)


class AssignmentUpdate(BaseModel):
    """只修改提供的字段；全部缺省时由服务层拒绝。"""

    title: Optional[str] = None
    description: Optional[str] = None
    due_date: Optional[datetime] = None


class AssignmentResponse(BaseModel):
    id: str
    course_id: str
    title: str
    description: str
    due_date: datetime
    submission_type: SubmissionType
    accepted_file_formats: List[str]
    grading_started: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, assignment: Assignment) -> "AssignmentResponse":
        return cls(
            id=assignment.id,
            course_id=assignment.course_id,
            title=assignment.title,
            description=assignment.description,
            due_date=assignment.due_date,
            submission_type=assignment.submission_type,
            accepted_file_formats=list(assignment.accepted_file_formats),
            grading_started=assignment.grading_started,
            created_at=assignment.created_at,
            updated_at=assignment.updated_at,
        )


class AssignmentListResponse(BaseModel):
    assignments: List[AssignmentResponse]
    total: int
