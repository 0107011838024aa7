"""作业提交与评分 API。"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from gradebook.api.auth import get_current_user
from gradebook.api.deps import get_grading_service, get_submission_service
from gradebook.models import User
from gradebook.schemas import ErrorResponse, GradeRequest, SubmissionListResponse, SubmissionResponse
from gradebook.services.grading import GradingService
from gradebook.services.submissions import FilePayload, SubmissionService

router = APIRouter()

_GRADE_ERRORS = {409: {"model": ErrorResponse, "description": "提交已被他人修改，需重新加载"}}


@router.post(
    "/assignments/{assignment_id}/submissions",
    response_model=SubmissionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_assignment(
    assignment_id: str,
    content: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    service: SubmissionService = Depends(get_submission_service),
):
    """提交或重新提交作业（学生）。multipart 字段：``content`` 与 ``file``。"""
    payload = None
    if file is not None and file.filename:
        data = await file.read()
        payload = FilePayload(
            data=data,
            filename=file.filename,
            mime_type=file.content_type or "application/octet-stream",
            size=file.size,
        )
    submission = service.submit_assignment(assignment_id, current_user.id, content, payload)
    return SubmissionResponse.from_entity(submission)


@router.get("/assignments/{assignment_id}/submissions", response_model=SubmissionListResponse)
async def list_submissions(
    assignment_id: str,
    current_user: User = Depends(get_current_user),
    service: SubmissionService = Depends(get_submission_service),
):
    """列出作业的全部提交（课程教师）。"""
    submissions = service.list_submissions(assignment_id, current_user.id)
    return SubmissionListResponse(
        submissions=[SubmissionResponse.from_entity(s) for s in submissions],
        total=len(submissions),
    )


@router.get(
    "/assignments/{assignment_id}/submissions/me",
    response_model=Optional[SubmissionResponse],
)
async def get_my_submission(
    assignment_id: str,
    current_user: User = Depends(get_current_user),
    service: SubmissionService = Depends(get_submission_service),
):
    """当前学生的提交，尚未提交时返回 null。"""
    submission = service.get_my_submission(assignment_id, current_user.id)
    return SubmissionResponse.from_entity(submission) if submission else None


@router.get("/submissions/{submission_id}", response_model=SubmissionResponse)
async def get_submission(
    submission_id: str,
    current_user: User = Depends(get_current_user),
    service: SubmissionService = Depends(get_submission_service),
):
    return SubmissionResponse.from_entity(service.get_submission(submission_id, current_user.id))


@router.post(
    "/submissions/{submission_id}/grade", response_model=SubmissionResponse, responses=_GRADE_ERRORS
)
async def grade_submission(
    submission_id: str,
    data: GradeRequest,
    current_user: User = Depends(get_current_user),
    service: GradingService = Depends(get_grading_service),
):
    """评分（课程教师）。携带 ``version`` 时，版本不一致返回 409。"""
    submission = service.grade_submission(
        submission_id, current_user.id, data.grade, data.feedback, data.version
    )
    return SubmissionResponse.from_entity(submission)


@router.put(
    "/submissions/{submission_id}/grade", response_model=SubmissionResponse, responses=_GRADE_ERRORS
)
async def update_grade(
    submission_id: str,
    data: GradeRequest,
    current_user: User = Depends(get_current_user),
    service: GradingService = Depends(get_grading_service),
):
    """修改已评分提交的成绩。"""
    submission = service.update_grade(
        submission_id, current_user.id, data.grade, data.feedback, data.version
    )
    return SubmissionResponse.from_entity(submission)
