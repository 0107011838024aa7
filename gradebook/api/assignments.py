"""作业管理 API。"""

from fastapi import APIRouter, Depends, status

from gradebook.api.auth import get_current_user
from gradebook.api.deps import get_assignment_service
from gradebook.models import User
from gradebook.schemas import (
    AssignmentCreate,
    AssignmentListResponse,
    AssignmentResponse,
    AssignmentUpdate,
)
from gradebook.services.assignments import AssignmentService

router = APIRouter()


@router.post(
    "/courses/{course_id}/assignments",
    response_model=AssignmentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_assignment(
    course_id: str,
    data: AssignmentCreate,
    current_user: User = Depends(get_current_user),
    service: AssignmentService = Depends(get_assignment_service),
):
    """创建作业（课程教师）。"""
    assignment = service.create_assignment(
        course_id,
        current_user.id,
        title=data.title,
        description=data.description,
        due_date=data.due_date,
        submission_type=data.submission_type,
        accepted_file_formats=data.accepted_file_formats,
    )
    return AssignmentResponse.from_entity(assignment)


@router.get("/courses/{course_id}/assignments", response_model=AssignmentListResponse)
async def list_assignments(
    course_id: str,
    current_user: User = Depends(get_current_user),
    service: AssignmentService = Depends(get_assignment_service),
):
    assignments = service.list_assignments(course_id, current_user.id)
    return AssignmentListResponse(
        assignments=[AssignmentResponse.from_entity(a) for a in assignments],
        total=len(assignments),
    )


@router.get("/assignments/{assignment_id}", response_model=AssignmentResponse)
async def get_assignment(
    assignment_id: str,
    current_user: User = Depends(get_current_user),
    service: AssignmentService = Depends(get_assignment_service),
):
    return AssignmentResponse.from_entity(service.get_assignment(assignment_id, current_user.id))


@router.patch("/assignments/{assignment_id}", response_model=AssignmentResponse)
async def update_assignment(
    assignment_id: str,
    data: AssignmentUpdate,
    current_user: User = Depends(get_current_user),
    service: AssignmentService = Depends(get_assignment_service),
):
    """修改作业：截止后或评分开始后不可修改。"""
    assignment = service.update_assignment(
        assignment_id,
        current_user.id,
        title=data.title,
        description=data.description,
        due_date=data.due_date,
    )
    return AssignmentResponse.from_entity(assignment)


@router.delete("/assignments/{assignment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_assignment(
    assignment_id: str,
    current_user: User = Depends(get_current_user),
    service: AssignmentService = Depends(get_assignment_service),
):
    service.delete_assignment(assignment_id, current_user.id)
