"""FastAPI 依赖：按请求会话组装仓储与服务。"""

from fastapi import Depends
from sqlalchemy.orm import Session

from gradebook.config import get_settings
from gradebook.db import get_db
from gradebook.repositories import (
    SqlAlchemyAssignmentRepository,
    SqlAlchemyDirectory,
    SqlAlchemySubmissionRepository,
)
from gradebook.services.assignments import AssignmentService
from gradebook.services.grading import GradingService
from gradebook.services.submissions import SubmissionService
from gradebook.utils.storage import LocalFileStorage


def _stores(db: Session):
    return (
        SqlAlchemyAssignmentRepository(db),
        SqlAlchemySubmissionRepository(db),
        SqlAlchemyDirectory(db),
    )


def get_assignment_service(db: Session = Depends(get_db)) -> AssignmentService:
    return AssignmentService(*_stores(db))


def get_submission_service(db: Session = Depends(get_db)) -> SubmissionService:
    settings = get_settings()
    return SubmissionService(
        *_stores(db),
        storage=LocalFileStorage(settings.upload_dir),
        max_file_size=settings.max_upload_bytes,
    )


def get_grading_service(db: Session = Depends(get_db)) -> GradingService:
    return GradingService(*_stores(db))
