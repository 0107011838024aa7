"""仓储层：服务依赖的存储契约及其 SQLAlchemy 实现。"""

from gradebook.repositories.assignments import SqlAlchemyAssignmentRepository
from gradebook.repositories.base import (
    AssignmentStore,
    Directory,
    DuplicateRecordError,
    RecordNotFoundError,
    SubmissionStore,
)
from gradebook.repositories.directory import SqlAlchemyDirectory
from gradebook.repositories.submissions import SqlAlchemySubmissionRepository

__all__ = [
    "AssignmentStore",
    "Directory",
    "DuplicateRecordError",
    "RecordNotFoundError",
    "SqlAlchemyAssignmentRepository",
    "SqlAlchemyDirectory",
    "SqlAlchemySubmissionRepository",
    "SubmissionStore",
]
