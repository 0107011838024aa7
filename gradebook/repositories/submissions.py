"""提交仓储的 SQLAlchemy 实现。

``update`` 以单条 ``UPDATE ... WHERE id = :id AND version = :persisted_version``
完成比较并交换；影响行数为 0 时再区分"不存在"与"版本冲突"。
"""

from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from gradebook.domain import Submission, VersionConflictError
from gradebook.models import SubmissionRecord
from gradebook.repositories.base import DuplicateRecordError, RecordNotFoundError

logger = logging.getLogger(__name__)


class SqlAlchemySubmissionRepository:
    def __init__(self, db: Session) -> None:
        self.db = db

    def find_by_id(self, submission_id: str) -> Optional[Submission]:
        record = self.db.get(SubmissionRecord, submission_id, populate_existing=True)
        return self._to_entity(record) if record else None

    def find_by_assignment_and_student(
        self, assignment_id: str, student_id: str
    ) -> Optional[Submission]:
        record = self.db.scalars(
            select(SubmissionRecord)
            .where(
                SubmissionRecord.assignment_id == assignment_id,
                SubmissionRecord.student_id == student_id,
            )
            .execution_options(populate_existing=True)
        ).first()
        return self._to_entity(record) if record else None

    def list_by_assignment(self, assignment_id: str) -> List[Submission]:
        records = self.db.scalars(
            select(SubmissionRecord)
            .where(SubmissionRecord.assignment_id == assignment_id)
            .order_by(SubmissionRecord.submitted_at.asc(), SubmissionRecord.created_at.asc())
            .execution_options(populate_existing=True)
        ).all()
        return [self._to_entity(record) for record in records]

    def save(self, submission: Submission) -> Submission:
        self.db.add(SubmissionRecord(id=submission.id, **self._values(submission)))
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise DuplicateRecordError(
                f"Submission for assignment {submission.assignment_id} "
                f"and student {submission.student_id} already exists"
            ) from exc
        except SQLAlchemyError:
            self.db.rollback()
            raise
        submission.mark_persisted()
        return submission

    def update(self, submission: Submission) -> Submission:
        if submission.persisted_version is None:
            raise ValueError("Submission has not been persisted yet; use save() instead")

        stmt = (
            update(SubmissionRecord)
            .where(
                SubmissionRecord.id == submission.id,
                SubmissionRecord.version == submission.persisted_version,
            )
            .values(**self._values(submission))
            .execution_options(synchronize_session=False)
        )
        try:
            result = self.db.execute(stmt)
            if result.rowcount == 0:
                self.db.rollback()
                exists = self.db.scalar(
                    select(SubmissionRecord.id).where(SubmissionRecord.id == submission.id)
                )
                if exists is None:
                    raise RecordNotFoundError(f"Submission with ID {submission.id} not found")
                logger.warning(
                    "Version conflict on submission %s (expected stored version %s)",
                    submission.id,
                    submission.persisted_version,
                )
                raise VersionConflictError()
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        submission.mark_persisted()
        return submission

    @staticmethod
    def _values(submission: Submission) -> dict:
        return {
            "assignment_id": submission.assignment_id,
            "student_id": submission.student_id,
            "content": submission.content,
            "file_path": submission.file_path,
            "file_name": submission.file_name,
            "grade": submission.grade,
            "feedback": submission.feedback,
            "is_late": submission.is_late,
            "status": submission.status,
            "version": submission.version,
            "submitted_at": submission.submitted_at,
            "graded_at": submission.graded_at,
            "created_at": submission.created_at,
            "updated_at": submission.updated_at,
        }

    @staticmethod
    def _to_entity(record: SubmissionRecord) -> Submission:
        return Submission.reconstitute(
            id=record.id,
            assignment_id=record.assignment_id,
            student_id=record.student_id,
            status=record.status,
            version=record.version,
            content=record.content,
            file_path=record.file_path,
            file_name=record.file_name,
            grade=record.grade,
            feedback=record.feedback,
            is_late=record.is_late,
            submitted_at=record.submitted_at,
            graded_at=record.graded_at,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )
