"""作业仓储的 SQLAlchemy 实现。"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from gradebook.domain import Assignment
from gradebook.models import AssignmentRecord
from gradebook.repositories.base import RecordNotFoundError


class SqlAlchemyAssignmentRepository:
    def __init__(self, db: Session) -> None:
        self.db = db

    def find_by_id(self, assignment_id: str) -> Optional[Assignment]:
        record = self.db.get(AssignmentRecord, assignment_id, populate_existing=True)
        return self._to_entity(record) if record else None

    def list_by_course(self, course_id: str) -> List[Assignment]:
        records = self.db.scalars(
            select(AssignmentRecord)
            .where(AssignmentRecord.course_id == course_id)
            .order_by(AssignmentRecord.due_date.asc())
        ).all()
        return [self._to_entity(record) for record in records]

    def save(self, assignment: Assignment) -> Assignment:
        self.db.add(AssignmentRecord(id=assignment.id, **self._values(assignment)))
        self._commit()
        return assignment

    def update(self, assignment: Assignment) -> Assignment:
        """整行覆盖写入，不做版本校验。"""

        stmt = (
            update(AssignmentRecord)
            .where(AssignmentRecord.id == assignment.id)
            .values(**self._values(assignment))
            .execution_options(synchronize_session=False)
        )
        try:
            result = self.db.execute(stmt)
        except SQLAlchemyError:
            self.db.rollback()
            raise
        if result.rowcount == 0:
            self.db.rollback()
            raise RecordNotFoundError(f"Assignment with ID {assignment.id} not found")
        self._commit()
        return assignment

    def delete(self, assignment_id: str) -> None:
        record = self.db.get(AssignmentRecord, assignment_id)
        if record is None:
            raise RecordNotFoundError(f"Assignment with ID {assignment_id} not found")
        # 提交记录经 ORM cascade 与外键 ondelete 一并删除
        self.db.delete(record)
        self._commit()

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

    @staticmethod
    def _values(assignment: Assignment) -> dict:
        return {
            "course_id": assignment.course_id,
            "title": assignment.title,
            "description": assignment.description,
            "due_date": assignment.due_date,
            "submission_type": assignment.submission_type,
            "accepted_file_formats": list(assignment.accepted_file_formats),
            "grading_started": assignment.grading_started,
            "created_at": assignment.created_at,
            "updated_at": assignment.updated_at,
        }

    @staticmethod
    def _to_entity(record: AssignmentRecord) -> Assignment:
        return Assignment.reconstitute(
            id=record.id,
            course_id=record.course_id,
            title=record.title,
            description=record.description,
            due_date=record.due_date,
            submission_type=record.submission_type,
            accepted_file_formats=record.accepted_file_formats or [],
            grading_started=record.grading_started,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )
