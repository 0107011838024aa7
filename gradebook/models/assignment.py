"""作业表。"""

from datetime import datetime
from typing import List

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.types import JSON

from gradebook.db import Base
from gradebook.models.enums import SubmissionType


class AssignmentRecord(Base):
    """作业的持久化形态；业务规则在 ``gradebook.domain.Assignment`` 中。"""

    __tablename__ = "assignments"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    course_id: Mapped[str] = mapped_column(
        ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    due_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    submission_type: Mapped[SubmissionType] = mapped_column(
        Enum(SubmissionType), nullable=False
    )
    # 格式: [".pdf", ".docx"]
    accepted_file_formats: Mapped[List[str]] = mapped_column(JSON, default=list)
    grading_started: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    course = relationship("Course", back_populates="assignments")
    submissions = relationship(
        "SubmissionRecord", back_populates="assignment", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<AssignmentRecord(id={self.id}, title={self.title}, locked={self.grading_started})>"
