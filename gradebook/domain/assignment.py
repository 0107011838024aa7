"""作业实体 - 截止时间、提交格式与评分锁定。

生命周期：创建（截止时间在未来）→ 开放提交（截止后仍接受迟交）→
开始评分（锁定，不可逆）。
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional

from .clock import as_utc, utc_now
from .errors import DomainValidationError, InvalidStateError


class SubmissionType(str, enum.Enum):
    """作业接受的提交形式。"""

    FILE = "FILE"
    TEXT = "TEXT"
    BOTH = "BOTH"

    @property
    def requires_file(self) -> bool:
        return self in (SubmissionType.FILE, SubmissionType.BOTH)

    @property
    def requires_text(self) -> bool:
        return self in (SubmissionType.TEXT, SubmissionType.BOTH)


@dataclass
class Assignment:
    """作业聚合根。

    ``create`` 用于新建（校验截止时间在未来），``reconstitute`` 用于从存储
    加载历史数据（跳过该校验），两者共用 ``_validate_invariants``。
    """

    id: str
    course_id: str
    title: str
    description: str
    due_date: datetime
    submission_type: SubmissionType
    accepted_file_formats: List[str] = field(default_factory=list)
    grading_started: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        *,
        id: str,
        course_id: str,
        title: str,
        description: str,
        due_date: datetime,
        submission_type: SubmissionType | str,
        accepted_file_formats: Optional[Iterable[str]] = None,
        now: Optional[datetime] = None,
    ) -> "Assignment":
        now = now or utc_now()
        assignment = cls(
            id=id,
            course_id=course_id,
            title=title,
            description=description,
            due_date=due_date,
            submission_type=submission_type,
            accepted_file_formats=list(accepted_file_formats or []),
            grading_started=False,
            created_at=now,
            updated_at=now,
        )
        assignment._validate_invariants()
        if assignment.due_date <= now:
            raise DomainValidationError("Assignment due date must be in the future")
        return assignment

    @classmethod
    def reconstitute(
        cls,
        *,
        id: str,
        course_id: str,
        title: str,
        description: str,
        due_date: datetime,
        submission_type: SubmissionType | str,
        accepted_file_formats: Optional[Iterable[str]] = None,
        grading_started: bool = False,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ) -> "Assignment":
        assignment = cls(
            id=id,
            course_id=course_id,
            title=title,
            description=description,
            due_date=due_date,
            submission_type=submission_type,
            accepted_file_formats=list(accepted_file_formats or []),
            grading_started=bool(grading_started),
            created_at=as_utc(created_at),
            updated_at=as_utc(updated_at),
        )
        assignment._validate_invariants()
        return assignment

    def _validate_invariants(self) -> None:
        if not self.id or not str(self.id).strip():
            raise DomainValidationError("Assignment ID is required")
        if not self.course_id or not str(self.course_id).strip():
            raise DomainValidationError("Course ID is required")
        _require_text(self.title, "Assignment title is required")
        _require_text(self.description, "Assignment description is required")
        if self.due_date is None:
            raise DomainValidationError("Assignment due date is required")
        self.due_date = as_utc(self.due_date)
        try:
            self.submission_type = SubmissionType(self.submission_type)
        except ValueError:
            raise DomainValidationError(
                f"Invalid submission type: {self.submission_type}. Must be FILE, TEXT, or BOTH"
            ) from None
        now = utc_now()
        self.created_at = self.created_at or now
        self.updated_at = self.updated_at or self.created_at

    # === 查询 ===

    def is_past_due_date(self, now: Optional[datetime] = None) -> bool:
        return (now or utc_now()) > self.due_date

    def is_submission_late(self, now: Optional[datetime] = None) -> bool:
        return (now or utc_now()) > self.due_date

    def can_accept_submissions(self) -> bool:
        # 截止后仍接受迟交，只有评分开始才关闭
        return not self.grading_started

    def has_grading_started(self) -> bool:
        return self.grading_started

    # === 变更 ===

    def update_title(self, title: str, now: Optional[datetime] = None) -> None:
        now = now or utc_now()
        _require_text(title, "Assignment title is required")
        self._ensure_editable(now)
        self.title = title
        self.updated_at = now

    def update_description(self, description: str, now: Optional[datetime] = None) -> None:
        now = now or utc_now()
        _require_text(description, "Assignment description is required")
        self._ensure_editable(now)
        self.description = description
        self.updated_at = now

    def update_due_date(self, due_date: datetime, now: Optional[datetime] = None) -> None:
        now = now or utc_now()
        if due_date is None:
            raise DomainValidationError("Assignment due date is required")
        due_date = as_utc(due_date)
        if due_date <= now:
            raise DomainValidationError("Assignment due date must be in the future")
        self._ensure_editable(now)
        self.due_date = due_date
        self.updated_at = now

    def start_grading(self, now: Optional[datetime] = None) -> None:
        """锁定作业：此后不再接受提交，也不可编辑。"""

        if self.grading_started:
            raise InvalidStateError("Grading has already started for this assignment")
        self.grading_started = True
        self.updated_at = now or utc_now()

    def _ensure_editable(self, now: datetime) -> None:
        if self.is_past_due_date(now):
            raise InvalidStateError("Cannot edit assignment after due date")
        if self.grading_started:
            raise InvalidStateError("Cannot edit assignment after grading has started")


def _require_text(value: Optional[str], message: str) -> None:
    if not isinstance(value, str) or not value.strip():
        raise DomainValidationError(message)
