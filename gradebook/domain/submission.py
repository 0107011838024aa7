"""提交实体 - 学生对某个作业的一次提交，含评分与迟交标记。

状态机::

    NOT_SUBMITTED --submit--> SUBMITTED --resubmit--> SUBMITTED
                                  |--assign_grade--> GRADED --update_grade--> GRADED

``version`` 用于乐观锁：``resubmit`` / ``assign_grade`` / ``update_grade``
各自加 1，并在修改任何字段之前校验调用方传入的 ``expected_version``。
"""

from __future__ import annotations

import enum
import math
import numbers
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from .clock import as_utc, utc_now
from .errors import DomainValidationError, InvalidStateError, VersionConflictError

MIN_GRADE = 0
MAX_GRADE = 100


class SubmissionStatus(str, enum.Enum):
    """提交状态。"""

    NOT_SUBMITTED = "NOT_SUBMITTED"
    SUBMITTED = "SUBMITTED"
    GRADED = "GRADED"


@dataclass
class Submission:
    id: str
    assignment_id: str
    student_id: str
    status: SubmissionStatus = SubmissionStatus.NOT_SUBMITTED
    content: Optional[str] = None
    file_path: Optional[str] = None
    file_name: Optional[str] = None
    grade: Optional[float] = None
    feedback: Optional[str] = None
    is_late: bool = False
    version: int = 0
    submitted_at: Optional[datetime] = None
    graded_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    # 从存储加载时的版本号，仓储据此做条件更新；新建实体为 None
    persisted_version: Optional[int] = field(default=None, compare=False, repr=False)

    @classmethod
    def create(
        cls,
        *,
        id: str,
        assignment_id: str,
        student_id: str,
        status: SubmissionStatus | str = SubmissionStatus.NOT_SUBMITTED,
        content: Optional[str] = None,
        file_path: Optional[str] = None,
        file_name: Optional[str] = None,
        is_late: bool = False,
        now: Optional[datetime] = None,
    ) -> "Submission":
        now = now or utc_now()
        submission = cls(
            id=id,
            assignment_id=assignment_id,
            student_id=student_id,
            status=status,
            content=content,
            file_path=file_path,
            file_name=file_name,
            is_late=is_late,
            version=0,
            created_at=now,
            updated_at=now,
        )
        submission._validate_invariants()
        if submission.status == SubmissionStatus.GRADED:
            raise DomainValidationError("New submission must start as NOT_SUBMITTED or SUBMITTED")
        if submission.status == SubmissionStatus.SUBMITTED:
            submission.submitted_at = now
        return submission

    @classmethod
    def reconstitute(
        cls,
        *,
        id: str,
        assignment_id: str,
        student_id: str,
        status: SubmissionStatus | str,
        version: int,
        content: Optional[str] = None,
        file_path: Optional[str] = None,
        file_name: Optional[str] = None,
        grade: Optional[float] = None,
        feedback: Optional[str] = None,
        is_late: bool = False,
        submitted_at: Optional[datetime] = None,
        graded_at: Optional[datetime] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ) -> "Submission":
        submission = cls(
            id=id,
            assignment_id=assignment_id,
            student_id=student_id,
            status=status,
            content=content,
            file_path=file_path,
            file_name=file_name,
            grade=grade,
            feedback=feedback,
            is_late=bool(is_late),
            version=version,
            submitted_at=as_utc(submitted_at),
            graded_at=as_utc(graded_at),
            created_at=as_utc(created_at),
            updated_at=as_utc(updated_at),
        )
        submission._validate_invariants()
        submission.persisted_version = submission.version
        return submission

    def _validate_invariants(self) -> None:
        if not self.id or not str(self.id).strip():
            raise DomainValidationError("Submission ID is required")
        if not self.assignment_id or not str(self.assignment_id).strip():
            raise DomainValidationError("Assignment ID is required")
        if not self.student_id or not str(self.student_id).strip():
            raise DomainValidationError("Student ID is required")
        try:
            self.status = SubmissionStatus(self.status)
        except ValueError:
            raise DomainValidationError(
                f"Invalid submission status: {self.status}. "
                "Must be NOT_SUBMITTED, SUBMITTED, or GRADED"
            ) from None
        if self.grade is not None:
            validate_grade(self.grade)
        if isinstance(self.version, bool) or not isinstance(self.version, int) or self.version < 0:
            raise DomainValidationError("Version must be non-negative")
        if self.status == SubmissionStatus.GRADED and self.grade is None:
            raise DomainValidationError("Graded submission must have a grade")
        now = utc_now()
        self.created_at = self.created_at or now
        self.updated_at = self.updated_at or self.created_at

    # === 查询 ===

    def is_graded(self) -> bool:
        return self.status == SubmissionStatus.GRADED

    def is_submitted(self) -> bool:
        return self.status in (SubmissionStatus.SUBMITTED, SubmissionStatus.GRADED)

    # === 状态迁移 ===

    def submit(self, is_late: bool, now: Optional[datetime] = None) -> None:
        if self.status != SubmissionStatus.NOT_SUBMITTED:
            raise InvalidStateError("Submission has already been submitted")
        now = now or utc_now()
        self.status = SubmissionStatus.SUBMITTED
        self.is_late = is_late
        self.submitted_at = now
        self.updated_at = now

    def resubmit(
        self,
        is_late: bool,
        expected_version: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> None:
        self._check_version(expected_version)
        if self.status == SubmissionStatus.GRADED:
            raise InvalidStateError("Cannot resubmit after grading has started")
        if self.status == SubmissionStatus.NOT_SUBMITTED:
            raise InvalidStateError("Cannot resubmit a submission that has not been submitted")
        now = now or utc_now()
        self.is_late = is_late
        self.submitted_at = now
        self.version += 1
        self.updated_at = now

    def update_content(
        self,
        content: Optional[str] = None,
        file_path: Optional[str] = None,
        file_name: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> None:
        if self.status == SubmissionStatus.GRADED:
            raise InvalidStateError("Cannot update content after grading has started")
        self.content = content
        self.file_path = file_path
        self.file_name = file_name
        self.updated_at = now or utc_now()

    def assign_grade(
        self,
        grade: Any,
        feedback: Optional[str] = None,
        expected_version: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> None:
        # 顺序固定：版本 → 成绩取值 → 状态
        self._check_version(expected_version)
        validate_grade(grade)
        if self.status == SubmissionStatus.NOT_SUBMITTED:
            raise InvalidStateError("Cannot grade submission that has not been submitted")
        now = now or utc_now()
        self.grade = grade
        self.feedback = feedback
        self.status = SubmissionStatus.GRADED
        self.graded_at = now
        self.version += 1
        self.updated_at = now

    def update_grade(
        self,
        grade: Any,
        feedback: Optional[str] = None,
        expected_version: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> None:
        self._check_version(expected_version)
        validate_grade(grade)
        if self.status != SubmissionStatus.GRADED:
            raise InvalidStateError("Cannot update grade for submission that has not been graded")
        self.grade = grade
        self.feedback = feedback
        self.version += 1
        self.updated_at = now or utc_now()

    def mark_persisted(self) -> None:
        """仓储写入成功后调用，记录当前版本为存储中的版本。"""

        self.persisted_version = self.version

    def _check_version(self, expected_version: Optional[int]) -> None:
        if expected_version is not None and expected_version != self.version:
            raise VersionConflictError()


def validate_grade(grade: Any) -> None:
    """成绩必须是 [0, 100] 内的有限数值。"""

    if (
        isinstance(grade, bool)
        or not isinstance(grade, numbers.Real)
        or not math.isfinite(grade)
    ):
        raise DomainValidationError("Grade must be a valid number")
    if grade < MIN_GRADE or grade > MAX_GRADE:
        raise DomainValidationError("Grade must be between 0 and 100")
