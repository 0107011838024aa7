"""评分服务：首次评分与修改成绩。

流程：
1. 加载评分人、提交、作业与课程，校验评分权限；
2. 已归档课程只读，拒绝评分；
3. 校验成绩取值；
4. 作业尚未锁定时先锁定（尽力而为，失败只记日志）；
5. 以调用方看到的 ``expected_version`` 做乐观锁，写入成绩。

锁定写入与成绩写入是两次独立提交：锁定失败不会阻止评分，
评分失败也不会回滚已经生效的锁定。
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError

from gradebook.domain import (
    Assignment,
    DomainError,
    InvalidStateError,
    Submission,
    VersionConflictError,
    validate_grade,
)
from gradebook.errors import (
    ConcurrentModificationError,
    ForbiddenError,
    NotFoundError,
    StateConflictError,
    translate_domain_error,
)
from gradebook.repositories import RecordNotFoundError
from gradebook.services.base import ServiceBase

logger = logging.getLogger(__name__)


class GradingService(ServiceBase):
    def grade_submission(
        self,
        submission_id: str,
        grader_id: str,
        grade: Any,
        feedback: Optional[str] = None,
        expected_version: Optional[int] = None,
    ) -> Submission:
        """为提交打分；已评分的提交走修改成绩分支。"""

        submission, assignment = self._prepare(submission_id, grader_id, grade)
        self._lock_assignment(assignment)
        return self._write_grade(submission, grade, feedback, expected_version)

    def update_grade(
        self,
        submission_id: str,
        grader_id: str,
        grade: Any,
        feedback: Optional[str] = None,
        expected_version: Optional[int] = None,
    ) -> Submission:
        """修改已评分提交的成绩，未评分的提交直接拒绝。"""

        submission, assignment = self._prepare(submission_id, grader_id, grade)
        if not submission.is_graded():
            raise StateConflictError(
                "Cannot update grade for submission that has not been graded",
                code="SUBMISSION_NOT_GRADED",
            )
        self._lock_assignment(assignment)
        return self._write_grade(submission, grade, feedback, expected_version)

    def _prepare(self, submission_id: str, grader_id: str, grade: Any):
        grader = self._load_user(grader_id)
        submission = self._load_submission(submission_id)
        assignment = self._load_assignment(submission.assignment_id)
        course = self._load_course(assignment.course_id)

        if not self.policy.can_grade_submissions(grader, course):
            raise ForbiddenError(
                "NOT_OWNER", "You do not have permission to grade submissions in this course"
            )
        if course.is_archived():
            raise StateConflictError(
                "Cannot grade submissions in archived course. Archived courses are read-only.",
                code="RESOURCE_ARCHIVED",
            )
        try:
            validate_grade(grade)
        except DomainError as exc:
            raise translate_domain_error(exc) from exc
        return submission, assignment

    def _lock_assignment(self, assignment: Assignment) -> None:
        if assignment.has_grading_started():
            return
        try:
            assignment.start_grading(now=self.clock())
            self.assignments.update(assignment)
        except (InvalidStateError, RecordNotFoundError, SQLAlchemyError) as exc:
            logger.warning("Failed to lock assignment %s for grading: %s", assignment.id, exc)
            return
        logger.info("Assignment %s locked for grading", assignment.id)

    def _write_grade(
        self,
        submission: Submission,
        grade: Any,
        feedback: Optional[str],
        expected_version: Optional[int],
    ) -> Submission:
        now = self.clock()
        try:
            if submission.is_graded():
                submission.update_grade(grade, feedback, expected_version, now=now)
            else:
                submission.assign_grade(grade, feedback, expected_version, now=now)
            self.submissions.update(submission)
        except VersionConflictError:
            logger.warning(
                "Concurrent grading rejected for submission %s (expected version %s)",
                submission.id,
                expected_version,
            )
            raise ConcurrentModificationError() from None
        except DomainError as exc:
            raise translate_domain_error(exc) from exc
        except RecordNotFoundError:
            raise NotFoundError("RESOURCE_NOT_FOUND", "Submission not found") from None

        logger.info(
            "Submission %s graded: %s (version=%s)", submission.id, submission.grade, submission.version
        )
        return submission
