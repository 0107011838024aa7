"""作业提交服务：首次提交、重新提交与提交查询。

校验顺序：选课 → 作业是否开放 → 内容与提交形式匹配 → 附件格式与大小 →
已评分的提交不可重交。全部同步校验通过后才上传附件，避免被拒绝的请求
留下孤立文件。
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import List, Optional

from gradebook.domain import (
    Assignment,
    Clock,
    DomainError,
    Submission,
    SubmissionStatus,
    VersionConflictError,
    utc_now,
)
from gradebook.errors import (
    ApplicationError,
    ConcurrentModificationError,
    ForbiddenError,
    NotFoundError,
    StateConflictError,
    ValidationFailedError,
    translate_domain_error,
)
from gradebook.models import Course, User
from gradebook.repositories import (
    AssignmentStore,
    Directory,
    DuplicateRecordError,
    RecordNotFoundError,
    SubmissionStore,
)
from gradebook.services.base import ServiceBase
from gradebook.services.policies import AuthorizationPolicy
from gradebook.services.sanitizer import (
    SUBMISSION_ALLOWED_ATTRS,
    SUBMISSION_ALLOWED_TAGS,
    HtmlSanitizer,
)
from gradebook.utils.storage import LocalFileStorage

logger = logging.getLogger(__name__)

ALLOWED_MIME_TYPES = {
    "application/pdf",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "image/jpeg",
    "image/png",
}
ALLOWED_EXTENSIONS = (".pdf", ".docx", ".jpg", ".jpeg", ".png")
MAX_FILE_SIZE = 10 * 1024 * 1024


@dataclass(frozen=True)
class FilePayload:
    """学生上传的附件。``size`` 为客户端声明的大小。"""

    data: bytes
    filename: str
    mime_type: str
    size: Optional[int] = None

    @property
    def effective_size(self) -> int:
        # 声明大小不可信，取声明值与实际长度中的较大者
        return max(self.size or 0, len(self.data))


class SubmissionService(ServiceBase):
    def __init__(
        self,
        assignments: AssignmentStore,
        submissions: SubmissionStore,
        directory: Directory,
        storage: LocalFileStorage,
        sanitizer: Optional[HtmlSanitizer] = None,
        policy: Optional[AuthorizationPolicy] = None,
        clock: Clock = utc_now,
        max_file_size: int = MAX_FILE_SIZE,
    ) -> None:
        super().__init__(assignments, submissions, directory, policy=policy, clock=clock)
        self.storage = storage
        self.sanitizer = sanitizer or HtmlSanitizer()
        self.max_file_size = max_file_size

    def submit_assignment(
        self,
        assignment_id: str,
        student_id: str,
        content: Optional[str] = None,
        file: Optional[FilePayload] = None,
    ) -> Submission:
        student = self._load_user(student_id)
        assignment = self._load_assignment(assignment_id)
        course = self._load_course(assignment.course_id)

        self._validate_enrollment(student, course)
        if not assignment.can_accept_submissions():
            raise StateConflictError(
                "This assignment is closed and cannot accept new submissions",
                code="ASSIGNMENT_CLOSED",
            )
        self._validate_submission_type(assignment, content, file)
        if file is not None:
            self._validate_file(assignment, file)

        existing = self.submissions.find_by_assignment_and_student(assignment.id, student.id)
        if existing is not None and existing.is_graded():
            raise StateConflictError(
                "Cannot resubmit after grading has started", code="SUBMISSION_GRADED"
            )

        file_path: Optional[str] = None
        file_name: Optional[str] = None
        if file is not None:
            stored = self.storage.upload(
                file.data,
                original_name=file.filename,
                mime_type=file.mime_type,
                size=file.effective_size,
                directory=f"assignments/{assignment.id}",
            )
            file_path, file_name = stored.path, stored.original_name

        sanitized = self._sanitize(content)
        now = self.clock()
        # 迟交只在提交这一刻按作业截止时间计算一次，实体不再重算
        is_late = assignment.is_submission_late(now)

        try:
            if existing is not None:
                return self._resubmit(existing, sanitized, file_path, file_name, is_late, now)
            return self._create(assignment, student, sanitized, file_path, file_name, is_late, now)
        except ApplicationError:
            # 写入失败时删除本次上传的附件
            if file_path is not None:
                self._discard_upload(file_path)
            raise

    def get_submission(self, submission_id: str, user_id: str) -> Submission:
        user = self._load_user(user_id)
        submission = self._load_submission(submission_id)
        assignment = self._load_assignment(submission.assignment_id)
        course = self._load_course(assignment.course_id)
        if not self.policy.can_view_submission(user, submission.student_id, course):
            raise ForbiddenError(
                "FORBIDDEN_RESOURCE", "You do not have permission to view this submission"
            )
        return submission

    def get_my_submission(self, assignment_id: str, student_id: str) -> Optional[Submission]:
        """学生查看自己在某作业下的提交；尚未提交时返回 None。"""

        student = self._load_user(student_id)
        assignment = self._load_assignment(assignment_id)
        course = self._load_course(assignment.course_id)
        is_enrolled = self.directory.is_enrolled(student.id, course.id)
        if not self.policy.can_submit_assignment(student, course, is_enrolled=is_enrolled):
            raise ForbiddenError(
                "NOT_ENROLLED", "You must be enrolled in this course to view submissions"
            )
        return self.submissions.find_by_assignment_and_student(assignment.id, student.id)

    def list_submissions(self, assignment_id: str, user_id: str) -> List[Submission]:
        user = self._load_user(user_id)
        assignment = self._load_assignment(assignment_id)
        course = self._load_course(assignment.course_id)
        if not self.policy.can_grade_submissions(user, course):
            raise ForbiddenError(
                "NOT_OWNER", "You do not have permission to view submissions in this course"
            )
        return self.submissions.list_by_assignment(assignment.id)

    # === 内部步骤 ===

    def _create(
        self,
        assignment: Assignment,
        student: User,
        content: Optional[str],
        file_path: Optional[str],
        file_name: Optional[str],
        is_late: bool,
        now,
    ) -> Submission:
        try:
            submission = Submission.create(
                id=str(uuid.uuid4()),
                assignment_id=assignment.id,
                student_id=student.id,
                status=SubmissionStatus.SUBMITTED,
                content=content,
                file_path=file_path,
                file_name=file_name,
                is_late=is_late,
                now=now,
            )
        except DomainError as exc:
            raise translate_domain_error(exc) from exc

        try:
            self.submissions.save(submission)
        except DuplicateRecordError:
            # 同一学生的并发首次提交，后到者重新加载即走重交路径
            logger.warning(
                "Concurrent first submission for assignment %s by student %s",
                assignment.id,
                student.id,
            )
            raise ConcurrentModificationError(
                "A submission for this assignment was created concurrently. Please refresh and try again."
            ) from None
        logger.info(
            "Submission %s created for assignment %s (late=%s)", submission.id, assignment.id, is_late
        )
        return submission

    def _resubmit(
        self,
        submission: Submission,
        content: Optional[str],
        file_path: Optional[str],
        file_name: Optional[str],
        is_late: bool,
        now,
    ) -> Submission:
        try:
            submission.update_content(content, file_path, file_name, now=now)
            if submission.status == SubmissionStatus.NOT_SUBMITTED:
                submission.submit(is_late, now=now)
            else:
                submission.resubmit(is_late, now=now)
            self.submissions.update(submission)
        except VersionConflictError:
            raise ConcurrentModificationError() from None
        except DomainError as exc:
            raise translate_domain_error(exc) from exc
        except RecordNotFoundError:
            raise NotFoundError("RESOURCE_NOT_FOUND", "Submission not found") from None
        logger.info(
            "Submission %s resubmitted (version=%s, late=%s)", submission.id, submission.version, is_late
        )
        return submission

    def _validate_enrollment(self, student: User, course: Course) -> None:
        is_enrolled = self.directory.is_enrolled(student.id, course.id)
        if not self.policy.can_submit_assignment(student, course, is_enrolled=is_enrolled):
            raise ForbiddenError(
                "NOT_ENROLLED", "You must be enrolled in this course to submit assignments"
            )

    @staticmethod
    def _validate_submission_type(
        assignment: Assignment, content: Optional[str], file: Optional[FilePayload]
    ) -> None:
        submission_type = assignment.submission_type
        has_text = bool(content and content.strip())
        if submission_type.requires_file and file is None:
            raise ValidationFailedError("File upload is required for this assignment")
        if submission_type.requires_text and not has_text:
            raise ValidationFailedError("Text content is required for this assignment")
        if file is not None and not submission_type.requires_file:
            raise ValidationFailedError("This assignment does not accept file uploads")

    def _validate_file(self, assignment: Assignment, file: FilePayload) -> None:
        if file.mime_type not in ALLOWED_MIME_TYPES:
            raise ValidationFailedError(
                "File type not allowed. Supported formats: PDF, DOCX, JPG, PNG",
                code="INVALID_FILE_TYPE",
            )
        extension = PurePosixPath(file.filename or "").suffix.lower()
        if extension not in ALLOWED_EXTENSIONS:
            raise ValidationFailedError(
                f"File extension not allowed. Supported extensions: {', '.join(ALLOWED_EXTENSIONS)}",
                code="INVALID_FILE_TYPE",
            )
        accepted = {_normalize_extension(fmt) for fmt in assignment.accepted_file_formats}
        if accepted and extension not in accepted:
            raise ValidationFailedError(
                f"This assignment only accepts: {', '.join(sorted(accepted))}",
                code="INVALID_FILE_TYPE",
            )
        if file.effective_size > self.max_file_size:
            raise ValidationFailedError(
                f"File size exceeds maximum limit of {self.max_file_size // (1024 * 1024)}MB",
                code="INVALID_FILE_SIZE",
            )

    def _discard_upload(self, file_path: str) -> None:
        try:
            self.storage.delete(file_path)
        except OSError:
            logger.warning("Failed to remove orphaned upload %s", file_path, exc_info=True)

    def _sanitize(self, content: Optional[str]) -> Optional[str]:
        if not content:
            return None
        return self.sanitizer.sanitize(content, SUBMISSION_ALLOWED_TAGS, SUBMISSION_ALLOWED_ATTRS)


def _normalize_extension(fmt: str) -> str:
    fmt = fmt.strip().lower()
    return fmt if fmt.startswith(".") else f".{fmt}"
