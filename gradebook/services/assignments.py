"""作业管理服务：创建、修改、删除与查询。

只有课程的任课教师可以管理作业；修改受截止时间与评分锁定限制，
删除不受状态限制。
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Iterable, List, Optional

from gradebook.domain import Assignment, DomainError, SubmissionType, as_utc
from gradebook.errors import (
    ForbiddenError,
    NotFoundError,
    StateConflictError,
    ValidationFailedError,
    translate_domain_error,
)
from gradebook.models import Course, User
from gradebook.repositories import RecordNotFoundError
from gradebook.services.base import ServiceBase

logger = logging.getLogger(__name__)


class AssignmentService(ServiceBase):
    def create_assignment(
        self,
        course_id: str,
        user_id: str,
        *,
        title: str,
        description: str,
        due_date: datetime,
        submission_type: SubmissionType | str,
        accepted_file_formats: Optional[Iterable[str]] = None,
    ) -> Assignment:
        user = self._load_user(user_id)
        course = self._load_course(course_id)
        self._require_manager(user, course, "Only the course teacher can create assignments")

        now = self.clock()
        if due_date is not None and as_utc(due_date) <= now:
            raise ValidationFailedError("Assignment due date must be in the future", code="INVALID_DATE")
        formats = list(accepted_file_formats or [])
        if any(not isinstance(fmt, str) or not fmt.strip() for fmt in formats):
            raise ValidationFailedError("Accepted file formats cannot be empty")

        try:
            assignment = Assignment.create(
                id=str(uuid.uuid4()),
                course_id=course.id,
                title=title,
                description=description,
                due_date=due_date,
                submission_type=submission_type,
                accepted_file_formats=formats,
                now=now,
            )
        except DomainError as exc:
            raise translate_domain_error(exc) from exc

        self.assignments.save(assignment)
        logger.info("Assignment %s created in course %s", assignment.id, course.id)
        return assignment

    def update_assignment(
        self,
        assignment_id: str,
        user_id: str,
        *,
        title: Optional[str] = None,
        description: Optional[str] = None,
        due_date: Optional[datetime] = None,
    ) -> Assignment:
        user = self._load_user(user_id)
        assignment = self._load_assignment(assignment_id)
        course = self._load_course(assignment.course_id)
        self._require_manager(user, course, "Only the course teacher can update assignments")

        now = self.clock()
        if assignment.is_past_due_date(now):
            raise StateConflictError("Cannot edit assignment after due date", code="ASSIGNMENT_PAST_DUE")
        if assignment.has_grading_started():
            raise StateConflictError(
                "Cannot edit assignment after grading has started", code="ASSIGNMENT_CLOSED"
            )
        if title is None and description is None and due_date is None:
            raise ValidationFailedError("At least one field must be provided for update")

        try:
            if title is not None:
                assignment.update_title(title, now=now)
            if description is not None:
                assignment.update_description(description, now=now)
            if due_date is not None:
                assignment.update_due_date(due_date, now=now)
        except DomainError as exc:
            raise translate_domain_error(exc) from exc

        self.assignments.update(assignment)
        return assignment

    def delete_assignment(self, assignment_id: str, user_id: str) -> None:
        user = self._load_user(user_id)
        assignment = self._load_assignment(assignment_id)
        course = self._load_course(assignment.course_id)
        self._require_manager(user, course, "Only the course teacher can delete assignments")

        try:
            self.assignments.delete(assignment.id)
        except RecordNotFoundError:
            raise NotFoundError("RESOURCE_NOT_FOUND", "Assignment not found") from None
        logger.info("Assignment %s deleted by %s", assignment.id, user.id)

    def get_assignment(self, assignment_id: str, user_id: str) -> Assignment:
        user = self._load_user(user_id)
        assignment = self._load_assignment(assignment_id)
        course = self._load_course(assignment.course_id)
        self._require_viewer(user, course)
        return assignment

    def list_assignments(self, course_id: str, user_id: str) -> List[Assignment]:
        user = self._load_user(user_id)
        course = self._load_course(course_id)
        self._require_viewer(user, course)
        return self.assignments.list_by_course(course.id)

    def _require_manager(self, user: User, course: Course, message: str) -> None:
        if not self.policy.can_manage_assignments(user, course):
            raise ForbiddenError("FORBIDDEN_ROLE", message)

    def _require_viewer(self, user: User, course: Course) -> None:
        is_enrolled = self.directory.is_enrolled(user.id, course.id)
        if not self.policy.can_view_assignments(user, course, is_enrolled=is_enrolled):
            raise ForbiddenError(
                "FORBIDDEN_RESOURCE", "You do not have permission to view assignments in this course"
            )
