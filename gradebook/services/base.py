"""服务层公共的实体加载逻辑，缺失时统一抛出 NotFoundError。"""

from __future__ import annotations

from gradebook.domain import Assignment, Clock, Submission, utc_now
from gradebook.errors import NotFoundError
from gradebook.models import Course, User
from gradebook.repositories import AssignmentStore, Directory, SubmissionStore
from gradebook.services.policies import AuthorizationPolicy


class ServiceBase:
    def __init__(
        self,
        assignments: AssignmentStore,
        submissions: SubmissionStore,
        directory: Directory,
        policy: AuthorizationPolicy | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self.assignments = assignments
        self.submissions = submissions
        self.directory = directory
        self.policy = policy or AuthorizationPolicy()
        self.clock = clock

    def _load_user(self, user_id: str) -> User:
        user = self.directory.find_user(user_id)
        if user is None:
            raise NotFoundError("USER_NOT_FOUND", "User not found")
        return user

    def _load_course(self, course_id: str) -> Course:
        course = self.directory.find_course(course_id)
        if course is None:
            raise NotFoundError("RESOURCE_NOT_FOUND", "Course not found")
        return course

    def _load_assignment(self, assignment_id: str) -> Assignment:
        assignment = self.assignments.find_by_id(assignment_id)
        if assignment is None:
            raise NotFoundError("RESOURCE_NOT_FOUND", "Assignment not found")
        return assignment

    def _load_submission(self, submission_id: str) -> Submission:
        submission = self.submissions.find_by_id(submission_id)
        if submission is None:
            raise NotFoundError("RESOURCE_NOT_FOUND", "Submission not found")
        return submission
