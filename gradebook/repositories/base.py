"""仓储契约与仓储层异常。

服务层只依赖这里的协议，SQLAlchemy 实现位于同包的其它模块，
测试也可以换成任意满足协议的实现。
"""

from __future__ import annotations

from typing import List, Optional, Protocol

from gradebook.domain import Assignment, Submission
from gradebook.models import Course, User


class RecordNotFoundError(Exception):
    """条件更新未命中任何行，且该 ID 在存储中不存在。"""


class DuplicateRecordError(Exception):
    """违反唯一约束，例如同一 (assignment, student) 的第二条提交。"""


class AssignmentStore(Protocol):
    def find_by_id(self, assignment_id: str) -> Optional[Assignment]: ...

    def list_by_course(self, course_id: str) -> List[Assignment]: ...

    def save(self, assignment: Assignment) -> Assignment: ...

    def update(self, assignment: Assignment) -> Assignment: ...

    def delete(self, assignment_id: str) -> None: ...


class SubmissionStore(Protocol):
    def find_by_id(self, submission_id: str) -> Optional[Submission]: ...

    def find_by_assignment_and_student(
        self, assignment_id: str, student_id: str
    ) -> Optional[Submission]: ...

    def list_by_assignment(self, assignment_id: str) -> List[Submission]: ...

    def save(self, submission: Submission) -> Submission: ...

    def update(self, submission: Submission) -> Submission: ...


class Directory(Protocol):
    """用户、课程与选课关系的只读查询。"""

    def find_user(self, user_id: str) -> Optional[User]: ...

    def find_course(self, course_id: str) -> Optional[Course]: ...

    def is_enrolled(self, student_id: str, course_id: str) -> bool: ...
