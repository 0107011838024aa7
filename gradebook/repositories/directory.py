"""用户、课程与选课关系的只读查询。"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from gradebook.models import Course, Enrollment, User


class SqlAlchemyDirectory:
    def __init__(self, db: Session) -> None:
        self.db = db

    def find_user(self, user_id: str) -> Optional[User]:
        return self.db.get(User, user_id)

    def find_course(self, course_id: str) -> Optional[Course]:
        return self.db.get(Course, course_id)

    def is_enrolled(self, student_id: str, course_id: str) -> bool:
        enrollment_id = self.db.scalar(
            select(Enrollment.id).where(
                Enrollment.student_id == student_id,
                Enrollment.course_id == course_id,
            )
        )
        return enrollment_id is not None
