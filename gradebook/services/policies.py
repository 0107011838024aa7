"""授权策略 - 以布尔能力判断的形式供服务层调用。"""

from gradebook.models import Course, User


class AuthorizationPolicy:
    def can_manage_assignments(self, user: User, course: Course) -> bool:
        """只有课程的任课教师可以创建、修改、删除作业。"""
        return user.is_teacher() and course.teacher_id == user.id

    def can_view_assignments(self, user: User, course: Course, *, is_enrolled: bool) -> bool:
        if user.is_teacher():
            return course.teacher_id == user.id
        if user.is_student():
            return is_enrolled
        return False

    def can_submit_assignment(self, user: User, course: Course, *, is_enrolled: bool) -> bool:
        return user.is_student() and is_enrolled

    def can_grade_submissions(self, user: User, course: Course) -> bool:
        return user.is_teacher() and course.teacher_id == user.id

    def can_view_submission(self, user: User, submission_owner_id: str, course: Course) -> bool:
        if user.is_teacher():
            return course.teacher_id == user.id
        if user.is_student():
            return submission_owner_id == user.id
        return False
