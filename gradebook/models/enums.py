"""用户与课程相关枚举。

作业提交形式与提交状态定义在领域层（``gradebook.domain``），此处重新导出，
便于模型层统一引用。
"""

import enum

from gradebook.domain import SubmissionStatus, SubmissionType


class UserRole(str, enum.Enum):
    """用户角色。"""
    TEACHER = "teacher"
    STUDENT = "student"


class CourseStatus(str, enum.Enum):
    """课程状态；归档课程只读。"""
    ACTIVE = "active"
    ARCHIVED = "archived"


__all__ = ["CourseStatus", "SubmissionStatus", "SubmissionType", "UserRole"]
