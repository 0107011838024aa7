"""领域层异常 - 由实体在违反业务规则时抛出。"""


class DomainError(Exception):
    """所有领域异常的基类。"""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class DomainValidationError(DomainError):
    """字段值不合法：空标题、截止时间不在未来、成绩越界等。"""


class InvalidStateError(DomainError):
    """当前状态下不允许该操作：截止后编辑、评分后重交等。"""


class VersionConflictError(DomainError):
    """乐观锁版本不匹配，调用方应重新加载后重试。"""

    DEFAULT_MESSAGE = "Submission has been modified by another user. Please refresh and try again"

    def __init__(self, message: str = DEFAULT_MESSAGE) -> None:
        super().__init__(message)
