"""应用层异常 - 携带稳定的错误码、类别与 HTTP 状态码。

服务层抛出这些异常，由 ``main.py`` 中注册的处理器统一渲染为
``{"error": {"code", "kind", "message"}}``，不暴露堆栈或持久化细节。
"""

from gradebook.domain.errors import (
    DomainError,
    DomainValidationError,
    InvalidStateError,
    VersionConflictError,
)


class ApplicationError(Exception):
    kind = "APPLICATION_ERROR"

    def __init__(self, code: str, message: str, status_code: int = 400) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code

    def to_dict(self) -> dict[str, str]:
        return {"code": self.code, "kind": self.kind, "message": self.message}


class NotFoundError(ApplicationError):
    kind = "NOT_FOUND"

    def __init__(self, code: str = "RESOURCE_NOT_FOUND", message: str = "Resource not found") -> None:
        super().__init__(code, message, 404)


class ForbiddenError(ApplicationError):
    kind = "FORBIDDEN"

    def __init__(self, code: str = "FORBIDDEN_RESOURCE", message: str = "Access denied") -> None:
        super().__init__(code, message, 403)


class ValidationFailedError(ApplicationError):
    kind = "VALIDATION_FAILED"

    def __init__(self, message: str, code: str = "VALIDATION_FAILED") -> None:
        super().__init__(code, message, 400)


class StateConflictError(ApplicationError):
    kind = "STATE_CONFLICT"

    def __init__(self, message: str, code: str = "INVALID_STATE") -> None:
        super().__init__(code, message, 400)


class ConcurrentModificationError(ApplicationError):
    """唯一一种调用方应当重新加载后重试的错误。"""

    kind = "CONCURRENT_MODIFICATION"

    def __init__(
        self,
        message: str = "This submission has been modified by another user. Please refresh and try again.",
    ) -> None:
        super().__init__("CONCURRENT_MODIFICATION", message, 409)


def translate_domain_error(exc: DomainError) -> ApplicationError:
    """把实体抛出的领域异常映射为应用层异常。"""

    if isinstance(exc, VersionConflictError):
        return ConcurrentModificationError()
    if isinstance(exc, InvalidStateError):
        return StateConflictError(exc.message)
    if isinstance(exc, DomainValidationError):
        return ValidationFailedError(exc.message)
    return ValidationFailedError(str(exc))
