"""错误响应的统一结构。"""

from pydantic import BaseModel


class ErrorBody(BaseModel):
    code: str
    kind: str
    message: str


class ErrorResponse(BaseModel):
    error: ErrorBody
