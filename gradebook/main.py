"""FastAPI 入口：应用工厂、统一错误处理与数据库表初始化。"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from gradebook.api import router as api_router
from gradebook.config import get_settings
from gradebook.db import Base, engine
from gradebook.errors import ApplicationError, ValidationFailedError
import gradebook.models  # noqa: F401  注册全部表

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """应用工厂，便于测试替换依赖。"""

    settings = get_settings()
    logging.basicConfig(level=settings.log_level)
    app = FastAPI(title="Gradebook API", version="0.1.0")

    @app.on_event("startup")
    def init_models() -> None:
        """启动时确保表存在。"""

        Base.metadata.create_all(bind=engine)

    @app.exception_handler(ApplicationError)
    async def handle_application_error(request: Request, exc: ApplicationError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": exc.to_dict()})

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        error = ValidationFailedError(_describe_validation_errors(exc.errors()))
        return JSONResponse(status_code=error.status_code, content={"error": error.to_dict()})

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "kind": "INTERNAL",
                    "message": "An unexpected error occurred",
                }
            },
        )

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(api_router)
    return app


def _describe_validation_errors(errors) -> str:
    """把 pydantic 的错误列表压缩成一行说明，只保留字段位置与原因。"""

    parts = []
    for err in errors:
        loc = ".".join(str(item) for item in err.get("loc", ()) if item != "body")
        msg = err.get("msg", "invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or "Invalid request"


app = create_app()
