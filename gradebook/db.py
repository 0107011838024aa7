"""数据库连接与会话管理。"""

from pathlib import Path
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from .config import get_settings
from .utils.storage import ensure_directory


settings = get_settings()


class Base(DeclarativeBase):
    """SQLAlchemy 基类。"""

    pass


_url = make_url(settings.database_url)
if _url.get_backend_name() == "sqlite" and _url.database not in (None, "", ":memory:"):
    ensure_directory(Path(_url.database).parent)

# SQLite 需要 ``check_same_thread=False`` 以支持多线程；其他数据库可忽略
engine = create_engine(
    settings.database_url,
    connect_args={"check_same_thread": False} if _url.get_backend_name() == "sqlite" else {},
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Iterator[Session]:
    """FastAPI 依赖，用于获取数据库会话。"""

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
