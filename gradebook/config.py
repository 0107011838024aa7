"""应用配置管理。

使用 Pydantic Settings 统一读取环境变量，便于在本地/生产之间切换。
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """核心配置项。

    - ``database_url``：默认使用本地 SQLite，便于快速启动。
    - ``upload_dir``：提交附件的本地存储根目录。
    - ``max_upload_bytes``：单个提交附件的大小上限（默认 10 MiB）。
    - ``secret_key``：Bearer Token 的 HMAC 签名密钥。
    """

    database_url: str = Field(
        default="sqlite:///./storage/gradebook.db", description="SQLAlchemy 数据库 URL"
    )
    upload_dir: Path = Field(
        default=Path("./storage/uploads"), description="附件存储目录"
    )
    max_upload_bytes: int = Field(
        default=10 * 1024 * 1024, description="附件大小上限（字节）"
    )
    secret_key: str = Field(
        default="gradebook-dev-secret-change-me", description="Token 签名密钥"
    )
    token_expire_hours: int = Field(default=24, description="Token 有效期（小时）")
    log_level: str = Field(default="INFO", description="日志级别")

    model_config = {
        "env_prefix": "GRADEBOOK_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """缓存后的全局配置实例。"""

    return Settings()
