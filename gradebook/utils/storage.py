"""文件存储与目录管理工具。"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from pathlib import Path, PurePosixPath


@dataclass(frozen=True)
class StoredFile:
    path: str
    original_name: str


def ensure_directory(path: Path) -> None:
    """确保目录存在。"""

    path.mkdir(parents=True, exist_ok=True)


class LocalFileStorage:
    """把上传内容写入本地目录，返回相对存储根目录的路径。

    文件名使用随机 UUID 加原扩展名，原始文件名只作为元数据返回，
    避免路径穿越和同名覆盖。
    """

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def upload(
        self,
        data: bytes,
        *,
        original_name: str,
        mime_type: str,
        size: int,
        directory: str,
    ) -> StoredFile:
        suffix = PurePosixPath(original_name).suffix.lower()
        relative = PurePosixPath(directory) / f"{uuid.uuid4().hex}{suffix}"
        if relative.is_absolute() or ".." in relative.parts:
            raise ValueError(f"Invalid storage directory: {directory}")

        destination = self.root / Path(*relative.parts)
        ensure_directory(destination.parent)
        with destination.open("wb") as f:
            f.write(data)
        return StoredFile(path=relative.as_posix(), original_name=original_name)

    def resolve(self, stored_path: str) -> Path:
        return self.root / Path(*PurePosixPath(stored_path).parts)

    def delete(self, stored_path: str) -> None:
        """删除已上传的文件；文件不存在时静默返回。"""

        self.resolve(stored_path).unlink(missing_ok=True)
