"""时间源。

实体与服务不直接读取全局时钟，而是接收 ``now`` / ``clock`` 参数，
测试中即可固定时间。
"""

from datetime import datetime, timezone
from typing import Callable, Optional

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """把无时区的时间视为 UTC；SQLite 读回的时间不带 tzinfo。"""

    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
