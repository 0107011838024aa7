"""HTML 清洗，防止学生提交的文本内容携带脚本。"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

import bleach


SUBMISSION_ALLOWED_TAGS = [
    "p",
    "br",
    "strong",
    "em",
    "u",
    "h1",
    "h2",
    "h3",
    "ul",
    "ol",
    "li",
    "a",
    "code",
    "pre",
]

SUBMISSION_ALLOWED_ATTRS = {
    "a": ["href", "target"],
}

_ALLOWED_PROTOCOLS = ["http", "https"]


class HtmlSanitizer:
    def sanitize(
        self,
        raw_html: str,
        allowed_tags: Optional[Iterable[str]] = None,
        allowed_attributes: Optional[Dict[str, List[str]]] = None,
    ) -> str:
        return bleach.clean(
            raw_html,
            tags=set(allowed_tags if allowed_tags is not None else SUBMISSION_ALLOWED_TAGS),
            attributes=allowed_attributes if allowed_attributes is not None else SUBMISSION_ALLOWED_ATTRS,
            protocols=_ALLOWED_PROTOCOLS,
            strip=True,
        )
