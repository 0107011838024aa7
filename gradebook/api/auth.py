"""Bearer Token 认证（HMAC 签名，无外部 JWT 依赖）。

用户与课程由外部系统维护，本服务只负责签发与校验 Token。
"""

import base64
import hashlib
import hmac
import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from gradebook.config import get_settings
from gradebook.db import get_db
from gradebook.models import User, UserRole

logger = logging.getLogger(__name__)

router = APIRouter()


class UserResponse(BaseModel):
    id: str
    username: str
    role: UserRole
    name: str

    model_config = {"from_attributes": True}


def _sign(payload_b64: str) -> str:
    secret = get_settings().secret_key
    return hmac.new(secret.encode(), payload_b64.encode(), hashlib.sha256).hexdigest()


def create_token(user_id: str, role: str, expires_in: Optional[timedelta] = None) -> str:
    """签发 Token：``base64(payload).signature``。"""
    lifetime = expires_in or timedelta(hours=get_settings().token_expire_hours)
    payload = {
        "sub": user_id,
        "role": role,
        "exp": (datetime.now(timezone.utc) + lifetime).isoformat(),
    }
    payload_b64 = base64.urlsafe_b64encode(json.dumps(payload).encode()).decode()
    return f"{payload_b64}.{_sign(payload_b64)}"


def decode_token(token: str) -> Optional[dict]:
    """校验签名与过期时间，无效时返回 None。"""
    parts = token.split(".")
    if len(parts) != 2:
        return None
    payload_b64, signature = parts
    if not hmac.compare_digest(signature, _sign(payload_b64)):
        return None
    try:
        payload = json.loads(base64.urlsafe_b64decode(payload_b64.encode()).decode())
        exp = datetime.fromisoformat(payload["exp"])
    except (ValueError, KeyError, TypeError):
        return None
    if datetime.now(timezone.utc) > exp:
        return None
    return payload


async def get_current_user(
    authorization: Optional[str] = Header(None),
    db: Session = Depends(get_db),
) -> User:
    """从 Token 获取当前用户。"""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="无法验证凭据",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if not authorization or not authorization.startswith("Bearer "):
        raise credentials_exception

    payload = decode_token(authorization[7:])
    if not payload or not payload.get("sub"):
        logger.debug("Rejected bearer token")
        raise credentials_exception

    user = db.get(User, payload["sub"])
    if user is None:
        raise credentials_exception
    return user


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(current_user: User = Depends(get_current_user)):
    """获取当前登录用户信息。"""
    return current_user
