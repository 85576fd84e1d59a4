"""会话鉴权：bcrypt 密码哈希、JWT 会话令牌、当前用户与角色校验依赖。"""

from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta, timezone

import bcrypt
from fastapi import Depends, HTTPException, Request, status
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio.core.config import get_settings
from portfolio.core.exceptions import ForbiddenError, UnauthorizedError
from portfolio.db.clients.database import get_db
from portfolio.db.models import User, UserRole
from portfolio.observability.logging import get_logger, set_user_id

logger = get_logger(__name__)

ALGORITHM = "HS256"
# bcrypt 只使用前 72 字节
BCRYPT_MAX_BYTES = 72


def hash_password(password: str) -> str:
    password_bytes = password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    return bcrypt.hashpw(password_bytes, bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed: str | None) -> bool:
    if not hashed:
        return False
    password_bytes = password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    try:
        return bcrypt.checkpw(password_bytes, hashed.encode("utf-8"))
    except ValueError:
        return False


def _signing_key() -> str:
    settings = get_settings()
    if settings.is_production and settings.uses_default_secret:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server misconfiguration: secret key not configured",
        )
    return settings.secret_key


def create_session_token(user: User, expires_delta: timedelta | None = None) -> str:
    """签发会话令牌：sub 为用户 ID，role 仅供前端展示，鉴权时以数据库为准。"""
    settings = get_settings()
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.session_expire_minutes)
    expire = datetime.now(timezone.utc) + expires_delta
    payload = {"sub": user.id, "role": user.role.value, "exp": expire}
    return jwt.encode(payload, _signing_key(), algorithm=ALGORITHM)


def decode_session_token(token: str) -> str | None:
    """解析令牌，返回用户 ID；签名错误或过期返回 None。"""
    try:
        payload = jwt.decode(token, _signing_key(), algorithms=[ALGORITHM])
    except JWTError:
        return None
    sub = payload.get("sub")
    return sub if isinstance(sub, str) and sub else None


def _extract_token(request: Request) -> str | None:
    settings = get_settings()
    token = request.cookies.get(settings.session_cookie_name)
    if token:
        return token
    auth = request.headers.get("Authorization", "")
    if auth.startswith("Bearer "):
        return auth[len("Bearer "):].strip() or None
    return None


async def get_optional_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> User | None:
    """会话有效则返回用户，否则返回 None（匿名访问）。"""
    token = _extract_token(request)
    if not token:
        return None
    user_id = decode_session_token(token)
    if user_id is None:
        logger.info("session_token_rejected")
        return None
    user = await db.get(User, user_id)
    set_user_id(user.id if user else None)
    return user


async def get_current_user(user: User | None = Depends(get_optional_user)) -> User:
    """必须登录；未登录或会话失效返回 401。"""
    if user is None:
        raise UnauthorizedError()
    return user


def require_roles(
    *roles: UserRole,
    forbidden_status: int = status.HTTP_403_FORBIDDEN,
    message: str = "Forbidden",
) -> Callable[..., Awaitable[User]]:
    """
    生成角色校验依赖。

    forbidden_status 允许个别接口对角色不足返回 401（与历史前端约定保持一致）。
    """
    allowed = frozenset(roles)

    async def dependency(user: User = Depends(get_current_user)) -> User:
        if user.role not in allowed:
            raise ForbiddenError(message, status_code=forbidden_status)
        return user

    return dependency
