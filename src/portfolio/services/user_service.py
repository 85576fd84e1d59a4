"""用户领域服务：注册、登录校验、用户列表与角色变更。"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio.core.exceptions import (
    ConflictError,
    ResourceNotFoundError,
    UnauthorizedError,
    ValidationFailedError,
)
from portfolio.core.security import hash_password, verify_password
from portfolio.db.models import User, UserRole
from portfolio.observability.logging import get_logger

logger = get_logger(__name__)


def _normalize_email(email: str) -> str:
    return email.strip().lower()


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == _normalize_email(email)))
    return result.scalar_one_or_none()


async def create_user(
    db: AsyncSession,
    *,
    email: str,
    password: str,
    name: str | None = None,
    role: UserRole = UserRole.USER,
) -> User:
    """创建用户；邮箱已存在时抛出 ConflictError。"""
    if await get_user_by_email(db, email) is not None:
        raise ConflictError("Email already registered")
    user = User(
        email=_normalize_email(email),
        name=name,
        password_hash=hash_password(password),
        role=role,
    )
    db.add(user)
    await db.flush()
    logger.info("user_created", user_id=user.id, role=user.role.value)
    return user


async def authenticate(db: AsyncSession, email: str, password: str) -> User:
    """校验邮箱与密码；失败统一返回 401，不区分用户不存在与密码错误。"""
    user = await get_user_by_email(db, email)
    if user is None or not verify_password(password, user.password_hash):
        logger.info("login_failed")
        raise UnauthorizedError("Invalid email or password")
    logger.info("login_succeeded", user_id=user.id)
    return user


async def list_users(db: AsyncSession) -> list[User]:
    result = await db.execute(select(User).order_by(User.created_at.desc()))
    return list(result.scalars().all())


async def update_role(
    db: AsyncSession,
    user_id: str | None,
    new_role: str | None,
    *,
    requester: User,
) -> User:
    if not user_id or not new_role:
        raise ValidationFailedError("User ID and new role are required")
    try:
        role = UserRole(new_role)
    except ValueError as exc:
        raise ValidationFailedError("Invalid role") from exc

    user = await db.get(User, user_id)
    if user is None:
        raise ResourceNotFoundError("User not found")
    previous = user.role
    user.role = role
    await db.flush()
    logger.info(
        "user_role_updated",
        user_id=user.id,
        previous_role=previous.value,
        new_role=role.value,
        requester_id=requester.id,
    )
    return user
