"""初始化数据：超级用户、管理员与默认精选项目；可重复执行。

用法：python -m portfolio.db.seed
初始密码通过 APP_SEED_SUPERUSER_PASSWORD / APP_SEED_ADMIN_PASSWORD 指定，未指定时随机生成并打印到终端。
"""

from __future__ import annotations

import asyncio
import json
import os
import secrets

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio.core.config import get_settings
from portfolio.db.clients.database import get_session_factory, init_db
from portfolio.db.models import Project, User, UserRole
from portfolio.db.models.base import utcnow
from portfolio.observability.logging import configure_logging, get_logger
from portfolio.services.user_service import create_user, get_user_by_email

logger = get_logger(__name__)

SUPERUSER_EMAIL = "superuser@example.com"

DEFAULT_PROJECTS = [
    {
        "title": "Personal Website",
        "description": "Portfolio website with a blog, project showcase and shared file browser",
        "content": "# Personal Website\n\nBlog, portfolio and file sharing in one place.\n",
        "gradient_start": "from-blue-600",
        "gradient_end": "to-indigo-600",
        "emoji": "💻",
        "technologies": ["Python", "FastAPI", "SQLAlchemy", "Tailwind CSS"],
        "featured_order": 1,
    },
    {
        "title": "E-Commerce Platform",
        "description": "Full-featured online store with product catalog, cart, and checkout",
        "content": "# E-Commerce Platform\n\nProduct catalog, cart and secure checkout.\n",
        "gradient_start": "from-green-500",
        "gradient_end": "to-emerald-500",
        "emoji": "🛒",
        "technologies": ["React", "Node.js", "MongoDB", "Stripe"],
        "featured_order": 2,
    },
    {
        "title": "AI Image Generator",
        "description": "Web application that creates unique images based on text prompts",
        "content": "# AI Image Generator\n\nText-to-image generation with a user gallery.\n",
        "gradient_start": "from-purple-500",
        "gradient_end": "to-pink-500",
        "emoji": "🎨",
        "technologies": ["Python", "PyTorch", "PostgreSQL", "Docker"],
        "featured_order": 3,
    },
]


async def ensure_user(db: AsyncSession, email: str, name: str, role: UserRole, password_env: str) -> User:
    """用户不存在则创建；已存在则只提升角色，不改密码。"""
    user = await get_user_by_email(db, email)
    if user is not None:
        if user.role != role:
            user.role = role
            logger.info("seed_user_role_updated", email=email, role=role.value)
        return user
    password = os.environ.get(password_env, "").strip()
    generated = not password
    if generated:
        password = secrets.token_urlsafe(12)
    user = await create_user(db, email=email, password=password, name=name, role=role)
    if generated:
        # 只打印到终端，不写入日志文件
        print(f"generated password for {email}: {password}")
    return user


async def ensure_default_projects(db: AsyncSession, author: User) -> int:
    created = 0
    for data in DEFAULT_PROJECTS:
        existing = await db.execute(
            select(Project.id).where(Project.title == data["title"], Project.author_id == author.id)
        )
        if existing.first() is not None:
            continue
        db.add(
            Project(
                **{**data, "technologies": json.dumps(data["technologies"], ensure_ascii=False)},
                featured=True,
                published=True,
                published_at=utcnow(),
                author_id=author.id,
            )
        )
        created += 1
        logger.info("seed_project_created", title=data["title"])
    await db.flush()
    return created


async def seed(db: AsyncSession) -> None:
    settings = get_settings()
    await ensure_user(db, SUPERUSER_EMAIL, "Super User", UserRole.SUPERUSER, "APP_SEED_SUPERUSER_PASSWORD")
    admin = await ensure_user(db, settings.admin_email, "Admin User", UserRole.ADMIN, "APP_SEED_ADMIN_PASSWORD")
    await ensure_default_projects(db, admin)


async def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_dir, console=True)
    await init_db()
    async with get_session_factory()() as session:
        async with session.begin():
            await seed(session)
    logger.info("seed_finished")


if __name__ == "__main__":
    asyncio.run(main())
