"""作品集项目领域服务。"""

from __future__ import annotations

import json
from typing import Literal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio.core.exceptions import ResourceNotFoundError, ValidationFailedError
from portfolio.db.models import Project, User
from portfolio.db.models.base import utcnow
from portfolio.db.models.project import DEFAULT_EMOJI, DEFAULT_GRADIENT_END, DEFAULT_GRADIENT_START
from portfolio.observability.logging import get_logger
from portfolio.schemas.project import ProjectWrite

logger = get_logger(__name__)

PublishedFilter = Literal["true", "false", "all"]


def _technologies_json(value: str | list[str] | None, *, default: str | None = "[]") -> str | None:
    """统一为 JSON 数组字符串；字符串必须能被解析为 JSON。"""
    if value is None:
        return default
    if isinstance(value, list):
        return json.dumps(value, ensure_ascii=False)
    try:
        json.loads(value)
    except json.JSONDecodeError as exc:
        raise ValidationFailedError("Technologies must be a valid JSON string") from exc
    return value


def _require_title_and_description(payload: ProjectWrite) -> None:
    if not payload.title or not payload.description:
        raise ValidationFailedError("Title and description are required")


async def list_projects(
    db: AsyncSession,
    *,
    published: str | None = None,
    featured_only: bool = False,
    limit: int | None = None,
) -> list[Project]:
    """
    published: 缺省/非 "false" 只返回已发布；"false" 只返回未发布；"all" 不过滤。
    排序：精选优先，精选序号升序，发布时间倒序。
    """
    stmt = select(Project).order_by(
        Project.featured.desc(),
        Project.featured_order.asc(),
        Project.published_at.desc(),
    )
    if published != "all":
        stmt = stmt.where(Project.published.is_(published != "false"))
    if featured_only:
        stmt = stmt.where(Project.featured.is_(True))
    if limit is not None:
        stmt = stmt.limit(limit)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_project(db: AsyncSession, project_id: str) -> Project:
    project = await db.get(Project, project_id)
    if project is None:
        raise ResourceNotFoundError("Project not found")
    return project


async def create_project(db: AsyncSession, payload: ProjectWrite, author: User) -> Project:
    _require_title_and_description(payload)
    published = bool(payload.published)
    project = Project(
        title=payload.title,
        description=payload.description,
        content=payload.content or "",
        gradient_start=payload.gradient_start or DEFAULT_GRADIENT_START,
        gradient_end=payload.gradient_end or DEFAULT_GRADIENT_END,
        emoji=payload.emoji or DEFAULT_EMOJI,
        technologies=_technologies_json(payload.technologies),
        project_url=payload.project_url or None,
        github_url=payload.github_url or None,
        featured=bool(payload.featured),
        featured_order=payload.featured_order or 0,
        published=published,
        published_at=utcnow() if published else None,
        author_id=author.id,
    )
    db.add(project)
    await db.flush()
    logger.info("project_created", project_id=project.id, author_id=author.id, published=published)
    return project


async def update_project(db: AsyncSession, project_id: str, payload: ProjectWrite, user: User) -> Project:
    """未传入的字段保持原值；首次发布时写入 published_at。"""
    _require_title_and_description(payload)
    technologies = _technologies_json(payload.technologies, default=None)
    project = await get_project(db, project_id)

    first_publish = bool(payload.published) and not project.published

    project.title = payload.title
    project.description = payload.description
    provided = payload.model_fields_set
    for field in (
        "content",
        "gradient_start",
        "gradient_end",
        "emoji",
        "project_url",
        "github_url",
        "featured",
        "featured_order",
        "published",
    ):
        value = getattr(payload, field)
        if field in provided and value is not None:
            setattr(project, field, value)
    if technologies is not None:
        project.technologies = technologies
    if first_publish:
        project.published_at = utcnow()

    await db.flush()
    logger.info("project_updated", project_id=project.id, user_id=user.id, first_publish=first_publish)
    return project


async def delete_project(db: AsyncSession, project_id: str, user: User) -> None:
    project = await get_project(db, project_id)
    await db.delete(project)
    await db.flush()
    logger.info("project_deleted", project_id=project_id, user_id=user.id)
