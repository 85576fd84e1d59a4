"""作品集项目契约。"""

from datetime import datetime

from portfolio.schemas.common import CamelModel


class ProjectOut(CamelModel):
    id: str
    title: str
    description: str
    content: str
    gradient_start: str
    gradient_end: str
    emoji: str
    technologies: str
    project_url: str | None = None
    github_url: str | None = None
    featured: bool
    featured_order: int
    published: bool
    published_at: datetime | None = None
    author_id: str
    created_at: datetime
    updated_at: datetime


class ProjectWrite(CamelModel):
    """创建与更新共用；title/description 在服务层校验。"""

    title: str | None = None
    description: str | None = None
    content: str | None = None
    gradient_start: str | None = None
    gradient_end: str | None = None
    emoji: str | None = None
    # 前端可能传 JSON 字符串或数组
    technologies: str | list[str] | None = None
    project_url: str | None = None
    github_url: str | None = None
    featured: bool | None = None
    featured_order: int | None = None
    published: bool | None = None
