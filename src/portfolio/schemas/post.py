"""博客文章与评论契约。"""

from datetime import datetime

from pydantic import Field

from portfolio.schemas.common import CamelModel
from portfolio.schemas.user import AuthorSummary


class CommentOut(CamelModel):
    id: str
    content: str
    post_id: str
    author_id: str
    author: AuthorSummary
    created_at: datetime
    updated_at: datetime


class CommentCreate(CamelModel):
    content: str | None = None
    post_id: str | None = None


class PostOut(CamelModel):
    id: str
    title: str
    content: str
    featured_image: str | None = None
    published: bool
    show_on_homepage: bool
    published_at: datetime | None = None
    author_id: str
    author: AuthorSummary
    created_at: datetime
    updated_at: datetime


class PostDetailOut(PostOut):
    comments: list[CommentOut] = Field(default_factory=list)


class PostCreate(CamelModel):
    """title/content 必填，但在服务层校验以返回 400 而非 422。"""

    title: str | None = None
    content: str | None = None
    featured_image: str | None = None
    published: bool = False
    show_on_homepage: bool = False
    published_at: datetime | None = None


class PostUpdate(CamelModel):
    """部分更新：未传入（None）的字段保持原值；featured_image 显式传 null 可清空。"""

    title: str | None = None
    content: str | None = None
    featured_image: str | None = None
    published: bool | None = None
    show_on_homepage: bool | None = None
    published_at: datetime | None = None
