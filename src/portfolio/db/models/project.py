"""作品集项目表。"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from portfolio.db.models.base import Base, TimestampMixin, gen_uuid

if TYPE_CHECKING:
    from portfolio.db.models.user import User

DEFAULT_GRADIENT_START = "from-blue-500"
DEFAULT_GRADIENT_END = "to-purple-500"
DEFAULT_EMOJI = "🚀"


class Project(TimestampMixin, Base):
    __tablename__ = "projects"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=gen_uuid)
    title: Mapped[str] = mapped_column(String(500))
    description: Mapped[str] = mapped_column(Text)
    content: Mapped[str] = mapped_column(Text, default="")
    # 卡片渐变色，存 Tailwind 类名
    gradient_start: Mapped[str] = mapped_column(String(64), default=DEFAULT_GRADIENT_START)
    gradient_end: Mapped[str] = mapped_column(String(64), default=DEFAULT_GRADIENT_END)
    emoji: Mapped[str] = mapped_column(String(16), default=DEFAULT_EMOJI)
    # JSON 数组字符串，如 '["Python", "FastAPI"]'
    technologies: Mapped[str] = mapped_column(Text, default="[]")
    project_url: Mapped[str | None] = mapped_column(String(1024))
    github_url: Mapped[str | None] = mapped_column(String(1024))
    featured: Mapped[bool] = mapped_column(Boolean, default=False)
    featured_order: Mapped[int] = mapped_column(Integer, default=0)
    published: Mapped[bool] = mapped_column(Boolean, default=False)
    published_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    author_id: Mapped[str] = mapped_column(ForeignKey("users.id"), index=True)

    author: Mapped[User] = relationship(back_populates="projects")
