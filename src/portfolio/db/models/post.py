"""博客文章表。"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from portfolio.db.models.base import Base, TimestampMixin, gen_uuid

if TYPE_CHECKING:
    from portfolio.db.models.comment import Comment
    from portfolio.db.models.user import User


class Post(TimestampMixin, Base):
    __tablename__ = "posts"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=gen_uuid)
    title: Mapped[str] = mapped_column(String(500))
    # 富文本编辑器产出的 HTML，服务端不解析
    content: Mapped[str] = mapped_column(Text)
    featured_image: Mapped[str | None] = mapped_column(String(1024))
    published: Mapped[bool] = mapped_column(Boolean, default=False)
    show_on_homepage: Mapped[bool] = mapped_column(Boolean, default=False)
    published_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    author_id: Mapped[str] = mapped_column(ForeignKey("users.id"), index=True)

    author: Mapped[User] = relationship(back_populates="posts")
    comments: Mapped[list[Comment]] = relationship(
        back_populates="post",
        cascade="all, delete-orphan",
        order_by="Comment.created_at",
    )
