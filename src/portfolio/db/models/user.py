"""用户表：登录凭据与角色。"""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING

from sqlalchemy import Enum, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from portfolio.db.models.base import Base, TimestampMixin, gen_uuid

if TYPE_CHECKING:
    from portfolio.db.models.comment import Comment
    from portfolio.db.models.post import Post
    from portfolio.db.models.project import Project


class UserRole(str, enum.Enum):
    USER = "USER"
    ADMIN = "ADMIN"
    SUPERUSER = "SUPERUSER"


# 可管理内容（项目、他人文章）的角色
STAFF_ROLES = frozenset({UserRole.ADMIN, UserRole.SUPERUSER})


class User(TimestampMixin, Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=gen_uuid)
    name: Mapped[str | None] = mapped_column(String(255))
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    password_hash: Mapped[str | None] = mapped_column(String(255))
    image: Mapped[str | None] = mapped_column(String(1024))
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, name="user_role", native_enum=False),
        default=UserRole.USER,
    )

    posts: Mapped[list[Post]] = relationship(back_populates="author")
    comments: Mapped[list[Comment]] = relationship(back_populates="author")
    projects: Mapped[list[Project]] = relationship(back_populates="author")

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES
