"""ORM 模型聚合：导入即注册到 Base.metadata。"""

from portfolio.db.models.base import Base, TimestampMixin, gen_uuid
from portfolio.db.models.comment import Comment
from portfolio.db.models.post import Post
from portfolio.db.models.project import Project
from portfolio.db.models.user import STAFF_ROLES, User, UserRole

__all__ = [
    "Base",
    "TimestampMixin",
    "gen_uuid",
    "Comment",
    "Post",
    "Project",
    "User",
    "UserRole",
    "STAFF_ROLES",
]
