"""用户与会话相关契约。"""

from datetime import datetime

from pydantic import EmailStr, Field

from portfolio.db.models import UserRole
from portfolio.schemas.common import CamelModel


class AuthorSummary(CamelModel):
    """嵌入在文章、评论中的作者信息。"""

    id: str
    name: str | None = None
    image: str | None = None


class UserOut(CamelModel):
    id: str
    name: str | None = None
    email: str
    role: UserRole
    image: str | None = None
    created_at: datetime | None = None


class RegisterRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class SessionOut(CamelModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOut


class RoleUpdateRequest(CamelModel):
    """PATCH /users/role 请求体；角色合法性在服务层校验以返回 400。"""

    user_id: str | None = None
    new_role: str | None = None
