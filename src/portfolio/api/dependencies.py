"""全局依赖：鉴权、角色、Request ID 等。"""

from uuid import uuid4

from fastapi import Request, status

from portfolio.core.security import get_current_user, get_optional_user, require_roles
from portfolio.db.models import UserRole
from portfolio.observability.logging import set_request_id

# 鉴权：直接复用 security 中的依赖
require_user = get_current_user
optional_user = get_optional_user

# 管理后台：角色不足返回 403
require_admin = require_roles(
    UserRole.ADMIN,
    UserRole.SUPERUSER,
    message="Forbidden: Admin access required",
)
require_superuser = require_roles(
    UserRole.SUPERUSER,
    message="Forbidden: Superuser access required",
)
# 项目管理：角色不足与未登录一样返回 401
require_project_editor = require_roles(
    UserRole.ADMIN,
    UserRole.SUPERUSER,
    forbidden_status=status.HTTP_401_UNAUTHORIZED,
    message="Unauthorized",
)


async def get_request_id(request: Request) -> str:
    """优先沿用中间件写入的 request_id，其次请求头，最后新生成。"""
    rid = getattr(request.state, "request_id", None) or request.headers.get("X-Request-ID") or str(uuid4())
    set_request_id(rid)
    return rid


__all__ = [
    "require_user",
    "optional_user",
    "require_admin",
    "require_superuser",
    "require_project_editor",
    "get_request_id",
]
