"""用户管理 API：管理员查看用户列表，超级用户修改角色。"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio.api.dependencies import get_request_id, require_admin, require_superuser
from portfolio.db.clients.database import get_db
from portfolio.db.models import User
from portfolio.schemas.common import ApiResponse
from portfolio.schemas.user import RoleUpdateRequest, UserOut
from portfolio.services import user_service

router = APIRouter()


@router.get("/admin/users", response_model=ApiResponse[list[UserOut]], summary="用户列表")
async def list_users(
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    request_id: str = Depends(get_request_id),
) -> ApiResponse[list[UserOut]]:
    users = await user_service.list_users(db)
    return ApiResponse(data=[UserOut.model_validate(u) for u in users], request_id=request_id)


@router.patch("/users/role", response_model=ApiResponse[UserOut], summary="修改用户角色")
async def update_role(
    body: RoleUpdateRequest,
    superuser: User = Depends(require_superuser),
    db: AsyncSession = Depends(get_db),
    request_id: str = Depends(get_request_id),
) -> ApiResponse[UserOut]:
    user = await user_service.update_role(db, body.user_id, body.new_role, requester=superuser)
    return ApiResponse(data=UserOut.model_validate(user), request_id=request_id)
