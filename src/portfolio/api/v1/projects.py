"""作品集项目 API；写操作仅限 ADMIN/SUPERUSER。"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio.api.dependencies import get_request_id, optional_user, require_project_editor
from portfolio.core.exceptions import UnauthorizedError
from portfolio.db.clients.database import get_db
from portfolio.db.models import User
from portfolio.schemas.common import ApiResponse
from portfolio.schemas.project import ProjectOut, ProjectWrite
from portfolio.services import project_service

router = APIRouter()


@router.get("", response_model=ApiResponse[list[ProjectOut]], summary="项目列表")
async def list_projects(
    published: str | None = Query(None, description='"false" 仅未发布，"all" 不过滤，默认仅已发布'),
    featured: bool = Query(False),
    limit: int | None = Query(None, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    request_id: str = Depends(get_request_id),
) -> ApiResponse[list[ProjectOut]]:
    projects = await project_service.list_projects(
        db, published=published, featured_only=featured, limit=limit
    )
    return ApiResponse(data=[ProjectOut.model_validate(p) for p in projects], request_id=request_id)


@router.get("/{project_id}", response_model=ApiResponse[ProjectOut], summary="项目详情")
async def get_project(
    project_id: str,
    user: User | None = Depends(optional_user),
    db: AsyncSession = Depends(get_db),
    request_id: str = Depends(get_request_id),
) -> ApiResponse[ProjectOut]:
    project = await project_service.get_project(db, project_id)
    # 未发布的项目仅管理员可见
    if not project.published and (user is None or not user.is_staff):
        raise UnauthorizedError()
    return ApiResponse(data=ProjectOut.model_validate(project), request_id=request_id)


@router.post("", response_model=ApiResponse[ProjectOut], summary="创建项目")
async def create_project(
    body: ProjectWrite,
    user: User = Depends(require_project_editor),
    db: AsyncSession = Depends(get_db),
    request_id: str = Depends(get_request_id),
) -> ApiResponse[ProjectOut]:
    project = await project_service.create_project(db, body, user)
    return ApiResponse(data=ProjectOut.model_validate(project), request_id=request_id)


@router.put("/{project_id}", response_model=ApiResponse[ProjectOut], summary="更新项目")
async def update_project(
    project_id: str,
    body: ProjectWrite,
    user: User = Depends(require_project_editor),
    db: AsyncSession = Depends(get_db),
    request_id: str = Depends(get_request_id),
) -> ApiResponse[ProjectOut]:
    project = await project_service.update_project(db, project_id, body, user)
    return ApiResponse(data=ProjectOut.model_validate(project), request_id=request_id)


@router.delete("/{project_id}", response_model=ApiResponse[dict], summary="删除项目")
async def delete_project(
    project_id: str,
    user: User = Depends(require_project_editor),
    db: AsyncSession = Depends(get_db),
    request_id: str = Depends(get_request_id),
) -> ApiResponse[dict]:
    await project_service.delete_project(db, project_id, user)
    return ApiResponse(message="Project deleted successfully", data={"id": project_id}, request_id=request_id)
