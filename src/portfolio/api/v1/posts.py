"""博客文章 API。"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio.api.dependencies import get_request_id, require_user
from portfolio.db.clients.database import get_db
from portfolio.db.models import User
from portfolio.schemas.common import ApiResponse
from portfolio.schemas.post import PostCreate, PostDetailOut, PostOut, PostUpdate
from portfolio.services import post_service

router = APIRouter()


@router.get("", response_model=ApiResponse[list[PostOut]], summary="已发布文章列表")
async def list_posts(
    homepage: bool = Query(False, description="仅首页展示的文章"),
    author_id: str | None = Query(None, alias="authorId"),
    limit: int | None = Query(None, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    request_id: str = Depends(get_request_id),
) -> ApiResponse[list[PostOut]]:
    posts = await post_service.list_published_posts(
        db, homepage_only=homepage, author_id=author_id, limit=limit
    )
    return ApiResponse(data=[PostOut.model_validate(p) for p in posts], request_id=request_id)


@router.get("/{post_id}", response_model=ApiResponse[PostDetailOut], summary="文章详情（含评论）")
async def get_post(
    post_id: str,
    db: AsyncSession = Depends(get_db),
    request_id: str = Depends(get_request_id),
) -> ApiResponse[PostDetailOut]:
    post = await post_service.get_post(db, post_id, with_comments=True)
    return ApiResponse(data=PostDetailOut.model_validate(post), request_id=request_id)


@router.post("", response_model=ApiResponse[PostOut], summary="发表文章")
async def create_post(
    body: PostCreate,
    user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
    request_id: str = Depends(get_request_id),
) -> ApiResponse[PostOut]:
    post = await post_service.create_post(db, body, user)
    return ApiResponse(data=PostOut.model_validate(post), request_id=request_id)


@router.put("/{post_id}", response_model=ApiResponse[PostOut], summary="修改文章（作者或管理员）")
async def update_post(
    post_id: str,
    body: PostUpdate,
    user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
    request_id: str = Depends(get_request_id),
) -> ApiResponse[PostOut]:
    post = await post_service.update_post(db, post_id, body, user)
    return ApiResponse(data=PostOut.model_validate(post), request_id=request_id)


@router.delete("/{post_id}", response_model=ApiResponse[dict], summary="删除文章（作者或管理员）")
async def delete_post(
    post_id: str,
    user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
    request_id: str = Depends(get_request_id),
) -> ApiResponse[dict]:
    await post_service.delete_post(db, post_id, user)
    return ApiResponse(message="Post deleted successfully", data={"id": post_id}, request_id=request_id)
