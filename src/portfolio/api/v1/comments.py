"""评论 API。"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio.api.dependencies import get_request_id, require_user
from portfolio.db.clients.database import get_db
from portfolio.db.models import User
from portfolio.schemas.common import ApiResponse
from portfolio.schemas.post import CommentCreate, CommentOut
from portfolio.services import post_service

router = APIRouter()


@router.post("", response_model=ApiResponse[CommentOut], summary="发表评论")
async def create_comment(
    body: CommentCreate,
    user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
    request_id: str = Depends(get_request_id),
) -> ApiResponse[CommentOut]:
    comment = await post_service.create_comment(db, body, user)
    return ApiResponse(data=CommentOut.model_validate(comment), request_id=request_id)
