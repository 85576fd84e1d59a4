"""会话 API：注册、登录、登出、当前用户。"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio.api.dependencies import get_request_id, require_user
from portfolio.core.config import get_settings
from portfolio.core.security import create_session_token
from portfolio.db.clients.database import get_db
from portfolio.db.models import User
from portfolio.schemas.common import ApiResponse
from portfolio.schemas.user import LoginRequest, RegisterRequest, SessionOut, UserOut
from portfolio.services import user_service

router = APIRouter()


def _set_session_cookie(response: Response, token: str) -> None:
    settings = get_settings()
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_expire_minutes * 60,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )


@router.post(
    "/register",
    response_model=ApiResponse[UserOut],
    status_code=status.HTTP_201_CREATED,
    summary="注册普通用户",
)
async def register(
    body: RegisterRequest,
    db: AsyncSession = Depends(get_db),
    request_id: str = Depends(get_request_id),
) -> ApiResponse[UserOut]:
    user = await user_service.create_user(db, email=body.email, password=body.password, name=body.name)
    return ApiResponse(data=UserOut.model_validate(user), request_id=request_id)


@router.post("/login", response_model=ApiResponse[SessionOut], summary="登录并下发会话 Cookie")
async def login(
    body: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
    request_id: str = Depends(get_request_id),
) -> ApiResponse[SessionOut]:
    user = await user_service.authenticate(db, body.email, body.password)
    token = create_session_token(user)
    _set_session_cookie(response, token)
    return ApiResponse(
        data=SessionOut(access_token=token, user=UserOut.model_validate(user)),
        request_id=request_id,
    )


@router.post("/logout", response_model=ApiResponse[dict], summary="清除会话 Cookie")
async def logout(response: Response, request_id: str = Depends(get_request_id)) -> ApiResponse[dict]:
    response.delete_cookie(get_settings().session_cookie_name)
    return ApiResponse(data={}, request_id=request_id)


@router.get("/me", response_model=ApiResponse[UserOut], summary="当前登录用户")
async def me(
    user: User = Depends(require_user),
    request_id: str = Depends(get_request_id),
) -> ApiResponse[UserOut]:
    return ApiResponse(data=UserOut.model_validate(user), request_id=request_id)
