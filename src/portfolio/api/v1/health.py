"""健康检查：/health/live（存活）、/health/ready（就绪）。"""

import os

from fastapi import APIRouter, Depends

from portfolio.api.dependencies import get_request_id
from portfolio.core.config import get_settings
from portfolio.schemas.common import ApiResponse

router = APIRouter()


@router.get("/live")
async def liveness() -> dict[str, str]:
    """K8s liveness：仅校验进程存活。"""
    return {"status": "ok"}


@router.get("/ready", response_model=ApiResponse[dict])
async def readiness(request_id: str = Depends(get_request_id)) -> ApiResponse[dict]:
    """K8s readiness：返回应用环境以及共享目录是否可用（不暴露绝对路径）。"""
    settings = get_settings()
    return ApiResponse(
        code=0,
        message="ok",
        data={
            "env": settings.env,
            "shared_directory_available": os.path.isdir(settings.shared_directory),
        },
        request_id=request_id,
    )
