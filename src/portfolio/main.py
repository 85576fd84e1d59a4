"""框架入口：FastAPI 初始化、中间件、全局异常处理、健康检查与 API 挂载。"""

import asyncio
from contextlib import asynccontextmanager
from uuid import uuid4

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from portfolio.api.v1 import api_router, health, sitemap
from portfolio.core.config import get_settings
from portfolio.core.exceptions import AppError
from portfolio.db.clients.database import dispose_engine, init_db
from portfolio.observability.http_trace import http_trace_middleware
from portfolio.observability.logging import configure_logging, get_logger, get_request_id, set_request_id
from portfolio.schemas.common import ErrorDetail

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期：启动时初始化日志、配置与表结构，关闭时清理。"""
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_dir)
    await init_db()
    logger.info("application_started", env=settings.env, port=settings.port)
    yield
    await dispose_engine()
    logger.info("application_shutdown")


def _error_response(request: Request, status_code: int, message: str) -> JSONResponse:
    rid = getattr(request.state, "request_id", None) or get_request_id() or ""
    return JSONResponse(
        status_code=status_code,
        content=ErrorDetail(code=status_code, message=message, request_id=rid).model_dump(),
    )


def create_application() -> FastAPI:
    settings = get_settings()
    limiter = Limiter(
        key_func=lambda request: request.client.host if request.client else "unknown",
        default_limits=[settings.rate_limit] if settings.rate_limit else [],
    )

    app = FastAPI(
        title="Portfolio",
        description="个人博客、作品集与共享文件浏览服务",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.env != "production" else None,
        redoc_url="/redoc" if settings.env != "production" else None,
    )

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    timeout = settings.request_timeout_seconds

    # 后注册的先执行：timeout 最内层，只约束路由处理到响应头发出的时间
    @app.middleware("http")
    async def request_timeout_middleware(request: Request, call_next):
        try:
            return await asyncio.wait_for(call_next(request), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning("request_timeout", path=request.url.path, timeout=timeout)
            return _error_response(request, status.HTTP_504_GATEWAY_TIMEOUT, "Request timed out")

    # request_id 先注册，trace 后注册，故 trace 先执行，request_id 可读到 trace_id
    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next):
        rid = (
            request.headers.get("X-Request-ID")
            or getattr(request.state, "trace_id", None)
            or str(uuid4())
        )
        set_request_id(rid)
        request.state.request_id = rid
        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response

    @app.middleware("http")
    async def trace_middleware(request: Request, call_next):
        """Trace 中间件：设置 trace_id/span_id，统一打印请求参数与返回结果（OpenTracing 兼容）。"""
        return await http_trace_middleware(request, call_next)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        rid = getattr(request.state, "request_id", None) or get_request_id() or ""
        logger.exception("unhandled_exception", request_id=rid, exc_info=exc)
        return _error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        # 业务异常在此统一映射为 HTTP 状态码；message 不含内部细节
        log = logger.error if exc.status_code >= 500 else logger.info
        log("app_error", error_type=type(exc).__name__, status_code=exc.status_code, path=request.url.path)
        return _error_response(request, exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return _error_response(
            request,
            exc.status_code,
            str(exc.detail) if exc.detail is not None else "",
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        fields = [".".join(str(p) for p in err.get("loc", ())) for err in exc.errors()]
        logger.info("request_validation_failed", fields=fields, path=request.url.path)
        return _error_response(
            request,
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            f"Invalid request: {', '.join(fields)}" if fields else "Invalid request",
        )

    app.include_router(health.router, prefix="/health", tags=["health"])
    app.include_router(sitemap.router, tags=["sitemap"])
    app.include_router(api_router)

    Instrumentator().instrument(app).expose(app, endpoint="/metrics")

    return app


app = create_application()
