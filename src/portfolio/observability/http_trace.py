"""HTTP 请求统一 Trace 中间件：记录请求参数、返回结果，并回写 traceparent。"""

import json
import time
from typing import Any

from fastapi import Request
from starlette.requests import Request as StarletteRequest

from portfolio.observability.logging import get_logger
from portfolio.observability.trace import build_traceparent, parse_traceparent, set_trace_context

logger = get_logger(__name__)

# 请求/响应体日志最大长度（字符），超出截断
MAX_BODY_LOG_LEN = 2048
# 需脱敏的键名（不区分大小写）
SENSITIVE_KEYS = frozenset(
    {"password", "newpassword", "secret", "token", "accesstoken", "access_token", "authorization"}
)
# 探活与指标抓取过于频繁，不打 trace 日志
QUIET_PATHS = frozenset({"/health/live", "/health/ready", "/metrics"})
# 只对这些响应类型记录 body 预览；文件下载等二进制内容跳过
LOGGABLE_MEDIA_PREFIXES = ("application/json", "text/")


def _mask_sensitive(obj: Any) -> Any:
    """递归脱敏：将敏感字段值替换为 ***。"""
    if isinstance(obj, dict):
        return {k: "***" if (k and k.lower() in SENSITIVE_KEYS) else _mask_sensitive(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_mask_sensitive(i) for i in obj]
    return obj


def _truncate(s: str, max_len: int = MAX_BODY_LOG_LEN) -> str:
    if len(s) <= max_len:
        return s
    return s[:max_len] + "...[truncated]"


async def _get_request_body_for_log(request: Request) -> tuple[bytes, Request]:
    """
    读取 JSON 请求体并返回 (body_bytes, new_request)，new_request 的 receive 会返回已缓存的 body，
    供后续路由正常读取。非 JSON 请求不读取，直接返回原 request。
    """
    if request.method not in ("POST", "PUT", "PATCH", "DELETE"):
        return b"", request
    if not request.headers.get("content-type", "").startswith("application/json"):
        return b"", request
    body_bytes = await request.body()

    async def receive():
        return {"type": "http.request", "body": body_bytes, "more_body": False}

    return body_bytes, StarletteRequest(request.scope, receive)


def _body_preview(body_bytes: bytes) -> str | None:
    """生成可打印的请求/响应体预览，JSON 则脱敏并截断。"""
    if not body_bytes:
        return None
    text = body_bytes.decode("utf-8", errors="replace").strip()
    if not text:
        return None
    try:
        obj = json.loads(text)
    except json.JSONDecodeError:
        return _truncate(text)
    return _truncate(json.dumps(_mask_sensitive(obj), ensure_ascii=False, default=str))


def _response_preview(response) -> str | None:
    media = response.headers.get("content-type", "")
    if not media.startswith(LOGGABLE_MEDIA_PREFIXES):
        return None
    body = getattr(response, "body", None)
    return _body_preview(body) if body else None


async def http_trace_middleware(request: Request, call_next):
    """解析/生成 trace 上下文，打印请求开始与结束日志，注入 traceparent 响应头。"""
    parent = parse_traceparent(request.headers.get("traceparent"))
    trace_id, span_id = set_trace_context(parent)
    request.state.trace_id = trace_id
    request.state.span_id = span_id
    sampled = parent.sampled if parent else True

    path = request.url.path
    if path in QUIET_PATHS:
        response = await call_next(request)
        response.headers["traceparent"] = build_traceparent(trace_id, span_id, sampled)
        return response

    body_bytes, req_to_call = await _get_request_body_for_log(request)
    logger.info(
        "http_request_start",
        method=req_to_call.method,
        path=path,
        query=dict(req_to_call.query_params) or None,
        body_preview=_body_preview(body_bytes),
    )

    start = time.perf_counter()
    response = await call_next(req_to_call)
    duration_ms = round((time.perf_counter() - start) * 1000, 2)

    logger.info(
        "http_request_finish",
        method=req_to_call.method,
        path=path,
        status_code=response.status_code,
        duration_ms=duration_ms,
        response_preview=_response_preview(response),
    )

    response.headers["traceparent"] = build_traceparent(trace_id, span_id, sampled)
    return response
