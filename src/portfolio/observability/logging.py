"""结构化日志（structlog）：注入 request_id、user_id、trace_id/span_id；
按小时轮转写入 app.log / error.log，开发环境同时输出彩色控制台日志。"""

import json
import logging
import logging.handlers
import os
import sys
from contextvars import ContextVar
from uuid import uuid4

import structlog

from portfolio.observability.trace import get_span_id, get_trace_id

request_id_ctx: ContextVar[str] = ContextVar("request_id", default="")
user_id_ctx: ContextVar[str] = ContextVar("user_id", default="")


def get_request_id() -> str:
    return request_id_ctx.get() or ""


def set_request_id(rid: str | None = None) -> str:
    rid = rid or str(uuid4())
    request_id_ctx.set(rid)
    return rid


def set_user_id(user_id: str | None) -> None:
    """会话校验通过后记录当前用户，后续日志自动带上 user_id。"""
    user_id_ctx.set(user_id or "")


def add_request_id(logger: logging.Logger, method_name: str, event_dict: dict) -> dict:
    rid = get_request_id()
    if rid:
        event_dict["request_id"] = rid
    uid = user_id_ctx.get()
    if uid:
        event_dict.setdefault("user_id", uid)
    return event_dict


def add_trace_context(logger: logging.Logger, method_name: str, event_dict: dict) -> dict:
    """注入 W3C 兼容的 trace_id、span_id 到每条日志。"""
    tid = get_trace_id()
    sid = get_span_id()
    if tid:
        event_dict["trace_id"] = tid
    if sid:
        event_dict["span_id"] = sid
    return event_dict


def _shared_processors() -> list:
    return [
        structlog.contextvars.merge_contextvars,
        add_request_id,
        add_trace_context,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def _rotating_handler(path: str, backup_hours: int, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler = logging.handlers.TimedRotatingFileHandler(
        filename=path,
        when="H",
        interval=1,
        backupCount=backup_hours,
        encoding="utf-8",
    )
    handler.setFormatter(formatter)
    handler.setLevel(level)
    return handler


def configure_logging(log_level: str = "INFO", log_dir: str = "./logs", console: bool = False) -> None:
    """
    配置 structlog。

    app.log 记录全部级别（保留约 7 天），error.log 仅 ERROR（保留约 30 天），均为 JSON；
    console=True 时额外向 stderr 输出便于阅读的日志。
    """
    os.makedirs(log_dir, exist_ok=True)
    level = getattr(logging, log_level.upper(), logging.INFO)

    json_formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.processors.JSONRenderer(
            serializer=lambda obj, **kw: json.dumps(obj, ensure_ascii=False, **kw)
        ),
        foreign_pre_chain=_shared_processors(),
    )

    app_logger = logging.getLogger("portfolio")
    app_logger.setLevel(level)
    app_logger.handlers.clear()
    app_logger.addHandler(_rotating_handler(os.path.join(log_dir, "app.log"), 24 * 7, level, json_formatter))
    app_logger.addHandler(
        _rotating_handler(os.path.join(log_dir, "error.log"), 24 * 30, logging.ERROR, json_formatter)
    )
    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processor=structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
                foreign_pre_chain=_shared_processors(),
            )
        )
        console_handler.setLevel(level)
        app_logger.addHandler(console_handler)
    app_logger.propagate = False

    structlog.configure(
        processors=[
            *_shared_processors(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
