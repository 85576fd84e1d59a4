"""W3C Trace Context：请求级 trace_id / span_id 与 traceparent 头的解析、生成。"""

import re
import secrets
from contextvars import ContextVar
from dataclasses import dataclass

TRACE_ID_BYTES = 16  # 32 hex chars
SPAN_ID_BYTES = 8  # 16 hex chars

_TRACEPARENT_RE = re.compile(r"^([0-9a-f]{2})-([0-9a-f]{32})-([0-9a-f]{16})-([0-9a-f]{2})$")
_INVALID_TRACE_ID = "0" * 32
_INVALID_SPAN_ID = "0" * 16

trace_id_ctx: ContextVar[str] = ContextVar("trace_id", default="")
span_id_ctx: ContextVar[str] = ContextVar("span_id", default="")
parent_span_id_ctx: ContextVar[str] = ContextVar("parent_span_id", default="")


@dataclass(frozen=True)
class ParentContext:
    """上游传入的 traceparent。"""

    trace_id: str
    span_id: str
    sampled: bool


def generate_trace_id() -> str:
    return secrets.token_hex(TRACE_ID_BYTES)


def generate_span_id() -> str:
    return secrets.token_hex(SPAN_ID_BYTES)


def set_trace_context(parent: ParentContext | None = None) -> tuple[str, str]:
    """
    为当前请求开启一个新 span：沿用上游 trace_id（若有），span_id 总是新生成。
    返回 (trace_id, span_id)。
    """
    tid = parent.trace_id if parent else generate_trace_id()
    sid = generate_span_id()
    trace_id_ctx.set(tid)
    span_id_ctx.set(sid)
    parent_span_id_ctx.set(parent.span_id if parent else "")
    return tid, sid


def get_trace_id() -> str:
    return trace_id_ctx.get() or ""


def get_span_id() -> str:
    return span_id_ctx.get() or ""


def get_parent_span_id() -> str:
    return parent_span_id_ctx.get() or ""


def parse_traceparent(header_value: str | None) -> ParentContext | None:
    """
    解析 traceparent：version-trace_id-span_id-flags（小写十六进制）。
    版本 ff、全零 ID 或格式错误时返回 None，由调用方开启新 trace。
    """
    if not header_value:
        return None
    m = _TRACEPARENT_RE.match(header_value.strip())
    if m is None:
        return None
    version, tid, sid, flags = m.groups()
    if version == "ff" or tid == _INVALID_TRACE_ID or sid == _INVALID_SPAN_ID:
        return None
    return ParentContext(trace_id=tid, span_id=sid, sampled=bool(int(flags, 16) & 0x01))


def build_traceparent(trace_id: str, span_id: str, sampled: bool = True) -> str:
    flags = "01" if sampled else "00"
    return f"00-{trace_id}-{span_id}-{flags}"
