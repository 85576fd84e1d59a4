"""W3C Trace Context 的单元测试。"""

from portfolio.observability.trace import (
    ParentContext,
    build_traceparent,
    generate_span_id,
    generate_trace_id,
    get_parent_span_id,
    get_span_id,
    get_trace_id,
    parse_traceparent,
    set_trace_context,
)

TID = "4bf92f3577b34da6a3ce929d0e0e4736"
SID = "00f067aa0ba902b7"


class TestGenerateIds:
    def test_trace_id_length(self):
        tid = generate_trace_id()
        assert len(tid) == 32
        int(tid, 16)

    def test_span_id_length(self):
        sid = generate_span_id()
        assert len(sid) == 16
        int(sid, 16)

    def test_uniqueness(self):
        ids = {generate_trace_id() for _ in range(100)}
        assert len(ids) == 100


class TestSetTraceContext:
    def test_new_trace(self):
        tid, sid = set_trace_context()
        assert len(tid) == 32
        assert get_trace_id() == tid
        assert get_span_id() == sid
        assert get_parent_span_id() == ""

    def test_continues_parent(self):
        tid, sid = set_trace_context(ParentContext(trace_id=TID, span_id=SID, sampled=True))
        assert tid == TID
        assert sid != SID
        assert get_parent_span_id() == SID


class TestParseTraceparent:
    def test_valid(self):
        parent = parse_traceparent(f"00-{TID}-{SID}-01")
        assert parent == ParentContext(trace_id=TID, span_id=SID, sampled=True)

    def test_not_sampled(self):
        assert parse_traceparent(f"00-{TID}-{SID}-00").sampled is False

    def test_empty(self):
        assert parse_traceparent(None) is None
        assert parse_traceparent("") is None
        assert parse_traceparent("   ") is None

    def test_malformed(self):
        assert parse_traceparent("invalid") is None
        assert parse_traceparent(f"00-{TID[:-1]}-{SID}-01") is None
        assert parse_traceparent(f"00-{TID.upper()}-{SID}-01") is None

    def test_invalid_ids(self):
        assert parse_traceparent(f"00-{'0' * 32}-{SID}-01") is None
        assert parse_traceparent(f"00-{TID}-{'0' * 16}-01") is None
        assert parse_traceparent(f"ff-{TID}-{SID}-01") is None


class TestBuildTraceparent:
    def test_sampled(self):
        assert build_traceparent(TID, SID) == f"00-{TID}-{SID}-01"

    def test_not_sampled(self):
        assert build_traceparent(TID, SID, sampled=False) == f"00-{TID}-{SID}-00"

    def test_roundtrip(self):
        parent = parse_traceparent(build_traceparent(TID, SID))
        assert (parent.trace_id, parent.span_id) == (TID, SID)
