"""Per-request trace identifiers carried in context variables."""

from __future__ import annotations

import contextlib
import re
import secrets
from collections.abc import Iterator
from contextvars import ContextVar

INVALID_TRACE_ID = "0" * 32
_TRACE_ID_RE = re.compile(r"[0-9a-f]{32}")

_trace_id: ContextVar[str] = ContextVar("trace_id", default=INVALID_TRACE_ID)


def new_trace_id() -> str:
    """Return a random, valid 128-bit trace id as 32 lower-case hex digits."""
    while True:
        trace_id = secrets.token_hex(16)
        if trace_id != INVALID_TRACE_ID:
            return trace_id


def current_trace_id() -> str:
    """Return the active trace id, or all zeros when none is active."""
    return _trace_id.get()


@contextlib.contextmanager
def use_trace_id(trace_id: str) -> Iterator[str]:
    """Make ``trace_id`` the active trace id inside the block."""
    trace_id = trace_id.lower()
    if not _TRACE_ID_RE.fullmatch(trace_id):
        raise ValueError(f"invalid trace id: {trace_id!r}")
    token = _trace_id.set(trace_id)
    try:
        yield trace_id
    finally:
        _trace_id.reset(token)