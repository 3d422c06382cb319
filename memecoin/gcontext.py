"""Per-request values kept in the request's context mapping."""

from __future__ import annotations

import enum
from collections.abc import Mapping, MutableMapping
from typing import Any

from memecoin.model import parse_id
from memecoin.responses import RESP_BODY_KEY, RESP_STATUS_KEY

CONTEXT_KEY_ERROR = "error"
CONTEXT_KEY_CODE = "code"
CONTEXT_KEY_STACK_TRACE = "stack_trace"
CONTEXT_KEY_USER_ID = "user_id"
CONTEXT_KEY_RESP_STATUS = RESP_STATUS_KEY
CONTEXT_KEY_RESP_BODY = RESP_BODY_KEY
CONTEXT_KEY_REQ_BODY = "req_body"
CONTEXT_KEY_SOURCE = "source"
CONTEXT_KEY_RAW_BODY = "raw_body"


class Source(str, enum.Enum):
    """The kind of client a request comes from."""

    APP = "app"
    WEB = "web"
    SERVICE = "srv"


def parse_source(path: str) -> Source:
    """Tell the source from the request path; service when nothing matches."""
    if "/app/" in path:
        return Source.APP
    if "/web/" in path:
        return Source.WEB
    return Source.SERVICE


def get_source(c: Mapping[str, Any]) -> Source:
    """Return the stored source; KeyError if none was set."""
    return Source(c[CONTEXT_KEY_SOURCE])


def set_source(c: MutableMapping[str, Any], source: Source) -> None:
    c[CONTEXT_KEY_SOURCE] = Source(source)


def get_user_id(c: Mapping[str, Any]) -> str | None:
    """Return the stored user id, or None if missing, empty or not text."""
    user_id = c.get(CONTEXT_KEY_USER_ID)
    if not isinstance(user_id, str) or not user_id:
        return None
    return user_id


def get_user_id_int(c: Mapping[str, Any]) -> int | None:
    """Return the stored user id as a 64-bit integer, or None."""
    user_id = get_user_id(c)
    if user_id is None:
        return None
    try:
        return parse_id(user_id)
    except ValueError:
        return None


def set_user_id(c: MutableMapping[str, Any], user_id: str) -> None:
    c[CONTEXT_KEY_USER_ID] = user_id