"""The JSON envelope every endpoint answers with."""

from __future__ import annotations

from collections.abc import MutableMapping
from dataclasses import dataclass
from typing import Any

OK_CODE = 0
OK_MESSAGE = "ok"

RESP_STATUS_KEY = "resp_status"
RESP_BODY_KEY = "resp_body"


@dataclass(frozen=True)
class Response:
    """A response envelope: code, message and optional data."""

    code: int
    message: str
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        """Return the wire form; ``data`` is left out when it is ``None``."""
        body: dict[str, Any] = {"code": self.code, "msg": self.message}
        if self.data is not None:
            body["data"] = self.data
        return body

    def to(self, c: MutableMapping[str, Any], status: int) -> None:
        """Store this response and its HTTP status in the request context ``c``."""
        c[RESP_STATUS_KEY] = status
        c[RESP_BODY_KEY] = self


def empty() -> Response:
    """Return a success response with an empty object as data."""
    return Response(OK_CODE, OK_MESSAGE, {})


def ok(data: Any) -> Response:
    """Return a success response carrying ``data``."""
    return Response(OK_CODE, OK_MESSAGE, data)


def error(code: int, message: str) -> Response:
    """Return an error response without data."""
    return Response(code, message)