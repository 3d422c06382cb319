"""Request tracing and request logging hooks for a Flask application."""

from __future__ import annotations

import re
import time
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, g, request

from memecoin import gcontext
from memecoin.logs import Logger
from memecoin.trace import current_trace_id, new_trace_id, use_trace_id

_TRACEPARENT_RE = re.compile(r"[0-9a-f]{2}-([0-9a-f]{32})-[0-9a-f]{16}-[0-9a-f]{2}")
_INVALID_TRACE_ID = "0" * 32


def _incoming_trace_id() -> str:
    header = request.headers.get("traceparent", "").strip().lower()
    match = _TRACEPARENT_RE.fullmatch(header)
    if match and match.group(1) != _INVALID_TRACE_ID:
        return match.group(1)
    return new_trace_id()


def register_trace(app: Flask, service_name: str) -> None:
    """Give every request a trace id, taken from ``traceparent`` when it has one."""

    @app.before_request
    def _start_trace() -> None:
        scope = use_trace_id(_incoming_trace_id())
        scope.__enter__()
        g._trace_scope = scope
        g._trace_service = service_name

    @app.teardown_request
    def _end_trace(_exc: BaseException | None) -> None:
        scope = g.pop("_trace_scope", None)
        if scope is not None:
            scope.__exit__(None, None, None)


def register_request_logger(app: Flask, logger: Logger) -> None:
    """Log one entry per request: info on success, warning on 4xx, error otherwise."""

    @app.before_request
    def _start_log() -> None:
        fields: dict[str, Any] = {
            "endpoint": request.path,
            "method": request.method,
            "user_agent": request.headers.get("User-Agent", ""),
            "client_ip": request.remote_addr or "",
            "trace_id": current_trace_id(),
        }
        raw_query = request.query_string.decode("latin-1")
        if raw_query:
            fields["raw_query"] = raw_query
        authorization = request.headers.get("Authorization", "")
        if authorization:
            fields["authorization"] = authorization
        g._log_fields = fields
        g._log_started = time.monotonic()

    @app.after_request
    def _finish_log(response: Response) -> Response:
        fields = dict(g.get("_log_fields") or {})
        started = g.get("_log_started", time.monotonic())
        c = request.environ

        if gcontext.CONTEXT_KEY_REQ_BODY in c:
            fields["request_body"] = c[gcontext.CONTEXT_KEY_REQ_BODY]
        user_id = gcontext.get_user_id(c)
        if user_id is not None:
            fields["user_id"] = user_id

        status = response.status_code
        fields["elapsed_time"] = int((time.monotonic() - started) * 1000)
        fields["status_code"] = status

        if HTTPStatus.OK <= status < HTTPStatus.MULTIPLE_CHOICES:
            rule = request.url_rule.rule if request.url_rule is not None else ""
            if rule == "/healthz" or request.method == "OPTIONS":
                return response
            logger.with_fields(fields).info(
                "[HTTP Server] %s %s request succeed", request.method, request.path
            )
            return response

        fields["error"] = c.get(gcontext.CONTEXT_KEY_ERROR)
        fields["code"] = c.get(gcontext.CONTEXT_KEY_CODE)
        fields["stack_trace"] = c.get(gcontext.CONTEXT_KEY_STACK_TRACE)
        log = logger.with_fields(fields)
        if HTTPStatus.BAD_REQUEST <= status < HTTPStatus.INTERNAL_SERVER_ERROR:
            log.warning("[HTTP Server] %s %s request failed", request.method, request.path)
        else:
            log.error("[HTTP Server] %s %s request failed", request.method, request.path)
        return response