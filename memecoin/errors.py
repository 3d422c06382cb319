"""Error types with public codes, statuses and cause chains."""

from __future__ import annotations

import enum
import traceback
from http import HTTPStatus


class GRPCCode(enum.IntEnum):
    """gRPC status codes."""

    OK = 0
    CANCELLED = 1
    UNKNOWN = 2
    INVALID_ARGUMENT = 3
    DEADLINE_EXCEEDED = 4
    NOT_FOUND = 5
    ALREADY_EXISTS = 6
    PERMISSION_DENIED = 7
    RESOURCE_EXHAUSTED = 8
    FAILED_PRECONDITION = 9
    ABORTED = 10
    OUT_OF_RANGE = 11
    UNIMPLEMENTED = 12
    INTERNAL = 13
    UNAVAILABLE = 14
    DATA_LOSS = 15
    UNAUTHENTICATED = 16


class Status(str, enum.Enum):
    """Transport-independent error status."""

    BAD_REQUEST = "BadRequest"
    UNAUTHORIZED = "Unauthorized"
    FORBIDDEN = "Forbidden"
    NOT_FOUND = "NotFound"
    TOO_MANY_REQUESTS = "TooManyRequests"
    BAD_GATEWAY = "BadGateway"
    INTERNAL_SERVER_ERROR = "InternalServerError"
    SERVICE_UNAVAILABLE = "ServiceUnavailable"
    GATEWAY_TIMEOUT = "GatewayTimeout"
    ALREADY_EXISTS = "AlreadyExists"
    NOT_IMPLEMENTED = "NotImplemented"
    CONFLICT = "Conflict"

    def to_http_status(self) -> HTTPStatus:
        """Return the HTTP status code for this status."""
        return _HTTP_STATUS.get(self, HTTPStatus.INTERNAL_SERVER_ERROR)

    def to_grpc_status(self) -> GRPCCode:
        """Return the gRPC code for this status."""
        return _GRPC_STATUS.get(self, GRPCCode.INTERNAL)


_HTTP_STATUS = {
    Status.BAD_REQUEST: HTTPStatus.BAD_REQUEST,
    Status.UNAUTHORIZED: HTTPStatus.UNAUTHORIZED,
    Status.FORBIDDEN: HTTPStatus.FORBIDDEN,
    Status.NOT_FOUND: HTTPStatus.NOT_FOUND,
    Status.TOO_MANY_REQUESTS: HTTPStatus.TOO_MANY_REQUESTS,
    Status.BAD_GATEWAY: HTTPStatus.BAD_GATEWAY,
    Status.INTERNAL_SERVER_ERROR: HTTPStatus.INTERNAL_SERVER_ERROR,
    Status.SERVICE_UNAVAILABLE: HTTPStatus.SERVICE_UNAVAILABLE,
    Status.GATEWAY_TIMEOUT: HTTPStatus.GATEWAY_TIMEOUT,
    Status.ALREADY_EXISTS: HTTPStatus.CONFLICT,
    Status.NOT_IMPLEMENTED: HTTPStatus.NOT_IMPLEMENTED,
    Status.CONFLICT: HTTPStatus.CONFLICT,
}

_GRPC_STATUS = {
    Status.BAD_REQUEST: GRPCCode.INVALID_ARGUMENT,
    Status.UNAUTHORIZED: GRPCCode.UNAUTHENTICATED,
    Status.FORBIDDEN: GRPCCode.PERMISSION_DENIED,
    Status.NOT_FOUND: GRPCCode.UNIMPLEMENTED,
    Status.TOO_MANY_REQUESTS: GRPCCode.UNAVAILABLE,
    Status.BAD_GATEWAY: GRPCCode.UNAVAILABLE,
    Status.INTERNAL_SERVER_ERROR: GRPCCode.INTERNAL,
    Status.SERVICE_UNAVAILABLE: GRPCCode.UNAVAILABLE,
    Status.GATEWAY_TIMEOUT: GRPCCode.UNAVAILABLE,
    Status.ALREADY_EXISTS: GRPCCode.ALREADY_EXISTS,
    Status.CONFLICT: GRPCCode.FAILED_PRECONDITION,
}


def _capture_stack() -> list[str]:
    frames = [frame for frame in traceback.extract_stack() if frame.filename != __file__]
    return traceback.format_list(frames)


class WrappedError(Exception):
    """An error annotated with a message and the stack where it was wrapped."""

    def __init__(self, message: str, cause: BaseException) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.stack = _capture_stack()
        self.__cause__ = cause

    def __str__(self) -> str:
        return f"{self.message}: {self.cause}"


class CustomError(Exception):
    """An error carrying a public code, status and message."""

    def __init__(self, code: int, status: Status, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.status = Status(status)
        self.message = message
        self.error_message = ""
        self.cause: BaseException | None = None
        self.stack: list[str] = []

    def _derive(self, cause: BaseException, error_message: str = "") -> CustomError:
        derived = CustomError(self.code, self.status, self.message)
        derived.cause = cause
        derived.error_message = error_message
        derived.stack = _capture_stack()
        derived.__cause__ = cause
        return derived

    def new(self, msg: str) -> CustomError:
        """Return a copy of this error caused by a plain error with ``msg``."""
        return self._derive(Exception(msg))

    def wrap(self, err: BaseException | None, msg: str) -> CustomError | None:
        """Return a copy of this error wrapping ``err``; ``None`` if ``err`` is ``None``."""
        if err is None:
            return None
        return self._derive(err, msg)

    def __str__(self) -> str:
        if self.cause is not None:
            if self.error_message:
                return f"{self.error_message}: {self.cause}"
            return str(self.cause)
        return self.error_message or self.message

    def matches(self, err: BaseException | None) -> bool:
        """Tell whether ``err`` is this error, by code or else by text."""
        if err is None:
            return False
        found = _as_custom(err)
        if found is not None:
            return self.code == found.code
        return str(self) == str(err)


_CAUSERS = (WrappedError, CustomError)


def _as_custom(err: BaseException | None) -> CustomError | None:
    while isinstance(err, WrappedError):
        err = err.cause
    return err if isinstance(err, CustomError) else None


# Client 809101xxx
ROUTE_NOT_FOUND = CustomError(809101001, Status.NOT_FOUND, "route not found")
INVALID_REQUEST = CustomError(809101002, Status.BAD_REQUEST, "invalid request")
MISS_AUTHORIZATION = CustomError(809101003, Status.UNAUTHORIZED, "miss authorization")
INVALID_AUTHORIZATION = CustomError(809101004, Status.UNAUTHORIZED, "invalid authorization")
ACCESS_DENIED = CustomError(
    809101005, Status.FORBIDDEN, "you do not have permission to access this resource"
)

# Server 809102xxx
INTERNAL_SERVER_PANIC = CustomError(809102001, Status.INTERNAL_SERVER_ERROR, "internal server panic")
INTERNAL_SERVER_ERROR = CustomError(809102002, Status.INTERNAL_SERVER_ERROR, "internal server error")

# Logic 809103xxx
NOT_FOUND = CustomError(809103001, Status.NOT_FOUND, "not found")
NAME_ALREADY_EXISTS = CustomError(
    809103002, Status.CONFLICT, "meme coin with this name already exists"
)


def wrap(err: BaseException | None, message: str) -> WrappedError | None:
    """Annotate ``err`` with ``message``; ``None`` if ``err`` is ``None``."""
    if err is None:
        return None
    return WrappedError(message, err)


def cause(err: BaseException | None) -> BaseException | None:
    """Return the innermost cause of ``err``."""
    while isinstance(err, _CAUSERS):
        inner = err.cause
        if inner is None:
            break
        err = inner
    return err


def cause_custom_error(err: BaseException | None) -> CustomError | None:
    """Return the innermost CustomError in the cause chain, or ``None``."""
    result = None
    while isinstance(err, _CAUSERS):
        found = _as_custom(err)
        if found is not None:
            result = found
        err = err.cause
    return result


def stack_trace(err: BaseException | None) -> list[str]:
    """Return the innermost recorded stack in the cause chain."""
    stack: list[str] = []
    while isinstance(err, _CAUSERS):
        if err.stack:
            stack = err.stack
        err = err.cause
    return list(stack)