"""Time-ordered 64-bit unique id generation."""

from __future__ import annotations

import ipaddress
import socket
import threading
import time
from collections.abc import Iterator

from memecoin.logs import Logger

EPOCH = 1672531200000  # 2023-01-01T00:00:00Z in milliseconds
TIMESTAMP_BITS = 39
DATACENTER_ID_BITS = 8
WORKER_ID_BITS = 8
SEQUENCE_BITS = 8

TIMESTAMP_MAX = (1 << TIMESTAMP_BITS) - 1
DATACENTER_ID_MAX = (1 << DATACENTER_ID_BITS) - 1
WORKER_ID_MAX = (1 << WORKER_ID_BITS) - 1
SEQUENCE_MASK = (1 << SEQUENCE_BITS) - 1

WORKER_ID_SHIFT = SEQUENCE_BITS
DATACENTER_ID_SHIFT = SEQUENCE_BITS + WORKER_ID_BITS
TIMESTAMP_SHIFT = SEQUENCE_BITS + WORKER_ID_BITS + DATACENTER_ID_BITS


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


class Snowflake:
    """Thread-safe generator of time-ordered ids."""

    def __init__(self, datacenter_id: int, worker_id: int, logger: Logger) -> None:
        if not 0 <= datacenter_id <= DATACENTER_ID_MAX:
            raise ValueError(
                f"datacenter_id must be between 0 and {DATACENTER_ID_MAX - 1}"
            )
        if not 0 <= worker_id <= WORKER_ID_MAX:
            raise ValueError(f"worker_id must be between 0 and {WORKER_ID_MAX - 1}")
        self.datacenter_id = datacenter_id
        self.worker_id = worker_id
        self._logger = logger
        self._timestamp = 0
        self._sequence = 0
        self._lock = threading.Lock()

    def next_val(self) -> int:
        """Return the next id, or 0 once the timestamp range is exhausted."""
        with self._lock:
            now = _now_ms()
            if self._timestamp == now:
                self._sequence = (self._sequence + 1) & SEQUENCE_MASK
                if self._sequence == 0:
                    while now <= self._timestamp:
                        now = _now_ms()
            else:
                self._sequence = 0
            elapsed = now - EPOCH
            if elapsed > TIMESTAMP_MAX:
                self._logger.error("timestamp exceeds maximum, current: %d", now)
                return 0
            self._timestamp = now
            return (
                (elapsed << TIMESTAMP_SHIFT)
                | (self.datacenter_id << DATACENTER_ID_SHIFT)
                | (self.worker_id << WORKER_ID_SHIFT)
                | self._sequence
            )


_instance: Snowflake | None = None
_init_lock = threading.Lock()


def init(logger: Logger) -> None:
    """Create the process-wide generator once, keyed by this host's address."""
    global _instance
    datacenter_id, worker_id = device_id(logger)
    with _init_lock:
        if _instance is not None:
            return
        try:
            _instance = Snowflake(datacenter_id, worker_id, logger)
        except ValueError as exc:
            logger.emergency("failed to initialize snowflake: %s", exc)


def new_id() -> int:
    """Return the next id from the process-wide generator."""
    if _instance is None:
        raise RuntimeError("Snowflake not initialized. Please call init first.")
    return _instance.next_val()


def _candidate_addresses() -> Iterator[str]:
    try:
        infos = socket.getaddrinfo(socket.gethostname(), None, socket.AF_INET)
    except OSError:
        infos = []
    for info in infos:
        yield info[4][0]
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as probe:
            # Connecting a datagram socket sends nothing; it only picks a route.
            probe.connect(("10.254.254.254", 1))
            yield probe.getsockname()[0]
    except OSError:
        pass


def _external_ipv4(logger: Logger) -> ipaddress.IPv4Address:
    for text in _candidate_addresses():
        try:
            address = ipaddress.ip_address(text)
        except ValueError:
            continue
        if isinstance(address, ipaddress.IPv4Address) and not address.is_loopback:
            return address
    logger.emergency("failed to initial snowflake: no ipv4 address")
    raise SystemExit(1)


def device_id(logger: Logger) -> tuple[int, int]:
    """Return (datacenter id, worker id) from the last two octets of this host's IPv4."""
    packed = _external_ipv4(logger).packed
    return packed[2] & DATACENTER_ID_MAX, packed[3] & WORKER_ID_MAX