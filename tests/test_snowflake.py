import io
import threading
import time
from unittest import mock

import pytest

from memecoin import snowflake
from memecoin.logs import Logger
from memecoin.snowflake import EPOCH, TIMESTAMP_MAX, Snowflake

_ADDRINFO = [(2, 1, 6, "", ("192.168.3.7", 0))]


def _logger(stream=None):
    return Logger(service_name="test", stream=stream or io.StringIO())


@mock.patch("socket.getaddrinfo", return_value=_ADDRINFO)
def test_concurrent_ids_are_unique(_getaddrinfo):
    snowflake.init(_logger())
    ids = []
    lock = threading.Lock()

    def worker():
        local = [snowflake.new_id() for _ in range(100)]
        with lock:
            ids.extend(local)

    threads = [threading.Thread(target=worker) for _ in range(100)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(ids) == 10000
    assert len(set(ids)) == len(ids)
    latest = snowflake.new_id()
    assert latest > max(ids)


@mock.patch("socket.getaddrinfo", return_value=_ADDRINFO)
def test_device_id_uses_last_two_octets(_getaddrinfo):
    assert snowflake.device_id(_logger()) == (3, 7)


@mock.patch("socket.socket", side_effect=OSError)
@mock.patch("socket.getaddrinfo", return_value=[(2, 1, 6, "", ("127.0.0.1", 0))])
def test_device_id_without_external_ipv4_exits(_getaddrinfo, _socket):
    stream = io.StringIO()
    with pytest.raises(SystemExit):
        snowflake.device_id(_logger(stream))
    assert "no ipv4 address" in stream.getvalue()


def test_new_id_before_init_raises(monkeypatch):
    monkeypatch.setattr(snowflake, "_instance", None)
    with pytest.raises(RuntimeError):
        snowflake.new_id()


def test_id_layout_holds_ids_and_time():
    generator = Snowflake(3, 7, _logger())
    before = time.time_ns() // 1_000_000
    value = generator.next_val()
    after = time.time_ns() // 1_000_000
    assert (value >> 16) & 0xFF == 3
    assert (value >> 8) & 0xFF == 7
    assert before <= (value >> 24) + EPOCH <= after


def test_ids_strictly_increase():
    generator = Snowflake(1, 2, _logger())
    values = [generator.next_val() for _ in range(2000)]
    assert all(a < b for a, b in zip(values, values[1:]))


@pytest.mark.parametrize("datacenter_id, worker_id", [(256, 0), (-1, 0), (0, 256), (0, -1)])
def test_out_of_range_ids_are_rejected(datacenter_id, worker_id):
    with pytest.raises(ValueError):
        Snowflake(datacenter_id, worker_id, _logger())


def test_exhausted_timestamp_returns_zero():
    stream = io.StringIO()
    generator = Snowflake(0, 0, _logger(stream))
    with mock.patch("time.time_ns", return_value=(EPOCH + TIMESTAMP_MAX + 1) * 1_000_000):
        assert generator.next_val() == 0
    assert "timestamp exceeds maximum" in stream.getvalue()