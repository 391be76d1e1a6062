# marketplace/domain/numbers.py
import secrets
import string
import threading
import time

from marketplace.utils.settings import ORDER_NUMBER_PREFIX, TRACKING_NUMBER_PREFIX

_BASE36 = string.digits + string.ascii_uppercase


class MillisClock:
    """Millisecond timestamps that never repeat or go backwards within a process."""

    def __init__(self, source=time.time_ns):
        self._source = source
        self._last = 0
        self._lock = threading.Lock()

    def __call__(self) -> int:
        with self._lock:
            now = self._source() // 1_000_000
            if now <= self._last:
                now = self._last + 1
            self._last = now
            return now


_clock = MillisClock()


def random_base36(length: int) -> str:
    return "".join(secrets.choice(_BASE36) for _ in range(length))


def generate_order_number(clock=_clock, prefix: str = ORDER_NUMBER_PREFIX) -> str:
    # ECO-NNNNNN-XXXXXX
    return f"{prefix}-{str(clock())[-6:]}-{random_base36(6)}"


def generate_tracking_number(clock=_clock, prefix: str = TRACKING_NUMBER_PREFIX) -> str:
    return f"{prefix}{str(clock())[-8:]}"
