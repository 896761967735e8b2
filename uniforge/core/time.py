__all__ = ["Time"]


import threading
import time


class Time:
    _last_ns = 0
    _lock = threading.Lock()

    @staticmethod
    def now_ns() -> int:
        """Wall clock in nanoseconds, strictly increasing within a process.

        A coarse clock or a backwards clock step never yields a value
        already returned.
        """
        with Time._lock:
            now = max(time.time_ns(), Time._last_ns + 1)
            Time._last_ns = now
            return now

    @staticmethod
    def monotonic() -> float:
        return time.monotonic()

    @staticmethod
    def sleep(seconds: float) -> None:
        time.sleep(seconds)
