from __future__ import annotations

from enum import Enum
from typing import Any, Callable

from uniforge.core import Time, get_logger
from uniforge.core.exceptions import OperationTimeoutError, ProviderCallError

logger = get_logger(__name__)


class WaitState(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    RETRY = "retry"


class Waiter:
    """Bounded fixed-delay poll loop.

    A task that completes on poll ``n`` costs ``n`` polls and ``n - 1``
    sleeps. A task that never completes costs ``max_attempts`` polls and
    returns with :class:`OperationTimeoutError` after at most
    ``(max_attempts - 1) * delay`` seconds of sleep.
    """

    name: str
    delay: float
    max_attempts: int

    def __init__(
        self,
        name: str,
        delay: float = 15,
        max_attempts: int = 120,
        sleep: Callable[[float], None] = Time.sleep,
        clock: Callable[[], float] = Time.monotonic,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.name = name
        self.delay = delay
        self.max_attempts = max_attempts
        self._sleep = sleep
        self._clock = clock
        self.attempts = 0
        self.elapsed = 0.0

    def wait(self, poll: Callable[[], tuple[WaitState, Any]]) -> Any:
        """Poll until success, failure or the attempt budget is spent.

        Args:
            poll: Returns the state and a payload.

        Returns:
            Payload of the successful poll.
        """
        start = self._clock()
        self.attempts = 0
        while True:
            self.attempts += 1
            state, payload = poll()
            self.elapsed = self._clock() - start
            if state == WaitState.SUCCESS:
                logger.debug(
                    "%s succeeded after %d attempts", self.name, self.attempts
                )
                return payload
            if state == WaitState.FAILURE:
                raise ProviderCallError(
                    f"{self.name} failed: {payload}"
                    if payload
                    else f"{self.name} failed"
                )
            if self.attempts >= self.max_attempts:
                raise OperationTimeoutError(
                    f"{self.name} timed out after "
                    f"{self.elapsed_minutes:f} minutes",
                    elapsed=self.elapsed,
                )
            self._sleep(self.delay)

    @property
    def elapsed_minutes(self) -> float:
        return self.elapsed / 60
