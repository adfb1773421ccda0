"""Pacing for repeated attempts: a time budget with a minimum gap between tries."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Iterator, Optional

Clock = Callable[[], float]
Sleeper = Callable[[float], None]


@dataclass(frozen=True)
class AttemptStrategy:
    """How long to keep trying and how far apart the tries are.

    ``total`` and ``delay`` are in seconds. ``min_attempts`` is the least
    number of tries that will be made, even when ``total`` has run out.
    """

    total: float = 0.0
    delay: float = 0.0
    min_attempts: int = 0

    def start(self) -> Attempt:
        """Begin a new sequence of attempts for this strategy."""
        return Attempt(self)


class Attempt:
    """A running sequence of attempts made under an :class:`AttemptStrategy`."""

    def __init__(
        self,
        strategy: AttemptStrategy,
        *,
        clock: Optional[Clock] = None,
        sleep: Optional[Sleeper] = None,
    ) -> None:
        self._strategy = strategy
        self._clock = clock if clock is not None else time.monotonic
        self._sleep = sleep if sleep is not None else time.sleep
        now = self._clock()
        self._last = now
        self._end = now + strategy.total
        self._force = True
        self._count = 0

    @property
    def count(self) -> int:
        """Number of attempts started so far."""
        return self._count

    def _next_sleep(self, now: float) -> float:
        return max(0.0, self._strategy.delay - (now - self._last))

    def next(self) -> bool:
        """Wait until the next attempt is due; return False when it is time to stop."""
        now = self._clock()
        pause = self._next_sleep(now)
        if (
            not self._force
            and not now + pause < self._end
            and self._strategy.min_attempts <= self._count
        ):
            return False
        self._force = False
        if pause > 0 and self._count > 0:
            self._sleep(pause)
            now = self._clock()
        self._count += 1
        self._last = now
        return True

    def has_next(self) -> bool:
        """Tell whether another attempt will be made if the current one fails.

        When this returns True the following call to :meth:`next` is
        guaranteed to return True as well.
        """
        if self._force or self._strategy.min_attempts > self._count:
            return True
        now = self._clock()
        if now + self._next_sleep(now) < self._end:
            self._force = True
            return True
        return False

    def __iter__(self) -> Iterator[int]:
        """Yield the number of each attempt as it becomes due."""
        while self.next():
            yield self._count