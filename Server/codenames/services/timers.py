"""
Countdown Timers

Logical clocks driven by an external caller. Nothing here sleeps or spawns
threads; ``advance`` is called with elapsed milliseconds by the clock driver
in production and by tests directly.
"""

from typing import Optional

MILLISECONDS_PER_TICK = 1000


class Countdown:
    """
    One-second countdown.

    Elapsed time is accumulated and the remaining seconds drop by one for
    every full second while the countdown is running.
    """

    def __init__(self, seconds: int, remaining: Optional[int] = None):
        self.seconds = seconds
        self.remaining = seconds if remaining is None else remaining
        self.running = False
        self._elapsed_ms = 0

    def start(self) -> None:
        self.running = True
        self._elapsed_ms = 0

    def cancel(self) -> None:
        self.running = False
        self._elapsed_ms = 0

    def reset(self) -> None:
        """Back to the full duration. Running state is left unchanged."""
        self.remaining = self.seconds
        self._elapsed_ms = 0

    def is_low(self, threshold: int) -> bool:
        return self.remaining < threshold

    def advance(self, milliseconds: int) -> int:
        """
        Moves the countdown forward.

        Returns:
            Number of whole-second ticks that happened. The countdown stops
            itself on the tick that reaches zero, so callers check
            ``expired`` after a non-zero result.
        """
        if not self.running or milliseconds <= 0:
            return 0

        self._elapsed_ms += milliseconds
        ticks = 0
        while self._elapsed_ms >= MILLISECONDS_PER_TICK and self.remaining > 0:
            self._elapsed_ms -= MILLISECONDS_PER_TICK
            self.remaining -= 1
            ticks += 1

        if self.remaining <= 0:
            self.remaining = 0
            self.cancel()
        return ticks

    @property
    def expired(self) -> bool:
        return self.remaining <= 0


class DelayedCall:
    """Fires once after a fixed delay, unless cancelled first."""

    def __init__(self, delay_ms: int):
        self.delay_ms = delay_ms
        self._remaining_ms: Optional[int] = None

    @property
    def pending(self) -> bool:
        return self._remaining_ms is not None

    @property
    def remaining_ms(self) -> Optional[int]:
        return self._remaining_ms

    def schedule(self) -> None:
        self._remaining_ms = self.delay_ms

    def cancel(self) -> None:
        self._remaining_ms = None

    def advance(self, milliseconds: int) -> bool:
        """Returns True exactly once, when the delay has fully elapsed."""
        if self._remaining_ms is None:
            return False
        self._remaining_ms -= milliseconds
        if self._remaining_ms <= 0:
            self._remaining_ms = None
            return True
        return False
