"""A monotonic millisecond clock for rate limiting and dedup windows."""

import time

from strikefx.types import Milliseconds


class Clock:
    """Report monotonic time in milliseconds.

    The engine only compares timestamps taken from the same clock, so the
    epoch is meaningless. Tests substitute a clock they can advance by hand.
    """

    def now_ms(self) -> Milliseconds:
        """Return the current monotonic time in milliseconds."""
        return Milliseconds(time.perf_counter() * 1000.0)

    def elapsed_ms(self, since: Milliseconds) -> Milliseconds:
        """Milliseconds elapsed since an earlier ``now_ms()`` reading."""
        return Milliseconds(max(0.0, self.now_ms() - since))
