import math
import time
from typing import Self

from pydantic import Field

from rum_core.common.models import FrozenModel
from rum_core.common.pure import pure
from rum_core.primitives import RelativeTime


class Clock(FrozenModel):
    """Maps relative monotonic times onto wall-clock epoch milliseconds.

    Relative times are milliseconds since the time origin, measured on the
    monotonic clock; the origin is pinned to one wall-clock reading so that
    later adjustments of the system clock do not reorder events.
    """

    origin_epoch_ms: float = Field(description="Wall-clock epoch milliseconds at relative time 0")
    origin_monotonic_ms: float = Field(description="Monotonic clock reading (ms) at relative time 0")

    @classmethod
    def start(cls) -> Self:
        """Create a clock whose origin is now."""
        return cls(
            origin_epoch_ms=time.time() * 1000,
            origin_monotonic_ms=time.monotonic() * 1000,
        )

    def relative_now(self) -> RelativeTime:
        """Return the current relative time."""
        return RelativeTime(max(time.monotonic() * 1000 - self.origin_monotonic_ms, 0.0))

    def get_timestamp(self, relative_time: float) -> int:
        """Return the epoch timestamp (ms) at which the given relative time occurred."""
        return math.floor(self.origin_epoch_ms + relative_time)


@pure
def ms_to_ns(duration: float | None) -> int | None:
    """Convert a millisecond duration to integer nanoseconds, keeping None as None."""
    if duration is None:
        return None
    return round(duration * 1e6)
