"""Window clock: maps wall-clock time onto discrete rotation windows.

A window is ``floor(unix_seconds / rotation_seconds)``. Two readings inside
the same epoch always agree, which is what makes a screenshot go stale.
"""

from collections.abc import Callable
from datetime import datetime, timezone

ROTATION_SECONDS = 30


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WindowClock:
    """Derives rotation windows from an injectable time source."""

    def __init__(
        self,
        now: Callable[[], datetime] = utcnow,
        rotation_seconds: int = ROTATION_SECONDS,
    ) -> None:
        if rotation_seconds <= 0:
            raise ValueError("rotation_seconds must be positive")
        self._now = now
        self.rotation_seconds = rotation_seconds

    @classmethod
    def from_settings(cls) -> "WindowClock":
        from tickets.conf import spotlight_setting

        return cls(rotation_seconds=spotlight_setting("ROTATION_SECONDS"))

    def now(self) -> datetime:
        return self._now()

    def window_at(self, moment: datetime) -> int:
        return int(moment.timestamp() // self.rotation_seconds)

    def current_window(self) -> int:
        return self.window_at(self.now())

    def seconds_until_rotation(self) -> int:
        """Whole seconds left before the next window starts (1..rotation_seconds)."""
        elapsed = int(self.now().timestamp()) % self.rotation_seconds
        return self.rotation_seconds - elapsed
