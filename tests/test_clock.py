"""Tests for the window clock.

Run with: pytest tests/test_clock.py -v
"""

from datetime import datetime, timezone

import pytest

from tickets.services import WindowClock


def at(seconds: float) -> WindowClock:
    moment = datetime.fromtimestamp(seconds, tz=timezone.utc)
    return WindowClock(now=lambda: moment)


class TestWindowClock:
    """Tests for WindowClock."""

    def test_window_is_floor_of_seconds_over_rotation(self):
        """current_window is floor(now / 30)."""
        assert at(30_000).current_window() == 1000
        assert at(30_029.9).current_window() == 1000
        assert at(30_030).current_window() == 1001

    def test_same_epoch_same_window(self):
        """Two readings inside one 30 second epoch agree."""
        assert at(60_000).current_window() == at(60_029).current_window()

    def test_injected_source_drives_now(self, manual_time, clock):
        """The clock reads only its injected time source."""
        manual_time.set_window(1234)
        assert clock.current_window() == 1234
        manual_time.advance(30)
        assert clock.current_window() == 1235

    def test_seconds_until_rotation(self):
        """Countdown runs from 30 down to 1 inside a window."""
        assert at(30_000).seconds_until_rotation() == 30
        assert at(30_029).seconds_until_rotation() == 1
        assert at(30_010).seconds_until_rotation() == 20

    def test_custom_rotation(self):
        """Rotation length is configurable."""
        moment = datetime.fromtimestamp(600, tz=timezone.utc)
        assert WindowClock(now=lambda: moment, rotation_seconds=60).current_window() == 10

    def test_rejects_non_positive_rotation(self):
        """A zero rotation would divide by zero."""
        with pytest.raises(ValueError):
            WindowClock(rotation_seconds=0)

    def test_from_settings_uses_spotlight_rotation(self, settings):
        """ROTATION_SECONDS comes from the SPOTLIGHT settings dict."""
        settings.SPOTLIGHT = {"ROTATION_SECONDS": 45}
        assert WindowClock.from_settings().rotation_seconds == 45

    def test_from_settings_default(self, settings):
        """Without overrides the rotation is 30 seconds."""
        settings.SPOTLIGHT = {}
        assert WindowClock.from_settings().rotation_seconds == 30
