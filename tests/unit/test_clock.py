"""Unit tests for the schedule-extension cooldown"""

from datetime import date
from zoneinfo import ZoneInfo
from allowance_ledger.utils.clock import ScheduleThrottle, SystemClock


def test_throttle_zero_cooldown_always_ready(clock):
    """Test a zero cooldown never blocks"""
    throttle = ScheduleThrottle(0, clock)

    throttle.mark()
    assert throttle.ready() is True


def test_throttle_blocks_inside_window(clock):
    """Test reads inside the cooldown are skipped until it expires"""
    throttle = ScheduleThrottle(60, clock)
    assert throttle.ready() is True

    throttle.mark()
    clock.advance(seconds=30)
    assert throttle.ready() is False

    clock.advance(seconds=30)
    assert throttle.ready() is True


def test_throttle_reset(clock):
    """Test reset re-opens the gate immediately"""
    throttle = ScheduleThrottle(3600, clock)
    throttle.mark()
    assert throttle.ready() is False

    throttle.reset()
    assert throttle.ready() is True


def test_system_clock_timezone():
    """Test a pinned timezone yields aware times and a calendar date"""
    clock = SystemClock("America/New_York")

    now = clock.now()
    assert now.tzinfo == ZoneInfo("America/New_York")
    assert isinstance(clock.today(), date)
    assert clock.today() >= now.date()
