# backend/tests/test_clock.py

from datetime import datetime, timedelta, timezone

import pytest

from core.clock import Clock, FixedClock, SystemClock, get_clock, to_naive_utc


class TestClock:

    def test_clock_is_abstract(self):
        with pytest.raises(TypeError):
            Clock()

    def test_system_clock_is_naive_utc(self):
        before = datetime.now(timezone.utc).replace(tzinfo=None)
        now = SystemClock().now()
        after = datetime.now(timezone.utc).replace(tzinfo=None)

        assert now.tzinfo is None
        assert before <= now <= after

    def test_fixed_clock_advances(self):
        clock = FixedClock(datetime(2030, 1, 1, 9, 0))
        clock.advance(hours=2, minutes=30)
        assert clock.now() == datetime(2030, 1, 1, 11, 30)

    def test_fixed_clock_normalizes_aware_instant(self):
        jakarta = timezone(timedelta(hours=7))
        clock = FixedClock(datetime(2030, 1, 1, 16, 0, tzinfo=jakarta))
        assert clock.now() == datetime(2030, 1, 1, 9, 0)

    def test_naive_input_is_kept(self):
        value = datetime(2030, 5, 5, 12, 0)
        assert to_naive_utc(value) is value

    def test_default_dependency_is_system_clock(self):
        assert isinstance(get_clock(), SystemClock)
