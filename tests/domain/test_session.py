"""Tests for countdown levels and formatting."""

from __future__ import annotations

import pytest

from logicem.domain.session import CountdownLevel, countdown_level, format_countdown


class TestCountdownLevel:
    @pytest.mark.parametrize(
        ("remaining", "level"),
        [
            (300, CountdownLevel.NORMAL),
            (121, CountdownLevel.NORMAL),
            (120, CountdownLevel.ELEVATED),
            (61, CountdownLevel.ELEVATED),
            (60, CountdownLevel.CRITICAL),
            (0, CountdownLevel.CRITICAL),
        ],
    )
    def test_default_thresholds(self, remaining: int, level: CountdownLevel) -> None:
        assert countdown_level(remaining) is level

    def test_custom_thresholds(self) -> None:
        assert countdown_level(30, warning_seconds=40, critical_seconds=10) is CountdownLevel.ELEVATED


class TestFormatCountdown:
    def test_minutes_and_seconds(self) -> None:
        assert format_countdown(300) == "5:00"
        assert format_countdown(61) == "1:01"
        assert format_countdown(9) == "0:09"

    def test_negative_clamps_to_zero(self) -> None:
        assert format_countdown(-5) == "0:00"
