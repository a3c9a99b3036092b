"""
Tests de la aritmética de horarios "HH:mm".
"""
from datetime import time

import pytest

from nomina.utils.time_math import duration_minutes, format_hhmm, minutes_of


@pytest.mark.parametrize("value,expected", [
    ("00:00", 0),
    ("09:00", 540),
    ("17:30", 1050),
    ("23:59", 1439),
    (time(8, 15), 495),
])
def test_minutes_of_valid(value, expected):
    assert minutes_of(value) == expected


@pytest.mark.parametrize("value", [None, "", "   ", "abc", "12", "xx:yy", 930])
def test_minutes_of_invalid_is_zero(value):
    assert minutes_of(value) == 0


def test_duration_same_day():
    assert duration_minutes("09:00", "17:00") == 480


def test_duration_crosses_midnight():
    assert duration_minutes("22:00", "02:00") == 240


def test_duration_equal_times_is_zero():
    assert duration_minutes("09:00", "09:00") == 0


def test_duration_missing_end():
    """Sin entrada o sin salida no hay turno."""
    assert duration_minutes("22:00", None) == 0
    assert duration_minutes("09:00", "") == 0
    assert duration_minutes("09:00", "  ") == 0
    assert duration_minutes(None, "17:00") == 0
    assert duration_minutes(None, None) == 0


def test_format_hhmm():
    assert format_hhmm(540) == "09:00"
    assert format_hhmm(1445) == "00:05"
