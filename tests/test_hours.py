import pytest

from payroll.hours import (
    adjust_clock_times,
    adjusted_night_hours,
    calculate_night_hours,
    measure_shift,
)
from payroll.time_utils import calculate_work_hours
from schemas import AttendanceThresholds, BreakInterval, ShiftInterval


@pytest.mark.parametrize(
    "start,end,expected",
    [
        ("22:00", "02:00", 4),
        ("21:00", "23:00", 1),
        ("05:00", "07:00", 1),
        ("20:00", "08:00", 8),
        ("23:00", "01:00", 2),
        ("22:00", "06:00", 8),
        ("00:00", "06:00", 6),
        ("23:00", "08:00", 7),
        ("04:00", "10:00", 2),
        ("21:00", "07:00", 8),
    ],
)
def test_night_hours(start, end, expected):
    assert calculate_night_hours(start, end) == expected


@pytest.mark.parametrize("start,end", [("06:00", "22:00"), ("09:00", "18:00"), ("10:00", "21:00")])
def test_daytime_shift_has_no_night_hours(start, end):
    assert calculate_night_hours(start, end) == 0


@pytest.mark.parametrize(
    "start,end",
    [("09:00", "18:00"), ("20:00", "08:00"), ("03:00", "02:00"), ("21:30", "22:15"), ("05:45", "06:10")],
)
def test_night_hours_never_exceed_work_hours(start, end):
    night = calculate_night_hours(start, end)
    assert 0 <= night <= calculate_work_hours(start, end)
    assert night <= 16


def test_break_inside_night_window_is_subtracted():
    shift = ShiftInterval(startTime="21:00", endTime="03:00", breaks=[BreakInterval(start="23:00", end="24:00")])
    assert calculate_night_hours("21:00", "03:00") == 5
    assert adjusted_night_hours(shift) == 4


def test_break_outside_night_window_is_not_subtracted():
    shift = ShiftInterval(startTime="20:00", endTime="02:00", breaks=[BreakInterval(start="20:00", end="21:00")])
    assert adjusted_night_hours(shift) == 4


def test_break_before_shift_start_overlaps_nothing():
    shift = ShiftInterval(startTime="21:00", endTime="03:00", breaks=[BreakInterval(start="20:00", end="21:00")])
    assert adjusted_night_hours(shift) == 5


def test_break_after_midnight():
    shift = ShiftInterval(startTime="22:00", endTime="06:00", breaks=[BreakInterval(start="02:00", end="02:30")])
    hours = measure_shift(shift)
    assert hours.raw_minutes == 480
    assert hours.break_minutes == 30
    assert hours.work_minutes == 450
    assert hours.night_minutes == 450


def test_break_minutes_reduce_worked_time():
    shift = ShiftInterval(startTime="09:00", endTime="18:00", breaks=[BreakInterval(start="12:00", end="13:00")])
    hours = measure_shift(shift)
    assert hours.work_minutes == 480
    assert hours.night_minutes == 0


def test_explicit_break_minutes_win_over_interval():
    shift = ShiftInterval(
        startTime="09:00", endTime="18:00", breaks=[BreakInterval(start="12:00", end="13:00", minutes=30)]
    )
    assert measure_shift(shift).work_minutes == 510


def test_night_hours_do_not_go_negative():
    shift = ShiftInterval(
        startTime="22:00",
        endTime="23:00",
        breaks=[BreakInterval(start="22:00", end="23:00"), BreakInterval(start="22:00", end="23:00")],
    )
    hours = measure_shift(shift)
    assert hours.night_minutes == 0
    assert hours.work_minutes == 0


class TestAdjustClockTimes:
    thresholds = AttendanceThresholds()

    def test_without_schedule_keeps_times(self):
        assert adjust_clock_times("08:40", "18:20", None, None, self.thresholds) == ("08:40", "18:20")

    def test_small_early_clock_in_starts_at_contract_start(self):
        assert adjust_clock_times("08:50", "18:00", "09:00", "18:00", self.thresholds) == ("09:00", "18:00")

    def test_large_early_clock_in_is_kept(self):
        assert adjust_clock_times("08:30", "18:00", "09:00", "18:00", self.thresholds) == ("08:30", "18:00")

    def test_early_leave_within_tolerance_is_credited(self):
        assert adjust_clock_times("09:00", "17:57", "09:00", "18:00", self.thresholds) == ("09:00", "18:00")

    def test_early_leave_beyond_tolerance_is_deducted(self):
        assert adjust_clock_times("09:00", "17:30", "09:00", "18:00", self.thresholds) == ("09:00", "17:30")

    def test_short_overstay_is_cut(self):
        assert adjust_clock_times("09:00", "18:03", "09:00", "18:00", self.thresholds) == ("09:00", "18:00")

    def test_long_overstay_is_kept(self):
        assert adjust_clock_times("09:00", "19:00", "09:00", "18:00", self.thresholds) == ("09:00", "19:00")

    def test_overnight_schedule(self):
        assert adjust_clock_times("21:55", "00:02", "22:00", "24:00", self.thresholds) == ("22:00", "24:00")
