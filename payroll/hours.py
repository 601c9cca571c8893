"""
근무 한 건(shift)에 대한 시간 계산: 실근무시간, 야간시간(22:00~06:00), 휴게시간 차감.

근무는 time_utils.normalize_interval 로 0~48시간 타임라인에 펼친 뒤
야간 구간과의 겹침을 interval_overlap_minutes 하나로 계산한다.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from payroll.time_utils import (
    MINUTES_PER_DAY,
    duration_minutes,
    interval_overlap_minutes,
    minutes_to_hours,
    normalize_interval,
    shift_minutes,
    time_to_minutes,
)
from schemas import AttendanceThresholds, BreakInterval, ShiftInterval

logger = logging.getLogger(__name__)

NIGHT_START = 22 * 60  # 22:00
NIGHT_END = (24 + 6) * 60  # 다음날 06:00


@dataclass(frozen=True)
class ShiftHours:
    raw_minutes: int  # 출근~퇴근
    break_minutes: int
    work_minutes: int  # 휴게 제외 실근무
    night_minutes: int  # 휴게 제외 야간


def _night_bands():
    # 전날 밤, 당일 밤, 다음날 밤 (24시간 이하 근무는 이 세 구간 안에 들어옴)
    for day_offset in (-1, 0, 1):
        yield NIGHT_START + day_offset * MINUTES_PER_DAY, NIGHT_END + day_offset * MINUTES_PER_DAY


def night_minutes_in(start_min: int, end_min: int) -> int:
    return sum(
        interval_overlap_minutes(start_min, end_min, band_start, band_end)
        for band_start, band_end in _night_bands()
    )


#step1. 야간 근무 시간

"""코드 요약:
→ startTime~endTime 중 22:00~06:00(다음날)에 해당하는 시간(float)
자정 넘긴 근무, 새벽에 시작하는 근무(05:00~07:00) 모두 처리
20:00~08:00 처럼 야간 구간을 통째로 덮어도 최대 8시간"""

def calculate_night_hours(start: str, end: str) -> float:
    start_min, end_min = normalize_interval(start, end)
    return minutes_to_hours(night_minutes_in(start_min, end_min))


#step2. 휴게시간 차감

"""코드 요약:
→ 휴게시간은 무급이라 야간수당 대상에서도 빠져야 함
휴게 구간을 근무 타임라인 위에 올리고(근무 시작보다 앞이면 다음날로 봄)
근무 범위 밖은 잘라낸 뒤 야간 구간과 겹치는 분만큼 빼줌"""

def break_minutes(brk: BreakInterval) -> int:
    if brk.minutes is not None:
        return brk.minutes
    return duration_minutes(brk.start, brk.end)


def place_break(brk: BreakInterval, shift_start: int, shift_end: int) -> tuple[int, int]:
    start_min = time_to_minutes(brk.start)
    if start_min < shift_start:
        start_min += MINUTES_PER_DAY
    end_min = start_min + duration_minutes(brk.start, brk.end)
    # 근무 범위 밖은 잘라냄
    start_min = max(start_min, shift_start)
    end_min = min(end_min, shift_end)
    return start_min, max(start_min, end_min)


def break_night_overlap_minutes(brk: BreakInterval, shift_start: int, shift_end: int) -> int:
    start_min, end_min = place_break(brk, shift_start, shift_end)
    return night_minutes_in(start_min, end_min)


def adjusted_night_hours(shift: ShiftInterval) -> float:
    """휴게시간이 겹치는 부분을 뺀 야간 근무 시간"""
    return minutes_to_hours(measure_shift(shift).night_minutes)


def measure_shift(shift: ShiftInterval) -> ShiftHours:
    raw = shift_minutes(shift.startTime, shift.endTime)
    start_min, end_min = normalize_interval(shift.startTime, shift.endTime)

    night = night_minutes_in(start_min, end_min)
    total_break = 0
    for brk in shift.breaks:
        total_break += break_minutes(brk)
        night -= break_night_overlap_minutes(brk, start_min, end_min)

    return ShiftHours(
        raw_minutes=raw,
        break_minutes=total_break,
        work_minutes=max(raw - total_break, 0),
        night_minutes=max(night, 0),
    )


#step3. 출퇴근 허용시간 조정

"""코드 요약:
→ 계약서 근무시간(workStartTime~workEndTime)과 실제 출퇴근을 비교해서 인정 시간을 조정
조기출근: earlyClockIn분 미만으로 일찍 온 건 계약 시작시간부터 계산
조기퇴근: earlyClockOut분 이내는 계약 종료시간까지 인정
초과근무: overtime분 미만으로 늦게 간 건 계약 종료시간까지만 계산"""

def _clock_diff(a: str, b: str) -> int:
    # a - b 를 -720 ~ 720분 사이로 (23:58 과 00:02 는 4분 차이)
    diff = (time_to_minutes(a) - time_to_minutes(b)) % MINUTES_PER_DAY
    if diff > MINUTES_PER_DAY // 2:
        diff -= MINUTES_PER_DAY
    return diff


def adjust_clock_times(
    clock_in: str,
    clock_out: str,
    work_start: Optional[str],
    work_end: Optional[str],
    thresholds: AttendanceThresholds,
) -> tuple[str, str]:
    if not work_start or not work_end:
        return clock_in, clock_out

    adjusted_in, adjusted_out = clock_in, clock_out

    early_minutes = _clock_diff(work_start, clock_in)
    if 0 < early_minutes < thresholds.earlyClockIn:
        adjusted_in = work_start
        logger.debug("조기출근 %d분 (허용 %d분 미만) → 계약시간부터 계산", early_minutes, thresholds.earlyClockIn)

    leave_diff = _clock_diff(work_end, clock_out)
    if 0 < leave_diff <= thresholds.earlyClockOut:
        adjusted_out = work_end
        logger.debug("조기퇴근 %d분 (허용 %d분 이내) → 차감 없음", leave_diff, thresholds.earlyClockOut)
    elif 0 < -leave_diff < thresholds.overtime:
        adjusted_out = work_end
        logger.debug("초과근무 %d분 (허용 %d분 미만) → 수당 미적용", -leave_diff, thresholds.overtime)

    return adjusted_in, adjusted_out
