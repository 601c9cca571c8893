"""
"HH:MM" 벽시계 문자열 ↔ 분 단위 변환과 구간 계산 유틸.

모든 계산은 정수 분(minute) 단위로 하고, 시간(hour)은 결과를 보여줄 때만 만든다.
자정을 넘는 근무는 0~48시간(0~2880분) 타임라인 위에 펼쳐서 다룬다.
"""

import re

from payroll.exceptions import EmptyShift, InvalidTimeFormat

MINUTES_PER_HOUR = 60
MINUTES_PER_DAY = 24 * MINUTES_PER_HOUR

_TIME_PATTERN = re.compile(r"^\s*([0-9]{1,2}):([0-9]{1,2})\s*$")


def time_to_minutes(hhmm: str) -> int:
    """
    "HH:MM" → 자정 기준 분. "24:00"은 하루의 끝(1440)으로 허용
    """
    if not isinstance(hhmm, str):
        raise InvalidTimeFormat(f"시간 형식이 올바르지 않습니다: {hhmm!r}")

    match = _TIME_PATTERN.match(hhmm)
    if not match:
        raise InvalidTimeFormat(f"시간 형식이 올바르지 않습니다: {hhmm!r}")

    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 24 or minutes > 59 or (hours == 24 and minutes != 0):
        raise InvalidTimeFormat(f"시간 범위를 벗어났습니다: {hhmm!r}")

    return hours * MINUTES_PER_HOUR + minutes


def duration_minutes(start: str, end: str) -> int:
    """
    start → end 사이의 분. end가 start보다 앞이면 자정을 넘긴 것으로 보고 하루를 더함.
    같은 시각이면 0을 돌려주고, 0분이 유효한지는 호출하는 쪽이 판단한다.
    """
    diff = time_to_minutes(end) - time_to_minutes(start)
    if diff < 0:
        diff += MINUTES_PER_DAY
    return diff


def normalize_interval(start: str, end: str) -> tuple[int, int]:
    """
    근무 구간을 (시작분, 종료분) 으로 펼침. 종료분은 최대 2880(다음날 24:00)까지.
    """
    start_min = time_to_minutes(start)
    return start_min, start_min + duration_minutes(start, end)


def shift_minutes(start: str, end: str) -> int:
    minutes = duration_minutes(start, end)
    if minutes == 0:
        raise EmptyShift(f"근무 시간이 0분입니다: {start}~{end}")
    return minutes


def calculate_work_hours(start: str, end: str, break_minutes: int = 0) -> float:
    """
    문자열 startTime, endTime 기준 총 근무 시간(float, 소수 둘째 자리)
    휴게시간(break_minutes)은 빼고 계산, 음수로는 내려가지 않음
    """
    minutes = max(shift_minutes(start, end) - break_minutes, 0)
    return minutes_to_hours(minutes)


def interval_overlap_minutes(a_start: int, a_end: int, b_start: int, b_end: int) -> int:
    """두 반열린 구간 [a_start, a_end), [b_start, b_end) 이 겹치는 분."""
    return max(0, min(a_end, b_end) - max(a_start, b_start))


def minutes_to_hours(minutes) -> float:
    return round(float(minutes) / MINUTES_PER_HOUR, 2)


def format_hours_and_minutes(hours: float) -> str:
    """8.5 → "8시간 30분", 8.0 → "8시간", 0.5 → "30분" """
    total_minutes = round(hours * MINUTES_PER_HOUR)
    h, m = divmod(total_minutes, MINUTES_PER_HOUR)
    if h == 0:
        return f"{m}분"
    if m == 0:
        return f"{h}시간"
    return f"{h}시간 {m}분"
