"""공휴일 판별 (휴일근로수당, 결근 판단용)"""

from datetime import date

# 2025년 공휴일. 연도가 바뀌면 항목을 추가해야 함
PUBLIC_HOLIDAYS = frozenset(
    date.fromisoformat(d)
    for d in (
        "2025-01-01",  # 신정
        "2025-01-27",  # 임시공휴일
        "2025-01-28", "2025-01-29", "2025-01-30",  # 설날 연휴
        "2025-03-01",  # 삼일절
        "2025-03-03",  # 대체공휴일
        "2025-05-05",  # 어린이날, 부처님오신날
        "2025-05-06",  # 대체공휴일
        "2025-06-03",  # 대통령 선거일
        "2025-06-06",  # 현충일
        "2025-08-15",  # 광복절
        "2025-10-03",  # 개천절
        "2025-10-05", "2025-10-06", "2025-10-07",  # 추석 연휴
        "2025-10-08",  # 대체공휴일
        "2025-10-09",  # 한글날
        "2025-12-25",  # 크리스마스
    )
)


def is_public_holiday(day: date) -> bool:
    return day in PUBLIC_HOLIDAYS
