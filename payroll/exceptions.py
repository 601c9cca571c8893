from typing import Optional


class PayrollError(Exception):
    """급여 계산 중 발생하는 모든 오류의 기반 클래스."""

    def __init__(self, message: str, record: Optional[str] = None):
        super().__init__(message)
        self.message = message
        # 문제가 된 근무 기록 (보통 "YYYY-MM-DD")
        self.record = record

    def __str__(self):
        if self.record:
            return f"{self.message} (record: {self.record})"
        return self.message


class InvalidTimeFormat(PayrollError):
    """"HH:MM" 형식이 아니거나 범위를 벗어난 시간 문자열."""


class EmptyShift(PayrollError):
    """길이가 0분인 근무."""


class InvalidPayPeriod(PayrollError):
    """잘못된 급여 월(YYYY-MM) 또는 급여 월 밖의 근무 기록."""


class NegativeNetPay(PayrollError):
    """공제액이 총 지급액을 넘는 경우. 계약 데이터 불일치를 의미함."""
