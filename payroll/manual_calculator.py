from decimal import Decimal

from payroll.calculator import MONTHLY_STANDARD_HOURS, weekly_holiday_minutes
from payroll.deductions import calculate_deductions, calculate_net_pay, round_won
from schemas import ContractTerms, ManualPayInput, ManualPayResult

# 한 달 평균 주 수 (365 ÷ 7 ÷ 12)
WEEKS_PER_MONTH = Decimal("4.345")

# 야간근무 선택 시 하루 4시간을 야간으로 가정
MANUAL_NIGHT_HOURS_PER_DAY = 4

_SALARY_TYPE_ALIASES = {
    "시급": "hourly",
    "hourly": "hourly",
    "월급": "monthly",
    "monthly": "monthly",
    "연봉": "annual",
    "annual": "annual",
}

# 수동 계산 taxOption → 공제 플래그
# insurance: 4대보험 근로자 부담분 (소득세 없음), income: 3.3% 원천징수만
_TAX_OPTIONS = {
    "none": ContractTerms(),
    "insurance": ContractTerms(hasPension=True, hasHealthInsurance=True, hasEmploymentInsurance=True),
    "income": ContractTerms(has4Insurance=True),
}


#step1. 주급 계산

"""코드 요약:
주 총 근무시간과 급여 유형으로 주급을 계산
시급제: 시급 × 근무시간 + 주휴수당(주 15시간 이상, 시급 × min(근무시간 ÷ 5, 8))
월급제/연봉제: 월 금액 ÷ 4.345주 (주휴수당은 월급에 포함되어 있어 따로 없음)
월 예상액 = 주급 × 4.345"""

def calculate_weekly_salary(total_hours: float, salary_type: str, salary_amount: int,
                            has_weekly_holiday: bool = True) -> dict:
    kind = _SALARY_TYPE_ALIASES.get(salary_type)
    if kind is None:
        raise ValueError(f"Invalid salary type: {salary_type}")

    base_pay = Decimal(0)
    weekly_holiday_pay = Decimal(0)

    if kind == "hourly":
        base_pay = Decimal(salary_amount) * Decimal(str(total_hours))
        if has_weekly_holiday:
            holiday_minutes = weekly_holiday_minutes(round(total_hours * 60), has_absence=False)
            weekly_holiday_pay = Decimal(salary_amount) * holiday_minutes / 60
    elif kind == "monthly":
        base_pay = Decimal(salary_amount) / WEEKS_PER_MONTH
    else:
        base_pay = Decimal(salary_amount) / 12 / WEEKS_PER_MONTH

    weekly_salary = base_pay + weekly_holiday_pay
    return {
        "basePay": round_won(base_pay),
        "weeklyHolidayPay": round_won(weekly_holiday_pay),
        "weeklySalary": round_won(weekly_salary),
        "monthlyEstimate": round_won(weekly_salary * WEEKS_PER_MONTH),
    }


#step2. 수동 급여 계산 (월 예상액)

"""코드 요약:
사용자가 직접 입력한 근무 패턴(요일, 하루 근무/연장 시간)으로 한 달 예상 급여를 계산
workingDays 는 한 주의 근무요일 → 주 단위로 계산한 뒤 4.345주를 곱함
일급/월급은 시급으로 환산해서 연장, 야간 수당 계산"""

def calculate_manual_pay(data: ManualPayInput) -> ManualPayResult:
    num_days = len(data.workingDays)
    daily_minutes = data.workHour * 60 + data.workMinute
    weekly_minutes = num_days * daily_minutes
    weekly_overtime_minutes = num_days * (data.overtimeHour * 60 + data.overtimeMinute)
    weekly_night_minutes = num_days * MANUAL_NIGHT_HOURS_PER_DAY * 60 if data.nightWork else 0

    amount = Decimal(data.payAmount)
    if data.payType == "시급":
        hourly = amount
        base_pay = amount * weekly_minutes / 60 * WEEKS_PER_MONTH
    elif data.payType == "일급":
        hourly = amount * 60 / daily_minutes if daily_minutes else Decimal(0)
        base_pay = amount * num_days * WEEKS_PER_MONTH
    else:
        hourly = amount / MONTHLY_STANDARD_HOURS
        base_pay = amount  # 월급은 그대로 사용

    overtime_pay = round_won(hourly * Decimal("1.5") * weekly_overtime_minutes / 60 * WEEKS_PER_MONTH)
    night_pay = round_won(hourly * Decimal("0.5") * weekly_night_minutes / 60 * WEEKS_PER_MONTH)

    weekly_allowance = 0
    if data.includeWeeklyAllowance and data.payType != "월급":
        holiday_minutes = weekly_holiday_minutes(weekly_minutes, has_absence=False)
        weekly_allowance = round_won(hourly * holiday_minutes / 60 * WEEKS_PER_MONTH)

    gross_pay = round_won(base_pay) + overtime_pay + night_pay + weekly_allowance
    deductions = calculate_deductions(gross_pay, _TAX_OPTIONS[data.taxOption])

    return ManualPayResult(
        grossPay=gross_pay,
        weeklyAllowance=weekly_allowance,
        overtimePay=overtime_pay,
        nightPay=night_pay,
        tax=deductions.total,
        netPay=calculate_net_pay(gross_pay, deductions),
    )
