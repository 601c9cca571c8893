import calendar
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Sequence

from payroll.deductions import Deductions, calculate_deductions, calculate_net_pay, round_won
from payroll.exceptions import EmptyShift, InvalidPayPeriod, InvalidTimeFormat
from payroll.holidays import is_public_holiday
from payroll.hours import adjust_clock_times, measure_shift
from payroll.time_utils import MINUTES_PER_HOUR, format_hours_and_minutes, minutes_to_hours
from schemas import (
    AttendanceDay,
    AttendanceDetail,
    ContractInfo,
    ContractTerms,
    SalaryCalculationResult,
    WeeklySummary,
)

logger = logging.getLogger(__name__)

DEFAULT_MINIMUM_WAGE = 10030  # 2025년 기준

MINIMUM_WAGE_TABLE = {
    2026: 10_320,
    2025: 10_030,
    2024: 9_860,
    2023: 9_620,
}

# 월급제 시급 환산 기준 (주 40시간 + 주휴 8시간) × 52주 ÷ 12개월 ≈ 209시간
MONTHLY_STANDARD_HOURS = 209

DAILY_OVERTIME_THRESHOLD = 8 * MINUTES_PER_HOUR
WEEKLY_OVERTIME_THRESHOLD = 40 * MINUTES_PER_HOUR
DAILY_LEGAL_LIMIT = 12 * MINUTES_PER_HOUR  # 기본 8 + 연장 4
WEEKLY_LEGAL_LIMIT = 52 * MINUTES_PER_HOUR  # 기본 40 + 연장 12

WEEKLY_HOLIDAY_MIN_MINUTES = 15 * MINUTES_PER_HOUR
WEEKLY_HOLIDAY_CAP_MINUTES = 8 * MINUTES_PER_HOUR

SEVERANCE_MIN_TENURE_DAYS = 365
SEVERANCE_MIN_WEEKLY_MINUTES = 15 * MINUTES_PER_HOUR

OVERTIME_RATE = Decimal("1.5")
NIGHT_RATE = Decimal("0.5")  # 기본급에 이미 포함된 1배 위에 더하는 가산분
HOLIDAY_RATE = Decimal("1.5")

# date.weekday() 순서
DAY_NAMES = ["월", "화", "수", "목", "금", "토", "일"]


#step1. 급여 월, 시급 환산

def parse_year_month(year_month: str) -> tuple[int, int]:
    try:
        year_str, month_str = year_month.split("-")
        year, month = int(year_str), int(month_str)
    except (AttributeError, ValueError):
        raise InvalidPayPeriod(f"연월 형식이 올바르지 않습니다 (YYYY-MM): {year_month!r}")
    if not 1 <= month <= 12:
        raise InvalidPayPeriod(f"연월 형식이 올바르지 않습니다 (YYYY-MM): {year_month!r}")
    return year, month


def resolve_monthly_wage(contract: ContractTerms) -> int:
    if contract.salaryType == "annual":
        return round_won(Decimal(contract.annualWage) / 12)
    return contract.monthlyWage


def resolve_hourly_wage(contract: ContractTerms) -> int:
    """
    시급제는 계약 시급 그대로, 월급/연봉제는 209시간 기준으로 환산
    """
    if contract.salaryType == "hourly" or contract.hourlyWage:
        return contract.hourlyWage
    return round_won(Decimal(resolve_monthly_wage(contract)) / MONTHLY_STANDARD_HOURS)


#step2. 하루 단위 근무 집계

"""코드 요약:
→ AttendanceDay 하나를 받아서 출퇴근 허용시간 조정 → 근무 한 건씩 measure_shift
→ 하루 실근무/야간 분, 공휴일 여부, 인센티브, 화면용 상세(AttendanceDetail)를 묶어서 반환
잘못된 시간 문자열이나 0분 근무는 해당 날짜를 record로 달아서 그대로 올려보냄"""

@dataclass
class DayRecord:
    date: date
    work_minutes: int = 0
    night_minutes: int = 0
    is_holiday: bool = False
    has_absence: bool = False
    wage_incentive: int = 0
    details: List[AttendanceDetail] = field(default_factory=list)


def summarize_day(day: AttendanceDay, contract: ContractTerms) -> DayRecord:
    is_holiday = day.isHoliday if day.isHoliday is not None else is_public_holiday(day.date)
    record = DayRecord(
        date=day.date,
        is_holiday=is_holiday,
        has_absence=day.hasAbsence,
        wage_incentive=day.wageIncentive,
    )

    try:
        for shift in day.shifts:
            adjusted_in, adjusted_out = shift.startTime, shift.endTime
            # 분할 근무는 계약 근무시간과 비교할 기준이 없어서 조정하지 않음
            if len(day.shifts) == 1:
                adjusted_in, adjusted_out = adjust_clock_times(
                    shift.startTime,
                    shift.endTime,
                    contract.workStartTime,
                    contract.workEndTime,
                    contract.attendanceThresholds,
                )
            hours = measure_shift(shift.model_copy(update={"startTime": adjusted_in, "endTime": adjusted_out}))

            record.work_minutes += hours.work_minutes
            record.night_minutes += hours.night_minutes
            record.details.append(
                AttendanceDetail(
                    date=day.date,
                    clockIn=shift.startTime,
                    clockOut=shift.endTime,
                    adjustedClockIn=adjusted_in,
                    adjustedClockOut=adjusted_out,
                    workHours=minutes_to_hours(hours.work_minutes),
                    nightHours=minutes_to_hours(hours.night_minutes),
                    isHoliday=is_holiday,
                    wageIncentive=day.wageIncentive,
                )
            )
    except (InvalidTimeFormat, EmptyShift) as exc:
        exc.record = day.date.isoformat()
        raise

    return record


#step3. 주 단위 그룹화

"""코드 요약:
하루 단위 기록들을 "YYYY-WW"(월요일 시작 주차) 기준으로 묶어줌"""

def week_key(day: date) -> str:
    return day.strftime("%Y-%W")


def group_days_by_week(records: Iterable[DayRecord]) -> Dict[str, List[DayRecord]]:
    weekly = defaultdict(list)
    for record in records:
        weekly[week_key(record.date)].append(record)
    return dict(sorted(weekly.items()))


def scheduled_dates(year: int, month: int, work_days: Sequence[str]) -> List[date]:
    """계약서 근무요일(["월", "수", ...])에 해당하는 그 달의 날짜들"""
    weekday_numbers = {DAY_NAMES.index(d.strip()) for d in work_days if d.strip() in DAY_NAMES}
    last_day = calendar.monthrange(year, month)[1]
    return [
        date(year, month, d)
        for d in range(1, last_day + 1)
        if date(year, month, d).weekday() in weekday_numbers
    ]


#step4. 연장근로 (일 8시간 / 주 40시간)

"""코드 요약:
일별 연장(8시간 초과분 합계)과 주별 연장(40시간 초과분) 중 큰 값만 지급
둘을 더하면 같은 시간을 두 번 지급하게 됨 (예: 하루 10시간 × 5일 → 10시간, 20시간 아님)"""

@dataclass(frozen=True)
class OvertimeResolution:
    daily_minutes: int
    weekly_minutes: int

    @property
    def payable_minutes(self) -> int:
        return max(self.daily_minutes, self.weekly_minutes)


def resolve_overtime(daily_work_minutes: Iterable[int]) -> OvertimeResolution:
    minutes = list(daily_work_minutes)
    daily_total = sum(max(m - DAILY_OVERTIME_THRESHOLD, 0) for m in minutes)
    weekly = max(sum(minutes) - WEEKLY_OVERTIME_THRESHOLD, 0)
    return OvertimeResolution(daily_minutes=daily_total, weekly_minutes=weekly)


#step5. 주휴수당 시간

"""코드 요약:
주 15시간 이상 + 그 주에 결근 없음 → 주 근무시간 ÷ 5 (최대 8시간)
결근이 하루라도 있으면 그 주 주휴수당은 전부 없음"""

def is_weekly_holiday_eligible(contract: ContractTerms) -> bool:
    """계약 주 소정근로시간 15시간 이상이거나 계약서에서 주휴수당을 켠 경우"""
    contract_minutes = (contract.weeklyHours or 0) * MINUTES_PER_HOUR
    return contract_minutes >= WEEKLY_HOLIDAY_MIN_MINUTES or contract.allowances.weeklyHoliday


def weekly_holiday_minutes(week_work_minutes: int, has_absence: bool) -> Decimal:
    if has_absence or week_work_minutes < WEEKLY_HOLIDAY_MIN_MINUTES:
        return Decimal(0)
    return min(Decimal(week_work_minutes) / 5, Decimal(WEEKLY_HOLIDAY_CAP_MINUTES))


#step6. 퇴직금

"""코드 요약:
퇴직금 = 1일 평균임금 × 30일 × (근속일수 / 365)
1일 평균임금은 최근 3개월 임금 총액 ÷ 그 기간의 달력 일수
→ 이번 달 총 지급액(퇴직금 제외) + 호출자가 넘겨준 직전 최대 2개월 지급액
근속일수는 급여 월의 말일 기준 (같은 입력이면 언제 계산해도 같은 값)"""

def is_severance_eligible(contract: ContractTerms, period_end: date, avg_weekly_minutes: float) -> bool:
    if not contract.severancePay or contract.startDate is None:
        return False
    tenure_days = (period_end - contract.startDate).days
    return tenure_days >= SEVERANCE_MIN_TENURE_DAYS and avg_weekly_minutes >= SEVERANCE_MIN_WEEKLY_MINUTES


def _previous_months(year: int, month: int, count: int) -> List[tuple[int, int]]:
    months = []
    for _ in range(count):
        year, month = (year - 1, 12) if month == 1 else (year, month - 1)
        months.append((year, month))
    return months


def calculate_severance(
    contract: ContractTerms,
    year: int,
    month: int,
    current_month_pay: int,
    recent_monthly_pay: Sequence[int] = (),
) -> int:
    period_end = date(year, month, calendar.monthrange(year, month)[1])
    tenure_days = (period_end - contract.startDate).days

    previous = list(recent_monthly_pay)[-2:]
    window_pay = current_month_pay + sum(previous)
    window_days = period_end.day + sum(
        calendar.monthrange(y, m)[1] for y, m in _previous_months(year, month, len(previous))
    )

    avg_daily_wage = Decimal(window_pay) / window_days
    severance = round_won(avg_daily_wage * 30 * tenure_days / 365)
    logger.info("퇴직금 계산: 근속 %d일, 1일 평균임금 %.2f원, 퇴직금 %d원", tenure_days, avg_daily_wage, severance)
    return severance


#step7. 수당별 금액

def pay_for_minutes(hourly_wage: int, minutes, rate: Decimal = Decimal(1)) -> int:
    """시급 × 배율 × 시간. 반올림은 여기서 한 번만"""
    return round_won(Decimal(hourly_wage) * rate * Decimal(minutes) / MINUTES_PER_HOUR)


def calculate_base_pay(contract: ContractTerms, hourly_wage: int, work_minutes: int,
                       worked_days: int, contracted_days: int) -> int:
    if contract.salaryType == "hourly":
        return pay_for_minutes(hourly_wage, work_minutes)

    # 월급/연봉제: 계약 근무일 대비 실제 근무일로 일할 계산 (초과 근무일은 고정급 그대로)
    monthly_wage = resolve_monthly_wage(contract)
    if contracted_days <= 0 or worked_days >= contracted_days:
        return monthly_wage
    return round_won(Decimal(monthly_wage) * worked_days / contracted_days)


#step8. 최종 계산 함수(마스터 함수) - 한달치 급여

"""코드 요약:
→ 한 달치 AttendanceDay 와 계약 조건(ContractTerms)을 받아서:

하루 단위 집계 (summarize_day) → 주 단위 그룹화
각 주별로 연장근로(일/주 중 큰 값), 주휴수당 시간, 법정 한도 경고
기본급 + 수당(계약서에서 켠 것만) → 총 지급액 → 공제 → 실지급액
mode="preview"면 주휴수당, 퇴직금, 공제 없이 지금까지 일한 만큼만 가볍게 계산
입력은 건드리지 않고, 같은 입력이면 항상 같은 결과"""

def calculate_monthly_salary(
    attendance: Sequence[AttendanceDay],
    contract: ContractTerms,
    year_month: str,
    *,
    incentive_pay: int = 0,
    recent_monthly_pay: Sequence[int] = (),
    mode: str = "standard",
) -> SalaryCalculationResult:
    if mode not in ("standard", "preview"):
        raise ValueError(f"Invalid mode: {mode}")

    year, month = parse_year_month(year_month)
    period_end = date(year, month, calendar.monthrange(year, month)[1])
    hourly_wage = resolve_hourly_wage(contract)
    warnings: List[str] = []

    logger.info("급여 계산 시작: %s %s (%s)", contract.userId or contract.employeeName, year_month, mode)

    # 하루 단위 집계 (같은 날짜 기록이 여러 개면 합침)
    records: Dict[date, DayRecord] = {}
    for day in sorted(attendance, key=lambda d: d.date):
        if (day.date.year, day.date.month) != (year, month):
            raise InvalidPayPeriod(f"{year_month} 급여 월 밖의 근무 기록입니다", record=day.date.isoformat())

        summary = summarize_day(day, contract)
        existing = records.get(day.date)
        if existing is None:
            records[day.date] = summary
            continue
        existing.work_minutes += summary.work_minutes
        existing.night_minutes += summary.night_minutes
        existing.is_holiday = existing.is_holiday or summary.is_holiday
        existing.has_absence = existing.has_absence or summary.has_absence
        existing.wage_incentive = max(existing.wage_incentive, summary.wage_incentive)
        existing.details.extend(summary.details)

    # 계약 근무일인데 기록이 없으면 결근 (공휴일, 입사일 이전 제외)
    contracted = scheduled_dates(year, month, contract.workDays)
    for scheduled in contracted:
        if contract.startDate is not None and scheduled < contract.startDate:
            continue
        if scheduled not in records and not is_public_holiday(scheduled):
            logger.info("결근 감지: %s (%s)", scheduled.isoformat(), week_key(scheduled))
            records[scheduled] = DayRecord(date=scheduled, has_absence=True)

    total_work_minutes = 0
    total_night_minutes = 0
    total_holiday_minutes = 0
    total_overtime_minutes = 0
    total_weekly_holiday_minutes = Decimal(0)
    incentive_amount = Decimal(incentive_pay)
    worked_days = 0
    details: List[AttendanceDetail] = []
    weekly_breakdown: List[WeeklySummary] = []

    for key, week_records in group_days_by_week(records.values()).items():
        week_minutes = sum(r.work_minutes for r in week_records)
        week_absence = any(r.has_absence for r in week_records)

        for r in week_records:
            if r.work_minutes > DAILY_LEGAL_LIMIT:
                message = (
                    f"{r.date.isoformat()}: 1일 근로시간 {format_hours_and_minutes(r.work_minutes / 60)}이 "
                    f"법정 한도 12시간을 초과했습니다"
                )
                logger.warning(message)
                warnings.append(message)
            if r.work_minutes > 0:
                worked_days += 1
            total_night_minutes += r.night_minutes
            if r.is_holiday:
                total_holiday_minutes += r.work_minutes
            incentive_amount += Decimal(r.wage_incentive) * r.work_minutes / MINUTES_PER_HOUR
            details.extend(r.details)

        if week_minutes > WEEKLY_LEGAL_LIMIT:
            message = (
                f"{key}: 주 근로시간 {format_hours_and_minutes(week_minutes / 60)}이 "
                f"법정 한도 52시간을 초과했습니다"
            )
            logger.warning(message)
            warnings.append(message)

        overtime = resolve_overtime(r.work_minutes for r in week_records)
        holiday_minutes = Decimal(0) if mode == "preview" else weekly_holiday_minutes(week_minutes, week_absence)
        if week_absence and week_minutes >= WEEKLY_HOLIDAY_MIN_MINUTES:
            logger.info("%s: 결근으로 인해 주휴수당 제외 (근무시간: %s)", key, format_hours_and_minutes(week_minutes / 60))
        logger.debug(
            "%s: 근무 %d분, 일별 연장 %d분, 주별 연장 %d분, 주휴 %s분",
            key, week_minutes, overtime.daily_minutes, overtime.weekly_minutes, holiday_minutes,
        )

        total_work_minutes += week_minutes
        total_overtime_minutes += overtime.payable_minutes
        total_weekly_holiday_minutes += holiday_minutes

        weekly_breakdown.append(
            WeeklySummary(
                weekKey=key,
                workHours=minutes_to_hours(week_minutes),
                dailyOvertimeHours=minutes_to_hours(overtime.daily_minutes),
                weeklyOvertimeHours=minutes_to_hours(overtime.weekly_minutes),
                overtimeHours=minutes_to_hours(overtime.payable_minutes),
                hasAbsence=week_absence,
                weeklyHolidayHours=minutes_to_hours(holiday_minutes),
            )
        )

    allowances = contract.allowances
    base_pay = calculate_base_pay(contract, hourly_wage, total_work_minutes, worked_days, len(contracted))
    overtime_pay = pay_for_minutes(hourly_wage, total_overtime_minutes, OVERTIME_RATE) if allowances.overtime else 0
    night_pay = pay_for_minutes(hourly_wage, total_night_minutes, NIGHT_RATE) if allowances.night else 0
    holiday_pay = pay_for_minutes(hourly_wage, total_holiday_minutes, HOLIDAY_RATE) if allowances.holiday else 0
    weekly_holiday_eligible = is_weekly_holiday_eligible(contract)
    # 월급/연봉은 209시간 환산에 주휴시간이 이미 들어 있음
    weekly_holiday_pay = (
        pay_for_minutes(hourly_wage, total_weekly_holiday_minutes)
        if weekly_holiday_eligible and contract.salaryType == "hourly"
        else 0
    )
    incentive = round_won(incentive_amount)

    worked_weeks = sum(1 for w in weekly_breakdown if w.workHours > 0)
    avg_weekly_minutes = total_work_minutes / worked_weeks if worked_weeks else 0
    severance_eligible = is_severance_eligible(contract, period_end, avg_weekly_minutes)

    pay_before_severance = base_pay + overtime_pay + night_pay + holiday_pay + weekly_holiday_pay + incentive
    severance = 0
    if severance_eligible and mode == "standard":
        severance = calculate_severance(contract, year, month, pay_before_severance, recent_monthly_pay)

    total_allowances = overtime_pay + night_pay + holiday_pay + weekly_holiday_pay + incentive + severance
    total_pay = base_pay + total_allowances

    deductions = Deductions() if mode == "preview" else calculate_deductions(total_pay, contract)
    net_pay = calculate_net_pay(total_pay, deductions)

    minimum_wage = MINIMUM_WAGE_TABLE.get(year)
    if minimum_wage and 0 < hourly_wage < minimum_wage:
        message = f"시급 {hourly_wage:,}원이 {year}년 최저시급 {minimum_wage:,}원보다 낮습니다"
        logger.warning(message)
        warnings.append(message)

    result = SalaryCalculationResult(
        userId=contract.userId,
        employeeName=contract.employeeName,
        yearMonth=year_month,
        salaryType=contract.salaryType,
        mode=mode,
        hourlyWage=hourly_wage,
        totalWorkHours=minutes_to_hours(total_work_minutes),
        workDays=worked_days,
        basePay=base_pay,
        overtimeHours=minutes_to_hours(total_overtime_minutes),
        overtimePay=overtime_pay,
        nightHours=minutes_to_hours(total_night_minutes),
        nightPay=night_pay,
        holidayHours=minutes_to_hours(total_holiday_minutes),
        holidayPay=holiday_pay,
        weeklyHolidayHours=minutes_to_hours(total_weekly_holiday_minutes),
        weeklyHolidayPay=weekly_holiday_pay,
        incentivePay=incentive,
        severancePay=severance,
        totalAllowances=total_allowances,
        totalPay=total_pay,
        nationalPension=deductions.nationalPension,
        healthInsurance=deductions.healthInsurance,
        longTermCare=deductions.longTermCare,
        employmentInsurance=deductions.employmentInsurance,
        incomeTax=deductions.incomeTax,
        totalDeductions=deductions.total,
        netPay=net_pay,
        contractInfo=ContractInfo(
            weeklyHours=contract.weeklyHours,
            isWeeklyHolidayEligible=weekly_holiday_eligible,
            has4Insurance=contract.has4Insurance,
            hasPension=contract.hasPension,
            hasHealthInsurance=contract.hasHealthInsurance,
            hasEmploymentInsurance=contract.hasEmploymentInsurance,
            hasWorkCompInsurance=contract.hasWorkCompInsurance,
            isSeveranceEligible=severance_eligible,
        ),
        attendanceDetails=details,
        weeklyBreakdown=weekly_breakdown,
        warnings=warnings,
    )

    logger.info("급여 계산 완료: 총 지급액 %d원, 공제 %d원, 실지급액 %d원", total_pay, deductions.total, net_pay)
    return result
