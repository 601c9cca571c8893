"""
Supabase 에 저장된 출퇴근 기록, 계약서를 급여 계산용 모델로 바꿔주는 데이터 접근 계층.
급여 계산 자체는 저장소를 모르고, 여기서 만든 값만 받는다.
"""

import calendar
import json
import logging
from collections import defaultdict
from datetime import date
from typing import List, Optional, Tuple

from payroll import config
from payroll.calculator import DEFAULT_MINIMUM_WAGE, parse_year_month
from payroll.supabase_client import get_supabase
from schemas import AttendanceDay, BreakInterval, ContractTerms, ShiftInterval

logger = logging.getLogger(__name__)

_SALARY_TYPES = {
    "시급": "hourly",
    "hourly": "hourly",
    "월급": "monthly",
    "monthly": "monthly",
    "연봉": "annual",
    "annual": "annual",
}


class ContractNotFound(LookupError):
    pass


def parse_json_field(row: dict, key: str) -> dict:
    """row[key] 가 JSON 문자열일 수도 있어서 안전하게 dict 로 변환"""
    raw = row.get(key) or {}
    if isinstance(raw, str):
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("%s 필드 JSON 파싱 실패: %r", key, raw)
            return {}
    return raw


#step1. 출퇴근 기록 → AttendanceDay

def attendance_from_rows(rows: List[dict]) -> List[AttendanceDay]:
    by_date = defaultdict(list)
    for row in rows:
        by_date[row["date"]].append(row)

    days = []
    for day_str, day_rows in sorted(by_date.items()):
        shifts = []
        has_absence = False
        wage_incentive = 0
        for row in day_rows:
            if row.get("status") == "absent":
                has_absence = True
                continue

            clock_in = row.get("clockIn") or row.get("checkIn")
            clock_out = row.get("clockOut") or row.get("checkOut")
            if not clock_in:
                continue
            if not clock_out:
                # 퇴근 전 기록은 확정 급여에 넣지 않음
                logger.info("퇴근 기록 없음 - 계산에서 제외: %s %s", row.get("userId"), day_str)
                continue

            breaks = [
                BreakInterval(start=b["start"], end=b["end"], minutes=b.get("minutes"))
                for b in row.get("breaks") or []
            ]
            shifts.append(ShiftInterval(startTime=clock_in, endTime=clock_out, breaks=breaks))
            wage_incentive = max(wage_incentive, int(row.get("wageIncentive") or 0))

        days.append(
            AttendanceDay(
                date=date.fromisoformat(day_str),
                shifts=shifts,
                hasAbsence=has_absence and not shifts,
                wageIncentive=wage_incentive,
            )
        )
    return days


#step2. 계약서 → ContractTerms

def contract_from_row(row: dict) -> ContractTerms:
    salary_type = _SALARY_TYPES.get(row.get("salaryType") or row.get("wageType") or "시급", "hourly")
    amount = int(float(row.get("salaryAmount") or row.get("wageAmount") or 0))

    wages = {"hourlyWage": 0, "monthlyWage": 0, "annualWage": 0}
    if salary_type == "hourly":
        if not amount:
            logger.warning("계약서 시급 없음 - 최저시급(%d원) 적용: %s", DEFAULT_MINIMUM_WAGE, row.get("userId"))
            amount = DEFAULT_MINIMUM_WAGE
        wages["hourlyWage"] = amount
    elif salary_type == "monthly":
        wages["monthlyWage"] = amount
    else:
        wages["annualWage"] = amount

    allowances = parse_json_field(row, "allowances")
    insurance = parse_json_field(row, "insurance")
    if insurance.get("type") == "all":
        insurance = {"pension": True, "health": True, "employment": True, "workComp": True}

    has_pension = bool(insurance.get("pension"))
    has_health = bool(insurance.get("health"))
    has_employment = bool(insurance.get("employment"))
    has_work_comp = bool(insurance.get("workComp"))

    work_days = row.get("workDays") or []
    if isinstance(work_days, str):
        work_days = [d.strip() for d in work_days.split(",") if d.strip()]

    start_date = row.get("startDate")

    return ContractTerms(
        userId=row.get("userId"),
        employeeName=row.get("employeeName"),
        salaryType=salary_type,
        **wages,
        allowances={
            "overtime": bool(allowances.get("overtime")),
            "night": bool(allowances.get("night")),
            "holiday": bool(allowances.get("holiday")),
            "weeklyHoliday": bool(allowances.get("weeklyHoliday")),
        },
        hasPension=has_pension,
        hasHealthInsurance=has_health,
        hasEmploymentInsurance=has_employment,
        hasWorkCompInsurance=has_work_comp,
        has4Insurance=has_pension and has_health and has_employment and has_work_comp,
        severancePay=bool(row.get("severancePay")),
        startDate=date.fromisoformat(start_date[:10]) if start_date else None,
        weeklyHours=row.get("weeklyHours"),
        workDays=work_days,
        workStartTime=row.get("workStartTime"),
        workEndTime=row.get("workEndTime"),
        attendanceThresholds=parse_json_field(row, "attendanceThresholds") or {},
    )


#step3. Supabase 쿼리함수

def fetch_attendance_rows(user_id: str, year_month: str) -> List[dict]:
    year, month = parse_year_month(year_month)
    start = date(year, month, 1).isoformat()
    end = date(year, month, calendar.monthrange(year, month)[1]).isoformat()

    response = (
        get_supabase()
        .table(config.ATTENDANCE_TABLE)
        .select("*")
        .eq("userId", user_id)
        .gte("date", start)
        .lte("date", end)
        .execute()
    )
    return response.data or []


def fetch_contract_row(user_id: str) -> Optional[dict]:
    response = (
        get_supabase()
        .table(config.CONTRACTS_TABLE)
        .select("*")
        .eq("userId", user_id)
        .order("startDate", desc=True)
        .limit(1)
        .execute()
    )
    return response.data[0] if response.data else None


def load_employee_month(user_id: str, year_month: str) -> Tuple[ContractTerms, List[AttendanceDay]]:
    contract_row = fetch_contract_row(user_id)
    if contract_row is None:
        raise ContractNotFound(f"직원의 계약서를 찾을 수 없습니다: {user_id}")
    rows = fetch_attendance_rows(user_id, year_month)
    return contract_from_row(contract_row), attendance_from_rows(rows)
