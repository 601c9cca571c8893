from datetime import date
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# 근무 기록
# ---------------------------------------------------------------------------

class BreakInterval(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: str  # "HH:MM"
    end: str  # "HH:MM"
    minutes: Optional[int] = Field(None, ge=0)  # 없으면 start~end 길이로 계산


class ShiftInterval(BaseModel):
    model_config = ConfigDict(frozen=True)

    startTime: str  # "HH:MM"
    endTime: str  # "HH:MM", startTime보다 앞이면 자정을 넘긴 근무
    breaks: List[BreakInterval] = []


class AttendanceDay(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: date
    shifts: List[ShiftInterval] = []
    hasAbsence: bool = False
    isHoliday: Optional[bool] = None  # None이면 공휴일 달력으로 판별
    wageIncentive: int = Field(0, ge=0)  # 특별 근무 인센티브 시급


# ---------------------------------------------------------------------------
# 계약 조건
# ---------------------------------------------------------------------------

class Allowances(BaseModel):
    model_config = ConfigDict(frozen=True)

    overtime: bool = False  # 연장근로수당
    night: bool = False  # 야간근로수당
    holiday: bool = False  # 휴일근로수당
    weeklyHoliday: bool = False  # 주휴수당


class AttendanceThresholds(BaseModel):
    """매장 출퇴근 허용시간 (분)"""

    model_config = ConfigDict(frozen=True)

    earlyClockIn: int = 15  # 이 시간 이상 일찍 출근해야 조기출근 인정
    earlyClockOut: int = 5  # 이 시간 이내 조기퇴근은 차감 없음
    overtime: int = 5  # 이 시간 이상 늦게 퇴근해야 초과근무 인정


class ContractTerms(BaseModel):
    model_config = ConfigDict(frozen=True)

    userId: Optional[str] = None
    employeeName: Optional[str] = None

    salaryType: Literal["hourly", "monthly", "annual"] = "hourly"
    hourlyWage: int = Field(0, ge=0)
    monthlyWage: int = Field(0, ge=0)
    annualWage: int = Field(0, ge=0)

    allowances: Allowances = Allowances()

    # 4대보험
    hasPension: bool = False
    hasHealthInsurance: bool = False
    hasEmploymentInsurance: bool = False
    hasWorkCompInsurance: bool = False
    has4Insurance: bool = False

    severancePay: bool = False  # 퇴직금 적용 여부
    startDate: Optional[date] = None  # 근속 시작일

    weeklyHours: Optional[float] = None
    workDays: List[str] = []  # 예: ["월", "화", "수"]
    workStartTime: Optional[str] = None
    workEndTime: Optional[str] = None
    attendanceThresholds: AttendanceThresholds = AttendanceThresholds()


# ---------------------------------------------------------------------------
# 계산 결과
# ---------------------------------------------------------------------------

class ContractInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    weeklyHours: Optional[float]
    isWeeklyHolidayEligible: bool
    has4Insurance: bool
    hasPension: bool
    hasHealthInsurance: bool
    hasEmploymentInsurance: bool
    hasWorkCompInsurance: bool
    isSeveranceEligible: bool


class AttendanceDetail(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: date
    clockIn: str
    clockOut: str
    adjustedClockIn: str
    adjustedClockOut: str
    workHours: float
    nightHours: float
    isHoliday: bool
    wageIncentive: int


class WeeklySummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    weekKey: str  # "YYYY-WW"
    workHours: float
    dailyOvertimeHours: float
    weeklyOvertimeHours: float
    overtimeHours: float
    hasAbsence: bool
    weeklyHolidayHours: float


class SalaryCalculationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    userId: Optional[str]
    employeeName: Optional[str]
    yearMonth: str
    salaryType: str
    mode: Literal["standard", "preview"]

    hourlyWage: int
    totalWorkHours: float
    workDays: int

    # 지급 항목
    basePay: int
    overtimeHours: float
    overtimePay: int
    nightHours: float
    nightPay: int
    holidayHours: float
    holidayPay: int
    weeklyHolidayHours: float
    weeklyHolidayPay: int
    incentivePay: int
    severancePay: int
    totalAllowances: int
    totalPay: int

    # 공제 항목
    nationalPension: int
    healthInsurance: int
    longTermCare: int
    employmentInsurance: int
    incomeTax: int
    totalDeductions: int

    netPay: int

    contractInfo: ContractInfo
    attendanceDetails: List[AttendanceDetail]
    weeklyBreakdown: List[WeeklySummary]
    warnings: List[str]


# ---------------------------------------------------------------------------
# API 입출력
# ---------------------------------------------------------------------------

class SalaryCalculationRequest(BaseModel):
    yearMonth: str = Field(..., description="급여 월 (예: 2025-05)")
    contract: ContractTerms
    attendance: List[AttendanceDay] = []
    incentivePay: int = Field(0, ge=0)
    recentMonthlyPay: List[int] = []  # 직전 최대 2개월 총 지급액 (퇴직금 평균임금용)
    mode: Literal["standard", "preview"] = "standard"


class BatchFailure(BaseModel):
    userId: Optional[str]
    error: str
    message: str
    record: Optional[str] = None


class BatchPayrollResult(BaseModel):
    yearMonth: Optional[str]
    totalEmployees: int
    totalBasePay: int
    totalAllowances: int
    totalDeductions: int
    totalNetPay: int
    results: List[SalaryCalculationResult]
    failures: List[BatchFailure]


class ManualPayInput(BaseModel):
    payType: Literal["시급", "일급", "월급"]
    payAmount: int

    workHour: int
    workMinute: int
    workingDays: List[str]  # 예: ["월", "화", "수"]

    overtimeHour: int
    overtimeMinute: int

    includeWeeklyAllowance: bool
    taxOption: Literal["none", "insurance", "income"]
    nightWork: bool


class ManualPayResult(BaseModel):
    grossPay: int
    weeklyAllowance: int
    overtimePay: int
    nightPay: int
    tax: int
    netPay: int


class WeeklySalaryInput(BaseModel):
    totalHours: float = Field(..., ge=0)  # 주 총 근무시간
    salaryType: Literal["시급", "월급", "연봉", "hourly", "monthly", "annual"]
    salaryAmount: int = Field(..., ge=0)
    hasWeeklyHoliday: bool = True


class WeeklySalaryResult(BaseModel):
    basePay: int
    weeklyHolidayPay: int
    weeklySalary: int
    monthlyEstimate: int
