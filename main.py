import logging
from typing import List, Literal

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from payroll import config
from payroll.batch import run_batch_payroll
from payroll.calculator import calculate_monthly_salary
from payroll.exceptions import PayrollError
from payroll.manual_calculator import calculate_manual_pay, calculate_weekly_salary
from payroll.repository import ContractNotFound, load_employee_month
from schemas import (
    BatchPayrollResult,
    ManualPayInput,
    ManualPayResult,
    SalaryCalculationRequest,
    SalaryCalculationResult,
    WeeklySalaryInput,
    WeeklySalaryResult,
)

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI()

# 🔸 CORS 설정 (CORS_ORIGINS 환경변수, 기본은 모든 origin 허용)
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# 급여 계산 오류 → 422 (어떤 기록이 문제인지 같이 내려줌)
@app.exception_handler(PayrollError)
def payroll_error_handler(request: Request, exc: PayrollError):
    logger.warning("급여 계산 오류 %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=422,
        content={"error": type(exc).__name__, "message": exc.message, "record": exc.record},
    )


# 기본 루트 라우터
@app.get("/")
def root():
    return {"message": "Hello, FastAPI!"}


# 급여 계산 API (근무 기록 + 계약 조건을 직접 전달)
@app.post("/salary/calculate", response_model=SalaryCalculationResult)
def calculate(req: SalaryCalculationRequest):
    return calculate_monthly_salary(
        req.attendance,
        req.contract,
        req.yearMonth,
        incentive_pay=req.incentivePay,
        recent_monthly_pay=req.recentMonthlyPay,
        mode=req.mode,
    )


# 여러 직원 일괄 계산 (실패한 직원은 failures 로)
@app.post("/salary/batch", response_model=BatchPayrollResult)
def calculate_batch(requests: List[SalaryCalculationRequest], yearMonth: str = Query(None)):
    return run_batch_payroll(requests, year_month=yearMonth)


# 급여 계산 API (Supabase 에서 계약서, 출퇴근 기록 조회 후 계산)
@app.get("/salary/{user_id}/{year_month}", response_model=SalaryCalculationResult)
def calculate_stored(
    user_id: str,
    year_month: str,
    mode: Literal["standard", "preview"] = Query("standard", description="계산 모드: standard 또는 preview"),
):
    """
    저장된 계약서와 해당 월 출퇴근 기록으로 급여 계산
    """
    try:
        contract, attendance = load_employee_month(user_id, year_month)
    except ContractNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    return calculate_monthly_salary(attendance, contract, year_month, mode=mode)


# 급여 계산 API (수동 계산 - POST 방식)
@app.post("/manual-calculate", response_model=ManualPayResult)
def manual_calculate(input: ManualPayInput):
    """
    사용자가 직접 입력한 정보에 기반한 수동 급여 계산 API
    """
    return calculate_manual_pay(input)


# 주급 계산 API (주 근무시간 + 급여 유형 → 주급, 월 예상액)
@app.post("/weekly-calculate", response_model=WeeklySalaryResult)
def weekly_calculate(input: WeeklySalaryInput):
    return calculate_weekly_salary(
        input.totalHours,
        input.salaryType,
        input.salaryAmount,
        has_weekly_holiday=input.hasWeeklyHoliday,
    )
