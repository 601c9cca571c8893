"""
여러 직원 급여를 한 번에 계산.

한 직원의 계산이 실패해도(잘못된 시간, 공제 초과 등) 나머지 직원은 계속 계산하고,
실패한 직원은 failures 에 사유와 함께 모아서 돌려준다.
"""

import logging
from typing import Iterable, Optional

from payroll.calculator import calculate_monthly_salary
from payroll.exceptions import PayrollError
from schemas import BatchFailure, BatchPayrollResult, SalaryCalculationRequest

logger = logging.getLogger(__name__)


def run_batch_payroll(
    requests: Iterable[SalaryCalculationRequest],
    year_month: Optional[str] = None,
) -> BatchPayrollResult:
    results = []
    failures = []

    for req in requests:
        user_id = req.contract.userId
        try:
            result = calculate_monthly_salary(
                req.attendance,
                req.contract,
                req.yearMonth,
                incentive_pay=req.incentivePay,
                recent_monthly_pay=req.recentMonthlyPay,
                mode=req.mode,
            )
        except PayrollError as exc:
            logger.error("급여 계산 실패: %s (%s) - %s", user_id, type(exc).__name__, exc)
            failures.append(
                BatchFailure(
                    userId=user_id,
                    error=type(exc).__name__,
                    message=exc.message,
                    record=exc.record,
                )
            )
            continue
        results.append(result)

    logger.info("일괄 급여 계산 완료: 성공 %d명, 실패 %d명", len(results), len(failures))

    return BatchPayrollResult(
        yearMonth=year_month,
        totalEmployees=len(results),
        totalBasePay=sum(r.basePay for r in results),
        totalAllowances=sum(r.totalAllowances for r in results),
        totalDeductions=sum(r.totalDeductions for r in results),
        totalNetPay=sum(r.netPay for r in results),
        results=results,
        failures=failures,
    )
