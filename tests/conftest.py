from datetime import date

import pytest

from schemas import AttendanceDay, BreakInterval, ContractTerms, ShiftInterval


def make_day(day: str, start: str, end: str, breaks=(), **kwargs) -> AttendanceDay:
    return AttendanceDay(
        date=date.fromisoformat(day),
        shifts=[
            ShiftInterval(
                startTime=start,
                endTime=end,
                breaks=[BreakInterval(start=s, end=e) for s, e in breaks],
            )
        ],
        **kwargs,
    )


@pytest.fixture
def hourly_contract():
    return ContractTerms(
        userId="emp-1",
        employeeName="김알바",
        salaryType="hourly",
        hourlyWage=20000,
        allowances={"overtime": True, "night": True, "holiday": True, "weeklyHoliday": True},
    )


@pytest.fixture
def insured_contract(hourly_contract):
    return hourly_contract.model_copy(
        update={
            "hasPension": True,
            "hasHealthInsurance": True,
            "hasEmploymentInsurance": True,
            "hasWorkCompInsurance": True,
            "has4Insurance": True,
        }
    )
