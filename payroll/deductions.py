"""
4대보험 + 소득세 공제 (근로자 부담분)

각 항목은 계약서의 보험 플래그로 따로 켜고 끈다.
- 국민연금 4.5%        (hasPension)
- 건강보험 3.545%      (hasHealthInsurance)
- 장기요양보험 0.459%  (건강보험이 있을 때만)
- 고용보험 0.9%        (hasEmploymentInsurance)
- 소득세 3.3%          (has4Insurance: 4대보험 전체 가입일 때만 원천징수)
"""

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from payroll.exceptions import NegativeNetPay
from schemas import ContractTerms

logger = logging.getLogger(__name__)

NATIONAL_PENSION_RATE = Decimal("0.045")
HEALTH_INSURANCE_RATE = Decimal("0.03545")
LONG_TERM_CARE_RATE = Decimal("0.00459")
EMPLOYMENT_INSURANCE_RATE = Decimal("0.009")
INCOME_TAX_RATE = Decimal("0.033")


def round_won(value) -> int:
    """원 단위 반올림 (0.5 → 올림). 금액마다 한 번만 적용"""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class Deductions:
    nationalPension: int = 0
    healthInsurance: int = 0
    longTermCare: int = 0
    employmentInsurance: int = 0
    incomeTax: int = 0

    @property
    def total(self) -> int:
        return (
            self.nationalPension
            + self.healthInsurance
            + self.longTermCare
            + self.employmentInsurance
            + self.incomeTax
        )


def calculate_deductions(total_pay: int, contract: ContractTerms) -> Deductions:
    gross = Decimal(total_pay)

    pension = round_won(gross * NATIONAL_PENSION_RATE) if contract.hasPension else 0
    health = round_won(gross * HEALTH_INSURANCE_RATE) if contract.hasHealthInsurance else 0
    # 장기요양보험은 건강보험에 붙어서만 부과됨
    long_term_care = round_won(gross * LONG_TERM_CARE_RATE) if contract.hasHealthInsurance else 0
    employment = round_won(gross * EMPLOYMENT_INSURANCE_RATE) if contract.hasEmploymentInsurance else 0
    income_tax = round_won(gross * INCOME_TAX_RATE) if contract.has4Insurance else 0

    return Deductions(
        nationalPension=pension,
        healthInsurance=health,
        longTermCare=long_term_care,
        employmentInsurance=employment,
        incomeTax=income_tax,
    )


def calculate_net_pay(total_pay: int, deductions: Deductions) -> int:
    net = total_pay - deductions.total
    if net < 0:
        logger.error("공제액(%d)이 총 지급액(%d)을 초과합니다", deductions.total, total_pay)
        raise NegativeNetPay(f"공제액({deductions.total})이 총 지급액({total_pay})을 초과합니다")
    return net
