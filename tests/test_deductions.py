import pytest

from payroll.deductions import Deductions, calculate_deductions, calculate_net_pay, round_won
from payroll.exceptions import NegativeNetPay
from schemas import ContractTerms

ALL_INSURED = ContractTerms(
    hasPension=True,
    hasHealthInsurance=True,
    hasEmploymentInsurance=True,
    hasWorkCompInsurance=True,
    has4Insurance=True,
)


@pytest.mark.parametrize(
    "value,expected",
    [
        (0, 0),
        (0.5, 1),
        (1.49, 1),
        ("826.2", 826),
        ("2.5", 3),
        ("3.5", 4),
    ],
)
def test_round_won_half_up(value, expected):
    assert round_won(value) == expected


def test_all_deductions():
    deductions = calculate_deductions(2_000_000, ALL_INSURED)

    assert deductions.nationalPension == 90000
    assert deductions.healthInsurance == 70900
    assert deductions.longTermCare == 9180
    assert deductions.employmentInsurance == 18000
    assert deductions.incomeTax == 66000
    assert deductions.total == 254080


def test_no_insurance():
    assert calculate_deductions(2_000_000, ContractTerms()) == Deductions()


def test_income_tax_only_with_four_insurances():
    contract = ALL_INSURED.model_copy(update={"has4Insurance": False})
    deductions = calculate_deductions(1_000_000, contract)
    assert deductions.incomeTax == 0
    assert deductions.nationalPension == 45000


def test_long_term_care_needs_health_insurance():
    deductions = calculate_deductions(1_000_000, ContractTerms(hasHealthInsurance=True))
    assert deductions.healthInsurance == 35450
    assert deductions.longTermCare == 4590

    deductions = calculate_deductions(1_000_000, ContractTerms(hasPension=True))
    assert deductions.longTermCare == 0


def test_zero_pay():
    assert calculate_deductions(0, ALL_INSURED).total == 0
    assert calculate_net_pay(0, Deductions()) == 0


def test_net_pay():
    deductions = calculate_deductions(2_000_000, ALL_INSURED)
    assert calculate_net_pay(2_000_000, deductions) == 1_745_920


def test_negative_net_pay():
    with pytest.raises(NegativeNetPay):
        calculate_net_pay(100, Deductions(incomeTax=200))
