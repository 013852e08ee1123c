"""Canonical test fixtures used across all engine tests.

Fixture: $250K loan, 4.5% fixed, 30yr, equal installments.
"""

import pytest
from datetime import date
from decimal import Decimal

from loan_engine.engine.schedule import generate_schedule
from loan_engine.models.loan import FeeModel, FeeType, LoanParameters, RatePeriod


@pytest.fixture
def standard_loan() -> LoanParameters:
    """$250K at 4.5% for 30 years."""
    return LoanParameters(
        principal=Decimal("250000"),
        rate_periods=(RatePeriod(1, Decimal("4.5")),),
        term_years=30,
    )


@pytest.fixture
def standard_schedule(standard_loan):
    return generate_schedule(standard_loan)


@pytest.fixture
def dated_loan() -> LoanParameters:
    """$100K at 6% for 10 years, first payment 31 Jan 2025."""
    return LoanParameters(
        principal=Decimal("100000"),
        rate_periods=(RatePeriod(1, Decimal("6")),),
        term_years=10,
        start_date=date(2025, 1, 31),
    )


@pytest.fixture
def variable_rate_loan() -> LoanParameters:
    """$200K, 3% for five years then 5.5%, 25 years."""
    return LoanParameters(
        principal=Decimal("200000"),
        rate_periods=(RatePeriod(1, Decimal("3")), RatePeriod(61, Decimal("5.5"))),
        term_years=25,
    )


@pytest.fixture
def rate_jump_loan() -> LoanParameters:
    """$100K at 1% for a year, then 12%. A fixed payment cannot keep up."""
    return LoanParameters(
        principal=Decimal("100000"),
        rate_periods=(RatePeriod(1, Decimal("1")), RatePeriod(13, Decimal("12"))),
        term_years=30,
    )


@pytest.fixture
def loan_with_fees() -> LoanParameters:
    """$250K at 4.5%/30yr with 1% origination, 0.2% insurance, $10/mo admin."""
    return LoanParameters(
        principal=Decimal("250000"),
        rate_periods=(RatePeriod(1, Decimal("4.5")),),
        term_years=30,
        fee_model=FeeModel(
            origination_fee=Decimal("1"),
            origination_fee_type=FeeType.PERCENTAGE,
            loan_insurance=Decimal("0.2"),
            loan_insurance_type=FeeType.PERCENTAGE,
            administrative_fees=Decimal("10"),
            administrative_fees_type=FeeType.FIXED,
        ),
    )
