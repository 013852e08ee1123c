"""Loan inputs: rate periods, overpayment rules, rate changes, fees."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum


class RepaymentModel(Enum):
    EQUAL_INSTALLMENTS = "equal_installments"
    DECREASING_INSTALLMENTS = "decreasing_installments"


class Recurrence(Enum):
    ONE_TIME = "one_time"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUAL = "annual"


class OverpaymentEffect(Enum):
    REDUCE_TERM = "reduce_term"        # Same payment, shorter loan
    REDUCE_PAYMENT = "reduce_payment"  # Same term, smaller payment


class FeeType(Enum):
    FIXED = "fixed"
    PERCENTAGE = "percentage"


@dataclass(frozen=True)
class RatePeriod:
    start_month: int
    annual_rate: Decimal  # Percent, e.g. 4.5 for 4.5%


@dataclass(frozen=True)
class OverpaymentRule:
    """An extra payment plan.

    The window is either given in loan months or as calendar dates, which are
    resolved against the loan start date. ``end_month``/``end_date`` are
    optional; an open window runs until the loan is paid off.
    """
    amount: Decimal
    recurrence: Recurrence = Recurrence.ONE_TIME
    start_month: int | None = None
    end_month: int | None = None
    start_date: date | None = None
    end_date: date | None = None
    effect: OverpaymentEffect = OverpaymentEffect.REDUCE_TERM


@dataclass(frozen=True)
class OneTimeOverpayment:
    amount: Decimal
    month: int
    effect: OverpaymentEffect = OverpaymentEffect.REDUCE_TERM


@dataclass(frozen=True)
class RateChange:
    month: int
    new_annual_rate: Decimal
    remaining_term_years: Decimal | None = None  # Inferred from the schedule when None


@dataclass(frozen=True)
class FeeModel:
    """Loan costs on top of interest.

    Percentage fees are in percent: the origination fee applies to the
    principal, recurring fees apply to the balance and are spread over 12 months.
    """
    origination_fee: Decimal = Decimal("0")
    origination_fee_type: FeeType = FeeType.FIXED
    loan_insurance: Decimal = Decimal("0")
    loan_insurance_type: FeeType = FeeType.FIXED
    administrative_fees: Decimal = Decimal("0")
    administrative_fees_type: FeeType = FeeType.FIXED


@dataclass(frozen=True)
class LoanParameters:
    principal: Decimal
    rate_periods: tuple[RatePeriod, ...] = field(default_factory=tuple)
    term_years: int = 30
    repayment_model: RepaymentModel = RepaymentModel.EQUAL_INSTALLMENTS
    fee_model: FeeModel | None = None
    start_date: date | None = None  # Date of the first payment

    @property
    def term_months(self) -> int:
        return self.term_years * 12
