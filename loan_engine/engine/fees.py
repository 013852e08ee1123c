"""Loan fees and APR approximation using scipy.

Pure functions. No I/O.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP

from scipy.optimize import brentq

from loan_engine.engine.money import ZERO, round_money
from loan_engine.models.loan import FeeModel, FeeType
from loan_engine.models.schedule import AprMethod, PaymentRecord

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")
HUNDRED = Decimal("100")
MONTHS_PER_YEAR = Decimal("12")


def one_time_fees(principal: Decimal, fee_model: FeeModel | None) -> Decimal:
    """Origination fee: fixed amount or percent of principal."""
    if fee_model is None:
        return ZERO
    if fee_model.origination_fee_type is FeeType.FIXED:
        return round_money(fee_model.origination_fee)
    return round_money(principal * fee_model.origination_fee / HUNDRED)


def _monthly_charge(amount: Decimal, fee_type: FeeType, balance: Decimal) -> Decimal:
    if fee_type is FeeType.FIXED:
        return amount
    return balance * amount / HUNDRED / MONTHS_PER_YEAR


def recurring_fee(balance: Decimal, fee_model: FeeModel | None) -> Decimal:
    """Monthly loan insurance plus administrative fees for one month."""
    if fee_model is None:
        return ZERO
    insurance = _monthly_charge(fee_model.loan_insurance, fee_model.loan_insurance_type, balance)
    admin = _monthly_charge(fee_model.administrative_fees, fee_model.administrative_fees_type, balance)
    return round_money(insurance + admin)


def monthly_fees(
    records: list[PaymentRecord] | tuple[PaymentRecord, ...],
    fee_model: FeeModel | None,
) -> list[Decimal]:
    """Recurring fee per record, charged on the balance after that payment."""
    return [recurring_fee(r.ending_balance, fee_model) for r in records]


def total_recurring_fees(
    records: list[PaymentRecord] | tuple[PaymentRecord, ...],
    fee_model: FeeModel | None,
) -> Decimal:
    return round_money(sum(monthly_fees(records, fee_model), ZERO))


def annual_percentage_rate(
    principal: Decimal,
    records: list[PaymentRecord] | tuple[PaymentRecord, ...],
    upfront_fees: Decimal,
    fee_model: FeeModel | None,
    method: AprMethod = AprMethod.CASH_FLOW,
    term_months: int | None = None,
) -> Decimal:
    """Approximate APR (annual percent, 2 decimals).

    Finds the monthly rate at which the borrower's outflows discount to the
    net amount received (principal less upfront fees), then annualizes it
    nominally (x12).

    CASH_FLOW uses every month's actual outflow: payment, overpayment and
    recurring fees. LEVEL_PAYMENT assumes the first regular payment plus the
    average monthly fee for the whole contracted term.
    """
    if not records or principal <= 0:
        return ZERO

    fees = monthly_fees(records, fee_model)
    if method is AprMethod.LEVEL_PAYMENT:
        n = term_months or len(records)
        average_fee = sum(fees, ZERO) / len(fees)
        level = float(records[0].scheduled_payment + average_fee)
        cash_flows = [level] * n
    else:
        cash_flows = [float(r.total_payment + fee) for r, fee in zip(records, fees)]

    net_received = float(principal - upfront_fees)

    def npv(rate: float) -> float:
        return sum(cf / (1 + rate) ** t for t, cf in enumerate(cash_flows, start=1)) - net_received

    # Search monthly rates between -5% and 50%
    try:
        rate = brentq(npv, -0.05, 0.5, xtol=1e-12, maxiter=1000)
    except ValueError:
        logger.warning("APR did not converge for principal %s; reporting 0", principal)
        return ZERO
    return (Decimal(str(rate)) * MONTHS_PER_YEAR * HUNDRED).quantize(TWO_PLACES, ROUND_HALF_UP)
