"""Month-by-month amortization of a balance, shared by schedule builders.

Pure functions: Decimal in, dataclass out. No I/O.
"""

from dataclasses import replace
from datetime import date
from decimal import Decimal

from loan_engine.engine.money import ZERO, add_months, round_money
from loan_engine.engine.payment import monthly_payment
from loan_engine.engine.rates import rate_for_month
from loan_engine.models.loan import RatePeriod, RepaymentModel
from loan_engine.models.schedule import PaymentRecord


def amortize(
    balance: Decimal,
    rate_periods: tuple[RatePeriod, ...],
    first_month: int,
    total_months: int,
    repayment_model: RepaymentModel = RepaymentModel.EQUAL_INSTALLMENTS,
) -> list[PaymentRecord]:
    """Amortize ``balance`` over ``total_months`` starting at ``first_month``.

    Equal installments re-derive the annuity payment each month from the
    current balance, remaining months and active rate, so a new rate period
    produces a new payment. Decreasing installments repay a fixed principal
    share plus interest on the current balance. The last month always clears
    the balance. Cent rounding lets a fixed-rate payment drift by a cent
    between months. Cumulative fields are left at zero, see ``restate_cumulative``.
    """
    records: list[PaymentRecord] = []
    balance = round_money(balance)
    if total_months <= 0:
        return records
    principal_share = round_money(balance / total_months)

    for offset in range(total_months):
        if balance <= 0:
            break
        month = first_month + offset
        remaining = total_months - offset
        r = rate_for_month(rate_periods, month)
        interest = round_money(balance * r)

        if repayment_model is RepaymentModel.DECREASING_INSTALLMENTS:
            principal = principal_share
        else:
            principal = monthly_payment(balance, r, remaining) - interest

        # Final payment adjustment
        if remaining == 1 or principal > balance:
            principal = balance
        principal = max(principal, ZERO)
        balance -= principal

        records.append(PaymentRecord(
            month=month,
            scheduled_payment=principal + interest,
            principal_portion=principal,
            interest_portion=interest,
            ending_balance=balance,
        ))

    return records


def restate_cumulative(
    records: list[PaymentRecord] | tuple[PaymentRecord, ...],
    start_date: date | None = None,
) -> tuple[PaymentRecord, ...]:
    """Rebuild month numbers, running totals and payment dates in one forward pass.

    Returns new records; the input is never modified.
    """
    cumulative_interest = ZERO
    cumulative_payment = ZERO
    restated: list[PaymentRecord] = []

    for i, record in enumerate(records):
        cumulative_interest += record.interest_portion
        cumulative_payment += record.total_payment
        restated.append(replace(
            record,
            month=i + 1,
            cumulative_interest=round_money(cumulative_interest),
            cumulative_payment=round_money(cumulative_payment),
            payment_date=add_months(start_date, i) if start_date else None,
        ))

    return tuple(restated)


class InvalidMonthError(ValueError):
    """A month index outside the schedule was passed to an applicator."""


def check_month(records: tuple[PaymentRecord, ...], month: int, action: str) -> None:
    if month <= 0 or month > len(records):
        raise InvalidMonthError(
            f"Invalid month for {action}: {month} (schedule has {len(records)} months)"
        )
