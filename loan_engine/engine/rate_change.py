"""Mid-schedule rate changes: splice a re-priced tail into an existing schedule."""

import logging
from dataclasses import replace
from decimal import Decimal, ROUND_HALF_UP

from loan_engine.engine.amortize import amortize, check_month, restate_cumulative
from loan_engine.engine.overpayment import apply_overpayment
from loan_engine.engine.rates import sorted_periods
from loan_engine.models.loan import LoanParameters, OverpaymentEffect, RateChange, RatePeriod
from loan_engine.models.schedule import Schedule

logger = logging.getLogger(__name__)


def apply_rate_change(schedule: Schedule, loan: LoanParameters, change: RateChange) -> Schedule:
    """Re-price the schedule from ``change.month`` onward at the new rate.

    Months before the change are kept. The opening balance of the change
    month is re-amortized over the remaining term: the explicit
    ``remaining_term_years`` if given, else the months left in the schedule.
    An overpayment already recorded in the change month is re-applied to the
    re-priced month, keeping the remaining term.
    """
    records = schedule.records
    check_month(records, change.month, "rate change")

    opening = records[change.month - 1].opening_balance
    if opening <= 0:
        return schedule

    term_months = schedule.term_months
    if change.remaining_term_years is not None:
        remaining = int((Decimal(change.remaining_term_years) * 12).quantize(Decimal("1"), ROUND_HALF_UP))
        term_months = change.month - 1 + remaining
    else:
        remaining = len(records) - (change.month - 1)

    tail = amortize(
        opening,
        (RatePeriod(change.month, change.new_annual_rate),),
        change.month,
        remaining,
        loan.repayment_model,
    )
    logger.debug(
        "Rate change to %s%% at month %d: %s re-amortized over %d months",
        change.new_annual_rate, change.month, opening, remaining,
    )
    result = Schedule(
        records=restate_cumulative([*records[:change.month - 1], *tail], loan.start_date),
        term_months=term_months,
        diagnostics=schedule.diagnostics,
    )

    # An overpayment made in the change month still lands on the re-priced record
    overpaid = records[change.month - 1].overpayment_amount
    if overpaid > 0:
        result = apply_overpayment(
            result,
            loan_with_rate_changes(loan, [change]),
            overpaid,
            change.month,
            OverpaymentEffect.REDUCE_PAYMENT,
        )
    return result


def apply_rate_changes(
    schedule: Schedule,
    loan: LoanParameters,
    changes: list[RateChange] | tuple[RateChange, ...],
) -> Schedule:
    """Apply rate changes in chronological order, each on the previous result."""
    current = schedule
    for change in sorted(changes, key=lambda c: c.month):
        current = apply_rate_change(current, loan, change)
    return current


def rate_periods_with_changes(
    periods: tuple[RatePeriod, ...],
    changes: list[RateChange] | tuple[RateChange, ...],
) -> tuple[RatePeriod, ...]:
    """Rate periods as they stand after the changes.

    A change overrides everything from its month onward, matching the tail
    that ``apply_rate_change`` builds.
    """
    current = sorted_periods(periods)
    for change in sorted(changes, key=lambda c: c.month):
        current = [p for p in current if p.start_month < change.month]
        current.append(RatePeriod(change.month, change.new_annual_rate))
    return tuple(current)


def loan_with_rate_changes(
    loan: LoanParameters,
    changes: list[RateChange] | tuple[RateChange, ...],
) -> LoanParameters:
    return replace(loan, rate_periods=rate_periods_with_changes(loan.rate_periods, changes))
