"""Baseline amortization schedule generation.

Pure functions: Decimal in, dataclass out. No I/O.
"""

import logging

from loan_engine.engine.amortize import amortize, restate_cumulative
from loan_engine.engine.overpayment import apply_overpayment
from loan_engine.engine.rates import sorted_periods
from loan_engine.models.loan import LoanParameters, OneTimeOverpayment
from loan_engine.models.schedule import Schedule

logger = logging.getLogger(__name__)


def generate_schedule(
    loan: LoanParameters,
    one_time_overpayment: OneTimeOverpayment | None = None,
) -> Schedule:
    """Generate the full monthly schedule for ``loan``.

    Zero principal yields an empty schedule. The schedule ends early if the
    balance reaches zero before the contracted term. An optional one-time
    overpayment is applied on top of the baseline.
    """
    periods = tuple(sorted_periods(loan.rate_periods))
    records = amortize(loan.principal, periods, 1, loan.term_months, loan.repayment_model)
    schedule = Schedule(
        records=restate_cumulative(records, loan.start_date),
        term_months=loan.term_months,
    )
    logger.debug(
        "Generated %d-month schedule for principal %s over %d years",
        len(schedule), loan.principal, loan.term_years,
    )

    if one_time_overpayment is not None and schedule.records:
        schedule = apply_overpayment(
            schedule,
            loan,
            one_time_overpayment.amount,
            one_time_overpayment.month,
            one_time_overpayment.effect,
        )
    return schedule
