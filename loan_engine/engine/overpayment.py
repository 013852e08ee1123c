"""Single overpayment application.

An extra payment at one month shortens the loan (reduce term) or lowers the
installment (reduce payment). Months before the overpayment are kept as-is,
the tail is regenerated. Pure computation, new Schedule out.
"""

import logging
from dataclasses import replace
from decimal import Decimal

from loan_engine.config import settings
from loan_engine.engine.amortize import amortize, check_month, restate_cumulative
from loan_engine.engine.money import ZERO, round_money
from loan_engine.engine.rates import rate_for_month
from loan_engine.models.loan import LoanParameters, OverpaymentEffect, RatePeriod, RepaymentModel
from loan_engine.models.schedule import Diagnostic, PaymentRecord, Schedule

logger = logging.getLogger(__name__)


def reduce_term_tail(
    balance: Decimal,
    rate_periods: tuple[RatePeriod, ...],
    first_month: int,
    payment: Decimal,
    principal_share: Decimal,
    repayment_model: RepaymentModel,
    max_months: int,
) -> tuple[list[PaymentRecord], bool]:
    """Pay down ``balance`` keeping the regular payment (or principal share) fixed.

    Interest follows the active rate period of each month. If the payment
    does not cover interest the principal portion is zero that month. The
    loop stops after ``max_months``; the last allowed month force-closes
    the balance and the second return value reports that the cap was hit.
    """
    records: list[PaymentRecord] = []
    capped = False

    for i in range(max_months):
        if balance <= 0:
            break
        month = first_month + i
        interest = round_money(balance * rate_for_month(rate_periods, month))

        if repayment_model is RepaymentModel.DECREASING_INSTALLMENTS:
            principal = principal_share
        else:
            principal = payment - interest
        principal = max(principal, ZERO)

        if principal >= balance:
            principal = balance
        elif i == max_months - 1:
            principal = balance
            capped = True
        balance -= principal

        records.append(PaymentRecord(
            month=month,
            scheduled_payment=principal + interest,
            principal_portion=principal,
            interest_portion=interest,
            ending_balance=balance,
        ))

    return records, capped


def apply_overpayment(
    schedule: Schedule,
    loan: LoanParameters,
    amount: Decimal,
    after_month: int,
    effect: OverpaymentEffect,
    max_months: int | None = None,
) -> Schedule:
    """Apply ``amount`` as extra principal at ``after_month`` (1-based).

    Raises InvalidMonthError for a month outside the schedule. Overpaying a
    month whose balance is already zero, or a non-positive amount, returns
    the schedule unchanged. The amount is capped at that month's balance.
    """
    records = schedule.records
    check_month(records, after_month, "overpayment")

    target = records[after_month - 1]
    amount = min(round_money(amount), target.ending_balance)
    if target.ending_balance <= 0 or amount <= 0:
        return schedule

    if max_months is None:
        max_months = settings.max_schedule_months

    balance = target.ending_balance - amount
    overpaid = replace(
        target,
        principal_portion=target.principal_portion + amount,
        ending_balance=balance,
        is_overpayment_month=True,
        overpayment_amount=target.overpayment_amount + amount,
    )

    capped = False
    if effect is OverpaymentEffect.REDUCE_TERM:
        tail, capped = reduce_term_tail(
            balance,
            loan.rate_periods,
            first_month=after_month + 1,
            payment=target.scheduled_payment,
            principal_share=target.principal_portion - target.overpayment_amount,
            repayment_model=loan.repayment_model,
            max_months=max(max_months - after_month, 1),
        )
    else:
        # Months left in the current schedule, which an earlier reduce-term may have shortened
        remaining = max(min(schedule.active_length, schedule.term_months) - after_month, 1)
        tail = amortize(balance, loan.rate_periods, after_month + 1, remaining, loan.repayment_model)

    logger.debug(
        "Overpayment of %s at month %d (%s): tail regenerated with %d months",
        amount, after_month, effect.value, len(tail),
    )

    result = Schedule(
        records=restate_cumulative([*records[:after_month - 1], overpaid, *tail], loan.start_date),
        term_months=schedule.term_months,
        diagnostics=schedule.diagnostics,
    )
    if capped:
        logger.warning(
            "Reduce-term tail after month %d hit the %d-month cap; balance force-closed",
            after_month, max_months,
        )
        result = result.with_diagnostic(Diagnostic.TERM_CAPPED)
    return result
