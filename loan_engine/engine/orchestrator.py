"""Multiple overpayment rules resolved into monthly amounts and applied in order."""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from loan_engine.config import settings
from loan_engine.engine.money import months_between, round_money
from loan_engine.engine.overpayment import apply_overpayment
from loan_engine.models.loan import LoanParameters, OverpaymentEffect, OverpaymentRule, Recurrence
from loan_engine.models.schedule import Diagnostic, Schedule

logger = logging.getLogger(__name__)

RECURRENCE_INTERVAL = {
    Recurrence.QUARTERLY: 3,
    Recurrence.ANNUAL: 12,
}


@dataclass(frozen=True)
class PlannedOverpayment:
    month: int
    amount: Decimal
    effect: OverpaymentEffect
    rule_count: int


def resolve_rule_window(rule: OverpaymentRule, loan_start: date | None = None) -> tuple[int, int | None]:
    """Return the (start_month, end_month) window of a rule in loan months.

    Explicit months win. Dates are converted relative to the loan start date,
    where the start date's own month is payment month 1. A rule without any
    start begins at month 1. Raises ValueError for a date that has to be
    converted when the loan has no start date.
    """
    start = rule.start_month
    end = rule.end_month
    if start is None and rule.start_date is not None:
        start = _month_of(rule.start_date, loan_start)
    if end is None and rule.end_date is not None:
        end = _month_of(rule.end_date, loan_start)
    return (start if start is not None else 1), end


def _month_of(d: date, loan_start: date | None) -> int:
    if loan_start is None:
        raise ValueError(f"Overpayment rule dated {d.isoformat()} needs a loan start date")
    return months_between(loan_start, d) + 1


def is_rule_applicable(rule: OverpaymentRule, month: int, loan_start: date | None = None) -> bool:
    start, end = resolve_rule_window(rule, loan_start)
    if month < start:
        return False
    if end is not None and month > end:
        return False

    if rule.recurrence is Recurrence.ONE_TIME:
        return month == start
    if rule.recurrence is Recurrence.MONTHLY:
        return True
    return (month - start) % RECURRENCE_INTERVAL[rule.recurrence] == 0


def plan_overpayments(
    rules: list[OverpaymentRule] | tuple[OverpaymentRule, ...],
    schedule: Schedule,
    loan_start: date | None = None,
) -> list[PlannedOverpayment]:
    """Sum applicable rules per month over the schedule's active range.

    Reduce-payment is chosen only when every rule in that month asks for it.
    """
    plan: list[PlannedOverpayment] = []
    for month in range(1, schedule.active_length + 1):
        applicable = [r for r in rules if is_rule_applicable(r, month, loan_start)]
        if not applicable:
            continue
        if all(r.effect is OverpaymentEffect.REDUCE_PAYMENT for r in applicable):
            effect = OverpaymentEffect.REDUCE_PAYMENT
        else:
            effect = OverpaymentEffect.REDUCE_TERM
        plan.append(PlannedOverpayment(
            month=month,
            amount=round_money(sum((r.amount for r in applicable), Decimal("0"))),
            effect=effect,
            rule_count=len(applicable),
        ))
    return plan


def apply_multiple_overpayments(
    schedule: Schedule,
    loan: LoanParameters,
    rules: list[OverpaymentRule] | tuple[OverpaymentRule, ...],
    reject_interest_increase: bool | None = None,
) -> Schedule:
    """Apply every planned overpayment chronologically.

    Stops once the loan is paid off. An error at one month is logged and
    ends processing with the schedule accumulated so far. With
    ``reject_interest_increase`` a month whose overpayment would raise total
    interest (a fixed reduce-term payment running into a higher rate period)
    is skipped.
    """
    if not rules:
        return schedule
    if reject_interest_increase is None:
        reject_interest_increase = settings.reject_interest_increase

    plan = plan_overpayments(rules, schedule, loan.start_date)
    logger.debug("Planned %d overpayment months from %d rules", len(plan), len(rules))

    current = schedule
    for planned in plan:
        if planned.month > len(current) or current.records[planned.month - 1].ending_balance <= 0:
            break

        amount = min(planned.amount, current.records[planned.month - 1].ending_balance)
        try:
            candidate = apply_overpayment(current, loan, amount, planned.month, planned.effect)
        except (ValueError, ArithmeticError) as e:
            logger.warning("Overpayment at month %d failed, halting: %s", planned.month, e)
            return current.with_diagnostic(Diagnostic.OVERPAYMENT_HALTED)

        if reject_interest_increase and candidate.total_interest > current.total_interest:
            logger.warning(
                "Overpayment of %s at month %d would raise total interest from %s to %s; skipped",
                amount, planned.month, current.total_interest, candidate.total_interest,
            )
            current = current.with_diagnostic(Diagnostic.OVERPAYMENT_REJECTED)
            continue
        current = candidate

    return current
