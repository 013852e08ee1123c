"""Scenario orchestrator: composes schedule, rate change and overpayment modules.

Pure computation. No I/O. LoanParameters in, ScheduleResult out.
"""

from loan_engine.engine.aggregation import summarize
from loan_engine.engine.orchestrator import apply_multiple_overpayments
from loan_engine.engine.rate_change import apply_rate_changes, loan_with_rate_changes
from loan_engine.engine.schedule import generate_schedule
from loan_engine.models.loan import LoanParameters, OverpaymentRule, RateChange
from loan_engine.models.schedule import AprMethod, ScheduleResult


def calculate_loan(
    loan: LoanParameters,
    rules: list[OverpaymentRule] | tuple[OverpaymentRule, ...] = (),
    apr_method: AprMethod | None = None,
) -> ScheduleResult:
    """Baseline schedule plus overpayment rules, summarized."""
    schedule = generate_schedule(loan)
    if rules:
        schedule = apply_multiple_overpayments(schedule, loan, rules)
    return summarize(schedule, loan, apr_method)


def compute_complex_scenario(
    loan: LoanParameters,
    rate_changes: list[RateChange] | tuple[RateChange, ...] = (),
    rules: list[OverpaymentRule] | tuple[OverpaymentRule, ...] = (),
    apr_method: AprMethod | None = None,
) -> ScheduleResult:
    """Run rate changes, then overpayments, on the baseline schedule.

    Overpayment tails are generated against the rate periods as updated by
    the rate changes, so a later overpayment does not revert a re-priced tail.
    """
    schedule = generate_schedule(loan)
    if rate_changes:
        schedule = apply_rate_changes(schedule, loan, rate_changes)
        loan = loan_with_rate_changes(loan, rate_changes)
    if rules:
        schedule = apply_multiple_overpayments(schedule, loan, rules)
    return summarize(schedule, loan, apr_method)
