"""Schedule aggregation: yearly roll-ups, actual term, totals, fees and APR.

Pure functions: dataclass in, dataclass out. No I/O.
"""

from decimal import Decimal, ROUND_HALF_UP

from loan_engine.config import settings
from loan_engine.engine.fees import annual_percentage_rate, one_time_fees, total_recurring_fees
from loan_engine.engine.money import ZERO, round_money
from loan_engine.models.loan import LoanParameters
from loan_engine.models.schedule import (
    AprMethod,
    PaymentRecord,
    Schedule,
    ScheduleResult,
    ScenarioSavings,
    YearlyRecord,
)

FOUR_PLACES = Decimal("0.0001")


def yearly_summary(records: list[PaymentRecord] | tuple[PaymentRecord, ...]) -> list[YearlyRecord]:
    """Aggregate monthly records by loan year.

    Grouping is positional: records 1-12 are year 1, 13-24 year 2, and so on.
    A trailing partial year is still reported.
    """
    yearly: list[YearlyRecord] = []
    year_principal = ZERO
    year_interest = ZERO
    year_payment = ZERO

    for i, r in enumerate(records):
        year_principal += r.principal_portion
        year_interest += r.interest_portion
        year_payment += r.total_payment

        if (i + 1) % 12 == 0 or i == len(records) - 1:
            yearly.append(YearlyRecord(
                year=i // 12 + 1,
                principal_sum=round_money(year_principal),
                interest_sum=round_money(year_interest),
                payment_sum=round_money(year_payment),
                ending_balance=r.ending_balance,
                cumulative_interest=r.cumulative_interest,
            ))
            year_principal = ZERO
            year_interest = ZERO
            year_payment = ZERO

    return yearly


def actual_term_months(records: list[PaymentRecord] | tuple[PaymentRecord, ...]) -> int:
    """Month of payoff, or the schedule length if the balance never reaches zero."""
    for i, r in enumerate(records):
        if r.ending_balance <= 0:
            return i + 1
    return len(records)


def actual_term_years(records: list[PaymentRecord] | tuple[PaymentRecord, ...]) -> Decimal:
    return (Decimal(actual_term_months(records)) / 12).quantize(FOUR_PLACES, ROUND_HALF_UP)


def latest_regular_payment(records: list[PaymentRecord] | tuple[PaymentRecord, ...]) -> Decimal:
    """Regular installment in force at the end of the schedule.

    The final record is the balance-clearing payment, so the one before it
    is used when there is one.
    """
    if not records:
        return ZERO
    if len(records) == 1:
        return records[0].scheduled_payment
    return records[-2].scheduled_payment


def summarize(
    schedule: Schedule,
    loan: LoanParameters,
    apr_method: AprMethod | None = None,
) -> ScheduleResult:
    """Build the full result for a schedule: totals, yearly data, fees and APR."""
    records = schedule.records
    if apr_method is None:
        apr_method = AprMethod(settings.apr_method)

    total_interest = round_money(sum((r.interest_portion for r in records), ZERO))
    total_principal = round_money(sum((r.principal_portion for r in records), ZERO))
    total_overpayment = round_money(sum((r.overpayment_amount for r in records), ZERO))

    upfront = one_time_fees(loan.principal, loan.fee_model) if records else ZERO
    recurring = total_recurring_fees(records, loan.fee_model)

    apr = None
    if records:
        apr = annual_percentage_rate(
            loan.principal,
            records,
            upfront,
            loan.fee_model,
            method=apr_method,
            term_months=schedule.term_months,
        )

    return ScheduleResult(
        records=records,
        monthly_payment=schedule.monthly_payment,
        latest_monthly_payment=latest_regular_payment(records),
        total_interest=total_interest,
        total_principal=total_principal,
        total_overpayment=total_overpayment,
        yearly_summaries=yearly_summary(records),
        original_term_years=Decimal(loan.term_years),
        actual_term_months=actual_term_months(records),
        actual_term_years=actual_term_years(records),
        one_time_fees=upfront,
        recurring_fees=recurring,
        total_cost=round_money(total_principal + total_interest + upfront + recurring),
        apr=apr,
        diagnostics=schedule.diagnostics,
    )


def compare_results(baseline: ScheduleResult, scenario: ScheduleResult) -> ScenarioSavings:
    """What a scenario saves relative to the baseline loan."""
    return ScenarioSavings(
        interest_saved=round_money(baseline.total_interest - scenario.total_interest),
        months_saved=baseline.actual_term_months - scenario.actual_term_months,
        payment_reduction=round_money(baseline.latest_monthly_payment - scenario.latest_monthly_payment),
    )
