"""Calculation routes: schedules, single overpayments and full scenarios."""

from fastapi import APIRouter, HTTPException

from loan_engine.api.schemas import (
    OverpaymentRequest,
    PaymentRecordResponse,
    SavingsResponse,
    ScenarioRequest,
    ScenarioResponse,
    ScheduleRequest,
    ScheduleResponse,
    YearlyRecordResponse,
)
from loan_engine.engine.aggregation import compare_results, summarize
from loan_engine.engine.scenario import calculate_loan, compute_complex_scenario
from loan_engine.engine.schedule import generate_schedule
from loan_engine.models.schedule import ScheduleResult

router = APIRouter(prefix="/api/v1/calculations", tags=["calculations"])


def _result_to_response(result: ScheduleResult) -> ScheduleResponse:
    """Convert engine ScheduleResult to API response."""
    records = [
        PaymentRecordResponse(
            month=r.month,
            scheduled_payment=r.scheduled_payment,
            principal_portion=r.principal_portion,
            interest_portion=r.interest_portion,
            ending_balance=r.ending_balance,
            is_overpayment_month=r.is_overpayment_month,
            overpayment_amount=r.overpayment_amount,
            cumulative_interest=r.cumulative_interest,
            cumulative_payment=r.cumulative_payment,
            payment_date=r.payment_date,
        )
        for r in result.records
    ]
    yearly = [
        YearlyRecordResponse(
            year=y.year,
            principal_sum=y.principal_sum,
            interest_sum=y.interest_sum,
            payment_sum=y.payment_sum,
            ending_balance=y.ending_balance,
            cumulative_interest=y.cumulative_interest,
        )
        for y in result.yearly_summaries
    ]
    return ScheduleResponse(
        monthly_payment=result.monthly_payment,
        latest_monthly_payment=result.latest_monthly_payment,
        total_interest=result.total_interest,
        total_principal=result.total_principal,
        total_overpayment=result.total_overpayment,
        original_term_years=result.original_term_years,
        actual_term_months=result.actual_term_months,
        actual_term_years=result.actual_term_years,
        one_time_fees=result.one_time_fees,
        recurring_fees=result.recurring_fees,
        total_cost=result.total_cost,
        apr=result.apr,
        diagnostics=[d.value for d in result.diagnostics],
        yearly_summaries=yearly,
        records=records,
    )


@router.post("/schedule", response_model=ScheduleResponse)
async def schedule(req: ScheduleRequest):
    """Baseline schedule with optional overpayment rules."""
    loan = req.loan.to_model()
    rules = [op.to_model() for op in req.overpayments]
    try:
        result = calculate_loan(loan, rules, apr_method=req.apr_method)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _result_to_response(result)


@router.post("/overpayment", response_model=ScenarioResponse)
async def overpayment(req: OverpaymentRequest):
    """Single one-time overpayment against the baseline schedule."""
    loan = req.loan.to_model()
    try:
        scenario = generate_schedule(loan, req.to_model())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    baseline_result = summarize(generate_schedule(loan), loan)
    scenario_result = summarize(scenario, loan)
    return _scenario_response(baseline_result, scenario_result)


@router.post("/scenario", response_model=ScenarioResponse)
async def scenario(req: ScenarioRequest):
    """Rate changes and overpayment rules combined, compared to the baseline."""
    loan = req.loan.to_model()
    try:
        result = compute_complex_scenario(
            loan,
            rate_changes=[c.to_model() for c in req.rate_changes],
            rules=[op.to_model() for op in req.overpayments],
            apr_method=req.apr_method,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    baseline = calculate_loan(loan, apr_method=req.apr_method)
    return _scenario_response(baseline, result)


def _scenario_response(baseline: ScheduleResult, scenario: ScheduleResult) -> ScenarioResponse:
    savings = compare_results(baseline, scenario)
    return ScenarioResponse(
        baseline=_result_to_response(baseline),
        scenario=_result_to_response(scenario),
        savings=SavingsResponse(
            interest_saved=savings.interest_saved,
            months_saved=savings.months_saved,
            payment_reduction=savings.payment_reduction,
        ),
    )
