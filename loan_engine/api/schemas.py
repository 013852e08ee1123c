"""Pydantic schemas for API request/response models.

Range checks live here; the engine assumes sane inputs.
"""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field

from loan_engine.models.loan import (
    FeeModel,
    FeeType,
    LoanParameters,
    OneTimeOverpayment,
    OverpaymentEffect,
    OverpaymentRule,
    RateChange,
    RatePeriod,
    Recurrence,
    RepaymentModel,
)
from loan_engine.models.schedule import AprMethod


# ---- Request schemas ----

class RatePeriodRequest(BaseModel):
    start_month: int = Field(1, ge=1)
    annual_rate: Decimal = Field(..., ge=0, le=100, description="Annual rate in percent")


class FeeModelRequest(BaseModel):
    origination_fee: Decimal = Field(Decimal("0"), ge=0)
    origination_fee_type: FeeType = FeeType.FIXED
    loan_insurance: Decimal = Field(Decimal("0"), ge=0)
    loan_insurance_type: FeeType = FeeType.FIXED
    administrative_fees: Decimal = Field(Decimal("0"), ge=0)
    administrative_fees_type: FeeType = FeeType.FIXED

    def to_model(self) -> FeeModel:
        return FeeModel(**self.model_dump())


class LoanRequest(BaseModel):
    principal: Decimal = Field(..., ge=0)
    rate_periods: list[RatePeriodRequest] = Field(..., min_length=1)
    term_years: int = Field(..., ge=1, le=50)
    repayment_model: RepaymentModel = RepaymentModel.EQUAL_INSTALLMENTS
    fees: FeeModelRequest | None = None
    start_date: date | None = None

    def to_model(self) -> LoanParameters:
        return LoanParameters(
            principal=self.principal,
            rate_periods=tuple(
                RatePeriod(p.start_month, p.annual_rate)
                for p in sorted(self.rate_periods, key=lambda p: p.start_month)
            ),
            term_years=self.term_years,
            repayment_model=self.repayment_model,
            fee_model=self.fees.to_model() if self.fees else None,
            start_date=self.start_date,
        )


class OverpaymentRuleRequest(BaseModel):
    amount: Decimal = Field(..., gt=0)
    recurrence: Recurrence = Recurrence.ONE_TIME
    start_month: int | None = Field(None, ge=1)
    end_month: int | None = Field(None, ge=1)
    start_date: date | None = None
    end_date: date | None = None
    effect: OverpaymentEffect = OverpaymentEffect.REDUCE_TERM

    def to_model(self) -> OverpaymentRule:
        return OverpaymentRule(**self.model_dump())


class RateChangeRequest(BaseModel):
    month: int = Field(..., ge=1)
    new_annual_rate: Decimal = Field(..., ge=0, le=100)
    remaining_term_years: Decimal | None = Field(None, gt=0, le=50)

    def to_model(self) -> RateChange:
        return RateChange(**self.model_dump())


class ScheduleRequest(BaseModel):
    loan: LoanRequest
    overpayments: list[OverpaymentRuleRequest] = []
    apr_method: AprMethod | None = None


class OverpaymentRequest(BaseModel):
    loan: LoanRequest
    amount: Decimal = Field(..., gt=0)
    month: int = Field(..., ge=1)
    effect: OverpaymentEffect = OverpaymentEffect.REDUCE_TERM

    def to_model(self) -> OneTimeOverpayment:
        return OneTimeOverpayment(amount=self.amount, month=self.month, effect=self.effect)


class ScenarioRequest(BaseModel):
    loan: LoanRequest
    rate_changes: list[RateChangeRequest] = []
    overpayments: list[OverpaymentRuleRequest] = []
    apr_method: AprMethod | None = None


# ---- Response schemas ----

class PaymentRecordResponse(BaseModel):
    month: int
    scheduled_payment: Decimal
    principal_portion: Decimal
    interest_portion: Decimal
    ending_balance: Decimal
    is_overpayment_month: bool
    overpayment_amount: Decimal
    cumulative_interest: Decimal
    cumulative_payment: Decimal
    payment_date: date | None = None


class YearlyRecordResponse(BaseModel):
    year: int
    principal_sum: Decimal
    interest_sum: Decimal
    payment_sum: Decimal
    ending_balance: Decimal
    cumulative_interest: Decimal


class ScheduleResponse(BaseModel):
    monthly_payment: Decimal
    latest_monthly_payment: Decimal
    total_interest: Decimal
    total_principal: Decimal
    total_overpayment: Decimal
    original_term_years: Decimal
    actual_term_months: int
    actual_term_years: Decimal
    one_time_fees: Decimal
    recurring_fees: Decimal
    total_cost: Decimal
    apr: Decimal | None = None
    diagnostics: list[str] = []
    yearly_summaries: list[YearlyRecordResponse]
    records: list[PaymentRecordResponse]


class SavingsResponse(BaseModel):
    interest_saved: Decimal
    months_saved: int
    payment_reduction: Decimal


class ScenarioResponse(BaseModel):
    baseline: ScheduleResponse
    scenario: ScheduleResponse
    savings: SavingsResponse
