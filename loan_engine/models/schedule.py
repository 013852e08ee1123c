"""Schedule outputs: monthly records, yearly roll-ups and the final result."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum


class Diagnostic(Enum):
    TERM_CAPPED = "term_capped"                    # Reduce-term tail hit the iteration cap
    OVERPAYMENT_HALTED = "overpayment_halted"      # Orchestration stopped on an error
    OVERPAYMENT_REJECTED = "overpayment_rejected"  # Skipped, it would have raised total interest


class AprMethod(Enum):
    CASH_FLOW = "cash_flow"
    LEVEL_PAYMENT = "level_payment"


@dataclass(frozen=True)
class PaymentRecord:
    """One month of a schedule.

    ``scheduled_payment`` is the regular installment. ``principal_portion``
    includes any overpayment, so principal + interest equals the scheduled
    payment plus ``overpayment_amount``.
    """
    month: int
    scheduled_payment: Decimal
    principal_portion: Decimal
    interest_portion: Decimal
    ending_balance: Decimal
    is_overpayment_month: bool = False
    overpayment_amount: Decimal = Decimal("0")
    cumulative_interest: Decimal = Decimal("0")
    cumulative_payment: Decimal = Decimal("0")
    payment_date: date | None = None

    @property
    def opening_balance(self) -> Decimal:
        return self.ending_balance + self.principal_portion

    @property
    def total_payment(self) -> Decimal:
        return self.scheduled_payment + self.overpayment_amount


@dataclass(frozen=True)
class Schedule:
    records: tuple[PaymentRecord, ...]
    term_months: int  # Contracted length, which reduce-payment tails keep
    diagnostics: tuple[Diagnostic, ...] = ()

    def __len__(self) -> int:
        return len(self.records)

    @property
    def monthly_payment(self) -> Decimal:
        return self.records[0].scheduled_payment if self.records else Decimal("0")

    @property
    def total_interest(self) -> Decimal:
        return sum((r.interest_portion for r in self.records), Decimal("0"))

    @property
    def active_length(self) -> int:
        """Months up to and including the payoff month."""
        for i, record in enumerate(self.records):
            if record.ending_balance <= 0:
                return i + 1
        return len(self.records)

    def with_diagnostic(self, diagnostic: Diagnostic) -> "Schedule":
        if diagnostic in self.diagnostics:
            return self
        return Schedule(self.records, self.term_months, self.diagnostics + (diagnostic,))


@dataclass(frozen=True)
class YearlyRecord:
    year: int
    principal_sum: Decimal
    interest_sum: Decimal
    payment_sum: Decimal
    ending_balance: Decimal
    cumulative_interest: Decimal


@dataclass(frozen=True)
class ScheduleResult:
    records: tuple[PaymentRecord, ...]
    monthly_payment: Decimal
    latest_monthly_payment: Decimal  # Regular payment in force at the end of the schedule
    total_interest: Decimal
    total_principal: Decimal
    total_overpayment: Decimal
    yearly_summaries: list[YearlyRecord]
    original_term_years: Decimal
    actual_term_months: int
    actual_term_years: Decimal
    one_time_fees: Decimal = Decimal("0")
    recurring_fees: Decimal = Decimal("0")
    total_cost: Decimal = Decimal("0")
    apr: Decimal | None = None
    diagnostics: tuple[Diagnostic, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ScenarioSavings:
    interest_saved: Decimal
    months_saved: int
    payment_reduction: Decimal
