from datetime import date
from decimal import Decimal

import pytest

from loan_engine.engine.money import round_money
from loan_engine.engine.rates import monthly_rate
from loan_engine.engine.schedule import generate_schedule
from loan_engine.models.loan import (
    LoanParameters,
    OneTimeOverpayment,
    OverpaymentEffect,
    RatePeriod,
    RepaymentModel,
)


class TestFixedRateSchedule:
    def test_length(self, standard_schedule):
        assert len(standard_schedule) == 360
        assert standard_schedule.term_months == 360

    def test_first_payment(self, standard_schedule):
        assert standard_schedule.monthly_payment == Decimal("1266.71")
        first = standard_schedule.records[0]
        assert first.month == 1
        assert first.interest_portion == Decimal("937.50")
        assert first.principal_portion == Decimal("329.21")
        assert first.ending_balance == Decimal("249670.79")

    def test_paid_off(self, standard_schedule):
        assert standard_schedule.records[-1].ending_balance == Decimal("0")

    def test_principal_conserved(self, standard_schedule):
        total_principal = sum(r.principal_portion for r in standard_schedule.records)
        assert total_principal == Decimal("250000")

    def test_total_interest(self, standard_schedule):
        # Per-month payment re-derivation leaves a few cents of rounding drift
        assert abs(standard_schedule.total_interest - Decimal("206017.02")) <= Decimal("1.00")

    def test_balance_never_increases(self, standard_schedule):
        balances = [r.ending_balance for r in standard_schedule.records]
        assert all(b >= 0 for b in balances)
        assert all(later <= earlier for earlier, later in zip(balances, balances[1:]))

    def test_record_arithmetic(self, standard_schedule):
        for r in standard_schedule.records:
            assert r.principal_portion + r.interest_portion == r.scheduled_payment
            assert r.opening_balance - r.principal_portion == r.ending_balance

    def test_cumulative_totals(self, standard_schedule):
        last = standard_schedule.records[-1]
        assert last.cumulative_interest == standard_schedule.total_interest
        assert last.cumulative_payment == sum(r.scheduled_payment for r in standard_schedule.records)

    def test_months_numbered_from_one(self, standard_schedule):
        assert [r.month for r in standard_schedule.records] == list(range(1, 361))

    def test_four_percent_payments(self):
        for principal, expected in [("200000", "954.83"), ("300000", "1432.25")]:
            loan = LoanParameters(
                principal=Decimal(principal),
                rate_periods=(RatePeriod(1, Decimal("4")),),
                term_years=30,
            )
            assert generate_schedule(loan).monthly_payment == Decimal(expected)


class TestEdgeCases:
    def test_zero_principal(self):
        loan = LoanParameters(
            principal=Decimal("0"),
            rate_periods=(RatePeriod(1, Decimal("5")),),
            term_years=30,
        )
        schedule = generate_schedule(loan)
        assert len(schedule) == 0
        assert schedule.monthly_payment == Decimal("0")
        assert schedule.total_interest == Decimal("0")

    def test_zero_rate(self):
        loan = LoanParameters(
            principal=Decimal("120000"),
            rate_periods=(RatePeriod(1, Decimal("0")),),
            term_years=10,
        )
        schedule = generate_schedule(loan)
        assert len(schedule) == 120
        assert schedule.total_interest == Decimal("0")
        assert all(r.scheduled_payment == Decimal("1000.00") for r in schedule.records)

    def test_zero_principal_ignores_overpayment(self):
        loan = LoanParameters(principal=Decimal("0"), rate_periods=(RatePeriod(1, Decimal("5")),))
        schedule = generate_schedule(loan, OneTimeOverpayment(Decimal("1000"), 3))
        assert len(schedule) == 0


class TestVariableRate:
    def test_payment_changes_at_period_boundary(self, variable_rate_loan):
        schedule = generate_schedule(variable_rate_loan)
        before = schedule.records[59]
        after = schedule.records[60]
        assert after.scheduled_payment > before.scheduled_payment
        assert after.interest_portion == round_money(before.ending_balance * monthly_rate(Decimal("5.5")))

    def test_first_period_interest(self, variable_rate_loan):
        schedule = generate_schedule(variable_rate_loan)
        assert schedule.records[0].interest_portion == Decimal("500.00")

    def test_full_term_and_paid_off(self, variable_rate_loan):
        schedule = generate_schedule(variable_rate_loan)
        assert len(schedule) == 300
        assert schedule.records[-1].ending_balance == Decimal("0")
        assert sum(r.principal_portion for r in schedule.records) == Decimal("200000")

    def test_unsorted_periods(self, variable_rate_loan):
        reversed_loan = LoanParameters(
            principal=variable_rate_loan.principal,
            rate_periods=tuple(reversed(variable_rate_loan.rate_periods)),
            term_years=variable_rate_loan.term_years,
        )
        assert generate_schedule(reversed_loan) == generate_schedule(variable_rate_loan)


class TestDecreasingInstallments:
    @pytest.fixture
    def schedule(self):
        loan = LoanParameters(
            principal=Decimal("120000"),
            rate_periods=(RatePeriod(1, Decimal("6")),),
            term_years=10,
            repayment_model=RepaymentModel.DECREASING_INSTALLMENTS,
        )
        return generate_schedule(loan)

    def test_fixed_principal_share(self, schedule):
        assert all(r.principal_portion == Decimal("1000.00") for r in schedule.records)

    def test_payments_decrease(self, schedule):
        assert schedule.records[0].scheduled_payment == Decimal("1600.00")
        assert schedule.records[1].scheduled_payment == Decimal("1595.00")
        payments = [r.scheduled_payment for r in schedule.records]
        assert all(later < earlier for earlier, later in zip(payments, payments[1:]))

    def test_paid_off_on_term(self, schedule):
        assert len(schedule) == 120
        assert schedule.records[-1].ending_balance == Decimal("0")


class TestPaymentDates:
    def test_dates_clamped_to_month_end(self, dated_loan):
        records = generate_schedule(dated_loan).records
        assert records[0].payment_date == date(2025, 1, 31)
        assert records[1].payment_date == date(2025, 2, 28)
        assert records[2].payment_date == date(2025, 3, 31)
        assert records[12].payment_date == date(2026, 1, 31)

    def test_no_dates_without_start(self, standard_schedule):
        assert all(r.payment_date is None for r in standard_schedule.records)


class TestOneTimeOverpayment:
    def test_applied_on_generation(self, standard_loan, standard_schedule):
        schedule = generate_schedule(
            standard_loan,
            OneTimeOverpayment(Decimal("10000"), 6, OverpaymentEffect.REDUCE_TERM),
        )
        assert schedule.records[5].is_overpayment_month
        assert schedule.records[5].ending_balance == standard_schedule.records[5].ending_balance - Decimal("10000")
        assert len(schedule) < 360
