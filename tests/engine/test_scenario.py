from decimal import Decimal

import pytest

from loan_engine.config import settings
from loan_engine.engine.aggregation import summarize
from loan_engine.engine.amortize import InvalidMonthError
from loan_engine.engine.money import round_money
from loan_engine.engine.rates import monthly_rate
from loan_engine.engine.scenario import calculate_loan, compute_complex_scenario
from loan_engine.engine.schedule import generate_schedule
from loan_engine.models.loan import OverpaymentEffect, OverpaymentRule, RateChange, Recurrence
from loan_engine.models.schedule import AprMethod


class TestCalculateLoan:
    def test_matches_baseline_summary(self, standard_loan):
        expected = summarize(generate_schedule(standard_loan), standard_loan)
        assert calculate_loan(standard_loan) == expected

    def test_with_rules(self, standard_loan):
        rules = [OverpaymentRule(Decimal("250"), Recurrence.MONTHLY, start_month=13, end_month=24)]
        result = calculate_loan(standard_loan, rules)
        assert result.total_overpayment == Decimal("3000.00")
        assert result.actual_term_months < 360

    def test_apr_method(self, loan_with_fees):
        cash_flow = calculate_loan(loan_with_fees, apr_method=AprMethod.CASH_FLOW)
        level = calculate_loan(loan_with_fees, apr_method=AprMethod.LEVEL_PAYMENT)
        assert cash_flow.apr > Decimal("4.5")
        assert level.apr > Decimal("4.5")


class TestComplexScenario:
    def test_nothing_to_apply(self, standard_loan):
        assert compute_complex_scenario(standard_loan) == calculate_loan(standard_loan)

    def test_rate_change_only(self, standard_loan):
        result = compute_complex_scenario(standard_loan, rate_changes=[RateChange(61, Decimal("6"))])
        assert result.actual_term_months == 360
        assert result.total_interest > calculate_loan(standard_loan).total_interest

    def test_overpayments_use_changed_rate(self, standard_loan):
        result = compute_complex_scenario(
            standard_loan,
            rate_changes=[RateChange(61, Decimal("6"))],
            rules=[OverpaymentRule(Decimal("200"), Recurrence.MONTHLY, start_month=61)],
        )
        records = result.records
        assert records[69].is_overpayment_month
        assert records[70].interest_portion == round_money(records[69].ending_balance * monthly_rate(Decimal("6")))
        assert result.diagnostics == ()
        assert result.actual_term_months < 360

    def test_reduce_payment_after_rate_change(self, standard_loan):
        result = compute_complex_scenario(
            standard_loan,
            rate_changes=[RateChange(61, Decimal("6"))],
            rules=[OverpaymentRule(Decimal("20000"), start_month=120, effect=OverpaymentEffect.REDUCE_PAYMENT)],
        )
        assert result.actual_term_months == 360
        assert result.latest_monthly_payment < result.records[118].scheduled_payment

    def test_invalid_rate_change_month(self, standard_loan):
        with pytest.raises(InvalidMonthError):
            compute_complex_scenario(standard_loan, rate_changes=[RateChange(500, Decimal("6"))])


class TestScenarioInvariants:
    """Mixed reduce-term and reduce-payment rules, with and without rate changes."""

    rules = [
        OverpaymentRule(Decimal("30000"), start_month=6),
        OverpaymentRule(Decimal("1000"), start_month=24, effect=OverpaymentEffect.REDUCE_PAYMENT),
        OverpaymentRule(Decimal("100"), Recurrence.MONTHLY, start_month=36, end_month=47),
        OverpaymentRule(
            Decimal("2000"), Recurrence.ANNUAL, start_month=12, end_month=60,
            effect=OverpaymentEffect.REDUCE_PAYMENT,
        ),
    ]
    overpayment_months = [6, 12, 24, *range(36, 49), 60]

    @pytest.fixture(params=[(), (RateChange(61, Decimal("6")), RateChange(121, Decimal("3.5")))])
    def result(self, request, standard_loan, monkeypatch):
        # A fixed reduce-term payment carried across rate changes may cost more interest
        monkeypatch.setattr(settings, "reject_interest_increase", False)
        return compute_complex_scenario(standard_loan, rate_changes=request.param, rules=self.rules)

    def test_balance_never_increases(self, result):
        balances = [r.ending_balance for r in result.records]
        assert all(b >= 0 for b in balances)
        assert all(later <= earlier for earlier, later in zip(balances, balances[1:]))
        assert balances[-1] == Decimal("0")

    def test_principal_conserved(self, result):
        assert result.total_principal == Decimal("250000.00")

    def test_every_rule_applied(self, result):
        assert result.total_overpayment == Decimal("42200.00")
        assert [r.month for r in result.records if r.is_overpayment_month] == self.overpayment_months
        assert result.diagnostics == ()

    def test_record_arithmetic(self, result):
        for r in result.records:
            assert r.principal_portion + r.interest_portion == r.scheduled_payment + r.overpayment_amount

    def test_fixed_rate_passes_interest_guard(self, standard_loan):
        result = compute_complex_scenario(standard_loan, rules=self.rules)
        assert result.diagnostics == ()
        assert result.total_overpayment == Decimal("42200.00")
        assert result.actual_term_months < 360
