"""Fixed monthly payment computation.

Pure functions: Decimal in, Decimal out. No I/O.
"""

from decimal import Decimal

from loan_engine.engine.money import round_money

# Below these monthly rates the compound formula loses precision to
# cancellation in (1 + r)^n - 1.
SIMPLE_DIVISION_THRESHOLD = Decimal("0.0001")  # ~0.12% annual
LINEAR_THRESHOLD = Decimal("0.001")            # ~1.2% annual


def monthly_payment(principal: Decimal, monthly_rate: Decimal, total_months: int) -> Decimal:
    """Calculate the fixed annuity payment that amortizes ``principal``.

    M = P * [r(1+r)^n] / [(1+r)^n - 1]

    Near-zero rates fall back to straight division, low rates to a first-order
    approximation P * (1 + r*n) / n.
    """
    if principal <= 0 or total_months <= 0:
        return Decimal("0")

    n = Decimal(total_months)
    if abs(monthly_rate) < SIMPLE_DIVISION_THRESHOLD:
        return round_money(principal / n)
    if monthly_rate < LINEAR_THRESHOLD:
        return round_money(principal * (1 + monthly_rate * n) / n)

    factor = (1 + monthly_rate) ** total_months
    payment = principal * (monthly_rate * factor) / (factor - 1)
    return round_money(payment)
