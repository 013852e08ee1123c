"""Rate period resolution: which annual rate applies to a given payment month."""

from decimal import Decimal

from loan_engine.models.loan import RatePeriod

MONTHS_PER_YEAR = Decimal("12")
HUNDRED = Decimal("100")


def sorted_periods(periods: tuple[RatePeriod, ...] | list[RatePeriod]) -> list[RatePeriod]:
    return sorted(periods, key=lambda p: p.start_month)


def active_annual_rate(periods: tuple[RatePeriod, ...] | list[RatePeriod], month: int) -> Decimal:
    """Annual rate (percent) of the last period starting on or before ``month``.

    Returns 0 when no period has started yet.
    """
    rate = Decimal("0")
    for period in sorted_periods(periods):
        if period.start_month > month:
            break
        rate = period.annual_rate
    return rate


def monthly_rate(annual_rate: Decimal) -> Decimal:
    """Convert an annual percentage into a monthly decimal rate."""
    return Decimal(annual_rate) / HUNDRED / MONTHS_PER_YEAR


def rate_for_month(periods: tuple[RatePeriod, ...] | list[RatePeriod], month: int) -> Decimal:
    return monthly_rate(active_annual_rate(periods, month))
