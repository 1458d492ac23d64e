"""
Straight-line depreciation and book value.

Every caller (serializers, dashboard statistics, exports, notifications,
reports) goes through these functions so the figures always agree.

    years_elapsed = (as_of - purchase_date) / 365.25 days
    annual        = (purchase_value - residual_value) / useful_life_years
    depreciation  = max(0, annual * min(years_elapsed, useful_life_years))
    book_value    = max(residual_value, purchase_value - depreciation)

useful_life_years must be > 0; that is enforced when the asset is validated,
not here.
"""

from datetime import date, datetime, time, timezone as dt_timezone
from decimal import Decimal, ROUND_HALF_UP

from django.utils import timezone

SECONDS_PER_YEAR = Decimal(365.25 * 24 * 60 * 60)
CENTS = Decimal('0.01')
ZERO = Decimal('0')


def to_decimal(value):
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _as_aware_datetime(value):
    """Dates are taken as midnight UTC; naive datetimes as UTC."""
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime.combine(value, time.min)
    else:
        raise TypeError(f"Expected date or datetime, got {type(value).__name__}")
    if timezone.is_naive(dt):
        dt = dt.replace(tzinfo=dt_timezone.utc)
    return dt


def years_elapsed(purchase_date, as_of=None):
    """
    Fractional years between purchase_date and as_of (default: today, in the
    active timezone, so an asset bought today has no depreciation yet).
    Negative when the purchase date lies in the future.
    """
    start = _as_aware_datetime(purchase_date)
    end = _as_aware_datetime(as_of if as_of is not None else timezone.localdate())
    delta = end - start
    seconds = Decimal(delta.days * 86400 + delta.seconds) + Decimal(delta.microseconds) / Decimal(1000000)
    return seconds / SECONDS_PER_YEAR


def _accumulated_depreciation(purchase_value, residual_value, useful_life_years, purchase_date, as_of=None):
    purchase_value = to_decimal(purchase_value)
    residual_value = to_decimal(residual_value)
    life = to_decimal(useful_life_years)

    annual = (purchase_value - residual_value) / life
    elapsed = min(years_elapsed(purchase_date, as_of), life)
    return max(ZERO, annual * elapsed)


def calculate_depreciation(purchase_value, residual_value, useful_life_years, purchase_date, as_of=None):
    """Accumulated depreciation as of `as_of`, rounded to cents."""
    depreciation = _accumulated_depreciation(
        purchase_value, residual_value, useful_life_years, purchase_date, as_of
    )
    return depreciation.quantize(CENTS, rounding=ROUND_HALF_UP)


def calculate_book_value(purchase_value, residual_value, useful_life_years, purchase_date, as_of=None):
    """Book value as of `as_of`, never below the residual value."""
    depreciation = calculate_depreciation(
        purchase_value, residual_value, useful_life_years, purchase_date, as_of
    )
    # Derived from the rounded depreciation so book + depreciation == purchase value
    book_value = max(to_decimal(residual_value), to_decimal(purchase_value) - depreciation)
    return book_value.quantize(CENTS, rounding=ROUND_HALF_UP)


def depreciation_ratio(useful_life_years, purchase_date, as_of=None):
    """Share of the useful life already consumed (1.0 == fully depreciated, may exceed 1)."""
    return years_elapsed(purchase_date, as_of) / to_decimal(useful_life_years)


def depreciation_summary(purchase_value, residual_value, useful_life_years, purchase_date, as_of=None):
    """All depreciation figures of one asset, as used by the depreciation endpoint."""
    purchase_value = to_decimal(purchase_value)
    residual_value = to_decimal(residual_value)
    life = to_decimal(useful_life_years)
    elapsed = years_elapsed(purchase_date, as_of)

    return {
        'purchase_value': purchase_value.quantize(CENTS),
        'residual_value': residual_value.quantize(CENTS),
        'useful_life_years': int(life),
        'annual_depreciation': ((purchase_value - residual_value) / life).quantize(CENTS, rounding=ROUND_HALF_UP),
        'years_elapsed': max(ZERO, elapsed).quantize(CENTS, rounding=ROUND_HALF_UP),
        'accumulated_depreciation': calculate_depreciation(
            purchase_value, residual_value, life, purchase_date, as_of
        ),
        'book_value': calculate_book_value(
            purchase_value, residual_value, life, purchase_date, as_of
        ),
        'depreciation_ratio': min(max(ZERO, elapsed / life), Decimal('1')).quantize(
            Decimal('0.0001'), rounding=ROUND_HALF_UP
        ),
        'fully_depreciated': elapsed >= life,
    }
