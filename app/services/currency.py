"""
ARS/USD conversion at a caller-supplied rate.

The rate is always expressed as ARS per USD. Functions here are pure and never
look rates up; callers decide where a rate comes from.
"""

from decimal import Decimal
from typing import Iterable, Optional

from app.core.exceptions import InvalidExchangeRate
from app.models.base import Currency

ZERO = Decimal("0")


def has_usable_rate(rate: Optional[Decimal]) -> bool:
    return rate is not None and rate > 0


def _require_rate(rate: Optional[Decimal], from_currency: Currency, to_currency: Currency) -> Decimal:
    if not has_usable_rate(rate):
        raise InvalidExchangeRate(
            f"Exchange rate must be greater than zero to convert {from_currency.value} to {to_currency.value}"
        )
    return rate


def to_payment_currency(
    amount: Decimal,
    from_currency: Currency,
    to_currency: Currency,
    rate: Optional[Decimal] = None,
) -> Decimal:
    """
    Convert ``amount`` from the debt currency into the payment currency.

    Same currency is the identity and ignores ``rate``. ARS→USD divides,
    USD→ARS multiplies. Crossing currencies without a rate > 0 raises
    InvalidExchangeRate.
    """
    if from_currency == to_currency:
        return amount

    rate = _require_rate(rate, from_currency, to_currency)
    if from_currency == Currency.ARS:
        return amount / rate
    return amount * rate


def to_usd_equivalent(amount: Decimal, currency: Currency, rate: Optional[Decimal] = None) -> Decimal:
    """
    Canonical USD value of ``amount``.

    An ARS amount without a usable rate is worth 0 USD: aggregations still need
    a number, and a zero is visible where a guessed rate would not be.
    """
    if currency == Currency.USD:
        return amount
    if not has_usable_rate(rate):
        return ZERO
    return amount / rate


def to_ars_equivalent(amount: Decimal, currency: Currency, rate: Optional[Decimal] = None) -> Decimal:
    """ARS value of ``amount``; a USD amount needs a rate > 0."""
    if currency == Currency.ARS:
        return amount
    return amount * _require_rate(rate, Currency.USD, Currency.ARS)


def convert_total(
    amounts: Iterable[Decimal],
    from_currency: Currency,
    to_currency: Currency,
    rate: Optional[Decimal] = None,
) -> Decimal:
    """Sum first, then convert once, so per-item rounding never compounds."""
    total = sum(amounts, ZERO)
    return to_payment_currency(total, from_currency, to_currency, rate)
