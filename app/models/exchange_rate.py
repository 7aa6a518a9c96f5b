from typing import Optional

from app.models.base import Currency, Money, MongoModel, StoredDate


class ExchangeRate(MongoModel):
    """ARS paid per USD on ``rate_date``."""
    rate_date: StoredDate
    from_currency: Currency = Currency.USD
    to_currency: Currency = Currency.ARS
    rate: Money
    source: Optional[str] = None
