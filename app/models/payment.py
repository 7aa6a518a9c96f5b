from decimal import Decimal
from enum import Enum
from typing import Optional
from pydantic import Field

from app.models.base import CounterpartyKind, Currency, Money, MongoModel, StoredDate


class PaymentDirection(str, Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"


class PaymentRecord(MongoModel):
    """
    A registered payment against a debt.

    ``amount_usd`` is fixed when the record is written and is the value every
    aggregation reads; ``exchange_rate`` is null for USD-native payments.
    """
    debt_ref: str
    related_entity_id: Optional[str] = None
    direction: PaymentDirection
    payer_kind: CounterpartyKind
    method: str

    amount: Money
    currency: Currency
    exchange_rate: Optional[Money] = None
    amount_usd: Money = Field(default=Decimal("0"))

    date_paid: StoredDate
    date_due: Optional[StoredDate] = None
    status: PaymentStatus = PaymentStatus.PAID
    reference: Optional[str] = None
    created_by: Optional[str] = None
