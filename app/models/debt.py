"""
Debt model - Outstanding obligations between the business and its counterparties.

A debt is either owed by a customer to the business or owed by the business
to an operator. It is scheduled elsewhere and only its paid amount and status
move here.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional
from pydantic import Field

from app.models.base import CounterpartyKind, Currency, Money, MongoModel, StoredDate


class DebtStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"


class Debt(MongoModel):
    """
    Obligation of ``total_amount`` in ``currency``.

    Invariants:
    - paid_amount <= total_amount
    - status = PAID iff paid_amount >= total_amount
    """
    kind: Optional[CounterpartyKind] = None  # Absent on debts scheduled before kinds existed
    counterparty_id: Optional[str] = None
    related_entity_id: Optional[str] = None  # Operation the debt belongs to
    scope_id: Optional[str] = None           # Agency

    total_amount: Money
    paid_amount: Money = Field(default=Decimal("0"))
    currency: Currency

    status: DebtStatus = DebtStatus.PENDING
    due_date: Optional[StoredDate] = None
    paid_at: Optional[StoredDate] = None

    def pending_amount(self) -> Decimal:
        """How much remains unpaid."""
        return self.total_amount - self.paid_amount

    def is_fully_paid(self) -> bool:
        return self.paid_amount >= self.total_amount
