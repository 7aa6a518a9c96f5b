"""
Ledger model - General-ledger movements used for balance sheet and P&L.

Design principles:
- Append-only: movements are never edited by this service
- Every movement carries an ARS equivalent, whatever its native currency
- Direction is expressed by ``type``; amounts are never negative
"""

from enum import Enum
from typing import Optional

from app.models.base import Currency, Money, MongoModel, StoredDate


class LedgerMovementType(str, Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"
    FX_GAIN = "FX_GAIN"
    FX_LOSS = "FX_LOSS"
    OPERATOR_PAYMENT = "OPERATOR_PAYMENT"


# Movement types that add to an asset and reduce a liability, and vice versa.
INFLOW_TYPES = frozenset({LedgerMovementType.INCOME, LedgerMovementType.FX_GAIN})
OUTFLOW_TYPES = frozenset({
    LedgerMovementType.EXPENSE,
    LedgerMovementType.OPERATOR_PAYMENT,
    LedgerMovementType.FX_LOSS,
})


class LedgerMovement(MongoModel):
    """
    General-ledger entry against one financial account.

    Invariants:
    - amount_original >= 0
    - amount_ars_equivalent is always set (ARS movements: equals amount_original)
    """
    type: LedgerMovementType
    concept: str
    currency: Currency
    amount_original: Money
    exchange_rate: Optional[Money] = None
    amount_ars_equivalent: Money
    method: str = "BANK"

    account_id: str
    related_entity_id: Optional[str] = None
    seller_id: Optional[str] = None
    operator_id: Optional[str] = None
    customer_id: Optional[str] = None

    receipt_number: Optional[str] = None
    notes: Optional[str] = None
    movement_date: StoredDate
    created_by: Optional[str] = None
