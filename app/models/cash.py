from enum import Enum
from typing import Optional

from app.models.base import Currency, Money, MongoModel, StoredDate


class CashMovementType(str, Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class CashMovementCategory(str, Enum):
    SALE = "SALE"
    OPERATOR_PAYMENT = "OPERATOR_PAYMENT"


class CashBox(MongoModel):
    name: str
    currency: Currency
    is_default: bool = False
    is_active: bool = True
    scope_id: Optional[str] = None


class CashMovement(MongoModel):
    """Cash or bank effect of a payment, in the payment currency."""
    cash_box_id: Optional[str] = None  # None when no default box exists
    type: CashMovementType
    category: CashMovementCategory
    amount: Money
    currency: Currency
    movement_date: StoredDate
    payment_ref: Optional[str] = None
    related_entity_id: Optional[str] = None
    notes: Optional[str] = None
    created_by: Optional[str] = None
