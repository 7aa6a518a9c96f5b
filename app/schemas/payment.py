from datetime import date
from decimal import Decimal
from typing import List, Literal, Optional
from pydantic import BaseModel, Field

from app.models.base import Currency
from app.schemas.common import JsonAmount


class BulkPaymentItem(BaseModel):
    """
    One payment instruction inside a batch.

    Fields are optional: a missing amount or debt id is reported as an item
    error in the response, not as a rejected request.
    """
    debt_id: Optional[str] = None
    related_entity_id: Optional[str] = None
    amount: Optional[Decimal] = None


class BulkPaymentRequest(BaseModel):
    """Request body to pay several debts of one counterparty at once."""
    counterparty_id: Optional[str] = None
    debt_currency: Currency
    payment_currency: Currency
    exchange_rate: Optional[Decimal] = None
    receipt_number: Optional[str] = None
    payment_date: Optional[date] = None
    notes: Optional[str] = None
    items: List[BulkPaymentItem] = Field(default_factory=list)


class BulkPaymentItemResult(BaseModel):
    debt_id: str
    related_entity_id: Optional[str] = None
    amount: JsonAmount
    status: Literal["success"] = "success"


class BulkPaymentSummary(BaseModel):
    counterparty: str
    total_debt_amount: JsonAmount
    debt_currency: Currency
    total_payment_amount: JsonAmount
    payment_currency: Currency
    exchange_rate: Optional[JsonAmount] = None
    payments_count: int


class BulkPaymentResponse(BaseModel):
    success: bool = True
    message: str
    results: List[BulkPaymentItemResult]
    errors: Optional[List[str]] = None
    summary: BulkPaymentSummary
