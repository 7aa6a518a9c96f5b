from typing import Optional

from app.models.base import CounterpartyKind, MongoModel


class Counterparty(MongoModel):
    """A customer or an operator the business settles debts with."""
    name: str
    kind: CounterpartyKind


class Operation(MongoModel):
    """The sold service a debt relates to; only the refs the ledger needs."""
    seller_id: Optional[str] = None
    scope_id: Optional[str] = None
