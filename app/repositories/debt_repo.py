"""
DebtRepository - Outstanding customer and operator obligations.

Only the payment state of a debt (paid amount, status, paid date) is written
here. Creating and deleting debts belongs to the scheduling side.
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import List, Optional
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.core.exceptions import PersistenceError
from app.models.base import CounterpartyKind, as_object_id, normalize_id, to_bson
from app.models.debt import Debt, DebtStatus
from app.repositories.errors import translate_mongo_errors


class DebtRepository:
    """Repository for debts (customer receivables and operator payables)."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db.debts

    @translate_mongo_errors
    async def get(self, debt_id: str) -> Optional[Debt]:
        """Get a debt by id; None when unknown or malformed."""
        oid = as_object_id(debt_id)
        if oid is None:
            return None

        doc = await self.collection.find_one({"_id": oid})
        if not doc:
            return None
        return Debt(**normalize_id(doc))

    @translate_mongo_errors
    async def update_payment_state(
        self,
        debt_id: str,
        paid_amount: Decimal,
        status: DebtStatus,
        paid_at: Optional[date],
        previous_paid_amount: Decimal,
    ) -> None:
        """
        Persist a new paid amount and status.

        The update only applies while the stored paid amount is still
        ``previous_paid_amount``. Raises PersistenceError when the debt vanished
        or was paid by someone else between read and write.
        """
        expected_paid = to_bson(previous_paid_amount)
        if previous_paid_amount == 0:
            # Debts never paid may have no paid_amount stored yet
            expected_paid = {"$in": [expected_paid, 0, None]}

        result = await self.collection.update_one(
            {"_id": as_object_id(debt_id), "paid_amount": expected_paid},
            {
                "$set": to_bson({
                    "paid_amount": paid_amount,
                    "status": status,
                    "paid_at": paid_at,
                    "updated_at": datetime.now(timezone.utc),
                })
            }
        )
        if result.matched_count == 0:
            raise PersistenceError(f"Debt {debt_id} was not updated")

    @translate_mongo_errors
    async def list_pending_due_by(
        self,
        cutoff: date,
        scope_id: Optional[str] = None,
        kind: CounterpartyKind = CounterpartyKind.OPERATOR,
    ) -> List[Debt]:
        """Pending debts of ``kind`` due on or before ``cutoff``."""
        query = to_bson({
            "kind": kind,
            "status": DebtStatus.PENDING,
            "due_date": {"$lte": cutoff},
        })
        if scope_id is not None:
            query["scope_id"] = scope_id

        docs = await self.collection.find(query).to_list(None)
        return [Debt(**normalize_id(doc)) for doc in docs]
