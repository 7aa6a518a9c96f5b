"""
LedgerRepository - General-ledger movements.

Movements are appended by the ledger writer and read back by the monthly
position calculator, either cumulatively (balances as of a cut-off) or for a
date window (income statement).
"""

from datetime import date
from typing import List, Optional
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.models.base import normalize_id, to_bson
from app.models.ledger import LedgerMovement
from app.repositories.errors import translate_mongo_errors


class LedgerRepository:
    """Repository for ledger movements."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db.ledger_movements

    @translate_mongo_errors
    async def insert_movement(self, movement: LedgerMovement) -> LedgerMovement:
        """Insert a movement and return it with its id."""
        result = await self.collection.insert_one(movement.to_document())
        return movement.model_copy(update={"id": str(result.inserted_id)})

    @translate_mongo_errors
    async def list_for_accounts(
        self,
        account_ids: List[str],
        date_to: date,
        date_from: Optional[date] = None,
    ) -> List[LedgerMovement]:
        """Movements of the given accounts dated in ``[date_from, date_to]``."""
        if not account_ids:
            return []

        date_filter = {"$lte": date_to}
        if date_from is not None:
            date_filter["$gte"] = date_from

        docs = await self.collection.find(to_bson({
            "account_id": {"$in": account_ids},
            "movement_date": date_filter,
        })).sort("movement_date", 1).to_list(None)
        return [LedgerMovement(**normalize_id(doc)) for doc in docs]
