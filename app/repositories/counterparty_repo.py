from typing import Optional
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.models.base import CounterpartyKind, as_object_id, normalize_id
from app.models.counterparty import Counterparty, Operation
from app.repositories.errors import translate_mongo_errors


class CounterpartyRepository:
    """Operators and customers, looked up by id across both collections."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collections = {
            CounterpartyKind.OPERATOR: db.operators,
            CounterpartyKind.CUSTOMER: db.customers,
        }

    @translate_mongo_errors
    async def get(self, counterparty_id: str) -> Optional[Counterparty]:
        oid = as_object_id(counterparty_id)
        if oid is None:
            return None

        for kind, collection in self.collections.items():
            doc = await collection.find_one({"_id": oid}, {"name": 1})
            if doc:
                doc = normalize_id(doc)
                return Counterparty(id=doc["_id"], name=doc.get("name", ""), kind=kind)
        return None


class OperationRepository:
    """Read-only view of operations (the entities debts relate to)."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db.operations

    @translate_mongo_errors
    async def get(self, operation_id: Optional[str]) -> Optional[Operation]:
        oid = as_object_id(operation_id) if operation_id else None
        if oid is None:
            return None

        doc = await self.collection.find_one({"_id": oid}, {"seller_id": 1, "scope_id": 1})
        if not doc:
            return None
        # Refs written by other services may still be ObjectIds
        for ref in ("seller_id", "scope_id"):
            if doc.get(ref) is not None:
                doc[ref] = str(doc[ref])
        return Operation(**normalize_id(doc))
