from motor.motor_asyncio import AsyncIOMotorDatabase

from app.models.cash import CashMovement
from app.models.payment import PaymentRecord
from app.repositories.errors import translate_mongo_errors


class PaymentRepository:
    """Append-only store of payment records."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db.payments

    @translate_mongo_errors
    async def insert_payment(self, payment: PaymentRecord) -> PaymentRecord:
        result = await self.collection.insert_one(payment.to_document())
        return payment.model_copy(update={"id": str(result.inserted_id)})


class CashRepository:
    """Append-only store of cash-box movements. Balances are not touched."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db.cash_movements

    @translate_mongo_errors
    async def insert_movement(self, movement: CashMovement) -> CashMovement:
        result = await self.collection.insert_one(movement.to_document())
        return movement.model_copy(update={"id": str(result.inserted_id)})
