from datetime import date
from decimal import Decimal
from typing import Optional
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.models.base import Currency, normalize_id, to_bson
from app.models.exchange_rate import ExchangeRate
from app.repositories.errors import translate_mongo_errors


class ExchangeRateRepository:
    """Historical USD→ARS rates."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db.exchange_rates

    @translate_mongo_errors
    async def get_rate_record(self, on: Optional[date] = None) -> Optional[ExchangeRate]:
        """
        Rate in force on ``on``: the most recent one dated on or before it.

        Without a date, the latest recorded rate.
        """
        query = {
            "from_currency": Currency.USD.value,
            "to_currency": Currency.ARS.value,
        }
        if on is not None:
            query["rate_date"] = to_bson({"$lte": on})

        docs = await self.collection.find(query).sort("rate_date", -1).limit(1).to_list(1)
        if not docs:
            return None
        return ExchangeRate(**normalize_id(docs[0]))

    async def get_rate(self, on: Optional[date] = None) -> Optional[Decimal]:
        record = await self.get_rate_record(on)
        return record.rate if record else None
