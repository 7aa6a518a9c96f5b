from typing import List
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.models.base import normalize_id
from app.models.partner import Partner
from app.repositories.errors import translate_mongo_errors


class PartnerRepository:
    """Business partners sharing the period result."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db.partners

    @translate_mongo_errors
    async def list_active(self) -> List[Partner]:
        docs = await self.collection.find({"is_active": True}).sort("name", 1).to_list(None)
        return [Partner(**normalize_id(doc)) for doc in docs]
