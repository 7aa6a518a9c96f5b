from datetime import date, datetime, time, timezone
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Optional

from bson import Decimal128, ObjectId
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _from_decimal128(value: Any) -> Any:
    if isinstance(value, Decimal128):
        return value.to_decimal()
    return value


def _from_stored_datetime(value: Any) -> Any:
    # Dates are persisted as midnight datetimes; Mongo has no date type.
    if isinstance(value, datetime):
        return value.date()
    return value


Money = Annotated[Decimal, BeforeValidator(_from_decimal128)]
StoredDate = Annotated[date, BeforeValidator(_from_stored_datetime)]


class Currency(str, Enum):
    ARS = "ARS"
    USD = "USD"


class CounterpartyKind(str, Enum):
    CUSTOMER = "CUSTOMER"
    OPERATOR = "OPERATOR"


def to_bson(value: Any) -> Any:
    """Encode a dumped model value into types Motor can store."""
    if isinstance(value, dict):
        return {key: to_bson(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_bson(item) for item in value]
    if isinstance(value, Decimal):
        return Decimal128(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    return value


def normalize_id(doc: dict) -> dict:
    """Replace a raw ObjectId ``_id`` with its string form."""
    if doc is not None and "_id" in doc:
        doc["_id"] = str(doc["_id"])
    return doc


def as_object_id(value: str) -> Optional[ObjectId]:
    """Parse an identifier, returning None for malformed input."""
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return None


class MongoModel(BaseModel):
    id: Optional[str] = Field(default=None, validation_alias="_id", serialization_alias="_id")
    created_at: datetime = Field(default_factory=_utcnow)

    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
        from_attributes=True
    )

    def to_document(self) -> dict:
        """Dump for insertion; the id is assigned by MongoDB."""
        return to_bson(self.model_dump(exclude={"id"}))
