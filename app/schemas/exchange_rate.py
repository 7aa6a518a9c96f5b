from datetime import date
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from app.models.base import Currency
from app.schemas.common import JsonAmount


class ExchangeRateResponse(BaseModel):
    """Exchange rate response."""
    id: str = Field(validation_alias="_id", serialization_alias="id")
    rate_date: date
    from_currency: Currency
    to_currency: Currency
    rate: JsonAmount
    source: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)
