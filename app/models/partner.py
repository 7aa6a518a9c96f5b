from pydantic import Field

from app.models.base import Money, MongoModel


class Partner(MongoModel):
    name: str
    profit_percentage: Money = Field(ge=0, le=100)
    is_active: bool = True
