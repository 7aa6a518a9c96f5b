from typing import List, Optional
from pydantic import BaseModel

from app.schemas.common import JsonAmount
from app.schemas.position import CurrencyAmount, Period


class PartnerShare(BaseModel):
    partner_id: Optional[str] = None
    name: str
    profit_percentage: JsonAmount
    amount_ars: JsonAmount
    amount_usd: JsonAmount


class PartnerDistribution(BaseModel):
    periodo: Period
    resultado: CurrencyAmount
    total_percentage: JsonAmount
    distributions: List[PartnerShare]
    warning: Optional[str] = None
