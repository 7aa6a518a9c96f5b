from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_exchange_rate_repository
from app.core.auth import get_current_user_id
from app.repositories.exchange_rate_repo import ExchangeRateRepository
from app.schemas.exchange_rate import ExchangeRateResponse

router = APIRouter()

@router.get("", response_model=ExchangeRateResponse)
async def get_exchange_rate(
    on: Optional[date] = None,
    rates: ExchangeRateRepository = Depends(get_exchange_rate_repository),
    current_user_id: str = Depends(get_current_user_id)
):
    """USD→ARS rate in force on a date (latest when omitted)"""
    record = await rates.get_rate_record(on)
    if not record:
        raise HTTPException(status_code=404, detail="Exchange rate not found")
    return record
