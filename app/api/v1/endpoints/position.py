from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.deps import get_partner_calculator, get_position_calculator
from app.core.auth import get_current_user_id
from app.core.exceptions import BatchValidationError
from app.schemas.partner import PartnerDistribution
from app.schemas.position import MonthlyPosition
from app.services.partner_service import PartnerDistributionCalculator
from app.services.position_service import MonthlyPositionCalculator

router = APIRouter()

@router.get("/monthly-position", response_model=MonthlyPosition)
async def get_monthly_position(
    year: int = Query(..., ge=1900, le=9999),
    month: int = Query(...),
    scope_id: Optional[str] = None,
    calculator: MonthlyPositionCalculator = Depends(get_position_calculator),
    current_user_id: str = Depends(get_current_user_id)
):
    """Balance sheet and income statement for a month"""
    try:
        return await calculator.calculate(year, month, scope_id)
    except BatchValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.get("/partner-distribution", response_model=PartnerDistribution)
async def get_partner_distribution(
    year: int = Query(..., ge=1900, le=9999),
    month: int = Query(...),
    scope_id: Optional[str] = None,
    calculator: PartnerDistributionCalculator = Depends(get_partner_calculator),
    current_user_id: str = Depends(get_current_user_id)
):
    """Split the month's result between the active partners"""
    try:
        return await calculator.calculate(year, month, scope_id)
    except BatchValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
