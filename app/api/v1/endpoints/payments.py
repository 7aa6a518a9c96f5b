import logging
from fastapi import APIRouter, Depends, HTTPException, status

from app.api.deps import get_bulk_payment_processor
from app.core.auth import get_current_user_id
from app.core.exceptions import BatchValidationError, CounterpartyNotFound
from app.schemas.payment import BulkPaymentRequest, BulkPaymentResponse
from app.services.bulk_payment_service import BulkPaymentProcessor

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/bulk-payments", response_model=BulkPaymentResponse)
async def create_bulk_payment(
    payment_in: BulkPaymentRequest,
    processor: BulkPaymentProcessor = Depends(get_bulk_payment_processor),
    current_user_id: str = Depends(get_current_user_id)
):
    """
    Pay several debts of one customer or operator in a single batch.

    Item failures are reported in ``errors`` with a 200; only an invalid
    batch (400) or an unknown counterparty (404) rejects the request.
    """
    try:
        return await processor.process(payment_in, created_by=current_user_id)
    except CounterpartyNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except BatchValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
