from fastapi import APIRouter
from app.api.v1.endpoints import payments, position, exchange_rates

api_router = APIRouter()

api_router.include_router(payments.router, prefix="/accounting", tags=["payments"])
api_router.include_router(position.router, prefix="/accounting", tags=["accounting"])
api_router.include_router(exchange_rates.router, prefix="/exchange-rates", tags=["exchange-rates"])
