from decimal import Decimal
from enum import Enum
from typing import Optional
from pydantic import Field

from app.models.base import Currency, Money, MongoModel


class ChartCategory(str, Enum):
    ACTIVO = "ACTIVO"
    PASIVO = "PASIVO"
    PATRIMONIO_NETO = "PATRIMONIO_NETO"
    RESULTADO = "RESULTADO"


class ChartSubcategory(str, Enum):
    CORRIENTE = "CORRIENTE"
    NO_CORRIENTE = "NO_CORRIENTE"
    INGRESOS = "INGRESOS"
    COSTOS = "COSTOS"
    GASTOS = "GASTOS"


class ChartAccount(MongoModel):
    """Chart-of-accounts entry, e.g. 4.2.01 Operator costs."""
    account_code: str
    account_name: str
    category: ChartCategory
    subcategory: Optional[ChartSubcategory] = None
    is_active: bool = True

    def is_current(self) -> bool:
        return self.subcategory != ChartSubcategory.NO_CORRIENTE


class FinancialAccount(MongoModel):
    """
    A cash or bank bucket, optionally bound to a chart entry.

    ``balance`` is the opening balance in the account currency; it is kept by
    the balance-recalculation job and never written here.
    """
    name: str = ""
    currency: Currency
    chart_account_id: Optional[str] = None
    balance: Money = Field(default=Decimal("0"))
    scope_id: Optional[str] = None
    is_active: bool = True
