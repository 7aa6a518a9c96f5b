"""Response shapes of the monthly position report (Spanish keys are part of the contract)."""

from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field

from app.schemas.common import JsonAmount


class CurrencyAmount(BaseModel):
    ars: JsonAmount = Decimal("0")
    usd: JsonAmount = Decimal("0")


class AssetSection(BaseModel):
    corriente: CurrencyAmount = Field(default_factory=CurrencyAmount)
    no_corriente: CurrencyAmount = Field(default_factory=CurrencyAmount)
    total: CurrencyAmount = Field(default_factory=CurrencyAmount)


class LiabilitySection(AssetSection):
    pass


class EquitySection(BaseModel):
    total: JsonAmount = Decimal("0")


class IncomeStatement(BaseModel):
    """Period result per currency; ``total`` is the blended ARS figure."""
    ingresos: CurrencyAmount = Field(default_factory=CurrencyAmount)
    costos: CurrencyAmount = Field(default_factory=CurrencyAmount)
    gastos: CurrencyAmount = Field(default_factory=CurrencyAmount)
    resultado: CurrencyAmount = Field(default_factory=CurrencyAmount)
    total: JsonAmount = Decimal("0")


class BalanceCheck(BaseModel):
    balanceado: bool
    diferencia: JsonAmount


class Period(BaseModel):
    year: int
    month: int
    scope_id: Optional[str] = None


class MonthlyPosition(BaseModel):
    periodo: Period
    activo: AssetSection
    pasivo: LiabilitySection
    patrimonio_neto: EquitySection
    resultado: IncomeStatement
    verificacion: BalanceCheck
