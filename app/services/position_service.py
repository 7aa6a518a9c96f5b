"""
Monthly position: balance sheet, income statement and balance verification.

Balances are taken as of the last day of the month: each account's opening
balance plus every movement dated on or before that day. The income statement
only looks at movements dated inside the month.

Amounts are kept per currency and never converted, except for the blended
result total, which uses the ARS equivalent stored on each movement.
"""

import calendar
import logging
from collections import defaultdict
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Optional, Tuple

from app.core.config import settings
from app.core.exceptions import BatchValidationError
from app.models.account import ChartAccount, ChartCategory, ChartSubcategory, FinancialAccount
from app.models.base import Currency
from app.models.ledger import INFLOW_TYPES, OUTFLOW_TYPES, LedgerMovement, LedgerMovementType
from app.repositories.account_repo import AccountRepository
from app.repositories.debt_repo import DebtRepository
from app.repositories.ledger_repo import LedgerRepository
from app.schemas.position import (
    AssetSection,
    BalanceCheck,
    CurrencyAmount,
    EquitySection,
    IncomeStatement,
    LiabilitySection,
    MonthlyPosition,
    Period,
)
from app.services.currency import ZERO

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")

# Which movement types feed each income-statement line, by chart subcategory
_INCOME_STATEMENT_LINES = {
    ChartSubcategory.INGRESOS: ("ingresos", {LedgerMovementType.INCOME}),
    ChartSubcategory.COSTOS: ("costos", {LedgerMovementType.EXPENSE, LedgerMovementType.OPERATOR_PAYMENT}),
    ChartSubcategory.GASTOS: ("gastos", {LedgerMovementType.EXPENSE}),
}


class Split:
    """Mutable ARS/USD accumulator."""

    def __init__(self):
        self.amounts: Dict[Currency, Decimal] = {Currency.ARS: ZERO, Currency.USD: ZERO}

    def add(self, currency: Currency, amount: Decimal) -> None:
        self.amounts[currency] += amount

    def merge(self, other: "Split") -> None:
        for currency, amount in other.amounts.items():
            self.amounts[currency] += amount

    @property
    def ars(self) -> Decimal:
        return self.amounts[Currency.ARS]

    @property
    def usd(self) -> Decimal:
        return self.amounts[Currency.USD]

    def rounded(self) -> CurrencyAmount:
        return CurrencyAmount(ars=round_money(self.ars), usd=round_money(self.usd))


def round_money(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def month_window(year: int, month: int) -> Tuple[date, date]:
    if not 1 <= month <= 12:
        raise BatchValidationError(f"month must be between 1 and 12, got {month}")
    last = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last)


def signed_amount(category: ChartCategory, movement: LedgerMovement) -> Decimal:
    """
    Effect of a movement on an account balance.

    Liabilities grow with outflows and shrink with inflows; every other
    category does the opposite.
    """
    if movement.type in OUTFLOW_TYPES:
        sign = 1 if category == ChartCategory.PASIVO else -1
    elif movement.type in INFLOW_TYPES:
        sign = -1 if category == ChartCategory.PASIVO else 1
    else:
        return ZERO
    return movement.amount_original * sign


class MonthlyPositionCalculator:
    def __init__(
        self,
        accounts: AccountRepository,
        ledger: LedgerRepository,
        debts: DebtRepository,
        include_pending_debts: Optional[bool] = None,
        tolerance: Optional[Decimal] = None,
    ):
        self.accounts = accounts
        self.ledger = ledger
        self.debts = debts
        self.include_pending_debts = (
            settings.INCLUDE_PENDING_DEBTS_AS_LIABILITIES if include_pending_debts is None else include_pending_debts
        )
        self.tolerance = settings.BALANCE_TOLERANCE if tolerance is None else tolerance

    async def calculate(self, year: int, month: int, scope_id: Optional[str] = None) -> MonthlyPosition:
        first_day, last_day = month_window(year, month)

        classified = await self.accounts.list_classified_accounts(scope_id)
        charts = {account.id: chart for account, chart in classified}
        movements = await self.ledger.list_for_accounts(list(charts), last_day)

        by_account: Dict[str, List[LedgerMovement]] = defaultdict(list)
        for movement in movements:
            by_account[movement.account_id].append(movement)

        activo = {True: Split(), False: Split()}
        pasivo = {True: Split(), False: Split()}
        equity = ZERO

        for account, chart in classified:
            balance = self._account_balance(account, chart, by_account[account.id])
            if chart.category == ChartCategory.ACTIVO:
                activo[chart.is_current()].merge(balance)
            elif chart.category == ChartCategory.PASIVO:
                pasivo[chart.is_current()].merge(balance)
            elif chart.category == ChartCategory.PATRIMONIO_NETO:
                equity += balance.ars

        if self.include_pending_debts:
            pending = await self.debts.list_pending_due_by(last_day, scope_id)
            for debt in pending:
                pasivo[True].add(debt.currency, debt.pending_amount())
            logger.debug("Added %d pending debts to current liabilities", len(pending))

        statement = self._income_statement(
            [m for m in movements if m.movement_date >= first_day],
            charts,
        )

        total_activo = Split()
        total_activo.merge(activo[True])
        total_activo.merge(activo[False])
        total_pasivo = Split()
        total_pasivo.merge(pasivo[True])
        total_pasivo.merge(pasivo[False])

        # Verify on exact figures, round only for output
        diferencia = total_activo.ars - (total_pasivo.ars + equity)
        balanceado = abs(diferencia) < self.tolerance
        if not balanceado:
            logger.warning(
                "Position %04d-%02d (scope %s) out of balance by %s ARS",
                year, month, scope_id, diferencia,
            )

        return MonthlyPosition(
            periodo=Period(year=year, month=month, scope_id=scope_id),
            activo=AssetSection(
                corriente=activo[True].rounded(),
                no_corriente=activo[False].rounded(),
                total=total_activo.rounded(),
            ),
            pasivo=LiabilitySection(
                corriente=pasivo[True].rounded(),
                no_corriente=pasivo[False].rounded(),
                total=total_pasivo.rounded(),
            ),
            patrimonio_neto=EquitySection(total=round_money(equity)),
            resultado=statement,
            verificacion=BalanceCheck(balanceado=balanceado, diferencia=round_money(diferencia)),
        )

    @staticmethod
    def _account_balance(
        account: FinancialAccount,
        chart: ChartAccount,
        movements: List[LedgerMovement],
    ) -> Split:
        balance = Split()
        balance.add(account.currency, account.balance)
        for movement in movements:
            balance.add(movement.currency, signed_amount(chart.category, movement))
        return balance

    @staticmethod
    def _income_statement(
        movements: List[LedgerMovement],
        charts: Dict[str, ChartAccount],
    ) -> IncomeStatement:
        lines = {"ingresos": Split(), "costos": Split(), "gastos": Split()}
        blended = {"ingresos": ZERO, "costos": ZERO, "gastos": ZERO}

        for movement in movements:
            chart = charts.get(movement.account_id)
            if chart is None or chart.category != ChartCategory.RESULTADO:
                continue

            line = _INCOME_STATEMENT_LINES.get(chart.subcategory)
            if line is None or movement.type not in line[1]:
                logger.debug(
                    "Movement %s (%s) on %s does not feed the income statement",
                    movement.id, movement.type.value, chart.account_code,
                )
                continue

            name = line[0]
            lines[name].add(movement.currency, movement.amount_original)
            blended[name] += movement.amount_ars_equivalent

        resultado = Split()
        resultado.merge(lines["ingresos"])
        for name in ("costos", "gastos"):
            resultado.add(Currency.ARS, -lines[name].ars)
            resultado.add(Currency.USD, -lines[name].usd)

        return IncomeStatement(
            ingresos=lines["ingresos"].rounded(),
            costos=lines["costos"].rounded(),
            gastos=lines["gastos"].rounded(),
            resultado=resultado.rounded(),
            total=round_money(blended["ingresos"] - blended["costos"] - blended["gastos"]),
        )
