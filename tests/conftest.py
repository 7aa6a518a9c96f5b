from datetime import date
from decimal import Decimal
from typing import List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from app.api import deps
from app.core.auth import get_current_user_id
from app.core.exceptions import PersistenceError
from app.main import app
from app.models.account import ChartAccount, ChartCategory, ChartSubcategory, FinancialAccount
from app.models.base import CounterpartyKind, Currency
from app.models.cash import CashBox
from app.models.counterparty import Counterparty, Operation
from app.models.debt import Debt, DebtStatus
from app.models.exchange_rate import ExchangeRate
from app.models.partner import Partner
from app.services.bulk_payment_service import BulkPaymentProcessor
from app.services.ledger_writer import LedgerWriter
from app.services.partner_service import PartnerDistributionCalculator
from app.services.position_service import MonthlyPositionCalculator

TEST_USER_ID = "507f1f77bcf86cd799439011"


def new_id() -> str:
    return str(ObjectId())


class FakeDebtRepository:
    def __init__(self):
        self.debts = {}
        self.failing_ids = set()
        self.updates = []

    def add(self, **fields) -> Debt:
        fields.setdefault("id", new_id())
        fields.setdefault("counterparty_id", new_id())
        fields.setdefault("kind", CounterpartyKind.OPERATOR)
        debt = Debt(**fields)
        self.debts[debt.id] = debt
        return debt

    async def get(self, debt_id: str) -> Optional[Debt]:
        return self.debts.get(debt_id)

    async def update_payment_state(self, debt_id, paid_amount, status, paid_at, previous_paid_amount) -> None:
        if debt_id in self.failing_ids:
            raise PersistenceError(f"Debt {debt_id} was not updated")
        if self.debts[debt_id].paid_amount != previous_paid_amount:
            raise PersistenceError(f"Debt {debt_id} was paid concurrently")
        self.updates.append(debt_id)
        self.debts[debt_id] = self.debts[debt_id].model_copy(
            update={"paid_amount": paid_amount, "status": status, "paid_at": paid_at}
        )

    async def list_pending_due_by(self, cutoff, scope_id=None, kind=CounterpartyKind.OPERATOR) -> List[Debt]:
        return [
            debt for debt in self.debts.values()
            if debt.kind == kind
            and debt.status == DebtStatus.PENDING
            and debt.due_date is not None
            and debt.due_date <= cutoff
            and (scope_id is None or debt.scope_id == scope_id)
        ]


class FakeCounterpartyRepository:
    def __init__(self):
        self.counterparties = {}

    def add(self, name: str, kind: CounterpartyKind = CounterpartyKind.OPERATOR) -> Counterparty:
        counterparty = Counterparty(id=new_id(), name=name, kind=kind)
        self.counterparties[counterparty.id] = counterparty
        return counterparty

    async def get(self, counterparty_id: str) -> Optional[Counterparty]:
        return self.counterparties.get(counterparty_id)


class FakeOperationRepository:
    def __init__(self):
        self.operations = {}

    def add(self, seller_id: Optional[str] = None, scope_id: Optional[str] = None) -> Operation:
        operation = Operation(id=new_id(), seller_id=seller_id, scope_id=scope_id)
        self.operations[operation.id] = operation
        return operation

    async def get(self, operation_id: Optional[str]) -> Optional[Operation]:
        return self.operations.get(operation_id)


class FakeAccountRepository:
    def __init__(self):
        self.charts: List[ChartAccount] = []
        self.accounts: List[FinancialAccount] = []
        self.cash_boxes: List[CashBox] = []

    def add_chart(self, code: str, category: ChartCategory, subcategory: Optional[ChartSubcategory] = None) -> ChartAccount:
        chart = ChartAccount(
            id=new_id(), account_code=code, account_name=code, category=category, subcategory=subcategory
        )
        self.charts.append(chart)
        return chart

    def add_account(self, chart: ChartAccount, currency: Currency, balance="0", scope_id=None) -> FinancialAccount:
        account = FinancialAccount(
            id=new_id(),
            name=f"{chart.account_code} {currency.value}",
            currency=currency,
            chart_account_id=chart.id,
            balance=Decimal(balance),
            scope_id=scope_id,
        )
        self.accounts.append(account)
        return account

    def add_cash_box(self, currency: Currency) -> CashBox:
        box = CashBox(id=new_id(), name=f"Caja {currency.value}", currency=currency, is_default=True)
        self.cash_boxes.append(box)
        return box

    async def get_chart_account_by_code(self, account_code: str) -> Optional[ChartAccount]:
        return next((c for c in self.charts if c.account_code == account_code and c.is_active), None)

    async def get_financial_account_for_chart(self, chart_account_id: str) -> Optional[FinancialAccount]:
        return next(
            (a for a in self.accounts if a.chart_account_id == chart_account_id and a.is_active), None
        )

    async def get_default_cash_box(self, currency: Currency) -> Optional[CashBox]:
        return next(
            (b for b in self.cash_boxes if b.currency == currency and b.is_default and b.is_active), None
        )

    async def list_classified_accounts(self, scope_id: Optional[str] = None):
        charts = {c.id: c for c in self.charts if c.is_active}
        return [
            (account, charts[account.chart_account_id])
            for account in self.accounts
            if account.is_active
            and account.chart_account_id in charts
            and (scope_id is None or account.scope_id in (scope_id, None))
        ]


class FakeAppendOnlyRepository:
    """Shared behaviour of the payment, ledger and cash writers."""

    def __init__(self):
        self.records = []
        self.fail = False

    async def _insert(self, record):
        if self.fail:
            raise PersistenceError("insert failed")
        saved = record.model_copy(update={"id": new_id()})
        self.records.append(saved)
        return saved


class FakePaymentRepository(FakeAppendOnlyRepository):
    async def insert_payment(self, payment):
        return await self._insert(payment)


class FakeCashRepository(FakeAppendOnlyRepository):
    async def insert_movement(self, movement):
        return await self._insert(movement)


class FakeLedgerRepository(FakeAppendOnlyRepository):
    async def insert_movement(self, movement):
        return await self._insert(movement)

    async def list_for_accounts(self, account_ids, date_to, date_from=None):
        return [
            m for m in self.records
            if m.account_id in account_ids
            and m.movement_date <= date_to
            and (date_from is None or m.movement_date >= date_from)
        ]


class FakeExchangeRateRepository:
    def __init__(self):
        self.rates: List[ExchangeRate] = []

    def add(self, rate_date: date, rate: str) -> ExchangeRate:
        record = ExchangeRate(id=new_id(), rate_date=rate_date, rate=Decimal(rate))
        self.rates.append(record)
        return record

    async def get_rate_record(self, on: Optional[date] = None) -> Optional[ExchangeRate]:
        candidates = [r for r in self.rates if on is None or r.rate_date <= on]
        return max(candidates, key=lambda r: r.rate_date, default=None)

    async def get_rate(self, on: Optional[date] = None) -> Optional[Decimal]:
        record = await self.get_rate_record(on)
        return record.rate if record else None


class FakePartnerRepository:
    def __init__(self):
        self.partners: List[Partner] = []

    def add(self, name: str, percentage: str, is_active: bool = True) -> Partner:
        partner = Partner(id=new_id(), name=name, profit_percentage=Decimal(percentage), is_active=is_active)
        self.partners.append(partner)
        return partner

    async def list_active(self) -> List[Partner]:
        return sorted((p for p in self.partners if p.is_active), key=lambda p: p.name)


class InMemoryBooks:
    """All repositories of the engine, kept in memory."""

    def __init__(self):
        self.debts = FakeDebtRepository()
        self.counterparties = FakeCounterpartyRepository()
        self.operations = FakeOperationRepository()
        self.accounts = FakeAccountRepository()
        self.ledger = FakeLedgerRepository()
        self.payments = FakePaymentRepository()
        self.cash = FakeCashRepository()
        self.exchange_rates = FakeExchangeRateRepository()
        self.partners = FakePartnerRepository()

    def ledger_writer(self) -> LedgerWriter:
        return LedgerWriter(
            self.accounts, self.ledger, self.payments, self.cash, self.operations, self.exchange_rates
        )

    def processor(self) -> BulkPaymentProcessor:
        return BulkPaymentProcessor(self.debts, self.counterparties, self.ledger_writer())

    def position_calculator(self, **options) -> MonthlyPositionCalculator:
        return MonthlyPositionCalculator(self.accounts, self.ledger, self.debts, **options)

    def partner_calculator(self) -> PartnerDistributionCalculator:
        return PartnerDistributionCalculator(self.partners, self.position_calculator())

    def configure_chart(self) -> None:
        """Operator cost and customer income accounts, plus a default cash box per currency."""
        costs = self.accounts.add_chart("4.2.01", ChartCategory.RESULTADO, ChartSubcategory.COSTOS)
        income = self.accounts.add_chart("4.1.01", ChartCategory.RESULTADO, ChartSubcategory.INGRESOS)
        self.accounts.add_account(costs, Currency.USD)
        self.accounts.add_account(income, Currency.USD)
        self.accounts.add_cash_box(Currency.ARS)
        self.accounts.add_cash_box(Currency.USD)


@pytest.fixture
def books():
    return InMemoryBooks()


@pytest.fixture
def mock_db():
    """Motor database whose collections are MagicMocks with async methods."""
    db = MagicMock()
    for name in (
        "debts", "operators", "customers", "operations", "chart_of_accounts",
        "financial_accounts", "cash_boxes", "payments", "ledger_movements",
        "cash_movements", "exchange_rates", "partners",
    ):
        collection = MagicMock()
        collection.find_one = AsyncMock(return_value=None)
        collection.insert_one = AsyncMock()
        collection.update_one = AsyncMock()
        setattr(db, name, collection)
    return db


@pytest.fixture
def client(books):
    """Test client wired to in-memory repositories and a fixed user."""
    overrides = {
        deps.get_debt_repository: lambda: books.debts,
        deps.get_counterparty_repository: lambda: books.counterparties,
        deps.get_operation_repository: lambda: books.operations,
        deps.get_account_repository: lambda: books.accounts,
        deps.get_ledger_repository: lambda: books.ledger,
        deps.get_payment_repository: lambda: books.payments,
        deps.get_cash_repository: lambda: books.cash,
        deps.get_partner_repository: lambda: books.partners,
        deps.get_exchange_rate_repository: lambda: books.exchange_rates,
        get_current_user_id: lambda: TEST_USER_ID,
    }
    app.dependency_overrides.update(overrides)
    try:
        yield TestClient(app, raise_server_exceptions=False)
    finally:
        app.dependency_overrides.clear()
