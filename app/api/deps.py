"""Request-scoped repositories and services, wired over the Motor database."""

from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.db.mongo import get_db
from app.repositories.account_repo import AccountRepository
from app.repositories.counterparty_repo import CounterpartyRepository, OperationRepository
from app.repositories.debt_repo import DebtRepository
from app.repositories.exchange_rate_repo import ExchangeRateRepository
from app.repositories.ledger_repo import LedgerRepository
from app.repositories.partner_repo import PartnerRepository
from app.repositories.payment_repo import CashRepository, PaymentRepository
from app.services.bulk_payment_service import BulkPaymentProcessor
from app.services.ledger_writer import LedgerWriter
from app.services.partner_service import PartnerDistributionCalculator
from app.services.position_service import MonthlyPositionCalculator


def get_debt_repository(db: AsyncIOMotorDatabase = Depends(get_db)) -> DebtRepository:
    return DebtRepository(db)


def get_counterparty_repository(db: AsyncIOMotorDatabase = Depends(get_db)) -> CounterpartyRepository:
    return CounterpartyRepository(db)


def get_operation_repository(db: AsyncIOMotorDatabase = Depends(get_db)) -> OperationRepository:
    return OperationRepository(db)


def get_account_repository(db: AsyncIOMotorDatabase = Depends(get_db)) -> AccountRepository:
    return AccountRepository(db)


def get_ledger_repository(db: AsyncIOMotorDatabase = Depends(get_db)) -> LedgerRepository:
    return LedgerRepository(db)


def get_payment_repository(db: AsyncIOMotorDatabase = Depends(get_db)) -> PaymentRepository:
    return PaymentRepository(db)


def get_cash_repository(db: AsyncIOMotorDatabase = Depends(get_db)) -> CashRepository:
    return CashRepository(db)


def get_partner_repository(db: AsyncIOMotorDatabase = Depends(get_db)) -> PartnerRepository:
    return PartnerRepository(db)


def get_exchange_rate_repository(db: AsyncIOMotorDatabase = Depends(get_db)) -> ExchangeRateRepository:
    return ExchangeRateRepository(db)


def get_ledger_writer(
    accounts: AccountRepository = Depends(get_account_repository),
    ledger: LedgerRepository = Depends(get_ledger_repository),
    payments: PaymentRepository = Depends(get_payment_repository),
    cash: CashRepository = Depends(get_cash_repository),
    operations: OperationRepository = Depends(get_operation_repository),
    exchange_rates: ExchangeRateRepository = Depends(get_exchange_rate_repository),
) -> LedgerWriter:
    return LedgerWriter(accounts, ledger, payments, cash, operations, exchange_rates)


def get_bulk_payment_processor(
    debts: DebtRepository = Depends(get_debt_repository),
    counterparties: CounterpartyRepository = Depends(get_counterparty_repository),
    ledger_writer: LedgerWriter = Depends(get_ledger_writer),
) -> BulkPaymentProcessor:
    return BulkPaymentProcessor(debts, counterparties, ledger_writer)


def get_position_calculator(
    accounts: AccountRepository = Depends(get_account_repository),
    ledger: LedgerRepository = Depends(get_ledger_repository),
    debts: DebtRepository = Depends(get_debt_repository),
) -> MonthlyPositionCalculator:
    return MonthlyPositionCalculator(accounts, ledger, debts)


def get_partner_calculator(
    partners: PartnerRepository = Depends(get_partner_repository),
    positions: MonthlyPositionCalculator = Depends(get_position_calculator),
) -> PartnerDistributionCalculator:
    return PartnerDistributionCalculator(partners, positions)
