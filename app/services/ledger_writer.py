"""
Ledger writer: the bookkeeping projection of a registered payment.

For every debt update that succeeded, three records are written, each on its
own and each allowed to fail without touching the others:

1. PaymentRecord  - the payment itself, with its canonical USD value
2. LedgerMovement - general-ledger entry against the cost/income account
3. CashMovement   - cash-box effect in the payment currency

None of these failures reach the caller. The debt balance is the source of
truth; these records are a reporting projection that may lag or miss.
"""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional, Tuple

from app.core.config import settings
from app.models.base import CounterpartyKind, Currency
from app.models.cash import CashMovement, CashMovementCategory, CashMovementType
from app.models.counterparty import Counterparty
from app.models.debt import Debt
from app.models.ledger import LedgerMovement, LedgerMovementType
from app.models.payment import PaymentDirection, PaymentRecord, PaymentStatus
from app.repositories.account_repo import AccountRepository
from app.repositories.counterparty_repo import OperationRepository
from app.repositories.exchange_rate_repo import ExchangeRateRepository
from app.repositories.ledger_repo import LedgerRepository
from app.repositories.payment_repo import CashRepository, PaymentRepository
from app.services.currency import has_usable_rate, to_ars_equivalent, to_payment_currency
from app.services.outcomes import WriteResult

logger = logging.getLogger(__name__)

PAYMENT_STEP = "payment_record"
LEDGER_STEP = "ledger_movement"
CASH_STEP = "cash_movement"


@dataclass(frozen=True)
class PaymentContext:
    """Batch-level facts shared by every item of a bulk payment."""

    counterparty: Counterparty
    debt_currency: Currency
    payment_currency: Currency
    exchange_rate: Optional[Decimal]
    payment_date: date
    receipt_number: Optional[str] = None
    notes: Optional[str] = None
    created_by: Optional[str] = None

    @property
    def reference(self) -> Optional[str]:
        if self.receipt_number:
            return f"Receipt: {self.receipt_number}"
        return self.notes or None


@dataclass(frozen=True)
class BookingProfile:
    """How a payment is booked, depending on who the counterparty is."""

    direction: PaymentDirection
    movement_type: LedgerMovementType
    cash_type: CashMovementType
    cash_category: CashMovementCategory
    account_code: str
    preposition: str


def booking_profile(kind: CounterpartyKind) -> BookingProfile:
    if kind == CounterpartyKind.OPERATOR:
        return BookingProfile(
            direction=PaymentDirection.EXPENSE,
            movement_type=LedgerMovementType.OPERATOR_PAYMENT,
            cash_type=CashMovementType.EXPENSE,
            cash_category=CashMovementCategory.OPERATOR_PAYMENT,
            account_code=settings.OPERATOR_COST_ACCOUNT_CODE,
            preposition="to",
        )
    return BookingProfile(
        direction=PaymentDirection.INCOME,
        movement_type=LedgerMovementType.INCOME,
        cash_type=CashMovementType.INCOME,
        cash_category=CashMovementCategory.SALE,
        account_code=settings.CUSTOMER_INCOME_ACCOUNT_CODE,
        preposition="from",
    )


class LedgerWriter:
    """Writes the payment, ledger and cash records for one paid item."""

    def __init__(
        self,
        accounts: AccountRepository,
        ledger: LedgerRepository,
        payments: PaymentRepository,
        cash: CashRepository,
        operations: OperationRepository,
        exchange_rates: ExchangeRateRepository,
    ):
        self.accounts = accounts
        self.ledger = ledger
        self.payments = payments
        self.cash = cash
        self.operations = operations
        self.exchange_rates = exchange_rates

    async def write_payment(
        self,
        context: PaymentContext,
        debt: Debt,
        related_entity_id: Optional[str],
        amount: Decimal,
        amount_usd: Decimal,
    ) -> WriteResult:
        """Register the payment record. Failure is logged, never raised."""
        profile = booking_profile(context.counterparty.kind)
        record = PaymentRecord(
            debt_ref=debt.id,
            related_entity_id=related_entity_id,
            direction=profile.direction,
            payer_kind=context.counterparty.kind,
            method=settings.DEFAULT_PAYMENT_METHOD,
            amount=amount,
            currency=context.debt_currency,
            exchange_rate=context.exchange_rate if context.debt_currency == Currency.ARS else None,
            amount_usd=amount_usd,
            date_paid=context.payment_date,
            date_due=debt.due_date,
            status=PaymentStatus.PAID,
            reference=context.reference,
            created_by=context.created_by,
        )
        try:
            saved = await self.payments.insert_payment(record)
        except Exception:
            logger.exception("Error creating payment record for debt %s", debt.id)
            return WriteResult.failed(PAYMENT_STEP, "payment record insert failed")
        return WriteResult.written(PAYMENT_STEP, saved.id)

    async def write_ledger_effects(
        self,
        context: PaymentContext,
        related_entity_id: Optional[str],
        amount: Decimal,
        payment_id: Optional[str] = None,
    ) -> Tuple[WriteResult, WriteResult]:
        """Write the ledger movement and the cash movement independently."""
        try:
            ledger_result = await self._write_ledger_movement(context, related_entity_id, amount)
        except Exception:
            logger.exception("Error creating ledger movement for %s", related_entity_id)
            ledger_result = WriteResult.failed(LEDGER_STEP, "ledger movement insert failed")

        try:
            cash_result = await self._write_cash_movement(context, related_entity_id, amount, payment_id)
        except Exception:
            logger.exception("Error creating cash movement for %s", related_entity_id)
            cash_result = WriteResult.failed(CASH_STEP, "cash movement insert failed")

        return ledger_result, cash_result

    async def _write_ledger_movement(
        self,
        context: PaymentContext,
        related_entity_id: Optional[str],
        amount: Decimal,
    ) -> WriteResult:
        profile = booking_profile(context.counterparty.kind)

        # Missing chart configuration must not block payment registration
        chart = await self.accounts.get_chart_account_by_code(profile.account_code)
        if chart is None:
            return self._skip(LEDGER_STEP, f"chart account {profile.account_code} not configured")

        account = await self.accounts.get_financial_account_for_chart(chart.id)
        if account is None:
            return self._skip(LEDGER_STEP, f"no active financial account for chart {profile.account_code}")

        rate = await self._rate_for_ars_equivalent(context)
        if context.debt_currency == Currency.USD and rate is None:
            return self._skip(LEDGER_STEP, f"no USD/ARS rate available on {context.payment_date}")

        operation = await self.operations.get(related_entity_id)
        counterparty = context.counterparty
        movement = LedgerMovement(
            type=profile.movement_type,
            concept=self._concept(profile, counterparty, related_entity_id),
            currency=context.debt_currency,
            amount_original=amount,
            exchange_rate=rate if context.debt_currency == Currency.USD else None,
            amount_ars_equivalent=to_ars_equivalent(amount, context.debt_currency, rate),
            method=settings.DEFAULT_LEDGER_METHOD,
            account_id=account.id,
            related_entity_id=related_entity_id,
            seller_id=operation.seller_id if operation else None,
            operator_id=counterparty.id if counterparty.kind == CounterpartyKind.OPERATOR else None,
            customer_id=counterparty.id if counterparty.kind == CounterpartyKind.CUSTOMER else None,
            receipt_number=context.receipt_number,
            notes=context.notes,
            movement_date=context.payment_date,
            created_by=context.created_by,
        )
        saved = await self.ledger.insert_movement(movement)
        return WriteResult.written(LEDGER_STEP, saved.id)

    async def _write_cash_movement(
        self,
        context: PaymentContext,
        related_entity_id: Optional[str],
        amount: Decimal,
        payment_id: Optional[str],
    ) -> WriteResult:
        profile = booking_profile(context.counterparty.kind)
        cash_box = await self.accounts.get_default_cash_box(context.payment_currency)
        if cash_box is None:
            logger.warning(
                "No default %s cash box; recording unassigned cash movement",
                context.payment_currency.value,
            )

        notes = f"Bulk payment {profile.preposition} {context.counterparty.name}"
        if context.receipt_number:
            notes += f" - Receipt: {context.receipt_number}"

        movement = CashMovement(
            cash_box_id=cash_box.id if cash_box else None,
            type=profile.cash_type,
            category=profile.cash_category,
            amount=to_payment_currency(
                amount, context.debt_currency, context.payment_currency, context.exchange_rate
            ),
            currency=context.payment_currency,
            movement_date=context.payment_date,
            payment_ref=payment_id,
            related_entity_id=related_entity_id,
            notes=notes,
            created_by=context.created_by,
        )
        saved = await self.cash.insert_movement(movement)
        return WriteResult.written(CASH_STEP, saved.id)

    async def _rate_for_ars_equivalent(self, context: PaymentContext) -> Optional[Decimal]:
        """Batch rate first, then the rate in force on the payment date."""
        if has_usable_rate(context.exchange_rate):
            return context.exchange_rate
        if context.debt_currency == Currency.ARS:
            return None

        rate = await self.exchange_rates.get_rate(context.payment_date)
        return rate if has_usable_rate(rate) else None

    @staticmethod
    def _concept(profile: BookingProfile, counterparty: Counterparty, related_entity_id: Optional[str]) -> str:
        concept = f"Bulk payment {profile.preposition} {counterparty.name}"
        if related_entity_id:
            concept += f" - Op {related_entity_id[:8]}"
        return concept

    @staticmethod
    def _skip(step: str, reason: str) -> WriteResult:
        logger.warning("Skipping %s: %s", step, reason)
        return WriteResult.skipped(step, reason)
