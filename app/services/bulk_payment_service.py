"""
Bulk payment processor.

Applies a batch of payments of one counterparty against its debts:

1. Validate the batch as a whole (nothing is touched when it is invalid)
2. Resolve the counterparty
3. Fold over the items in input order; each item updates its debt, then
   hands off to the ledger writer for the bookkeeping records
4. Summarize: totals are summed first and converted once

Only the debt update decides whether an item succeeded.
"""

import logging
from typing import Optional

from app.core.exceptions import (
    BatchValidationError,
    CounterpartyNotFound,
    InvalidExchangeRate,
    ItemValidationError,
    PersistenceError,
)
from app.models.debt import DebtStatus
from app.repositories.counterparty_repo import CounterpartyRepository
from app.repositories.debt_repo import DebtRepository
from app.schemas.payment import (
    BulkPaymentItem,
    BulkPaymentItemResult,
    BulkPaymentRequest,
    BulkPaymentResponse,
    BulkPaymentSummary,
)
from app.services.currency import ZERO, convert_total, has_usable_rate, to_usd_equivalent
from app.services.ledger_writer import LedgerWriter, PaymentContext
from app.services.outcomes import BatchFold, ItemOutcome

logger = logging.getLogger(__name__)


class BulkPaymentProcessor:
    def __init__(
        self,
        debts: DebtRepository,
        counterparties: CounterpartyRepository,
        ledger_writer: LedgerWriter,
    ):
        self.debts = debts
        self.counterparties = counterparties
        self.ledger_writer = ledger_writer

    async def process(
        self,
        request: BulkPaymentRequest,
        created_by: Optional[str] = None,
    ) -> BulkPaymentResponse:
        """
        Register every payment of the batch.

        Raises BatchValidationError or CounterpartyNotFound before any debt is
        touched. Item failures are reported in the response ``errors``.
        """
        self._validate_batch(request)

        counterparty = await self.counterparties.get(request.counterparty_id)
        if counterparty is None:
            raise CounterpartyNotFound(request.counterparty_id)

        context = PaymentContext(
            counterparty=counterparty,
            debt_currency=request.debt_currency,
            payment_currency=request.payment_currency,
            exchange_rate=request.exchange_rate,
            payment_date=request.payment_date,
            receipt_number=request.receipt_number,
            notes=request.notes,
            created_by=created_by,
        )

        fold = BatchFold()
        for item in request.items:
            fold.add(await self._process_item(context, item))

        logger.info(
            "Bulk payment for %s processed: %d successful, %d errors",
            counterparty.name, len(fold.successes), len(fold.failures),
        )
        return self._build_response(request, counterparty.name, fold)

    @staticmethod
    def _validate_batch(request: BulkPaymentRequest) -> None:
        if not request.counterparty_id:
            raise BatchValidationError("counterparty_id is required")
        if not request.items:
            raise BatchValidationError("At least one payment item is required")
        if request.payment_date is None:
            raise BatchValidationError("payment_date is required")
        if request.debt_currency != request.payment_currency and not has_usable_rate(request.exchange_rate):
            raise InvalidExchangeRate(
                "exchange_rate must be greater than zero when debt and payment currencies differ"
            )

    async def _process_item(self, context: PaymentContext, item: BulkPaymentItem) -> ItemOutcome:
        debt_id = item.debt_id
        amount = item.amount

        def reject(error) -> ItemOutcome:
            logger.warning("Payment item rejected: %s", error)
            return ItemOutcome.rejected(debt_id, item.related_entity_id, amount, error)

        if not debt_id or amount is None or amount <= 0:
            return reject(ItemValidationError(f"Invalid payment: {debt_id}"))

        try:
            debt = await self.debts.get(debt_id)
            if debt is None:
                return reject(ItemValidationError(f"Debt not found: {debt_id}"))
            paid = debt.model_copy(update={"paid_amount": debt.paid_amount + amount})
        except Exception:
            # Unreadable stored debts fail only their own item
            logger.exception("Error loading debt %s", debt_id)
            return reject(PersistenceError(f"Error processing payment: {debt_id}"))

        if paid.paid_amount > paid.total_amount:
            return reject(ItemValidationError(f"Amount exceeds pending balance for: {debt_id}"))

        status = DebtStatus.PAID if paid.is_fully_paid() else DebtStatus.PENDING
        paid_at = context.payment_date if status == DebtStatus.PAID else None
        try:
            await self.debts.update_payment_state(
                debt_id, paid.paid_amount, status, paid_at, previous_paid_amount=debt.paid_amount
            )
        except PersistenceError:
            logger.exception("Error updating debt %s", debt_id)
            return reject(PersistenceError(f"Error updating debt: {debt_id}"))

        # From here on the item has succeeded; bookkeeping writes only degrade
        amount_usd = to_usd_equivalent(amount, context.debt_currency, context.exchange_rate)
        payment = await self.ledger_writer.write_payment(
            context, debt, item.related_entity_id, amount, amount_usd
        )
        ledger, cash = await self.ledger_writer.write_ledger_effects(
            context, item.related_entity_id, amount, payment.record_id
        )

        writes = (payment, ledger, cash)
        for write in writes:
            if not write.ok:
                logger.warning(
                    "Debt %s paid but %s was %s: %s",
                    debt_id, write.step, write.status.value, write.reason,
                )

        return ItemOutcome(
            debt_id=debt_id,
            related_entity_id=item.related_entity_id,
            amount=amount,
            writes=writes,
        )

    @staticmethod
    def _build_response(request: BulkPaymentRequest, counterparty_name: str, fold: BatchFold) -> BulkPaymentResponse:
        requested = [item.amount for item in request.items if item.amount is not None]
        total_debt_amount = sum(requested, ZERO)
        total_payment_amount = convert_total(
            requested, request.debt_currency, request.payment_currency, request.exchange_rate
        )

        results = [
            BulkPaymentItemResult(
                debt_id=outcome.debt_id,
                related_entity_id=outcome.related_entity_id,
                amount=outcome.amount,
            )
            for outcome in fold.successes
        ]

        return BulkPaymentResponse(
            success=True,
            message=f"{len(results)} payment(s) processed successfully",
            results=results,
            errors=fold.errors or None,
            summary=BulkPaymentSummary(
                counterparty=counterparty_name,
                total_debt_amount=total_debt_amount,
                debt_currency=request.debt_currency,
                total_payment_amount=total_payment_amount,
                payment_currency=request.payment_currency,
                exchange_rate=request.exchange_rate or None,
                payments_count=len(results),
            ),
        )
