"""
Typed outcomes for the bulk payment fold.

Each write step reports a WriteResult; each item reports an ItemOutcome.
Only the debt update decides whether an item succeeded; secondary write
results travel alongside for logging.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import List, Optional, Tuple

from app.core.exceptions import LedgerError, SoftDegradeError


class WriteStatus(str, Enum):
    WRITTEN = "written"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class WriteResult:
    """Result of one side-effect write (payment, ledger movement, cash movement)."""

    step: str
    status: WriteStatus
    record_id: Optional[str] = None
    error: Optional[SoftDegradeError] = None

    @classmethod
    def written(cls, step: str, record_id: Optional[str]) -> "WriteResult":
        return cls(step=step, status=WriteStatus.WRITTEN, record_id=record_id)

    @classmethod
    def skipped(cls, step: str, reason: str) -> "WriteResult":
        return cls(step=step, status=WriteStatus.SKIPPED, error=SoftDegradeError(reason))

    @classmethod
    def failed(cls, step: str, reason: str) -> "WriteResult":
        return cls(step=step, status=WriteStatus.FAILED, error=SoftDegradeError(reason))

    @property
    def ok(self) -> bool:
        return self.status == WriteStatus.WRITTEN

    @property
    def reason(self) -> Optional[str]:
        return str(self.error) if self.error else None


@dataclass(frozen=True)
class ItemOutcome:
    """Result of applying one payment item to its debt."""

    debt_id: Optional[str]
    related_entity_id: Optional[str]
    amount: Optional[Decimal]
    error: Optional[LedgerError] = None
    writes: Tuple[WriteResult, ...] = ()

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def rejected(cls, debt_id, related_entity_id, amount, error: LedgerError) -> "ItemOutcome":
        return cls(debt_id=debt_id, related_entity_id=related_entity_id, amount=amount, error=error)


@dataclass
class BatchFold:
    """Accumulator for the sequential fold over a batch."""

    successes: List[ItemOutcome] = field(default_factory=list)
    failures: List[ItemOutcome] = field(default_factory=list)

    def add(self, outcome: ItemOutcome) -> "BatchFold":
        if outcome.ok:
            self.successes.append(outcome)
        else:
            self.failures.append(outcome)
        return self

    @property
    def errors(self) -> List[str]:
        return [str(outcome.error) for outcome in self.failures]
