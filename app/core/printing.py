"""
Print workflow: deciding what may be printed, locking what was printed,
and the explicit unlock that returns a printed cheque to editing.

Printing is two steps. ``mark_printed`` validates the working set and splits
the approved cheques into printable and excluded ones; ``confirm_print``
applies the print to the printable ones once the user confirms.
"""

import logging
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Iterable

from app.core.exceptions import LockedError, ValidationError
from app.models.cheque import Cheque, ChequeStatus
from app.models.document import Document

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExcludedCheque:
    """An approved cheque held back because it lacks signatures."""

    cheque: Cheque

    @property
    def shortfall(self) -> int:
        return self.cheque.signature_shortfall


@dataclass
class PrintPlan:
    printable: list[Cheque] = field(default_factory=list)
    excluded: list[ExcludedCheque] = field(default_factory=list)

    @property
    def total_amount(self) -> Decimal:
        return sum((c.amount for c in self.printable), Decimal("0"))


@dataclass
class PrintResult:
    printed: list[Cheque] = field(default_factory=list)
    locked_document_ids: list[int] = field(default_factory=list)
    documents: list[Document] = field(default_factory=list)


def mark_printed(cheques: Iterable[Cheque]) -> PrintPlan:
    """Split the approved, unlocked cheques of the working set for printing.

    Raises:
        ValidationError: a declined cheque anywhere in the working set has
            no remark. Nothing is printed in that case.
    """
    cheques = list(cheques)
    unremarked = [
        c for c in cheques
        if c.status is ChequeStatus.DECLINED and not (c.remarks or "").strip()
    ]
    if unremarked:
        logger.info("Print refused: %d declined cheque(s) without remarks", len(unremarked))
        raise ValidationError(
            f"All declined cheques must include a remark before printing ({len(unremarked)} missing)",
            field="remarks",
        )

    plan = PrintPlan()
    for cheque in cheques:
        if cheque.status is not ChequeStatus.APPROVED or cheque.locked:
            continue
        if cheque.current_signatures >= cheque.required_signatures:
            plan.printable.append(cheque)
        else:
            plan.excluded.append(ExcludedCheque(cheque))
    return plan


def confirm_print(plan: PrintPlan, documents: Iterable[Document] = ()) -> PrintResult:
    """Apply a confirmed print: bump print counts and lock the batches."""
    result = PrintResult()
    doc_ids = []
    for cheque in plan.printable:
        result.printed.append(
            replace(cheque, print_count=cheque.print_count + 1, unlocked=False, unlock_reason=None)
        )
        if cheque.document_id is not None and cheque.document_id not in doc_ids:
            doc_ids.append(cheque.document_id)
    result.locked_document_ids = doc_ids
    result.documents = [
        replace(d, is_locked=True) if d.document_id in doc_ids else d for d in documents
    ]
    logger.info(
        "Printed %d cheque(s), %d excluded, locked documents %s",
        len(result.printed),
        len(plan.excluded),
        doc_ids,
    )
    return result


def unlock_printed(cheque: Cheque, reason: str) -> Cheque:
    """Release the print lock of a cheque. The print count is kept for audit."""
    reason = (reason or "").strip()
    if not reason:
        raise ValidationError("A reason is required to unlock a printed cheque", field="reason")
    if not cheque.locked:
        raise ValidationError(
            f"Cheque {cheque.cheque_number} is not print-locked", field="print_count"
        )
    logger.warning(
        "Unlocking printed cheque %s (printed %d time(s)): %s",
        cheque.cheque_number,
        cheque.print_count,
        reason,
    )
    return replace(cheque, unlocked=True, unlock_reason=reason)


# --- Document guards -------------------------------------------------------

def ensure_document_deletable(document: Document) -> None:
    if document.is_locked:
        raise LockedError(
            "Cannot delete: document is locked. Documents are locked after printing to keep the audit trail.",
            document_id=document.document_id,
        )


def rename_document(document: Document, new_name: str) -> Document:
    new_name = (new_name or "").strip()
    if not new_name:
        raise ValidationError("Document name cannot be empty", field="file_name")
    return replace(document, file_name=new_name)
