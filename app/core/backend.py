"""
Write-through to the persistence backend.

The engine computes the next state of each cheque; these helpers record it
through a ``ChequeBackend``. Every write is independent: a failed write is
reported as a ``PersistenceError`` in the returned ``BatchReport`` and the
remaining writes still run. Nothing is retried.

The HTTP surface in app.api is stateless and never calls into this module;
it is the integration API for a host application that owns storage and
implements ``ChequeBackend`` itself.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Awaitable, Iterable, Optional, Protocol

from app.core.exceptions import PersistenceError
from app.core.printing import PrintResult
from app.models.cheque import Cheque

logger = logging.getLogger(__name__)


class ChequeBackend(Protocol):
    """Storage operations the engine relies on, each atomic per cheque.

    An operation fails by raising or by returning ``False``.
    """

    async def update_status(
        self,
        cheque_id: int,
        status: str,
        remarks: Optional[str],
        *,
        current_signatures: int,
        first_signature_user_id: Optional[int],
        second_signature_user_id: Optional[int],
    ) -> Optional[bool]: ...

    async def increment_print_count(self, cheque_id: int) -> Optional[bool]: ...

    async def lock_document(self, document_id: int) -> Optional[bool]: ...

    async def unlock_printed_cheque(self, cheque_id: int, reason: str) -> Optional[bool]: ...

    async def update_issue_date(self, cheque_id: int, issue_date: date) -> Optional[bool]: ...


@dataclass
class BatchReport:
    succeeded: list[Cheque] = field(default_factory=list)
    failures: list[PersistenceError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


async def _run(
    operation: str,
    call: Awaitable,
    cheque_id: Optional[int] = None,
    document_id: Optional[int] = None,
) -> None:
    try:
        outcome = await call
    except Exception as e:
        logger.error("Backend %s failed (cheque=%s, document=%s): %s", operation, cheque_id, document_id, e)
        raise PersistenceError(operation, f"Failed to {operation.replace('_', ' ')}: {e}", cheque_id, document_id) from e
    if outcome is False:
        logger.error("Backend %s reported failure (cheque=%s, document=%s)", operation, cheque_id, document_id)
        raise PersistenceError(operation, f"Failed to {operation.replace('_', ' ')}", cheque_id, document_id)


def _require_id(operation: str, cheque: Cheque) -> int:
    if cheque.cheque_id is None:
        raise PersistenceError(operation, f"Cheque {cheque.cheque_number} has not been saved yet")
    return cheque.cheque_id


async def persist_status_changes(backend: ChequeBackend, cheques: Iterable[Cheque]) -> BatchReport:
    report = BatchReport()
    for cheque in cheques:
        try:
            cheque_id = _require_id("update_status", cheque)
            await _run(
                "update_status",
                backend.update_status(
                    cheque_id,
                    cheque.status.value,
                    cheque.remarks,
                    current_signatures=cheque.current_signatures,
                    first_signature_user_id=cheque.first_signature_user_id,
                    second_signature_user_id=cheque.second_signature_user_id,
                ),
                cheque_id=cheque_id,
            )
        except PersistenceError as e:
            report.failures.append(e)
        else:
            report.succeeded.append(cheque)
    return report


async def persist_print(backend: ChequeBackend, result: PrintResult) -> BatchReport:
    report = BatchReport()
    for cheque in result.printed:
        try:
            cheque_id = _require_id("increment_print_count", cheque)
            await _run("increment_print_count", backend.increment_print_count(cheque_id), cheque_id=cheque_id)
        except PersistenceError as e:
            report.failures.append(e)
        else:
            report.succeeded.append(cheque)
    for document_id in result.locked_document_ids:
        try:
            await _run("lock_document", backend.lock_document(document_id), document_id=document_id)
        except PersistenceError as e:
            report.failures.append(e)
    return report


async def persist_unlock(backend: ChequeBackend, cheque: Cheque) -> Cheque:
    cheque_id = _require_id("unlock_printed_cheque", cheque)
    await _run(
        "unlock_printed_cheque",
        backend.unlock_printed_cheque(cheque_id, cheque.unlock_reason or ""),
        cheque_id=cheque_id,
    )
    return cheque


async def persist_issue_date(backend: ChequeBackend, cheque: Cheque) -> Cheque:
    cheque_id = _require_id("update_issue_date", cheque)
    await _run("update_issue_date", backend.update_issue_date(cheque_id, cheque.issue_date), cheque_id=cheque_id)
    return cheque
