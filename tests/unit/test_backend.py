"""Tests for write-through to the persistence backend (fake backend)."""

from datetime import date

import pytest

from app.core.approval import select_all, set_issue_date
from app.core.backend import (
    persist_issue_date,
    persist_print,
    persist_status_changes,
    persist_unlock,
)
from app.core.exceptions import PersistenceError
from app.core.printing import confirm_print, mark_printed, unlock_printed
from app.models.cheque import Cheque, ChequeStatus


class FakeBackend:
    """Records calls; fails for the cheque/document ids it is told to."""

    def __init__(self, failing_cheques=(), failing_documents=(), refuse=False):
        self.calls = []
        self.failing_cheques = set(failing_cheques)
        self.failing_documents = set(failing_documents)
        self.refuse = refuse

    def _check(self, cheque_id=None, document_id=None):
        if cheque_id in self.failing_cheques or document_id in self.failing_documents:
            raise RuntimeError("database is locked")
        return not self.refuse

    async def update_status(self, cheque_id, status, remarks, **signatures):
        self.calls.append(("update_status", cheque_id, status, remarks, signatures))
        return self._check(cheque_id=cheque_id)

    async def increment_print_count(self, cheque_id):
        self.calls.append(("increment_print_count", cheque_id))
        return self._check(cheque_id=cheque_id)

    async def lock_document(self, document_id):
        self.calls.append(("lock_document", document_id))
        return self._check(document_id=document_id)

    async def unlock_printed_cheque(self, cheque_id, reason):
        self.calls.append(("unlock_printed_cheque", cheque_id, reason))
        return self._check(cheque_id=cheque_id)

    async def update_issue_date(self, cheque_id, issue_date):
        self.calls.append(("update_issue_date", cheque_id, issue_date))
        return self._check(cheque_id=cheque_id)


async def test_status_changes_are_written_per_cheque(make_cheque) -> None:
    backend = FakeBackend()
    result = select_all([make_cheque(), make_cheque(amount="2000")], approve=True, user_id=4)
    report = await persist_status_changes(backend, result.changed)

    assert report.ok
    assert len(report.succeeded) == 2
    name, cheque_id, status, remarks, signatures = backend.calls[0]
    assert (name, status, remarks) == ("update_status", "Approved", None)
    assert signatures == {
        "current_signatures": 1,
        "first_signature_user_id": 4,
        "second_signature_user_id": None,
    }


async def test_one_failed_write_does_not_abort_the_batch(make_cheque) -> None:
    cheques = [make_cheque(), make_cheque(), make_cheque()]
    backend = FakeBackend(failing_cheques={cheques[1].cheque_id})
    report = await persist_status_changes(backend, cheques)

    assert not report.ok
    assert report.succeeded == [cheques[0], cheques[2]]
    assert len(report.failures) == 1
    failure = report.failures[0]
    assert failure.error_code == "PERSISTENCE_ERROR"
    assert failure.details == {"operation": "update_status", "cheque_id": cheques[1].cheque_id}
    assert "database is locked" in failure.message
    assert len(backend.calls) == 3


async def test_backend_returning_false_is_a_failure(make_cheque) -> None:
    report = await persist_status_changes(FakeBackend(refuse=True), [make_cheque()])
    assert len(report.failures) == 1


async def test_unsaved_cheque_cannot_be_persisted() -> None:
    backend = FakeBackend()
    report = await persist_status_changes(
        backend, [Cheque(cheque_number="N1", amount="1", client_name="Ann")]
    )
    assert len(report.failures) == 1
    assert backend.calls == []


async def test_print_writes_counts_and_locks_documents(make_cheque) -> None:
    cheques = [
        make_cheque(status=ChequeStatus.APPROVED, current_signatures=1, document_id=1),
        make_cheque(status=ChequeStatus.APPROVED, current_signatures=1, document_id=2),
    ]
    backend = FakeBackend(failing_documents={2})
    report = await persist_print(backend, confirm_print(mark_printed(cheques)))

    assert [c[0] for c in backend.calls] == [
        "increment_print_count",
        "increment_print_count",
        "lock_document",
        "lock_document",
    ]
    assert len(report.succeeded) == 2
    assert [f.details for f in report.failures] == [{"operation": "lock_document", "document_id": 2}]


async def test_persist_unlock_passes_reason(make_cheque) -> None:
    backend = FakeBackend()
    cheque = unlock_printed(make_cheque(status=ChequeStatus.APPROVED, current_signatures=1, print_count=1), "typo")
    await persist_unlock(backend, cheque)
    assert backend.calls == [("unlock_printed_cheque", cheque.cheque_id, "typo")]


async def test_persist_issue_date_raises_on_failure(make_cheque) -> None:
    cheque = set_issue_date(make_cheque(), "2025-02-03")
    backend = FakeBackend(failing_cheques={cheque.cheque_id})
    with pytest.raises(PersistenceError) as exc_info:
        await persist_issue_date(backend, cheque)
    assert exc_info.value.details["operation"] == "update_issue_date"
    assert backend.calls == [("update_issue_date", cheque.cheque_id, date(2025, 2, 3))]
