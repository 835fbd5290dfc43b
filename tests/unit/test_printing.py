"""Tests for print planning, confirmation, unlock and document guards."""

from decimal import Decimal

import pytest

from app.core.exceptions import LockedError, ValidationError
from app.core.printing import (
    confirm_print,
    ensure_document_deletable,
    mark_printed,
    rename_document,
    unlock_printed,
)
from app.models.cheque import ChequeStatus
from app.models.document import Document

APPROVED = ChequeStatus.APPROVED
DECLINED = ChequeStatus.DECLINED


@pytest.fixture
def working_set(make_cheque):
    return [
        make_cheque(amount="500", status=APPROVED, current_signatures=1, first_signature_user_id=1),
        make_cheque(amount="2000", status=APPROVED, current_signatures=1, first_signature_user_id=1),
        make_cheque(
            amount="3000",
            status=APPROVED,
            current_signatures=2,
            first_signature_user_id=1,
            second_signature_user_id=2,
            document_id=2,
        ),
        make_cheque(amount="50"),
        make_cheque(amount="70", status=DECLINED, remarks="stale"),
    ]


def test_mark_printed_splits_printable_and_excluded(working_set) -> None:
    plan = mark_printed(working_set)
    assert plan.printable == [working_set[0], working_set[2]]
    assert [e.cheque for e in plan.excluded] == [working_set[1]]
    assert plan.excluded[0].shortfall == 1
    assert plan.total_amount == Decimal("3500")


def test_printable_never_lacks_signatures(working_set) -> None:
    plan = mark_printed(working_set)
    assert all(c.current_signatures >= c.required_signatures for c in plan.printable)


def test_unremarked_decline_blocks_all_printing(working_set, make_cheque) -> None:
    working_set.append(make_cheque(status=DECLINED, remarks="   "))
    with pytest.raises(ValidationError) as exc_info:
        mark_printed(working_set)
    assert "remark" in exc_info.value.message
    assert exc_info.value.details == {"field": "remarks"}


def test_locked_cheques_are_not_candidates(make_cheque) -> None:
    printed = make_cheque(status=APPROVED, current_signatures=1, print_count=1)
    plan = mark_printed([printed])
    assert plan.printable == []
    assert plan.excluded == []


def test_unlocked_cheque_can_be_printed_again(make_cheque) -> None:
    cheque = make_cheque(status=APPROVED, current_signatures=1, print_count=1, unlocked=True, unlock_reason="fix")
    plan = mark_printed([cheque])
    result = confirm_print(plan)
    reprinted = result.printed[0]
    assert reprinted.print_count == 2
    assert reprinted.locked
    assert reprinted.unlock_reason is None


def test_confirm_print_increments_and_locks_documents(working_set) -> None:
    documents = [
        Document(document_id=1, file_name="jan.xlsx"),
        Document(document_id=2, file_name="feb.xlsx"),
        Document(document_id=3, file_name="mar.xlsx"),
    ]
    plan = mark_printed(working_set)
    result = confirm_print(plan, documents)

    assert [c.print_count for c in result.printed] == [1, 1]
    assert all(c.locked for c in result.printed)
    assert result.locked_document_ids == [1, 2]
    assert [d.is_locked for d in result.documents] == [True, True, False]
    # Excluded cheques stay untouched.
    assert working_set[1].print_count == 0


def test_unlock_requires_reason(make_cheque) -> None:
    cheque = make_cheque(status=APPROVED, current_signatures=1, print_count=1)
    with pytest.raises(ValidationError):
        unlock_printed(cheque, "  ")


def test_unlock_requires_locked_cheque(make_cheque) -> None:
    with pytest.raises(ValidationError):
        unlock_printed(make_cheque(), "why not")


def test_unlock_keeps_count_status_and_signatures(make_cheque) -> None:
    cheque = make_cheque(
        amount="2000",
        status=APPROVED,
        current_signatures=2,
        first_signature_user_id=1,
        second_signature_user_id=2,
        print_count=3,
    )
    unlocked = unlock_printed(cheque, " correction ")
    assert not unlocked.locked
    assert unlocked.unlock_reason == "correction"
    assert unlocked.print_count == 3
    assert unlocked.status is APPROVED
    assert unlocked.current_signatures == 2


def test_locked_document_cannot_be_deleted() -> None:
    with pytest.raises(LockedError) as exc_info:
        ensure_document_deletable(Document(document_id=4, file_name="a.xlsx", is_locked=True))
    assert exc_info.value.details == {"document_id": 4}
    ensure_document_deletable(Document(document_id=5, file_name="b.xlsx"))


def test_rename_document() -> None:
    doc = Document(document_id=1, file_name="old.xlsx")
    assert rename_document(doc, " new.xlsx ").file_name == "new.xlsx"
    with pytest.raises(ValidationError):
        rename_document(doc, "")
