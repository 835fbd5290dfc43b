"""
Signature and status state machine for cheques.

A cheque moves Pending -> Approved -> (printed) with Declined as the
alternative outcome. Every function here is pure: it takes cheque values
and returns new ones, leaving persistence to app.core.backend.
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Iterable, Optional

from dateutil.parser import parse as parse_date

from app.core.exceptions import ChequeEngineError, LockedError, ValidationError
from app.models.cheque import Cheque, ChequeStatus, required_signatures
from app.models.document import Document

logger = logging.getLogger(__name__)

__all__ = [
    "required_signatures",
    "set_status",
    "sign",
    "select_all",
    "set_issue_date",
    "tracking_key",
    "SelectionFailure",
    "SelectionResult",
]


def ensure_unlocked(cheque: Cheque) -> None:
    if cheque.locked:
        raise LockedError(
            f"Cheque {cheque.cheque_number} has been printed and is locked. Unlock it before editing.",
            cheque_id=cheque.cheque_id,
        )


def _add_signature(cheque: Cheque, user_id: int) -> dict:
    required = cheque.required_signatures
    if (
        required == 2
        and cheque.second_signature_user_id is None
        and cheque.first_signature_user_id == user_id
    ):
        # The first signer approving again does not count twice.
        return {}
    changes = {"current_signatures": min(cheque.current_signatures + 1, required)}
    if cheque.first_signature_user_id is None:
        changes["first_signature_user_id"] = user_id
    elif cheque.second_signature_user_id is None and required == 2:
        changes["second_signature_user_id"] = user_id
    return changes


def _remove_signature(cheque: Cheque) -> dict:
    count = max(cheque.current_signatures - 1, 0)
    changes = {"current_signatures": count}
    if count == 0:
        changes["first_signature_user_id"] = None
        changes["second_signature_user_id"] = None
    elif count == 1:
        changes["second_signature_user_id"] = None
    return changes


def set_status(
    cheque: Cheque,
    new_status,
    remarks: Optional[str] = None,
    user_id: Optional[int] = None,
) -> Cheque:
    """Move a cheque to ``new_status`` and adjust its signatures.

    Entering Approved records one signature for ``user_id`` (capped at the
    amount's requirement); leaving Approved withdraws one. Repeating the
    current status changes nothing but the remarks, when given.

    Raises:
        LockedError: the cheque is print-locked.
        ValidationError: declining without a non-blank reason, or approving
            without a ``user_id``.
    """
    new_status = ChequeStatus.parse(new_status)
    ensure_unlocked(cheque)

    changes: dict = {"status": new_status}
    if new_status is ChequeStatus.DECLINED:
        reason = (remarks or "").strip()
        if not reason:
            raise ValidationError(
                "A reason is required to decline a cheque", field="remarks"
            )
        changes["remarks"] = reason
    elif remarks is not None:
        changes["remarks"] = remarks.strip() or None

    was_approved = cheque.status is ChequeStatus.APPROVED
    if new_status is ChequeStatus.APPROVED and not was_approved:
        if user_id is None:
            raise ValidationError(
                "An approving user is required to approve a cheque", field="user_id"
            )
        changes.update(_add_signature(cheque, user_id))
    elif was_approved and new_status is not ChequeStatus.APPROVED:
        changes.update(_remove_signature(cheque))

    updated = replace(cheque, **changes)
    if updated.status is not cheque.status:
        logger.debug(
            "Cheque %s: %s -> %s (%d/%d signatures)",
            cheque.cheque_number,
            cheque.status.value,
            updated.status.value,
            updated.current_signatures,
            updated.required_signatures,
        )
    return updated


def sign(cheque: Cheque, user_id: int) -> Cheque:
    """Record an additional signature on an approved cheque.

    The second signature of a two-signature cheque must come from a
    different user than the first.
    """
    ensure_unlocked(cheque)
    if user_id is None:
        raise ValidationError("A signing user is required", field="user_id")
    if cheque.status is not ChequeStatus.APPROVED:
        raise ValidationError(
            f"Cheque {cheque.cheque_number} must be Approved before it can be signed (current: {cheque.status.value})",
            field="status",
        )
    if cheque.current_signatures >= cheque.required_signatures:
        raise ValidationError(
            f"Cheque {cheque.cheque_number} already has all {cheque.required_signatures} required signature(s)",
            field="current_signatures",
        )

    changes: dict = {"current_signatures": cheque.current_signatures + 1}
    if cheque.first_signature_user_id is None:
        changes["first_signature_user_id"] = user_id
    elif cheque.first_signature_user_id == user_id:
        raise ValidationError(
            "The second signature must come from a different user", field="user_id"
        )
    else:
        changes["second_signature_user_id"] = user_id
    return replace(cheque, **changes)


def set_issue_date(cheque: Cheque, value) -> Cheque:
    ensure_unlocked(cheque)
    if isinstance(value, datetime):
        issue_date = value.date()
    elif isinstance(value, date):
        issue_date = value
    else:
        try:
            issue_date = parse_date(str(value or "")).date()
        except (ValueError, OverflowError):
            raise ValidationError(f"Invalid date: {value}", field="issue_date")
    return replace(cheque, issue_date=issue_date)


# --- Bulk select-all -------------------------------------------------------

def tracking_key(cheque: Cheque, index: int) -> str:
    """Key used to remember a cheque's status before a bulk approval.

    Persisted cheques are keyed by id; freshly imported ones by their row
    in the working set.
    """
    if cheque.cheque_id is not None:
        return str(cheque.cheque_id)
    return f"row:{index}"


@dataclass
class SelectionFailure:
    cheque: Cheque
    error: ChequeEngineError


@dataclass
class SelectionResult:
    cheques: list[Cheque]
    prior_statuses: dict[str, ChequeStatus]
    changed: list[Cheque] = field(default_factory=list)
    skipped: list[Cheque] = field(default_factory=list)
    failures: list[SelectionFailure] = field(default_factory=list)


def _locked_document_ids(documents: Iterable[Document]) -> set[int]:
    return {d.document_id for d in documents if d.is_locked}


def select_all(
    cheques: Iterable[Cheque],
    approve: bool,
    prior_statuses: Optional[dict] = None,
    user_id: Optional[int] = None,
    documents: Iterable[Document] = (),
) -> SelectionResult:
    """Approve every eligible cheque, or revert each to its remembered status.

    Locked cheques and cheques of a locked document are skipped. A cheque
    that cannot be moved is reported in ``failures`` and the rest of the
    batch still proceeds. Approving without a ``user_id`` is refused
    before any cheque is touched.
    """
    if approve and user_id is None:
        raise ValidationError("An approving user is required to approve cheques", field="user_id")
    priors = {k: ChequeStatus.parse(v) for k, v in (prior_statuses or {}).items()}
    locked_docs = _locked_document_ids(documents)
    result = SelectionResult(cheques=[], prior_statuses=priors)

    for index, cheque in enumerate(cheques):
        if cheque.locked or cheque.document_id in locked_docs:
            result.skipped.append(cheque)
            result.cheques.append(cheque)
            continue

        key = tracking_key(cheque, index)
        updated = cheque
        try:
            if approve:
                if cheque.status is not ChequeStatus.APPROVED:
                    updated = set_status(cheque, ChequeStatus.APPROVED, user_id=user_id)
                    priors[key] = cheque.status
            elif key in priors:
                target = priors[key]
                if cheque.status is not target:
                    remarks = cheque.remarks if target is ChequeStatus.DECLINED else None
                    updated = set_status(cheque, target, remarks=remarks, user_id=user_id)
                del priors[key]
        except ChequeEngineError as exc:
            logger.warning("Select-all skipped cheque %s: %s", cheque.cheque_number, exc.message)
            result.failures.append(SelectionFailure(cheque=cheque, error=exc))
            updated = cheque

        if updated is not cheque:
            result.changed.append(updated)
        result.cheques.append(updated)

    logger.info(
        "Select-all (%s): %d changed, %d skipped, %d failed",
        "approve" if approve else "revert",
        len(result.changed),
        len(result.skipped),
        len(result.failures),
    )
    return result
