"""Duplicate cheque detection for uploaded batches."""

import logging
from typing import Iterable

from app.core.exceptions import DuplicateChequesError
from app.models.cheque import Cheque

logger = logging.getLogger(__name__)


def duplicate_key(cheque: Cheque) -> tuple:
    return (cheque.client_name, cheque.amount, cheque.cheque_number)


def duplicate_groups(cheques: Iterable[Cheque]) -> list[list[Cheque]]:
    """Group cheques sharing client, amount and cheque number.

    Only groups with more than one member are returned, ordered by the
    position of their first member.
    """
    groups: dict[tuple, list[Cheque]] = {}
    for cheque in cheques:
        groups.setdefault(duplicate_key(cheque), []).append(cheque)
    return [group for group in groups.values() if len(group) > 1]


def detect_duplicates(cheques: Iterable[Cheque]) -> list[Cheque]:
    """Return every member of every duplicate group, in working-set order."""
    cheques = list(cheques)
    keys = {duplicate_key(c) for group in duplicate_groups(cheques) for c in group}
    return [c for c in cheques if duplicate_key(c) in keys]


def ensure_no_duplicates(cheques: Iterable[Cheque]) -> None:
    duplicates = detect_duplicates(cheques)
    if duplicates:
        logger.warning("Batch rejected: %d duplicate cheques", len(duplicates))
        raise DuplicateChequesError(duplicates)
