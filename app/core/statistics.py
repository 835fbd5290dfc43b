from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from app.models.cheque import Cheque, ChequeStatus


@dataclass(frozen=True)
class ChequeStatistics:
    total: int = 0
    approved: int = 0
    declined: int = 0
    pending: int = 0
    total_amount: Decimal = Decimal("0")
    approved_amount: Decimal = Decimal("0")


def statistics(cheques: Iterable[Cheque]) -> ChequeStatistics:
    """Count cheques by status. Recomputed on every call, never cached."""
    counts = {status: 0 for status in ChequeStatus}
    total_amount = approved_amount = Decimal("0")
    for cheque in cheques:
        counts[cheque.status] += 1
        total_amount += cheque.amount
        if cheque.status is ChequeStatus.APPROVED:
            approved_amount += cheque.amount
    return ChequeStatistics(
        total=sum(counts.values()),
        approved=counts[ChequeStatus.APPROVED],
        declined=counts[ChequeStatus.DECLINED],
        pending=counts[ChequeStatus.PENDING],
        total_amount=total_amount,
        approved_amount=approved_amount,
    )
