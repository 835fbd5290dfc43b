import datetime as dt
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional

from app.core.exceptions import ValidationError

# Amounts strictly above this need a second signature.
SECOND_SIGNATURE_THRESHOLD = Decimal("1500")


class ChequeStatus(str, Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    DECLINED = "Declined"

    @classmethod
    def parse(cls, value) -> "ChequeStatus":
        """Normalize a status value, rejecting anything outside the three states."""
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().lower()
        for status in cls:
            if status.value.lower() == text:
                return status
        raise ValidationError(
            f"Invalid status '{value}'. Must be Pending, Approved, or Declined",
            field="status",
        )


def to_amount(value) -> Decimal:
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            raise ValidationError(f"Invalid amount '{value}'", field="amount")
    if not amount.is_finite():
        raise ValidationError(f"Invalid amount '{value}'", field="amount")
    return amount


def required_signatures(amount) -> int:
    return 2 if to_amount(amount) > SECOND_SIGNATURE_THRESHOLD else 1


@dataclass(frozen=True)
class Cheque:
    cheque_number: str
    amount: Decimal
    client_name: str
    cheque_id: Optional[int] = None
    document_id: Optional[int] = None
    issue_date: Optional[dt.date] = None
    date: Optional[dt.date] = None
    status: ChequeStatus = ChequeStatus.PENDING
    current_signatures: int = 0
    first_signature_user_id: Optional[int] = None
    second_signature_user_id: Optional[int] = None
    remarks: Optional[str] = None
    print_count: int = 0
    unlocked: bool = False  # explicit unlock after printing
    unlock_reason: Optional[str] = None
    created_at: Optional[dt.datetime] = None

    def __post_init__(self):
        object.__setattr__(self, "amount", to_amount(self.amount))
        object.__setattr__(self, "status", ChequeStatus.parse(self.status))
        if self.amount < 0:
            raise ValidationError("Amount cannot be negative", field="amount")
        if not 0 <= self.current_signatures <= self.required_signatures:
            raise ValidationError(
                f"current_signatures must be between 0 and {self.required_signatures}",
                field="current_signatures",
            )
        if self.print_count < 0:
            raise ValidationError("print_count cannot be negative", field="print_count")

    @property
    def required_signatures(self) -> int:
        return required_signatures(self.amount)

    @property
    def signature_shortfall(self) -> int:
        return max(self.required_signatures - self.current_signatures, 0)

    @property
    def is_printed(self) -> bool:
        return self.print_count > 0

    @property
    def locked(self) -> bool:
        return self.print_count > 0 and not self.unlocked
