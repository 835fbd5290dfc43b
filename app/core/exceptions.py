"""Engine exceptions for cheque approval.

Every refusal the engine issues is one of these. The HTTP layer maps them
to responses in exception handlers registered in app.main.
"""

from typing import Any


class ChequeEngineError(Exception):
    """Base exception for all cheque engine errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, cheque_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(ChequeEngineError):
    """Raised when a requested mutation breaks a business rule.

    No state is mutated; the caller corrects the input and retries.
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class DuplicateChequesError(ValidationError):
    """Raised when a batch contains duplicate cheques and must be reviewed."""

    def __init__(self, duplicates: list) -> None:
        super().__init__(
            f"Found {len(duplicates)} duplicate cheques. Review them before processing."
        )
        self.error_code = "DUPLICATE_CHEQUES"
        self.duplicates = duplicates
        self.details = {
            "count": len(duplicates),
            "duplicates": [c.cheque_number for c in duplicates],
        }


class LockedError(ChequeEngineError):
    """Raised when a mutation targets a print-locked cheque or document."""

    def __init__(
        self,
        message: str,
        cheque_id: int | None = None,
        document_id: int | None = None,
    ) -> None:
        details: dict[str, Any] = {}
        if cheque_id is not None:
            details["cheque_id"] = cheque_id
        if document_id is not None:
            details["document_id"] = document_id
        super().__init__(message, "LOCKED", details)


class PersistenceError(ChequeEngineError):
    """Raised when the persistence backend fails to record a change.

    The computed change is still valid; the caller decides whether to
    retry the write or discard it.
    """

    def __init__(
        self,
        operation: str,
        message: str,
        cheque_id: int | None = None,
        document_id: int | None = None,
    ) -> None:
        details: dict[str, Any] = {"operation": operation}
        if cheque_id is not None:
            details["cheque_id"] = cheque_id
        if document_id is not None:
            details["document_id"] = document_id
        super().__init__(message, "PERSISTENCE_ERROR", details)
