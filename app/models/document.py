from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Document:
    """A batch of cheques from one spreadsheet upload."""

    document_id: int
    file_name: str
    created_at: Optional[datetime] = None
    is_locked: bool = False  # set once any contained cheque is printed
