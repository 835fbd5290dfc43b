import datetime as dt
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from app.core.exceptions import ValidationError
from app.models.cheque import Cheque, ChequeStatus
from app.schemas.document import DocumentSchema


def _parse_status(value):
    try:
        return ChequeStatus.parse(value)
    except ValidationError as e:
        raise ValueError(e.message)


class ChequeSchema(BaseModel):
    cheque_id: Optional[int] = None
    cheque_number: str
    amount: Decimal = Field(ge=0)
    client_name: str
    document_id: Optional[int] = None
    issue_date: Optional[dt.date] = None
    date: Optional[dt.date] = None
    status: ChequeStatus = ChequeStatus.PENDING
    current_signatures: int = Field(0, ge=0, le=2)
    first_signature_user_id: Optional[int] = None
    second_signature_user_id: Optional[int] = None
    remarks: Optional[str] = None
    print_count: int = Field(0, ge=0)
    unlocked: bool = False
    unlock_reason: Optional[str] = None
    created_at: Optional[dt.datetime] = None

    class Config:
        from_attributes = True

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v):
        return _parse_status(v)

    def to_model(self) -> Cheque:
        return Cheque(**self.model_dump())


class ChequeResponse(ChequeSchema):
    required_signatures: int
    signature_shortfall: int
    locked: bool


class ItemFailure(BaseModel):
    cheque_id: Optional[int] = None
    cheque_number: str
    error_code: str
    message: str


# --- Requests --------------------------------------------------------------

class RequiredSignaturesRequest(BaseModel):
    amount: Decimal = Field(ge=0)


class StatusChangeRequest(BaseModel):
    cheque: ChequeSchema
    status: ChequeStatus
    remarks: Optional[str] = None

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v):
        return _parse_status(v)


class SignRequest(BaseModel):
    cheque: ChequeSchema


class IssueDateRequest(BaseModel):
    cheque: ChequeSchema
    issue_date: str


class UnlockRequest(BaseModel):
    cheque: ChequeSchema
    reason: str


class ChequeListRequest(BaseModel):
    cheques: list[ChequeSchema]

    def to_models(self) -> list[Cheque]:
        return [c.to_model() for c in self.cheques]


class SelectAllRequest(ChequeListRequest):
    approve: bool
    prior_statuses: dict[str, ChequeStatus] = {}
    documents: list[DocumentSchema] = []


class PrintRequest(ChequeListRequest):
    documents: list[DocumentSchema] = []


class AmountWordsRequest(BaseModel):
    amount: Decimal


# --- Responses -------------------------------------------------------------

class RequiredSignaturesResponse(BaseModel):
    amount: Decimal
    required_signatures: int


class SelectAllResponse(BaseModel):
    cheques: list[ChequeResponse]
    prior_statuses: dict[str, ChequeStatus]
    changed: list[ChequeResponse]
    skipped: list[ChequeResponse]
    failures: list[ItemFailure]


class ExcludedChequeResponse(BaseModel):
    cheque: ChequeResponse
    shortfall: int


class PrintPlanResponse(BaseModel):
    printable: list[ChequeResponse]
    excluded: list[ExcludedChequeResponse]
    total_amount: Decimal


class PrintConfirmResponse(PrintPlanResponse):
    printed: list[ChequeResponse]
    locked_document_ids: list[int]
    documents: list[DocumentSchema]


class DuplicatesResponse(BaseModel):
    count: int
    duplicates: list[ChequeResponse]
    groups: list[list[ChequeResponse]]


class StatisticsResponse(BaseModel):
    total: int
    approved: int
    declined: int
    pending: int
    total_amount: Decimal
    approved_amount: Decimal

    class Config:
        from_attributes = True


class AmountWordsResponse(BaseModel):
    amount: Decimal
    words: str
