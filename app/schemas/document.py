from pydantic import BaseModel
from datetime import datetime
from typing import Optional

from app.models.document import Document


class DocumentSchema(BaseModel):
    document_id: int
    file_name: str
    created_at: Optional[datetime] = None
    is_locked: bool = False

    class Config:
        from_attributes = True

    def to_model(self) -> Document:
        return Document(**self.model_dump())


class RenameDocumentRequest(BaseModel):
    document: DocumentSchema
    new_name: str


class DeleteCheckResponse(BaseModel):
    document_id: int
    deletable: bool
