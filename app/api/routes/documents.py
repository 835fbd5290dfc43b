from fastapi import APIRouter

from app.core.printing import ensure_document_deletable, rename_document
from app.schemas.document import DeleteCheckResponse, DocumentSchema, RenameDocumentRequest

router = APIRouter(prefix="/api/documents", tags=["documents"])


@router.post("/rename", response_model=DocumentSchema)
async def rename(body: RenameDocumentRequest):
    document = rename_document(body.document.to_model(), body.new_name)
    return DocumentSchema.model_validate(document)


@router.post("/validate-delete", response_model=DeleteCheckResponse)
async def validate_delete(body: DocumentSchema):
    ensure_document_deletable(body.to_model())
    return DeleteCheckResponse(document_id=body.document_id, deletable=True)
