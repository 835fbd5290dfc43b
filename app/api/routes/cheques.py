from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from app.api.deps import get_acting_user, require_acting_user
from app.core import approval, duplicates, printing
from app.core.amount_words import amount_in_words
from app.core.cheque_pdf import render_cheques_pdf
from app.core.exceptions import ValidationError
from app.core.statistics import statistics
from app.models.cheque import Cheque, required_signatures
from app.schemas.cheque import (
    AmountWordsRequest,
    AmountWordsResponse,
    ChequeListRequest,
    ChequeResponse,
    DuplicatesResponse,
    ExcludedChequeResponse,
    IssueDateRequest,
    ItemFailure,
    PrintConfirmResponse,
    PrintPlanResponse,
    PrintRequest,
    RequiredSignaturesRequest,
    RequiredSignaturesResponse,
    SelectAllRequest,
    SelectAllResponse,
    SignRequest,
    StatisticsResponse,
    StatusChangeRequest,
    UnlockRequest,
)
from app.schemas.document import DocumentSchema

router = APIRouter(prefix="/api/cheques", tags=["cheques"])


def _to_response(cheque: Cheque) -> ChequeResponse:
    return ChequeResponse.model_validate(cheque)


def _plan_response(plan: printing.PrintPlan) -> dict:
    return {
        "printable": [_to_response(c) for c in plan.printable],
        "excluded": [
            ExcludedChequeResponse(cheque=_to_response(e.cheque), shortfall=e.shortfall)
            for e in plan.excluded
        ],
        "total_amount": plan.total_amount,
    }


@router.post("/required-signatures", response_model=RequiredSignaturesResponse)
async def get_required_signatures(body: RequiredSignaturesRequest):
    return RequiredSignaturesResponse(
        amount=body.amount, required_signatures=required_signatures(body.amount)
    )


@router.post("/status", response_model=ChequeResponse)
async def change_status(
    body: StatusChangeRequest,
    user_id: Optional[int] = Depends(get_acting_user),
):
    cheque = approval.set_status(body.cheque.to_model(), body.status, body.remarks, user_id)
    return _to_response(cheque)


@router.post("/sign", response_model=ChequeResponse)
async def sign_cheque(
    body: SignRequest,
    user_id: int = Depends(require_acting_user),
):
    return _to_response(approval.sign(body.cheque.to_model(), user_id))


@router.post("/select-all", response_model=SelectAllResponse)
async def select_all(
    body: SelectAllRequest,
    user_id: Optional[int] = Depends(get_acting_user),
):
    result = approval.select_all(
        body.to_models(),
        body.approve,
        prior_statuses=body.prior_statuses,
        user_id=user_id,
        documents=[d.to_model() for d in body.documents],
    )
    return SelectAllResponse(
        cheques=[_to_response(c) for c in result.cheques],
        prior_statuses=result.prior_statuses,
        changed=[_to_response(c) for c in result.changed],
        skipped=[_to_response(c) for c in result.skipped],
        failures=[
            ItemFailure(
                cheque_id=f.cheque.cheque_id,
                cheque_number=f.cheque.cheque_number,
                error_code=f.error.error_code,
                message=f.error.message,
            )
            for f in result.failures
        ],
    )


@router.post("/issue-date", response_model=ChequeResponse)
async def change_issue_date(body: IssueDateRequest):
    return _to_response(approval.set_issue_date(body.cheque.to_model(), body.issue_date))


@router.post("/print/plan", response_model=PrintPlanResponse)
async def plan_print(body: PrintRequest):
    plan = printing.mark_printed(body.to_models())
    return PrintPlanResponse(**_plan_response(plan))


@router.post("/print/confirm", response_model=PrintConfirmResponse)
async def confirm_print(body: PrintRequest):
    plan = printing.mark_printed(body.to_models())
    result = printing.confirm_print(plan, [d.to_model() for d in body.documents])
    return PrintConfirmResponse(
        **_plan_response(plan),
        printed=[_to_response(c) for c in result.printed],
        locked_document_ids=result.locked_document_ids,
        documents=[DocumentSchema.model_validate(d) for d in result.documents],
    )


@router.post("/print/pdf")
async def print_pdf(body: PrintRequest):
    plan = printing.mark_printed(body.to_models())
    if not plan.printable:
        raise ValidationError("No approved cheque has all of its required signatures")
    pdf_buffer = render_cheques_pdf(plan.printable)
    return StreamingResponse(
        pdf_buffer,
        media_type="application/pdf",
        headers={"Content-Disposition": 'attachment; filename="cheques.pdf"'},
    )


@router.post("/unlock", response_model=ChequeResponse)
async def unlock_cheque(body: UnlockRequest):
    return _to_response(printing.unlock_printed(body.cheque.to_model(), body.reason))


@router.post("/duplicates", response_model=DuplicatesResponse)
async def find_duplicates(body: ChequeListRequest):
    cheques = body.to_models()
    found = duplicates.detect_duplicates(cheques)
    return DuplicatesResponse(
        count=len(found),
        duplicates=[_to_response(c) for c in found],
        groups=[[_to_response(c) for c in g] for g in duplicates.duplicate_groups(cheques)],
    )


@router.post("/validate-batch", response_model=dict)
async def validate_batch(body: ChequeListRequest):
    cheques = body.to_models()
    duplicates.ensure_no_duplicates(cheques)
    return {"accepted": True, "count": len(cheques)}


@router.post("/statistics", response_model=StatisticsResponse)
async def get_statistics(body: ChequeListRequest):
    return StatisticsResponse.model_validate(statistics(body.to_models()))


@router.post("/amount-in-words", response_model=AmountWordsResponse)
async def get_amount_in_words(body: AmountWordsRequest):
    return AmountWordsResponse(amount=body.amount, words=amount_in_words(body.amount))
