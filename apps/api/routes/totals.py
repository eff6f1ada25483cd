from fastapi import APIRouter, Body, HTTPException

from ..models.documents import DocumentType, TotalsPreview, TotalsPreviewIn, TotalsResult
from ..services.formatting import amount_in_words, format_currency
from ..services.totals import compute_document_totals

router = APIRouter(prefix="/totals", tags=["totals"])

LINE_DOCUMENTS = {
    DocumentType.PURCHASE_ORDER,
    DocumentType.SALES_INVOICE,
    DocumentType.VENDOR_INVOICE,
}


# Computes totals for a draft without persisting anything, so forms can
# show the same figures the server will store.
@router.post("/preview", response_model=TotalsPreview)
def preview_totals(draft: TotalsPreviewIn = Body(...)):
    if draft.doc_type not in LINE_DOCUMENTS:
        raise HTTPException(status_code=400, detail=f"{draft.doc_type.value} documents have no line items")
    totals: TotalsResult = compute_document_totals(
        draft.doc_type,
        draft.lines,
        discount_percent=draft.discount_percent,
        apply_tax=draft.apply_tax,
    ).rounded()
    return TotalsPreview(
        **totals.model_dump(),
        grand_total_display=format_currency(totals.grand_total),
        grand_total_in_words=amount_in_words(totals.grand_total),
    )
