from typing import List

from fastapi import APIRouter, Depends
from psycopg import Connection

from ..db import get_conn
from ..models.dashboard import (
    CountAndTotal,
    DashboardOverview,
    DocumentTypeStats,
    MonthlyFigures,
    TaxSummary,
)
from ..models.documents import DocumentType
from ..repos.dashboard import document_stats, expense_rows, income_rows, payment_stats
from ..services.financial_summary import monthly_summary

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardOverview)
def overview(conn: Connection = Depends(get_conn)):
    """Counts, sums, unpaid balances and tax collected per document type."""
    by_type = {t.value: DocumentTypeStats() for t in (
        DocumentType.PURCHASE_ORDER,
        DocumentType.SALES_INVOICE,
        DocumentType.VENDOR_INVOICE,
    )}
    for row in document_stats(conn):
        by_type[row["doc_type"]] = DocumentTypeStats(**{k: v for k, v in row.items() if k != "doc_type"})
    sales = by_type[DocumentType.SALES_INVOICE.value]
    purchases = by_type[DocumentType.VENDOR_INVOICE.value]

    return DashboardOverview(
        documents=by_type,
        payments={k: CountAndTotal(**v) for k, v in payment_stats(conn).items()},
        receivables=CountAndTotal(count=sales.unpaid_count, total=sales.unpaid_total),
        payables=CountAndTotal(count=purchases.unpaid_count, total=purchases.unpaid_total),
        taxes=TaxSummary(
            vat_on_sales=sales.tax,
            vat_on_purchases=purchases.tax,
            withholding=by_type[DocumentType.PURCHASE_ORDER.value].tax,
        ),
    )


@router.get("/financial-summary", response_model=List[MonthlyFigures])
def financial_summary(conn: Connection = Depends(get_conn)):
    """Monthly income (sales invoices) against expenses (payment vouchers)."""
    return monthly_summary(income_rows(conn), expense_rows(conn))
