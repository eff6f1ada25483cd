import logging
from datetime import date
from typing import Any, Dict, Type, Union
from uuid import UUID

from fastapi import APIRouter, Body, Depends, HTTPException, Query
from psycopg import Connection
from pydantic import BaseModel

from ..db import get_conn
from ..models.documents import (
    Document,
    DocumentPage,
    DocumentType,
    PurchaseOrderIn,
    SalesInvoiceIn,
    VendorInvoiceIn,
)
from ..repos.company import get_client_name, get_company_name, get_vendor_name
from ..repos.documents import (
    delete_document,
    get_document_with_lines,
    insert_document,
    list_documents,
    replace_lines,
    update_document,
    update_document_status,
)
from ..services.numbering import next_document_number, preview_document_number
from ..services.totals import compute_document_totals
from .deps import get_org_id

logger = logging.getLogger(__name__)

DocumentIn = Union[PurchaseOrderIn, SalesInvoiceIn, VendorInvoiceIn]


class StatusPatch(BaseModel):
    status: str


def _party_name(conn: Connection, doc_type: DocumentType, party_id: UUID) -> str:
    """Counterparty name; 404 when the vendor or client does not exist."""
    if doc_type == DocumentType.SALES_INVOICE:
        name = get_client_name(conn, party_id)
        if name is None:
            raise HTTPException(status_code=404, detail="Client not found")
        return name
    name = get_vendor_name(conn, party_id)
    if name is None:
        raise HTTPException(status_code=404, detail="Vendor not found")
    return name


def _series_owner(conn: Connection, doc_type: DocumentType, org_id: str, party_id: UUID) -> str | None:
    """Name whose initials go into the document number."""
    party = _party_name(conn, doc_type, party_id)
    if doc_type == DocumentType.VENDOR_INVOICE:
        return party
    return get_company_name(conn, org_id)


def _header(payload: DocumentIn) -> Dict[str, Any]:
    fields = payload.model_dump(exclude={"lines"})
    fields["party_id"] = payload.party_id
    return fields


def build_router(doc_type: DocumentType, body_model: Type[BaseModel], prefix: str, tag: str) -> APIRouter:
    """
    CRUD routes for one line-item document type. Totals are always computed
    server side under the type's tax policy; clients never send them.
    """
    router = APIRouter(prefix=prefix, tags=[tag])
    label = tag.rstrip("s").replace("-", " ").capitalize()

    @router.get("", response_model=DocumentPage)
    def list_items(
        limit: int = Query(50, ge=1, le=200),
        offset: int = Query(0, ge=0),
        conn: Connection = Depends(get_conn),
    ):
        items = list_documents(conn, doc_type, limit=limit, offset=offset)
        return {"items": items, "limit": limit, "offset": offset}

    # Declared before /{document_id} so it is not captured as an id
    @router.get("/next-number")
    def next_number(conn: Connection = Depends(get_conn), org_id: str = Depends(get_org_id)):
        if doc_type == DocumentType.VENDOR_INVOICE:
            raise HTTPException(status_code=400, detail="Vendor invoice numbers depend on the vendor")
        owner = get_company_name(conn, org_id)
        return {"number": preview_document_number(conn, doc_type.prefix, owner, date.today().year)}

    @router.get("/{document_id}", response_model=Document)
    def get_item(document_id: UUID, conn: Connection = Depends(get_conn)):
        doc = get_document_with_lines(conn, doc_type, document_id)
        if not doc:
            raise HTTPException(status_code=404, detail=f"{label} not found")
        return doc

    @router.post("", response_model=Document, status_code=201)
    def create_item(
        payload: body_model = Body(...),
        conn: Connection = Depends(get_conn),
        org_id: str = Depends(get_org_id),
    ):
        totals = compute_document_totals(
            doc_type,
            payload.lines,
            discount_percent=payload.discount_percent,
            apply_tax=payload.apply_tax,
        ).rounded()
        # number and rows commit together; a failed insert gives the number back
        with conn.transaction():
            owner = _series_owner(conn, doc_type, org_id, payload.party_id)
            doc_number = next_document_number(conn, doc_type.prefix, owner, date.today().year)
            document_id = insert_document(
                conn,
                org_id=org_id,
                doc_type=doc_type,
                doc_number=doc_number,
                payload=_header(payload),
                totals=totals,
            )
            replace_lines(conn, document_id, payload.lines)
        logger.info("created %s %s", doc_type.value, doc_number)
        return get_document_with_lines(conn, doc_type, document_id)

    @router.put("/{document_id}", response_model=Document)
    def update_item(
        document_id: UUID,
        payload: body_model = Body(...),
        conn: Connection = Depends(get_conn),
    ):
        totals = compute_document_totals(
            doc_type,
            payload.lines,
            discount_percent=payload.discount_percent,
            apply_tax=payload.apply_tax,
        ).rounded()
        with conn.transaction():
            _party_name(conn, doc_type, payload.party_id)
            if not update_document(conn, doc_type, document_id, _header(payload), totals):
                raise HTTPException(status_code=404, detail=f"{label} not found")
            replace_lines(conn, document_id, payload.lines)
        return get_document_with_lines(conn, doc_type, document_id)

    @router.patch("/{document_id}/status")
    def patch_status(document_id: UUID, patch: StatusPatch, conn: Connection = Depends(get_conn)):
        with conn.transaction():
            if not update_document_status(conn, doc_type, document_id, patch.status):
                raise HTTPException(status_code=404, detail=f"{label} not found")
        return {"ok": True, "id": document_id, "status": patch.status}

    @router.delete("/{document_id}")
    def delete_item(document_id: UUID, conn: Connection = Depends(get_conn)):
        with conn.transaction():
            if not delete_document(conn, doc_type, document_id):
                raise HTTPException(status_code=404, detail=f"{label} not found")
        return {"ok": True, "id": document_id}

    return router


purchase_orders_router = build_router(
    DocumentType.PURCHASE_ORDER, PurchaseOrderIn, "/purchase-orders", "purchase-orders"
)
sales_invoices_router = build_router(
    DocumentType.SALES_INVOICE, SalesInvoiceIn, "/sales-invoices", "sales-invoices"
)
vendor_invoices_router = build_router(
    DocumentType.VENDOR_INVOICE, VendorInvoiceIn, "/vendor-invoices", "vendor-invoices"
)
