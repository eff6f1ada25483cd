import logging
from datetime import date
from typing import Any, Dict
from uuid import UUID

from fastapi import APIRouter, Body, Depends, HTTPException, Query
from psycopg import Connection

from ..db import get_conn
from ..models.documents import DocumentType
from ..models.payments import (
    PaymentReceipt,
    PaymentReceiptIn,
    PaymentReceiptPage,
    PaymentReceiptView,
    PaymentVoucher,
    PaymentVoucherIn,
    PaymentVoucherPage,
    PaymentVoucherView,
)
from ..repos.company import get_client_name, get_company_name
from ..repos.payments import (
    delete_receipt,
    delete_voucher,
    get_receipt,
    get_voucher,
    insert_receipt,
    insert_voucher,
    list_receipts,
    list_vouchers,
    update_receipt,
    update_voucher,
)
from ..services.formatting import amount_in_words, format_currency
from ..services.numbering import next_document_number, preview_document_number
from .deps import get_org_id

logger = logging.getLogger(__name__)

vouchers_router = APIRouter(prefix="/payment-vouchers", tags=["payment-vouchers"])
receipts_router = APIRouter(prefix="/payment-receipts", tags=["payment-receipts"])


def _check_client(conn: Connection, client_id: UUID) -> None:
    if get_client_name(conn, client_id) is None:
        raise HTTPException(status_code=404, detail="Client not found")


def _receipt_fields(payload: PaymentReceiptIn) -> Dict[str, Any]:
    fields = payload.model_dump()
    fields["payment_type"] = payload.payment_type.value
    fields["amount_due"] = payload.balance_due()
    return fields


# === Payment vouchers ===

@vouchers_router.get("", response_model=PaymentVoucherPage)
def list_payment_vouchers(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    conn: Connection = Depends(get_conn),
):
    return {"items": list_vouchers(conn, limit=limit, offset=offset), "limit": limit, "offset": offset}

@vouchers_router.get("/next-number")
def next_voucher_number(conn: Connection = Depends(get_conn), org_id: str = Depends(get_org_id)):
    owner = get_company_name(conn, org_id)
    prefix = DocumentType.PAYMENT_VOUCHER.prefix
    return {"number": preview_document_number(conn, prefix, owner, date.today().year)}

@vouchers_router.get("/{voucher_id}", response_model=PaymentVoucherView)
def get_payment_voucher(voucher_id: UUID, conn: Connection = Depends(get_conn)):
    voucher = get_voucher(conn, voucher_id)
    if not voucher:
        raise HTTPException(status_code=404, detail="Payment voucher not found")
    voucher["amount_display"] = format_currency(voucher["amount"])
    voucher["amount_in_words"] = amount_in_words(voucher["amount"])
    return voucher

@vouchers_router.post("", response_model=PaymentVoucher, status_code=201)
def create_payment_voucher(
    payload: PaymentVoucherIn = Body(...),
    conn: Connection = Depends(get_conn),
    org_id: str = Depends(get_org_id),
):
    with conn.transaction():
        owner = get_company_name(conn, org_id)
        number = next_document_number(conn, DocumentType.PAYMENT_VOUCHER.prefix, owner, date.today().year)
        row = insert_voucher(conn, org_id, number, payload.model_dump())
    logger.info("created payment voucher %s", number)
    return row

@vouchers_router.put("/{voucher_id}", response_model=PaymentVoucher)
def put_payment_voucher(voucher_id: UUID, payload: PaymentVoucherIn = Body(...), conn: Connection = Depends(get_conn)):
    with conn.transaction():
        row = update_voucher(conn, voucher_id, payload.model_dump())
    if row is None:
        raise HTTPException(status_code=404, detail="Payment voucher not found")
    return row

@vouchers_router.delete("/{voucher_id}")
def delete_payment_voucher(voucher_id: UUID, conn: Connection = Depends(get_conn)):
    with conn.transaction():
        if not delete_voucher(conn, voucher_id):
            raise HTTPException(status_code=404, detail="Payment voucher not found")
    return {"ok": True, "id": voucher_id}


# === Payment receipts ===

@receipts_router.get("", response_model=PaymentReceiptPage)
def list_payment_receipts(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    conn: Connection = Depends(get_conn),
):
    return {"items": list_receipts(conn, limit=limit, offset=offset), "limit": limit, "offset": offset}

@receipts_router.get("/next-number")
def next_receipt_number(conn: Connection = Depends(get_conn), org_id: str = Depends(get_org_id)):
    owner = get_company_name(conn, org_id)
    prefix = DocumentType.PAYMENT_RECEIPT.prefix
    return {"number": preview_document_number(conn, prefix, owner, date.today().year)}

@receipts_router.get("/{receipt_id}", response_model=PaymentReceiptView)
def get_payment_receipt(receipt_id: UUID, conn: Connection = Depends(get_conn)):
    receipt = get_receipt(conn, receipt_id)
    if not receipt:
        raise HTTPException(status_code=404, detail="Payment receipt not found")
    receipt["amount_display"] = format_currency(receipt["amount"])
    receipt["amount_in_words"] = amount_in_words(receipt["amount"])
    return receipt

@receipts_router.post("", response_model=PaymentReceipt, status_code=201)
def create_payment_receipt(
    payload: PaymentReceiptIn = Body(...),
    conn: Connection = Depends(get_conn),
    org_id: str = Depends(get_org_id),
):
    with conn.transaction():
        _check_client(conn, payload.client_id)
        owner = get_company_name(conn, org_id)
        number = next_document_number(conn, DocumentType.PAYMENT_RECEIPT.prefix, owner, date.today().year)
        row = insert_receipt(conn, org_id, number, _receipt_fields(payload))
    logger.info("created payment receipt %s", number)
    return row

@receipts_router.put("/{receipt_id}", response_model=PaymentReceipt)
def put_payment_receipt(receipt_id: UUID, payload: PaymentReceiptIn = Body(...), conn: Connection = Depends(get_conn)):
    with conn.transaction():
        _check_client(conn, payload.client_id)
        row = update_receipt(conn, receipt_id, _receipt_fields(payload))
    if row is None:
        raise HTTPException(status_code=404, detail="Payment receipt not found")
    return row

@receipts_router.delete("/{receipt_id}")
def delete_payment_receipt(receipt_id: UUID, conn: Connection = Depends(get_conn)):
    with conn.transaction():
        if not delete_receipt(conn, receipt_id):
            raise HTTPException(status_code=404, detail="Payment receipt not found")
    return {"ok": True, "id": receipt_id}
