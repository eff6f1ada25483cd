from typing import Any, Dict, List, Optional
from uuid import UUID

from psycopg import Connection

VOUCHER_FIELDS = (
    "payee_name", "voucher_date", "amount", "payment_method", "description",
    "prepared_by", "approved_by", "payee_bank_name", "payee_account_name", "payee_account_number",
)
RECEIPT_FIELDS = (
    "client_id", "payment_date", "amount", "payment_method", "payment_type",
    "related_invoice_number", "total_amount", "amount_due", "notes", "issued_by",
)
VOUCHER_COLUMNS = "id, voucher_number, " + ", ".join(VOUCHER_FIELDS)
RECEIPT_COLUMNS = "id, receipt_number, " + ", ".join(RECEIPT_FIELDS)

_TABLES = {
    "voucher": ("payment_vouchers", "voucher_number", VOUCHER_FIELDS, VOUCHER_COLUMNS, "voucher_date"),
    "receipt": ("payment_receipts", "receipt_number", RECEIPT_FIELDS, RECEIPT_COLUMNS, "payment_date"),
}


def _insert(conn: Connection, kind: str, org_id: str, number: str, fields: Dict[str, Any]) -> Dict[str, Any]:
    table, number_col, editable, columns, _ = _TABLES[kind]
    placeholders = ", ".join(f"%({k})s" for k in editable)
    column_list = ", ".join(editable)
    with conn.cursor() as cur:
        cur.execute(
            f"""
            INSERT INTO {table} (id, org_id, {number_col}, {column_list}, created_at)
            VALUES (gen_random_uuid(), %(org_id)s, %(number)s, {placeholders}, now())
            RETURNING {columns}
            """,
            {"org_id": org_id, "number": number, **{k: fields.get(k) for k in editable}},
        )
        names = [c[0] for c in cur.description]
        return dict(zip(names, cur.fetchone()))


def _list(conn: Connection, kind: str, limit: int, offset: int) -> List[Dict[str, Any]]:
    table, _, _, columns, date_col = _TABLES[kind]
    with conn.cursor() as cur:
        cur.execute(
            f"SELECT {columns} FROM {table} ORDER BY {date_col} DESC, created_at DESC LIMIT %s OFFSET %s",
            (limit, offset),
        )
        names = [c[0] for c in cur.description]
        return [dict(zip(names, row)) for row in cur.fetchall()]


def _get(conn: Connection, kind: str, row_id: UUID) -> Optional[Dict[str, Any]]:
    table, _, _, columns, _ = _TABLES[kind]
    with conn.cursor() as cur:
        cur.execute(f"SELECT {columns} FROM {table} WHERE id = %s", (row_id,))
        row = cur.fetchone()
        if not row:
            return None
        names = [c[0] for c in cur.description]
        return dict(zip(names, row))


def _update(conn: Connection, kind: str, row_id: UUID, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    table, _, editable, columns, _ = _TABLES[kind]
    assignments = ", ".join(f"{k} = %({k})s" for k in editable)
    with conn.cursor() as cur:
        cur.execute(
            f"UPDATE {table} SET {assignments} WHERE id = %(id)s RETURNING {columns}",
            {"id": row_id, **{k: fields.get(k) for k in editable}},
        )
        row = cur.fetchone()
        if not row:
            return None
        names = [c[0] for c in cur.description]
        return dict(zip(names, row))


def _delete(conn: Connection, kind: str, row_id: UUID) -> bool:
    table = _TABLES[kind][0]
    with conn.cursor() as cur:
        cur.execute(f"DELETE FROM {table} WHERE id = %s", (row_id,))
        return cur.rowcount > 0


# Payment vouchers (money paid out)

def insert_voucher(conn: Connection, org_id: str, voucher_number: str, fields: Dict[str, Any]) -> Dict[str, Any]:
    return _insert(conn, "voucher", org_id, voucher_number, fields)

def list_vouchers(conn: Connection, limit: int = 50, offset: int = 0) -> List[Dict[str, Any]]:
    return _list(conn, "voucher", limit, offset)

def get_voucher(conn: Connection, voucher_id: UUID) -> Optional[Dict[str, Any]]:
    return _get(conn, "voucher", voucher_id)

def update_voucher(conn: Connection, voucher_id: UUID, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    return _update(conn, "voucher", voucher_id, fields)

def delete_voucher(conn: Connection, voucher_id: UUID) -> bool:
    return _delete(conn, "voucher", voucher_id)


# Payment receipts (money received from clients)

def insert_receipt(conn: Connection, org_id: str, receipt_number: str, fields: Dict[str, Any]) -> Dict[str, Any]:
    return _insert(conn, "receipt", org_id, receipt_number, fields)

def list_receipts(conn: Connection, limit: int = 50, offset: int = 0) -> List[Dict[str, Any]]:
    return _list(conn, "receipt", limit, offset)

def get_receipt(conn: Connection, receipt_id: UUID) -> Optional[Dict[str, Any]]:
    return _get(conn, "receipt", receipt_id)

def update_receipt(conn: Connection, receipt_id: UUID, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    return _update(conn, "receipt", receipt_id, fields)

def delete_receipt(conn: Connection, receipt_id: UUID) -> bool:
    return _delete(conn, "receipt", receipt_id)
