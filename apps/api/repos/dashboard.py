from __future__ import annotations

from typing import Any, Dict, List

from psycopg import Connection


def document_stats(conn: Connection) -> List[Dict[str, Any]]:
    """
    Per document type: how many there are, their summed totals and tax, and
    the count/sum of those not yet marked Paid.
    """
    with conn.cursor() as cur:
        cur.execute(
            """
            SELECT
              doc_type,
              COUNT(*) AS count,
              COALESCE(SUM(total), 0) AS total,
              COALESCE(SUM(tax), 0) AS tax,
              COUNT(*) FILTER (WHERE status <> 'Paid') AS unpaid_count,
              COALESCE(SUM(total) FILTER (WHERE status <> 'Paid'), 0) AS unpaid_total
            FROM documents
            GROUP BY doc_type
            """
        )
        columns = [col[0] for col in cur.description]
        return [dict(zip(columns, row)) for row in cur.fetchall()]


def payment_stats(conn: Connection) -> Dict[str, Dict[str, Any]]:
    """Count and summed amount of payment vouchers and payment receipts."""
    out: Dict[str, Dict[str, Any]] = {}
    with conn.cursor() as cur:
        for key, table in (("payment_voucher", "payment_vouchers"), ("payment_receipt", "payment_receipts")):
            cur.execute(f"SELECT COUNT(*), COALESCE(SUM(amount), 0) FROM {table}")
            count, total = cur.fetchone()
            out[key] = {"count": count, "total": total}
    return out


def income_rows(conn: Connection) -> List[Dict[str, Any]]:
    """Sales invoice totals with their creation timestamps."""
    with conn.cursor() as cur:
        cur.execute(
            "SELECT created_at, total AS amount FROM documents WHERE doc_type = 'sales_invoice'"
        )
        columns = [col[0] for col in cur.description]
        return [dict(zip(columns, row)) for row in cur.fetchall()]


def expense_rows(conn: Connection) -> List[Dict[str, Any]]:
    """Payment voucher amounts with their creation timestamps."""
    with conn.cursor() as cur:
        cur.execute("SELECT created_at, amount FROM payment_vouchers")
        columns = [col[0] for col in cur.description]
        return [dict(zip(columns, row)) for row in cur.fetchall()]
