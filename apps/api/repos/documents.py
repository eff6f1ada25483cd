from typing import Any, Dict, List, Optional
from uuid import UUID

from psycopg import Connection

from ..models.documents import DocumentType, LineItem, TotalsResult

DOCUMENT_COLUMNS = """
    id, doc_type, doc_number, party_id, doc_date, due_date, project_name, notes,
    status, discount_percent, apply_tax, subtotal, discount_amount, tax, total
"""


# Inserts a line-item document header with its persisted totals and returns its ID.
def insert_document(
    conn: Connection,
    *,
    org_id: str,
    doc_type: DocumentType,
    doc_number: str,
    payload: Dict[str, Any],
    totals: TotalsResult,
) -> str:
    sql = """
    INSERT INTO documents
      (id, org_id, doc_type, doc_number, party_id, doc_date, due_date, project_name, notes,
       status, discount_percent, apply_tax, subtotal, discount_amount, tax, total, created_at)
    VALUES
      (gen_random_uuid(), %(org_id)s, %(doc_type)s, %(doc_number)s, %(party_id)s, %(doc_date)s,
       %(due_date)s, %(project_name)s, %(notes)s, 'Draft', %(discount_percent)s, %(apply_tax)s,
       %(subtotal)s, %(discount_amount)s, %(tax)s, %(total)s, now())
    RETURNING id;
    """
    with conn.cursor() as cur:
        cur.execute(sql, {
            "org_id": org_id,
            "doc_type": doc_type.value,
            "doc_number": doc_number,
            "party_id": payload["party_id"],
            "doc_date": payload["doc_date"],
            "due_date": payload.get("due_date"),
            "project_name": payload.get("project_name"),
            "notes": payload.get("notes"),
            "discount_percent": payload.get("discount_percent", 0),
            "apply_tax": payload.get("apply_tax", False),
            "subtotal": totals.subtotal,
            "discount_amount": totals.discount_amount,
            "tax": totals.tax,
            "total": totals.grand_total,
        })
        return cur.fetchone()[0]


# Replaces all line items of a document, keeping their order.
def replace_lines(conn: Connection, document_id: UUID, lines: List[LineItem]) -> None:
    with conn.cursor() as cur:
        cur.execute("DELETE FROM document_lines WHERE document_id = %(id)s", {"id": document_id})
        cur.executemany("""
            INSERT INTO document_lines
              (id, document_id, position, description, quantity, unit_price, discount, taxable)
            VALUES
              (gen_random_uuid(), %(document_id)s, %(position)s, %(description)s, %(quantity)s,
               %(unit_price)s, %(discount)s, %(taxable)s)
        """, [
            {"document_id": document_id, "position": pos, **ln.model_dump()}
            for pos, ln in enumerate(lines)
        ])


# Lists documents of one type, newest first. LIMIT = page size; OFFSET = start index
def list_documents(
    conn: Connection,
    doc_type: DocumentType,
    limit: int = 50,
    offset: int = 0,
) -> List[Dict[str, Any]]:
    with conn.cursor() as cur:
        cur.execute(
            f"""
            SELECT {DOCUMENT_COLUMNS}
            FROM documents
            WHERE doc_type = %s
            ORDER BY doc_date DESC, created_at DESC
            LIMIT %s OFFSET %s
            """,
            (doc_type.value, limit, offset),
        )
        columns = [col[0] for col in cur.description]
        return [dict(zip(columns, row)) for row in cur.fetchall()]


# Fetches a single document of the given type with its lines. Returns None if not found.
def get_document_with_lines(
    conn: Connection,
    doc_type: DocumentType,
    document_id: UUID,
) -> Optional[Dict[str, Any]]:
    with conn.cursor() as cur:
        cur.execute(
            f"SELECT {DOCUMENT_COLUMNS} FROM documents WHERE id = %s AND doc_type = %s",
            (document_id, doc_type.value),
        )
        row = cur.fetchone()
        if not row:
            return None
        columns = [c[0] for c in cur.description]
        doc = dict(zip(columns, row))

        cur.execute(
            """
            SELECT description, quantity, unit_price, discount, taxable
            FROM document_lines WHERE document_id = %s ORDER BY position
            """,
            (document_id,),
        )
        line_cols = [c[0] for c in cur.description]
        doc["lines"] = [dict(zip(line_cols, r)) for r in cur.fetchall()]
        return doc


# Rewrites the editable header fields and totals of a document. The document
# number and type never change. Returns False if no such document exists.
def update_document(
    conn: Connection,
    doc_type: DocumentType,
    document_id: UUID,
    payload: Dict[str, Any],
    totals: TotalsResult,
) -> bool:
    sql = """
    UPDATE documents SET
      party_id         = %(party_id)s,
      doc_date         = %(doc_date)s,
      due_date         = %(due_date)s,
      project_name     = %(project_name)s,
      notes            = %(notes)s,
      discount_percent = %(discount_percent)s,
      apply_tax        = %(apply_tax)s,
      subtotal         = %(subtotal)s,
      discount_amount  = %(discount_amount)s,
      tax              = %(tax)s,
      total            = %(total)s
    WHERE id = %(id)s AND doc_type = %(doc_type)s
    """
    with conn.cursor() as cur:
        cur.execute(sql, {
            "id": document_id,
            "doc_type": doc_type.value,
            "party_id": payload["party_id"],
            "doc_date": payload["doc_date"],
            "due_date": payload.get("due_date"),
            "project_name": payload.get("project_name"),
            "notes": payload.get("notes"),
            "discount_percent": payload.get("discount_percent", 0),
            "apply_tax": payload.get("apply_tax", False),
            "subtotal": totals.subtotal,
            "discount_amount": totals.discount_amount,
            "tax": totals.tax,
            "total": totals.grand_total,
        })
        return cur.rowcount > 0


# Sets the workflow status (Draft, Sent, Paid, ...). Returns False if no such document exists.
def update_document_status(conn: Connection, doc_type: DocumentType, document_id: UUID, status: str) -> bool:
    with conn.cursor() as cur:
        cur.execute(
            "UPDATE documents SET status = %s WHERE id = %s AND doc_type = %s",
            (status, document_id, doc_type.value),
        )
        return cur.rowcount > 0


# Deletes a document; its lines go with it via ON DELETE CASCADE.
def delete_document(conn: Connection, doc_type: DocumentType, document_id: UUID) -> bool:
    with conn.cursor() as cur:
        cur.execute(
            "DELETE FROM documents WHERE id = %s AND doc_type = %s",
            (document_id, doc_type.value),
        )
        return cur.rowcount > 0
