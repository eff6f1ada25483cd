from typing import List, Dict, Any, Optional
from psycopg import Connection
from uuid import UUID

VENDOR_COLUMNS = """
    id, company_name, contact_name, address, phone, email, website, tin,
    bank_name, account_name, account_number
"""
EDITABLE = (
    "company_name", "contact_name", "address", "phone", "email", "website", "tin",
    "bank_name", "account_name", "account_number",
)
COLUMN_LIST = ", ".join(EDITABLE)

# Lists vendors for the current org context with pagination.
# Org scoping should be enforced via RLS using app.org_id GUC.
def list_vendors(conn: Connection, limit: int = 100, offset: int = 0) -> List[Dict[str, Any]]:
    with conn.cursor() as cur:
        cur.execute(
            f"""
            SELECT {VENDOR_COLUMNS}
            FROM vendors
            ORDER BY company_name ASC
            LIMIT %s OFFSET %s
            """,
            (limit, offset),
        )
        columns = [c[0] for c in cur.description]
        return [dict(zip(columns, row)) for row in cur.fetchall()]

# Fetches a single vendor by ID. Returns None if not found.
def get_vendor(conn: Connection, vendor_id: UUID) -> Optional[Dict[str, Any]]:
    with conn.cursor() as cur:
        cur.execute(
            f"""
            SELECT {VENDOR_COLUMNS}
            FROM vendors
            WHERE id = %s
            """,
            (vendor_id,),
        )
        row = cur.fetchone()
        if not row:
            return None
        columns = [c[0] for c in cur.description]
        return dict(zip(columns, row))

# Creates a vendor and returns the stored row.
def create_vendor(conn: Connection, org_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
    values = {k: fields.get(k) for k in EDITABLE}
    placeholders = ", ".join(f"%({k})s" for k in EDITABLE)
    with conn.cursor() as cur:
        cur.execute(
            f"""
            INSERT INTO vendors (id, org_id, {COLUMN_LIST}, created_at)
            VALUES (gen_random_uuid(), %(org_id)s, {placeholders}, now())
            RETURNING {VENDOR_COLUMNS}
            """,
            {"org_id": org_id, **values},
        )
        columns = [c[0] for c in cur.description]
        return dict(zip(columns, cur.fetchone()))

# Overwrites the editable vendor fields. Returns None if no such vendor exists.
def update_vendor(conn: Connection, vendor_id: UUID, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    assignments = ", ".join(f"{k} = %({k})s" for k in EDITABLE)
    with conn.cursor() as cur:
        cur.execute(
            f"UPDATE vendors SET {assignments} WHERE id = %(id)s RETURNING {VENDOR_COLUMNS}",
            {"id": vendor_id, **{k: fields.get(k) for k in EDITABLE}},
        )
        row = cur.fetchone()
        if not row:
            return None
        columns = [c[0] for c in cur.description]
        return dict(zip(columns, row))

def delete_vendor(conn: Connection, vendor_id: UUID) -> bool:
    with conn.cursor() as cur:
        cur.execute("DELETE FROM vendors WHERE id = %s", (vendor_id,))
        return cur.rowcount > 0
