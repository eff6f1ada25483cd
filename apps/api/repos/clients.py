from typing import List, Dict, Any, Optional
from psycopg import Connection
from uuid import UUID

CLIENT_COLUMNS = "id, company_name, contact_name, address, phone, email, tin"
EDITABLE = ("company_name", "contact_name", "address", "phone", "email", "tin")
COLUMN_LIST = ", ".join(EDITABLE)

# Lists clients for the current org context with pagination.
# Org scoping should be enforced via RLS using app.org_id GUC.
def list_clients(conn: Connection, limit: int = 100, offset: int = 0) -> List[Dict[str, Any]]:
    with conn.cursor() as cur:
        cur.execute(
            f"""
            SELECT {CLIENT_COLUMNS}
            FROM clients
            ORDER BY company_name ASC
            LIMIT %s OFFSET %s
            """,
            (limit, offset),
        )
        columns = [c[0] for c in cur.description]
        return [dict(zip(columns, row)) for row in cur.fetchall()]

# Fetches a single client by ID. Returns None if not found.
def get_client(conn: Connection, client_id: UUID) -> Optional[Dict[str, Any]]:
    with conn.cursor() as cur:
        cur.execute(
            f"""
            SELECT {CLIENT_COLUMNS}
            FROM clients
            WHERE id = %s
            """,
            (client_id,),
        )
        row = cur.fetchone()
        if not row:
            return None
        columns = [c[0] for c in cur.description]
        return dict(zip(columns, row))

# Creates a client and returns the stored row.
def create_client(conn: Connection, org_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
    values = {k: fields.get(k) for k in EDITABLE}
    placeholders = ", ".join(f"%({k})s" for k in EDITABLE)
    with conn.cursor() as cur:
        cur.execute(
            f"""
            INSERT INTO clients (id, org_id, {COLUMN_LIST}, created_at)
            VALUES (gen_random_uuid(), %(org_id)s, {placeholders}, now())
            RETURNING {CLIENT_COLUMNS}
            """,
            {"org_id": org_id, **values},
        )
        columns = [c[0] for c in cur.description]
        return dict(zip(columns, cur.fetchone()))

# Overwrites the editable client fields. Returns None if no such client exists.
def update_client(conn: Connection, client_id: UUID, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    assignments = ", ".join(f"{k} = %({k})s" for k in EDITABLE)
    with conn.cursor() as cur:
        cur.execute(
            f"UPDATE clients SET {assignments} WHERE id = %(id)s RETURNING {CLIENT_COLUMNS}",
            {"id": client_id, **{k: fields.get(k) for k in EDITABLE}},
        )
        row = cur.fetchone()
        if not row:
            return None
        columns = [c[0] for c in cur.description]
        return dict(zip(columns, row))

def delete_client(conn: Connection, client_id: UUID) -> bool:
    with conn.cursor() as cur:
        cur.execute("DELETE FROM clients WHERE id = %s", (client_id,))
        return cur.rowcount > 0
