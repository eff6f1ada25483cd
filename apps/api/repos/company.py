from typing import Any, Dict, List, Optional
from uuid import UUID

from psycopg import Connection

PROFILE_FIELDS = ("name", "address", "tin", "email", "phone", "website")
PROFILE_COLUMNS = "id, " + ", ".join(PROFILE_FIELDS)


# Returns the organization's display name, the source of its document-number initials.
def get_company_name(conn: Connection, org_id: str) -> Optional[str]:
    with conn.cursor() as cur:
        cur.execute("SELECT name FROM orgs WHERE id = %s", (org_id,))
        row = cur.fetchone()
        return row[0] if row else None


# Returns a vendor's company name; vendor invoices are numbered in the vendor's series.
def get_vendor_name(conn: Connection, vendor_id: UUID) -> Optional[str]:
    with conn.cursor() as cur:
        cur.execute("SELECT company_name FROM vendors WHERE id = %s", (vendor_id,))
        row = cur.fetchone()
        return row[0] if row else None


# Returns a client's company name, or None when the client does not exist.
def get_client_name(conn: Connection, client_id: UUID) -> Optional[str]:
    with conn.cursor() as cur:
        cur.execute("SELECT company_name FROM clients WHERE id = %s", (client_id,))
        row = cur.fetchone()
        return row[0] if row else None


def _rows(cur) -> List[Dict[str, Any]]:
    columns = [c[0] for c in cur.description]
    return [dict(zip(columns, row)) for row in cur.fetchall()]


# Fetches the organization's profile with its signatories and bank accounts. Returns None if not found.
def get_company_profile(conn: Connection, org_id: str) -> Optional[Dict[str, Any]]:
    with conn.cursor() as cur:
        cur.execute(f"SELECT {PROFILE_COLUMNS} FROM orgs WHERE id = %s", (org_id,))
        row = cur.fetchone()
        if not row:
            return None
        columns = [c[0] for c in cur.description]
        profile = dict(zip(columns, row))

        cur.execute(
            "SELECT name, title FROM signatories WHERE org_id = %s ORDER BY position",
            (org_id,),
        )
        profile["signatories"] = _rows(cur)

        cur.execute(
            """
            SELECT bank_name, account_name, account_number
            FROM bank_accounts WHERE org_id = %s ORDER BY position
            """,
            (org_id,),
        )
        profile["bank_accounts"] = _rows(cur)
        return profile


# Overwrites the profile fields and replaces signatories and bank accounts wholesale.
# Returns False if the organization does not exist.
def update_company_profile(conn: Connection, org_id: str, fields: Dict[str, Any]) -> bool:
    assignments = ", ".join(f"{k} = %({k})s" for k in PROFILE_FIELDS)
    signatories = [
        {"org_id": org_id, "position": pos, **s}
        for pos, s in enumerate(fields.get("signatories") or [])
    ]
    bank_accounts = [
        {"org_id": org_id, "position": pos, **b}
        for pos, b in enumerate(fields.get("bank_accounts") or [])
    ]
    with conn.cursor() as cur:
        cur.execute(
            f"UPDATE orgs SET {assignments} WHERE id = %(id)s",
            {"id": org_id, **{k: fields.get(k) for k in PROFILE_FIELDS}},
        )
        if cur.rowcount == 0:
            return False

        cur.execute("DELETE FROM signatories WHERE org_id = %s", (org_id,))
        if signatories:
            cur.executemany(
                """
                INSERT INTO signatories (id, org_id, position, name, title)
                VALUES (gen_random_uuid(), %(org_id)s, %(position)s, %(name)s, %(title)s)
                """,
                signatories,
            )

        cur.execute("DELETE FROM bank_accounts WHERE org_id = %s", (org_id,))
        if bank_accounts:
            cur.executemany(
                """
                INSERT INTO bank_accounts (id, org_id, position, bank_name, account_name, account_number)
                VALUES (gen_random_uuid(), %(org_id)s, %(position)s, %(bank_name)s,
                        %(account_name)s, %(account_number)s)
                """,
                bank_accounts,
            )
        return True
