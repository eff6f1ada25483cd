from typing import Optional

from psycopg import Connection, Error as PsycopgError

from ..errors import StorageUnavailable

# Single statement: Postgres takes the row lock for the upsert, so concurrent
# callers on the same id are serialized and each sees its own value.
NEXT_VALUE_SQL = """
INSERT INTO sequences (id, value)
VALUES (%(id)s, 1)
ON CONFLICT (id) DO UPDATE SET value = sequences.value + 1
RETURNING value;
"""


# Atomically increments the named counter (creating it at 1) and returns the new value.
def next_sequence_value(conn: Connection, sequence_id: str) -> int:
    try:
        with conn.cursor() as cur:
            cur.execute(NEXT_VALUE_SQL, {"id": sequence_id})
            row = cur.fetchone()
    except PsycopgError as e:
        raise StorageUnavailable(f"sequence {sequence_id!r}: {e}") from e
    if row is None:
        raise StorageUnavailable(f"sequence {sequence_id!r}: increment returned no row")
    return int(row[0])


# Reads the current value without advancing it. Returns None for unused counters.
def current_sequence_value(conn: Connection, sequence_id: str) -> Optional[int]:
    try:
        with conn.cursor() as cur:
            cur.execute("SELECT value FROM sequences WHERE id = %s", (sequence_id,))
            row = cur.fetchone()
    except PsycopgError as e:
        raise StorageUnavailable(f"sequence {sequence_id!r}: {e}") from e
    return None if row is None else int(row[0])
