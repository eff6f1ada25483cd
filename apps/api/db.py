import logging
from typing import Iterator, Optional

from psycopg import Connection, OperationalError
from psycopg_pool import ConnectionPool, PoolTimeout

from .errors import StorageUnavailable
from .settings import settings

logger = logging.getLogger(__name__)

_pool: Optional[ConnectionPool] = None


def get_pool() -> ConnectionPool:
    """Return the process-wide pool, opening it on first use."""
    global _pool
    if _pool is None:
        _pool = ConnectionPool(
            conninfo=settings.DATABASE_URL,
            min_size=settings.DB_POOL_MIN_SIZE,
            max_size=settings.DB_POOL_MAX_SIZE,
            open=True,
        )
    return _pool


def close_pool() -> None:
    global _pool
    if _pool is not None:
        _pool.close()
        _pool = None


def get_conn() -> Iterator[Connection]:
    """
    FastAPI dependency: borrow a pooled connection for one request and set
    the per-request org context used by row level security.
    """
    try:
        with get_pool().connection() as conn:
            if settings.ORG_ID:
                with conn.cursor() as cur:
                    # LOCAL to the transaction the request runs in
                    cur.execute("SELECT set_config('app.org_id', %s, true)", (settings.ORG_ID,))
            yield conn
    except (OperationalError, PoolTimeout) as e:
        logger.error("database unavailable: %s", e)
        raise StorageUnavailable(str(e)) from e


def db_ok() -> bool:
    try:
        with get_pool().connection() as conn, conn.cursor() as cur:
            cur.execute('select 1;')
            cur.fetchone()
        return True
    except Exception:
        return False
