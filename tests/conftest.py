"""
Shared fixtures.

FakeConnection stands in for a psycopg connection in the places the
numbering code touches: it understands the sequence upsert and the
sequence read, and applies the upsert atomically under a lock the way
Postgres serializes it on the row.
"""

import threading
from contextlib import contextmanager

import psycopg
import pytest

from apps.api.settings import settings


class SequenceStore:
    def __init__(self):
        self.values = {}
        self._lock = threading.Lock()

    def increment(self, sequence_id: str) -> int:
        with self._lock:
            self.values[sequence_id] = self.values.get(sequence_id, 0) + 1
            return self.values[sequence_id]

    def get(self, sequence_id: str):
        with self._lock:
            return self.values.get(sequence_id)


class FakeCursor:
    def __init__(self, conn: "FakeConnection"):
        self.conn = conn
        self._row = None
        self.rowcount = 0

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, sql, params=None):
        if self.conn.fail:
            raise psycopg.OperationalError("connection refused")
        if "INSERT INTO sequences" in sql:
            self._row = (self.conn.store.increment(params["id"]),)
        elif "FROM sequences" in sql:
            value = self.conn.store.get(params[0])
            self._row = None if value is None else (value,)
        else:
            raise AssertionError(f"unexpected SQL: {sql}")
        self.rowcount = 0 if self._row is None else 1

    def fetchone(self):
        return self._row


class FakeConnection:
    def __init__(self, store: SequenceStore | None = None, fail: bool = False):
        self.store = store or SequenceStore()
        self.fail = fail

    def cursor(self):
        return FakeCursor(self)

    @contextmanager
    def transaction(self):
        yield self


@pytest.fixture
def sequence_store():
    return SequenceStore()


@pytest.fixture
def conn(sequence_store):
    return FakeConnection(sequence_store)


@pytest.fixture
def broken_conn():
    return FakeConnection(fail=True)


@pytest.fixture
def org_id(monkeypatch):
    value = "0b7f2c43-5d8e-4a55-9a1e-3f1a6f0c9d21"
    monkeypatch.setattr(settings, "ORG_ID", value)
    return value
