import datetime as dt

import psycopg2
import pytest

from analysis.store import PgStore


class FakeCursor:
    def __init__(self, error=None, row=None):
        self.error = error
        self.row = row
        self.queries = []

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False

    def execute(self, query, params=None):
        self.queries.append((query, params))
        if self.error is not None:
            raise self.error

    def fetchone(self):
        return self.row


class FakeConn:
    """Records how each `with conn:` block ended (None on success)."""

    def __init__(self, cursor):
        self._cursor = cursor
        self.exits = []

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.exits.append(exc_type)
        return False

    def cursor(self):
        return self._cursor


def test_failed_read_ends_its_transaction():
    conn = FakeConn(FakeCursor(error=psycopg2.DataError("invalid input syntax for type uuid")))

    with pytest.raises(psycopg2.DataError):
        PgStore(conn).load_source("abc")

    assert conn.exits == [psycopg2.DataError]


def test_successful_read_closes_its_transaction():
    row = ("7c0e", "export.pdf", dt.date(2025, 1, 6), dt.datetime(2025, 1, 6, 9, 0), "SBRSPAA01 texto")
    conn = FakeConn(FakeCursor(row=row))

    source = PgStore(conn).load_source("7c0e")

    assert conn.exits == [None]
    assert source.filename == "export.pdf"
    assert source.extraction_date == "2025-01-06"
    assert source.text_length == len("SBRSPAA01 texto")


def test_unknown_unit_is_none():
    conn = FakeConn(FakeCursor(row=None))

    assert PgStore(conn).find_unit("sbrspzz99") is None
    assert conn.exits == [None]
