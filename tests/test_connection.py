from __future__ import annotations

import pytest

from src.timekeeping.timekeeping.database.connection import DatabaseConnection, DBConfig
from tests.sql_fakes import RecordingConnection


class StubbedConnection(DatabaseConnection):
    def __init__(self):
        super().__init__(DBConfig(host="db", port=3306, user="app", password="", database="timekeeping_db"))
        self.opened: list[RecordingConnection] = []

    def connect(self):
        conn = RecordingConnection()
        self.opened.append(conn)
        return conn


def test_transaction_reads_committed_rows_and_commits_once():
    db = StubbedConnection()

    with db.transaction() as conn:
        with db.transaction() as inner:
            assert inner is conn
        assert db.active is conn

    assert len(db.opened) == 1
    assert conn.isolation_level == "READ COMMITTED"
    assert conn.calls == ["start", "commit", "close"]
    assert db.active is None


def test_transaction_rolls_back_on_error():
    db = StubbedConnection()

    with pytest.raises(RuntimeError):
        with db.transaction():
            raise RuntimeError("boom")

    assert db.opened[0].calls == ["start", "rollback", "close"]
    assert db.active is None
