from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator, Optional, Protocol

import mysql.connector
from mysql.connector.constants import ClientFlag


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str


class TransactionManager(Protocol):
    """What services need to group several repository writes atomically."""

    def transaction(self) -> Any:
        raise NotImplementedError


ISOLATION_LEVEL = "READ COMMITTED"


class DatabaseConnection:
    """DB connection factory, injected into every repository.

    Repositories open a short-lived connection per operation unless a
    transaction is active on the current thread, in which case they join it.
    """

    def __init__(self, config: DBConfig):
        self._config = config
        self._local = threading.local()

    def connect(self):
        return mysql.connector.connect(
            host=self._config.host,
            port=int(self._config.port),
            user=self._config.user,
            password=self._config.password,
            database=self._config.database,
            # rowcount = matched rows, so an UPDATE that keeps a value still reports the row.
            client_flags=[ClientFlag.FOUND_ROWS],
        )

    @property
    def active(self) -> Optional[Any]:
        return getattr(self._local, "conn", None)

    @contextmanager
    def transaction(self) -> Iterator[Any]:
        """Run enclosed repository calls on one connection, commit once.

        Nested use joins the outer transaction. Each statement reads the latest
        committed rows, so a re-read after a lost race sees the winner.
        """

        outer = self.active
        if outer is not None:
            yield outer
            return

        conn = self.connect()
        self._local.conn = conn
        try:
            conn.start_transaction(isolation_level=ISOLATION_LEVEL)
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            self._local.conn = None
            conn.close()
