from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator

from psycopg2.extensions import register_adapter
from psycopg2.extras import Json
from psycopg2.pool import ThreadedConnectionPool


class PostgresDatabase:
    def __init__(self, *, dsn: str, minconn: int = 1, maxconn: int = 10):
        # jsonb columns (tier features and limits) are written from dicts
        register_adapter(dict, Json)

        self.dsn = dsn
        self.minconn = minconn
        self.maxconn = maxconn
        self._pool: ThreadedConnectionPool | None = None
        self._pool_lock = threading.Lock()

    def _get_pool(self) -> ThreadedConnectionPool:
        # Repository reads run on executor threads; only one may build the pool
        if self._pool is None:
            with self._pool_lock:
                if self._pool is None:
                    self._pool = ThreadedConnectionPool(
                        minconn=self.minconn, maxconn=self.maxconn, dsn=self.dsn
                    )
        return self._pool

    @contextmanager
    def connection(self) -> Iterator:
        pool = self._get_pool()
        conn = pool.getconn()
        try:
            yield conn
        finally:
            pool.putconn(conn)

    def close(self) -> None:
        with self._pool_lock:
            if self._pool is not None:
                self._pool.closeall()
                self._pool = None
