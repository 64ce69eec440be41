from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from mysql.connector import pooling

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    pool_size: int = 5

    @classmethod
    def from_mapping(cls, db_config: Mapping, *, pool_size: int = 5) -> "DBConfig":
        """Build from the ``DB_CONFIG`` dict of a settings module."""

        return cls(
            host=str(db_config["host"]),
            port=int(db_config.get("port", 3306)),
            user=str(db_config["user"]),
            password=str(db_config.get("password", "")),
            database=str(db_config["database"]),
            pool_size=int(db_config.get("pool_size", pool_size)),
        )


class DatabaseConnection:
    """Process-wide connection source backed by a small mysql-connector pool.

    ``connect()`` hands out a pooled connection; closing it returns it to the pool.
    The pool is created lazily so the app can start before MySQL is reachable.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config
        self._pool: Optional[pooling.MySQLConnectionPool] = None

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None or cls._instance.config != config:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    @property
    def config(self) -> DBConfig:
        return self._config

    def _get_pool(self) -> pooling.MySQLConnectionPool:
        if self._pool is None:
            self._pool = pooling.MySQLConnectionPool(
                pool_name=f"timeclock-{self._config.database}",
                pool_size=self._config.pool_size,
                pool_reset_session=True,
                host=self._config.host,
                port=self._config.port,
                user=self._config.user,
                password=self._config.password,
                database=self._config.database,
                autocommit=False,
            )
            logger.info(
                "Connection pool ready: %s@%s:%s/%s (size=%s)",
                self._config.user,
                self._config.host,
                self._config.port,
                self._config.database,
                self._config.pool_size,
            )
        return self._pool

    def connect(self):
        return self._get_pool().get_connection()
