from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterator, Mapping

import mysql.connector

from .connection import DBConfig

logger = logging.getLogger(__name__)

_DATABASE_SELECTION = re.compile(r"(?im)^\s*(?:CREATE\s+DATABASE|USE)\b[^;]*;\s*$")

# Quoted literals first so a ';' or '--' inside them is never treated as syntax.
_SQL_TOKEN = re.compile(
    r"""
    '(?:[^'\\]|\\.)*'
    | "(?:[^"\\]|\\.)*"
    | --[ \t][^\n]*
    | ;
    | [^'";-]+
    | .
    """,
    re.VERBOSE | re.DOTALL,
)


def strip_database_selection(sql: str) -> str:
    """Drop ``CREATE DATABASE`` / ``USE`` lines; the target comes from settings."""

    return _DATABASE_SELECTION.sub("", sql)


def split_statements(sql: str) -> Iterator[str]:
    pending: list[str] = []
    for token in _SQL_TOKEN.findall(sql):
        if token.startswith("-- ") or token.startswith("--\t"):
            continue
        if token == ";":
            statement = "".join(pending).strip()
            pending = []
            if statement:
                yield statement
            continue
        pending.append(token)

    statement = "".join(pending).strip()
    if statement:
        yield statement


def _open(config: DBConfig, *, select_database: bool = True):
    params = dict(host=config.host, port=config.port, user=config.user, password=config.password)
    if select_database:
        params["database"] = config.database
    return mysql.connector.connect(**params)


def apply_schema(db_config: Mapping, *, schema_path: str | Path) -> None:
    """Create the database if needed and run every statement of ``schema_path``."""

    config = DBConfig.from_mapping(db_config)

    server = _open(config, select_database=False)
    try:
        server.cursor().execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` "
            "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        server.commit()
    finally:
        server.close()

    statements = list(split_statements(strip_database_selection(Path(schema_path).read_text(encoding="utf-8"))))
    conn = _open(config)
    try:
        cur = conn.cursor()
        for statement in statements:
            cur.execute(statement)
        conn.commit()
    finally:
        conn.close()
    logger.info("Applied %s statements to %s", len(statements), config.database)


def list_tables(db_config: Mapping) -> list[str]:
    conn = _open(DBConfig.from_mapping(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return sorted(row[0] for row in cur.fetchall())
    finally:
        conn.close()
