from __future__ import annotations

from pathlib import Path

from src.timeclock.timeclock.database.bootstrap import split_statements, strip_database_selection

SCHEMA = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


def test_statements_split_on_semicolons_outside_quotes():
    sql = "INSERT INTO t VALUES('a;b');\n-- note; not a statement\nSELECT 1;"

    assert list(split_statements(sql)) == ["INSERT INTO t VALUES('a;b')", "SELECT 1"]


def test_database_selection_is_stripped():
    sql = "CREATE DATABASE foo;\nUSE foo;\nCREATE TABLE x (id INT);"

    assert list(split_statements(strip_database_selection(sql))) == ["CREATE TABLE x (id INT)"]


def test_schema_declares_every_table():
    statements = list(split_statements(SCHEMA.read_text(encoding="utf-8")))
    created = [s.split()[5] for s in statements if s.upper().startswith("CREATE TABLE IF NOT EXISTS")]

    assert created == ["users", "check_ins", "pauses", "checkouts", "notifications"]
