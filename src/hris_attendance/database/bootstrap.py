from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

from ..core.constants import (
    DEFAULT_COMPANY_NAME,
    DEFAULT_LATE_THRESHOLD_MINUTES,
    DEFAULT_WORK_END_TIME,
    DEFAULT_WORK_START_TIME,
)
from .connection import DBConfig, DatabaseConnection

logger = logging.getLogger(__name__)

DEFAULT_DEPARTMENTS = ("Engineering", "Marketing", "Finance", "Human Resources", "Operations", "Sales")

DEFAULT_SETTING_ROWS = {
    "companyName": DEFAULT_COMPANY_NAME,
    "workStartTime": DEFAULT_WORK_START_TIME,
    "workEndTime": DEFAULT_WORK_END_TIME,
    "lateThreshold": str(DEFAULT_LATE_THRESHOLD_MINUTES),
}


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema files (handles ';' inside quotes).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    config = DBConfig.from_dict(db_config)
    conn = DatabaseConnection(config).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))

    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        count = 0
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
            count += 1
        conn.commit()
        logger.info("Applied %d schema statements from %s", count, schema_path)
    finally:
        conn.close()


def seed_defaults(db_config: dict) -> None:
    """Insert the default departments and settings rows when missing."""
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SELECT COUNT(*) FROM departments")
        (dept_count,) = cur.fetchone()
        if not dept_count:
            cur.executemany("INSERT INTO departments(name) VALUES (%s)", [(n,) for n in DEFAULT_DEPARTMENTS])

        for key, value in DEFAULT_SETTING_ROWS.items():
            cur.execute(
                "INSERT INTO settings(setting_key, setting_value) VALUES (%s, %s) "
                "ON DUPLICATE KEY UPDATE setting_key=setting_key",
                (key, value),
            )
        conn.commit()
        logger.info("Default departments/settings ensured")
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
