"""Schema/seed helpers used by ``create_app`` and the scripts in ``scripts/``."""

from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator

import mysql.connector
from werkzeug.security import generate_password_hash

from .connection import DBConfig

logger = logging.getLogger(__name__)

SQL_DIR = Path(__file__).resolve().parent
SCHEMA_PATH = SQL_DIR / "schema.sql"
SEED_PATH = SQL_DIR / "seed.sql"

DEMO_ACCOUNTS = (
    # employee_id, email, password, role, first, last, department, designation
    ("EMP001", "admin@dayflow.com", "admin123", "admin", "Admin", "User", "Management", "Administrator"),
    ("EMP002", "hr@dayflow.com", "hr123456", "hr", "Helen", "Reyes", "Human Resources", "HR Manager"),
    ("EMP003", "john@dayflow.com", "john1234", "employee", "John", "Carter", "Engineering", "Software Engineer"),
)


@contextmanager
def _connect(target: DBConfig, *, with_database: bool = True) -> Iterator:
    kwargs = dict(host=target.host, port=target.port, user=target.user, password=target.password, use_pure=True)
    if with_database:
        kwargs["database"] = target.database
    conn = mysql.connector.connect(**kwargs)
    try:
        yield conn
        conn.commit()
    finally:
        conn.close()


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a SQL script on ';' outside of quoted strings."""
    buf: list[str] = []
    quote = ""
    escaped = False

    for ch in sql:
        buf.append(ch)
        if escaped:
            escaped = False
        elif ch == "\\":
            escaped = True
        elif quote:
            if ch == quote:
                quote = ""
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            stmt = "".join(buf[:-1]).strip()
            buf.clear()
            if stmt:
                yield stmt

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _run_script(db_config: dict, path: Path) -> None:
    target = DBConfig.from_dict(db_config)
    sql = _strip_create_db_and_use(Path(path).read_text(encoding="utf-8"))
    with _connect(target) as conn:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    with _connect(target, with_database=False) as conn:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )


def apply_schema(db_config: dict, *, schema_path: str | Path = SCHEMA_PATH) -> None:
    ensure_database_exists(db_config)
    _run_script(db_config, Path(schema_path))
    logger.info("schema applied from %s", schema_path)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path = SEED_PATH) -> None:
    _run_script(db_config, Path(seed_path))
    logger.info("seed applied from %s", seed_path)


def ensure_demo_users(db_config: dict) -> None:
    """Create or reset the demo accounts (hashed passwords, active)."""
    target = DBConfig.from_dict(db_config)
    with _connect(target) as conn:
        cur = conn.cursor(dictionary=True)
        for employee_id, email, password, role, first, last, department, designation in DEMO_ACCOUNTS:
            password_hash = generate_password_hash(password)
            cur.execute("SELECT id FROM employees WHERE email=%s", (email,))
            if cur.fetchone():
                cur.execute(
                    """
                    UPDATE employees
                    SET password_hash=%s, role=%s, is_active=1, is_verified=1
                    WHERE email=%s
                    """,
                    (password_hash, role, email),
                )
            else:
                cur.execute(
                    """
                    INSERT INTO employees(
                        employee_id, email, password_hash, role, first_name, last_name,
                        department, designation, join_date, is_active, is_verified
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,CURDATE(),1,1)
                    """,
                    (employee_id, email, password_hash, role, first, last, department, designation),
                )
        logger.info("demo accounts ready (%d)", len(DEMO_ACCOUNTS))


def list_tables(db_config: dict) -> list[str]:
    target = DBConfig.from_dict(db_config)
    with _connect(target) as conn:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
