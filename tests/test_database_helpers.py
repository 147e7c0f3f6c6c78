from decimal import Decimal

from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from dayflow.database.bootstrap import SCHEMA_PATH, _iter_sql_statements, _strip_create_db_and_use
from dayflow.database.connection import DatabaseConnection, DBConfig
from dayflow.database.mysql_base import is_duplicate_key, to_decimal, where_clause


def test_db_config_defaults():
    cfg = DBConfig.from_dict({"host": "db", "port": "3307"})
    assert cfg.host == "db"
    assert cfg.port == 3307
    assert cfg.database == "dayflow_db"
    assert cfg.connect_timeout == 10


def test_connection_factory_is_shared_per_config():
    DatabaseConnection.reset()
    a = DatabaseConnection.get_instance(DBConfig.from_dict({"database": "one"}))
    assert DatabaseConnection.get_instance(DBConfig.from_dict({"database": "one"})) is a

    b = DatabaseConnection.get_instance(DBConfig.from_dict({"database": "two"}))
    assert b is not a
    assert b.config.database == "two"
    DatabaseConnection.reset()


def test_is_duplicate_key():
    assert is_duplicate_key(IntegrityError(msg="dup", errno=errorcode.ER_DUP_ENTRY))
    assert not is_duplicate_key(IntegrityError(msg="fk", errno=errorcode.ER_NO_REFERENCED_ROW_2))
    assert not is_duplicate_key(ValueError("dup"))


def test_to_decimal():
    assert to_decimal(None) == Decimal("0")
    assert to_decimal(Decimal("1.50")) == Decimal("1.50")
    assert to_decimal(2.5) == Decimal("2.5")


def test_where_clause():
    assert where_clause([]) == "1=1"
    assert where_clause(["a = %s", "b = %s"]) == "a = %s AND b = %s"


def test_split_ignores_semicolons_inside_quotes():
    sql = "INSERT INTO t VALUES ('a;b'); INSERT INTO t VALUES (\"c;d\");\nSELECT 1"
    assert list(_iter_sql_statements(sql)) == [
        "INSERT INTO t VALUES ('a;b')",
        'INSERT INTO t VALUES ("c;d")',
        "SELECT 1",
    ]


def test_strip_create_db_and_use():
    sql = "CREATE DATABASE IF NOT EXISTS x;\nUSE x;\nCREATE TABLE t (id INT);"
    assert _strip_create_db_and_use(sql).strip() == "CREATE TABLE t (id INT);"


def test_schema_declares_every_table():
    statements = list(_iter_sql_statements(_strip_create_db_and_use(SCHEMA_PATH.read_text(encoding="utf-8"))))
    tables = {s.split("EXISTS", 1)[1].split("(", 1)[0].strip().strip("`") for s in statements if "CREATE TABLE" in s.upper()}
    assert {"employees", "attendance", "leave_types", "leave_requests", "leave_balance", "salary_structure", "payroll"} <= tables
