"""Tests for the fixture PL/SQL builders."""

import re

import pytest

from oratestkit.exceptions import SQLBuilderError
from oratestkit.sql import (
    quote_literal,
    sql_create_aq_user,
    sql_create_table,
    sql_drop_source,
    sql_drop_table,
    sql_drop_type,
    sql_drop_user,
    validate_identifier,
)


def _squash(sql: str) -> str:
    return re.sub(r"\s+", " ", sql).strip()


def test_drop_table_masks_missing_table() -> None:
    sql = _squash(sql_drop_table("nodb_tab_1"))
    assert "PRAGMA EXCEPTION_INIT(e_table_missing, -942);" in sql
    assert "EXECUTE IMMEDIATE ('DROP TABLE nodb_tab_1 PURGE');" in sql
    assert "WHEN e_table_missing THEN NULL;" in sql
    assert sql.startswith("DECLARE")
    assert sql.endswith("END;")


def test_create_table_drops_first_and_disables_compression() -> None:
    sql = _squash(sql_create_table("nodb_long", "CREATE TABLE nodb_long (id NUMBER, content LONG)"))
    assert sql.startswith("BEGIN DECLARE")
    drop_at = sql.index("DROP TABLE nodb_long PURGE")
    create_at = sql.index("EXECUTE IMMEDIATE ('CREATE TABLE nodb_long (id NUMBER, content LONG) NOCOMPRESS');")
    assert drop_at < create_at
    assert sql.endswith("NOCOMPRESS'); END;")


def test_create_table_escapes_quotes() -> None:
    sql = sql_create_table("nodb_default", "CREATE TABLE nodb_default (c VARCHAR2(10) DEFAULT 'x')")
    assert "DEFAULT ''x'' NOCOMPRESS" in sql


def test_drop_source_and_type() -> None:
    source = _squash(sql_drop_source("package body", "nodb_pkg"))
    assert "EXECUTE IMMEDIATE ('DROP PACKAGE BODY nodb_pkg');" in source
    assert "PRAGMA EXCEPTION_INIT(e_source_missing, -4043);" in source

    drop_type = _squash(sql_drop_type("nodb_obj_t"))
    assert "EXECUTE IMMEDIATE ('DROP TYPE nodb_obj_t FORCE');" in drop_type
    assert "PRAGMA EXCEPTION_INIT(e_type_missing, -4043);" in drop_type


def test_drop_user() -> None:
    sql = _squash(sql_drop_user("nodb_aq_user"))
    assert "PRAGMA EXCEPTION_INIT(e_user_missing, -1918);" in sql
    assert "EXECUTE IMMEDIATE ('DROP USER nodb_aq_user CASCADE');" in sql


def test_create_aq_user() -> None:
    sql = _squash(sql_create_aq_user("nodb_aq_user", "Secret"))
    statements = [
        "DROP USER nodb_aq_user CASCADE",
        'CREATE USER nodb_aq_user IDENTIFIED BY "Secret"',
        "GRANT CONNECT, RESOURCE, UNLIMITED TABLESPACE TO nodb_aq_user",
        "GRANT AQ_ADMINISTRATOR_ROLE, AQ_USER_ROLE TO nodb_aq_user",
        "GRANT EXECUTE ON DBMS_AQ TO nodb_aq_user",
    ]
    positions = [sql.index(statement) for statement in statements]
    assert positions == sorted(positions)
    assert sql.startswith("BEGIN")
    assert sql.endswith("END;")


@pytest.mark.parametrize("password", ["", 'bad"quote'])
def test_create_aq_user_rejects_password(password: str) -> None:
    with pytest.raises(SQLBuilderError):
        sql_create_aq_user("nodb_aq_user", password)


@pytest.mark.parametrize("name", ["nodb_tab", "SCOTT.EMP", '"Mixed Case"', "t$1#", 'app."Tab"'])
def test_validate_identifier_accepts(name: str) -> None:
    assert validate_identifier(name) == name


@pytest.mark.parametrize("name", ["", "1tab", "tab; drop table x", "a.b.c", "tab'--", '"unterminated'])
def test_validate_identifier_rejects(name: str) -> None:
    with pytest.raises(SQLBuilderError, match="Invalid Oracle identifier"):
        sql_drop_table(name)


def test_drop_source_rejects_bad_type() -> None:
    with pytest.raises(SQLBuilderError, match="Invalid source type"):
        sql_drop_source("PROCEDURE; DROP", "nodb_proc")


def test_quote_literal() -> None:
    assert quote_literal("it's") == "it''s"
