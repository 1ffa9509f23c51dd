"""PL/SQL builders for test fixture setup and teardown.

Every drop statement is wrapped in an anonymous block that maps the
"object does not exist" error to a no-op, so teardown can run
unconditionally.
"""

import re

from oratestkit.exceptions import SQLBuilderError

__all__ = (
    "ORA_SOURCE_MISSING",
    "ORA_TABLE_MISSING",
    "ORA_USER_MISSING",
    "quote_literal",
    "sql_create_aq_user",
    "sql_create_table",
    "sql_drop_source",
    "sql_drop_table",
    "sql_drop_type",
    "sql_drop_user",
    "validate_identifier",
)

ORA_TABLE_MISSING = -942
ORA_SOURCE_MISSING = -4043
ORA_USER_MISSING = -1918

_PART = r'(?:[A-Za-z][A-Za-z0-9_$#]*|"[^"\x00]+")'
_IDENTIFIER_RE = re.compile(rf"^{_PART}(?:\.{_PART})?$")
_SOURCE_TYPE_RE = re.compile(r"^[A-Za-z]+(?: [A-Za-z]+)?$")


def validate_identifier(name: str) -> str:
    """Validate a plain, quoted or schema-qualified Oracle identifier.

    Args:
        name: Identifier to check.

    Raises:
        SQLBuilderError: If the identifier would not be safe to splice into SQL.

    Returns:
        The identifier, unchanged.
    """
    if not isinstance(name, str) or not _IDENTIFIER_RE.match(name):
        msg = f"Invalid Oracle identifier: {name!r}"
        raise SQLBuilderError(msg)
    return name


def quote_literal(text: str) -> str:
    """Double single quotes so ``text`` can sit inside a PL/SQL string literal."""
    return text.replace("'", "''")


def _masked_drop(statement: str, exception_name: str, error_code: int) -> str:
    return f"""
    DECLARE
        {exception_name} EXCEPTION;
        PRAGMA EXCEPTION_INIT({exception_name}, {error_code});
    BEGIN
        EXECUTE IMMEDIATE ('{quote_literal(statement)}');
    EXCEPTION
        WHEN {exception_name} THEN NULL;
    END;
    """


def sql_drop_table(table_name: str) -> str:
    """Build a block that drops and purges a table if it exists."""
    validate_identifier(table_name)
    return _masked_drop(f"DROP TABLE {table_name} PURGE", "e_table_missing", ORA_TABLE_MISSING)


def sql_create_table(table_name: str, sql: str) -> str:
    """Build a block that recreates a table from a ``CREATE TABLE`` statement.

    ``NOCOMPRESS`` is appended so Hybrid Columnar Compression stays disabled;
    tables with LONG or LONG RAW columns cannot be created when it is on, and
    it is on by default in Autonomous Database.

    Args:
        table_name: Table dropped before creation.
        sql: The ``CREATE TABLE`` statement, without a trailing semicolon.

    Returns:
        The PL/SQL block.
    """
    drop_sql = sql_drop_table(table_name)
    return f"""
    BEGIN
        {drop_sql}
        EXECUTE IMMEDIATE ('{quote_literal(sql.strip())} NOCOMPRESS');
    END;
    """


def sql_drop_source(source_type: str, source_name: str) -> str:
    """Build a block that drops a stored unit (``PROCEDURE``, ``PACKAGE``, ...) if it exists."""
    if not _SOURCE_TYPE_RE.match(source_type):
        msg = f"Invalid source type: {source_type!r}"
        raise SQLBuilderError(msg)
    validate_identifier(source_name)
    return _masked_drop(f"DROP {source_type.upper()} {source_name}", "e_source_missing", ORA_SOURCE_MISSING)


def sql_drop_type(type_name: str) -> str:
    """Build a block that force-drops an object type if it exists."""
    validate_identifier(type_name)
    return _masked_drop(f"DROP TYPE {type_name} FORCE", "e_type_missing", ORA_SOURCE_MISSING)


def sql_drop_user(user_name: str) -> str:
    """Build a block that drops a user and its objects if the user exists."""
    validate_identifier(user_name)
    return _masked_drop(f"DROP USER {user_name} CASCADE", "e_user_missing", ORA_USER_MISSING)


def sql_create_aq_user(user_name: str, password: str) -> str:
    """Build a block that recreates a user able to administer Advanced Queuing.

    Args:
        user_name: Schema to (re)create.
        password: Password for the new schema.

    Returns:
        The PL/SQL block, to be run as SYSDBA.
    """
    validate_identifier(user_name)
    if not password or '"' in password:
        msg = "AQ user password must be non-empty and must not contain double quotes"
        raise SQLBuilderError(msg)
    grants = (
        f'CREATE USER {user_name} IDENTIFIED BY "{password}"',
        f"GRANT CONNECT, RESOURCE, UNLIMITED TABLESPACE TO {user_name}",
        f"GRANT AQ_ADMINISTRATOR_ROLE, AQ_USER_ROLE TO {user_name}",
        f"GRANT EXECUTE ON DBMS_AQ TO {user_name}",
    )
    statements = "\n".join(f"        EXECUTE IMMEDIATE ('{quote_literal(stmt)}');" for stmt in grants)
    return f"""
    BEGIN
        {sql_drop_user(user_name)}
{statements}
    END;
    """
