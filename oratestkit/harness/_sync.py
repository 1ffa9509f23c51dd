"""Synchronous test harness over ``oracledb`` connections."""

import contextlib
import logging
import time
from typing import TYPE_CHECKING, Any, Optional

import oracledb

from oratestkit.harness._common import (
    COMPATIBLE_PARAMETER_SQL,
    DEFAULT_PREREQUISITE_VERSION,
    LONG_USER_NAME_COMPATIBLE,
    LONG_USER_NAME_VERSION,
    PARSE_COUNT_SQL,
    ROUND_TRIP_COUNT_SQL,
    ROUND_TRIP_PROBE_SQL,
    SID_SQL,
    SODA_ROLE,
    SODA_ROLE_SQL,
    check_urowid_length,
    connection_server_version,
    first_value,
    loaded_client_version,
    proxy_acquire_params,
)
from oratestkit.sql import (
    sql_create_aq_user,
    sql_create_table,
    sql_drop_source,
    sql_drop_table,
    sql_drop_type,
    validate_identifier,
)
from oratestkit.utils.logging import get_logger, log_with_context, set_log_level
from oratestkit.utils.versions import compare_version_strings, is_soda_supported, meets_version_prerequisites

if TYPE_CHECKING:
    from collections.abc import Generator

    from oracledb import Connection, ConnectionPool

    from oratestkit.config import OracleTestConfig

__all__ = ("OracleSyncHarness",)

logger = get_logger("harness")


class OracleSyncHarness:
    """Fixture setup, teardown and probes for synchronous driver tests."""

    __slots__ = ("config",)

    def __init__(self, config: "OracleTestConfig") -> None:
        self.config = config
        set_log_level(config.log_level)

    @contextlib.contextmanager
    def provide_connection(self, **overrides: Any) -> "Generator[Connection, None, None]":
        """Provide a standalone connection to the test schema.

        Yields:
            An open connection, closed on exit.
        """
        connection = oracledb.connect(**self.config.connection_params(**overrides))
        try:
            yield connection
        finally:
            connection.close()

    @contextlib.contextmanager
    def provide_dba_connection(self, operation: Optional[str] = None) -> "Generator[Connection, None, None]":
        """Provide a SYSDBA connection.

        Raises:
            PrivilegeRequiredError: If DBA privilege is not enabled.
        """
        connection = oracledb.connect(**self.config.dba_connection_params(operation))
        try:
            yield connection
        finally:
            connection.close()

    def execute(self, sql: str, parameters: Any = None) -> None:
        """Run a single statement on a fresh connection and commit."""
        with self.provide_connection() as connection, connection.cursor() as cursor:
            cursor.execute(sql, parameters)
            connection.commit()

    def create_table(self, table_name: str, sql: str) -> None:
        log_with_context(logger, logging.DEBUG, "Creating table", table=table_name, operation="create_table")
        self.execute(sql_create_table(table_name, sql))

    def drop_table(self, table_name: str) -> None:
        log_with_context(logger, logging.DEBUG, "Dropping table", table=table_name, operation="drop_table")
        self.execute(sql_drop_table(table_name))

    def drop_source(self, source_type: str, source_name: str) -> None:
        log_with_context(
            logger,
            logging.DEBUG,
            "Dropping source",
            source=source_name,
            source_type=source_type,
            operation="drop_source",
        )
        self.execute(sql_drop_source(source_type, source_name))

    def drop_type(self, type_name: str) -> None:
        log_with_context(logger, logging.DEBUG, "Dropping type", type=type_name, operation="drop_type")
        self.execute(sql_drop_type(type_name))

    def get_client_version(self) -> Optional[int]:
        """Packed Oracle Client version, or None when running in thin mode."""
        return loaded_client_version()

    def get_server_version(self) -> int:
        with self.provide_connection() as connection:
            return connection_server_version(connection)

    def check_prerequisites(
        self, client_version: int = DEFAULT_PREREQUISITE_VERSION, server_version: int = DEFAULT_PREREQUISITE_VERSION
    ) -> bool:
        """Check that the client and server meet minimum packed versions.

        Args:
            client_version: Minimum client version, e.g. ``1805000000`` for 18.5.
            server_version: Minimum server version.

        Returns:
            True if both minimums are met. Thin mode has no client version and
            only the server is checked.
        """
        current_client = self.get_client_version()
        return meets_version_prerequisites(current_client, self.get_server_version(), client_version, server_version)

    def is_soda_role_granted(self) -> bool:
        with self.provide_connection() as connection, connection.cursor() as cursor:
            cursor.execute(SODA_ROLE_SQL, role=SODA_ROLE)
            return cursor.fetchone() is not None

    def is_soda_runnable(self) -> bool:
        """Check whether SODA tests can run against the configured database.

        Connection problems while probing are logged and reported as False.
        """
        current_client = self.get_client_version()
        current_server: Optional[int] = None
        try:
            current_server = self.get_server_version()
        except oracledb.Error:
            logger.exception("Error in checking SODA prerequisites")
        if not is_soda_supported(current_client, current_server):
            return False
        return self.is_soda_role_granted()

    def get_db_compatible_version(self) -> Optional[str]:
        """Value of the ``compatible`` initialization parameter.

        Returns:
            The version string, or None without DBA privilege.
        """
        if not self.config.dba_privilege:
            return None
        with self.provide_dba_connection() as connection, connection.cursor() as cursor:
            cursor.execute(COMPATIBLE_PARAMETER_SQL)
            row = cursor.fetchone()
        return row[1] if row else None

    def measure_network_round_trip_time(self) -> float:
        """Time, in milliseconds, to connect, run a trivial query and close."""
        start = time.perf_counter()
        with self.provide_connection() as connection, connection.cursor() as cursor:
            cursor.execute(ROUND_TRIP_PROBE_SQL)
            cursor.fetchall()
        return (time.perf_counter() - start) * 1000

    def get_sid(self, connection: "Connection") -> int:
        """Session id of an open connection."""
        with connection.cursor() as cursor:
            cursor.execute(SID_SQL)
            return int(first_value(cursor.fetchall(), "the session id"))

    def get_round_trip_count(self, sid: int) -> int:
        """Number of client round-trips made so far by a session.

        Raises:
            PrivilegeRequiredError: If DBA privilege is not enabled.
        """
        operation = "get the current round trip count"
        with self.provide_dba_connection(operation) as connection, connection.cursor() as cursor:
            cursor.execute(ROUND_TRIP_COUNT_SQL, sid=sid)
            return int(first_value(cursor.fetchall(), "the round trip count"))

    def get_parse_count(self, system_connection: "Connection", sid: int) -> int:
        """Total parse count of a session, read through a privileged connection."""
        with system_connection.cursor() as cursor:
            cursor.execute(PARSE_COUNT_SQL, sid=sid)
            return int(first_value(cursor.fetchall(), "the parse count"))

    def create_aq_user(self, user_name: str, password: str) -> None:
        """Recreate a schema with Advanced Queuing privileges.

        Raises:
            PrivilegeRequiredError: If DBA privilege is not enabled.
        """
        plsql = sql_create_aq_user(user_name, password)
        with self.provide_dba_connection("create the schema") as connection, connection.cursor() as cursor:
            log_with_context(logger, logging.DEBUG, "Creating AQ user", user=user_name, operation="create_aq_user")
            cursor.execute(plsql)

    def drop_aq_user(self, user_name: str) -> None:
        """Drop an Advanced Queuing schema created by :meth:`create_aq_user`.

        Raises:
            PrivilegeRequiredError: If DBA privilege is not enabled.
        """
        with self.provide_dba_connection("drop the schema") as connection, connection.cursor() as cursor:
            log_with_context(logger, logging.DEBUG, "Dropping AQ user", user=user_name, operation="drop_aq_user")
            cursor.execute(f"DROP USER {validate_identifier(user_name)} CASCADE")

    def is_long_user_name_runnable(self) -> bool:
        """Check whether 128-byte user names can be tested."""
        if not self.config.dba_privilege:
            return False
        if not self.check_prerequisites(LONG_USER_NAME_VERSION, LONG_USER_NAME_VERSION):
            return False
        return compare_version_strings(self.get_db_compatible_version(), LONG_USER_NAME_COMPATIBLE).at_least

    def get_pool_connection(self, pool: "ConnectionPool") -> "Connection":
        """Acquire from a pool, as the proxy session user under external auth."""
        return pool.acquire(**proxy_acquire_params(self.config))

    def check_urowid_length(self, urowid_length: int, expected_length: int) -> None:
        check_urowid_length(self.config, urowid_length, expected_length)
