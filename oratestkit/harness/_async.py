"""Asynchronous test harness over ``oracledb`` connections."""

import logging
import time
from contextlib import asynccontextmanager
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
    from collections.abc import AsyncGenerator

    from oracledb import AsyncConnection, AsyncConnectionPool

    from oratestkit.config import OracleTestConfig

__all__ = ("OracleAsyncHarness",)

logger = get_logger("harness")


class OracleAsyncHarness:
    """Fixture setup, teardown and probes for asyncio driver tests."""

    __slots__ = ("config",)

    def __init__(self, config: "OracleTestConfig") -> None:
        self.config = config
        set_log_level(config.log_level)

    @asynccontextmanager
    async def provide_connection(self, **overrides: Any) -> "AsyncGenerator[AsyncConnection, None]":
        """Provide a standalone async connection to the test schema.

        Yields:
            An open connection, closed on exit.
        """
        connection = await oracledb.connect_async(**self.config.connection_params(**overrides))
        try:
            yield connection
        finally:
            await connection.close()

    @asynccontextmanager
    async def provide_dba_connection(self, operation: Optional[str] = None) -> "AsyncGenerator[AsyncConnection, None]":
        """Provide a SYSDBA async connection.

        Raises:
            PrivilegeRequiredError: If DBA privilege is not enabled.
        """
        connection = await oracledb.connect_async(**self.config.dba_connection_params(operation))
        try:
            yield connection
        finally:
            await connection.close()

    async def _fetch_all(self, connection: "AsyncConnection", sql: str, **parameters: Any) -> "list[Any]":
        with connection.cursor() as cursor:
            await cursor.execute(sql, parameters or None)
            return await cursor.fetchall()

    async def execute(self, sql: str, parameters: Any = None) -> None:
        """Run a single statement on a fresh connection and commit."""
        async with self.provide_connection() as connection:
            with connection.cursor() as cursor:
                await cursor.execute(sql, parameters)
            await connection.commit()

    async def create_table(self, table_name: str, sql: str) -> None:
        log_with_context(logger, logging.DEBUG, "Creating table", table=table_name, operation="create_table")
        await self.execute(sql_create_table(table_name, sql))

    async def drop_table(self, table_name: str) -> None:
        log_with_context(logger, logging.DEBUG, "Dropping table", table=table_name, operation="drop_table")
        await self.execute(sql_drop_table(table_name))

    async def drop_source(self, source_type: str, source_name: str) -> None:
        log_with_context(
            logger,
            logging.DEBUG,
            "Dropping source",
            source=source_name,
            source_type=source_type,
            operation="drop_source",
        )
        await self.execute(sql_drop_source(source_type, source_name))

    async def drop_type(self, type_name: str) -> None:
        log_with_context(logger, logging.DEBUG, "Dropping type", type=type_name, operation="drop_type")
        await self.execute(sql_drop_type(type_name))

    def get_client_version(self) -> Optional[int]:
        return loaded_client_version()

    async def get_server_version(self) -> int:
        async with self.provide_connection() as connection:
            return connection_server_version(connection)

    async def check_prerequisites(
        self, client_version: int = DEFAULT_PREREQUISITE_VERSION, server_version: int = DEFAULT_PREREQUISITE_VERSION
    ) -> bool:
        """Check that the client and server meet minimum packed versions."""
        current_server = await self.get_server_version()
        return meets_version_prerequisites(self.get_client_version(), current_server, client_version, server_version)

    async def is_soda_role_granted(self) -> bool:
        async with self.provide_connection() as connection:
            rows = await self._fetch_all(connection, SODA_ROLE_SQL, role=SODA_ROLE)
        return bool(rows)

    async def is_soda_runnable(self) -> bool:
        """Check whether SODA tests can run against the configured database.

        Connection problems while probing are logged and reported as False.
        """
        current_server: Optional[int] = None
        try:
            current_server = await self.get_server_version()
        except oracledb.Error:
            logger.exception("Error in checking SODA prerequisites")
        if not is_soda_supported(self.get_client_version(), current_server):
            return False
        return await self.is_soda_role_granted()

    async def get_db_compatible_version(self) -> Optional[str]:
        if not self.config.dba_privilege:
            return None
        async with self.provide_dba_connection() as connection:
            rows = await self._fetch_all(connection, COMPATIBLE_PARAMETER_SQL)
        return rows[0][1] if rows else None

    async def measure_network_round_trip_time(self) -> float:
        """Time, in milliseconds, to connect, run a trivial query and close."""
        start = time.perf_counter()
        async with self.provide_connection() as connection:
            await self._fetch_all(connection, ROUND_TRIP_PROBE_SQL)
        return (time.perf_counter() - start) * 1000

    async def get_sid(self, connection: "AsyncConnection") -> int:
        rows = await self._fetch_all(connection, SID_SQL)
        return int(first_value(rows, "the session id"))

    async def get_round_trip_count(self, sid: int) -> int:
        """Number of client round-trips made so far by a session.

        Raises:
            PrivilegeRequiredError: If DBA privilege is not enabled.
        """
        async with self.provide_dba_connection("get the current round trip count") as connection:
            rows = await self._fetch_all(connection, ROUND_TRIP_COUNT_SQL, sid=sid)
        return int(first_value(rows, "the round trip count"))

    async def get_parse_count(self, system_connection: "AsyncConnection", sid: int) -> int:
        rows = await self._fetch_all(system_connection, PARSE_COUNT_SQL, sid=sid)
        return int(first_value(rows, "the parse count"))

    async def create_aq_user(self, user_name: str, password: str) -> None:
        plsql = sql_create_aq_user(user_name, password)
        async with self.provide_dba_connection("create the schema") as connection:
            log_with_context(logger, logging.DEBUG, "Creating AQ user", user=user_name, operation="create_aq_user")
            with connection.cursor() as cursor:
                await cursor.execute(plsql)

    async def drop_aq_user(self, user_name: str) -> None:
        async with self.provide_dba_connection("drop the schema") as connection:
            log_with_context(logger, logging.DEBUG, "Dropping AQ user", user=user_name, operation="drop_aq_user")
            with connection.cursor() as cursor:
                await cursor.execute(f"DROP USER {validate_identifier(user_name)} CASCADE")

    async def is_long_user_name_runnable(self) -> bool:
        """Check whether 128-byte user names can be tested."""
        if not self.config.dba_privilege:
            return False
        if not await self.check_prerequisites(LONG_USER_NAME_VERSION, LONG_USER_NAME_VERSION):
            return False
        compatible = await self.get_db_compatible_version()
        return compare_version_strings(compatible, LONG_USER_NAME_COMPATIBLE).at_least

    async def get_pool_connection(self, pool: "AsyncConnectionPool") -> "AsyncConnection":
        """Acquire from a pool, as the proxy session user under external auth."""
        return await pool.acquire(**proxy_acquire_params(self.config))

    def check_urowid_length(self, urowid_length: int, expected_length: int) -> None:
        check_urowid_length(self.config, urowid_length, expected_length)
