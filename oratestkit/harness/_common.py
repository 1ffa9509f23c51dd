"""Shared SQL and helpers for the sync and async harnesses."""

from typing import TYPE_CHECKING, Any, Optional

import oracledb

from oratestkit.exceptions import OraTestKitError
from oratestkit.utils.versions import encode_version, parse_version

if TYPE_CHECKING:
    from oratestkit.config import OracleTestConfig

__all__ = (
    "CLOUD_ROWID_LENGTH",
    "COMPATIBLE_PARAMETER_SQL",
    "DEFAULT_PREREQUISITE_VERSION",
    "LONG_USER_NAME_COMPATIBLE",
    "LONG_USER_NAME_VERSION",
    "PARSE_COUNT_SQL",
    "ROUND_TRIP_COUNT_SQL",
    "ROUND_TRIP_PROBE_SQL",
    "SID_SQL",
    "SODA_ROLE",
    "SODA_ROLE_SQL",
    "check_urowid_length",
    "connection_server_version",
    "first_value",
    "loaded_client_version",
    "proxy_acquire_params",
)

DEFAULT_PREREQUISITE_VERSION = 1805000000
LONG_USER_NAME_VERSION = 1800000000
LONG_USER_NAME_COMPATIBLE = "12.2.0.0.0"

# Oracle Cloud services return a regular ROWID of fixed size instead of a UROWID
CLOUD_ROWID_LENGTH = 18

SODA_ROLE = "SODA_APP"

SID_SQL = "select sys_context('userenv', 'sid') from dual"
ROUND_TRIP_PROBE_SQL = "select * from dual"
SODA_ROLE_SQL = "select granted_role from user_role_privs where granted_role = :role"
COMPATIBLE_PARAMETER_SQL = "select name, value from v$parameter where name = 'compatible'"
ROUND_TRIP_COUNT_SQL = """
    select ss.value
    from v$sesstat ss, v$statname sn
    where ss.sid = :sid
      and ss.statistic# = sn.statistic#
      and sn.name like '%roundtrip%client%'"""
PARSE_COUNT_SQL = """
    select ss.value
    from v$sesstat ss, v$statname sn
    where ss.sid = :sid
      and ss.statistic# = sn.statistic#
      and sn.name = 'parse count (total)'"""


def loaded_client_version() -> Optional[int]:
    """Packed Oracle Client library version, or None in thin mode."""
    if oracledb.is_thin_mode():
        return None
    return encode_version(oracledb.clientversion())


def connection_server_version(connection: Any) -> int:
    """Packed database version of an open connection."""
    return encode_version(parse_version(connection.version))


def first_value(rows: "list[Any]", description: str) -> Any:
    """Return the first column of the first row.

    Raises:
        OraTestKitError: If the query returned no rows.
    """
    if not rows:
        msg = f"No rows returned while fetching {description}"
        raise OraTestKitError(msg)
    return rows[0][0]


def proxy_acquire_params(config: "OracleTestConfig") -> "dict[str, Any]":
    """Keyword arguments for ``pool.acquire`` honouring proxy sessions."""
    if config.proxy_session_user and config.external_auth:
        return {"user": config.proxy_session_user}
    return {}


def check_urowid_length(config: "OracleTestConfig", urowid_length: int, expected_length: int) -> None:
    """Assert that a fetched UROWID is at least ``expected_length`` long.

    Raises:
        AssertionError: If the UROWID is shorter than expected.
    """
    if config.is_cloud_service:
        expected_length = CLOUD_ROWID_LENGTH
    if urowid_length < expected_length:
        msg = f"{urowid_length} should be >= {expected_length}"
        raise AssertionError(msg)
