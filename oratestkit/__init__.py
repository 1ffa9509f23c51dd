from oratestkit import exceptions, harness, sql, utils
from oratestkit.__metadata__ import __version__
from oratestkit.config import OracleConnectionParams, OracleTestConfig, load_config_from_env
from oratestkit.exceptions import ImproperConfigurationError, OraTestKitError, PrivilegeRequiredError, SQLBuilderError
from oratestkit.harness import OracleAsyncHarness, OracleSyncHarness
from oratestkit.sql import (
    sql_create_aq_user,
    sql_create_table,
    sql_drop_source,
    sql_drop_table,
    sql_drop_type,
    sql_drop_user,
)
from oratestkit.utils.equality import assert_one_of, is_deep_equal
from oratestkit.utils.network import get_local_ip_addresses
from oratestkit.utils.streams import consume_stream, consume_stream_async
from oratestkit.utils.text import generate_random_password, is_date, random_string
from oratestkit.utils.versions import VersionOrdering, compare_version_strings, encode_version

__all__ = (
    "ImproperConfigurationError",
    "OraTestKitError",
    "OracleAsyncHarness",
    "OracleConnectionParams",
    "OracleSyncHarness",
    "OracleTestConfig",
    "PrivilegeRequiredError",
    "SQLBuilderError",
    "VersionOrdering",
    "__version__",
    "assert_one_of",
    "compare_version_strings",
    "consume_stream",
    "consume_stream_async",
    "encode_version",
    "exceptions",
    "generate_random_password",
    "get_local_ip_addresses",
    "harness",
    "is_date",
    "is_deep_equal",
    "load_config_from_env",
    "random_string",
    "sql",
    "sql_create_aq_user",
    "sql_create_table",
    "sql_drop_source",
    "sql_drop_table",
    "sql_drop_type",
    "sql_drop_user",
    "utils",
)
