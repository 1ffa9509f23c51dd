from oratestkit.harness._async import OracleAsyncHarness
from oratestkit.harness._common import check_urowid_length, connection_server_version, loaded_client_version
from oratestkit.harness._sync import OracleSyncHarness

__all__ = (
    "OracleAsyncHarness",
    "OracleSyncHarness",
    "check_urowid_length",
    "connection_server_version",
    "loaded_client_version",
)
