"""Live database fixtures for the integration suite."""

from collections.abc import Generator

import oracledb
import pytest
from pytest_databases.docker.oracle import OracleService

from oratestkit import OracleAsyncHarness, OracleSyncHarness, OracleTestConfig


@pytest.fixture
def oracle_test_config(oracle_23ai_service: OracleService) -> OracleTestConfig:
    """Test configuration pointing at the containerised database."""
    return OracleTestConfig(
        user=oracle_23ai_service.user,
        password=oracle_23ai_service.password,
        connect_string=f"{oracle_23ai_service.host}:{oracle_23ai_service.port}/{oracle_23ai_service.service_name}",
    )


@pytest.fixture
def sync_harness(oracle_test_config: OracleTestConfig) -> OracleSyncHarness:
    return OracleSyncHarness(oracle_test_config)


@pytest.fixture
def async_harness(oracle_test_config: OracleTestConfig) -> OracleAsyncHarness:
    return OracleAsyncHarness(oracle_test_config)


@pytest.fixture
def oracle_connection(sync_harness: OracleSyncHarness) -> "Generator[oracledb.Connection, None, None]":
    with sync_harness.provide_connection() as connection:
        yield connection
