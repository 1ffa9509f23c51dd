from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest

from oratestkit.config import load_config_from_env
from oratestkit.utils.logging import configure_logging, set_test_id

here = Path(__file__).parent
root_path = here.parent
pytest_plugins = ["pytest_databases.docker.oracle"]


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture(scope="session", autouse=True)
def oratestkit_logging() -> None:
    configure_logging(level=load_config_from_env().log_level, format_style="simple")


@pytest.fixture(autouse=True)
def current_test_id(request: pytest.FixtureRequest) -> Generator[str, None, None]:
    set_test_id(request.node.nodeid)
    yield request.node.nodeid
    set_test_id(None)
