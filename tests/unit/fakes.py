"""In-memory stand-ins for ``oracledb`` connections and cursors."""

from typing import Any, Optional


class FakeCursor:
    def __init__(self, connection: "FakeConnection") -> None:
        self.connection = connection
        self._rows: "list[Any]" = []

    def __enter__(self) -> "FakeCursor":
        return self

    def __exit__(self, *args: Any) -> None:
        return None

    def _execute(self, statement: str, parameters: Any = None, **keyword_parameters: Any) -> None:
        recorded = parameters if parameters is not None else keyword_parameters or None
        self.connection.statements.append((statement, recorded))
        self._rows = list(self.connection.database.results.get(statement, []))

    def execute(self, statement: str, parameters: Any = None, **keyword_parameters: Any) -> None:
        self._execute(statement, parameters, **keyword_parameters)

    def fetchall(self) -> "list[Any]":
        return self._rows

    def fetchone(self) -> Optional[Any]:
        return self._rows[0] if self._rows else None


class FakeConnection:
    def __init__(self, database: "FakeDatabase", params: "dict[str, Any]") -> None:
        self.database = database
        self.params = params
        self.version = database.version
        self.statements: "list[tuple[str, Any]]" = []
        self.committed = False
        self.closed = False

    def cursor(self) -> FakeCursor:
        return FakeCursor(self)

    def commit(self) -> None:
        self.committed = True

    def close(self) -> None:
        self.closed = True


class FakeAsyncCursor(FakeCursor):
    async def execute(  # type: ignore[override]
        self, statement: str, parameters: Any = None, **keyword_parameters: Any
    ) -> None:
        self._execute(statement, parameters, **keyword_parameters)

    async def fetchall(self) -> "list[Any]":  # type: ignore[override]
        return self._rows

    async def fetchone(self) -> Optional[Any]:  # type: ignore[override]
        return self._rows[0] if self._rows else None


class FakeAsyncConnection(FakeConnection):
    def cursor(self) -> FakeAsyncCursor:
        return FakeAsyncCursor(self)

    async def commit(self) -> None:  # type: ignore[override]
        self.committed = True

    async def close(self) -> None:  # type: ignore[override]
        self.closed = True


class FakeDatabase:
    """Serves canned rows keyed by statement text and records every connection."""

    def __init__(self) -> None:
        self.version = "19.3.0.0.0"
        self.results: "dict[str, list[Any]]" = {}
        self.connections: "list[FakeConnection]" = []

    def connect(self, **params: Any) -> FakeConnection:
        connection = FakeConnection(self, params)
        self.connections.append(connection)
        return connection

    async def connect_async(self, **params: Any) -> FakeAsyncConnection:
        connection = FakeAsyncConnection(self, params)
        self.connections.append(connection)
        return connection
