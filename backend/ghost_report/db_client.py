# Overview: Engine-agnostic access layer; positional SQL in, plain rows and write results out.

"""
Uniform query/run contract over the configured relational engine.

Callers write SQL with positional ``?`` placeholders and never branch on the
engine. Each placeholder is rewritten into a named bind parameter, so values
always travel separately from the SQL text.

Two strategies exist, one per supported engine. They differ only where the
engines differ: connection setup, the insert-unless-present verb, and how the
driver reports generated ids.
"""

from __future__ import annotations

import re
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator, Optional, Sequence

from flask import current_app
from sqlalchemy import event, text
from sqlalchemy.engine import Connection, CursorResult, Engine


EXTENSION_KEY = "ghost_report.db_client"

# Quoted literals are matched first so a '?' inside them is left alone
_PLACEHOLDER_RE = re.compile(r"'(?:[^']|'')*'|\"(?:[^\"]|\"\")*\"|`[^`]*`|\?")
_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass(frozen=True)
class RunResult:
    """Normalized outcome of a write statement."""
    generated_id: Optional[int]
    affected_count: int

    def to_dict(self) -> dict:
        return {"generatedId": self.generated_id, "affectedCount": self.affected_count}


def bind_positional(sql: str, params: Sequence[Any] | None) -> tuple[str, dict]:
    """
    Rewrite ``?`` placeholders into ``:p0``, ``:p1``... and pair them with
    their values. The number of values must match the number of placeholders.
    """
    values = list(params or ())
    binds: dict[str, Any] = {}

    def _substitute(match: re.Match) -> str:
        token = match.group(0)
        if token != "?":
            return token
        index = len(binds)
        if index >= len(values):
            raise ValueError("Not enough parameters for SQL placeholders")
        name = f"p{index}"
        binds[name] = values[index]
        return f":{name}"

    rendered = _PLACEHOLDER_RE.sub(_substitute, sql)
    if len(binds) != len(values):
        raise ValueError(
            f"SQL has {len(binds)} placeholders but {len(values)} parameters were given"
        )
    return rendered, binds


def _is_insert(sql: str) -> bool:
    return sql.lstrip().upper().startswith(("INSERT", "REPLACE"))


class DatabaseClient:
    """
    Base strategy. Holds the engine and the per-thread transaction state.

    Outside ``transaction()`` every statement autocommits on its own
    connection. Inside it, statements share one connection and commit or
    roll back together.
    """

    engine_name = "generic"
    insert_ignore_verb = "INSERT IGNORE"

    def __init__(self, engine: Engine):
        self.engine = engine
        self._local = threading.local()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.engine.url.render_as_string(hide_password=True)}>"

    @property
    def _connection(self) -> Optional[Connection]:
        return getattr(self._local, "connection", None)

    @property
    def in_transaction(self) -> bool:
        return self._connection is not None

    @contextmanager
    def transaction(self) -> Iterator["DatabaseClient"]:
        # Nested use joins the outer transaction
        if self._connection is not None:
            yield self
            return

        with self.engine.begin() as conn:
            self._local.connection = conn
            try:
                yield self
            finally:
                self._local.connection = None

    def _execute(self, sql: str, params: Sequence[Any] | None, handler):
        statement, binds = bind_positional(sql, params)
        conn = self._connection
        if conn is not None:
            return handler(conn.execute(text(statement), binds), sql)
        with self.engine.begin() as conn:
            return handler(conn.execute(text(statement), binds), sql)

    def query(self, sql: str, params: Sequence[Any] | None = ()) -> list[dict] | RunResult:
        """Rows as dicts for reads; a RunResult for anything else."""
        return self._execute(sql, params, self._rows_or_result)

    def query_one(self, sql: str, params: Sequence[Any] | None = ()) -> Optional[dict]:
        rows = self.query(sql, params)
        if isinstance(rows, RunResult):
            raise TypeError("query_one() requires a statement that returns rows")
        return rows[0] if rows else None

    def scalar(self, sql: str, params: Sequence[Any] | None = ()) -> Any:
        row = self.query_one(sql, params)
        if row is None:
            return None
        return next(iter(row.values()))

    def run(self, sql: str, params: Sequence[Any] | None = ()) -> RunResult:
        return self._execute(sql, params, self._run_result)

    def insert_ignore(self, table: str, columns: Sequence[str]) -> str:
        """SQL for inserting a row unless its key already exists."""
        for name in (table, *columns):
            if not _IDENTIFIER_RE.match(name):
                raise ValueError(f"Invalid SQL identifier: {name!r}")
        placeholders = ", ".join("?" for _ in columns)
        return f"{self.insert_ignore_verb} INTO {table} ({', '.join(columns)}) VALUES ({placeholders})"

    @staticmethod
    def normalize_generated_id(value: Any) -> Optional[int]:
        return int(value) if value is not None else None

    def _rows_or_result(self, result: CursorResult, sql: str):
        if result.returns_rows:
            return [dict(row._mapping) for row in result.fetchall()]
        return self._run_result(result, sql)

    def _run_result(self, result: CursorResult, sql: str) -> RunResult:
        affected = max(result.rowcount or 0, 0)
        generated = None
        # Drivers report the connection's last id even when nothing was inserted
        if _is_insert(sql) and affected:
            generated = self.normalize_generated_id(result.lastrowid)
        return RunResult(generated_id=generated, affected_count=affected)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys = ON")
    cursor.close()


class SqliteClient(DatabaseClient):
    """Development engine. Foreign keys are enforced on every connection."""

    engine_name = "sqlite"
    insert_ignore_verb = "INSERT OR IGNORE"

    def __init__(self, engine: Engine):
        super().__init__(engine)
        if not event.contains(engine, "connect", _enable_sqlite_foreign_keys):
            event.listen(engine, "connect", _enable_sqlite_foreign_keys)


class MysqlClient(DatabaseClient):
    """Production engine."""

    engine_name = "mysql"
    insert_ignore_verb = "INSERT IGNORE"

    @staticmethod
    def normalize_generated_id(value: Any) -> Optional[int]:
        # PyMySQL reports 0 when the statement generated no id
        return int(value) if value else None


_CLIENTS = {
    "sqlite": SqliteClient,
    "mysql": MysqlClient,
    "mariadb": MysqlClient,
}


def create_client(engine: Engine) -> DatabaseClient:
    """Pick the strategy for the engine's dialect."""
    dialect = engine.dialect.name
    try:
        client_cls = _CLIENTS[dialect]
    except KeyError:
        raise ValueError(f"Unsupported database engine: {dialect}")
    return client_cls(engine)


def init_client(app, client: DatabaseClient) -> None:
    app.extensions[EXTENSION_KEY] = client


def get_client() -> DatabaseClient:
    """The client bound to the current app."""
    return current_app.extensions[EXTENSION_KEY]
