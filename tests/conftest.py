from __future__ import annotations

import os
import sys

import pytest


def _ensure_project_root_on_path() -> None:
    # When running via the venv's pytest entrypoint, the CWD is not guaranteed to
    # be on sys.path. Ensure the repository root (containing `core/`) is importable.
    project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
    if project_root not in sys.path:
        sys.path.insert(0, project_root)


_ensure_project_root_on_path()

from core.gateway import DatabaseGateway, GatewayConnectionError, TabularResult  # noqa: E402


class FakeGateway(DatabaseGateway):
    """In-memory gateway that records every call."""

    name = "fake"

    def __init__(self, tables=None, databases=None, results=None):
        self.tables = tables or {}
        self.databases = databases if databases is not None else list(self.tables)
        self.results = results or {}
        self.calls: list[tuple] = []

    def list_databases(self):
        self.calls.append(("list_databases",))
        if isinstance(self.databases, Exception):
            raise self.databases
        return list(self.databases)

    def list_tables(self, database):
        self.calls.append(("list_tables", database))
        tables = self.tables.get(database, [])
        if isinstance(tables, Exception):
            raise tables
        return list(tables)

    def execute_query(self, database, query):
        self.calls.append(("execute_query", database, query))
        outcome = self.results.get(query, TabularResult(rows=[]))
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway(
        tables={"app": ["users", "orders"], "app_test": []},
        results={
            "SELECT 1": TabularResult(rows=[["1"]]),
            "SELECT slow": GatewayConnectionError("timeout"),
        },
    )
