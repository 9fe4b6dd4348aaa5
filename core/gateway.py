# ============================================================
# DBPane - Terminal Database Browser
# core/gateway.py — Database Gateway Contract & Result Types
# ============================================================

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, List, Optional, Union


# ── Errors ────────────────────────────────────────────────────

class GatewayError(Exception):
    """Base class for every failure reported by a database gateway."""


class GatewayConnectionError(GatewayError):
    """The server is unreachable or the connection dropped."""


class QueryError(GatewayError):
    """The server rejected or failed to run the query text."""


# ── Results ───────────────────────────────────────────────────

@dataclass(frozen=True)
class TabularResult:
    """
    Rows returned by a successful query.
    Every cell is already a string; the column count is implied by the
    first row. Zero rows is a valid (empty) result, not an error.
    """
    rows: List[List[str]] = field(default_factory=list)

    @property
    def column_count(self) -> int:
        return len(self.rows[0]) if self.rows else 0

    def is_empty(self) -> bool:
        return not self.rows


@dataclass(frozen=True)
class ErrorResult:
    """A gateway failure, formatted for display in the result panel."""
    message: str

    ERROR_PREFIX = "Error: "

    @classmethod
    def from_exception(cls, exc: Exception) -> "ErrorResult":
        return cls(f"{cls.ERROR_PREFIX}{exc}")


QueryOutcome = Union[TabularResult, ErrorResult]


def stringify_cell(value: Any) -> str:
    """Render one driver value the way the result grid shows it."""
    if value is None:
        return "NULL"
    if isinstance(value, (bytes, bytearray, memoryview)):
        return "0x" + bytes(value).hex()
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return format(value, "f")
    return str(value)


def stringify_rows(rows) -> List[List[str]]:
    return [[stringify_cell(cell) for cell in row] for row in rows]


# ── Gateway Contract ──────────────────────────────────────────

class DatabaseGateway(ABC):
    """
    What the browser needs from a database server.
    Implementations raise GatewayConnectionError / QueryError and never
    return partial results.
    """

    name: str = "gateway"

    @abstractmethod
    def list_databases(self) -> List[str]:
        """Return the names of all browsable databases."""

    @abstractmethod
    def list_tables(self, database: str) -> List[str]:
        """Return the table names of one database."""

    @abstractmethod
    def execute_query(self, database: str, query: str) -> TabularResult:
        """Run free-form query text against one database."""

    def describe(self) -> str:
        return self.name


def create_gateway(backend: Optional[str] = None) -> DatabaseGateway:
    """Build the gateway for the configured backend ("postgres" or "mysql")."""
    from config import database_config

    backend = (backend or database_config.backend).strip().lower()

    if backend in ("postgres", "postgresql", "pg"):
        from core.postgres_gateway import PostgresGateway
        return PostgresGateway()
    if backend == "mysql":
        from core.mysql_gateway import MySQLGateway
        return MySQLGateway()

    raise ValueError(f"Unknown database backend: {backend!r} (expected 'postgres' or 'mysql')")
