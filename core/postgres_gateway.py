# ============================================================
# DBPane - Terminal Database Browser
# core/postgres_gateway.py — PostgreSQL Gateway (psycopg2)
# ============================================================

from contextlib import closing
from typing import List, Optional

import psycopg2
from loguru import logger

from config import postgres_config
from core.gateway import (
    DatabaseGateway,
    GatewayConnectionError,
    QueryError,
    TabularResult,
    stringify_rows,
)

LIST_DATABASES_SQL = "SELECT datname FROM pg_database WHERE datistemplate = false"
LIST_TABLES_SQL = "SELECT tablename FROM pg_tables WHERE schemaname = 'public'"


class PostgresGateway(DatabaseGateway):
    """
    Browses a PostgreSQL server.

    Every call opens its own short-lived connection to the database it
    targets: PostgreSQL connections are bound to a single database, so
    switching databases means reconnecting anyway.
    """

    name = "postgres"

    def __init__(self, config=None):
        self.config = config or postgres_config

    # ── Connection Management ─────────────────────────────────

    def _connect(self, dbname: Optional[str]):
        params = self.config.get_connection_params(dbname)
        try:
            conn = psycopg2.connect(**params)
        except psycopg2.Error as e:
            logger.error(f"PostgreSQL connection to {self.config.host}:{self.config.port}/{dbname} failed: {e}")
            raise GatewayConnectionError(str(e).strip()) from e
        conn.autocommit = True
        return conn

    def _run(self, dbname: Optional[str], query: str) -> TabularResult:
        with closing(self._connect(dbname)) as conn:
            try:
                with conn.cursor() as cursor:
                    cursor.execute(query)
                    # Statements without a result set (DDL, UPDATE, ...) have no description
                    if cursor.description is None:
                        return TabularResult(rows=[])
                    return TabularResult(rows=stringify_rows(cursor.fetchall()))
            except (psycopg2.OperationalError, psycopg2.InterfaceError) as e:
                logger.error(f"PostgreSQL connection lost on {dbname}: {e}")
                raise GatewayConnectionError(str(e).strip()) from e
            except psycopg2.Error as e:
                logger.warning(f"Query failed on {dbname}: {e}\nQuery: {query}")
                raise QueryError(str(e).strip()) from e
            except ValueError as e:
                # Covers UnicodeDecodeError from fetchall() on undecodable text
                logger.warning(f"Could not read result on {dbname}: {e}\nQuery: {query}")
                raise QueryError(str(e)) from e

    # ── Gateway Operations ────────────────────────────────────

    def list_databases(self) -> List[str]:
        result = self._run(self.config.maintenance_db, LIST_DATABASES_SQL)
        databases = [row[0] for row in result.rows]
        logger.info(f"Found {len(databases)} databases on {self.config.host}:{self.config.port}")
        return databases

    def list_tables(self, database: str) -> List[str]:
        result = self._run(database, LIST_TABLES_SQL)
        logger.debug(f"Found {len(result.rows)} tables in {database}")
        return [row[0] for row in result.rows]

    def execute_query(self, database: str, query: str) -> TabularResult:
        logger.info(f"Executing query on {database}: {query}")
        return self._run(database, query)

    def describe(self) -> str:
        return f"postgres://{self.config.user}@{self.config.host}:{self.config.port}"
