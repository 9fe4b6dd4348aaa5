# ============================================================
# DBPane - Terminal Database Browser
# core/mysql_gateway.py — MySQL Gateway (mysql-connector-python)
# ============================================================

from contextlib import closing
from typing import List, Optional

import mysql.connector
from mysql.connector import Error as MySQLError, errors as mysql_errors
from loguru import logger

from config import mysql_config
from core.gateway import (
    DatabaseGateway,
    GatewayConnectionError,
    QueryError,
    TabularResult,
    stringify_rows,
)


class MySQLGateway(DatabaseGateway):
    """
    Browses a MySQL server.
    Opens one connection per call, bound to the database being browsed.
    """

    name = "mysql"

    def __init__(self, config=None):
        self.config = config or mysql_config

    # ── Connection Management ─────────────────────────────────

    def _connect(self, database: Optional[str]):
        params = self.config.get_connection_params(database)
        try:
            return mysql.connector.connect(**params)
        except MySQLError as e:
            logger.error(f"MySQL connection to {self.config.host}:{self.config.port} failed: {e}")
            raise GatewayConnectionError(str(e)) from e

    def _run(self, database: Optional[str], query: str) -> TabularResult:
        with closing(self._connect(database)) as conn:
            cursor = conn.cursor(buffered=True)
            try:
                cursor.execute(query)
                if not cursor.with_rows:
                    return TabularResult(rows=[])
                return TabularResult(rows=stringify_rows(cursor.fetchall()))
            except (mysql_errors.OperationalError, mysql_errors.InterfaceError) as e:
                logger.error(f"MySQL connection lost on {database}: {e}")
                raise GatewayConnectionError(str(e)) from e
            except MySQLError as e:
                logger.warning(f"Query failed on {database}: {e}\nQuery: {query}")
                raise QueryError(str(e)) from e
            except ValueError as e:
                # Covers UnicodeDecodeError from fetchall() on undecodable text
                logger.warning(f"Could not read result on {database}: {e}\nQuery: {query}")
                raise QueryError(str(e)) from e
            finally:
                cursor.close()

    # ── Gateway Operations ────────────────────────────────────

    def list_databases(self) -> List[str]:
        result = self._run(None, "SHOW DATABASES")
        databases = [row[0] for row in result.rows]
        logger.info(f"Found {len(databases)} databases on {self.config.host}:{self.config.port}")
        return databases

    def list_tables(self, database: str) -> List[str]:
        # The connection is already bound to `database`
        result = self._run(database, "SHOW TABLES")
        logger.debug(f"Found {len(result.rows)} tables in {database}")
        return [row[0] for row in result.rows]

    def execute_query(self, database: str, query: str) -> TabularResult:
        logger.info(f"Executing query on {database}: {query}")
        return self._run(database, query)

    def describe(self) -> str:
        return f"mysql://{self.config.user}@{self.config.host}:{self.config.port}"
