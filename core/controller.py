# ============================================================
# DBPane - Terminal Database Browser
# core/controller.py — Applies Actions to the Session
# ============================================================

from typing import List, Optional

from loguru import logger

from core.dispatcher import Action, ActionKind
from core.gateway import DatabaseGateway, ErrorResult, GatewayError
from core.session import SessionState


class SessionController:
    """
    Applies dispatched actions to a SessionState.

    This is the only place that talks to the gateway during a session.
    Each action performs at most one gateway call, synchronously, and
    every GatewayError is turned into an ErrorResult instead of escaping.
    """

    def __init__(self, state: SessionState, gateway: DatabaseGateway):
        self.state = state
        self.gateway = gateway
        # Error stored by the last failed table refetch, while still on screen
        self._table_error: Optional[ErrorResult] = None

    # ── Startup ───────────────────────────────────────────────

    @classmethod
    def start(cls, gateway: DatabaseGateway) -> "SessionController":
        """
        Load the database list and the first database's tables.
        A failing database listing propagates: there is nothing to browse.
        """
        databases = gateway.list_databases()
        controller = cls(SessionState.from_databases(databases), gateway)
        controller.refresh_tables()
        return controller

    # ── Action Handling ───────────────────────────────────────

    def apply(self, action: Action) -> bool:
        """Apply one action. Returns False when the session should end."""
        state = self.state
        kind = action.kind

        if kind is ActionKind.QUIT:
            return False

        if kind is ActionKind.FOCUS:
            state.set_focus(action.pane)
        elif kind is ActionKind.DATABASE_NEXT:
            if state.select_next_database():
                self.refresh_tables()
        elif kind is ActionKind.DATABASE_PREVIOUS:
            if state.select_previous_database():
                self.refresh_tables()
        elif kind is ActionKind.TABLE_NEXT:
            state.select_next_table()
        elif kind is ActionKind.TABLE_PREVIOUS:
            state.select_previous_table()
        elif kind is ActionKind.QUERY_INSERT:
            state.push_query_char(action.char)
        elif kind is ActionKind.QUERY_DELETE:
            state.pop_query_char()
        elif kind is ActionKind.QUERY_EXECUTE:
            self.run_query()

        return True

    # ── Gateway Calls ─────────────────────────────────────────

    def refresh_tables(self) -> None:
        """Replace the table list with the selected database's tables."""
        database = self.state.current_database()
        if database is None:
            self.state.replace_tables([])
            return

        try:
            tables: List[str] = self.gateway.list_tables(database)
        except GatewayError as e:
            logger.error(f"Could not list tables of {database}: {e}")
            self.state.replace_tables([])
            self._table_error = ErrorResult.from_exception(e)
            self.state.set_result(self._table_error)
            return

        self.state.replace_tables(tables)
        # Clear a refetch error still on screen; query results are kept
        if self._table_error is not None and self.state.query_result is self._table_error:
            self.state.set_result(None)
        self._table_error = None

    def run_query(self) -> None:
        """Execute the query buffer against the selected database."""
        database = self.state.current_database()
        if database is None:
            self.state.set_result(ErrorResult(f"{ErrorResult.ERROR_PREFIX}no database selected"))
            return

        query = self.state.query_text
        try:
            result = self.gateway.execute_query(database, query)
        except GatewayError as e:
            logger.error(f"Query on {database} failed: {e}")
            self.state.set_result(ErrorResult.from_exception(e))
            return

        logger.info(f"Query on {database} returned {len(result.rows)} rows")
        self.state.set_result(result)
