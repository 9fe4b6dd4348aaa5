# ============================================================
# DBPane - Terminal Database Browser
# core/session.py — Interactive Session State
# ============================================================

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from core.gateway import QueryOutcome


class Pane(Enum):
    """The four focusable regions of the browser."""
    DATABASES = "databases"
    TABLES = "tables"
    RESULTS = "results"
    QUERY_EDITOR = "query_editor"


def _step(index: Optional[int], length: int, delta: int) -> Optional[int]:
    """Move index by delta, clamped to [0, length). No wraparound."""
    if index is None or length == 0:
        return index
    return min(max(index + delta, 0), length - 1)


@dataclass
class SessionState:
    """
    All mutable state of one browsing session.

    Owned by the main loop and passed explicitly to the dispatcher,
    controller and frame composer. Nothing in here performs I/O; the
    controller is responsible for refreshing `tables` whenever
    `selected_database` changes.
    """

    databases: List[str] = field(default_factory=list)
    selected_database: Optional[int] = None
    tables: List[str] = field(default_factory=list)
    selected_table: Optional[int] = None
    query_text: str = ""
    query_result: Optional[QueryOutcome] = None
    focused_pane: Pane = Pane.DATABASES

    @classmethod
    def from_databases(cls, databases: List[str]) -> "SessionState":
        """Start a session on the first database, focus on the database list."""
        databases = list(databases)
        return cls(
            databases=databases,
            selected_database=0 if databases else None,
        )

    # ── Database Selection ────────────────────────────────────

    def select_next_database(self) -> bool:
        """Returns True when the selection actually moved."""
        return self._move_database(1)

    def select_previous_database(self) -> bool:
        return self._move_database(-1)

    def _move_database(self, delta: int) -> bool:
        new_index = _step(self.selected_database, len(self.databases), delta)
        changed = new_index != self.selected_database
        self.selected_database = new_index
        return changed

    def current_database(self) -> Optional[str]:
        if self.selected_database is None:
            return None
        return self.databases[self.selected_database]

    # ── Table Selection ───────────────────────────────────────

    def select_next_table(self) -> bool:
        return self._move_table(1)

    def select_previous_table(self) -> bool:
        return self._move_table(-1)

    def _move_table(self, delta: int) -> bool:
        new_index = _step(self.selected_table, len(self.tables), delta)
        changed = new_index != self.selected_table
        self.selected_table = new_index
        return changed

    def current_table(self) -> Optional[str]:
        if self.selected_table is None:
            return None
        return self.tables[self.selected_table]

    def replace_tables(self, new_tables: List[str]) -> None:
        """Swap in the table list of a newly selected database."""
        self.tables = list(new_tables)
        self.selected_table = 0 if self.tables else None

    # ── Query Buffer ──────────────────────────────────────────

    def push_query_char(self, char: str) -> None:
        self.query_text += char

    def pop_query_char(self) -> None:
        # Slicing an empty string is a no-op
        self.query_text = self.query_text[:-1]

    # ── Result & Focus ────────────────────────────────────────

    def set_result(self, outcome: Optional[QueryOutcome]) -> None:
        self.query_result = outcome

    def set_focus(self, pane: Pane) -> None:
        self.focused_pane = pane
