# ============================================================
# DBPane - Terminal Database Browser
# ui/frame.py — Frame Composer (SessionState → layout description)
# ============================================================

from dataclasses import dataclass
from typing import Optional, Tuple

from rich.cells import cell_len

from config import app_config
from core.dispatcher import KEY_HINTS
from core.gateway import ErrorResult, TabularResult
from core.session import Pane, SessionState

DATABASES_TITLE = "Databases"
TABLES_TITLE = "Tables"
RESULTS_TITLE = "Query Results"
EDITOR_TITLE = "Enter Query"

EMPTY_RESULT_TEXT = "No query run yet. Press ^E, type SQL and hit Enter."


@dataclass(frozen=True)
class ListPanel:
    """A bordered list with at most one highlighted item."""
    title: str
    items: Tuple[str, ...]
    highlighted: Optional[int]
    focused: bool


@dataclass(frozen=True)
class GridPanel:
    """Tabular query output, with per-column display widths."""
    title: str
    rows: Tuple[Tuple[str, ...], ...]
    column_widths: Tuple[int, ...]
    focused: bool


@dataclass(frozen=True)
class TextPanel:
    """Plain text: the query editor, an error, or the empty result view."""
    title: str
    text: str
    focused: bool
    is_error: bool = False


@dataclass(frozen=True)
class FrameLayout:
    databases: ListPanel
    tables: ListPanel
    results: object  # GridPanel or TextPanel
    editor: TextPanel
    footer: str


def column_widths(rows: Tuple[Tuple[str, ...], ...], minimum: int) -> Tuple[int, ...]:
    """Each column is as wide as its widest cell in terminal cells, never below `minimum`."""
    if not rows:
        return ()
    count = len(rows[0])
    return tuple(
        max([minimum] + [cell_len(row[i]) for row in rows if i < len(row)])
        for i in range(count)
    )


def compose_results(state: SessionState, min_width: int):
    focused = state.focused_pane is Pane.RESULTS
    outcome = state.query_result

    if isinstance(outcome, TabularResult):
        rows = tuple(tuple(row) for row in outcome.rows)
        return GridPanel(
            title=f"{RESULTS_TITLE} ({len(rows)} {'row' if len(rows) == 1 else 'rows'})",
            rows=rows,
            column_widths=column_widths(rows, min_width),
            focused=focused,
        )
    if isinstance(outcome, ErrorResult):
        return TextPanel(RESULTS_TITLE, outcome.message, focused, is_error=True)
    return TextPanel(RESULTS_TITLE, EMPTY_RESULT_TEXT, focused)


def compose_footer(state: SessionState) -> str:
    hints = "  ".join(f"{key} {label}" for key, label in KEY_HINTS)
    database = state.current_database() or "-"
    return f"[{state.focused_pane.value}] db: {database}  |  {hints}"


def compose_frame(state: SessionState, min_column_width: Optional[int] = None) -> FrameLayout:
    """
    Describe what the screen should show for `state`.
    Pure and deterministic: no I/O, no clock, no randomness.
    """
    if min_column_width is None:
        min_column_width = app_config.result_min_column_width

    focus = state.focused_pane
    return FrameLayout(
        databases=ListPanel(
            title=DATABASES_TITLE,
            items=tuple(state.databases),
            highlighted=state.selected_database,
            focused=focus is Pane.DATABASES,
        ),
        tables=ListPanel(
            title=TABLES_TITLE,
            items=tuple(state.tables),
            highlighted=state.selected_table,
            focused=focus is Pane.TABLES,
        ),
        results=compose_results(state, min_column_width),
        editor=TextPanel(EDITOR_TITLE, state.query_text, focus is Pane.QUERY_EDITOR),
        footer=compose_footer(state),
    )
