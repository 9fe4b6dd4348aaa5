# ============================================================
# DBPane - Terminal Database Browser
# core/dispatcher.py — Key Event → Action Mapping
# ============================================================
#
# Precedence, top to bottom:
#   1. Focus chords (ctrl+d / ctrl+t / ctrl+r / ctrl+e) from any pane
#   2. ctrl+c quits from any pane
#   3. Query editor captures every unmodified character as text,
#      so "q", "j" and "k" are typed there, not interpreted
#   4. "q" quits from every other pane
#   5. Per-pane navigation table
#   6. Anything else is a no-op
#
# ctrl+h is not a focus chord: terminals send the same byte for
# ctrl+h and Backspace.
# ============================================================

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from core.session import Pane


@dataclass(frozen=True)
class KeyEvent:
    """
    One discrete key press.
    `key` is either a single character ("a", "é", " ") or a named key
    ("enter", "backspace", "up", "down", ...). `ctrl` marks a control chord.
    """
    key: str
    ctrl: bool = False

    @property
    def is_char(self) -> bool:
        return len(self.key) == 1 and not self.ctrl and self.key.isprintable()


class ActionKind(Enum):
    FOCUS = "focus"
    DATABASE_NEXT = "database_next"
    DATABASE_PREVIOUS = "database_previous"
    TABLE_NEXT = "table_next"
    TABLE_PREVIOUS = "table_previous"
    QUERY_INSERT = "query_insert"
    QUERY_DELETE = "query_delete"
    QUERY_EXECUTE = "query_execute"
    QUIT = "quit"
    NOOP = "noop"


@dataclass(frozen=True)
class Action:
    kind: ActionKind
    pane: Optional[Pane] = None
    char: Optional[str] = None


NOOP = Action(ActionKind.NOOP)
QUIT = Action(ActionKind.QUIT)

QUIT_KEY = "q"

FOCUS_CHORDS: Dict[str, Pane] = {
    "d": Pane.DATABASES,
    "t": Pane.TABLES,
    "r": Pane.RESULTS,
    "e": Pane.QUERY_EDITOR,
}

GLOBAL_CTRL_ACTIONS: Dict[str, Action] = {
    "c": QUIT,
}

PANE_KEYMAP: Dict[Tuple[Pane, str], ActionKind] = {
    (Pane.DATABASES, "j"): ActionKind.DATABASE_NEXT,
    (Pane.DATABASES, "down"): ActionKind.DATABASE_NEXT,
    (Pane.DATABASES, "k"): ActionKind.DATABASE_PREVIOUS,
    (Pane.DATABASES, "up"): ActionKind.DATABASE_PREVIOUS,
    (Pane.TABLES, "j"): ActionKind.TABLE_NEXT,
    (Pane.TABLES, "down"): ActionKind.TABLE_NEXT,
    (Pane.TABLES, "k"): ActionKind.TABLE_PREVIOUS,
    (Pane.TABLES, "up"): ActionKind.TABLE_PREVIOUS,
    (Pane.QUERY_EDITOR, "backspace"): ActionKind.QUERY_DELETE,
    (Pane.QUERY_EDITOR, "enter"): ActionKind.QUERY_EXECUTE,
}

# Footer hints, in display order
KEY_HINTS = (
    ("^D", "databases"),
    ("^T", "tables"),
    ("^R", "results"),
    ("^E", "query"),
    ("j/k", "move"),
    ("enter", "run"),
    ("q", "quit"),
)


def dispatch(focused_pane: Pane, event: KeyEvent) -> Action:
    """Map a key press to an action. Never raises."""
    if event.ctrl:
        if event.key in FOCUS_CHORDS:
            return Action(ActionKind.FOCUS, pane=FOCUS_CHORDS[event.key])
        return GLOBAL_CTRL_ACTIONS.get(event.key, NOOP)

    if focused_pane is Pane.QUERY_EDITOR and event.is_char:
        return Action(ActionKind.QUERY_INSERT, char=event.key)

    if event.key == QUIT_KEY:
        return QUIT

    kind = PANE_KEYMAP.get((focused_pane, event.key))
    if kind is None:
        return NOOP
    return Action(kind)
