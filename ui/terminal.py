# ============================================================
# DBPane - Terminal Database Browser
# ui/terminal.py — Rich Renderer & prompt_toolkit Key Source
# ============================================================

import select
from collections import deque
from contextlib import contextmanager
from typing import Deque, Iterator, List, Optional

from prompt_toolkit.input import Input, create_input
from prompt_toolkit.key_binding import KeyPress
from prompt_toolkit.keys import Keys
from rich import box
from rich.console import Console, Group
from rich.layout import Layout
from rich.live import Live
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.dispatcher import KeyEvent
from ui.frame import FrameLayout, GridPanel, ListPanel, TextPanel

FOCUS_BORDER = "yellow"
IDLE_BORDER = "white"
HIGHLIGHT_STYLE = "black on yellow"
HIGHLIGHT_SYMBOL = "> "


# ── Key Input ─────────────────────────────────────────────────

NAMED_KEYS = {
    Keys.Enter: "enter",
    Keys.ControlJ: "enter",
    Keys.Backspace: "backspace",
    Keys.Tab: "tab",
    Keys.Escape: "escape",
    Keys.Up: "up",
    Keys.Down: "down",
    Keys.Left: "left",
    Keys.Right: "right",
    Keys.Delete: "delete",
    Keys.Home: "home",
    Keys.End: "end",
    Keys.PageUp: "pageup",
    Keys.PageDown: "pagedown",
}


def translate_key_press(press: KeyPress) -> List[KeyEvent]:
    """
    Turn one prompt_toolkit KeyPress into zero or more KeyEvents.
    A bracketed paste becomes one character event per pasted character.
    """
    key = press.key

    if key == Keys.BracketedPaste:
        text = press.data.replace("\r\n", " ").replace("\r", " ").replace("\n", " ")
        return [KeyEvent(char) for char in text if char.isprintable()]

    if isinstance(key, Keys):
        if key in NAMED_KEYS:
            return [KeyEvent(NAMED_KEYS[key])]
        value = key.value
        # "c-a" .. "c-z"
        if value.startswith("c-") and len(value) == 3 and value[2].isalpha():
            return [KeyEvent(value[2], ctrl=True)]
        return []

    if len(key) == 1 and key.isprintable():
        return [KeyEvent(key)]
    return []


class KeySource:
    """
    Blocking source of KeyEvents read from the terminal in raw mode.
    A lone Escape is only reported after `flush_timeout` seconds of silence,
    since it may be the start of an escape sequence.
    """

    def __init__(self, term_input: Optional[Input] = None, flush_timeout: float = 0.05):
        self._input = term_input or create_input()
        self._pending: Deque[KeyEvent] = deque()
        self.flush_timeout = flush_timeout

    @contextmanager
    def raw_mode(self) -> Iterator["KeySource"]:
        with self._input.raw_mode():
            yield self

    def _wait_readable(self) -> bool:
        ready, _, _ = select.select([self._input.fileno()], [], [], self.flush_timeout)
        return bool(ready)

    def read_key(self) -> KeyEvent:
        while not self._pending:
            if self._wait_readable():
                presses = self._input.read_keys()
            else:
                presses = self._input.flush_keys()
            for press in presses:
                self._pending.extend(translate_key_press(press))
        return self._pending.popleft()

    def close(self) -> None:
        self._input.close()


# ── Rendering ─────────────────────────────────────────────────

def _border(focused: bool) -> str:
    return FOCUS_BORDER if focused else IDLE_BORDER


def render_list(panel: ListPanel) -> Panel:
    lines = []
    for index, item in enumerate(panel.items):
        if index == panel.highlighted:
            lines.append(Text(HIGHLIGHT_SYMBOL + item, style=HIGHLIGHT_STYLE, no_wrap=True))
        else:
            lines.append(Text(" " * len(HIGHLIGHT_SYMBOL) + item, no_wrap=True))
    return Panel(
        Group(*lines),
        title=escape(panel.title),
        title_align="left",
        border_style=_border(panel.focused),
        box=box.SQUARE,
    )


def render_grid(panel: GridPanel) -> Panel:
    table = Table(
        box=box.SIMPLE_HEAD,
        show_header=False,
        show_edge=False,
        pad_edge=False,
    )
    for width in panel.column_widths:
        table.add_column(min_width=width, no_wrap=True, overflow="ellipsis")
    for row in panel.rows:
        table.add_row(*[Text(cell) for cell in row])

    body = table if panel.rows else Text("Empty set", style="dim")
    return Panel(
        body,
        title=escape(panel.title),
        title_align="left",
        border_style=_border(panel.focused),
        box=box.SQUARE,
    )


def render_text(panel: TextPanel) -> Panel:
    style = "red" if panel.is_error else ""
    return Panel(
        Text(panel.text, style=style),
        title=escape(panel.title),
        title_align="left",
        border_style=_border(panel.focused),
        box=box.SQUARE,
    )


def render_results(panel) -> Panel:
    if isinstance(panel, GridPanel):
        return render_grid(panel)
    return render_text(panel)


def build_layout(frame: FrameLayout) -> Layout:
    """
    Rasterize a FrameLayout:
      left 20%:  databases over tables
      right 80%: results over the query editor
    """
    root = Layout(name="root")
    root.split_column(
        Layout(name="body", ratio=1),
        Layout(name="footer", size=1),
    )
    root["body"].split_row(
        Layout(name="left", ratio=20),
        Layout(name="right", ratio=80),
    )
    root["left"].split_column(
        Layout(render_list(frame.databases), name="databases", ratio=1),
        Layout(render_list(frame.tables), name="tables", ratio=1),
    )
    root["right"].split_column(
        Layout(render_results(frame.results), name="results", ratio=1),
        Layout(render_text(frame.editor), name="editor", size=3),
    )
    root["footer"].update(Text(frame.footer, style="dim", no_wrap=True, overflow="ellipsis"))
    return root


class TerminalRenderer:
    """Draws frames on the alternate screen. Only redraws when asked to."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()
        self._live: Optional[Live] = None

    @contextmanager
    def session(self) -> Iterator["TerminalRenderer"]:
        live = Live(console=self.console, screen=True, auto_refresh=False, transient=True)
        with live:
            self._live = live
            try:
                yield self
            finally:
                self._live = None

    def draw(self, frame: FrameLayout) -> None:
        renderable = build_layout(frame)
        if self._live is None:
            self.console.print(renderable)
            return
        self._live.update(renderable, refresh=True)
