# ============================================================
# DBPane - Terminal Database Browser
# ui/app.py — Synchronous Render / Input / Dispatch Loop
# ============================================================

from typing import Optional

from loguru import logger

from core.controller import SessionController
from core.dispatcher import ActionKind, dispatch
from ui.frame import compose_frame
from ui.terminal import KeySource, TerminalRenderer


class BrowserApp:
    """
    Main loop of the browser:
        render → block for the next key → dispatch → apply → repeat

    Gateway calls happen inside `apply`, on this thread, so no frame is
    drawn and no key is handled until they return.
    """

    def __init__(
        self,
        controller: SessionController,
        renderer: Optional[TerminalRenderer] = None,
        keys: Optional[KeySource] = None,
    ):
        self.controller = controller
        self.renderer = renderer or TerminalRenderer()
        self.keys = keys

    def run(self) -> None:
        keys = self.keys or KeySource()
        state = self.controller.state
        logger.info(f"Browser started with {len(state.databases)} databases")

        try:
            # Raw mode and the alternate screen are restored on every exit path
            with keys.raw_mode(), self.renderer.session():
                while True:
                    self.renderer.draw(compose_frame(state))
                    event = keys.read_key()
                    action = dispatch(state.focused_pane, event)
                    if action.kind is not ActionKind.NOOP:
                        logger.debug(f"{state.focused_pane.value}: {event} -> {action.kind.value}")
                    if not self.controller.apply(action):
                        break
        finally:
            keys.close()

        logger.info("Browser closed")
