"""The editor loop: wait for input, dispatch one key, publish a frame."""

from __future__ import annotations

from typing import Iterable, Optional

from ptyedit.buffer import RenderSink, ViewportMirror
from ptyedit.config import EditorConfig
from ptyedit.modes.dispatcher import DispatchMode, KeyDispatcher
from ptyedit.runtime import telemetry
from ptyedit.runtime.keysource import KeySource, PipeKeySource
from ptyedit.runtime.multiplexer import InputMultiplexer
from ptyedit.workspace import Workspace


class Editor:
    """Wires the workspace, dispatcher and multiplexer into one loop.

    ``step`` is a single iteration: the only place the editor blocks is the
    multiplexer's bounded wait.
    """

    def __init__(
        self,
        config: Optional[EditorConfig] = None,
        *,
        keyboard: Optional[KeySource] = None,
        rows: Optional[int] = None,
        cols: Optional[int] = None,
    ) -> None:
        self.config = config or EditorConfig.from_env()
        self.workspace = Workspace(self.config)
        self.dispatcher = KeyDispatcher(
            self.workspace, config=self.config, rows=rows, cols=cols
        )
        self.keyboard = keyboard or PipeKeySource()
        self.multiplexer = InputMultiplexer(self.workspace, self.keyboard)
        self.logger = telemetry.get_logger("ptyedit.editor")
        self._closed = False

    @property
    def running(self) -> bool:
        return not (self._closed or self.dispatcher.quit_requested)

    @property
    def mode(self) -> DispatchMode:
        return self.dispatcher.mode

    def open_files(self, paths: Iterable[str]) -> None:
        for path in paths:
            self.workspace.open_file(path)

    def step(self, timeout: Optional[float] = None) -> Optional[int]:
        """Run one loop iteration; return the key dispatched, if any."""

        code = self.multiplexer.poll(timeout)
        if code is not None:
            self.dispatcher.handle_key(code)
        return code

    def pump(self, *, limit: int = 1024) -> int:
        """Process everything already pending without waiting."""

        handled = 0
        while handled < limit and self.running:
            if self.step(0) is None:
                break
            handled += 1
        return handled

    def run(self, sink: RenderSink) -> None:
        """Drive the loop until quit, rendering once per iteration."""

        try:
            while self.running:
                sink.render(self.snapshot())
                self.step()
        finally:
            self.shutdown()

    def resize(self, rows: int, cols: int) -> None:
        self.dispatcher.resize(rows, cols)

    def snapshot(self) -> ViewportMirror:
        return self.dispatcher.snapshot()

    def shutdown(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.workspace.shutdown()
        close = getattr(self.keyboard, "close", None)
        if close is not None:
            close()
        telemetry.record_event("editor.shutdown", level="debug")


__all__ = ["Editor"]
