"""Executable Textual app that hosts the editor."""

from __future__ import annotations

import argparse
from dataclasses import replace
from typing import Any, Optional, Sequence

try:  # pragma: no cover - imported only when the app is run
    from rich.text import Text
    from textual import events
    from textual.app import App, ComposeResult
    from textual.widgets import Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use ptyedit.adapters.textual.app"
    ) from exc

from ptyedit.buffer import ViewportMirror
from ptyedit.config import EditorConfig
from ptyedit.editor import Editor
from ptyedit.runtime import telemetry
from ptyedit.workspace import HELP_LINES

from .controller import (
    TextualEditorAdapter,
    TextualUIHooks,
    display_column,
    display_line,
)

# modeline + minibuffer/status line
CHROME_ROWS = 2


def render_buffer(mirror: ViewportMirror) -> Text:
    text = Text(no_wrap=True, overflow="crop")
    cursor_row = mirror.cursor_row
    for row, line in enumerate(mirror.lines):
        rendered = display_line(line)
        if row == cursor_row and mirror.minibuffer is None:
            column = display_column(line, mirror.cursor[1])
            padded = rendered.ljust(column + 1)
            text.append(padded[:column])
            text.append(padded[column], style="reverse")
            text.append(padded[column + 1 :])
        else:
            text.append(rendered)
        text.append("\n")
    if mirror.show_help:
        text.append("\n")
        for help_line in HELP_LINES:
            text.append(help_line + "\n", style="bold")
    return text


class PtyEditApp(App[None]):
    """Buffer view, modeline and minibuffer painted from viewport mirrors."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#buffer-view {
		height: 1fr;
		content-align: left top;
	}

	#mode-line {
		height: 1;
		background: $accent;
	}

	#echo-area {
		height: 1;
	}
	"""

    def __init__(
        self,
        config: EditorConfig,
        *,
        files: Sequence[str] = (),
    ) -> None:
        super().__init__()
        self.config = config
        self.files = tuple(files)
        self.editor: Editor | None = None
        self.adapter: TextualEditorAdapter | None = None
        self._buffer_widget: Static | None = None
        self._modeline_widget: Static | None = None
        self._echo_widget: Static | None = None

    def compose(self) -> ComposeResult:
        self._buffer_widget = Static("", id="buffer-view")
        self._modeline_widget = Static("", id="mode-line")
        self._echo_widget = Static("", id="echo-area")
        yield self._buffer_widget
        yield self._modeline_widget
        yield self._echo_widget

    async def on_mount(self) -> None:
        rows = max(1, self.size.height - CHROME_ROWS)
        cols = max(1, self.size.width)
        self.editor = Editor(self.config, rows=rows, cols=cols)
        self.editor.open_files(self.files)
        hooks = TextualUIHooks(
            render=self._render_frame,
            handle_event=self._handle_event,
            request_exit=self.exit,
        )
        self.adapter = TextualEditorAdapter(self.editor, hooks)
        self.set_interval(self.config.poll_timeout, self._poll)

    async def on_unmount(self) -> None:
        if self.editor:
            self.editor.shutdown()

    def _poll(self) -> None:
        if self.adapter:
            self.adapter.pump()

    async def on_key(self, event: events.Key) -> None:
        if not self.adapter:
            return
        if self.adapter.handle_textual_key(event.key, event.character):
            event.stop()
            event.prevent_default()

    def on_resize(self, event: events.Resize) -> None:
        if not self.adapter:
            return
        rows = max(1, event.size.height - CHROME_ROWS)
        self.adapter.handle_resize(rows, max(1, event.size.width))

    def _render_frame(self, mirror: ViewportMirror) -> None:
        if self._buffer_widget:
            self._buffer_widget.update(render_buffer(mirror))
        if self._modeline_widget:
            self._modeline_widget.update(Text(mirror.modeline()))
        if self._echo_widget:
            echo = mirror.minibuffer if mirror.minibuffer is not None else mirror.status
            self._echo_widget.update(Text(echo))

    def _handle_event(self, name: str, payload: Any | None) -> None:
        telemetry.record_event("ui.event", level="debug", data={"event": name, "payload": payload})


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="ptyedit", description="Multi-buffer editor with shell buffers."
    )
    parser.add_argument("files", nargs="*", help="Files to visit at startup")
    parser.add_argument(
        "--shell",
        default=None,
        help="Program run by C-x s (default: $PTYEDIT_SHELL, $SHELL, /bin/bash)",
    )
    parser.add_argument(
        "--log-preset",
        choices=("development", "production", "quiet"),
        default=None,
        help="telelog preset to apply before starting",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    if args.log_preset:
        telemetry.configure(preset=args.log_preset)
    config = EditorConfig.from_env()
    if args.shell:
        config = replace(config, shell=args.shell)
    PtyEditApp(config, files=args.files).run()


if __name__ == "__main__":  # pragma: no cover - manual run
    main()
