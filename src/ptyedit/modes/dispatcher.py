"""Key dispatcher coordinating the normal, prefix and minibuffer modes."""

from __future__ import annotations

from enum import Enum
from typing import Dict, Optional, Type

from ptyedit.buffer import ViewportMirror
from ptyedit.config import EditorConfig
from ptyedit.keymaps import KeymapRegistry, KeymapResolver
from ptyedit.keymaps.defaults import load_default_keymaps
from ptyedit.runtime import telemetry
from ptyedit.scripting import ScriptHost
from ptyedit.workspace import Workspace

from .base_mode import KeyInput, Mode, ModeBus, ModeContext, ModeResult
from .keymap_helpers import update_flag
from .minibuffer_mode import MinibufferMode
from .normal_mode import NormalMode
from .prefix_mode import PrefixAMode, PrefixBMode


class DispatchMode(str, Enum):
    NORMAL = "normal"
    PREFIX_A = "prefix_a"
    PREFIX_B = "prefix_b"
    MINIBUFFER = "minibuffer"


DEFAULT_MODES: tuple[Type[Mode], ...] = (
    NormalMode,
    PrefixAMode,
    PrefixBMode,
    MinibufferMode,
)


class KeyDispatcher:
    """Owns the active mode, handles transitions, and routes key codes.

    There is one dispatch state for the whole editor, not one per buffer.
    """

    def __init__(
        self,
        workspace: Workspace,
        *,
        config: EditorConfig | None = None,
        script_host: ScriptHost | None = None,
        keymap_registry: KeymapRegistry | None = None,
        keymap_resolver: KeymapResolver | None = None,
        load_defaults: bool = True,
        rows: int | None = None,
        cols: int | None = None,
    ) -> None:
        self.workspace = workspace
        config = config or workspace.config
        self.context = ModeContext(
            workspace=workspace,
            bus=ModeBus(),
            config=config,
            script_host=script_host,
            view_rows=rows or config.default_rows,
            view_cols=cols or config.default_cols,
        )
        self.logger = telemetry.get_logger("ptyedit.modes")
        self.keymap_registry = keymap_registry or KeymapRegistry(
            logger_name="ptyedit.keymaps"
        )
        if load_defaults and keymap_registry is None:
            load_default_keymaps(self.keymap_registry)
        self.keymap_resolver = keymap_resolver or KeymapResolver(
            self.keymap_registry, logger_name="ptyedit.keymaps"
        )
        self.context.extras.setdefault("keymap_registry", self.keymap_registry)
        self.context.extras.setdefault("keymap_resolver", self.keymap_resolver)
        self.context.extras.setdefault("keymap_flags", {})
        self.context.extras.setdefault("dispatcher", self)

        self.quit_requested = False
        self.context.bus.subscribe("editor.quit", self._on_quit)

        self._modes: Dict[str, Mode] = {}
        self._active: Optional[str] = None
        for mode_cls in DEFAULT_MODES:
            self.register_mode(mode_cls)

    # -- modes ----------------------------------------------------------------

    @property
    def active_mode(self) -> Optional[Mode]:
        if self._active is None:
            return None
        return self._modes.get(self._active)

    @property
    def mode(self) -> DispatchMode:
        return DispatchMode(self._active)

    @property
    def bus(self) -> ModeBus:
        return self.context.bus

    def register_mode(self, mode_cls: Type[Mode]) -> Mode:
        mode = mode_cls(self.context)
        if mode.name in self._modes:
            raise ValueError(f"Mode '{mode.name}' already registered")
        self._modes[mode.name] = mode
        if self._active is None:
            self._active = mode.name
            mode.on_enter(None)
        return mode

    def switch_mode(self, name: str) -> None:
        if name not in self._modes:
            raise KeyError(f"Unknown mode '{name}'")
        previous = self.active_mode
        if previous and previous.name == name:
            return
        if previous:
            previous.on_exit(name)
        self._active = name
        self._modes[name].on_enter(previous.name if previous else None)
        telemetry.record_event("dispatch.mode", level="debug", data={"mode": name})

    # -- keys -----------------------------------------------------------------

    def handle_key(self, code: int) -> ModeResult:
        mode = self.active_mode
        if mode is None:
            raise RuntimeError("No active mode registered")
        update_flag(
            self.context, "subprocess_focus", self.workspace.current.has_live_session
        )
        key = KeyInput(code)
        with telemetry.span(
            name=f"mode::{mode.name}",
            component=True,
            metadata={"key": key.token, "mode": mode.name},
        ):
            try:
                result = mode.handle_key(key)
            except MemoryError:
                self.logger.error(f"out of memory handling {key.token}")
                self.context.minibuffer = None
                self.workspace.set_message("Out of memory")
                result = ModeResult(
                    consumed=True, switch_to=DispatchMode.NORMAL.value, status="oom"
                )
        if result.switch_to:
            self.switch_mode(result.switch_to)
        return result

    def _on_quit(self, payload: object) -> None:
        del payload
        self.quit_requested = True

    # -- frontend hooks ---------------------------------------------------------

    def resize(self, rows: int, cols: int) -> None:
        self.context.view_rows = max(1, rows)
        self.context.view_cols = max(1, cols)
        self.workspace.resize_sessions(self.context.view_rows, self.context.view_cols)

    @property
    def minibuffer_text(self) -> Optional[str]:
        state = self.context.minibuffer
        if state is None or self._active != DispatchMode.MINIBUFFER.value:
            return None
        return state.render()

    def snapshot(self) -> ViewportMirror:
        return self.workspace.viewport(
            self.context.view_rows,
            mode=self._active or DispatchMode.NORMAL.value,
            minibuffer=self.minibuffer_text,
        )


__all__ = ["KeyDispatcher", "DispatchMode", "DEFAULT_MODES"]
