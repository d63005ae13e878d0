"""Built-in keymaps for the normal, prefix and minibuffer modes."""

from __future__ import annotations

from typing import Iterable, Sequence

from ptyedit.actions import core as core_actions
from ptyedit.actions import editing as editing_actions
from ptyedit.actions import minibuffer as minibuffer_actions
from ptyedit.actions import prefix as prefix_actions

from .models import ActionRef, Binding
from .registry import KeymapRegistry

# Normal-mode editing bindings stand aside while a live session has focus so
# the key reaches the child instead.
SESSION_GATE = ("!subprocess_focus",)

DEFAULT_ACTIONS: tuple[ActionRef, ...] = (
    ActionRef("core.enter_prefix_a", core_actions.enter_prefix_a, "Start a C-x sequence"),
    ActionRef("core.enter_prefix_b", core_actions.enter_prefix_b, "Start a meta sequence"),
    ActionRef("core.cancel", core_actions.cancel, "Cancel prefix or prompt"),
    ActionRef("core.quit", core_actions.quit_editor, "Quit the editor"),
    ActionRef("edit.move_up", editing_actions.move_up, "Previous line"),
    ActionRef("edit.move_down", editing_actions.move_down, "Next line"),
    ActionRef("edit.move_left", editing_actions.move_left, "Backward char"),
    ActionRef("edit.move_right", editing_actions.move_right, "Forward char"),
    ActionRef("edit.line_start", editing_actions.line_start, "Beginning of line"),
    ActionRef("edit.line_end", editing_actions.line_end, "End of line"),
    ActionRef("edit.page_up", editing_actions.page_up, "Scroll one page up"),
    ActionRef("edit.page_down", editing_actions.page_down, "Scroll one page down"),
    ActionRef("edit.delete_backward", editing_actions.delete_backward, "Delete previous char"),
    ActionRef("edit.delete_forward", editing_actions.delete_forward, "Delete next char"),
    ActionRef("edit.kill_line", editing_actions.kill_line, "Kill to end of line"),
    ActionRef("edit.yank", editing_actions.yank, "Yank the kill-ring"),
    ActionRef("edit.insert_tab", editing_actions.insert_tab, "Insert a tab"),
    ActionRef("edit.newline", editing_actions.newline, "Split the line"),
    ActionRef("edit.set_mark", editing_actions.set_mark, "Set the mark"),
    ActionRef("edit.kill_region", editing_actions.kill_region, "Kill the region"),
    ActionRef("edit.clear_status", editing_actions.clear_status, "Clear the status line"),
    ActionRef("edit.toggle_help", editing_actions.toggle_help, "Toggle the help overlay"),
    ActionRef("edit.resize", editing_actions.resize, "Resize session terminals"),
    ActionRef("edit.search", prefix_actions.prompt_search, "Search forward"),
    ActionRef("file.save", prefix_actions.save_buffer, "Save the current buffer"),
    ActionRef("file.write", prefix_actions.prompt_write_file, "Write to a file"),
    ActionRef("file.find", prefix_actions.prompt_find_file, "Visit a file"),
    ActionRef("buffer.switch", prefix_actions.prompt_switch_buffer, "Switch buffer"),
    ActionRef("buffer.kill", prefix_actions.prompt_kill_buffer, "Kill a buffer"),
    ActionRef("session.open_shell", prefix_actions.open_shell, "Open a shell buffer"),
    ActionRef("window.split", prefix_actions.split_window, "Split the window"),
    ActionRef("command.prompt", prefix_actions.prompt_execute_command, "Execute a command"),
    ActionRef("motion.forward_word", prefix_actions.forward_word, "Forward word"),
    ActionRef("motion.backward_word", prefix_actions.backward_word, "Backward word"),
    ActionRef("motion.buffer_start", prefix_actions.buffer_start, "Beginning of buffer"),
    ActionRef("motion.buffer_end", prefix_actions.buffer_end, "End of buffer"),
    ActionRef("edit.kill_word", prefix_actions.kill_word, "Kill word forward"),
    ActionRef("edit.copy_region", prefix_actions.copy_region, "Copy the region"),
    ActionRef("edit.replace", prefix_actions.prompt_replace, "Replace every match"),
    ActionRef("minibuffer.submit", minibuffer_actions.submit, "Submit the prompt"),
    ActionRef("minibuffer.backspace", minibuffer_actions.backspace, "Delete typed char"),
)


def _bind(
    mode: str,
    keys: Sequence[str],
    action_id: str,
    *,
    when: Sequence[str] = (),
    description: str = "",
) -> tuple[Binding, ...]:
    return tuple(
        Binding(
            id=f"{mode}.{action_id}.{key}",
            mode=mode,
            key=key,
            action_id=action_id,
            description=description,
            when=tuple(when),
            tags=("default",),
        )
        for key in keys
    )


DEFAULT_BINDINGS: tuple[Binding, ...] = (
    # C-x stays live in passthrough; it is the only way out of a session.
    *_bind("normal", ("C-x",), "core.enter_prefix_a"),
    *_bind("normal", ("RESIZE",), "edit.resize"),
    *_bind("normal", ("ESC",), "core.enter_prefix_b", when=SESSION_GATE),
    *_bind("normal", ("C-g",), "core.cancel", when=SESSION_GATE),
    *_bind("normal", ("UP", "C-p"), "edit.move_up", when=SESSION_GATE),
    *_bind("normal", ("DOWN", "C-n"), "edit.move_down", when=SESSION_GATE),
    *_bind("normal", ("LEFT", "C-b"), "edit.move_left", when=SESSION_GATE),
    *_bind("normal", ("RIGHT", "C-f"), "edit.move_right", when=SESSION_GATE),
    *_bind("normal", ("HOME", "C-a"), "edit.line_start", when=SESSION_GATE),
    *_bind("normal", ("END", "C-e"), "edit.line_end", when=SESSION_GATE),
    *_bind("normal", ("PAGEUP",), "edit.page_up", when=SESSION_GATE),
    *_bind("normal", ("PAGEDOWN",), "edit.page_down", when=SESSION_GATE),
    *_bind(
        "normal", ("BACKSPACE", "DEL", "C-h"), "edit.delete_backward", when=SESSION_GATE
    ),
    *_bind("normal", ("C-d", "DELETE"), "edit.delete_forward", when=SESSION_GATE),
    *_bind("normal", ("C-k",), "edit.kill_line", when=SESSION_GATE),
    *_bind("normal", ("C-y",), "edit.yank", when=SESSION_GATE),
    *_bind("normal", ("TAB",), "edit.insert_tab", when=SESSION_GATE),
    *_bind("normal", ("RET",), "edit.newline", when=SESSION_GATE),
    *_bind("normal", ("C-@",), "edit.set_mark", when=SESSION_GATE),
    *_bind("normal", ("C-w",), "edit.kill_region", when=SESSION_GATE),
    *_bind("normal", ("C-s",), "edit.search", when=SESSION_GATE),
    *_bind("normal", ("C-l",), "edit.clear_status", when=SESSION_GATE),
    *_bind("normal", ("F1",), "edit.toggle_help", when=SESSION_GATE),
    *_bind("prefix_a", ("C-g",), "core.cancel"),
    *_bind("prefix_a", ("C-s",), "file.save"),
    *_bind("prefix_a", ("C-w",), "file.write"),
    *_bind("prefix_a", ("C-f",), "file.find"),
    *_bind("prefix_a", ("C-c",), "core.quit"),
    *_bind("prefix_a", ("b",), "buffer.switch"),
    *_bind("prefix_a", ("k",), "buffer.kill"),
    *_bind("prefix_a", ("s",), "session.open_shell"),
    *_bind("prefix_a", ("2",), "window.split"),
    *_bind("prefix_b", ("C-g",), "core.cancel"),
    *_bind("prefix_b", ("x", "X"), "command.prompt"),
    *_bind("prefix_b", ("f",), "motion.forward_word"),
    *_bind("prefix_b", ("b",), "motion.backward_word"),
    *_bind("prefix_b", ("<",), "motion.buffer_start"),
    *_bind("prefix_b", (">",), "motion.buffer_end"),
    *_bind("prefix_b", ("d",), "edit.kill_word"),
    *_bind("prefix_b", ("w",), "edit.copy_region"),
    *_bind("prefix_b", ("%",), "edit.replace"),
    *_bind("minibuffer", ("C-g", "ESC"), "core.cancel"),
    *_bind("minibuffer", ("RET",), "minibuffer.submit"),
    *_bind("minibuffer", ("BACKSPACE", "DEL", "C-h"), "minibuffer.backspace"),
)


def load_default_keymaps(
    registry: KeymapRegistry,
    *,
    replace: bool = False,
    extra_bindings: Iterable[Binding] | None = None,
    include_bindings: Sequence[str] | None = None,
    exclude_bindings: Sequence[str] | None = None,
) -> None:
    """Register built-in actions and bindings for every mode."""

    include = set(include_bindings) if include_bindings is not None else None
    exclude = set(exclude_bindings or ())

    for action in DEFAULT_ACTIONS:
        registry.register_action(action, replace=replace)

    selected = [
        binding
        for binding in DEFAULT_BINDINGS
        if (include is None or binding.id in include) and binding.id not in exclude
    ]
    for binding in (*selected, *(extra_bindings or ())):
        registry.register_binding(binding, replace=replace)


__all__ = ["load_default_keymaps", "DEFAULT_ACTIONS", "DEFAULT_BINDINGS", "SESSION_GATE"]
