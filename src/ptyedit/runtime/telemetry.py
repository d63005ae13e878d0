"""Structured logging, events and profiling spans on top of telelog.

The editor paints the whole terminal, so nothing reaches the console unless
``PTYEDIT_CONSOLE_LOG`` is set. Traces go to ``PTYEDIT_LOG_FILE`` when it
names a file.
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterator, Mapping, MutableMapping, Optional, cast

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "PTYEDIT_"
ROOT_LOGGER = "ptyedit"

_TRUTHY = {"1", "true", "yes", "on"}


def _flag(environ: Mapping[str, str], name: str) -> bool:
    return environ.get(f"{ENV_PREFIX}{name}", "").lower() in _TRUTHY


@dataclass(frozen=True)
class LogSettings:
    """What the active telelog configuration was built from."""

    level: str = "INFO"
    log_file: str = ""
    console: bool = False
    color: bool = True
    json: bool = False
    buffered: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "LogSettings":
        env = os.environ if environ is None else environ
        return cls(
            level=env.get(f"{ENV_PREFIX}LOG_LEVEL", "INFO").upper(),
            log_file=env.get(f"{ENV_PREFIX}LOG_FILE", ""),
            console=_flag(env, "CONSOLE_LOG"),
            color=not _flag(env, "NO_COLOR"),
            json=_flag(env, "LOG_JSON"),
        )


def preset_settings(preset: str, base: Optional[LogSettings] = None) -> LogSettings:
    """Settings for a named preset; a log file from ``base`` is kept."""

    base = base or LogSettings.from_env()
    key = preset.lower()
    if key == "development":
        return replace(base, level="DEBUG", log_file=base.log_file or "ptyedit-debug.log")
    if key == "production":
        return replace(
            base,
            level="WARNING",
            log_file=base.log_file or "ptyedit.log",
            buffered=True,
        )
    if key == "quiet":
        return replace(base, level="ERROR", log_file="")
    raise ValueError(f"Unknown preset '{preset}'.")


def build_config(settings: LogSettings) -> Any:
    config = tl.Config()
    config.with_min_level(settings.level)
    config.with_console_output(settings.console)
    if settings.console:
        config.with_colored_output(settings.color)
    config.with_json_format(settings.json)
    if settings.log_file:
        config.with_file_output(settings.log_file)
    if settings.buffered:
        config.with_buffering(True)
    # spans are built on logger.profile
    config.with_profiling(True)
    return config


_LOGGERS: MutableMapping[str, Any] = {}
_ACTIVE: Dict[str, Any] = {}


def configure(
    *,
    config: Optional[Any] = None,
    preset: Optional[str] = None,
    settings: Optional[LogSettings] = None,
) -> None:
    """Replace the active configuration and drop cached loggers.

    Pass at most one of a ready ``tl.Config``, a preset name
    (``"development"``, ``"production"``, ``"quiet"``) or ``LogSettings``.
    With none, the ``PTYEDIT_*`` environment decides.
    """

    if sum(option is not None for option in (config, preset, settings)) > 1:
        raise ValueError("Provide only one of `config`, `preset` or `settings`.")
    if config is None:
        if preset is not None:
            settings = preset_settings(preset)
        config = build_config(settings or LogSettings.from_env())
    else:
        config.with_profiling(True)
    _ACTIVE["config"] = config
    _LOGGERS.clear()


def get_logger(name: Optional[str] = None) -> Any:
    """Cached ``telelog.Logger`` named ``name`` (default ``ptyedit``)."""

    if "config" not in _ACTIVE:
        configure()
    logger_name = name or ROOT_LOGGER
    logger = _LOGGERS.get(logger_name)
    if logger is None:
        logger = tl.Logger.with_config(logger_name, _ACTIVE["config"])
        _LOGGERS[logger_name] = logger
    return logger


def _text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("latin-1")
    return repr(value) if isinstance(value, (dict, list, tuple, set)) else str(value)


def _emit(logger: Any, level: str, message: str, payload: Mapping[str, Any]) -> None:
    name = str(level).lower()
    structured = getattr(logger, f"{name}_with", None)
    if structured is not None:
        structured(message, [(str(key), _text(value)) for key, value in payload.items()])
        return
    plain = getattr(logger, name, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    plain(f"{message} {dict(payload)}")


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    """Log ``event::<name>`` with ``data`` as structured fields."""

    _emit(get_logger(logger_name), level, f"event::{name}", {"event": name, **(data or {})})


@dataclass
class SpanHandle:
    """Yielded by ``span``; extra metadata lands on the failure record."""

    logger: Any
    name: str
    component: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _text(value)

    def fail(self, reason: str) -> None:
        payload: Dict[str, Any] = {"span": self.name, **self.metadata}
        if self.component:
            payload["component"] = self.component
        payload["reason"] = reason
        _emit(self.logger, "error", "span::fail", payload)


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str | bool] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile a block, optionally tracked as a telelog component.

    ``component=True`` reuses ``name``; a string names the component.
    ``metadata`` is logger context for the duration of the block.
    """

    logger = get_logger(logger_name)
    if component is True:
        component_name: Optional[str] = name
    else:
        component_name = component or None
    handle = SpanHandle(logger, name, component_name)

    with ExitStack() as stack:
        for key, value in (metadata or {}).items():
            handle.add_metadata(key, value)
            logger.add_context(key, handle.metadata[key])
            stack.callback(logger.remove_context, key)
        if handle.component:
            stack.enter_context(logger.track_component(handle.component))
        stack.enter_context(logger.profile(name))
        try:
            yield handle
        except Exception as exc:
            handle.fail(str(exc))
            raise


__all__ = [
    "LogSettings",
    "SpanHandle",
    "build_config",
    "configure",
    "get_logger",
    "preset_settings",
    "record_event",
    "span",
]
