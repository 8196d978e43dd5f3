"""Runtime settings resolved from arguments and ``FAILTRACE_*`` variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from failtrace.application.ports.sink import SinkPort
from failtrace.domain.buffer import DiagnosticHook

SINK_NAMES: tuple[str, ...] = ("stderr", "stdout", "rich", "discard")

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class RuntimeSettings:
    """Validated configuration consumed by :func:`build_runtime`.

    ``sink`` is either one of :data:`SINK_NAMES` or a caller-supplied object
    implementing :class:`SinkPort`.
    """

    sink: str | SinkPort = "stderr"
    max_idle: int | None = None
    force_color: bool = False
    no_color: bool = False
    diagnostic_hook: DiagnosticHook = None

    @property
    def sink_name(self) -> str:
        if isinstance(self.sink, str):
            return self.sink
        return type(self.sink).__name__


def build_runtime_settings(
    *,
    sink: str | SinkPort = "stderr",
    max_idle: int | None = None,
    force_color: bool = False,
    no_color: bool = False,
    diagnostic_hook: DiagnosticHook = None,
    environ: Mapping[str, str] | None = None,
) -> RuntimeSettings:
    """Merge keyword arguments with environment overrides.

    Environment variables win over named arguments. A sink passed as an
    object is explicit wiring and is never replaced.

    Examples
    --------
    >>> build_runtime_settings(environ={"FAILTRACE_SINK": "discard"}).sink
    'discard'
    >>> build_runtime_settings(max_idle=4, environ={}).max_idle
    4
    >>> build_runtime_settings(environ={"FAILTRACE_POOL_MAX_IDLE": "16"}).max_idle
    16
    """

    env = os.environ if environ is None else environ

    resolved_sink: str | SinkPort = sink
    if isinstance(sink, str):
        resolved_sink = _coerce_sink_name(env.get("FAILTRACE_SINK") or sink)

    raw_max_idle = env.get("FAILTRACE_POOL_MAX_IDLE")
    resolved_max_idle = _coerce_max_idle(raw_max_idle) if raw_max_idle is not None else max_idle
    if resolved_max_idle is not None and resolved_max_idle < 0:
        raise ValueError("max_idle must be zero or positive")

    return RuntimeSettings(
        sink=resolved_sink,
        max_idle=resolved_max_idle,
        force_color=_env_bool(env, "FAILTRACE_FORCE_COLOR", force_color),
        no_color=_env_bool(env, "FAILTRACE_NO_COLOR", no_color),
        diagnostic_hook=diagnostic_hook,
    )


def _coerce_sink_name(name: str) -> str:
    normalized = name.strip().lower()
    if normalized not in SINK_NAMES:
        raise ValueError(f"Unknown sink {name!r}; expected one of {', '.join(SINK_NAMES)}")
    return normalized


def _coerce_max_idle(raw: str) -> int | None:
    """Parse ``FAILTRACE_POOL_MAX_IDLE``; an empty value means unbounded."""
    if not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"FAILTRACE_POOL_MAX_IDLE must be an integer, got {raw!r}") from exc


def _env_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    value = env.get(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in _TRUTHY


__all__ = ["RuntimeSettings", "SINK_NAMES", "build_runtime_settings"]
