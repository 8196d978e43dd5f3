"""Optional ``.env`` loading for configuration overrides.

Purpose
-------
Let operators keep ``FAILTRACE_*`` settings in a ``.env`` file next to the
project instead of exporting them in every shell.

Contents
--------
* :data:`DOTENV_ENV_VAR` – environment toggle honoured by the CLI.
* :func:`should_use_dotenv` – precedence rule (CLI flag beats environment).
* :func:`enable_dotenv` – load the nearest ``.env`` once per process.

System Role
-----------
Runs before :func:`failtrace.init` resolves its settings, so values loaded
here behave exactly like exported variables. Existing environment variables
always win over ``.env`` entries.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

LOGGER = logging.getLogger(__name__)

DOTENV_ENV_VAR = "FAILTRACE_USE_DOTENV"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}

_DOTENV_LOCK = threading.Lock()
_DOTENV_LOADED: Path | None = None
_DOTENV_ATTEMPTED = False


def should_use_dotenv(*, explicit: bool | None = None, env_value: str | None = None) -> bool:
    """Decide whether ``.env`` loading is requested.

    Examples
    --------
    >>> should_use_dotenv(explicit=False, env_value="1")
    False
    >>> should_use_dotenv(env_value="yes")
    True
    >>> should_use_dotenv()
    False
    """

    if explicit is not None:
        return explicit
    if env_value is None:
        return False
    normalized = env_value.strip().lower()
    if normalized in _TRUTHY:
        return True
    if normalized in _FALSY or not normalized:
        return False
    LOGGER.warning("Ignoring unrecognised %s value %r", DOTENV_ENV_VAR, env_value)
    return False


def enable_dotenv(*, search_from: Path | None = None) -> Path | None:
    """Load the nearest ``.env`` without overriding existing variables.

    The search starts at ``search_from`` (default: the working directory) and
    walks up the parent directories. Only the first call per process touches
    the filesystem; later calls return the cached result.

    Returns
    -------
    Path | None
        Resolved path of the loaded file, or ``None`` when none was found.
    """

    global _DOTENV_LOADED, _DOTENV_ATTEMPTED
    with _DOTENV_LOCK:
        if _DOTENV_ATTEMPTED:
            return _DOTENV_LOADED
        _DOTENV_ATTEMPTED = True
        candidate = _find_dotenv(search_from)
        if candidate is None:
            LOGGER.debug("No .env file found")
            return None
        load_dotenv(candidate, override=False)
        _DOTENV_LOADED = candidate
        LOGGER.debug("Loaded environment overrides from %s", candidate)
        return candidate


def _find_dotenv(search_from: Path | None) -> Path | None:
    if search_from is None:
        found = find_dotenv(usecwd=True)
        return Path(found).resolve() if found else None
    start = search_from.resolve()
    for directory in (start, *start.parents):
        candidate = directory / ".env"
        if candidate.is_file():
            return candidate
    return None


def _reset_dotenv_state_for_testing() -> None:
    """Forget previous :func:`enable_dotenv` calls (test helper)."""

    global _DOTENV_LOADED, _DOTENV_ATTEMPTED
    with _DOTENV_LOCK:
        _DOTENV_LOADED = None
        _DOTENV_ATTEMPTED = False


__all__ = ["DOTENV_ENV_VAR", "enable_dotenv", "should_use_dotenv"]
