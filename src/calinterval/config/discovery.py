"""Config file discovery and reading.

Settings live either in a dedicated ``calinterval.toml`` or in the
``[tool.calinterval]`` table of a project's ``pyproject.toml``. The finder
walks up from the start directory, like git finds .git/, and the nearest
directory holding either file wins (``calinterval.toml`` first within one
directory). The CALINTERVAL_CONFIG env var overrides discovery.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

from calinterval.errors import RegistryConfigError

CONFIG_FILENAME = "calinterval.toml"
PYPROJECT_FILENAME = "pyproject.toml"
CONFIG_ENV_VAR = "CALINTERVAL_CONFIG"

logger = logging.getLogger(__name__)


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for calinterval settings.

    A ``pyproject.toml`` only counts when it has a ``[tool.calinterval]``
    table. Returns the path to the config file, or None if not found.
    Checks CALINTERVAL_CONFIG env var first.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        if p.is_file():
            return p
        return None

    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        pyproject = current / PYPROJECT_FILENAME
        if pyproject.is_file() and _has_tool_table(pyproject):
            return pyproject
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def read_config(path: Path) -> dict[str, Any]:
    """Return the settings table stored in *path*.

    For ``pyproject.toml`` that is ``[tool.calinterval]`` (empty if absent);
    any other file is read whole.

    Raises:
        RegistryConfigError: If *path* is not valid TOML.
    """
    data = _load_toml(path)
    if path.name == PYPROJECT_FILENAME:
        return data.get("tool", {}).get("calinterval", {})
    return data


def _load_toml(path: Path) -> dict[str, Any]:
    raw = path.read_text(encoding="utf-8")
    try:
        return tomllib.loads(raw)
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise RegistryConfigError(msg) from exc


def _has_tool_table(pyproject: Path) -> bool:
    try:
        return "calinterval" in _load_toml(pyproject).get("tool", {})
    except RegistryConfigError:
        # Someone else's broken pyproject does not stop the walk.
        logger.warning("Skipping unreadable %s", pyproject, exc_info=True)
        return False
