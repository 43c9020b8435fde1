"""Unified settings — init kwargs, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs   — values passed by the host application
  2. Env vars      — ``CALINTERVAL_*`` prefix
  3. TOML file     — ``calinterval.toml`` or ``pyproject.toml`` via walk-up
  4. Code defaults — baked into the field declarations

Uses Pydantic Settings v2 with a custom :class:`TomlSettingsSource` that
reuses the ``find_config`` walk-up discovery from
:mod:`calinterval.config.discovery`.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Annotated, Any

from pydantic import Field, StringConstraints
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from calinterval.config.discovery import find_config, read_config

# ``package.module:attribute``
ImportPath = Annotated[str, StringConstraints(pattern=r"^[\w.]+:[\w.]+$")]


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from ``calinterval.toml`` or ``[tool.calinterval]`` in pyproject.toml."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            self._data = read_config(toml_path)

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class CalintervalSettings(BaseSettings):
    """Settings for building the precision registry.

    Attributes:
        verbose: Log calinterval events at DEBUG instead of WARNING.
        log_json: Render log lines as JSON.
        load_entry_points: Load plugins from the ``calinterval.plugins``
            entry point group.
        precisions_modifier: Import path of a callable rewriting the ordered
            ``(precision, unit)`` list, applied after plugin modifiers.
        plugins: Import paths of plugin classes (or instances) to register.
        config_path: The TOML file the settings were read from, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "CALINTERVAL_",
        "env_nested_delimiter": "__",
    }

    verbose: bool = False
    log_json: bool = False
    load_entry_points: bool = True
    precisions_modifier: ImportPath | None = None
    plugins: list[ImportPath] = Field(default_factory=list)
    config_path: Path | None = None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def load(
        cls,
        *,
        config_path: str | Path | None = None,
        start: Path | None = None,
        **overrides: Any,
    ) -> CalintervalSettings:
        """Construct settings from the environment and ``calinterval.toml``.

        Uses the explicit *config_path* when given, otherwise walks up from
        *start* (default: cwd). Keyword *overrides* take highest priority.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(start)

        _tls.toml_path = toml_path
        try:
            return cls(config_path=toml_path, **overrides)
        finally:
            _tls.toml_path = None
