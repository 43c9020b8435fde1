"""Configuration-time wiring of settings and plugins into a precision registry.

Called once by the host application, before intervals are used::

    from calinterval.bootstrap import configure

    configure()  # reads CALINTERVAL_* env vars and calinterval.toml

Installing the default registry is a configuration-time operation; the
host application serializes it.
"""

from __future__ import annotations

import importlib
import inspect
import logging
from typing import Any

from calinterval.config.logging import configure_logging
from calinterval.config.settings import CalintervalSettings
from calinterval.domain.registry import PrecisionRegistry, set_default_registry
from calinterval.errors import RegistryConfigError
from calinterval.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


def resolve_import_path(path: str) -> Any:
    """Import the object named by ``package.module:attribute``.

    Raises:
        RegistryConfigError: If the module or attribute cannot be found.
    """
    module_name, _, attr_path = path.partition(":")
    if not module_name or not attr_path:
        msg = f"Import path {path!r} must look like 'package.module:attribute'"
        raise RegistryConfigError(msg)
    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as exc:
        msg = f"Cannot import module {module_name!r} from {path!r}: {exc}"
        raise RegistryConfigError(msg) from exc
    for attr in attr_path.split("."):
        try:
            obj = getattr(obj, attr)
        except AttributeError as exc:
            msg = f"Module {module_name!r} has no attribute {attr_path!r}"
            raise RegistryConfigError(msg) from exc
    return obj


def build_plugin_manager(settings: CalintervalSettings) -> PluginManager:
    """Create a plugin manager holding entry-point and configured plugins.

    A configured plugin that cannot be imported or instantiated is logged
    as a warning and skipped.
    """
    pm = PluginManager()
    if settings.load_entry_points:
        pm.discover_and_load()

    for path in settings.plugins:
        try:
            plugin = resolve_import_path(path)
            if inspect.isclass(plugin):
                plugin = plugin()
            pm.register_plugin(plugin, name=path)
        except Exception:
            logger.warning("Failed to load configured plugin %s", path, exc_info=True)
    return pm


def build_registry(settings: CalintervalSettings) -> PrecisionRegistry:
    """Compose *settings* and their plugins into a validated registry.

    Raises:
        RegistryConfigError: If the configured modifier cannot be imported,
            is not callable, or the resulting registration list is invalid.
    """
    modifiers = []
    if settings.precisions_modifier is not None:
        modifier = resolve_import_path(settings.precisions_modifier)
        if not callable(modifier):
            msg = f"Precisions modifier {settings.precisions_modifier!r} is not callable"
            raise RegistryConfigError(msg)
        modifiers.append(modifier)

    registry = PrecisionRegistry(modifiers, plugin_manager=build_plugin_manager(settings))
    # Raises RegistryConfigError on an invalid registration list.
    registry.entries()
    logger.debug(
        "Built precision registry: %s",
        ", ".join(str(p) for p in registry.precisions()),
    )
    return registry


def configure(
    settings: CalintervalSettings | None = None,
    *,
    install: bool = True,
    setup_logging: bool = False,
) -> PrecisionRegistry:
    """Build the registry from *settings* (default: loaded from the environment).

    Args:
        settings: Settings to use; ``CalintervalSettings.load()`` when None.
        install: Make the registry the process default.
        setup_logging: Configure structlog output from the settings.
    """
    if settings is None:
        settings = CalintervalSettings.load()
    if setup_logging:
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    registry = build_registry(settings)
    if install:
        set_default_registry(registry)
    return registry
