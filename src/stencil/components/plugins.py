"""Plugin loading for external component kinds."""

from __future__ import annotations

import importlib
import importlib.metadata
import logging
from collections.abc import Callable, Iterable, Iterator
from types import ModuleType
from typing import Any

from stencil.config import COMPONENT_PLUGIN_GROUP

from .registry import ComponentRegistry

logger = logging.getLogger(__name__)

PLUGIN_API_VERSION = 1

RegisterFn = Callable[[ComponentRegistry], None]


def _plugin_sources(module_paths: Iterable[str], group: str) -> Iterator[tuple[str, Callable[[], Any]]]:
    """Yield `(label, loader)` for plugin modules, then entry points."""
    for module_path in module_paths:
        yield module_path, lambda module_path=module_path: importlib.import_module(module_path)
    for entry_point in importlib.metadata.entry_points().select(group=group):
        yield f"{entry_point.name} ({entry_point.value})", entry_point.load


def _register_fn(loaded: Any) -> RegisterFn:
    if not isinstance(loaded, ModuleType):
        if callable(loaded):
            return loaded
        msg = "plugin entry point must resolve to a module or callable."
        raise ValueError(msg)

    version = getattr(loaded, "PLUGIN_API_VERSION", PLUGIN_API_VERSION)
    if version != PLUGIN_API_VERSION:
        msg = f"module '{loaded.__name__}' targets plugin API version {version}, expected {PLUGIN_API_VERSION}."
        raise ValueError(msg)
    register = getattr(loaded, "register_components", None)
    if not callable(register):
        msg = f"module '{loaded.__name__}' does not define register_components(registry)."
        raise ValueError(msg)
    return register


def load_component_plugins(
    *,
    registry: ComponentRegistry,
    module_paths: Iterable[str] = (),
    entry_point_group: str = COMPONENT_PLUGIN_GROUP,
) -> tuple[str, ...]:
    """Register kinds from plugin modules and entry points.

    A plugin that fails to import or register is skipped and reported as a
    warning string; the rest still load.
    """
    warnings: list[str] = []
    for label, loader in _plugin_sources(module_paths, entry_point_group):
        before = set(registry.kinds())
        try:
            _register_fn(loader())(registry)
        except Exception as exc:  # noqa: BLE001
            logger.debug("component plugin %s failed to load", label, exc_info=True)
            warnings.append(f"warning: failed to load component plugin '{label}': {exc}")
            continue
        added = sorted(set(registry.kinds()) - before)
        logger.debug("component plugin %s added kinds: %s", label, ", ".join(added) or "(none)")
    return tuple(warnings)
