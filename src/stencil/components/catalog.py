"""Built-in component kinds and registry helpers."""

from __future__ import annotations

from collections.abc import Sequence

from .barcode import BARCODE_SPEC
from .circle import CIRCLE_SPEC
from .contracts import ComponentSpec
from .datetimes import DATETIME_SPEC
from .image import IMAGE_SPEC
from .plugins import load_component_plugins
from .rectangle import RECTANGLE_SPEC
from .registry import ComponentRegistry
from .text import TEXT_SPEC


def builtin_component_specs() -> tuple[ComponentSpec, ...]:
    return (
        RECTANGLE_SPEC,
        CIRCLE_SPEC,
        TEXT_SPEC,
        DATETIME_SPEC,
        IMAGE_SPEC,
        BARCODE_SPEC,
    )


def build_component_registry(
    *,
    plugin_modules: Sequence[str] = (),
) -> tuple[ComponentRegistry, tuple[str, ...]]:
    """Return a registry with built-ins and optional plugin kinds."""
    registry = ComponentRegistry()
    registry.register_many(builtin_component_specs())
    warnings = load_component_plugins(registry=registry, module_paths=plugin_modules)
    return registry, warnings
