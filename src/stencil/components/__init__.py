"""Component kinds package."""

from .catalog import build_component_registry, builtin_component_specs
from .contracts import Component, ComponentSpec, DeferredComponent, LoadContext
from .plugins import PLUGIN_API_VERSION, load_component_plugins
from .registry import ComponentRegistry

__all__ = [
    "PLUGIN_API_VERSION",
    "Component",
    "ComponentRegistry",
    "ComponentSpec",
    "DeferredComponent",
    "LoadContext",
    "build_component_registry",
    "builtin_component_specs",
    "load_component_plugins",
]
