"""Core contracts for component kinds and their registration."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from typing import Any, Protocol

from stencil.canvas import Canvas
from stencil.errors import ComponentError
from stencil.fonts import FontLoader
from stencil.properties import SlotMap, apply_named_properties
from stencil.settings import RenderSettings


class Component(Protocol):
    """Renderable unit loaded from one template component entry."""

    named_properties: SlotMap

    def set_named_properties(self, values: Mapping[str, Any]) -> Component:
        """Return a copy with every matching variable applied."""

    def write(self, canvas: Canvas) -> Canvas:
        """Draw onto the canvas and return the canvas to keep using."""


@dataclass(frozen=True)
class LoadContext:
    """Collaborators shared by component loaders and setters."""

    settings: RenderSettings = field(default_factory=RenderSettings)
    fonts: FontLoader = field(default_factory=FontLoader)
    now: datetime = field(default_factory=datetime.now)

    @classmethod
    def from_settings(cls, settings: RenderSettings) -> LoadContext:
        return cls(settings=settings, fonts=FontLoader(settings))


ComponentLoader = Callable[[Mapping[str, Any], LoadContext], Component]


@dataclass(frozen=True)
class ComponentSpec:
    """Registry metadata and loader callback for a component kind."""

    kind: str
    title: str
    description: str
    load: ComponentLoader
    aliases: tuple[str, ...] = ()


class DeferredComponent:
    """Shared variable handling for dataclass components.

    Subclasses are frozen dataclasses with a `named_properties` field. They
    implement `_set_property`, which writes one converted value into a draft
    of the component's fields.
    """

    kind = "component"
    named_properties: SlotMap

    def set_named_properties(self, values: Mapping[str, Any]) -> Any:
        draft = {item.name: getattr(self, item.name) for item in fields(self) if item.init}

        def setter(name: str, value: Any) -> None:
            self._set_property(draft, name, value)

        draft["named_properties"] = apply_named_properties(values, self.named_properties, setter)
        return replace(self, **draft)

    def _set_property(self, draft: dict[str, Any], name: str, value: Any) -> None:
        raise NotImplementedError

    def _require_resolved(self) -> None:
        if self.named_properties:
            pending = ", ".join(sorted(self.named_properties))
            msg = f"cannot draw {self.kind}, not all named properties are set: {pending}"
            raise ComponentError(msg)
