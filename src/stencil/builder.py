"""Template orchestration: load, apply variables, render.

A `TemplateBuilder` is immutable. Every step returns a new builder, so a
failed step leaves the caller's builder as it was. Variable apply and the
render pass stop at the first failure; the builder as of that point is
attached to the raised error as `partial`.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from .background import CanvasFactory, set_background
from .canvas import Canvas, Colour, Point, ReportLabCanvas
from .components import Component, ComponentRegistry, LoadContext, build_component_registry
from .conditional import ComponentConditional
from .config import PLACEHOLDER
from .errors import CanvasError, ComponentError, TemplateError
from .settings import RenderSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToggleableComponent:
    """A component paired with the condition that gates it."""

    conditional: ComponentConditional
    component: Component

    def is_enabled(self) -> bool:
        """Return whether the gate passes, treating errors as closed."""
        try:
            return self.conditional.validate()
        except TemplateError:
            return False


def _default_registry() -> ComponentRegistry:
    registry, _ = build_component_registry()
    return registry


@dataclass(frozen=True)
class TemplateBuilder:
    """Ordered components of one template plus the canvas they draw on."""

    registry: ComponentRegistry = field(default_factory=_default_registry)
    settings: RenderSettings = field(default_factory=RenderSettings)
    canvas: Canvas | None = None
    components: tuple[ToggleableComponent, ...] = ()
    named_properties: Mapping[str, str] = field(default_factory=dict)
    canvas_factory: CanvasFactory = field(default=ReportLabCanvas, compare=False, repr=False)

    def load_components_file(self, path: str | Path) -> TemplateBuilder:
        try:
            data = Path(path).read_bytes()
        except OSError as exc:
            msg = f"failed to read template file '{path}': {exc}"
            raise TemplateError(msg) from exc
        return self.load_components_data(data)

    def load_components_data(self, data: bytes | str) -> TemplateBuilder:
        """Decode a template document, set up the background and load every component."""
        try:
            document = json.loads(data)
        except json.JSONDecodeError as exc:
            msg = f"template is not valid JSON: {exc}"
            raise TemplateError(msg) from exc
        if not isinstance(document, Mapping):
            msg = "template content must be a JSON object."
            raise TemplateError(msg)

        canvas = set_background(
            self.canvas,
            document.get("baseImage"),
            settings=self.settings,
            canvas_factory=self.canvas_factory,
        )
        context = LoadContext.from_settings(self.settings)
        components, named_properties = parse_components(
            document.get("components") or [], self.registry, context
        )
        logger.debug(
            "loaded %d component(s) needing %d variable(s)", len(components), len(named_properties)
        )
        return replace(
            self, canvas=canvas, components=components, named_properties=named_properties
        )

    def named_properties_list(self) -> dict[str, str]:
        """Return every variable the loaded template needs, with placeholder values."""
        return dict(self.named_properties)

    def set_named_properties(self, values: Mapping[str, Any]) -> TemplateBuilder:
        """Apply caller values to every component and its condition."""
        updated = list(self.components)
        for index, pair in enumerate(self.components):
            try:
                component = pair.component.set_named_properties(values)
                conditional = pair.conditional
                for name, value in values.items():
                    conditional = conditional.set_value(name, value)
            except TemplateError as exc:
                exc.partial = replace(self, components=tuple(updated))
                raise
            updated[index] = ToggleableComponent(conditional=conditional, component=component)
        return replace(self, components=tuple(updated))

    def apply_components(self) -> TemplateBuilder:
        """Draw every enabled component in template order."""
        if self.canvas is None:
            msg = "no canvas set to draw on"
            raise CanvasError(msg)
        canvas = self.canvas
        for index, pair in enumerate(self.components):
            try:
                if pair.conditional.name and not pair.conditional.validate():
                    logger.debug("skipping component %d: condition on %s is false", index, pair.conditional.name)
                    continue
                canvas = pair.component.write(canvas)
            except TemplateError as exc:
                exc.partial = replace(self, canvas=canvas)
                raise
        return replace(self, canvas=canvas)

    def get_components(self) -> list[Component]:
        """Return the components whose condition currently passes."""
        return [pair.component for pair in self.components if pair.is_enabled()]

    def write_to_pdf(self) -> bytes:
        if self.canvas is None:
            msg = "no canvas set to encode"
            raise CanvasError(msg)
        return self.canvas.encode()


def new_builder(
    canvas: Canvas | None = None,
    starting_colour: Colour | None = None,
    *,
    registry: ComponentRegistry | None = None,
    settings: RenderSettings | None = None,
) -> TemplateBuilder:
    """Create a builder, optionally filling an existing canvas with one colour."""
    if starting_colour is not None:
        if canvas is None:
            msg = "a starting colour needs a canvas to fill"
            raise CanvasError(msg)
        canvas = canvas.rectangle(Point(), canvas.width, canvas.height, starting_colour)
    return TemplateBuilder(
        registry=registry or _default_registry(),
        settings=settings or RenderSettings(),
        canvas=canvas,
    )


def parse_components(
    entries: Sequence[Any],
    registry: ComponentRegistry,
    context: LoadContext,
) -> tuple[tuple[ToggleableComponent, ...], dict[str, str]]:
    """Load template component entries in document order."""
    if not isinstance(entries, Sequence) or isinstance(entries, (str, bytes)):
        msg = "template components must be a JSON array."
        raise ComponentError(msg)

    results: list[ToggleableComponent] = []
    named_properties: dict[str, str] = {}
    for index, entry in enumerate(entries):
        if not isinstance(entry, Mapping):
            msg = f"component {index} must be a JSON object."
            raise ComponentError(msg)
        kind = entry.get("type", "")
        if not isinstance(kind, str):
            msg = f"component {index} type must be a string."
            raise ComponentError(msg)
        try:
            spec = registry.get(kind)
        except ValueError as exc:
            msg = f"failed to find type matching component with user-specified type {kind}: {exc}"
            raise ComponentError(msg) from exc

        conditional = ComponentConditional.from_dict(entry.get("conditional"))
        component = spec.load(entry.get("properties") or {}, context)
        for name in (*component.named_properties, *sorted(conditional.named_properties())):
            named_properties[name] = PLACEHOLDER
        results.append(ToggleableComponent(conditional=conditional, component=component))
        logger.debug("loaded component %d as %s", index, spec.kind)
    return tuple(results), named_properties


def render_template(
    template_path: str | Path,
    values: Mapping[str, Any],
    *,
    settings: RenderSettings | None = None,
    registry: ComponentRegistry | None = None,
) -> bytes:
    """Load, fill and render one template file to PDF bytes."""
    builder = TemplateBuilder(
        registry=registry or _default_registry(),
        settings=settings or RenderSettings(),
    )
    builder = builder.load_components_file(template_path)
    builder = builder.set_named_properties(values)
    builder = builder.apply_components()
    return builder.write_to_pdf()
