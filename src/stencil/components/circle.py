"""Solid circle."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from stencil.canvas import Canvas, Colour, Point
from stencil.properties import PropType, SlotMap

from .contracts import ComponentSpec, DeferredComponent, LoadContext
from .fields import FieldReader, invalid_property, set_colour_channel, set_int, set_point_axis


@dataclass(frozen=True)
class CircleComponent(DeferredComponent):
    kind = "circle"

    centre: Point = Point()
    radius: int = 0
    colour: Colour = Colour()
    named_properties: SlotMap = field(default_factory=dict)

    def write(self, canvas: Canvas) -> Canvas:
        self._require_resolved()
        return canvas.circle(self.centre, self.radius, self.colour)

    def _set_property(self, draft: dict[str, Any], name: str, value: Any) -> None:
        if name == "centreX":
            draft["centre"] = set_point_axis(draft["centre"], "x", value)
        elif name == "centreY":
            draft["centre"] = set_point_axis(draft["centre"], "y", value)
        elif name == "radius":
            draft["radius"] = set_int(value)
        elif name in {"R", "G", "B", "A"}:
            draft["colour"] = set_colour_channel(draft["colour"], name, value)
        else:
            raise invalid_property(name)


def load_circle(properties: Mapping[str, Any], context: LoadContext) -> CircleComponent:
    reader = FieldReader(properties)
    centre = reader.point("centreX", "centreY")
    radius = reader.single("radius", PropType.INT, default=0)
    colour = reader.colour("colour")
    return CircleComponent(centre=centre, radius=radius, colour=colour, named_properties=reader.slots)


CIRCLE_SPEC = ComponentSpec(
    kind="circle",
    title="Circle",
    description="Solid circle placed by its centre.",
    load=load_circle,
)
