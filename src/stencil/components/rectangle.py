"""Solid axis-aligned rectangle."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from stencil.canvas import Canvas, Colour, Point
from stencil.properties import PropType, SlotMap

from .contracts import ComponentSpec, DeferredComponent, LoadContext
from .fields import FieldReader, invalid_property, set_colour_channel, set_int, set_point_axis


@dataclass(frozen=True)
class RectangleComponent(DeferredComponent):
    kind = "rectangle"

    top_left: Point = Point()
    width: int = 0
    height: int = 0
    colour: Colour = Colour()
    named_properties: SlotMap = field(default_factory=dict)

    def write(self, canvas: Canvas) -> Canvas:
        self._require_resolved()
        return canvas.rectangle(self.top_left, self.width, self.height, self.colour)

    def _set_property(self, draft: dict[str, Any], name: str, value: Any) -> None:
        if name == "topLeftX":
            draft["top_left"] = set_point_axis(draft["top_left"], "x", value)
        elif name == "topLeftY":
            draft["top_left"] = set_point_axis(draft["top_left"], "y", value)
        elif name in {"width", "height"}:
            draft[name] = set_int(value)
        elif name in {"R", "G", "B", "A"}:
            draft["colour"] = set_colour_channel(draft["colour"], name, value)
        else:
            raise invalid_property(name)


def load_rectangle(properties: Mapping[str, Any], context: LoadContext) -> RectangleComponent:
    reader = FieldReader(properties)
    top_left = reader.point("topLeftX", "topLeftY")
    width = reader.single("width", PropType.INT, default=0)
    height = reader.single("height", PropType.INT, default=0)
    colour = reader.colour("colour")
    return RectangleComponent(
        top_left=top_left,
        width=width,
        height=height,
        colour=colour,
        named_properties=reader.slots,
    )


RECTANGLE_SPEC = ComponentSpec(
    kind="rectangle",
    title="Rectangle",
    description="Solid rectangle placed by its top-left corner.",
    load=load_rectangle,
    aliases=("rect",),
)
