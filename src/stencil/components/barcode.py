"""Barcode symbol drawn over a solid background."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from stencil.canvas import BarcodeType, Canvas, Colour, Point
from stencil.errors import ComponentError, SetterError
from stencil.properties import PropType, SlotMap

from .contracts import ComponentSpec, DeferredComponent, LoadContext
from .fields import FieldReader, invalid_property, set_colour_channel, set_int, set_point_axis, set_string

DATA_CHANNELS = {"dR": "R", "dG": "G", "dB": "B", "dA": "A"}
BACKGROUND_CHANNELS = {"bR": "R", "bG": "G", "bB": "B", "bA": "A"}


def set_barcode_type(value: Any) -> BarcodeType:
    if isinstance(value, BarcodeType):
        return value
    if isinstance(value, str):
        try:
            return BarcodeType.from_string(value)
        except ValueError as exc:
            raise SetterError(str(exc)) from exc
    msg = f"error converting {value!r} to barcode type"
    raise SetterError(msg)


@dataclass(frozen=True)
class BarcodeComponent(DeferredComponent):
    kind = "barcode"

    content: str = ""
    barcode_type: BarcodeType | None = None
    top_left: Point = Point()
    width: int = 0
    height: int = 0
    data_colour: Colour = Colour()
    background_colour: Colour = Colour()
    named_properties: SlotMap = field(default_factory=dict)

    def write(self, canvas: Canvas) -> Canvas:
        self._require_resolved()
        if self.barcode_type is None:
            msg = "cannot draw barcode without a barcode type"
            raise ComponentError(msg)
        return canvas.barcode(
            self.barcode_type,
            self.content,
            self.top_left,
            self.width,
            self.height,
            self.data_colour,
            self.background_colour,
        )

    def _set_property(self, draft: dict[str, Any], name: str, value: Any) -> None:
        if name == "content":
            draft["content"] = set_string(value)
        elif name == "barcodeType":
            draft["barcode_type"] = set_barcode_type(value)
        elif name == "topLeftX":
            draft["top_left"] = set_point_axis(draft["top_left"], "x", value)
        elif name == "topLeftY":
            draft["top_left"] = set_point_axis(draft["top_left"], "y", value)
        elif name in {"width", "height"}:
            draft[name] = set_int(value)
        elif name in DATA_CHANNELS:
            draft["data_colour"] = set_colour_channel(draft["data_colour"], DATA_CHANNELS[name], value)
        elif name in BACKGROUND_CHANNELS:
            draft["background_colour"] = set_colour_channel(
                draft["background_colour"], BACKGROUND_CHANNELS[name], value
            )
        else:
            raise invalid_property(name)


def load_barcode(properties: Mapping[str, Any], context: LoadContext) -> BarcodeComponent:
    reader = FieldReader(properties)
    barcode_type = None
    type_name = reader.single("barcodeType", PropType.STRING)
    if type_name is not None:
        try:
            barcode_type = BarcodeType.from_string(type_name)
        except ValueError as exc:
            msg = f"for barcode type {type_name}: {exc}"
            raise ComponentError(msg) from exc
    return BarcodeComponent(
        content=reader.single("content", PropType.STRING, default=""),
        barcode_type=barcode_type,
        top_left=reader.point("topLeftX", "topLeftY"),
        width=reader.single("width", PropType.INT, default=0),
        height=reader.single("height", PropType.INT, default=0),
        data_colour=reader.colour("dataColour", prefix="d"),
        background_colour=reader.colour("backgroundColour", prefix="b"),
        named_properties=reader.slots,
    )


BARCODE_SPEC = ComponentSpec(
    kind="barcode",
    title="Barcode",
    description="QR, Code 128, EAN and other symbols with data and background colours.",
    load=load_barcode,
    aliases=("bar", "code", "bar code"),
)
