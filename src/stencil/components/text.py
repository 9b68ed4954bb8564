"""Single line of text scaled down to fit a width budget."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from stencil.canvas import Canvas, Colour, FontFace, Point
from stencil.errors import SetterError
from stencil.properties import PropType, SlotMap
from stencil.textfit import Alignment, fit_text

from .contracts import ComponentSpec, DeferredComponent, LoadContext
from .fields import (
    FieldReader,
    invalid_property,
    set_colour_channel,
    set_float,
    set_int,
    set_point_axis,
    set_string,
)

FONT_CANDIDATES = (
    ("font.fontName", "fontName", PropType.STRING),
    ("font.fontFile", "fontFile", PropType.STRING),
    ("font.fontURL", "fontURL", PropType.STRING),
)


def write_fitted_text(
    canvas: Canvas,
    content: str,
    *,
    start: Point,
    size: float,
    max_width: int,
    alignment: Alignment,
    font: str,
    colour: Colour,
) -> Canvas:
    """Shrink `content` until it fits `max_width`, then draw it aligned."""

    def measure(pixel_size: float) -> tuple[bool, int]:
        return canvas.try_text(content, start, FontFace(font, pixel_size), max_width)

    fit = fit_text(
        content,
        size=size,
        max_width=max_width,
        measure=measure,
        alignment=alignment,
        ppi=canvas.ppi,
    )
    return canvas.text(
        content,
        Point(start.x + fit.offset, start.y),
        FontFace(font, fit.pixel_size),
        colour,
        max_width,
    )


def load_font(context: LoadContext, prop_name: str, value: str) -> str:
    """Resolve a fontName, fontFile or fontURL value to a registered font."""
    if prop_name == "fontName":
        return context.fonts.by_name(value)
    if prop_name == "fontFile":
        return context.fonts.from_file(value)
    return context.fonts.from_url(value)


def set_alignment(value: Any) -> Alignment:
    if isinstance(value, Alignment):
        return value
    if isinstance(value, str):
        return Alignment.from_string(value)
    msg = f"could not convert {value!r} to text alignment or string"
    raise SetterError(msg)


class TextFieldsMixin:
    """Setters shared by components that draw fitted text."""

    context: LoadContext | None

    def _set_text_property(self, draft: dict[str, Any], name: str, value: Any) -> bool:
        context = self.context or LoadContext()
        if name == "startX":
            draft["start"] = set_point_axis(draft["start"], "x", value)
        elif name == "startY":
            draft["start"] = set_point_axis(draft["start"], "y", value)
        elif name == "maxWidth":
            draft["max_width"] = set_int(value)
        elif name == "size":
            draft["size"] = set_float(value)
        elif name == "alignment":
            draft["alignment"] = set_alignment(value)
        elif name in {"R", "G", "B", "A"}:
            draft["colour"] = set_colour_channel(draft["colour"], name, value)
        elif name in {"fontName", "fontFile", "fontURL"}:
            draft["font"] = load_font(context, name, set_string(value))
        else:
            return False
        return True


@dataclass(frozen=True)
class TextComponent(TextFieldsMixin, DeferredComponent):
    kind = "text"

    content: str = ""
    start: Point = Point()
    size: float = 0.0
    max_width: int = 0
    alignment: Alignment = Alignment.LEFT
    font: str = ""
    colour: Colour = Colour()
    named_properties: SlotMap = field(default_factory=dict)
    context: LoadContext | None = field(default=None, compare=False, repr=False)

    def write(self, canvas: Canvas) -> Canvas:
        self._require_resolved()
        return write_fitted_text(
            canvas,
            self.content,
            start=self.start,
            size=self.size,
            max_width=self.max_width,
            alignment=self.alignment,
            font=self.font,
            colour=self.colour,
        )

    def _set_property(self, draft: dict[str, Any], name: str, value: Any) -> None:
        if name == "content":
            draft["content"] = set_string(value)
        elif not self._set_text_property(draft, name, value):
            raise invalid_property(name)


def read_text_fields(reader: FieldReader, context: LoadContext) -> dict[str, Any]:
    """Read the layout, font and colour fields shared by text-like kinds."""
    font_value, font_index = reader.exclusive(FONT_CANDIDATES)
    font = ""
    if font_value is not None:
        font = load_font(context, FONT_CANDIDATES[font_index][1], font_value)
    values: dict[str, Any] = {
        "font": font,
        "start": reader.point("startX", "startY"),
        "max_width": reader.single("maxWidth", PropType.INT, default=0),
        "size": reader.single("size", PropType.FLOAT, default=0.0),
        "alignment": Alignment.LEFT,
        "colour": reader.colour("colour"),
    }
    # Alignment is optional and defaults to left.
    if reader.has("alignment"):
        alignment = reader.single("alignment", PropType.STRING)
        if alignment is not None:
            values["alignment"] = Alignment.from_string(alignment)
    return values


def load_text(properties: Mapping[str, Any], context: LoadContext) -> TextComponent:
    reader = FieldReader(properties)
    content = reader.single("content", PropType.STRING, default="")
    values = read_text_fields(reader, context)
    return TextComponent(content=content, named_properties=reader.slots, context=context, **values)


TEXT_SPEC = ComponentSpec(
    kind="text",
    title="Text",
    description="Single line of text shrunk to fit its maximum width.",
    load=load_text,
    aliases=("words", "writing"),
)
