"""Bitmap image scaled into a rectangle."""

from __future__ import annotations

import base64
import binascii
import io
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from reportlab.lib.utils import ImageReader

from stencil.canvas import Canvas, Point
from stencil.errors import ComponentError, SetterError
from stencil.properties import PropType, SlotMap

from .contracts import ComponentSpec, DeferredComponent, LoadContext
from .fields import FieldReader, invalid_property, set_int, set_point_axis, set_string

IMAGE_CANDIDATES = (
    ("fileName", "fileName", PropType.STRING),
    ("data", "data", PropType.STRING),
)


def decode_base64(data: str) -> bytes:
    """Decode standard base64, with or without trailing padding."""
    try:
        return base64.b64decode(data + "=" * (-len(data) % 4), validate=True)
    except binascii.Error as exc:
        msg = f"image data is not valid base64: {exc}"
        raise ComponentError(msg) from exc


def read_image_bytes(data: bytes, *, source: str = "data") -> ImageReader:
    """Decode image bytes into a reader that ReportLab can draw."""
    try:
        reader = ImageReader(io.BytesIO(data))
        reader.getSize()
    except (OSError, ValueError) as exc:
        msg = f"failed to decode image from {source}: {exc}"
        raise ComponentError(msg) from exc
    return reader


def read_image_file(path: Path) -> ImageReader:
    try:
        data = path.read_bytes()
    except OSError as exc:
        msg = f"failed to read image file {path}: {exc}"
        raise ComponentError(msg) from exc
    return read_image_bytes(data, source=str(path))


def set_image_data(value: Any) -> ImageReader:
    """Accept raw bytes, base64 text or a binary file object."""
    if isinstance(value, (bytes, bytearray)):
        return read_image_bytes(bytes(value))
    if isinstance(value, str):
        return read_image_bytes(decode_base64(value))
    if hasattr(value, "read"):
        return read_image_bytes(value.read())
    msg = f"error converting {value!r} to bytes, string or file object"
    raise SetterError(msg)


@dataclass(frozen=True)
class ImageComponent(DeferredComponent):
    kind = "image"

    image: ImageReader | None = field(default=None, compare=False)
    top_left: Point = Point()
    width: int = 0
    height: int = 0
    named_properties: SlotMap = field(default_factory=dict)
    context: LoadContext | None = field(default=None, compare=False, repr=False)

    def write(self, canvas: Canvas) -> Canvas:
        self._require_resolved()
        return canvas.draw_image(self.top_left, self.image, self.width, self.height)

    def _set_property(self, draft: dict[str, Any], name: str, value: Any) -> None:
        context = self.context or LoadContext()
        if name == "data":
            draft["image"] = set_image_data(value)
        elif name == "fileName":
            draft["image"] = read_image_file(context.settings.resolve_path(set_string(value)))
        elif name == "topLeftX":
            draft["top_left"] = set_point_axis(draft["top_left"], "x", value)
        elif name == "topLeftY":
            draft["top_left"] = set_point_axis(draft["top_left"], "y", value)
        elif name in {"width", "height"}:
            draft[name] = set_int(value)
        else:
            raise invalid_property(name)


def load_image(properties: Mapping[str, Any], context: LoadContext) -> ImageComponent:
    reader = FieldReader(properties)
    source, index = reader.exclusive(IMAGE_CANDIDATES)
    image = None
    if source is not None and index == 0:
        image = read_image_file(context.settings.resolve_path(source))
    elif source is not None:
        image = read_image_bytes(decode_base64(source))
    return ImageComponent(
        image=image,
        top_left=reader.point("topLeftX", "topLeftY"),
        width=reader.single("width", PropType.INT, default=0),
        height=reader.single("height", PropType.INT, default=0),
        named_properties=reader.slots,
        context=context,
    )


IMAGE_SPEC = ComponentSpec(
    kind="image",
    title="Image",
    description="PNG, JPEG or other Pillow-readable image stretched into a rectangle.",
    load=load_image,
    aliases=("photo", "picture"),
)
