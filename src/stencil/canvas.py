"""Drawing surface protocol and the ReportLab adapter.

Coordinates follow the template convention: the origin is the top-left
corner of the page and y grows downwards. `ReportLabCanvas` flips them into
PDF space.
"""

from __future__ import annotations

import enum
import io
import math
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol

from reportlab.graphics import renderPDF
from reportlab.graphics.barcode import createBarcodeDrawing
from reportlab.lib import colors
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen import canvas

from .config import DEFAULT_PPI
from .errors import CanvasError


@dataclass(frozen=True)
class Point:
    x: int = 0
    y: int = 0


@dataclass(frozen=True)
class Colour:
    """8-bit RGBA colour, not premultiplied."""

    r: int = 0
    g: int = 0
    b: int = 0
    a: int = 0

    def to_reportlab(self) -> colors.Color:
        return colors.Color(self.r / 255, self.g / 255, self.b / 255, alpha=self.a / 255)


@dataclass(frozen=True)
class FontFace:
    """A registered font name at a size in canvas units."""

    name: str
    size: float


class BarcodeType(enum.Enum):
    """Barcode symbologies a template may name."""

    AZTEC = "Aztec"
    CODABAR = "Codabar"
    CODE128 = "Code 128"
    CODE39 = "Code 39"
    CODE93 = "Code 93"
    DATAMATRIX = "DataMatrix"
    EAN8 = "EAN 8"
    EAN13 = "EAN 13"
    PDF417 = "PDF417"
    QR = "QR Code"
    TWO_OF_FIVE = "2 of 5"
    TWO_OF_FIVE_INTERLEAVED = "2 of 5 (interleaved)"

    @classmethod
    def from_string(cls, raw_value: str) -> BarcodeType:
        try:
            return cls(raw_value)
        except ValueError:
            msg = f"unknown barcode type {raw_value}"
            raise ValueError(msg) from None


# Code 39 and Code 93 are drawn in full ASCII mode.
REPORTLAB_BARCODES: dict[BarcodeType, str] = {
    BarcodeType.CODABAR: "Codabar",
    BarcodeType.CODE128: "Code128",
    BarcodeType.CODE39: "Extended39",
    BarcodeType.CODE93: "Extended93",
    BarcodeType.DATAMATRIX: "ECC200DataMatrix",
    BarcodeType.EAN8: "EAN8",
    BarcodeType.EAN13: "EAN13",
    BarcodeType.QR: "QR",
    BarcodeType.TWO_OF_FIVE_INTERLEAVED: "I2of5",
}


class Canvas(Protocol):
    """Drawing surface the components write to.

    Every drawing method returns a new canvas with the primitive added and
    leaves the receiver unchanged, so callers thread the result forward.
    """

    @property
    def width(self) -> int: ...
    @property
    def height(self) -> int: ...
    @property
    def ppi(self) -> float: ...
    def set_ppi(self, ppi: float) -> Canvas: ...
    def rectangle(self, top_left: Point, width: int, height: int, colour: Colour) -> Canvas: ...
    def circle(self, centre: Point, radius: int, colour: Colour) -> Canvas: ...
    def try_text(self, text: str, start: Point, face: FontFace, max_width: int) -> tuple[bool, int]: ...
    def text(
        self, text: str, start: Point, face: FontFace, colour: Colour, max_width: int
    ) -> Canvas: ...
    def draw_image(self, top_left: Point, image: Any, width: int, height: int) -> Canvas: ...
    def barcode(
        self,
        code_type: BarcodeType,
        content: str,
        top_left: Point,
        width: int,
        height: int,
        data_colour: Colour,
        background_colour: Colour,
    ) -> Canvas: ...
    def encode(self) -> bytes: ...


def _check_size(width: int, height: int) -> None:
    if width <= 0 and height <= 0:
        msg = "invalid width and height"
        raise CanvasError(msg)
    if width <= 0:
        msg = "invalid width"
        raise CanvasError(msg)
    if height <= 0:
        msg = "invalid height"
        raise CanvasError(msg)


DrawOperation = Callable[[canvas.Canvas], None]


class ReportLabCanvas:
    """ReportLab-backed implementation of Canvas producing a one-page PDF.

    The canvas is a value: each draw checks its arguments and returns a new
    canvas holding one more recorded operation. `encode` replays the
    operations onto a fresh ReportLab page, so a canvas can be encoded any
    number of times and shared between builders.
    """

    def __init__(
        self,
        width: int,
        height: int,
        *,
        ppi: float = DEFAULT_PPI,
        operations: tuple[DrawOperation, ...] = (),
    ) -> None:
        _check_size(width, height)
        self._width = width
        self._height = height
        self._ppi = ppi
        self._operations = operations

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def ppi(self) -> float:
        return self._ppi

    @property
    def operation_count(self) -> int:
        return len(self._operations)

    def _with(self, operation: DrawOperation) -> ReportLabCanvas:
        return ReportLabCanvas(
            self._width, self._height, ppi=self._ppi, operations=(*self._operations, operation)
        )

    def set_ppi(self, ppi: float) -> ReportLabCanvas:
        return ReportLabCanvas(self._width, self._height, ppi=ppi, operations=self._operations)

    def _pdf_y(self, y: float) -> float:
        return self._height - y

    def rectangle(self, top_left: Point, width: int, height: int, colour: Colour) -> ReportLabCanvas:
        _check_size(width, height)
        fill = colour.to_reportlab()
        bottom = self._pdf_y(top_left.y + height)

        def draw(target: canvas.Canvas) -> None:
            target.setFillColor(fill)
            target.rect(top_left.x, bottom, width, height, fill=1, stroke=0)

        return self._with(draw)

    def circle(self, centre: Point, radius: int, colour: Colour) -> ReportLabCanvas:
        if radius <= 0:
            msg = "invalid radius"
            raise CanvasError(msg)
        fill = colour.to_reportlab()
        y = self._pdf_y(centre.y)

        def draw(target: canvas.Canvas) -> None:
            target.setFillColor(fill)
            target.circle(centre.x, y, radius, fill=1, stroke=0)

        return self._with(draw)

    def try_text(self, text: str, start: Point, face: FontFace, max_width: int) -> tuple[bool, int]:
        """Report whether `text` fits in `max_width` and how wide it is."""
        if max_width <= 0:
            return False, -1
        width = math.ceil(pdfmetrics.stringWidth(text, face.name, face.size))
        return width <= max_width, width

    def text(
        self, text: str, start: Point, face: FontFace, colour: Colour, max_width: int
    ) -> ReportLabCanvas:
        """Draw `text` with its baseline starting at `start`."""
        if max_width <= 0:
            msg = "invalid maxWidth"
            raise CanvasError(msg)
        fits, _ = self.try_text(text, start, face, max_width)
        if not fits:
            msg = "resultant drawn text was longer than maxWidth"
            raise CanvasError(msg)
        fill = colour.to_reportlab()
        y = self._pdf_y(start.y)

        def draw(target: canvas.Canvas) -> None:
            target.setFillColor(fill)
            target.setFont(face.name, face.size)
            target.drawString(start.x, y, text)

        return self._with(draw)

    def draw_image(self, top_left: Point, image: Any, width: int, height: int) -> ReportLabCanvas:
        """Draw an ImageReader scaled to `width` x `height`."""
        _check_size(width, height)
        bottom = self._pdf_y(top_left.y + height)

        def draw(target: canvas.Canvas) -> None:
            target.drawImage(image, top_left.x, bottom, width, height, mask="auto")

        return self._with(draw)

    def barcode(
        self,
        code_type: BarcodeType,
        content: str,
        top_left: Point,
        width: int,
        height: int,
        data_colour: Colour,
        background_colour: Colour,
    ) -> ReportLabCanvas:
        _check_size(width, height)
        code_name = REPORTLAB_BARCODES.get(code_type)
        if code_name is None:
            msg = f"barcode type {code_type.value} is not supported"
            raise CanvasError(msg)
        data_fill = data_colour.to_reportlab()
        try:
            drawing = createBarcodeDrawing(
                code_name,
                value=content,
                width=width,
                height=height,
                barFillColor=data_fill,
                barStrokeColor=data_fill,
            )
        except (ValueError, KeyError, TypeError) as exc:
            msg = f"failed to encode barcode {content!r} as {code_type.value}: {exc}"
            raise CanvasError(msg) from exc
        background = background_colour.to_reportlab()
        bottom = self._pdf_y(top_left.y + height)

        def draw(target: canvas.Canvas) -> None:
            target.setFillColor(background)
            target.rect(top_left.x, bottom, width, height, fill=1, stroke=0)
            renderPDF.draw(drawing, target, top_left.x, bottom)

        return self._with(draw)

    def encode(self) -> bytes:
        """Replay every operation onto a new page and return the PDF document."""
        target = canvas.Canvas(io.BytesIO(), pagesize=(self._width, self._height))
        for operation in self._operations:
            operation(target)
        return target.getpdfdata()
