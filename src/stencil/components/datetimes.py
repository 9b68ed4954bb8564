"""Formatted timestamp drawn like a text component."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from stencil.canvas import Canvas, Colour, Point
from stencil.errors import CoercionError, SetterError
from stencil.properties import PropType, SlotMap
from stencil.textfit import Alignment

from .contracts import ComponentSpec, DeferredComponent, LoadContext
from .fields import FieldReader, invalid_property, set_string
from .text import TextFieldsMixin, read_text_fields, write_fitted_text


def set_time(value: Any) -> datetime:
    """Accept a datetime, or a `(format, text)` pair parsed with strptime."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, (list, tuple)) and len(value) == 2 and all(isinstance(item, str) for item in value):
        time_format, text = value
        try:
            return datetime.strptime(text, time_format)
        except ValueError as exc:
            msg = f"cannot convert time string {text} to time format {time_format}"
            raise SetterError(msg) from exc
    msg = f"error converting {value!r} to datetime or (format, text) pair"
    raise SetterError(msg)


@dataclass(frozen=True)
class DatetimeComponent(TextFieldsMixin, DeferredComponent):
    kind = "datetime"

    time: datetime | None = None
    time_format: str = ""
    start: Point = Point()
    size: float = 0.0
    max_width: int = 0
    alignment: Alignment = Alignment.LEFT
    font: str = ""
    colour: Colour = Colour()
    named_properties: SlotMap = field(default_factory=dict)
    context: LoadContext | None = field(default=None, compare=False, repr=False)

    def formatted(self) -> str:
        if self.time is None:
            return ""
        return self.time.strftime(self.time_format)

    def write(self, canvas: Canvas) -> Canvas:
        self._require_resolved()
        return write_fitted_text(
            canvas,
            self.formatted(),
            start=self.start,
            size=self.size,
            max_width=self.max_width,
            alignment=self.alignment,
            font=self.font,
            colour=self.colour,
        )

    def _set_property(self, draft: dict[str, Any], name: str, value: Any) -> None:
        if name == "time":
            draft["time"] = set_time(value)
        elif name == "timeFormat":
            draft["time_format"] = set_string(value)
        elif not self._set_text_property(draft, name, value):
            raise invalid_property(name)


def load_datetime(properties: Mapping[str, Any], context: LoadContext) -> DatetimeComponent:
    reader = FieldReader(properties)
    # A literal time is an offset from the moment the template was loaded.
    offset = reader.single("time", PropType.DURATION)
    time_format = reader.single("timeFormat", PropType.STRING, default="")
    values = read_text_fields(reader, context)
    time = None
    if offset is not None:
        try:
            time = context.now + offset
        except OverflowError as exc:
            msg = f"failed to convert property time to duration: offset {offset} from {context.now} is out of range"
            raise CoercionError(msg) from exc
    return DatetimeComponent(
        time=time,
        time_format=time_format,
        named_properties=reader.slots,
        context=context,
        **values,
    )


DATETIME_SPEC = ComponentSpec(
    kind="datetime",
    title="Date and time",
    description="Timestamp formatted with strftime and fitted like text.",
    load=load_datetime,
    aliases=("date", "time", "timestamp"),
)
