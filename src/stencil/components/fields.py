"""Field readers and value setters shared by the component kinds."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import replace
from typing import Any

from stencil.canvas import Colour, Point
from stencil.errors import ComponentError, SetterError
from stencil.properties import PropData, PropType, SlotMap, extract_exclusive_prop, extract_single_prop


class FieldReader:
    """Pull typed values out of a component's `properties` object.

    Deferred fields are recorded in `slots` and read back as the default.
    """

    def __init__(self, properties: Mapping[str, Any]) -> None:
        if not isinstance(properties, Mapping):
            msg = "component properties must be a JSON object."
            raise ComponentError(msg)
        self._properties = properties
        self.slots: SlotMap = {}

    def raw(self, path: str) -> str:
        """Return the raw text at a dotted path, or "" when it is absent."""
        node: Any = self._properties
        for key in path.split("."):
            if not isinstance(node, Mapping) or key not in node:
                return ""
            node = node[key]
        if not isinstance(node, str):
            msg = f"component property '{path}' must be a string."
            raise ComponentError(msg)
        return node

    def has(self, path: str) -> bool:
        return self.raw(path) != ""

    def single(
        self,
        path: str,
        prop_type: PropType,
        *,
        prop_name: str | None = None,
        default: Any = None,
    ) -> Any:
        name = prop_name or path.rsplit(".", 1)[-1]
        self.slots, value = extract_single_prop(self.raw(path), name, prop_type, self.slots)
        return default if value is None else value

    def exclusive(self, candidates: Sequence[tuple[str, str, PropType]]) -> tuple[Any, int]:
        """Resolve exactly one of `(path, prop_name, prop_type)` candidates."""
        prop_data = [
            PropData(input_value=self.raw(path), prop_name=name, prop_type=prop_type)
            for path, name, prop_type in candidates
        ]
        self.slots, value, index = extract_exclusive_prop(prop_data, self.slots)
        return value, index

    def point(self, x_name: str, y_name: str) -> Point:
        return Point(
            x=self.single(x_name, PropType.INT, default=0),
            y=self.single(y_name, PropType.INT, default=0),
        )

    def colour(self, path: str, *, prefix: str = "") -> Colour:
        """Read an `{R, G, B, A}` object, naming each channel `prefix + channel`."""
        channels = {
            channel.lower(): self.single(
                f"{path}.{channel}", PropType.UINT8, prop_name=f"{prefix}{channel}", default=0
            )
            for channel in "RGBA"
        }
        return Colour(**channels)


def set_string(value: Any) -> str:
    if not isinstance(value, str):
        msg = f"error converting {value!r} to string"
        raise SetterError(msg)
    return value


def set_int(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"error converting {value!r} to int"
        raise SetterError(msg)
    return value


def set_uint8(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 255:
        msg = f"error converting {value!r} to uint8"
        raise SetterError(msg)
    return value


def set_float(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        msg = f"error converting {value!r} to float"
        raise SetterError(msg)
    return float(value)


def set_point_axis(point: Point, axis: str, value: Any) -> Point:
    """Return `point` with its `x` or `y` replaced."""
    return replace(point, **{axis: set_int(value)})


def set_colour_channel(colour: Colour, channel: str, value: Any) -> Colour:
    """Return `colour` with one of its R, G, B or A channels replaced."""
    return replace(colour, **{channel.lower(): set_uint8(value)})


def invalid_property(name: str) -> SetterError:
    return SetterError(f"invalid component property in named property map: {name}")
