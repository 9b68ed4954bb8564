"""Template field parsing and named property resolution.

Every template field is a string. A field is either literal data, coerced to
the property's kind at load time, or a single `$variable$` reference whose
value arrives later through `apply_named_properties`.
"""

from __future__ import annotations

import enum
import logging
import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from .errors import CoercionError, CompositeUnsupportedError, ExclusivityError, ParseError

logger = logging.getLogger(__name__)

DELIMITER = "$"

SlotMap = dict[str, tuple[str, ...]]
PropertySetter = Callable[[str, Any], None]

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_BOOL_TRUE = {"1", "t", "T", "TRUE", "true", "True"}
_BOOL_FALSE = {"0", "f", "F", "FALSE", "false", "False"}
_DURATION_PART = re.compile(r"([0-9]*(?:\.[0-9]*)?)(ns|us|µs|μs|ms|s|m|h)")
_DURATION_UNITS = {
    "ns": 1e-3,
    "us": 1.0,
    "µs": 1.0,
    "μs": 1.0,
    "ms": 1e3,
    "s": 1e6,
    "m": 60e6,
    "h": 3600e6,
}


class PropType(enum.Enum):
    """Kinds a literal field can be coerced to."""

    INT = "int"
    STRING = "string"
    BOOL = "bool"
    UINT8 = "uint8"
    FLOAT = "float"
    DURATION = "duration"


@dataclass(frozen=True)
class DeconstructedValue:
    """A field split into alternating literal and variable segments.

    Reconstruction always starts and ends with a literal, so there is exactly
    one more literal than variable name.
    """

    static_values: tuple[str, ...]
    prop_names: tuple[str, ...] = ()

    @property
    def has_variables(self) -> bool:
        return bool(self.prop_names)

    @property
    def is_single_prop(self) -> bool:
        return len(self.prop_names) == 1 and self.static_values == ("", "")

    def reconstruct(self) -> str:
        """Rebuild the raw field text, escaping literal dollars."""
        parts: list[str] = []
        for index, static in enumerate(self.static_values):
            parts.append(static.replace(DELIMITER, DELIMITER * 2))
            if index < len(self.prop_names):
                parts.append(f"{DELIMITER}{self.prop_names[index]}{DELIMITER}")
        return "".join(parts)


@dataclass(frozen=True)
class PropData:
    """One candidate of an exclusive field set."""

    input_value: str
    prop_name: str
    prop_type: PropType


def parse_data_value(value: str) -> DeconstructedValue:
    """Split raw field text into literals and `$name$` variable references."""
    if not value:
        msg = "could not parse empty property"
        raise ParseError(msg)

    static_values: list[str] = []
    prop_names: list[str] = []
    current: list[str] = []
    index = 0
    while index < len(value):
        char = value[index]
        if char != DELIMITER:
            current.append(char)
            index += 1
            continue
        closing = value.find(DELIMITER, index + 1)
        if closing < 0:
            msg = f"unclosed named property in '{value}'"
            raise ParseError(msg)
        name = value[index + 1 : closing]
        index = closing + 1
        if not name:
            current.append(DELIMITER)
            continue
        static_values.append("".join(current))
        current = []
        prop_names.append(name)
    static_values.append("".join(current))
    return DeconstructedValue(static_values=tuple(static_values), prop_names=tuple(prop_names))


def extract_single_prop(
    input_value: str,
    prop_name: str,
    prop_type: PropType,
    named_properties: Mapping[str, Sequence[str]] | None = None,
) -> tuple[SlotMap, Any]:
    """Resolve one field to a typed value, or defer it to a variable.

    Returns the updated slot map and the coerced value. The value is `None`
    when the field was deferred. The input map is never modified.
    """
    slots: SlotMap = {key: tuple(names) for key, names in (named_properties or {}).items()}
    try:
        deconstructed = parse_data_value(input_value)
    except ParseError as exc:
        msg = f"error parsing data for property {prop_name}: {exc}"
        raise ParseError(msg) from exc

    if deconstructed.has_variables:
        if not deconstructed.is_single_prop:
            msg = f"composite properties are not yet supported: {input_value}"
            raise CompositeUnsupportedError(msg)
        variable = deconstructed.prop_names[0]
        slots[variable] = (*slots.get(variable, ()), prop_name)
        return slots, None

    return slots, coerce_value(input_value, prop_name, prop_type)


def coerce_value(raw_value: str, prop_name: str, prop_type: PropType) -> Any:
    """Convert literal field text to the Python value for `prop_type`."""
    if prop_type is PropType.STRING:
        return raw_value
    if prop_type is PropType.INT:
        if not _INT_PATTERN.fullmatch(raw_value):
            msg = f"failed to convert property {prop_name} to integer: '{raw_value}'"
            raise CoercionError(msg)
        return int(raw_value)
    if prop_type is PropType.UINT8:
        parsed = _parse_unsigned(raw_value)
        if parsed is None or parsed > 255:
            msg = f"failed to convert property {prop_name} to uint8: '{raw_value}'"
            raise CoercionError(msg)
        return parsed
    if prop_type is PropType.FLOAT:
        msg = f"failed to convert property {prop_name} to float: '{raw_value}'"
        if raw_value != raw_value.strip() or "_" in raw_value:
            raise CoercionError(msg)
        try:
            return float(raw_value)
        except ValueError as exc:
            raise CoercionError(msg) from exc
    if prop_type is PropType.BOOL:
        if raw_value in _BOOL_TRUE:
            return True
        if raw_value in _BOOL_FALSE:
            return False
        msg = f"failed to convert property {prop_name} to bool: '{raw_value}'"
        raise CoercionError(msg)
    if prop_type is PropType.DURATION:
        duration = parse_duration(raw_value)
        if duration is None:
            msg = f"failed to convert property {prop_name} to duration: '{raw_value}'"
            raise CoercionError(msg)
        return duration
    msg = f"cannot convert property {prop_name} to unsupported type {prop_type}"
    raise CoercionError(msg)


def _parse_unsigned(raw_value: str) -> int | None:
    """Parse an unsigned integer, honouring 0x/0o/0b and leading-zero octal."""
    prefixes = {"0x": 16, "0o": 8, "0b": 2}
    base = prefixes.get(raw_value[:2].lower())
    if base is not None:
        digits = raw_value[2:]
    elif len(raw_value) > 1 and raw_value.startswith("0"):
        base, digits = 8, raw_value[1:]
    else:
        base, digits = 10, raw_value
    if not digits or not all(char.isascii() and char.isalnum() for char in digits):
        return None
    try:
        return int(digits, base)
    except ValueError:
        return None


def parse_duration(raw_value: str) -> timedelta | None:
    """Parse a duration such as `1h30m`, `-1.5h` or `250ms`.

    Returns `None` when the text is not a valid duration.
    """
    text = raw_value
    sign = 1
    if text[:1] in {"+", "-"}:
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
    if text == "0":
        return timedelta(0)
    if not text:
        return None

    microseconds = 0.0
    position = 0
    while position < len(text):
        match = _DURATION_PART.match(text, position)
        if match is None or match.group(1) in {"", "."}:
            return None
        microseconds += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        position = match.end()
    try:
        return timedelta(microseconds=sign * microseconds)
    except OverflowError:
        return None


def extract_exclusive_prop(
    candidates: Sequence[PropData],
    named_properties: Mapping[str, Sequence[str]] | None = None,
) -> tuple[SlotMap, Any, int]:
    """Resolve exactly one of several mutually exclusive fields.

    Each candidate is resolved into its own scratch map. A candidate counts as
    set when it deferred to a variable or resolved without error. Returns the
    merged slot map, the winner's value (`None` if deferred) and its index.
    """
    results: list[tuple[SlotMap, Any]] = []
    set_indexes: list[int] = []
    for index, candidate in enumerate(candidates):
        try:
            scratch, value = extract_single_prop(
                candidate.input_value, candidate.prop_name, candidate.prop_type, {}
            )
        except (ParseError, CompositeUnsupportedError, CoercionError):
            results.append(({}, None))
            continue
        results.append((scratch, value))
        set_indexes.append(index)

    if len(set_indexes) != 1:
        names = ",".join(candidate.prop_name for candidate in candidates)
        msg = f"exactly one of ({names}) must be set"
        raise ExclusivityError(msg)

    valid_index = set_indexes[0]
    scratch, value = results[valid_index]
    merged: SlotMap = {key: tuple(names) for key, names in (named_properties or {}).items()}
    for key, names in scratch.items():
        merged[key] = (*merged.get(key, ()), *names)
    return merged, value, valid_index


def apply_named_properties(
    values: Mapping[str, Any],
    named_properties: Mapping[str, Sequence[str]],
    setter: PropertySetter,
) -> SlotMap:
    """Feed variable values to a component setter and shrink its slot map.

    Keys absent from the slot map are ignored. The first setter failure
    propagates and stops the walk.
    """
    remaining: SlotMap = {key: tuple(names) for key, names in named_properties.items()}
    for name, value in values.items():
        inner_names = remaining.get(name)
        if not inner_names:
            continue
        for inner_name in inner_names:
            setter(inner_name, value)
        del remaining[name]
        logger.debug("resolved variable %s into %s", name, ", ".join(inner_names))
    return remaining
