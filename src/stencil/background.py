"""Base image handling for a template's `baseImage` section."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from .canvas import Canvas, Colour, Point, ReportLabCanvas
from .components.image import decode_base64, read_image_bytes, read_image_file
from .errors import BackgroundError, CanvasError, CoercionError, ComponentError
from .properties import PropType, coerce_value
from .settings import RenderSettings

logger = logging.getLogger(__name__)

CanvasFactory = Callable[..., Canvas]


def _text(base_image: Mapping[str, Any], key: str) -> str:
    value = base_image.get(key, "")
    if not isinstance(value, str):
        msg = f"baseImage field '{key}' must be a string."
        raise BackgroundError(msg)
    return value


def parse_ppi(raw_value: Any, default: float) -> float:
    """Return a positive resolution, falling back to `default`."""
    try:
        ppi = float(raw_value)
    except (TypeError, ValueError):
        return default
    return ppi if ppi > 0 else default


def _parse_base_colour(raw_colour: Any) -> Colour:
    if not isinstance(raw_colour, Mapping):
        msg = "baseImage field 'baseColour' must be a JSON object."
        raise BackgroundError(msg)
    try:
        channels = {
            channel.lower(): coerce_value(_text(raw_colour, channel), channel, PropType.UINT8)
            for channel in "RGBA"
        }
    except CoercionError as exc:
        raise BackgroundError(str(exc)) from exc
    return Colour(**channels)


def _parse_size(base_image: Mapping[str, Any], key: str) -> int:
    try:
        return coerce_value(_text(base_image, key), key, PropType.INT)
    except CoercionError as exc:
        raise BackgroundError(str(exc)) from exc


def fit_size(source: tuple[int, int], target: tuple[int, int]) -> tuple[int, int]:
    """Scale `source` to fill `target` on its limiting axis, keeping aspect ratio."""
    source_width, source_height = source
    target_width, target_height = target
    if source_width * target_height == target_width * source_height:
        return target_width, target_height
    if target_width * source_height < source_width * target_height:
        return target_width, max(1, round(source_height * target_width / source_width))
    return max(1, round(source_width * target_height / source_height)), target_height


def set_background(
    canvas: Canvas | None,
    base_image: Mapping[str, Any] | None,
    *,
    settings: RenderSettings,
    canvas_factory: CanvasFactory = ReportLabCanvas,
) -> Canvas | None:
    """Apply a `baseImage` section and return the canvas to render on.

    Exactly one of `fileName`, `data` or `baseColour` may be set. With none
    set the current canvas is kept, or a blank one of the default size is
    created when there is no canvas yet.
    """
    base_image = base_image or {}
    if not isinstance(base_image, Mapping):
        msg = "baseImage must be a JSON object."
        raise BackgroundError(msg)

    file_name = _text(base_image, "fileName")
    data = _text(base_image, "data")
    raw_colour = base_image.get("baseColour") or {}
    colour_set = isinstance(raw_colour, Mapping) and bool(raw_colour.get("R"))
    if sum((bool(file_name), bool(data), colour_set)) > 1:
        msg = (
            "cannot load base image from more than one of fileName, data and baseColour; "
            "specify only one"
        )
        raise BackgroundError(msg)

    ppi = parse_ppi(base_image.get("ppi", ""), settings.ppi)

    if not (file_name or data or colour_set):
        if canvas is None and settings.default_width > 0 and settings.default_height > 0:
            logger.debug(
                "no base image; using default %dx%d canvas", settings.default_width, settings.default_height
            )
            return canvas_factory(settings.default_width, settings.default_height, ppi=ppi)
        return canvas

    try:
        if colour_set:
            colour = _parse_base_colour(raw_colour)
            if canvas is None:
                width = _parse_size(base_image, "width")
                height = _parse_size(base_image, "height")
                canvas = canvas_factory(width, height, ppi=ppi)
            else:
                canvas = canvas.set_ppi(ppi)
            return canvas.rectangle(Point(), canvas.width, canvas.height, colour)

        if file_name:
            image = read_image_file(settings.resolve_path(file_name))
        else:
            image = read_image_bytes(decode_base64(data))
        image_size = image.getSize()
        if canvas is None:
            canvas = canvas_factory(image_size[0], image_size[1], ppi=ppi)
            width, height = image_size
        else:
            canvas = canvas.set_ppi(ppi)
            width, height = fit_size(image_size, (canvas.width, canvas.height))
        logger.debug("drawing base image at %dx%d", width, height)
        return canvas.draw_image(Point(), image, width, height)
    except (CanvasError, ComponentError) as exc:
        raise BackgroundError(str(exc)) from exc
