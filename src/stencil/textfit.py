"""Shrink-to-fit search for single-line text."""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable
from dataclasses import dataclass

from .config import DEFAULT_PPI, FIT_MAX_TRIES, POINTS_PER_INCH
from .errors import IterationExceededError

logger = logging.getLogger(__name__)

Measure = Callable[[float], tuple[bool, int]]


class Alignment(enum.Enum):
    """Horizontal placement of text inside its width budget."""

    LEFT = "left"
    RIGHT = "right"
    CENTRE = "centre"

    @classmethod
    def from_string(cls, raw_value: str) -> Alignment:
        """Map template text to an alignment, falling back to left."""
        try:
            return cls(raw_value)
        except ValueError:
            return cls.LEFT


@dataclass(frozen=True)
class TextFit:
    """Result of a successful fit."""

    pixel_size: float
    offset: int
    width: int
    tries: int


def alignment_offset(alignment: Alignment, slack: float) -> int:
    if alignment is Alignment.RIGHT:
        return int(slack)
    if alignment is Alignment.CENTRE:
        return int(slack / 2)
    return 0


def fit_text(
    content: str,
    *,
    size: float,
    max_width: int,
    measure: Measure,
    alignment: Alignment = Alignment.LEFT,
    ppi: float = DEFAULT_PPI,
) -> TextFit:
    """Find a pixel size at which `content` fits inside `max_width`.

    `measure(pixel_size)` reports whether the text fits and how wide it is.
    Each overshoot scales the size by budget/measured. The size never grows
    back once it lands under budget, so some budget may be left unused.
    """
    pixel_size = size / POINTS_PER_INCH * ppi
    offset = 0
    fits = False
    width = 0
    tries = 0
    while not fits and tries < FIT_MAX_TRIES:
        tries += 1
        fits, width = measure(pixel_size)
        logger.debug("fit try %d for %r: size=%.3f width=%d", tries, content, pixel_size, width)
        if width > max_width:
            pixel_size *= max_width / width
        elif width < max_width:
            offset = alignment_offset(alignment, max_width - width)

    if not fits:
        msg = f"unable to fit text {content} into maxWidth {max_width} after {tries} tries"
        raise IterationExceededError(msg)
    return TextFit(pixel_size=pixel_size, offset=offset, width=width, tries=tries)
