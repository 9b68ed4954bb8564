"""Font lookup and registration for text components."""

from __future__ import annotations

import io
import logging
from pathlib import Path

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError, TTFont

from .errors import ComponentError
from .settings import RenderSettings

logger = logging.getLogger(__name__)


class FontLoader:
    """Resolve template font references to registered ReportLab font names."""

    def __init__(self, settings: RenderSettings | None = None) -> None:
        self._settings = settings or RenderSettings()

    def by_name(self, name: str) -> str:
        """Return a usable font name for a standard or installed font."""
        if name in pdfmetrics.standardFonts or name in pdfmetrics.getRegisteredFontNames():
            return name
        for directory in self._settings.font_directories:
            candidate = self._settings.resolve_path(directory) / f"{name}.ttf"
            if candidate.is_file():
                return self._register(name, candidate.read_bytes(), source=str(candidate))
        msg = f"font {name} not found"
        raise ComponentError(msg)

    def from_file(self, path: str) -> str:
        """Register a TrueType file and return the name it was registered under."""
        resolved = self._settings.resolve_path(path)
        try:
            data = resolved.read_bytes()
        except OSError as exc:
            msg = f"failed to read font file {path}: {exc}"
            raise ComponentError(msg) from exc
        return self._register(Path(path).stem, data, source=str(resolved))

    def from_url(self, url: str) -> str:
        msg = "fontURL not implemented"
        raise ComponentError(msg)

    def _register(self, name: str, data: bytes, *, source: str) -> str:
        try:
            pdfmetrics.registerFont(TTFont(name, io.BytesIO(data)))
        except TTFError as exc:
            msg = f"failed to parse font {source}: {exc}"
            raise ComponentError(msg) from exc
        logger.debug("registered font %s from %s", name, source)
        return name
