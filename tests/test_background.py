"""Tests for base image handling."""

from __future__ import annotations

import base64
import tempfile
import unittest
from pathlib import Path

from fakes import RecordingCanvas, png_bytes, recording_factory

from stencil.background import fit_size, parse_ppi, set_background
from stencil.canvas import Colour, Point
from stencil.errors import BackgroundError
from stencil.settings import RenderSettings

GREY = {"R": "128", "G": "128", "B": "128", "A": "255"}


def _apply(canvas: RecordingCanvas | None, base_image: dict[str, object] | None, **settings: object):
    return set_background(
        canvas,
        base_image,
        settings=RenderSettings(**settings),
        canvas_factory=recording_factory,
    )


class SetBackgroundTests(unittest.TestCase):
    def test_more_than_one_source_raises(self) -> None:
        with self.assertRaisesRegex(BackgroundError, "more than one of fileName, data and baseColour"):
            _apply(None, {"fileName": "page.png", "baseColour": GREY})
        with self.assertRaises(BackgroundError):
            _apply(None, {"fileName": "page.png", "data": "abcd"})

    def test_no_source_keeps_canvas(self) -> None:
        canvas = RecordingCanvas()
        self.assertIs(_apply(canvas, {}), canvas)
        self.assertIsNone(_apply(None, None))

    def test_no_source_uses_default_size(self) -> None:
        canvas = _apply(None, {}, default_width=120, default_height=80)
        self.assertEqual((canvas.width, canvas.height), (120, 80))
        self.assertEqual(canvas.calls, [])

    def test_colour_creates_canvas_of_given_size(self) -> None:
        canvas = _apply(None, {"baseColour": GREY, "width": "30", "height": "20", "ppi": "144"})
        self.assertEqual((canvas.width, canvas.height), (30, 20))
        self.assertEqual(canvas.ppi, 144.0)
        self.assertEqual(canvas.calls, [("rectangle", Point(), 30, 20, Colour(128, 128, 128, 255))])

    def test_colour_fills_existing_canvas(self) -> None:
        canvas = _apply(RecordingCanvas(50, 40), {"baseColour": GREY})
        self.assertEqual(canvas.calls, [("rectangle", Point(), 50, 40, Colour(128, 128, 128, 255))])

    def test_colour_without_size_raises(self) -> None:
        with self.assertRaisesRegex(BackgroundError, "failed to convert property width to integer"):
            _apply(None, {"baseColour": GREY})

    def test_bad_colour_channel_raises(self) -> None:
        with self.assertRaises(BackgroundError):
            _apply(RecordingCanvas(), {"baseColour": {**GREY, "G": "300"}})

    def test_image_data_sizes_new_canvas(self) -> None:
        encoded = base64.b64encode(png_bytes(12, 6)).decode("ascii")
        canvas = _apply(None, {"data": encoded})
        self.assertEqual((canvas.width, canvas.height), (12, 6))
        self.assertEqual(canvas.calls, [("image", Point(), 12, 6)])

    def test_image_file_is_fitted_into_existing_canvas(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            (Path(tmp_dir) / "page.png").write_bytes(png_bytes(20, 10))
            canvas = _apply(RecordingCanvas(100, 100), {"fileName": "page.png"}, base_directory=tmp_dir)
        self.assertEqual(canvas.calls, [("image", Point(), 100, 50)])

    def test_unreadable_image_raises(self) -> None:
        with self.assertRaisesRegex(BackgroundError, "failed to read image file"):
            _apply(None, {"fileName": "/nonexistent/page.png"})

    def test_non_object_raises(self) -> None:
        with self.assertRaises(BackgroundError):
            _apply(None, ["page.png"])


class FitSizeTests(unittest.TestCase):
    def test_fit_keeps_aspect_ratio(self) -> None:
        self.assertEqual(fit_size((20, 10), (100, 100)), (100, 50))
        self.assertEqual(fit_size((10, 20), (100, 100)), (50, 100))
        self.assertEqual(fit_size((30, 30), (60, 60)), (60, 60))


class ParsePpiTests(unittest.TestCase):
    def test_invalid_values_fall_back(self) -> None:
        self.assertEqual(parse_ppi("300", 72.0), 300.0)
        for raw in ("", "abc", "-5", "0", None):
            with self.subTest(raw=raw):
                self.assertEqual(parse_ppi(raw, 72.0), 72.0)


if __name__ == "__main__":
    unittest.main()
