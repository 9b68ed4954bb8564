"""Tests for the shrink-to-fit text loop."""

from __future__ import annotations

import unittest

from stencil.errors import IterationExceededError
from stencil.textfit import Alignment, fit_text


class ScriptedMeasure:
    """Replay measurements and record the sizes asked for."""

    def __init__(self, *results: tuple[bool, int]) -> None:
        self._results = list(results)
        self.sizes: list[float] = []

    def __call__(self, pixel_size: float) -> tuple[bool, int]:
        self.sizes.append(pixel_size)
        if len(self._results) > 1:
            return self._results.pop(0)
        return self._results[0]


class FitTextTests(unittest.TestCase):
    def test_first_fit_offsets_by_alignment(self) -> None:
        cases = [(Alignment.LEFT, 0), (Alignment.RIGHT, 70), (Alignment.CENTRE, 35)]
        for alignment, offset in cases:
            with self.subTest(alignment=alignment):
                fit = fit_text(
                    "hi",
                    size=12,
                    max_width=100,
                    measure=ScriptedMeasure((True, 30)),
                    alignment=alignment,
                )
                self.assertEqual(fit.offset, offset)
                self.assertEqual(fit.tries, 1)

    def test_centre_offset_truncates(self) -> None:
        fit = fit_text("x", size=12, max_width=100, measure=ScriptedMeasure((True, 31)), alignment=Alignment.CENTRE)
        self.assertEqual(fit.offset, 34)

    def test_initial_size_scales_with_ppi(self) -> None:
        measure = ScriptedMeasure((True, 10))
        fit_text("x", size=12, max_width=100, measure=measure, ppi=144)
        self.assertEqual(measure.sizes, [24.0])

    def test_overshoot_shrinks_by_ratio(self) -> None:
        def measure(pixel_size: float) -> tuple[bool, int]:
            width = round(pixel_size * 10)
            return width <= 100, width

        fit = fit_text("content", size=12, max_width=100, measure=measure)
        self.assertEqual(fit.tries, 2)
        self.assertAlmostEqual(fit.pixel_size, 10.0)
        self.assertEqual(fit.offset, 0)

    def test_size_never_grows_back(self) -> None:
        measure = ScriptedMeasure((False, 200), (True, 50))
        fit = fit_text("content", size=20, max_width=100, measure=measure, alignment=Alignment.RIGHT)
        self.assertEqual(measure.sizes, [20.0, 10.0])
        self.assertEqual(fit.pixel_size, 10.0)
        self.assertEqual(fit.offset, 50)

    def test_never_fitting_raises_after_ten_tries(self) -> None:
        measure = ScriptedMeasure((False, 200))
        with self.assertRaisesRegex(
            IterationExceededError, "unable to fit text too long into maxWidth 100 after 10 tries"
        ):
            fit_text("too long", size=12, max_width=100, measure=measure)
        self.assertEqual(len(measure.sizes), 10)


class AlignmentTests(unittest.TestCase):
    def test_unknown_alignment_falls_back_to_left(self) -> None:
        self.assertIs(Alignment.from_string("right"), Alignment.RIGHT)
        self.assertIs(Alignment.from_string("centre"), Alignment.CENTRE)
        self.assertIs(Alignment.from_string("diagonal"), Alignment.LEFT)


if __name__ == "__main__":
    unittest.main()
