"""
Distance metric, nearest-colour resolver, verifier and remap engine.
Run from project root: python -m pytest tests/ -v
"""
import unittest
from unittest import mock

import numpy as np

from palette_fixtures import (
    image_from_rows,
    padded_rows,
    rows_to_bytes,
    scenario_palette_bytes,
)

from nespal.colour_distance import weighted_distance, weighted_distance_matrix
from nespal.constants import CHANNEL_WEIGHTS, MAX_DISTANCE
from nespal.core_types import Color
from nespal.nearest import nearest_colour, nearest_index, nearest_palette_indices
from nespal.palette_data import BuiltinPalettes, load_palette
from nespal.remap import remap_image
from nespal import verify
from nespal.verify import iter_pixels, uses_palette


class TestWeightedDistance(unittest.TestCase):
    def test_weights(self):
        self.assertEqual(CHANNEL_WEIGHTS, (2, 3, 1))
        self.assertEqual(weighted_distance((1, 0, 0), (0, 0, 0)), 2)
        self.assertEqual(weighted_distance((0, 1, 0), (0, 0, 0)), 3)
        self.assertEqual(weighted_distance((0, 0, 1), (0, 0, 0)), 1)
        self.assertEqual(weighted_distance((10, 10, 10), (0, 0, 0)), 600)

    def test_symmetric_and_signed(self):
        a, b = Color(0, 200, 3), Color(255, 10, 250)
        self.assertEqual(weighted_distance(a, b), weighted_distance(b, a))
        self.assertEqual(weighted_distance(a, a), 0)
        # uint8 inputs must not wrap around
        u = np.array([0, 0, 0], dtype=np.uint8)
        v = np.array([255, 255, 255], dtype=np.uint8)
        self.assertEqual(weighted_distance(u, v), 6 * 255 * 255)
        self.assertLess(weighted_distance(u, v), MAX_DISTANCE)

    def test_matrix_agrees_with_scalar(self):
        rng = np.random.default_rng(7)
        src = rng.integers(0, 256, size=(20, 3), dtype=np.uint8)
        pal = rng.integers(0, 256, size=(5, 3), dtype=np.uint8)
        mat = weighted_distance_matrix(src, pal)
        self.assertEqual(mat.shape, (20, 5))
        for i in range(20):
            for j in range(5):
                self.assertEqual(int(mat[i, j]), weighted_distance(src[i], pal[j]))


class TestNearestColour(unittest.TestCase):
    def setUp(self):
        self.palette = load_palette(scenario_palette_bytes())

    def test_scenario_a_black_maps_to_black(self):
        self.assertEqual(nearest_colour((0, 0, 0), self.palette).rgba, (0, 0, 0, 255))

    def test_scenario_b_dark_grey_maps_to_black(self):
        self.assertEqual(nearest_colour((10, 10, 10), self.palette), Color(0, 0, 0))

    def test_returns_fresh_colour(self):
        got = nearest_colour((250, 250, 250), self.palette)
        self.assertEqual(got, self.palette[1])
        self.assertIsNot(got, self.palette[1])

    def test_ties_go_to_lower_index(self):
        # (10,0,0) is 200 away from both (0,0,0) and (20,0,0)
        low_first = load_palette(rows_to_bytes(padded_rows([(20, 0, 0), (0, 0, 0)])))
        high_first = load_palette(rows_to_bytes(padded_rows([(0, 0, 0), (20, 0, 0)])))
        self.assertEqual(nearest_index((10, 0, 0), low_first), 0)
        self.assertEqual(nearest_colour((10, 0, 0), low_first), Color(20, 0, 0))
        self.assertEqual(nearest_colour((10, 0, 0), high_first), Color(0, 0, 0))

    def test_vectorised_tie_break_matches_scan(self):
        palette = load_palette(rows_to_bytes(padded_rows([(20, 0, 0), (0, 0, 0)])))
        idx = nearest_palette_indices(np.array([[10, 0, 0]], dtype=np.uint8), palette)
        self.assertEqual(idx.tolist(), [0])

    def test_vectorised_agrees_with_scan(self):
        palette = load_palette(BuiltinPalettes().read("2C03"))
        rng = np.random.default_rng(0)
        src = rng.integers(0, 256, size=(300, 3), dtype=np.uint8)
        fast = nearest_palette_indices(src, palette).tolist()
        slow = [nearest_index(tuple(row), palette) for row in src.tolist()]
        self.assertEqual(fast, slow)

    def test_weights_change_the_winner(self):
        # Off by 10 in green costs 300, off by 12 in blue costs 144.
        palette = load_palette(rows_to_bytes(padded_rows([(100, 110, 100), (100, 100, 112)])))
        self.assertEqual(nearest_colour((100, 100, 100), palette), Color(100, 100, 112))


class TestUsesPalette(unittest.TestCase):
    def setUp(self):
        self.palette = load_palette(scenario_palette_bytes())

    def test_scenario_a_single_black_pixel(self):
        self.assertTrue(uses_palette(image_from_rows([[(0, 0, 0)]]), self.palette))

    def test_scenario_b_single_dark_grey_pixel(self):
        self.assertFalse(uses_palette(image_from_rows([[(10, 10, 10)]]), self.palette))

    def test_image_of_palette_entries_verifies(self):
        rows = [[c.rgb for c in self.palette][i * 8:(i + 1) * 8] for i in range(8)]
        self.assertTrue(uses_palette(image_from_rows(rows), self.palette))

    def test_single_off_pixel_fails(self):
        img = np.zeros((4, 5, 3), dtype=np.uint8)
        img[3, 4] = (1, 0, 0)
        self.assertFalse(uses_palette(img, self.palette))

    def test_inputs_untouched(self):
        img = image_from_rows([[(0, 0, 0), (255, 255, 255)], [(9, 9, 9), (0, 0, 0)]])
        before = img.copy()
        rgb_before = self.palette.rgb.copy()
        uses_palette(img, self.palette)
        np.testing.assert_array_equal(img, before)
        np.testing.assert_array_equal(self.palette.rgb, rgb_before)

    def test_empty_image_verifies(self):
        self.assertTrue(uses_palette(np.zeros((0, 3, 3), dtype=np.uint8), self.palette))

    def test_iter_pixels_row_major(self):
        img = image_from_rows([[(1, 2, 3), (4, 5, 6)], [(7, 8, 9), (10, 11, 12)]])
        self.assertEqual(
            list(iter_pixels(img)),
            [(1, 2, 3), (4, 5, 6), (7, 8, 9), (10, 11, 12)],
        )

    def test_stops_at_first_mismatch(self):
        rng = np.random.default_rng(1)
        img = rng.integers(0, 256, size=(32, 32, 3), dtype=np.uint8)
        img[0, 0] = (10, 10, 10)
        seen = []
        real = verify.is_fixed_point

        def counting(rgb, palette):
            seen.append(rgb)
            return real(rgb, palette)

        with mock.patch.object(verify, "is_fixed_point", counting):
            self.assertFalse(uses_palette(img, self.palette))
        self.assertEqual(seen, [(10, 10, 10)])

    def test_repeated_colours_projected_once(self):
        img = np.zeros((6, 7, 3), dtype=np.uint8)
        seen = []
        real = verify.is_fixed_point

        def counting(rgb, palette):
            seen.append(rgb)
            return real(rgb, palette)

        with mock.patch.object(verify, "is_fixed_point", counting):
            self.assertTrue(uses_palette(img, self.palette))
        self.assertEqual(seen, [(0, 0, 0)])

    def test_rejects_non_rgb_arrays(self):
        with self.assertRaises(TypeError):
            uses_palette(np.zeros((2, 2, 4), dtype=np.uint8), self.palette)


class TestRemapImage(unittest.TestCase):
    def setUp(self):
        self.palette = load_palette(BuiltinPalettes().read("nes-classic"))
        rng = np.random.default_rng(3)
        self.noise = rng.integers(0, 256, size=(16, 12, 3), dtype=np.uint8)

    def test_shape_and_closure(self):
        out = remap_image(self.noise, self.palette)
        self.assertEqual(out.shape, self.noise.shape)
        self.assertEqual(out.dtype, np.uint8)
        entries = {c.rgb for c in self.palette}
        for rgb in iter_pixels(out):
            self.assertIn(rgb, entries)

    def test_matches_per_pixel_projection(self):
        out = remap_image(self.noise, self.palette)
        for y in range(self.noise.shape[0]):
            for x in range(self.noise.shape[1]):
                want = nearest_colour(tuple(self.noise[y, x].tolist()), self.palette)
                self.assertEqual(tuple(out[y, x].tolist()), want.rgb)

    def test_input_untouched_and_output_fresh(self):
        before = self.noise.copy()
        out = remap_image(self.noise, self.palette)
        np.testing.assert_array_equal(self.noise, before)
        self.assertFalse(np.shares_memory(out, self.noise))
        out[0, 0] = (1, 2, 3)

    def test_idempotent_on_verified_image(self):
        once = remap_image(self.noise, self.palette)
        self.assertTrue(uses_palette(once, self.palette))
        np.testing.assert_array_equal(remap_image(once, self.palette), once)

    def test_verifier_consistency(self):
        for img in (self.noise, remap_image(self.noise, self.palette)):
            same = np.array_equal(remap_image(img, self.palette), img)
            self.assertEqual(uses_palette(img, self.palette), same)

    def test_scenario_b_remaps_to_black(self):
        palette = load_palette(scenario_palette_bytes())
        out = remap_image(image_from_rows([[(10, 10, 10)]]), palette)
        self.assertEqual(out[0, 0].tolist(), [0, 0, 0])

    def test_chunked_search_matches_per_pixel_projection(self):
        rng = np.random.default_rng(9)
        img = rng.integers(0, 256, size=(40, 50, 3), dtype=np.uint8)
        with mock.patch("nespal.nearest.NEAREST_CHUNK_ROWS", 7):
            out = remap_image(img, self.palette)
        for y in range(img.shape[0]):
            for x in range(img.shape[1]):
                want = nearest_colour(tuple(img[y, x].tolist()), self.palette)
                self.assertEqual(tuple(out[y, x].tolist()), want.rgb)

    def test_chunk_boundary_keeps_tie_break(self):
        palette = load_palette(rows_to_bytes(padded_rows([(20, 0, 0), (0, 0, 0)])))
        src = np.array([[10, 0, 0]] * 5, dtype=np.uint8)
        with mock.patch("nespal.nearest.NEAREST_CHUNK_ROWS", 2):
            idx = nearest_palette_indices(src, palette)
        self.assertEqual(idx.tolist(), [0] * 5)
        self.assertEqual(idx.dtype, np.int64)

    def test_large_image_distance_blocks_stay_small(self):
        rng = np.random.default_rng(4)
        img = rng.integers(0, 256, size=(300, 400, 3), dtype=np.uint8)
        real = weighted_distance_matrix
        rows = []

        def recording(src, pal):
            rows.append(len(src))
            return real(src, pal)

        with mock.patch("nespal.nearest.NEAREST_CHUNK_ROWS", 4096), mock.patch(
            "nespal.nearest.weighted_distance_matrix", recording
        ):
            out = remap_image(img, self.palette)
        self.assertGreater(len(rows), 1)
        self.assertLessEqual(max(rows), 4096)
        expected = self.palette.rgb[
            np.argmin(real(img.reshape(-1, 3)[:5000], self.palette.rgb), axis=1)
        ]
        np.testing.assert_array_equal(out.reshape(-1, 3)[:5000], expected)

    def test_empty_image(self):
        out = remap_image(np.zeros((0, 5, 3), dtype=np.uint8), self.palette)
        self.assertEqual(out.shape, (0, 5, 3))


if __name__ == "__main__":
    unittest.main()
