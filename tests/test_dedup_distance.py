"""Tests for fingerprint difference metrics."""

import numpy as np
import pytest
from hypothesis import assume, given, strategies as st
from PIL import Image

from imgcompare.dedup.compare import ShapeMismatchError
from imgcompare.dedup.distance import (
    DegenerateInputError,
    bhattacharyya_distance,
    difference_grid,
    normalize_grid,
    percentage_difference,
)
from imgcompare.dedup.fingerprint import Fingerprint
from tests.helpers.image_factory import (
    fingerprint_from_list,
    gray_with_cell,
    solid_image,
    uniform_fingerprint,
)

cell_values = st.lists(st.integers(min_value=0, max_value=255), min_size=256, max_size=256)
thresholds = st.integers(min_value=0, max_value=255)


class TestDifferenceGrid:
    def test_identical_images_zero_grid(self):
        img = solid_image(100)
        grid = difference_grid(img, img)
        assert grid.shape == (16, 16)
        assert grid.dtype == np.uint8
        assert not grid.any()

    def test_absolute_difference(self):
        grid = difference_grid(uniform_fingerprint(10), uniform_fingerprint(250))
        assert (grid == 240).all()

    @given(a=cell_values, b=cell_values)
    def test_symmetric(self, a, b):
        fa, fb = fingerprint_from_list(a), fingerprint_from_list(b)
        assert np.array_equal(difference_grid(fa, fb), difference_grid(fb, fa))

    def test_accepts_paths(self, tmp_path):
        path_a = tmp_path / "a.png"
        path_b = tmp_path / "b.png"
        solid_image(50).save(path_a)
        solid_image(80).save(path_b)

        assert (difference_grid(path_a, path_b) == 30).all()

    def test_shape_mismatch(self):
        small = Fingerprint(np.zeros((8, 8), dtype=np.uint8))
        with pytest.raises(ShapeMismatchError):
            difference_grid(uniform_fingerprint(0), small)


class TestPercentageDifference:
    def test_self_difference_zero(self):
        img = Image.effect_mandelbrot((64, 64), (-2.0, -1.5, 1.0, 1.5), 40).convert('RGB')
        assert percentage_difference(img, img) == 0.0

    def test_single_cell_difference(self):
        """One cell forced white vs black on mid-gray differs by 1/256."""
        white = gray_with_cell(255)
        black = gray_with_cell(0)

        assert percentage_difference(white, black, threshold=3) == pytest.approx(1 / 256)
        assert percentage_difference(white, black, threshold=255) == 0.0

    def test_result_is_fraction(self):
        """Fully different images give 1.0, not 100."""
        assert percentage_difference(solid_image(0), solid_image(255)) == 1.0

    def test_default_threshold_ignores_small_differences(self):
        assert percentage_difference(uniform_fingerprint(100), uniform_fingerprint(103)) == 0.0
        assert percentage_difference(uniform_fingerprint(100), uniform_fingerprint(104)) == 1.0

    def test_invalid_threshold(self):
        with pytest.raises(ValueError):
            percentage_difference(uniform_fingerprint(0), uniform_fingerprint(0), threshold=256)
        with pytest.raises(ValueError):
            percentage_difference(uniform_fingerprint(0), uniform_fingerprint(0), threshold=-1)

    @given(a=cell_values, b=cell_values)
    def test_symmetric(self, a, b):
        fa, fb = fingerprint_from_list(a), fingerprint_from_list(b)
        assert percentage_difference(fa, fb) == percentage_difference(fb, fa)

    @given(a=cell_values, b=cell_values, low=thresholds, high=thresholds)
    def test_threshold_monotonic(self, a, b, low, high):
        """Raising the threshold never increases the result."""
        assume(low <= high)
        fa, fb = fingerprint_from_list(a), fingerprint_from_list(b)
        assert percentage_difference(fa, fb, high) <= percentage_difference(fa, fb, low)

    @given(a=cell_values, b=cell_values, threshold=thresholds)
    def test_within_unit_interval(self, a, b, threshold):
        fa, fb = fingerprint_from_list(a), fingerprint_from_list(b)
        assert 0.0 <= percentage_difference(fa, fb, threshold) <= 1.0


class TestBhattacharyyaDistance:
    def test_self_distance_zero(self):
        img = Image.effect_mandelbrot((64, 64), (-2.0, -1.5, 1.0, 1.5), 40).convert('RGB')
        assert bhattacharyya_distance(img, img) == 0.0

    def test_uniform_images_zero_distance(self):
        """Normalized uniform grids are identical distributions."""
        assert bhattacharyya_distance(uniform_fingerprint(40), uniform_fingerprint(200)) == 0.0

    def test_disjoint_distributions(self):
        """Grids lit in disjoint halves are maximally distant."""
        top = np.zeros((16, 16), dtype=np.uint8)
        bottom = np.zeros((16, 16), dtype=np.uint8)
        top[:8] = 200
        bottom[8:] = 200

        assert bhattacharyya_distance(Fingerprint(top), Fingerprint(bottom)) == 1.0

    def test_result_is_rounded_single_precision(self):
        a = np.full((16, 16), 100, dtype=np.uint8)
        a[0, 0] = 250
        distance = bhattacharyya_distance(Fingerprint(a), uniform_fingerprint(100))

        assert 0.0 < distance < 1.0
        assert distance == float(np.float32(distance))
        assert distance == pytest.approx(round(distance, 8))

    @given(a=cell_values, b=cell_values)
    def test_bounded(self, a, b):
        assume(any(a) and any(b))
        distance = bhattacharyya_distance(fingerprint_from_list(a), fingerprint_from_list(b))
        assert 0.0 <= distance <= 1.0

    @given(a=cell_values, b=cell_values)
    def test_symmetric(self, a, b):
        fa, fb = fingerprint_from_list(a), fingerprint_from_list(b)
        assert bhattacharyya_distance(fa, fb) == pytest.approx(bhattacharyya_distance(fb, fa), abs=1e-6)

    def test_both_black_zero(self):
        assert bhattacharyya_distance(solid_image(0), solid_image(0)) == 0.0

    def test_one_black_maximal(self):
        assert bhattacharyya_distance(solid_image(0), solid_image(128)) == 1.0
        assert bhattacharyya_distance(solid_image(128), solid_image(0)) == 1.0


class TestNormalizeGrid:
    def test_sums_to_one(self):
        grid = np.arange(256, dtype=np.uint8).reshape(16, 16)
        assert normalize_grid(grid).sum() == pytest.approx(1.0)

    def test_zero_sum_raises(self):
        with pytest.raises(DegenerateInputError):
            normalize_grid(np.zeros((16, 16), dtype=np.uint8))
