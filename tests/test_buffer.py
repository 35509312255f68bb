"""Tests for PixelBuffer: construction, accessors, stats, lifecycle."""

import numpy as np
import pytest

from graymap import (
    AllocationFailed,
    BufferReleased,
    InvalidDimension,
    InvalidMaxval,
    InvalidSample,
    OutOfBounds,
    PixelBuffer,
)

from conftest import make_image, samples


class TestCreate:
    """Tests for PixelBuffer construction."""

    def test_new_buffer_is_black(self):
        img = PixelBuffer(4, 3, 200)
        assert (img.width, img.height, img.maxval) == (4, 3, 200)
        assert samples(img) == [0] * 12

    def test_default_maxval_is_255(self):
        assert PixelBuffer(1, 1).maxval == 255

    def test_zero_sized_buffer_allowed(self):
        img = PixelBuffer(0, 5)
        assert img.size == 0
        assert img.to_array().shape == (5, 0)

    @pytest.mark.parametrize("width,height", [(-1, 3), (3, -1)])
    def test_negative_dimension_raises(self, width, height):
        with pytest.raises(InvalidDimension, match="non-negative"):
            PixelBuffer(width, height)

    def test_non_integer_dimension_raises(self):
        with pytest.raises(InvalidDimension, match="must be int"):
            PixelBuffer(2.5, 3)

    @pytest.mark.parametrize("maxval", [0, -1, 256, 1000])
    def test_maxval_out_of_range_raises(self, maxval):
        with pytest.raises(InvalidMaxval):
            PixelBuffer(2, 2, maxval)

    def test_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            PixelBuffer(-1, 1)

    def test_allocation_failure_is_reported(self, monkeypatch):
        def fail(*args, **kwargs):
            raise MemoryError

        monkeypatch.setattr(np, "zeros", fail)
        with pytest.raises(AllocationFailed) as excinfo:
            PixelBuffer(10, 10)
        assert isinstance(excinfo.value.__cause__, MemoryError)


class TestFromArray:
    """Tests for PixelBuffer.from_array."""

    def test_copies_samples(self):
        arr = np.array([[1, 2], [3, 4]], dtype=np.uint8)
        img = PixelBuffer.from_array(arr, 10)
        arr[0, 0] = 99
        assert samples(img) == [1, 2, 3, 4]
        assert img.maxval == 10

    def test_rejects_1d_array(self):
        with pytest.raises(InvalidDimension, match="2D"):
            PixelBuffer.from_array(np.array([1, 2, 3]))

    def test_rejects_out_of_range_samples(self):
        with pytest.raises(InvalidSample, match="range"):
            PixelBuffer.from_array(np.array([[0, 300]]))


class TestPixelAccess:
    """Tests for get_pixel / set_pixel."""

    def test_set_then_get(self):
        img = PixelBuffer(3, 2)
        img.set_pixel(2, 1, 77)
        assert img.get_pixel(2, 1) == 77
        assert img.to_array()[1, 2] == 77

    def test_row_major_layout(self, img3x3):
        assert img3x3.get_pixel(1, 0) == 20
        assert img3x3.get_pixel(0, 1) == 40
        assert img3x3.get_pixel(2, 2) == 90

    @pytest.mark.parametrize("x,y", [(-1, 0), (0, -1), (3, 0), (0, 3), (3, 3)])
    def test_get_out_of_bounds_raises(self, img3x3, x, y):
        with pytest.raises(OutOfBounds):
            img3x3.get_pixel(x, y)

    def test_set_out_of_bounds_never_clamps(self, img3x3):
        before = samples(img3x3)
        with pytest.raises(OutOfBounds):
            img3x3.set_pixel(3, 1, 5)
        assert samples(img3x3) == before

    def test_out_of_bounds_is_index_error(self, img3x3):
        with pytest.raises(IndexError):
            img3x3.get_pixel(10, 10)

    @pytest.mark.parametrize("value", [-1, 256, 1.5, "7"])
    def test_set_invalid_sample_raises(self, value):
        with pytest.raises(InvalidSample):
            PixelBuffer(1, 1).set_pixel(0, 0, value)

    def test_lenient_buffer_accepts_sample_above_maxval(self):
        img = PixelBuffer(1, 1, 100)
        img.set_pixel(0, 0, 200)
        assert img.get_pixel(0, 0) == 200

    def test_strict_buffer_rejects_sample_above_maxval(self):
        img = PixelBuffer(1, 1, 100, strict=True)
        with pytest.raises(InvalidSample, match="exceeds maxval"):
            img.set_pixel(0, 0, 101)
        img.set_pixel(0, 0, 100)
        assert img.get_pixel(0, 0) == 100


class TestRectangles:
    """Tests for valid_pos / valid_rect and bulk access."""

    def test_valid_rect_edges(self):
        img = PixelBuffer(4, 3)
        assert img.valid_rect(0, 0, 4, 3)
        assert img.valid_rect(4, 3, 0, 0)
        assert not img.valid_rect(1, 0, 4, 3)
        assert not img.valid_rect(0, 1, 4, 3)
        assert not img.valid_rect(-1, 0, 1, 1)

    def test_valid_pos_on_empty_buffer(self):
        assert not PixelBuffer(0, 0).valid_pos(0, 0)

    def test_read_rect_returns_copy(self, img3x3):
        region = img3x3.read_rect(1, 1, 2, 2)
        assert region.tolist() == [[50, 60], [80, 90]]
        region[0, 0] = 0
        assert img3x3.get_pixel(1, 1) == 50

    def test_read_rect_outside_raises(self, img3x3):
        with pytest.raises(OutOfBounds):
            img3x3.read_rect(2, 2, 2, 1)

    def test_write_rect(self, img3x3):
        img3x3.write_rect(1, 0, np.array([[1, 2], [3, 4]]))
        assert samples(img3x3) == [10, 1, 2, 40, 3, 4, 70, 80, 90]

    def test_write_rect_rejects_float_samples(self, img3x3):
        with pytest.raises(InvalidSample, match="integers"):
            img3x3.write_rect(0, 0, np.array([[1.5]]))


class TestStats:
    """Tests for stats()."""

    def test_min_max(self, img3x3):
        assert img3x3.stats() == (10, 90)

    def test_empty_buffer_returns_zeros(self):
        assert PixelBuffer(0, 0).stats() == (0, 0)
        assert PixelBuffer(5, 0).stats() == (0, 0)

    def test_uniform_buffer(self):
        img = make_image([[7, 7], [7, 7]])
        assert img.stats() == (7, 7)


class TestLifecycle:
    """Tests for release, copy, equality."""

    def test_release_is_idempotent(self):
        img = PixelBuffer(2, 2)
        img.release()
        img.release()
        assert img.released

    def test_access_after_release_raises(self):
        img = PixelBuffer(2, 2)
        img.release()
        with pytest.raises(BufferReleased):
            img.get_pixel(0, 0)

    def test_context_manager_releases(self):
        with PixelBuffer(2, 2) as img:
            img.set_pixel(0, 0, 1)
        assert img.released

    def test_copy_is_independent(self, img3x3):
        dup = img3x3.copy()
        assert dup == img3x3
        dup.set_pixel(0, 0, 0)
        assert img3x3.get_pixel(0, 0) == 10
        assert dup != img3x3

    def test_equality_considers_maxval(self):
        assert PixelBuffer(2, 2, 100) != PixelBuffer(2, 2, 200)

    def test_equality_considers_shape(self):
        assert PixelBuffer(2, 3) != PixelBuffer(3, 2)

    def test_repr(self):
        img = PixelBuffer(4, 3, 200)
        assert repr(img) == "PixelBuffer(4x3, maxval=200)"
        img.release()
        assert "released" in repr(img)


class TestAccessCounting:
    """Pixel accesses are reported to the injected instrumentation."""

    def test_single_accesses_counted(self, instr):
        img = PixelBuffer(3, 3, instrumentation=instr)
        img.set_pixel(0, 0, 1)
        img.get_pixel(0, 0)
        assert instr.count() == 2

    def test_bulk_access_counts_every_pixel(self, instr):
        img = PixelBuffer(4, 5, instrumentation=instr)
        img.to_array()
        assert instr.count() == 20

    def test_failed_access_not_counted(self, instr):
        img = PixelBuffer(2, 2, instrumentation=instr)
        with pytest.raises(OutOfBounds):
            img.get_pixel(5, 5)
        assert instr.count() == 0

    def test_default_buffer_counts_nothing(self):
        img = PixelBuffer(2, 2)
        img.get_pixel(0, 0)
        assert img.instrumentation.count() == 0
