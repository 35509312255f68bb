"""Pytest configuration and shared image fixtures.

Slow tests (exhaustive worst-case scans on large images) are skipped unless
--slow is passed.
Run the full suite:   pytest --slow
Run fast tests only:  pytest          (default)
"""
import numpy as np
import pytest

from graymap import Instrumentation, PixelBuffer


def pytest_addoption(parser):
    parser.addoption(
        "--slow",
        action="store_true",
        default=False,
        help="Run slow worst-case scans on large images",
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("--slow"):
        return  # run everything
    skip_slow = pytest.mark.skip(reason="slow test skipped, pass --slow to include")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


SAMPLES_3X3 = [10, 20, 30, 40, 50, 60, 70, 80, 90]


def make_image(rows, maxval=255, **kwargs) -> PixelBuffer:
    """Build a PixelBuffer from a list of rows."""
    return PixelBuffer.from_array(np.array(rows, dtype=np.uint8).reshape(len(rows), -1), maxval, **kwargs)


@pytest.fixture
def img3x3() -> PixelBuffer:
    """3x3 image with samples 10..90 in row-major order."""
    return make_image([SAMPLES_3X3[0:3], SAMPLES_3X3[3:6], SAMPLES_3X3[6:9]])


@pytest.fixture
def random_image() -> PixelBuffer:
    rng = np.random.default_rng(1234)
    return PixelBuffer.from_array(rng.integers(0, 256, (7, 11), dtype=np.uint8))


@pytest.fixture
def instr() -> Instrumentation:
    return Instrumentation()


def samples(img: PixelBuffer) -> list[int]:
    """Row-major sample list of img."""
    return img.to_array().ravel().tolist()
