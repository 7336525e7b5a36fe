"""Pytest configuration and shared fixtures for the moonphase tests."""

from __future__ import annotations

import logging

import numpy as np
import pytest
from PIL import Image

from moonphase.catalog import TextureCatalog


def pytest_configure(config: pytest.Config) -> None:
    """Configure logging for tests."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(name)s [%(levelname)s] %(message)s",
    )


def gradient_texture(size: int) -> Image.Image:
    """Opaque texture where every pixel is different."""
    yy, xx = np.mgrid[0:size, 0:size]
    arr = np.zeros((size, size, 4), dtype=np.uint8)
    arr[..., 0] = (xx * 255 // max(size - 1, 1)).astype(np.uint8)
    arr[..., 1] = (yy * 255 // max(size - 1, 1)).astype(np.uint8)
    arr[..., 2] = 200
    arr[..., 3] = 255
    return Image.fromarray(arr)


@pytest.fixture
def texture64() -> Image.Image:
    return gradient_texture(64)


@pytest.fixture
def small_catalog() -> TextureCatalog:
    catalog = TextureCatalog()
    for size in (256, 16, 64):
        catalog.register(size, gradient_texture(size))
    return catalog
