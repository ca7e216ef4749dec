"""Tests for dominant color ranking."""

from __future__ import annotations

import pytest
from PIL import Image

from photo_insight.services.colors import dominant_colors


def _strip(*colors: tuple[int, int, int]) -> Image.Image:
    image = Image.new("RGB", (len(colors), 1))
    image.putdata(list(colors))
    return image


def test_samples_every_thousandth_pixel():
    image = Image.new("RGB", (100, 30), color=(0, 0, 255))
    image.putpixel((0, 0), (255, 0, 0))
    # Pixel 500 is never sampled with the default stride.
    image.putpixel((0, 5), (0, 255, 0))

    assert dominant_colors(image) == ["#0000ff", "#ff0000"]


def test_ties_keep_first_seen_order():
    image = _strip((0, 255, 0), (255, 0, 0), (255, 0, 0), (0, 255, 0))

    assert dominant_colors(image, stride=1) == ["#00ff00", "#ff0000"]


def test_limit_caps_result():
    image = _strip((1, 1, 1), (2, 2, 2), (2, 2, 2), (3, 3, 3), (4, 4, 4), (4, 4, 4), (4, 4, 4))

    assert dominant_colors(image, stride=1, limit=3) == ["#040404", "#020202", "#010101"]


def test_converts_non_rgb_surfaces():
    image = Image.new("L", (10, 10), color=255)

    assert dominant_colors(image, stride=1) == ["#ffffff"]


def test_rejects_invalid_stride():
    with pytest.raises(ValueError):
        dominant_colors(Image.new("RGB", (1, 1)), stride=0)
