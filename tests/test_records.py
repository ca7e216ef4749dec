"""Tests for the immutable record types."""

from __future__ import annotations

import base64
import io

from PIL import Image

from photo_insight.models.base import BoundingBox, RawFace
from photo_insight.records import CameraInfo, GeoLocation, ImageAnalysis, ImageHandle
from photo_insight.services.overlay import render_overlay

from conftest import image_bytes


def test_with_metadata_is_additive():
    analysis = ImageAnalysis(
        description="x",
        exif=CameraInfo(make="Canon", model="EOS 80D"),
        location=GeoLocation(1.0, 2.0),
    )

    merged = analysis.with_metadata(exif=CameraInfo(model="EOS R5", iso=400))

    assert merged.exif == CameraInfo(make="Canon", model="EOS R5", iso=400)
    assert merged.location == GeoLocation(1.0, 2.0)
    assert merged.description == "x"
    assert analysis.exif.model == "EOS 80D"


def test_with_metadata_without_changes_returns_same_object():
    analysis = ImageAnalysis(exif=CameraInfo(make="Canon"))

    assert analysis.with_metadata() is analysis
    assert analysis.with_metadata(exif=CameraInfo()) is analysis
    assert analysis.with_metadata(exif=CameraInfo(make="Canon")) is analysis


def test_as_dict_can_omit_overlay():
    analysis = ImageAnalysis(marked_up_image_url="data:image/jpeg;base64,AA")

    assert "marked_up_image_url" in analysis.as_dict()
    assert "marked_up_image_url" not in analysis.as_dict(include_overlay=False)


def test_image_handle_from_path(tmp_path):
    path = tmp_path / "photo.png"
    path.write_bytes(image_bytes(size=(8, 6), fmt="PNG"))

    handle = ImageHandle.from_path(path)

    assert handle.name == "photo.png"
    assert handle.mime_type == "image/png"
    assert handle.size == path.stat().st_size
    assert handle.open().size == (8, 6)


def test_overlay_draws_on_a_copy():
    surface = Image.new("RGB", (100, 80), color=(255, 255, 255))
    face = RawFace(
        box=BoundingBox(x=10, y=10, width=30, height=30),
        age=30,
        gender="male",
        gender_probability=0.9,
        landmarks=((20.0, 20.0),),
    )

    url = render_overlay(surface, [face])

    assert url.startswith("data:image/jpeg;base64,")
    decoded = Image.open(io.BytesIO(base64.b64decode(url.split(",", 1)[1])))
    assert decoded.size == (100, 80)
    assert surface.getpixel((10, 10)) == (255, 255, 255)
