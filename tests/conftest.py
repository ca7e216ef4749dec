"""Shared test doubles for providers and image fixtures."""

from __future__ import annotations

import io
import time

import pytest
from PIL import Image

from photo_insight.config import AppConfig
from photo_insight.models.base import Capability, ProviderInfo
from photo_insight.models.registry import ProviderRegistry
from photo_insight.records import ImageHandle
from photo_insight.services.signals import ProviderSuite


class FakeProvider:
    """Provider double answering every capability method with a fixed result."""

    def __init__(
        self,
        capability: Capability,
        result=None,
        *,
        error: Exception | None = None,
        load_error: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        self.capability = capability
        self.result = result
        self.error = error
        self.load_error = load_error
        self.delay = delay
        self.load_calls = 0
        self.sizes: list[tuple[int, int]] = []
        self.hints: list[str] = []

    def info(self) -> ProviderInfo:
        return ProviderInfo(
            identifier=f"fake.{self.capability.value}",
            display_name="Fake",
            description="Test double",
            capability=self.capability,
        )

    def load(self) -> None:
        self.load_calls += 1
        if self.load_error is not None:
            raise self.load_error

    def _run(self, surface, *args):
        self.sizes.append(surface.size)
        self.hints.extend(args)
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.result

    detect = _run
    classify = _run
    detect_faces = _run
    recognize = _run


def make_suite(config: AppConfig | None = None, **providers) -> ProviderSuite:
    config = config or AppConfig()
    mapping = {capability: providers.get(capability.value) for capability in Capability}
    return ProviderSuite(config, mapping)


def image_bytes(
    size: tuple[int, int] = (64, 48),
    color: tuple[int, int, int] = (10, 120, 200),
    *,
    fmt: str = "JPEG",
    exif: bytes | None = None,
) -> bytes:
    buffer = io.BytesIO()
    image = Image.new("RGB", size, color=color)
    if exif is not None:
        image.save(buffer, format=fmt, exif=exif)
    else:
        image.save(buffer, format=fmt)
    return buffer.getvalue()


def make_handle(name: str = "photo.jpg", **kwargs) -> ImageHandle:
    return ImageHandle(name=name, data=image_bytes(**kwargs), mime_type="image/jpeg")


@pytest.fixture(autouse=True)
def reset_shared_state():
    factories = ProviderRegistry._factories.copy()
    bootstrapped = ProviderRegistry._bootstrap_complete
    shared = ProviderSuite._shared.copy()
    yield
    ProviderRegistry._factories = factories
    ProviderRegistry._bootstrap_complete = bootstrapped
    ProviderSuite._shared = shared
