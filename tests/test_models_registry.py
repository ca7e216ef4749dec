"""Tests for the dynamic provider registry."""

from __future__ import annotations

import pytest

from photo_insight.config import AppConfig
from photo_insight.models.base import Capability, ObjectDetector, ProviderInfo, TextRecognizer
from photo_insight.models import faces, ocr, scene, yolo  # noqa: F401
from photo_insight.models.registry import ProviderRegistry


class DummyDetector(ObjectDetector):
    def __init__(self, *, called_with: list[AppConfig | None]) -> None:
        self.called_with = called_with
        self.loaded = False

    def info(self) -> ProviderInfo:
        return ProviderInfo(
            identifier="dummy.objects",
            display_name="Dummy",
            description="",
            capability=Capability.OBJECTS,
        )

    def load(self) -> None:
        self.loaded = True

    def detect(self, surface):  # pragma: no cover - not needed
        raise NotImplementedError


class DummyRecognizer(TextRecognizer):
    def info(self) -> ProviderInfo:
        return ProviderInfo(
            identifier="dummy.text",
            display_name="Dummy OCR",
            description="",
            capability=Capability.TEXT,
        )

    def load(self) -> None:  # pragma: no cover - nothing to load
        return None

    def recognize(self, surface, language_hint):  # pragma: no cover - not needed
        return ""


def _isolate():
    ProviderRegistry._factories = {}
    ProviderRegistry._bootstrap_complete = True


def test_register_and_list_providers():
    _isolate()
    ProviderRegistry.register("demo", lambda: DummyDetector(called_with=[]))

    infos = ProviderRegistry.list_provider_infos()

    assert infos[0].identifier == "dummy.objects"


def test_list_providers_filters_by_capability():
    _isolate()
    ProviderRegistry.register("objects", lambda: DummyDetector(called_with=[]))
    ProviderRegistry.register("text", DummyRecognizer)

    infos = ProviderRegistry.list_provider_infos(Capability.TEXT)

    assert [info.identifier for info in infos] == ["dummy.text"]


def test_create_passes_config():
    _isolate()
    captured: list[AppConfig | None] = []

    def factory(config: AppConfig | None = None):
        captured.append(config)
        return DummyDetector(called_with=captured)

    ProviderRegistry.register("demo", factory)

    config = AppConfig(object_provider="demo")
    instance = ProviderRegistry.create("demo", config=config)

    assert captured[0] == config
    assert isinstance(instance, DummyDetector)
    assert instance.loaded is False


def test_create_does_not_load():
    _isolate()
    ProviderRegistry.register("demo", lambda: DummyDetector(called_with=[]))

    instance = ProviderRegistry.create("demo")

    assert instance.loaded is False


def test_unknown_provider_lists_available():
    _isolate()
    ProviderRegistry.register("demo", lambda: DummyDetector(called_with=[]))

    with pytest.raises(KeyError, match="demo"):
        ProviderRegistry.create("missing")


def test_create_handles_factories_without_config():
    _isolate()
    called = []

    def factory():
        called.append("ok")
        return DummyDetector(called_with=[])

    ProviderRegistry.register("demo", factory)
    ProviderRegistry.create("demo", config=AppConfig())

    assert called == ["ok"]


def test_ensure_bootstrapped_imports_modules(monkeypatch):
    called = []

    def fake_import(name):
        called.append(name)

    monkeypatch.setattr("photo_insight.models.registry.import_module", fake_import)
    ProviderRegistry._bootstrap_complete = False
    ProviderRegistry._factories = {}

    ProviderRegistry.ensure_bootstrapped()

    assert called == [
        "photo_insight.models.yolo",
        "photo_insight.models.scene",
        "photo_insight.models.faces",
        "photo_insight.models.ocr",
    ]
    assert ProviderRegistry._bootstrap_complete is True


def test_ensure_bootstrapped_tolerates_import_error(monkeypatch):
    def fake_import(name):
        raise ImportError("boom")

    monkeypatch.setattr("photo_insight.models.registry.import_module", fake_import)
    ProviderRegistry._bootstrap_complete = False

    ProviderRegistry.ensure_bootstrapped()

    assert ProviderRegistry._bootstrap_complete is True


def test_unregister():
    _isolate()
    ProviderRegistry.register("demo", lambda: DummyDetector(called_with=[]))
    ProviderRegistry.unregister("demo")

    assert ProviderRegistry._factories == {}


def test_builtin_providers_are_registered():
    ProviderRegistry._bootstrap_complete = False

    identifiers = {info.identifier for info in ProviderRegistry.list_provider_infos()}

    assert {"objects.yolo", "scene.transformers", "faces.insightface", "text.tesseract"} <= identifiers
