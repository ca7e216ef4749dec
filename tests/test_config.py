"""Additional tests for AppConfig validation."""

from __future__ import annotations

import json

import pytest
from photo_insight.config import AppConfig, Language


def test_defaults_select_every_provider():
    config = AppConfig()

    assert config.language is Language.EN
    assert config.max_dimension == 1024
    assert config.provider_selection() == {
        "objects": "objects.yolo",
        "scene": "scene.transformers",
        "faces": "faces.insightface",
        "text": "text.tesseract",
    }


def test_blank_provider_disables_capability():
    config = AppConfig(text_provider="   ", scene_provider=" scene.transformers ")

    assert config.text_provider is None
    assert config.scene_provider == "scene.transformers"
    assert config.provider_selection()["text"] is None


def test_device_is_normalised():
    assert AppConfig(device=" CUDA ").device == "cuda"


def test_device_rejects_unknown_value():
    with pytest.raises(ValueError):
        AppConfig(device="tpu")


def test_max_colors_is_bounded():
    with pytest.raises(ValueError):
        AppConfig(max_colors=4)


def test_language_accepts_plain_string():
    assert AppConfig(language="pl").language is Language.PL


def test_load_and_save_round_trip(tmp_path):
    path = tmp_path / "config.yaml"
    original = AppConfig(
        language=Language.PL,
        object_confidence=0.35,
        face_provider="",
        draw_overlay=False,
    )
    original.save(path)

    loaded = AppConfig.load(path)
    assert loaded.language is Language.PL
    assert loaded.object_confidence == 0.35
    assert loaded.face_provider is None
    assert loaded.draw_overlay is False


def test_load_rejects_invalid_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"signal_timeout": -1}), encoding="utf-8")

    with pytest.raises(ValueError):
        AppConfig.load(path)


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        AppConfig.load(tmp_path / "absent.yaml")
