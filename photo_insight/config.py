"""Application-wide configuration models and persistence helpers."""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator


class Language(str, Enum):
    """Languages supported for labels, OCR hints and generated text."""

    EN = "en"
    PL = "pl"


class AppConfig(BaseModel):
    """Validates and stores runtime settings for the analysis pipeline."""

    language: Language = Field(
        default=Language.EN,
        description="Language used for translated labels, OCR hints and descriptions.",
    )
    max_dimension: int = Field(
        default=1024,
        ge=64,
        le=8192,
        description="Longest edge (pixels) of the normalized surface fed to every signal.",
    )
    signal_timeout: float = Field(
        default=60.0,
        ge=1.0,
        le=600.0,
        description="Upper bound (seconds) for a single detector call before it is degraded.",
    )
    emotion_threshold: float = Field(
        default=0.1,
        ge=0.0,
        le=1.0,
        description="Minimum emotion score for the legacy emotion summary to be reported.",
    )
    color_sample_stride: int = Field(
        default=1000,
        ge=1,
        description="Sample every Nth pixel when ranking dominant colors.",
    )
    max_colors: int = Field(
        default=3,
        ge=1,
        le=3,
        description="Number of dominant colors to keep.",
    )
    object_provider: str | None = Field(
        default="objects.yolo",
        description="Identifier of the object detector provider; blank disables it.",
    )
    scene_provider: str | None = Field(
        default="scene.transformers",
        description="Identifier of the scene classifier provider; blank disables it.",
    )
    face_provider: str | None = Field(
        default="faces.insightface",
        description="Identifier of the face analyzer provider; blank disables it.",
    )
    text_provider: str | None = Field(
        default="text.tesseract",
        description="Identifier of the text recognizer provider; blank disables it.",
    )
    object_model: str = Field(
        default="yolo11n.pt",
        description="Ultralytics weights used for object detection.",
    )
    object_confidence: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Minimum detection score for an object to be reported.",
    )
    scene_model: str = Field(
        default="google/vit-base-patch16-224",
        description="HuggingFace image-classification checkpoint used for scenes.",
    )
    scene_top_k: int = Field(
        default=3,
        ge=1,
        le=20,
        description="Number of scene predictions requested from the classifier.",
    )
    face_model: str = Field(
        default="buffalo_l",
        description="InsightFace model pack used for detection, landmarks and age.",
    )
    face_detection_size: int = Field(
        default=640,
        ge=128,
        le=2048,
        description="Square input size of the InsightFace detector.",
    )
    emotion_model: str = Field(
        default="trpakov/vit-face-expression",
        description="HuggingFace checkpoint classifying facial expressions on face crops.",
    )
    gender_model: str = Field(
        default="rizvandwiki/gender-classification",
        description="HuggingFace checkpoint classifying gender on face crops.",
    )
    device: str = Field(
        default="auto",
        description="Accelerator preference: auto, cpu, cuda, mps or xpu.",
    )
    draw_overlay: bool = Field(
        default=True,
        description="Render a marked-up copy of the image when faces are detected.",
    )
    overlay_quality: int = Field(
        default=80,
        ge=1,
        le=95,
        description="JPEG quality of the marked-up image.",
    )
    extract_metadata: bool = Field(
        default=True,
        description="Run the background EXIF/GPS enrichment after a successful analysis.",
    )
    queue_until_ready: bool = Field(
        default=True,
        description=(
            "Wait for providers to finish loading before analyzing; when false, submissions "
            "made while providers load are rejected."
        ),
    )

    @model_validator(mode="after")
    def _normalise_provider_names(self) -> AppConfig:
        for name in ("object_provider", "scene_provider", "face_provider", "text_provider"):
            value = getattr(self, name)
            if value is not None:
                value = value.strip() or None
            setattr(self, name, value)
        return self

    @model_validator(mode="after")
    def _normalise_device(self) -> AppConfig:
        device = (self.device or "auto").strip().lower()
        if device not in {"auto", "cpu", "cuda", "mps", "xpu"}:
            raise ValueError(f"Unsupported device preference: {self.device!r}")
        self.device = device
        return self

    def provider_selection(self) -> dict[str, str | None]:
        """Return the configured provider identifier for every capability."""
        return {
            "objects": self.object_provider,
            "scene": self.scene_provider,
            "faces": self.face_provider,
            "text": self.text_provider,
        }

    def as_dict(self) -> dict[str, Any]:
        """Serialize the configuration to primitive Python types."""
        return self.model_dump(mode="json")

    @classmethod
    def load(cls, path: Path) -> AppConfig:
        """Load configuration from a YAML or JSON file."""
        data = _read_config_file(path)
        try:
            return cls.model_validate(data)
        except ValidationError as exc:  # pragma: no cover - pass through details
            raise ValueError(f"Invalid configuration file at {path}: {exc}") from exc

    def save(self, path: Path) -> None:
        """Persist configuration to a YAML file."""
        _write_config_file(path, self.as_dict())


def _read_config_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(path)

    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in {".yaml", ".yml"}:
        return yaml.safe_load(text) or {}
    return json.loads(text)


def _write_config_file(path: Path, data: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix.lower() in {".yaml", ".yml"}:
        yaml_text = yaml.safe_dump(
            data,
            allow_unicode=False,
            sort_keys=False,
        )
        path.write_text(yaml_text, encoding="utf-8")
    else:
        path.write_text(json.dumps(data, indent=2), encoding="utf-8")
