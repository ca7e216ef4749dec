"""Abstract interfaces and raw result types for inference providers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol, Sequence

from PIL import Image


class Capability(str, Enum):
    """Kinds of visual signals a provider can supply."""

    OBJECTS = "objects"
    SCENE = "scene"
    FACES = "faces"
    TEXT = "text"


@dataclass(slots=True, frozen=True)
class ObjectDetection:
    """One object reported by an object detector."""

    category: str
    score: float


@dataclass(slots=True, frozen=True)
class ScenePrediction:
    """One class reported by a scene classifier."""

    label: str
    probability: float


@dataclass(slots=True, frozen=True)
class BoundingBox:
    """Axis-aligned box in the coordinate space of the normalized surface."""

    x: float
    y: float
    width: float
    height: float

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    def as_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass(slots=True, frozen=True)
class RawFace:
    """Face as reported by a face analyzer, before normalization."""

    box: BoundingBox
    age: float
    gender: str
    gender_probability: float
    expressions: dict[str, float] = field(default_factory=dict)
    landmarks: tuple[tuple[float, float], ...] = ()


@dataclass(slots=True)
class ProviderInfo:
    """Metadata describing an available provider implementation."""

    identifier: str
    display_name: str
    description: str
    capability: Capability
    tags: Sequence[str] = ()


class ProviderError(RuntimeError):
    """Raised when a provider cannot produce output for a given surface."""


class Provider(Protocol):
    """Lifecycle shared by all providers."""

    def info(self) -> ProviderInfo:
        """Return metadata describing the provider."""

    def load(self) -> None:
        """Perform any expensive model initialisation."""


class ObjectDetector(Provider, Protocol):
    def detect(self, surface: Image.Image) -> list[ObjectDetection]:
        """Return the objects found on the surface."""


class SceneClassifier(Provider, Protocol):
    def classify(self, surface: Image.Image) -> list[ScenePrediction]:
        """Return scene predictions sorted by descending probability."""


class FaceAnalyzer(Provider, Protocol):
    def detect_faces(self, surface: Image.Image) -> list[RawFace]:
        """Return every face found on the surface, in any order."""


class TextRecognizer(Provider, Protocol):
    def recognize(self, surface: Image.Image, language_hint: str) -> str:
        """Return the raw text recognized on the surface."""
