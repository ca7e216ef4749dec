"""Provider registry and base classes for visual inference."""

from .base import (
    BoundingBox,
    Capability,
    FaceAnalyzer,
    ObjectDetection,
    ObjectDetector,
    ProviderError,
    ProviderInfo,
    RawFace,
    SceneClassifier,
    ScenePrediction,
    TextRecognizer,
)
from .registry import ProviderRegistry

__all__ = [
    "BoundingBox",
    "Capability",
    "FaceAnalyzer",
    "ObjectDetection",
    "ObjectDetector",
    "ProviderError",
    "ProviderInfo",
    "ProviderRegistry",
    "RawFace",
    "SceneClassifier",
    "ScenePrediction",
    "TextRecognizer",
]
