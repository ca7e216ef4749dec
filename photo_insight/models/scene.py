"""Scene classification provider using a HuggingFace image-classification pipeline."""

from __future__ import annotations

import logging

from PIL import Image

from ..config import AppConfig
from ..utils.devices import detect_torch_device, pipeline_device
from .base import Capability, ProviderError, ProviderInfo, SceneClassifier, ScenePrediction
from .registry import ProviderRegistry

logger = logging.getLogger(__name__)

try:
    from transformers import pipeline
except Exception:  # pragma: no cover - optional dependency handling
    pipeline = None  # type: ignore[assignment]


class TransformersSceneClassifier(SceneClassifier):
    """Classifies the whole image into ImageNet-style scene labels."""

    def __init__(self, config: AppConfig | None = None) -> None:
        self._config = config or AppConfig()
        self._info = ProviderInfo(
            identifier="scene.transformers",
            display_name="Scene Classifier",
            description=(
                f"Ranks scene labels with the {self._config.scene_model} "
                "image-classification checkpoint."
            ),
            capability=Capability.SCENE,
            tags=("transformers", "torch", "classification"),
        )
        self._pipeline = None

    def info(self) -> ProviderInfo:
        return self._info

    def load(self) -> None:
        if pipeline is None:
            raise ProviderError(
                "transformers and torch must be installed to classify scenes. "
                "Install with `pip install photo-insight[scene]`."
            )
        device_str, message = detect_torch_device(self._config.device)
        logger.info("[Scene] %s", message)
        self._pipeline = pipeline(
            "image-classification",
            model=self._config.scene_model,
            device=pipeline_device(device_str),
        )

    def classify(self, surface: Image.Image) -> list[ScenePrediction]:
        if self._pipeline is None:
            raise ProviderError("Scene classifier has not been loaded.")

        outputs = self._pipeline(surface, top_k=self._config.scene_top_k)
        predictions = [
            ScenePrediction(label=str(item["label"]), probability=float(item["score"]))
            for item in outputs
            if isinstance(item, dict) and "label" in item
        ]
        predictions.sort(key=lambda item: item.probability, reverse=True)
        return predictions


def _register() -> None:
    ProviderRegistry.register(
        "scene.transformers", lambda config=None: TransformersSceneClassifier(config=config)
    )


_register()
