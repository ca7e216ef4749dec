"""Object detection provider backed by Ultralytics YOLO."""

from __future__ import annotations

import logging

from PIL import Image

from ..config import AppConfig
from ..utils.devices import detect_torch_device
from .base import Capability, ObjectDetection, ObjectDetector, ProviderError, ProviderInfo
from .registry import ProviderRegistry

logger = logging.getLogger(__name__)

try:
    from ultralytics import YOLO
except Exception:  # pragma: no cover - optional dependency handling
    YOLO = None  # type: ignore[assignment]


class YoloObjectDetector(ObjectDetector):
    """Detects COCO objects (80 classes) with a YOLO checkpoint."""

    def __init__(self, config: AppConfig | None = None) -> None:
        self._config = config or AppConfig()
        self._info = ProviderInfo(
            identifier="objects.yolo",
            display_name="YOLO Object Detector",
            description=f"Detects COCO objects with Ultralytics YOLO ({self._config.object_model}).",
            capability=Capability.OBJECTS,
            tags=("ultralytics", "torch", "coco"),
        )
        self._model = None
        self._device: str | None = None

    def info(self) -> ProviderInfo:
        return self._info

    def load(self) -> None:
        if YOLO is None:
            raise ProviderError(
                "ultralytics must be installed to detect objects. "
                "Install with `pip install photo-insight[objects]`."
            )
        device_str, message = detect_torch_device(self._config.device)
        logger.info("[YOLO] %s", message)
        self._model = YOLO(self._config.object_model)
        self._device = device_str

    def detect(self, surface: Image.Image) -> list[ObjectDetection]:
        if self._model is None:
            raise ProviderError("YOLO model has not been loaded.")

        results = self._model(
            surface,
            conf=self._config.object_confidence,
            device=self._device,
            verbose=False,
        )
        detections: list[ObjectDetection] = []
        for result in results:
            for box in result.boxes:
                detections.append(
                    ObjectDetection(
                        category=str(result.names[int(box.cls)]),
                        score=float(box.conf),
                    )
                )
        return detections


def _register() -> None:
    ProviderRegistry.register(
        "objects.yolo", lambda config=None: YoloObjectDetector(config=config)
    )


_register()
