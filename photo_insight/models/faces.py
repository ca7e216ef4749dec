"""Face analysis provider: InsightFace detection plus crop-level classifiers.

InsightFace supplies boxes, landmarks and an age estimate. Gender and facial
expression probabilities come from two HuggingFace image-classification
checkpoints run on each face crop, so both carry real probabilities.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from PIL import Image

from ..config import AppConfig
from ..utils.devices import detect_torch_device, onnx_providers, pipeline_device
from .base import BoundingBox, Capability, FaceAnalyzer, ProviderError, ProviderInfo, RawFace
from .registry import ProviderRegistry

logger = logging.getLogger(__name__)

try:
    import numpy as np
    from insightface.app import FaceAnalysis
except Exception:  # pragma: no cover - optional dependency handling
    np = None  # type: ignore[assignment]
    FaceAnalysis = None  # type: ignore[assignment]

try:
    from transformers import pipeline
except Exception:  # pragma: no cover - optional dependency handling
    pipeline = None  # type: ignore[assignment]


EXPRESSION_ALIASES = {
    "neutral": "neutral",
    "happy": "happy",
    "happiness": "happy",
    "sad": "sad",
    "sadness": "sad",
    "angry": "angry",
    "anger": "angry",
    "fear": "fearful",
    "fearful": "fearful",
    "disgust": "disgusted",
    "disgusted": "disgusted",
    "surprise": "surprised",
    "surprised": "surprised",
}

GENDER_ALIASES = {
    "male": "male",
    "man": "male",
    "m": "male",
    "female": "female",
    "woman": "female",
    "f": "female",
}


def fold_scores(outputs: Any, aliases: Mapping[str, str]) -> dict[str, float]:
    """Map classifier outputs onto a closed label set, keeping classifier order."""
    scores: dict[str, float] = {}
    if not isinstance(outputs, list):
        return scores
    for item in outputs:
        if not isinstance(item, dict):
            continue
        label = aliases.get(str(item.get("label", "")).strip().lower())
        if label is None:
            continue
        scores[label] = scores.get(label, 0.0) + float(item.get("score", 0.0))
    return scores


class InsightFaceAnalyzer(FaceAnalyzer):
    """Detects faces and estimates age, gender and expression for each one."""

    def __init__(self, config: AppConfig | None = None) -> None:
        self._config = config or AppConfig()
        self._info = ProviderInfo(
            identifier="faces.insightface",
            display_name="InsightFace Analyzer",
            description=(
                f"Detects faces with InsightFace ({self._config.face_model}) and classifies "
                "gender and expression on each crop."
            ),
            capability=Capability.FACES,
            tags=("insightface", "onnxruntime", "transformers"),
        )
        self._app = None
        self._emotion = None
        self._gender = None

    def info(self) -> ProviderInfo:
        return self._info

    def load(self) -> None:
        if FaceAnalysis is None or np is None:
            raise ProviderError(
                "insightface and onnxruntime must be installed to analyze faces. "
                "Install with `pip install photo-insight[faces]`."
            )
        if pipeline is None:
            raise ProviderError(
                "transformers and torch must be installed to classify face attributes. "
                "Install with `pip install photo-insight[faces]`."
            )

        device_str, message = detect_torch_device(self._config.device)
        logger.info("[Faces] %s", message)

        size = self._config.face_detection_size
        app = FaceAnalysis(name=self._config.face_model, providers=onnx_providers(device_str))
        app.prepare(ctx_id=0 if device_str.startswith("cuda") else -1, det_size=(size, size))
        self._app = app

        device = pipeline_device(device_str)
        self._emotion = pipeline(
            "image-classification", model=self._config.emotion_model, device=device
        )
        self._gender = pipeline(
            "image-classification", model=self._config.gender_model, device=device
        )

    def detect_faces(self, surface: Image.Image) -> list[RawFace]:
        if self._app is None:
            raise ProviderError("Face analyzer has not been loaded.")

        rgb = surface.convert("RGB")
        bgr = np.ascontiguousarray(np.asarray(rgb)[:, :, ::-1])
        width, height = rgb.size

        faces: list[RawFace] = []
        for face in self._app.get(bgr):
            x1, y1, x2, y2 = (float(value) for value in face.bbox)
            x1, y1 = max(0.0, x1), max(0.0, y1)
            x2, y2 = min(float(width), x2), min(float(height), y2)
            if x2 <= x1 or y2 <= y1:
                continue

            crop = rgb.crop((int(x1), int(y1), int(round(x2)), int(round(y2))))
            expressions = fold_scores(self._emotion(crop, top_k=None), EXPRESSION_ALIASES)
            genders = fold_scores(self._gender(crop, top_k=None), GENDER_ALIASES)
            if genders:
                gender, gender_probability = max(genders.items(), key=lambda item: item[1])
            else:
                gender = "male" if getattr(face, "sex", "M") == "M" else "female"
                gender_probability = 0.5

            faces.append(
                RawFace(
                    box=BoundingBox(x=x1, y=y1, width=x2 - x1, height=y2 - y1),
                    age=float(getattr(face, "age", 0) or 0),
                    gender=gender,
                    gender_probability=min(1.0, gender_probability),
                    expressions=expressions,
                    landmarks=self._landmarks(face),
                )
            )
        return faces

    @staticmethod
    def _landmarks(face: Any) -> tuple[tuple[float, float], ...]:
        points = getattr(face, "landmark_2d_106", None)
        if points is None:
            points = getattr(face, "kps", None)
        if points is None:
            return ()
        return tuple((float(x), float(y)) for x, y in points)


def _register() -> None:
    ProviderRegistry.register(
        "faces.insightface", lambda config=None: InsightFaceAnalyzer(config=config)
    )


_register()
