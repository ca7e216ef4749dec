"""Core service merging every visual signal into one immutable analysis."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, TypeVar

from PIL import Image

from ..config import AppConfig, Language
from ..errors import PhotoInsightError
from ..models.base import Capability, ObjectDetection, RawFace, ScenePrediction
from ..records import FaceDetail, ImageAnalysis, ImageHandle
from ..utils.text import capitalize_first, unique
from ..utils.translations import translate_object, translate_scene
from .colors import dominant_colors
from .overlay import render_overlay
from .signals import AdapterDegraded, ProviderSuite
from .summary import (
    build_description,
    build_faces,
    build_labels,
    legacy_summaries,
    normalize_scene_label,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_CONFIDENCE = 0.8


class AnalysisFailure(PhotoInsightError):
    """No analysis could be produced for an image."""


def normalize_surface(image: Image.Image, max_dimension: int) -> Image.Image:
    """Bound the longer edge by ``max_dimension`` while keeping the aspect ratio."""
    width, height = image.size
    new_width, new_height = float(width), float(height)
    if width > height:
        if width > max_dimension:
            new_height = height * max_dimension / width
            new_width = max_dimension
    elif height > max_dimension:
        new_width = width * max_dimension / height
        new_height = max_dimension

    target = (max(1, int(new_width)), max(1, int(new_height)))
    if target == image.size:
        return image
    return image.resize(target, Image.Resampling.LANCZOS)


class AnalysisAggregator:
    """Runs all signals on one normalized surface and assembles the result."""

    def __init__(self, suite: ProviderSuite, config: AppConfig | None = None) -> None:
        self.suite = suite
        self.config = config or suite.config

    @property
    def is_ready(self) -> bool:
        return self.suite.is_ready

    async def ensure_ready(self) -> None:
        await self.suite.ensure_ready()

    async def analyze(
        self, handle: ImageHandle, language: Language | str | None = None
    ) -> ImageAnalysis:
        """Return the complete analysis of ``handle`` or raise :class:`AnalysisFailure`."""
        lang = Language(language) if language is not None else self.config.language
        logger.debug("Analyzing %s", handle.name)

        try:
            surface = await asyncio.to_thread(self._prepare_surface, handle)
        except Exception as exc:
            raise AnalysisFailure(f"Could not decode {handle.name}: {exc}") from exc

        await self.suite.ensure_ready()

        degraded: list[str] = []
        outcomes = await asyncio.gather(
            self._settle(self.suite.detect_objects(surface), [], degraded),
            self._settle(self.suite.classify_scene(surface), [], degraded),
            self._settle(self._detect_faces(surface), ([], ()), degraded),
            self._settle(self.suite.recognize_text(surface, lang), "", degraded),
            asyncio.to_thread(
                dominant_colors,
                surface,
                stride=self.config.color_sample_stride,
                limit=self.config.max_colors,
            ),
            return_exceptions=True,
        )
        for outcome in outcomes:
            if isinstance(outcome, PhotoInsightError):
                raise outcome
            if isinstance(outcome, BaseException):
                raise AnalysisFailure(f"Analysis of {handle.name} failed: {outcome}") from outcome

        detections, scenes, (raw_faces, faces), text, colors = outcomes
        overlay = await self._render_overlay(surface, raw_faces)

        try:
            return self._assemble(
                lang,
                detections=detections,
                scenes=scenes,
                faces=faces,
                text=text,
                colors=colors,
                overlay=overlay,
                degraded=degraded,
            )
        except Exception as exc:
            raise AnalysisFailure(f"Could not assemble analysis of {handle.name}: {exc}") from exc

    def _prepare_surface(self, handle: ImageHandle) -> Image.Image:
        return normalize_surface(handle.open(), self.config.max_dimension)

    async def _detect_faces(
        self, surface: Image.Image
    ) -> tuple[list[RawFace], tuple[FaceDetail, ...]]:
        raw_faces = await self.suite.detect_faces(surface)
        try:
            faces = build_faces(raw_faces, surface.width)
        except Exception as exc:
            raise AdapterDegraded(Capability.FACES.value, f"malformed face result: {exc}") from exc
        return raw_faces, faces

    @staticmethod
    async def _settle(signal: Awaitable[T], default: T, degraded: list[str]) -> T:
        try:
            return await signal
        except AdapterDegraded as exc:
            logger.warning("%s", exc)
            degraded.append(exc.signal)
            return default

    async def _render_overlay(self, surface: Image.Image, raw_faces: list[RawFace]) -> str | None:
        if not raw_faces or not self.config.draw_overlay:
            return None
        try:
            return await asyncio.to_thread(
                render_overlay, surface, raw_faces, quality=self.config.overlay_quality
            )
        except Exception:
            logger.warning("Failed to draw face overlay", exc_info=True)
            return None

    def _assemble(
        self,
        language: Language,
        *,
        detections: list[ObjectDetection],
        scenes: list[ScenePrediction],
        faces: tuple[FaceDetail, ...],
        text: str,
        colors: list[str],
        overlay: str | None,
        degraded: list[str],
    ) -> ImageAnalysis:
        objects = [translate_object(item.category, language) for item in detections]
        top_scene = scenes[0] if scenes else None
        scenery = (
            translate_scene(normalize_scene_label(top_scene.label), language) if top_scene else ""
        )

        age_estimate, emotion_estimate = legacy_summaries(
            faces, language, emotion_threshold=self.config.emotion_threshold
        )

        confidence = top_scene.probability if top_scene else DEFAULT_CONFIDENCE
        return ImageAnalysis(
            objects=tuple(unique(capitalize_first(item) for item in objects)),
            labels=build_labels(scenery, objects),
            description=build_description(scenery, objects, faces, language),
            confidence_score=min(1.0, max(0.0, float(confidence))),
            dominant_colors=tuple(colors),
            faces=faces,
            age_estimate=age_estimate,
            emotion_estimate=emotion_estimate,
            scenery=capitalize_first(scenery),
            ocr_text=text or None,
            marked_up_image_url=overlay,
            degraded_signals=tuple(sorted(degraded)),
        )
