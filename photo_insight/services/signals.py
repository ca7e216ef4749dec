"""Detector adapters: uniform, fault-isolated async access to the providers."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, ClassVar, Iterable, Mapping, TypeVar

from PIL import Image

from ..config import AppConfig, Language
from ..errors import PhotoInsightError
from ..models.base import (
    Capability,
    ObjectDetection,
    Provider,
    RawFace,
    ScenePrediction,
)
from ..models.registry import ProviderRegistry
from ..utils.text import clean_ocr_text
from ..utils.translations import OCR_LANGUAGE_HINTS

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AdapterDegraded(PhotoInsightError):
    """One visual signal failed; only that signal falls back to its default."""

    def __init__(self, signal: str, reason: str) -> None:
        super().__init__(f"{signal} signal degraded: {reason}")
        self.signal = signal
        self.reason = reason


class NotReadyError(PhotoInsightError):
    """Analysis was requested before the providers finished loading."""


class ProviderSuite:
    """Process-wide set of providers behind a single readiness gate.

    Providers are loaded once by :meth:`ensure_ready`. A provider that is not
    configured or fails to load is unavailable and its adapter returns an empty
    result. Provider exceptions and timeouts during a call surface as
    :class:`AdapterDegraded`.
    """

    _shared: ClassVar[dict[str, ProviderSuite]] = {}

    def __init__(
        self,
        config: AppConfig,
        providers: Mapping[Capability, Provider | None] | None = None,
    ) -> None:
        self.config = config
        if providers is None:
            providers = self._create_providers(config)
        self._providers: dict[Capability, Provider | None] = dict(providers)
        self._available: dict[Capability, Provider] = {}
        self._ready = False
        self._lock: asyncio.Lock | None = None
        self._lock_loop: asyncio.AbstractEventLoop | None = None

    @classmethod
    def shared(cls, config: AppConfig) -> ProviderSuite:
        """Return the suite for this provider selection, creating it on first use."""
        key = _suite_key(config)
        suite = cls._shared.get(key)
        if suite is None:
            suite = cls(config)
            cls._shared[key] = suite
        return suite

    @staticmethod
    def _create_providers(config: AppConfig) -> dict[Capability, Provider | None]:
        providers: dict[Capability, Provider | None] = {}
        for capability_name, identifier in config.provider_selection().items():
            capability = Capability(capability_name)
            if identifier is None:
                providers[capability] = None
                continue
            try:
                providers[capability] = ProviderRegistry.create(identifier, config=config)
            except KeyError as exc:
                logger.warning("No %s provider available: %s", capability.value, exc)
                providers[capability] = None
        return providers

    @property
    def is_ready(self) -> bool:
        return self._ready

    def available(self) -> list[Capability]:
        return list(self._available)

    def require_ready(self) -> None:
        if not self._ready:
            raise NotReadyError("Analysis providers are still loading.")

    def _ready_lock(self) -> asyncio.Lock:
        # The suite outlives any single event loop; locks are bound to the loop that uses them.
        loop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            self._lock = asyncio.Lock()
            self._lock_loop = loop
        return self._lock

    async def ensure_ready(self) -> None:
        """Load every configured provider exactly once; concurrent callers wait."""
        if self._ready:
            return
        async with self._ready_lock():
            if self._ready:
                return
            for capability, provider in self._providers.items():
                if provider is None:
                    continue
                identifier = provider.info().identifier
                logger.info("Loading provider '%s'...", identifier)
                try:
                    await asyncio.to_thread(provider.load)
                except Exception as exc:
                    logger.warning(
                        "Provider '%s' is unavailable; %s results will be empty: %s",
                        identifier,
                        capability.value,
                        exc,
                    )
                    continue
                self._available[capability] = provider
                logger.info("Provider '%s' ready.", identifier)
            self._ready = True

    # ----- Adapters --------------------------------------------------------

    async def detect_objects(self, surface: Image.Image) -> list[ObjectDetection]:
        provider = self._provider(Capability.OBJECTS)
        if provider is None:
            return []
        return await self._invoke(Capability.OBJECTS, lambda: list(provider.detect(surface)))

    async def classify_scene(self, surface: Image.Image) -> list[ScenePrediction]:
        provider = self._provider(Capability.SCENE)
        if provider is None:
            return []
        return await self._invoke(
            Capability.SCENE, lambda: _rank_scenes(provider.classify(surface))
        )

    async def detect_faces(self, surface: Image.Image) -> list[RawFace]:
        provider = self._provider(Capability.FACES)
        if provider is None:
            return []
        return await self._invoke(Capability.FACES, lambda: list(provider.detect_faces(surface)))

    async def recognize_text(self, surface: Image.Image, language: Language) -> str:
        provider = self._provider(Capability.TEXT)
        if provider is None:
            return ""
        hint = OCR_LANGUAGE_HINTS[language]
        return await self._invoke(
            Capability.TEXT, lambda: clean_ocr_text(provider.recognize(surface, hint) or "")
        )

    def _provider(self, capability: Capability) -> Any:
        self.require_ready()
        return self._available.get(capability)

    async def _invoke(self, capability: Capability, call: Callable[[], T]) -> T:
        # ``call`` runs the provider and normalizes its output in the worker thread.
        timeout = self.config.signal_timeout
        try:
            return await asyncio.wait_for(asyncio.to_thread(call), timeout=timeout)
        except asyncio.TimeoutError as exc:
            raise AdapterDegraded(capability.value, f"timed out after {timeout:g}s") from exc
        except Exception as exc:
            raise AdapterDegraded(capability.value, str(exc) or type(exc).__name__) from exc


def _rank_scenes(predictions: Iterable[ScenePrediction]) -> list[ScenePrediction]:
    return sorted(predictions, key=lambda item: float(item.probability), reverse=True)


def _suite_key(config: AppConfig) -> str:
    relevant = {
        "providers": config.provider_selection(),
        "models": [
            config.object_model,
            config.object_confidence,
            config.scene_model,
            config.scene_top_k,
            config.face_model,
            config.face_detection_size,
            config.emotion_model,
            config.gender_model,
        ],
        "device": config.device,
    }
    return repr(relevant)
