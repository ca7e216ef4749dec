"""Registry for dynamically discovering inference providers."""

from __future__ import annotations

import logging
from importlib import import_module
from typing import Callable, Dict

from ..config import AppConfig
from .base import Capability, Provider, ProviderInfo


Factory = Callable[..., Provider]
logger = logging.getLogger(__name__)


class ProviderRegistry:
    """Tracks available provider factories and instantiates them on demand."""

    _factories: Dict[str, Factory] = {}
    _bootstrap_complete: bool = False

    @classmethod
    def register(cls, name: str, factory: Factory) -> None:
        """Register a provider factory under the provided name."""
        cls._factories[name] = factory

    @classmethod
    def unregister(cls, name: str) -> None:
        cls._factories.pop(name, None)

    @classmethod
    def ensure_bootstrapped(cls) -> None:
        if cls._bootstrap_complete:
            return
        modules = [
            "photo_insight.models.yolo",
            "photo_insight.models.scene",
            "photo_insight.models.faces",
            "photo_insight.models.ocr",
        ]
        for module_name in modules:
            try:
                import_module(module_name)
            except ImportError as exc:  # pragma: no cover - broken installs only
                logger.debug("Provider module %s could not be imported: %s", module_name, exc)
        cls._bootstrap_complete = True

    @classmethod
    def list_provider_infos(cls, capability: Capability | None = None) -> list[ProviderInfo]:
        """Return metadata for registered providers, optionally for one capability."""
        cls.ensure_bootstrapped()
        infos: list[ProviderInfo] = []
        for factory in cls._factories.values():
            info = factory().info()
            if capability is None or info.capability == capability:
                infos.append(info)
        return infos

    @classmethod
    def create(cls, name: str, *, config: AppConfig | None = None) -> Provider:
        """Instantiate the provider registered as ``name`` without loading it."""
        cls.ensure_bootstrapped()
        try:
            factory = cls._factories[name]
        except KeyError as exc:
            available = ", ".join(sorted(cls._factories))
            raise KeyError(f"Unknown provider '{name}'. Available: {available}") from exc
        return cls._instantiate_factory(factory, config=config)

    @staticmethod
    def _instantiate_factory(factory: Factory, *, config: AppConfig | None) -> Provider:
        if config is not None:
            try:
                return factory(config)
            except TypeError:
                logger.debug(
                    "Factory %s does not accept configuration parameter; instantiating without it.",
                    getattr(factory, "__name__", repr(factory)),
                )
        return factory()
