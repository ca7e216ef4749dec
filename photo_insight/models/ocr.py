"""Text recognition provider wrapping the Tesseract engine."""

from __future__ import annotations

import logging

from PIL import Image

from ..config import AppConfig
from .base import Capability, ProviderError, ProviderInfo, TextRecognizer
from .registry import ProviderRegistry

logger = logging.getLogger(__name__)

try:
    import pytesseract
except Exception:  # pragma: no cover - optional dependency handling
    pytesseract = None  # type: ignore[assignment]


class TesseractTextRecognizer(TextRecognizer):
    """Runs Tesseract OCR with the language pack matching the UI language."""

    def __init__(self, config: AppConfig | None = None) -> None:
        self._config = config or AppConfig()
        self._info = ProviderInfo(
            identifier="text.tesseract",
            display_name="Tesseract OCR",
            description="Recognizes printed text through the local Tesseract binary.",
            capability=Capability.TEXT,
            tags=("tesseract", "ocr", "cpu"),
        )
        self._version: str | None = None

    def info(self) -> ProviderInfo:
        return self._info

    def load(self) -> None:
        if pytesseract is None:
            raise ProviderError(
                "pytesseract must be installed to recognize text. "
                "Install with `pip install photo-insight[ocr]`."
            )
        try:
            self._version = str(pytesseract.get_tesseract_version())
        except Exception as exc:
            raise ProviderError(f"Tesseract binary is not available: {exc}") from exc
        logger.info("[OCR] Using Tesseract %s", self._version)

    def recognize(self, surface: Image.Image, language_hint: str) -> str:
        if self._version is None:
            raise ProviderError("Tesseract has not been loaded.")
        return pytesseract.image_to_string(surface, lang=language_hint)


def _register() -> None:
    ProviderRegistry.register(
        "text.tesseract", lambda config=None: TesseractTextRecognizer(config=config)
    )


_register()
