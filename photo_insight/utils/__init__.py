"""Utility helpers for the photo_insight package."""

from .devices import detect_torch_device, onnx_providers, pipeline_device
from .paths import guess_mime_type, resolve_image_paths
from .text import capitalize_first, clean_ocr_text, unique

__all__ = [
    "capitalize_first",
    "clean_ocr_text",
    "detect_torch_device",
    "guess_mime_type",
    "onnx_providers",
    "pipeline_device",
    "resolve_image_paths",
    "unique",
]
