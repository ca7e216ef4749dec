"""I/O helpers for reading embedded image metadata."""

from .metadata import MetadataExtractionFailure, MetadataExtractor, MetadataResult

__all__ = ["MetadataExtractionFailure", "MetadataExtractor", "MetadataResult"]
