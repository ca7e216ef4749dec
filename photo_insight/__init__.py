"""Top-level package for the Photo Insight library."""

from .config import AppConfig, Language
from .errors import PhotoInsightError
from .records import ImageAnalysis, ImageHandle, ImageRecord, ImageStatus
from .services.aggregator import AnalysisAggregator
from .services.controller import RecordController
from .settings_store import SettingsStore

__all__ = [
    "AnalysisAggregator",
    "AppConfig",
    "ImageAnalysis",
    "ImageHandle",
    "ImageRecord",
    "ImageStatus",
    "Language",
    "PhotoInsightError",
    "RecordController",
    "SettingsStore",
]
