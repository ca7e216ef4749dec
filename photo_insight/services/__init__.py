"""Service layer for analyzing images and managing their records."""

from .aggregator import AnalysisAggregator, AnalysisFailure
from .controller import RecordController
from .signals import AdapterDegraded, NotReadyError, ProviderSuite

__all__ = [
    "AdapterDegraded",
    "AnalysisAggregator",
    "AnalysisFailure",
    "NotReadyError",
    "ProviderSuite",
    "RecordController",
]
