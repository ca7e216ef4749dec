"""Base exception shared by the analysis pipeline."""

from __future__ import annotations


class PhotoInsightError(Exception):
    """Root of the errors raised by the aggregation pipeline and controller."""
