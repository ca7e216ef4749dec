"""Record lifecycle: submission, sequential analysis, retry and metadata enrichment."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from typing import Callable, Iterable
from uuid import uuid4

from ..config import AppConfig
from ..io.metadata import MetadataExtractor, MetadataResult
from ..records import ImageHandle, ImageRecord, ImageStatus
from ..utils.translations import phrase
from .aggregator import AnalysisAggregator, AnalysisFailure
from .signals import NotReadyError, ProviderSuite

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[ImageRecord], None]


class RecordController:
    """Owns every :class:`ImageRecord` and drives it through its lifecycle.

    Foreground analyses run strictly one at a time, in submission order, even
    across concurrent :meth:`submit` and :meth:`retry` calls. Metadata
    enrichment runs in the background after an analysis completes and is
    discarded when the record was cleared or re-analyzed in the meantime.
    """

    def __init__(
        self,
        aggregator: AnalysisAggregator,
        extractor: MetadataExtractor | None = None,
        config: AppConfig | None = None,
        *,
        on_change: ChangeCallback | None = None,
    ) -> None:
        self.aggregator = aggregator
        self.extractor = extractor or MetadataExtractor()
        self.config = config or aggregator.config
        self.on_change = on_change
        self._records: dict[str, ImageRecord] = {}
        self._order: list[str] = []
        self._in_flight: set[str] = set()
        self._foreground: asyncio.Lock | None = None
        self._foreground_loop: asyncio.AbstractEventLoop | None = None
        self._background: set[asyncio.Task] = set()

    @classmethod
    def from_config(cls, config: AppConfig, **kwargs) -> RecordController:
        suite = ProviderSuite.shared(config)
        return cls(AnalysisAggregator(suite, config), MetadataExtractor(), config, **kwargs)

    # ------------------------------------------------------------------ queries
    def records(self) -> list[ImageRecord]:
        """Snapshots of every record, newest batch first."""
        return [self._records[record_id] for record_id in self._order]

    def get(self, record_id: str) -> ImageRecord | None:
        return self._records.get(record_id)

    # ----------------------------------------------------------------- commands
    async def submit(self, files: Iterable[ImageHandle]) -> list[ImageRecord]:
        """Create a record per image file and analyze them one after another."""
        if not self.config.queue_until_ready and not self.aggregator.is_ready:
            raise NotReadyError("Analysis models are still loading")

        created: list[ImageRecord] = []
        for handle in files:
            if not handle.mime_type.startswith("image/"):
                logger.info("Skipping %s: unsupported type %s", handle.name, handle.mime_type)
                continue
            record = ImageRecord(
                id=uuid4().hex,
                name=handle.name,
                size=handle.size,
                mime_type=handle.mime_type,
                source=handle,
            )
            self._records[record.id] = record
            # Queued records count as in flight so a retry cannot analyze them twice.
            self._in_flight.add(record.id)
            created.append(record)
            self._notify(record)

        self._order[:0] = [record.id for record in created]

        try:
            for record in created:
                await self._analyze(record.id)
        finally:
            self._in_flight.difference_update(record.id for record in created)
        return [self._records[record.id] for record in created if record.id in self._records]

    async def retry(self, record_id: str) -> ImageRecord | None:
        """Re-run analysis and enrichment from scratch for a known record."""
        if record_id not in self._records:
            return None
        if record_id in self._in_flight:
            logger.warning("Record %s is already being analyzed; retry ignored", record_id)
            return self._records[record_id]
        await self._analyze(record_id)
        return self._records.get(record_id)

    async def retry_all_failed(self) -> list[ImageRecord]:
        failed = [record.id for record in self.records() if record.status is ImageStatus.ERROR]
        results: list[ImageRecord] = []
        for record_id in failed:
            record = await self.retry(record_id)
            if record is not None:
                results.append(record)
        return results

    def clear_all(self) -> None:
        """Forget every record; pending enrichments turn into no-ops."""
        self._records.clear()
        self._order.clear()

    async def wait_for_enrichment(self) -> None:
        while self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    # ----------------------------------------------------------------- internals
    def _foreground_lock(self) -> asyncio.Lock:
        loop = asyncio.get_running_loop()
        if self._foreground is None or self._foreground_loop is not loop:
            self._foreground = asyncio.Lock()
            self._foreground_loop = loop
        return self._foreground

    async def _analyze(self, record_id: str) -> None:
        self._in_flight.add(record_id)
        try:
            async with self._foreground_lock():
                record = self._records.get(record_id)
                if record is None:
                    return
                attempt = record.attempt + 1
                self._write(record_id, status=ImageStatus.ANALYZING, error=None, attempt=attempt)

                language = self.config.language
                try:
                    analysis = await self.aggregator.analyze(record.source, language)
                except (AnalysisFailure, NotReadyError) as exc:
                    logger.warning("Analysis of %s failed: %s", record.name, exc)
                    self._fail(record_id, attempt, str(exc))
                    return
                except Exception as exc:
                    logger.exception("Unexpected error while analyzing %s", record.name)
                    self._fail(record_id, attempt, str(exc))
                    return

                updated = self._write(
                    record_id,
                    expected_attempt=attempt,
                    status=ImageStatus.COMPLETED,
                    analysis=analysis,
                )
        finally:
            self._in_flight.discard(record_id)

        if updated is not None and self.config.extract_metadata:
            self._start_enrichment(updated)

    def _fail(self, record_id: str, attempt: int, message: str) -> None:
        message = message or phrase("unknown_error", self.config.language)
        self._write(record_id, expected_attempt=attempt, status=ImageStatus.ERROR, error=message)

    def _write(
        self, record_id: str, *, expected_attempt: int | None = None, **changes
    ) -> ImageRecord | None:
        record = self._records.get(record_id)
        if record is None:
            return None
        if expected_attempt is not None and record.attempt != expected_attempt:
            return None
        updated = replace(record, **changes)
        self._records[record_id] = updated
        self._notify(updated)
        return updated

    def _notify(self, record: ImageRecord) -> None:
        if self.on_change is None:
            return
        try:
            self.on_change(record)
        except Exception:
            logger.exception("Change callback failed for record %s", record.id)

    def _start_enrichment(self, record: ImageRecord) -> None:
        task = asyncio.create_task(self._enrich(record.id, record.attempt, record.source))
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def _enrich(self, record_id: str, attempt: int, source: ImageHandle) -> None:
        try:
            metadata = await asyncio.to_thread(self.extractor.extract, source.data)
        except Exception:
            logger.warning("Metadata extraction failed for record %s", record_id, exc_info=True)
            return
        if metadata.is_empty:
            return
        self.apply_metadata(record_id, attempt, metadata)

    def apply_metadata(self, record_id: str, attempt: int, metadata: MetadataResult) -> bool:
        """Merge ``metadata`` into the record if it still holds the same analysis."""
        record = self._records.get(record_id)
        if (
            record is None
            or record.attempt != attempt
            or record.status is not ImageStatus.COMPLETED
            or record.analysis is None
        ):
            logger.debug("Discarding stale metadata for record %s", record_id)
            return False
        merged = record.analysis.with_metadata(exif=metadata.exif, location=metadata.location)
        if merged is record.analysis:
            return True
        self._write(record_id, expected_attempt=attempt, analysis=merged)
        return True
