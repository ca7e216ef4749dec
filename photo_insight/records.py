"""Immutable value types shared by the aggregator, controller and callers."""

from __future__ import annotations

import io
from dataclasses import asdict, dataclass, field, fields, replace
from enum import Enum
from pathlib import Path
from typing import Any

from PIL import Image, ImageOps

from .models.base import BoundingBox
from .utils.paths import guess_mime_type


class ImageStatus(str, Enum):
    """Lifecycle states of an :class:`ImageRecord`."""

    PENDING = "pending"
    ANALYZING = "analyzing"
    COMPLETED = "completed"
    ERROR = "error"


@dataclass(slots=True, frozen=True)
class ImageHandle:
    """Original bytes of one uploaded image plus what is needed to decode them."""

    name: str
    data: bytes = field(repr=False)
    mime_type: str = "application/octet-stream"

    @classmethod
    def from_path(cls, path: Path) -> ImageHandle:
        return cls(name=path.name, data=path.read_bytes(), mime_type=guess_mime_type(path))

    @property
    def size(self) -> int:
        return len(self.data)

    def open(self) -> Image.Image:
        """Decode the pixels, honouring the EXIF orientation tag."""
        with Image.open(io.BytesIO(self.data)) as image:
            image.load()
            upright = ImageOps.exif_transpose(image)
            return upright.convert("RGB")


@dataclass(slots=True, frozen=True)
class FaceDetail:
    """One detected face, normalized into the shared analysis schema."""

    age: int
    gender: str
    gender_probability: float
    emotion: str
    emotion_score: float
    position: str
    box: BoundingBox

    def as_dict(self) -> dict[str, Any]:
        return {
            "age": self.age,
            "gender": self.gender,
            "gender_probability": self.gender_probability,
            "emotion": self.emotion,
            "emotion_score": self.emotion_score,
            "position": self.position,
            "box": self.box.as_dict(),
        }


@dataclass(slots=True, frozen=True)
class CameraInfo:
    """Camera fields parsed from embedded EXIF; every field is optional."""

    make: str | None = None
    model: str | None = None
    date_time: str | None = None
    iso: int | None = None
    exposure_time: str | None = None
    f_number: str | None = None

    @property
    def is_empty(self) -> bool:
        return all(getattr(self, item.name) is None for item in fields(self))

    def merged(self, other: CameraInfo) -> CameraInfo:
        """Overlay the non-empty fields of ``other``; ``None`` never erases a value."""
        updates = {
            item.name: getattr(other, item.name)
            for item in fields(other)
            if getattr(other, item.name) is not None
        }
        return replace(self, **updates)


@dataclass(slots=True, frozen=True)
class GeoLocation:
    lat: float
    lng: float


@dataclass(slots=True, frozen=True)
class ImageAnalysis:
    """Unified, render-ready result of every visual signal for one image."""

    objects: tuple[str, ...] = ()
    labels: tuple[str, ...] = ()
    description: str = ""
    confidence_score: float = 0.0
    dominant_colors: tuple[str, ...] = ()
    faces: tuple[FaceDetail, ...] = ()
    age_estimate: str | None = None
    emotion_estimate: str | None = None
    scenery: str = ""
    ocr_text: str | None = None
    marked_up_image_url: str | None = None
    exif: CameraInfo | None = None
    location: GeoLocation | None = None
    degraded_signals: tuple[str, ...] = ()

    def with_metadata(
        self,
        *,
        exif: CameraInfo | None = None,
        location: GeoLocation | None = None,
    ) -> ImageAnalysis:
        """Return a copy with embedded metadata merged in.

        Metadata is additive: fields already present are kept unless the new
        value is set, and an absent argument never clears anything.
        """
        merged_exif = self.exif
        if exif is not None and not exif.is_empty:
            merged_exif = exif if self.exif is None else self.exif.merged(exif)
        merged_location = location if location is not None else self.location
        if merged_exif == self.exif and merged_location == self.location:
            return self
        return replace(self, exif=merged_exif, location=merged_location)

    def as_dict(self, *, include_overlay: bool = True) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "objects": list(self.objects),
            "labels": list(self.labels),
            "description": self.description,
            "confidence_score": self.confidence_score,
            "dominant_colors": list(self.dominant_colors),
            "faces": [face.as_dict() for face in self.faces],
            "age_estimate": self.age_estimate,
            "emotion_estimate": self.emotion_estimate,
            "scenery": self.scenery,
            "ocr_text": self.ocr_text,
            "exif": asdict(self.exif) if self.exif is not None else None,
            "location": asdict(self.location) if self.location is not None else None,
            "degraded_signals": list(self.degraded_signals),
        }
        if include_overlay:
            payload["marked_up_image_url"] = self.marked_up_image_url
        return payload


@dataclass(slots=True, frozen=True)
class ImageRecord:
    """Read-only snapshot of one submitted image and its analysis state."""

    id: str
    name: str
    size: int
    mime_type: str
    source: ImageHandle = field(repr=False)
    status: ImageStatus = ImageStatus.PENDING
    analysis: ImageAnalysis | None = None
    error: str | None = None
    attempt: int = 0

    def as_dict(self, *, include_overlay: bool = True) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "size": self.size,
            "mime_type": self.mime_type,
            "status": self.status.value,
            "error": self.error,
            "analysis": (
                self.analysis.as_dict(include_overlay=include_overlay)
                if self.analysis is not None
                else None
            ),
        }
