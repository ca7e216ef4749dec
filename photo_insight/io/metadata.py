"""Read camera EXIF fields and GPS coordinates embedded in image files."""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from datetime import datetime

import piexif
from PIL import Image

from ..errors import PhotoInsightError
from ..records import CameraInfo, GeoLocation

logger = logging.getLogger(__name__)

EXIF_DATETIME_FORMAT = "%Y:%m:%d %H:%M:%S"
TIFF_MAGIC = (b"II*\x00", b"MM\x00*")


class MetadataExtractionFailure(PhotoInsightError):
    """Raised internally when embedded metadata cannot be parsed."""


@dataclass(slots=True, frozen=True)
class MetadataResult:
    """Partial metadata; either part may be missing."""

    exif: CameraInfo | None = None
    location: GeoLocation | None = None

    @property
    def is_empty(self) -> bool:
        return (self.exif is None or self.exif.is_empty) and self.location is None


def _ensure_bytes(raw: object) -> bytes:
    if isinstance(raw, (bytes, bytearray, memoryview)):
        return bytes(raw)
    if isinstance(raw, (tuple, list)):
        try:
            return bytes(int(item) & 0xFF for item in raw)
        except (TypeError, ValueError):
            return b""
    return b""


def _decode_text(raw: object) -> str | None:
    if isinstance(raw, str):
        text = raw
    else:
        text = _ensure_bytes(raw).decode("utf-8", errors="ignore")
    text = text.strip("\x00").strip()
    return text or None


def _rational(raw: object) -> float | None:
    if isinstance(raw, (int, float)):
        return float(raw)
    if isinstance(raw, (tuple, list)) and len(raw) == 2:
        numerator, denominator = raw
        if denominator:
            return numerator / denominator
    return None


def _as_int(raw: object) -> int | None:
    if isinstance(raw, (tuple, list)):
        raw = raw[0] if raw else None
    if isinstance(raw, int):
        return raw
    return None


def _format_datetime(raw: object) -> str | None:
    text = _decode_text(raw)
    if text is None:
        return None
    try:
        return datetime.strptime(text, EXIF_DATETIME_FORMAT).strftime("%Y-%m-%d %H:%M:%S")
    except ValueError:
        return text


def _format_exposure(seconds: float | None) -> str | None:
    if seconds is None or seconds <= 0:
        return None
    if seconds < 1:
        return f"1/{int(1 / seconds + 0.5)}"
    return f"{seconds:g}"


def _format_f_number(value: float | None) -> str | None:
    if not value:
        return None
    return f"f/{value:g}"


def _dms_to_degrees(raw: object, ref: object) -> float | None:
    if not isinstance(raw, (tuple, list)) or len(raw) != 3:
        return None
    parts = [_rational(item) for item in raw]
    if any(part is None for part in parts):
        return None
    degrees, minutes, seconds = parts
    value = degrees + minutes / 60 + seconds / 3600
    if (_decode_text(ref) or "").upper() in {"S", "W"}:
        value = -value
    return value


class MetadataExtractor:
    """Parse embedded metadata from original source bytes.

    Only the EXIF blob is read; pixels are never decoded. :meth:`extract`
    never raises: unreadable or missing metadata yields an empty result.
    """

    def extract(self, source: bytes) -> MetadataResult:
        try:
            return self._parse(source)
        except MetadataExtractionFailure as exc:
            logger.warning("EXIF extraction failed: %s", exc)
            return MetadataResult()

    def _parse(self, source: bytes) -> MetadataResult:
        try:
            with Image.open(io.BytesIO(source)) as image:
                exif_blob = image.info.get("exif")
                if not exif_blob:
                    exif_blob = self._fallback_blob(source, image)
        except Exception as exc:
            raise MetadataExtractionFailure(f"unreadable image data: {exc}") from exc

        if not exif_blob:
            return MetadataResult()

        try:
            exif_dict = piexif.load(exif_blob)
        except Exception as exc:
            raise MetadataExtractionFailure(f"malformed EXIF block: {exc}") from exc

        zeroth = exif_dict.get("0th") or {}
        exif_ifd = exif_dict.get("Exif") or {}
        gps = exif_dict.get("GPS") or {}

        camera = CameraInfo(
            make=_decode_text(zeroth.get(piexif.ImageIFD.Make)),
            model=_decode_text(zeroth.get(piexif.ImageIFD.Model)),
            date_time=_format_datetime(
                exif_ifd.get(piexif.ExifIFD.DateTimeOriginal)
                or zeroth.get(piexif.ImageIFD.DateTime)
            ),
            iso=_as_int(exif_ifd.get(piexif.ExifIFD.ISOSpeedRatings)),
            exposure_time=_format_exposure(_rational(exif_ifd.get(piexif.ExifIFD.ExposureTime))),
            f_number=_format_f_number(_rational(exif_ifd.get(piexif.ExifIFD.FNumber))),
        )

        latitude = _dms_to_degrees(
            gps.get(piexif.GPSIFD.GPSLatitude), gps.get(piexif.GPSIFD.GPSLatitudeRef)
        )
        longitude = _dms_to_degrees(
            gps.get(piexif.GPSIFD.GPSLongitude), gps.get(piexif.GPSIFD.GPSLongitudeRef)
        )
        location = None
        if latitude is not None and longitude is not None:
            location = GeoLocation(lat=latitude, lng=longitude)

        return MetadataResult(
            exif=None if camera.is_empty else camera,
            location=location,
        )

    @staticmethod
    def _fallback_blob(source: bytes, image: Image.Image) -> bytes | None:
        # TIFF keeps EXIF in its own IFDs, so Pillow leaves info["exif"] unset.
        if bytes(source[:4]) in TIFF_MAGIC:
            return bytes(source)
        embedded = image.getexif()
        return embedded.tobytes() if embedded else None
