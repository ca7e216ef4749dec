"""Draw detected face boxes and landmarks onto a copy of the surface."""

from __future__ import annotations

import base64
import io
from typing import Sequence

from PIL import Image, ImageDraw

from ..models.base import RawFace

BOX_COLOR = (0, 136, 255)
LANDMARK_COLOR = (255, 214, 0)


def encode_data_url(image: Image.Image, *, quality: int = 80) -> str:
    """Encode an image as a base64 JPEG ``data:`` URL."""
    buffer = io.BytesIO()
    image.convert("RGB").save(buffer, format="JPEG", quality=quality)
    encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
    return f"data:image/jpeg;base64,{encoded}"


def render_overlay(surface: Image.Image, faces: Sequence[RawFace], *, quality: int = 80) -> str:
    """Return a data URL of ``surface`` with every face box and landmark drawn."""
    canvas = surface.convert("RGB")  # always a copy
    draw = ImageDraw.Draw(canvas)
    stroke = max(2, round(max(canvas.size) / 400))

    for face in faces:
        box = face.box
        draw.rectangle(
            (box.x, box.y, box.x + box.width, box.y + box.height),
            outline=BOX_COLOR,
            width=stroke,
        )
        for x, y in face.landmarks:
            draw.ellipse((x - stroke, y - stroke, x + stroke, y + stroke), fill=LANDMARK_COLOR)

    return encode_data_url(canvas, quality=quality)
