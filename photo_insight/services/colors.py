"""Rank the dominant colors of a surface by sampled pixel frequency."""

from __future__ import annotations

from collections import Counter

from PIL import Image


def dominant_colors(surface: Image.Image, *, stride: int = 1000, limit: int = 3) -> list[str]:
    """Return up to ``limit`` ``#rrggbb`` values, most frequent first.

    Every ``stride``-th pixel is sampled starting with the first one. Exact
    colors are counted; equal counts keep the order in which the colors were
    first seen.
    """
    if stride < 1:
        raise ValueError("stride must be a positive integer")

    rgb = surface if surface.mode == "RGB" else surface.convert("RGB")
    raw = rgb.tobytes()
    counts: Counter[str] = Counter()
    for offset in range(0, len(raw), 3 * stride):
        red, green, blue = raw[offset], raw[offset + 1], raw[offset + 2]
        counts[f"#{red:02x}{green:02x}{blue:02x}"] += 1

    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [color for color, _ in ranked[:limit]]
