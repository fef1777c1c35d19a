"""PNG preview of what the cards will display."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from PIL import Image

from .errors import FileAccessError
from .layout import PlaneBuffer, from_planes
from .palette import Color


def render_preview(planes: PlaneBuffer, palette: Sequence[Color]) -> Image.Image:
    """Decode the packed planes and paint them with ``palette``.

    Indices without a palette entry (possible when the palette size is not a
    power of two and the planes were edited by hand) are drawn black.
    """

    grid = from_planes(planes)
    geometry = grid.geometry
    colors = list(palette)
    preview = Image.new("RGB", (geometry.width, geometry.height))
    preview.putdata([colors[idx] if idx < len(colors) else (0, 0, 0) for idx in grid.pixels])
    return preview


def save_preview(planes: PlaneBuffer, palette: Sequence[Color], path: str | Path) -> Path:
    path = Path(path)
    image = render_preview(planes, palette)
    try:
        image.save(path, format="PNG")
    except OSError as exc:
        raise FileAccessError(f"Failed to write preview: {path}") from exc
    return path
