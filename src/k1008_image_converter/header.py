"""Reader for images exported by GIMP as C source headers (.h).

GIMP writes indexed images roughly like this::

    static unsigned int width = 320;
    static unsigned int height = 200;

    static char header_data_cmap[256][3] = {
        {  0,  0,  0},
        {255,255,255},
        ...
        };
    static unsigned char header_data[] = {
        0,0,1,1,0,
        ...
        };

The reader only relies on the width/height declarations, the color map rows
and the ``header_data`` array. Everything else is skipped.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence

from .errors import (
    BadPixelTokenError,
    ColorMapSizeMismatchError,
    FileAccessError,
    ImageTooLargeError,
    MalformedColorMapError,
    MissingGeometryError,
    PixelCountMismatchError,
    PixelIndexOutOfRangeError,
    UnknownColorError,
    UnterminatedImageDataError,
)
from .layout import MAX_IMAGE_SIZE, Geometry, PixelGrid
from .palette import Color

WIDTH_RE = re.compile(r"^\s*static\s+unsigned\s+int\s+width\s*=\s*(\d+)\s*;")
HEIGHT_RE = re.compile(r"^\s*static\s+unsigned\s+int\s+height\s*=\s*(\d+)\s*;")
CMAP_ENTRY_RE = re.compile(r"^\s*\{\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*\}\s*,?")
CMAP_LIKE_RE = re.compile(r"^\s*\{\s*\d")
DATA_START_RE = re.compile(r"^\s*static\s+unsigned\s+char\s+header_data\[\]\s*=\s*\{\s*$")
DATA_END = "};"
PIXEL_SEPARATOR_RE = re.compile(r"[\s,]+")


class ParserState(Enum):
    HEADER = "header"
    COLOR_MAP = "color_map"
    PIXELS = "pixels"
    DONE = "done"


@dataclass
class GeometryAccumulator:
    width: Optional[int] = None
    height: Optional[int] = None
    geometry: Optional[Geometry] = None

    def feed(self, line: str) -> None:
        if self.geometry is not None:
            return
        match = WIDTH_RE.match(line)
        if match and self.width is None:
            self.width = int(match.group(1))
        match = HEIGHT_RE.match(line)
        if match and self.height is None:
            self.height = int(match.group(1))
        if self.width is not None and self.height is not None:
            self.geometry = Geometry(self.width, self.height).validate()

    def require(self) -> Geometry:
        if self.geometry is None:
            missing = [
                name
                for name, value in (("width", self.width), ("height", self.height))
                if value is None
            ]
            raise MissingGeometryError(f"Can't get image dimensions (missing {', '.join(missing)})")
        return self.geometry


@dataclass
class ColorMapAccumulator:
    """Translation table from GIMP color map position to palette index."""

    palette: Sequence[Color]
    translation: List[int] = field(default_factory=list)
    closed: bool = False

    @property
    def complete(self) -> bool:
        return len(self.translation) == len(self.palette)

    def add(self, color: Color, line_number: int) -> None:
        if len(self.translation) == len(self.palette):
            raise ColorMapSizeMismatchError(
                f"line {line_number}: color map has more entries than the "
                f"{len(self.palette)} color palette"
            )
        for index, entry in enumerate(self.palette):
            if entry == color:
                self.translation.append(index)
                return
        raise UnknownColorError(f"line {line_number}: color {color} is not in the palette")


@dataclass
class PixelAccumulator:
    translation: Sequence[int]
    pixels: bytearray = field(default_factory=bytearray)

    def feed(self, line: str, line_number: int) -> None:
        for token in PIXEL_SEPARATOR_RE.split(line.strip()):
            if not token:
                continue
            if not (token.isascii() and token.isdigit()) or int(token) > 255:
                raise BadPixelTokenError(f"line {line_number}: bad image data {token!r}")
            value = int(token)
            if value >= len(self.translation):
                raise PixelIndexOutOfRangeError(
                    f"line {line_number}: pixel value {value} is outside the "
                    f"{len(self.translation)} entry color map"
                )
            if len(self.pixels) >= MAX_IMAGE_SIZE:
                raise ImageTooLargeError(f"Image is too big (more than {MAX_IMAGE_SIZE} pixels)")
            self.pixels.append(self.translation[value])


class HeaderParser:
    """Line driven state machine turning a GIMP header into a PixelGrid.

    ``HEADER`` collects the width/height declarations and waits for either a
    color map row or the ``header_data`` array. ``COLOR_MAP`` collects map rows
    until the first other line. ``PIXELS`` reads pixel values until ``};``.
    """

    def __init__(self, palette: Sequence[Color]) -> None:
        self.palette = list(palette)
        self.state = ParserState.HEADER
        self.line_number = 0
        self._geometry = GeometryAccumulator()
        self._color_map = ColorMapAccumulator(self.palette)
        self._pixels: Optional[PixelAccumulator] = None

    def feed_line(self, line: str) -> None:
        self.line_number += 1
        if self.state is ParserState.HEADER:
            self._scan_header(line)
        elif self.state is ParserState.COLOR_MAP:
            self._collect_color_map(line)
        elif self.state is ParserState.PIXELS:
            self._collect_pixels(line)

    def feed(self, text: str) -> None:
        for line in text.splitlines():
            self.feed_line(line)

    def finish(self) -> PixelGrid:
        if self.state is not ParserState.DONE:
            self._geometry.require()
            if self.state is ParserState.PIXELS:
                raise UnterminatedImageDataError("Can't find image data end")
            raise UnterminatedImageDataError("Can't find image data")

        geometry = self._geometry.require()
        assert self._pixels is not None
        pixels = self._pixels.pixels
        if len(pixels) != geometry.pixel_count:
            raise PixelCountMismatchError(
                f"Image has {len(pixels)} pixels, expected {geometry.pixel_count} "
                f"for {geometry.width}x{geometry.height} (bad image file?)"
            )
        return PixelGrid(geometry=geometry, pixels=bytes(pixels))

    @property
    def geometry(self) -> Optional[Geometry]:
        return self._geometry.geometry

    def _scan_header(self, line: str) -> None:
        self._geometry.feed(line)

        if CMAP_LIKE_RE.match(line):
            if self._color_map.closed:
                raise MalformedColorMapError(
                    f"line {self.line_number}: unexpected second color map"
                )
            self.state = ParserState.COLOR_MAP
            self._collect_color_map(line)
            return

        if DATA_START_RE.match(line):
            self._geometry.require()
            if not self._color_map.complete:
                raise ColorMapSizeMismatchError(
                    f"Color map has {len(self._color_map.translation)} entries, "
                    f"palette has {len(self.palette)}"
                )
            self._pixels = PixelAccumulator(self._color_map.translation)
            self.state = ParserState.PIXELS

    def _collect_color_map(self, line: str) -> None:
        match = CMAP_ENTRY_RE.match(line)
        if match:
            components = tuple(int(value) for value in match.groups())
            if any(value > 255 for value in components):
                raise MalformedColorMapError(
                    f"line {self.line_number}: color component out of range {components}"
                )
            self._color_map.add(components, self.line_number)  # type: ignore[arg-type]
            return

        if CMAP_LIKE_RE.match(line):
            raise MalformedColorMapError(f"line {self.line_number}: bad color map entry")

        if not self._color_map.complete:
            raise MalformedColorMapError(
                f"line {self.line_number}: color map ends after "
                f"{len(self._color_map.translation)} of {len(self.palette)} colors"
            )
        self._color_map.closed = True
        self.state = ParserState.HEADER
        self._scan_header(line)

    def _collect_pixels(self, line: str) -> None:
        assert self._pixels is not None
        if DATA_END in line:
            self.state = ParserState.DONE
            return
        self._pixels.feed(line, self.line_number)


def parse_header(text: str, palette: Sequence[Color]) -> PixelGrid:
    parser = HeaderParser(palette)
    parser.feed(text)
    return parser.finish()


def read_header(path: str | Path, palette: Sequence[Color]) -> PixelGrid:
    path = Path(path)
    try:
        text = path.read_text(encoding="latin-1")
    except FileNotFoundError as exc:
        raise FileAccessError(f"Image file not found: {path}") from exc
    except OSError as exc:
        raise FileAccessError(f"Failed to read image file: {path}") from exc
    return parse_header(text, palette)
