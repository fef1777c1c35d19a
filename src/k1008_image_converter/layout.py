"""Card memory layout and bit-plane packing.

Reference: K-1008 grayscale display (app note #2)

Each K-1008 card holds one 320x200 monochrome frame in 8 KiB of memory.
A grayscale image is split into bit-planes and every plane lives on its own
card, so a 16 level image needs four cards:

Card      | Offset from base | Contents
----------|------------------|------------------------------------------
MASTER    | 0000h-1FFFh      | bit 0 of every pixel
SLAVE_1   | 2000h-3FFFh      | bit 1
SLAVE_2   | 4000h-5FFFh      | bit 2
SLAVE_3   | 6000h-7FFFh      | bit 3

Within a card a display line is 40 bytes; the leftmost pixel of each group of
eight is the most significant bit.
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import GeometryOutOfRangeError, TooManyBitPlanesError

CARD_MEMORY_SIZE = 0x2000
MAX_CARDS = 4
MAX_COL_BYTES = 40
MAX_ROWS = 200
MAX_WIDTH = MAX_COL_BYTES * 8
MAX_HEIGHT = MAX_ROWS
MAX_IMAGE_SIZE = MAX_WIDTH * MAX_HEIGHT

CARD_NAMES = ("MASTER", "SLAVE_1", "SLAVE_2", "SLAVE_3")


@dataclass(frozen=True)
class Geometry:
    width: int
    height: int

    @property
    def row_bytes(self) -> int:
        """Packed bytes per image row in one plane."""
        return (self.width + 7) // 8

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    def validate(self) -> "Geometry":
        if not (1 <= self.width <= MAX_WIDTH and 1 <= self.height <= MAX_HEIGHT):
            raise GeometryOutOfRangeError(
                f"Image is {self.width}x{self.height}; "
                f"size must be between 1x1 and {MAX_WIDTH}x{MAX_HEIGHT}"
            )
        return self


@dataclass(frozen=True)
class PixelGrid:
    """Palette indices of an image, row-major."""

    geometry: Geometry
    pixels: bytes

    def __post_init__(self) -> None:
        if len(self.pixels) != self.geometry.pixel_count:
            raise ValueError(
                f"PixelGrid expects {self.geometry.pixel_count} pixels, got {len(self.pixels)}"
            )

    def row(self, y: int) -> bytes:
        width = self.geometry.width
        return self.pixels[y * width : (y + 1) * width]


@dataclass(frozen=True)
class PlaneBuffer:
    """One card image per bit-plane, laid out back to back."""

    geometry: Geometry
    color_bits: int
    memory: bytes

    @property
    def plane_size(self) -> int:
        """Meaningful bytes in each plane."""
        return self.geometry.row_bytes * self.geometry.height

    def plane(self, index: int) -> bytes:
        self._check_index(index)
        start = index * CARD_MEMORY_SIZE
        return self.memory[start : start + CARD_MEMORY_SIZE]

    def plane_data(self, index: int) -> bytes:
        self._check_index(index)
        start = index * CARD_MEMORY_SIZE
        return self.memory[start : start + self.plane_size]

    def row(self, index: int, y: int) -> bytes:
        self._check_index(index)
        row_bytes = self.geometry.row_bytes
        start = index * CARD_MEMORY_SIZE + y * row_bytes
        return self.memory[start : start + row_bytes]

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self.color_bits:
            raise IndexError(f"bit-plane {index} out of range (0-{self.color_bits - 1})")


def _check_color_bits(color_bits: int) -> None:
    if color_bits < 1 or color_bits > MAX_CARDS:
        raise TooManyBitPlanesError(
            f"{color_bits} bit-planes requested; between 1 and {MAX_CARDS} cards are supported"
        )


def to_planes(grid: PixelGrid, color_bits: int) -> PlaneBuffer:
    """Pack palette indices into one byte buffer per bit-plane.

    For every row the pixels are taken eight at a time. Bit ``p`` of the
    first pixel of a group lands in bit 7 of the group's byte in plane ``p``,
    the eighth pixel in bit 0. A short group at the end of a row leaves its
    low bits clear. Rows follow each other without padding and each plane
    starts on its own card boundary.
    """

    _check_color_bits(color_bits)
    geometry = grid.geometry
    width = geometry.width
    row_bytes = geometry.row_bytes
    memory = bytearray(CARD_MEMORY_SIZE * color_bits)

    for y in range(geometry.height):
        row = grid.row(y)
        for group in range(row_bytes):
            block = row[group * 8 : min(group * 8 + 8, width)]
            for cbit in range(color_bits):
                value = 0
                for pixel, color in enumerate(block):
                    value |= ((color >> cbit) & 1) << (7 - pixel)
                memory[cbit * CARD_MEMORY_SIZE + y * row_bytes + group] = value

    return PlaneBuffer(geometry=geometry, color_bits=color_bits, memory=bytes(memory))


def from_planes(planes: PlaneBuffer) -> PixelGrid:
    """Rebuild palette indices from packed bit-planes."""

    geometry = planes.geometry
    width = geometry.width
    pixels = bytearray(geometry.pixel_count)

    for cbit in range(planes.color_bits):
        data = planes.plane_data(cbit)
        for y in range(geometry.height):
            for x in range(width):
                byte = data[y * geometry.row_bytes + x // 8]
                if byte & (0x80 >> (x & 7)):
                    pixels[y * width + x] |= 1 << cbit

    return PixelGrid(geometry=geometry, pixels=bytes(pixels))
