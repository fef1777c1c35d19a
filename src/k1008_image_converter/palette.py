"""Display palettes and the GIMP palette (.gpl) loader."""

from __future__ import annotations

import warnings
from pathlib import Path
from typing import List, Sequence, Tuple

from .errors import FileAccessError, PaletteFormatError, TooManyColorsError

Color = Tuple[int, int, int]

MAX_PALETTE_SIZE = 16
PALETTE_SIGNATURE = "GIMP Palette"

# 1-bit black & white, used when no palette file is given.
DEFAULT_PALETTE: List[Color] = [
    (0, 0, 0),
    (255, 255, 255),
]


def color_bits(ncolors: int) -> int:
    """Return the number of bit-planes needed to index ``ncolors`` colors.

    This is ``ceil(log2(ncolors))`` with a floor of one plane, so a two color
    palette needs a single card and a full 16 color palette needs four.
    """

    if ncolors < 1:
        raise PaletteFormatError("Palette has no colors")
    if ncolors > MAX_PALETTE_SIZE:
        raise TooManyColorsError(f"Too many colors: {ncolors} (max. is {MAX_PALETTE_SIZE})")
    return max(1, (ncolors - 1).bit_length())


def check_palette_size(palette: Sequence[Color]) -> int:
    """Return the bit-plane count for ``palette`` and warn about unused indices."""

    bits = color_bits(len(palette))
    capacity = 1 << bits
    if len(palette) != capacity:
        warnings.warn(
            f"{len(palette)} colors use {bits} bit-plane(s); "
            f"indices {len(palette)}-{capacity - 1} are never produced",
            RuntimeWarning,
            stacklevel=2,
        )
    return bits


def _is_uint(token: str) -> bool:
    return token.isascii() and token.isdigit()


def _parse_component(token: str, line_number: int, source: str) -> int:
    if not _is_uint(token):
        raise PaletteFormatError(f"{source}:{line_number}: bad color component {token!r}")
    value = int(token)
    if value > 255:
        raise PaletteFormatError(
            f"{source}:{line_number}: color component out of range: {value}"
        )
    return value


def parse_palette(text: str, source: str = "<palette>") -> List[Color]:
    lines = text.splitlines()
    if not lines or lines[0].rstrip() != PALETTE_SIGNATURE:
        raise PaletteFormatError(f"Unknown palette file format: {source}")

    palette: List[Color] = []
    for line_number, line in enumerate(lines[1:], start=2):
        tokens = line.split()
        # Name:, Columns:, comments and blank lines carry no color.
        if not tokens or not _is_uint(tokens[0]):
            continue
        if len(tokens) < 3:
            raise PaletteFormatError(f"{source}:{line_number}: expected three color components")
        if len(palette) == MAX_PALETTE_SIZE:
            raise TooManyColorsError(
                f"Too many colors in {source} (max. is {MAX_PALETTE_SIZE})"
            )
        r, g, b = (_parse_component(tok, line_number, source) for tok in tokens[:3])
        palette.append((r, g, b))

    if not palette:
        raise PaletteFormatError(f"No colors found in palette file: {source}")
    return palette


def read_palette(path: str | Path) -> List[Color]:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise FileAccessError(f"Palette file not found: {path}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise FileAccessError(f"Failed to read palette file: {path}") from exc
    return parse_palette(text, source=str(path))


def format_palette_text(palette: Sequence[Color]) -> str:
    entries = [f"{idx}: ({r},{g},{b})" for idx, (r, g, b) in enumerate(palette)]
    return ", ".join(entries)
