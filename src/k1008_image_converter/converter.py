"""Conversion pipeline: GIMP header -> bit-planes -> output file."""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Sequence, TextIO

from .asm import write_asm
from .errors import FileAccessError, InvalidBaseAddressError, UnknownOutputFormatError
from .header import parse_header, read_header
from .layout import CARD_MEMORY_SIZE, PlaneBuffer, to_planes
from .palette import DEFAULT_PALETTE, Color, check_palette_size
from .records import check_address_range, write_ihex, write_papertape

MIN_BASE_ADDRESS = 0x2000
MAX_BASE_ADDRESS = 0xA000
DEFAULT_BASE_ADDRESS = MIN_BASE_ADDRESS
DEFAULT_FORMAT = "pap"


@dataclass(frozen=True)
class OutputFormat:
    name: str
    description: str
    writer: Callable[[TextIO, PlaneBuffer, int], object]
    addressed: bool = True


def _write_asm(stream: TextIO, planes: PlaneBuffer, base_address: int) -> None:
    # The assembler places the data, so the base address is not used.
    write_asm(stream, planes)


OUTPUT_FORMATS: Dict[str, OutputFormat] = {
    fmt.name: fmt
    for fmt in (
        OutputFormat("pap", "MOS Papertape (default)", write_papertape),
        OutputFormat("ihex", "Intel HEX", write_ihex),
        OutputFormat("asm", "CA65 assembly code", _write_asm, addressed=False),
    )
}


@dataclass
class ConvertOptions:
    """Options for card addressing, output format and palette."""

    base_address: int = DEFAULT_BASE_ADDRESS
    output_format: str = DEFAULT_FORMAT
    palette: List[Color] = field(default_factory=lambda: list(DEFAULT_PALETTE))


def get_output_format(name: str) -> OutputFormat:
    try:
        return OUTPUT_FORMATS[name]
    except KeyError as exc:
        raise UnknownOutputFormatError(
            f"Unknown format: {name} (choose from {', '.join(OUTPUT_FORMATS)})"
        ) from exc


def validate_base_address(address: int) -> int:
    if (
        address < MIN_BASE_ADDRESS
        or address > MAX_BASE_ADDRESS
        or address % CARD_MEMORY_SIZE
    ):
        raise InvalidBaseAddressError(
            f"Invalid base address {address:04X}h: must be a multiple of "
            f"{CARD_MEMORY_SIZE:04X}h between {MIN_BASE_ADDRESS:04X}h and {MAX_BASE_ADDRESS:04X}h"
        )
    return address


def parse_base_address(text: str) -> int:
    """Parse a hexadecimal base address such as ``4000`` or ``0x4000``."""

    try:
        address = int(text.strip(), 16)
    except ValueError as exc:
        raise InvalidBaseAddressError(f"Invalid base address: {text!r}") from exc
    return validate_base_address(address)


def default_output_path(input_path: str | Path, output_format: str) -> Path:
    return Path(input_path).with_suffix(f".{output_format}")


def convert_header_text(text: str, palette: Sequence[Color] = DEFAULT_PALETTE) -> PlaneBuffer:
    bits = check_palette_size(palette)
    grid = parse_header(text, palette)
    return to_planes(grid, bits)


def convert_header_file(path: str | Path, options: ConvertOptions | None = None) -> PlaneBuffer:
    options = options or ConvertOptions()
    bits = check_palette_size(options.palette)
    grid = read_header(path, options.palette)
    return to_planes(grid, bits)


def render_output(planes: PlaneBuffer, options: ConvertOptions | None = None) -> str:
    options = options or ConvertOptions()
    fmt = get_output_format(options.output_format)
    validate_base_address(options.base_address)
    buffer = io.StringIO()
    fmt.writer(buffer, planes, options.base_address)
    return buffer.getvalue()


def write_output(
    planes: PlaneBuffer, path: str | Path, options: ConvertOptions | None = None
) -> Path:
    """Write ``planes`` to ``path``.

    A failed write leaves whatever was already written in place.
    """

    options = options or ConvertOptions()
    fmt = get_output_format(options.output_format)
    validate_base_address(options.base_address)
    if fmt.addressed:
        check_address_range(planes, options.base_address)
    path = Path(path)
    try:
        with path.open("w", encoding="ascii", newline="\n") as stream:
            fmt.writer(stream, planes, options.base_address)
    except OSError as exc:
        raise FileAccessError(f"Error writing output file: {path}") from exc
    return path
