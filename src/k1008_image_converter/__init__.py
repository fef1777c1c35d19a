"""GIMP header image to K-1008 card converter.

This package turns an indexed image exported by GIMP as C source code into
bit-plane data for one to four K-1008 cards used as a grayscale display, and
writes it as MOS Papertape, Intel HEX or CA65 assembly. It can be invoked
through the CLI (``kimg`` or ``python -m k1008_image_converter``) or imported
to convert a single header file.
"""

from .converter import (
    OUTPUT_FORMATS,
    ConvertOptions,
    convert_header_file,
    convert_header_text,
    parse_base_address,
    render_output,
    write_output,
)
from .errors import ConversionError
from .header import HeaderParser, parse_header, read_header
from .layout import CARD_MEMORY_SIZE, PixelGrid, PlaneBuffer, from_planes, to_planes
from .palette import DEFAULT_PALETTE, color_bits, parse_palette, read_palette
from .preview import render_preview, save_preview
from .records import INTEL_HEX, PAPERTAPE, write_ihex, write_papertape

__all__ = [
    "CARD_MEMORY_SIZE",
    "ConversionError",
    "ConvertOptions",
    "DEFAULT_PALETTE",
    "HeaderParser",
    "INTEL_HEX",
    "OUTPUT_FORMATS",
    "PAPERTAPE",
    "PixelGrid",
    "PlaneBuffer",
    "color_bits",
    "convert_header_file",
    "convert_header_text",
    "from_planes",
    "parse_base_address",
    "parse_header",
    "parse_palette",
    "read_header",
    "read_palette",
    "render_output",
    "render_preview",
    "save_preview",
    "to_planes",
    "write_ihex",
    "write_output",
    "write_papertape",
]
