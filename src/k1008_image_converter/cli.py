"""Command line interface for the K-1008 image converter."""

from __future__ import annotations

import argparse
import sys
import warnings
from pathlib import Path

from .converter import (
    DEFAULT_BASE_ADDRESS,
    DEFAULT_FORMAT,
    MAX_BASE_ADDRESS,
    MIN_BASE_ADDRESS,
    OUTPUT_FORMATS,
    ConvertOptions,
    convert_header_file,
    default_output_path,
    get_output_format,
    parse_base_address,
    write_output,
)
from .errors import ConversionError
from .layout import MAX_HEIGHT, MAX_WIDTH
from .palette import DEFAULT_PALETTE, format_palette_text, read_palette
from .preview import save_preview


def build_parser() -> argparse.ArgumentParser:
    formats_text = "\n".join(f"  {fmt.name}\t- {fmt.description}" for fmt in OUTPUT_FORMATS.values())

    parser = argparse.ArgumentParser(
        prog="kimg",
        description=(
            "Convert GIMP C source header images (.h) into bit-plane data for one to four "
            "K-1008 cards driven as a grayscale display.\n"
            f"Images up to {MAX_WIDTH}x{MAX_HEIGHT}; one card per bit-plane.\n\n"
            f"Supported formats:\n{formats_text}"
        ),
        epilog=(
            "If no output file is specified, the input file name with the format name as "
            "extension is used.\n"
            f"If no palette file is specified, 1-bit black & white is assumed: "
            f"{format_palette_text(DEFAULT_PALETTE)}\n"
            f"Default base address is {DEFAULT_BASE_ADDRESS:04X}. "
            f"Min. is {MIN_BASE_ADDRESS:04X}, max. is {MAX_BASE_ADDRESS:04X}."
        ),
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument("-i", "--input", required=True, help="GIMP C source header image")
    parser.add_argument("-o", "--output", help="Output file")
    parser.add_argument("-p", "--palette", help="GIMP palette file (.gpl)")
    parser.add_argument(
        "-f",
        "--format",
        default=DEFAULT_FORMAT,
        help=f"Output format (default: {DEFAULT_FORMAT})",
    )
    parser.add_argument(
        "-a",
        "--base-address",
        default=f"{DEFAULT_BASE_ADDRESS:04X}",
        help="Hexadecimal address of the first card (default: %(default)s)",
    )
    parser.add_argument(
        "--preview",
        help="Also write a PNG rendering of the converted planes",
    )
    return parser


def run(args: argparse.Namespace) -> None:
    options = ConvertOptions()
    options.output_format = get_output_format(args.format).name
    options.base_address = parse_base_address(args.base_address)

    output = Path(args.output) if args.output else None
    if output is None:
        output = default_output_path(args.input, options.output_format)
        print(f"Output file is '{output}'")

    if args.palette:
        options.palette = read_palette(args.palette)
        print(f"Palette: {format_palette_text(options.palette)}")
    else:
        print("Using default 1-bit black & white palette.")

    planes = convert_header_file(args.input, options)
    geometry = planes.geometry
    print(f"Image dimensions: {geometry.width}x{geometry.height} pixels")
    print(f"Image size: {geometry.pixel_count} pixels")
    print(f"Color bits: {planes.color_bits}")

    write_output(planes, output, options)
    print(f"wrote {output}")

    if args.preview:
        target = save_preview(planes, options.palette, args.preview)
        print(f"wrote {target}")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            try:
                run(args)
            finally:
                for warning in caught:
                    print(f"Warning: {warning.message}", file=sys.stderr)
        return 0
    except ConversionError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
