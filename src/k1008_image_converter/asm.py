"""CA65 assembly source output."""

from __future__ import annotations

from typing import TextIO

from .errors import FileAccessError
from .layout import CARD_NAMES, PlaneBuffer

BYTES_PER_LINE = 16


def format_asm(planes: PlaneBuffer) -> str:
    geometry = planes.geometry
    out = [f"X_SIZE\t= {geometry.width}\n", f"Y_SIZE\t= {geometry.height}\n"]

    for cbit in range(planes.color_bits):
        out.append(f"\n\n{CARD_NAMES[cbit]}:")
        data = planes.plane_data(cbit)
        for i in range(0, len(data), BYTES_PER_LINE):
            chunk = ", ".join(f"${b:02x}" for b in data[i : i + BYTES_PER_LINE])
            out.append(f"\n\t\t.BYTE\t{chunk}")

    out.append("\n")
    return "".join(out)


def write_asm(stream: TextIO, planes: PlaneBuffer) -> None:
    try:
        stream.write(format_asm(planes))
    except OSError as exc:
        raise FileAccessError(f"Error writing assembly output: {exc}") from exc
