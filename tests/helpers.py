from __future__ import annotations

from typing import Iterable, Sequence

BLACK = (0, 0, 0)
WHITE = (255, 255, 255)

GRAY16 = [(v * 17, v * 17, v * 17) for v in range(16)]


def make_header(
    width: int,
    height: int,
    cmap: Sequence[tuple[int, int, int]],
    pixels: Iterable[int],
    per_line: int = 16,
) -> str:
    """Build a header file shaped like GIMP's C source export."""

    values = [str(p) for p in pixels]
    lines = [
        "/*  GIMP header image file format (INDEXED): /tmp/test.h  */",
        "",
        f"static unsigned int width = {width};",
        f"static unsigned int height = {height};",
        "",
        "/*  Call this macro repeatedly.  After each use, the pixel data can be extracted  */",
        "",
        "#define HEADER_PIXEL(data,pixel) {\\",
        "pixel[0] = header_data_cmap[(unsigned char)data[0]][0]; \\",
        "pixel[1] = header_data_cmap[(unsigned char)data[0]][1]; \\",
        "pixel[2] = header_data_cmap[(unsigned char)data[0]][2]; \\",
        "data ++; }",
        "",
        f"static char header_data_cmap[{len(cmap)}][3] = {{",
    ]
    lines += [f"\t{{{r:3d},{g:3d},{b:3d}}}," for r, g, b in cmap]
    lines += ["\t};", "static unsigned char header_data[] = {"]
    for i in range(0, len(values), per_line):
        lines.append("\t" + ",".join(values[i : i + per_line]) + ",")
    lines += ["\t};", ""]
    return "\n".join(lines)
