import pytest

from k1008_image_converter.errors import FileAccessError, PaletteFormatError, TooManyColorsError
from k1008_image_converter.palette import (
    DEFAULT_PALETTE,
    check_palette_size,
    color_bits,
    format_palette_text,
    parse_palette,
    read_palette,
)

GRAY4_GPL = """GIMP Palette
Name: gray4
Columns: 4
#
  0   0   0\tBlack
 85  85  85\tDark gray
170 170 170\tLight gray
255 255 255\tWhite
"""


@pytest.mark.parametrize(
    "ncolors, expected",
    [(1, 1), (2, 1), (3, 2), (4, 2), (5, 3), (8, 3), (9, 4), (16, 4)],
)
def test_color_bits(ncolors, expected):
    assert color_bits(ncolors) == expected


def test_color_bits_rejects_oversized_palette():
    with pytest.raises(TooManyColorsError):
        color_bits(17)


def test_default_palette_is_one_bit_black_and_white():
    assert DEFAULT_PALETTE == [(0, 0, 0), (255, 255, 255)]
    assert check_palette_size(DEFAULT_PALETTE) == 1


def test_parse_gimp_palette():
    palette = parse_palette(GRAY4_GPL)

    assert palette == [(0, 0, 0), (85, 85, 85), (170, 170, 170), (255, 255, 255)]


def test_parse_palette_requires_signature():
    with pytest.raises(PaletteFormatError):
        parse_palette("JASC-PAL\n0 0 0\n")


def test_parse_palette_rejects_short_color_line():
    with pytest.raises(PaletteFormatError):
        parse_palette("GIMP Palette\n12 34\n")


def test_parse_palette_rejects_component_over_255():
    with pytest.raises(PaletteFormatError):
        parse_palette("GIMP Palette\n0 300 0 Bad\n")


def test_parse_palette_requires_colors():
    with pytest.raises(PaletteFormatError):
        parse_palette("GIMP Palette\nName: empty\n#\n")


def test_parse_palette_rejects_more_than_16_colors():
    text = "GIMP Palette\n" + "".join(f"{i} {i} {i}\tc{i}\n" for i in range(17))

    with pytest.raises(TooManyColorsError):
        parse_palette(text)


def test_non_power_of_two_palette_warns():
    with pytest.warns(RuntimeWarning):
        assert check_palette_size([(0, 0, 0), (128, 128, 128), (255, 255, 255)]) == 2


def test_read_palette_file(tmp_path):
    path = tmp_path / "gray4.gpl"
    path.write_text(GRAY4_GPL, encoding="utf-8")

    assert len(read_palette(path)) == 4


def test_read_palette_missing_file(tmp_path):
    with pytest.raises(FileAccessError):
        read_palette(tmp_path / "missing.gpl")


def test_format_palette_text():
    assert format_palette_text(DEFAULT_PALETTE) == "0: (0,0,0), 1: (255,255,255)"
