from helpers import BLACK, WHITE, make_header

from k1008_image_converter.cli import build_parser, main

GRAY4_GPL = "GIMP Palette\nName: gray4\n#\n0 0 0 a\n85 85 85 b\n170 170 170 c\n255 255 255 d\n"


def _write_image(tmp_path, text=None):
    source = tmp_path / "cat.h"
    source.write_text(text or make_header(8, 1, [BLACK, WHITE], [1] * 8), encoding="ascii")
    return source


def test_parser_defaults():
    args = build_parser().parse_args(["-i", "cat.h"])

    assert args.format == "pap"
    assert args.base_address == "2000"
    assert args.output is None
    assert args.palette is None


def test_default_output_name(tmp_path, capsys):
    source = _write_image(tmp_path)

    assert main(["-i", str(source)]) == 0

    output = tmp_path / "cat.pap"
    assert output.read_text() == ";012000FF0120\n;0000010001\n"
    out = capsys.readouterr().out
    assert f"Output file is '{output}'" in out
    assert "Using default 1-bit black & white palette." in out
    assert "Color bits: 1" in out


def test_explicit_output_format_and_address(tmp_path):
    source = _write_image(tmp_path)
    target = tmp_path / "out.hex"

    assert main(["-i", str(source), "-o", str(target), "-f", "ihex", "-a", "4000"]) == 0

    assert target.read_text().splitlines() == [":01400000FFC0", ":00000001FF"]


def test_palette_file_and_preview(tmp_path):
    palette = tmp_path / "gray4.gpl"
    palette.write_text(GRAY4_GPL, encoding="utf-8")
    cmap = [(0, 0, 0), (85, 85, 85), (170, 170, 170), (255, 255, 255)]
    source = _write_image(tmp_path, make_header(4, 1, cmap, [0, 1, 2, 3]))
    preview = tmp_path / "cat.png"

    assert main(["-i", str(source), "-p", str(palette), "--preview", str(preview)]) == 0

    lines = (tmp_path / "cat.pap").read_text().splitlines()
    assert lines[0].startswith(";01200050")
    assert lines[1].startswith(";01400030")
    assert preview.exists()


def test_bad_pixel_token_writes_no_output(tmp_path, capsys):
    source = _write_image(
        tmp_path, make_header(2, 1, [BLACK, WHITE], [0, 1]).replace("\t0,1,", "\t0,12x,")
    )

    assert main(["-i", str(source)]) == 1

    assert not (tmp_path / "cat.pap").exists()
    assert "12x" in capsys.readouterr().err


def test_unknown_format(tmp_path, capsys):
    source = _write_image(tmp_path)

    assert main(["-i", str(source), "-f", "bin"]) == 1
    assert "Unknown format" in capsys.readouterr().err


def test_invalid_base_address(tmp_path):
    source = _write_image(tmp_path)

    assert main(["-i", str(source), "-a", "3000"]) == 1


def test_missing_input_file(tmp_path, capsys):
    assert main(["-i", str(tmp_path / "missing.h")]) == 1
    assert "not found" in capsys.readouterr().err


def test_odd_palette_prints_warning(tmp_path, capsys):
    palette = tmp_path / "gray3.gpl"
    palette.write_text("GIMP Palette\n0 0 0\n128 128 128\n255 255 255\n", encoding="utf-8")
    cmap = [(0, 0, 0), (128, 128, 128), (255, 255, 255)]
    source = _write_image(tmp_path, make_header(3, 1, cmap, [0, 1, 2]))

    assert main(["-i", str(source), "-p", str(palette)]) == 0
    assert "Warning:" in capsys.readouterr().err
