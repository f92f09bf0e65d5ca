import pytest

from main import build_parser, main
from terminal_renderer import format_pixel


@pytest.fixture
def gray_file(tmp_path, gray_2x2):
    path = tmp_path / "gray.bmp"
    path.write_bytes(gray_2x2(height=2))
    return path


def test_parser_defaults():
    args = build_parser().parse_args([])
    assert args.paths == []
    assert not args.info
    assert not args.strict
    assert args.verbose == 0


def test_no_paths_succeeds(capsys):
    assert main([]) == 0
    assert capsys.readouterr().out == ""


def test_info_only(gray_file, capsys):
    assert main(["--info", str(gray_file)]) == 0
    out = capsys.readouterr().out
    assert out == (
        f"\"{gray_file}\" (62B) 'B' 'M' 2x2 (4B row) 8bpp BITMAPINFOHEADER (40B)\n"
    )


def test_render_top_row_first(gray_file, capsys):
    assert main(["--cell", "#", str(gray_file)]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines == [
        format_pixel((30, 30, 30), "#") + format_pixel((40, 40, 40), "#"),
        format_pixel((10, 10, 10), "#") + format_pixel((20, 20, 20), "#"),
    ]


def test_bad_file_does_not_stop_the_rest(tmp_path, gray_file, capsys):
    bad = tmp_path / "bad.bmp"
    bad.write_bytes(b"not a bitmap at all")
    missing = tmp_path / "missing.bmp"

    status = main(["-i", str(bad), str(missing), str(gray_file)])

    captured = capsys.readouterr()
    assert status == 1
    assert "gray.bmp" in captured.out
    assert f"bitmap error: {bad}: bad magic" in captured.err
    assert f"bitmap error: {missing}: cannot open" in captured.err


def test_unsupported_depth_fails_render(tmp_path, make_bmp, capsys):
    path = tmp_path / "rgb.bmp"
    path.write_bytes(make_bmp(2, 2, bpp=24, pixel_data=bytes(16)))
    assert main([str(path)]) == 1
    assert "unsupported depth: 24bpp" in capsys.readouterr().err
    # Header information is still available for such files
    assert main(["-i", str(path)]) == 0


def test_strict_file_size(tmp_path, gray_2x2, capsys):
    path = tmp_path / "liar.bmp"
    path.write_bytes(gray_2x2(file_size=999))
    assert main(["-i", str(path)]) == 0
    assert main(["-i", "--strict", str(path)]) == 1
    assert "declared file size 999B" in capsys.readouterr().err
