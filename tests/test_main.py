"""End-to-end tests for the command line entry point."""

import json

from geoshaper.main import main


def test_cli_writes_result(target_file, tmp_path, capsys):
    out = tmp_path / "out.png"
    shapes = tmp_path / "shapes.json"
    code = main([
        "-i", str(target_file), "-s", "rectangle", "-m", "5", "-c", "4",
        "--seed", "11", "-o", str(out), "--export-shapes", str(shapes),
    ])
    assert code == 0
    assert out.exists()
    data = json.loads(shapes.read_text())
    assert data["width"] == 32
    printed = capsys.readouterr().out
    assert "Result saved to" in printed
    assert "gen    0" in printed


def test_cli_debug_rasters(target_file, tmp_path):
    code = main([
        "-i", str(target_file), "-m", "3", "-c", "4", "-q", "-d",
        "--debug-dir", str(tmp_path / "dbg"), "-o", str(tmp_path / "r.png"),
    ])
    assert code == 0


def test_cli_missing_image(tmp_path, capsys):
    code = main(["-i", str(tmp_path / "missing.png"), "-o", str(tmp_path / "r.png"), "-q"])
    assert code == 1
    assert "err:" in capsys.readouterr().err
    assert not (tmp_path / "r.png").exists()


def test_cli_invalid_options(target_file, tmp_path, capsys):
    code = main(["-i", str(target_file), "-c", "0", "-o", str(tmp_path / "r.png")])
    assert code == 1
    assert "invalid options" in capsys.readouterr().err


def test_cli_result_write_failure_is_fatal(target_file, tmp_path, capsys):
    blocker = tmp_path / "blocker"
    blocker.write_text("x")
    code = main(["-i", str(target_file), "-m", "2", "-c", "2", "-q",
                 "-o", str(blocker / "r.png")])
    assert code == 1
    assert "err:" in capsys.readouterr().err


def test_cli_svg_output(target_file, tmp_path):
    svg = tmp_path / "result.svg"
    code = main(["-i", str(target_file), "-m", "3", "-c", "4", "-q", "--seed", "2",
                 "-o", str(tmp_path / "r.png"), "--svg", str(svg)])
    assert code == 0
    text = svg.read_text()
    assert text.startswith("<svg")
    assert 'viewBox="0 0 32 32"' in text


def test_cli_resume_from_exported_shapes(target_file, tmp_path):
    shapes = tmp_path / "shapes.json"
    assert main(["-i", str(target_file), "-s", "rectangle", "-m", "10", "-c", "8",
                 "--seed", "4", "-q", "-o", str(tmp_path / "a.png"),
                 "--export-shapes", str(shapes)]) == 0
    first = json.loads(shapes.read_text())["polygons"]

    resumed = tmp_path / "resumed.json"
    assert main(["-i", str(target_file), "-m", "0", "-q", "--resume", str(shapes),
                 "-o", str(tmp_path / "b.png"), "--export-shapes", str(resumed)]) == 0
    assert json.loads(resumed.read_text())["polygons"] == first


def test_cli_resume_size_mismatch(target_file, tmp_path, capsys):
    shapes = tmp_path / "shapes.json"
    shapes.write_text(json.dumps({"width": 8, "height": 8, "polygons": []}))
    code = main(["-i", str(target_file), "-q", "--resume", str(shapes),
                 "-o", str(tmp_path / "r.png")])
    assert code == 1
    assert "canvas" in capsys.readouterr().err
