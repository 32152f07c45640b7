import os
import socket

import pytest
from PIL import Image

from parlab.mandelbrot import render_tile, stitch_tiles
from parlab.tools import hello_cluster, mandelbrot_main, stitch_main


def _write_tile(path, color, size=(2, 2)):
    Image.new("RGB", size, color).save(path, format="PNG")


def test_hello_cluster_names_host_and_threads(capsys):
    message = hello_cluster()
    expected = f"Hello from {socket.gethostname()}, with {os.cpu_count() or 1} threads"
    assert message == expected
    assert capsys.readouterr().out.strip() == expected


def test_mandelbrot_main_writes_tile(tmp_path):
    pattern = str(tmp_path / "tile_%02d.png")
    status = mandelbrot_main(["-o", pattern, "-N", "2", "-s", "4", "-j", "3"])
    assert status == 0
    target = tmp_path / "tile_03.png"
    assert target.exists()
    with Image.open(target) as img:
        assert img.size == (4, 4)
        assert img.mode == "RGB"
        assert img.tobytes() == render_tile(4, 3, 2, 1)


def test_mandelbrot_main_long_options_and_plain_name(tmp_path):
    target = tmp_path / "single.png"
    status = mandelbrot_main(
        ["--output", str(target), "--num", "1", "--size", "3", "--job", "0"]
    )
    assert status == 0
    with Image.open(target) as img:
        assert img.size == (3, 3)


def test_mandelbrot_main_missing_option(tmp_path, capsys):
    status = mandelbrot_main(["-o", str(tmp_path / "x.png"), "-N", "1", "-s", "2"])
    assert status == 1
    assert "required" in capsys.readouterr().err
    assert not (tmp_path / "x.png").exists()


def test_mandelbrot_main_bad_integer(tmp_path, capsys):
    status = mandelbrot_main(
        ["-o", str(tmp_path / "x.png"), "-N", "two", "-s", "2", "-j", "0"]
    )
    assert status == 1
    assert "failed to parse" in capsys.readouterr().err


def test_mandelbrot_main_job_out_of_range(tmp_path):
    status = mandelbrot_main(
        ["-o", str(tmp_path / "x.png"), "-N", "1", "-s", "2", "-j", "5"]
    )
    assert status == 1


def test_stitch_main_places_tiles(tmp_path):
    colors = [(255, 0, 0), (0, 255, 0), (0, 0, 255), (255, 255, 0)]
    for index, color in enumerate(colors):
        _write_tile(tmp_path / f"in_{index:02d}.png", color)
    output = tmp_path / "out.png"
    status = stitch_main(
        ["-i", str(tmp_path / "in_%02d.png"), "-o", str(output), "-N", "2"]
    )
    assert status == 0
    with Image.open(output) as img:
        assert img.size == (4, 4)
        assert img.getpixel((0, 0)) == colors[0]
        assert img.getpixel((3, 0)) == colors[1]
        assert img.getpixel((0, 3)) == colors[2]
        assert img.getpixel((3, 3)) == colors[3]
        assert img.getpixel((1, 1)) == colors[0]


def test_render_then_stitch_round_trip(tmp_path):
    pattern = str(tmp_path / "m_%d.png")
    for job in range(4):
        assert mandelbrot_main(["-o", pattern, "-N", "2", "-s", "3", "-j", str(job)]) == 0
    output = tmp_path / "whole.png"
    assert stitch_main(["-i", pattern, "-o", str(output), "-N", "2"]) == 0
    tiles = [render_tile(3, job, 2, 1) for job in range(4)]
    with Image.open(output) as img:
        assert img.size == (6, 6)
        assert img.tobytes() == stitch_tiles(tiles, 3, 3, 3, 2)


def test_stitch_main_missing_tile(tmp_path, capsys):
    _write_tile(tmp_path / "in_0.png", (1, 2, 3))
    status = stitch_main(
        ["-i", str(tmp_path / "in_%d.png"), "-o", str(tmp_path / "o.png"), "-N", "2"]
    )
    assert status == 1
    assert capsys.readouterr().err != ""
    assert not (tmp_path / "o.png").exists()


def test_stitch_main_mismatched_tile_sizes(tmp_path):
    _write_tile(tmp_path / "in_0.png", (1, 2, 3), size=(2, 2))
    for index in range(1, 4):
        _write_tile(tmp_path / f"in_{index}.png", (1, 2, 3), size=(3, 3))
    status = stitch_main(
        ["-i", str(tmp_path / "in_%d.png"), "-o", str(tmp_path / "o.png"), "-N", "2"]
    )
    assert status == 1


@pytest.mark.parametrize("missing", ["-i", "-o", "-N"])
def test_stitch_main_requires_each_option(tmp_path, missing, capsys):
    given = {"-i": str(tmp_path / "in_%d.png"), "-o": str(tmp_path / "o.png"), "-N": "1"}
    del given[missing]
    argv = [item for pair in given.items() for item in pair]
    assert stitch_main(argv) == 1
    assert "required" in capsys.readouterr().err