"""Command-line tools: cluster greeting, Mandelbrot tile rendering and tile stitching."""

from __future__ import annotations

import os
import socket
import sys
from typing import Optional, Sequence

from PIL import Image

from parlab.mandelbrot import render_tile, stitch_tiles
from parlab.optvalues import OptionError, OptionRequiredError, value
from parlab.options import Options, ParseResult

_MODES_BY_CHANNELS = {1: "L", 2: "LA", 3: "RGB", 4: "RGBA"}
_CHANNELS_BY_MODE = {mode: channels for channels, mode in _MODES_BY_CHANNELS.items()}


def _hardware_threads() -> int:
    return os.cpu_count() or 1


def hello_cluster() -> str:
    """Print and return a greeting naming this host and its thread count."""
    message = f"Hello from {socket.gethostname()}, with {_hardware_threads()} threads"
    print(message)
    return message


def _required(result: ParseResult, name: str):
    if result.count(name) == 0:
        raise OptionRequiredError(name)
    return result[name].get()


def _format_filename(pattern: str, index: int) -> str:
    """Fill a printf-style pattern with ``index``; a pattern without a field is kept."""
    try:
        return pattern % index
    except TypeError:
        pass
    try:
        return pattern % ()
    except (TypeError, ValueError) as exc:
        raise ValueError(f"invalid file name pattern {pattern!r}") from exc


def _args(argv: Optional[Sequence[str]], program: str) -> list[str]:
    rest = sys.argv[1:] if argv is None else list(argv)
    return [program, *rest]


def mandelbrot_main(argv: Optional[Sequence[str]] = None) -> int:
    """Render one tile of the Mandelbrot set to a PNG file.

    Options: ``-o/--output`` file name pattern filled with the job id,
    ``-N/--num`` tiles per row and column, ``-s/--size`` tile size in pixels
    and ``-j/--job`` the tile id. Returns the exit status.
    """
    options = Options(
        "Mandelbrot set tile generator",
        "Evaluates the Mandelbrot set in a square region",
    )
    options.add_options()(
        "o,output", "Output PNG format (e.g. /path/to/myimage%02d.png)", value(str)
    )("N,num", "Number of tile rows/columns", value(int))(
        "s,size", "Size of square tile in pixels", value(int)
    )("j,job", "Job array id, in [0,N*N-1]", value(int))

    try:
        result = options.parse(_args(argv, "mandelbrot"))
        pattern = _required(result, "output")
        dim = _required(result, "size")
        tiles_per_row_col = _required(result, "num")
        tile_id = _required(result, "job")
        filename = _format_filename(pattern, tile_id)
        pixels = render_tile(dim, tile_id, tiles_per_row_col, _hardware_threads())
        Image.frombytes("RGB", (dim, dim), pixels).save(filename, format="PNG")
    except (OptionError, ValueError, OSError) as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0


def _load_tile(filename: str, mode: Optional[str]) -> Image.Image:
    with Image.open(filename) as img:
        img.load()
        if mode is None:
            if img.mode in _CHANNELS_BY_MODE:
                return img.copy()
            has_alpha = "A" in img.getbands() or "transparency" in img.info
            return img.convert("RGBA" if has_alpha else "RGB")
        return img.copy() if img.mode == mode else img.convert(mode)


def stitch_main(argv: Optional[Sequence[str]] = None) -> int:
    """Stitch N x N PNG tiles into one PNG image.

    Options: ``-i/--input`` file name pattern filled with each tile index,
    ``-o/--output`` the output file and ``-N/--num`` tiles per row and
    column. Returns the exit status.
    """
    options = Options(
        "Tile image stitcher",
        "Stitches PNG tile images arranged in a NxN configuration, "
        "and outputs the result to a new PNG image",
    )
    options.add_options()(
        "i,input", "Input format (e.g. /path/to/myimage%02d.png)", value(str)
    )("o,output", "Output file name (png)", value(str))(
        "N,num", "Number of tile rows/columns", value(int)
    )

    try:
        result = options.parse(_args(argv, "stitch"))
        output = _required(result, "output")
        pattern = _required(result, "input")
        tiles_per_row_col = _required(result, "num")
        if tiles_per_row_col < 1:
            raise ValueError("number of tiles must be at least 1")

        mode: Optional[str] = None
        size = (0, 0)
        tiles: list[bytes] = []
        for index in range(tiles_per_row_col * tiles_per_row_col):
            tile = _load_tile(_format_filename(pattern, index), mode)
            if mode is None:
                mode = tile.mode
                size = tile.size
            tiles.append(tile.tobytes())

        assert mode is not None
        width, height = size
        channels = _CHANNELS_BY_MODE[mode]
        data = stitch_tiles(tiles, width, height, channels, tiles_per_row_col)
        Image.frombytes(
            mode, (width * tiles_per_row_col, height * tiles_per_row_col), data
        ).save(output, format="PNG")
    except (OptionError, ValueError, OSError) as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0