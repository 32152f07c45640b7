"""Mandelbrot set evaluation in horizontal strips, coloured tiles and tile stitching."""

from __future__ import annotations

import math
import os
from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Sequence

MAX_ITERATIONS = 1000
DIM = 8192

XMIN = -2.1
XMAX = 1.0
YMIN = -1.3
YMAX = 1.3

EXTENT_GLOBAL = XMAX - XMIN
XMIN_GLOBAL = XMIN
YMIN_GLOBAL = -EXTENT_GLOBAL / 2


def _default_threads() -> int:
    return os.cpu_count() or 1


def _check_range(start_y: int, end_y: int, dim: int) -> None:
    if dim < 1:
        raise ValueError("dim must be at least 1")
    if start_y < 0 or end_y < start_y:
        raise ValueError(f"invalid row range [{start_y}, {end_y})")


def mandelbrot_strip(
    start_y: int,
    end_y: int,
    dim: int = DIM,
    max_iterations: int = MAX_ITERATIONS,
) -> list[float]:
    """Evaluate rows ``start_y`` to ``end_y`` of a ``dim`` x ``dim`` image.

    The image covers [-2.1, 1.0] x [-1.3, 1.3]. Each pixel is the fraction
    of ``max_iterations`` reached before the orbit escaped, row by row.
    """
    _check_range(start_y, end_y, dim)
    integral_x = (XMAX - XMIN) / dim
    integral_y = (YMAX - YMIN) / dim
    results: list[float] = []
    y = YMIN + start_y * integral_y
    for _ in range(start_y, end_y):
        x = XMIN
        for _ in range(dim):
            x1 = y1 = 0.0
            loop_count = 0
            while loop_count < max_iterations and math.sqrt(x1 * x1 + y1 * y1) < 2.0:
                loop_count += 1
                xx = x1 * x1 - y1 * y1 + x
                y1 = 2 * x1 * y1 + y
                x1 = xx
            results.append(loop_count / max_iterations)
            x += integral_x
        y += integral_y
    return results


def parallel_mandelbrot(
    dim: int = DIM,
    num_threads: Optional[int] = None,
    max_iterations: int = MAX_ITERATIONS,
) -> list[list[float]]:
    """Evaluate the image in ``num_threads`` strips of ``dim // num_threads`` rows.

    Returns the strips in order. Rows past the last full strip are not evaluated.
    """
    if num_threads is None:
        num_threads = _default_threads()
    if num_threads < 1:
        raise ValueError("num_threads must be at least 1")
    height = dim // num_threads
    with ThreadPoolExecutor(max_workers=num_threads) as pool:
        futures = [
            pool.submit(mandelbrot_strip, i * height, (i + 1) * height, dim, max_iterations)
            for i in range(num_threads)
        ]
        return [f.result() for f in futures]


def _channel(smooth: float, phase: float) -> int:
    if not math.isfinite(smooth):
        return 0
    level = 0.5 + 0.5 * math.cos(3.0 + smooth * 0.15 + phase)
    return int(level * 255)


def tile_strip(
    start_y: int,
    end_y: int,
    dim: int,
    tile_id: int,
    tiles_per_row_col: int,
    max_iterations: int = MAX_ITERATIONS,
) -> bytes:
    """Evaluate rows of one square tile of the set as RGB bytes.

    The square region [-2.1, 1.0] x [-1.55, 1.55] is divided into
    ``tiles_per_row_col`` tiles per side, numbered row by row. Pixels whose
    smooth iteration count is undefined are black.
    """
    _check_range(start_y, end_y, dim)
    if tiles_per_row_col < 1:
        raise ValueError("tiles_per_row_col must be at least 1")
    if not 0 <= tile_id < tiles_per_row_col * tiles_per_row_col:
        raise ValueError(f"tile_id {tile_id} out of range")

    tile_x = tile_id % tiles_per_row_col
    tile_y = tile_id // tiles_per_row_col
    extent_tile = EXTENT_GLOBAL / tiles_per_row_col
    xmin = XMIN_GLOBAL + tile_x * extent_tile
    ymin = YMIN_GLOBAL + tile_y * extent_tile
    integral = extent_tile / dim

    results = bytearray()
    y = ymin + start_y * integral
    for _ in range(start_y, end_y):
        x = xmin
        for _ in range(dim):
            x1 = y1 = 0.0
            loop_count = 0
            sqlen = 0.0
            while loop_count < max_iterations and sqlen < 512.0:
                loop_count += 1
                xx = x1 * x1 - y1 * y1 + x
                y1 = 2 * x1 * y1 + y
                x1 = xx
                sqlen = x1 * x1 + y1 * y1
            if sqlen > 1.0:
                smooth = loop_count - math.log2(math.log2(sqlen)) + 4.0
            else:
                smooth = math.nan
            results += bytes(
                (_channel(smooth, 0.0), _channel(smooth, 0.6), _channel(smooth, 1.0))
            )
            x += integral
        y += integral
    return bytes(results)


def render_tile(
    dim: int,
    tile_id: int,
    tiles_per_row_col: int,
    num_threads: Optional[int] = None,
    max_iterations: int = MAX_ITERATIONS,
) -> bytes:
    """Render a whole ``dim`` x ``dim`` tile as RGB bytes, in strips across threads."""
    if num_threads is None:
        num_threads = _default_threads()
    if num_threads < 1:
        raise ValueError("num_threads must be at least 1")
    if dim < 1:
        raise ValueError("dim must be at least 1")
    height = (dim + num_threads - 1) // num_threads
    bounds = [
        (min(i * height, dim), min((i + 1) * height, dim)) for i in range(num_threads)
    ]
    bounds = [(start, end) for start, end in bounds if start < end]
    with ThreadPoolExecutor(max_workers=num_threads) as pool:
        futures = [
            pool.submit(
                tile_strip, start, end, dim, tile_id, tiles_per_row_col, max_iterations
            )
            for start, end in bounds
        ]
        return b"".join(f.result() for f in futures)


def stitch_tiles(
    tiles: Sequence[bytes],
    width: int,
    height: int,
    channels: int,
    tiles_per_row_col: int,
) -> bytes:
    """Arrange ``tiles_per_row_col`` squared tiles, numbered row by row, into one image.

    Each tile holds ``width`` x ``height`` pixels of ``channels`` bytes.
    """
    if min(width, height, channels, tiles_per_row_col) < 1:
        raise ValueError("dimensions must be at least 1")
    if len(tiles) != tiles_per_row_col * tiles_per_row_col:
        raise ValueError(
            f"expected {tiles_per_row_col * tiles_per_row_col} tiles, got {len(tiles)}"
        )
    pitch = width * channels
    for index, tile in enumerate(tiles):
        if len(tile) != pitch * height:
            raise ValueError(f"tile {index} has {len(tile)} bytes, expected {pitch * height}")

    out_pitch = pitch * tiles_per_row_col
    image = bytearray(out_pitch * height * tiles_per_row_col)
    for index, tile in enumerate(tiles):
        tile_x = index % tiles_per_row_col
        tile_y = index // tiles_per_row_col
        for row in range(height):
            offset = (tile_y * height + row) * out_pitch + tile_x * pitch
            image[offset:offset + pitch] = tile[row * pitch:(row + 1) * pitch]
    return bytes(image)