"""Sequential bubble sort, parallel odd-even transposition sort and their timing."""

from __future__ import annotations

import os
import random
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, MutableSequence, Optional, TextIO


def _default_threads() -> int:
    return os.cpu_count() or 1


def generate_values(size: int, rng: Optional[random.Random] = None) -> list[int]:
    """Return ``size`` random unsigned 32-bit integers."""
    if size < 0:
        raise ValueError("size must not be negative")
    rng = rng or random.Random()
    return [rng.getrandbits(32) for _ in range(size)]


def bubble_sort(values: MutableSequence[int]) -> None:
    """Sort ``values`` in place by repeatedly bubbling the largest value up."""
    for count in range(len(values), 1, -1):
        for i in range(count - 1):
            if values[i] > values[i + 1]:
                values[i], values[i + 1] = values[i + 1], values[i]


def odd_even_sort(
    values: MutableSequence[int], num_threads: Optional[int] = None
) -> None:
    """Sort ``values`` in place with odd-even transposition.

    Each of the ``len(values)`` phases compares disjoint neighbouring pairs,
    which are shared out in contiguous blocks between the threads.
    """
    if num_threads is None:
        num_threads = _default_threads()
    if num_threads < 1:
        raise ValueError("num_threads must be at least 1")
    n = len(values)

    def sweep(lefts: range) -> None:
        for i in lefts:
            if values[i] > values[i + 1]:
                values[i], values[i + 1] = values[i + 1], values[i]

    with ThreadPoolExecutor(max_workers=num_threads) as pool:
        for phase in range(n):
            lefts = range(phase % 2, n - 1, 2)
            block = -(-len(lefts) // num_threads) if lefts else 0
            chunks = [
                lefts[k * block:(k + 1) * block]
                for k in range(num_threads)
                if block and lefts[k * block:(k + 1) * block]
            ]
            for _ in pool.map(sweep, chunks):
                pass


def benchmark_sort(
    sort: Callable[[list[int]], None],
    out: TextIO,
    min_exponent: int = 6,
    max_exponent: int = 12,
    repeats: int = 100,
) -> list[tuple[int, list[int]]]:
    """Time ``sort`` on random data of 2**min_exponent ... 2**max_exponent values.

    Each row written to ``out`` is the data size followed by the timings in
    milliseconds, each ended by a comma. The same rows are returned.
    """
    if min_exponent < 0 or max_exponent < min_exponent:
        raise ValueError("invalid exponent range")
    rows: list[tuple[int, list[int]]] = []
    for exponent in range(min_exponent, max_exponent + 1):
        size = 2**exponent
        out.write(f"{size}, ")
        timings: list[int] = []
        for i in range(repeats):
            print(f"Generating {i} for {size} values")
            data = generate_values(size)
            print("Sorting")
            start = time.perf_counter()
            sort(data)
            ms = int((time.perf_counter() - start) * 1000)
            out.write(f"{ms},")
            timings.append(ms)
        out.write("\n")
        rows.append((size, timings))
    return rows