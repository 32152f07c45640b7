"""Parallel numeric kernels: maximum search, estimates of pi and integration."""

from __future__ import annotations

import math
import os
import random
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional, Sequence, TextIO


def _default_threads() -> int:
    return os.cpu_count() or 1


def find_max(data: Sequence[int], start: int, end: int) -> int:
    """Return the largest value in ``data[start:end]``, or 0 if the range is empty."""
    if start < 0 or end > len(data):
        raise IndexError(f"range [{start}, {end}) out of bounds for length {len(data)}")
    return max(data[start:end], default=0)


def parallel_find_max(data: Sequence[int], num_threads: Optional[int] = None) -> int:
    """Find the maximum by splitting ``data`` into equal ranges, one per thread.

    Each range holds ``len(data) // num_threads`` values; any remainder past
    the last full range is not examined.
    """
    if num_threads is None:
        num_threads = _default_threads()
    if num_threads < 1:
        raise ValueError("num_threads must be at least 1")
    size = len(data) // num_threads
    with ThreadPoolExecutor(max_workers=max(num_threads - 1, 1)) as pool:
        futures = [
            pool.submit(find_max, data, i * size, (i + 1) * size)
            for i in range(num_threads - 1)
        ]
        result = find_max(data, (num_threads - 1) * size, num_threads * size)
        for f in futures:
            result = max(result, f.result())
    return result


def monte_carlo_pi(iterations: int, rng: Optional[random.Random] = None) -> float:
    """Estimate pi from random points in the unit square."""
    if iterations <= 0:
        raise ValueError("iterations must be positive")
    rng = rng or random.Random()
    uniform = rng.random
    in_circle = 0
    for _ in range(iterations):
        x = uniform()
        y = uniform()
        if math.sqrt(x * x + y * y) <= 1.0:
            in_circle += 1
    return 4.0 * in_circle / iterations


def parallel_monte_carlo_pi(
    total_threads: int, iterations: int, seed: Optional[int] = None
) -> float:
    """Average the estimates of ``total_threads`` threads of ``iterations`` points each."""
    if total_threads < 1:
        raise ValueError("total_threads must be at least 1")

    def rng_for(n: int) -> random.Random:
        return random.Random() if seed is None else random.Random(seed + n)

    with ThreadPoolExecutor(max_workers=total_threads) as pool:
        futures = [
            pool.submit(monte_carlo_pi, iterations, rng_for(n))
            for n in range(total_threads)
        ]
        total = sum(f.result() for f in futures)
    return total / total_threads


def benchmark_monte_carlo(
    out: TextIO,
    max_power: int = 6,
    repeats: int = 100,
    base_exponent: int = 24,
) -> list[tuple[int, list[int]]]:
    """Time the parallel estimate for 1, 2, 4 ... 2**max_power threads.

    Each row written to ``out`` is ``num_threads_<n>`` followed by the
    timings in milliseconds. The same rows are returned.
    """
    if base_exponent < max_power:
        raise ValueError("base_exponent must not be less than max_power")
    rows: list[tuple[int, list[int]]] = []
    for power in range(max_power + 1):
        total_threads = 2**power
        print(f"Number of threads = {total_threads}")
        out.write(f"num_threads_{total_threads}")
        timings: list[int] = []
        for _ in range(repeats):
            start = time.perf_counter()
            pi = parallel_monte_carlo_pi(total_threads, 2 ** (base_exponent - power))
            ms = int((time.perf_counter() - start) * 1000)
            print(f"pi = {pi} in {ms} ms")
            out.write(f", {ms}")
            timings.append(ms)
        out.write("\n")
        rows.append((total_threads, timings))
    return rows


def _leibniz_partial(start: int, end: int) -> float:
    return sum((1.0 if k % 2 == 0 else -1.0) / (2.0 * k + 1) for k in range(start, end))


def leibniz_pi(n: int = 2**30, num_threads: Optional[int] = None) -> float:
    """Approximate pi with ``n`` terms of the Leibniz series, summed in parallel."""
    if num_threads is None:
        num_threads = _default_threads()
    if num_threads < 1:
        raise ValueError("num_threads must be at least 1")
    bounds = [n * t // num_threads for t in range(num_threads + 1)]
    with ThreadPoolExecutor(max_workers=num_threads) as pool:
        parts = pool.map(_leibniz_partial, bounds[:-1], bounds[1:])
        total = sum(parts)
    return 4.0 * total


def trapezoid_area(
    func: Callable[[float], float] = math.cos,
    x_start: float = 0.0,
    x_end: float = math.pi / 2,
    num_threads: Optional[int] = None,
    sub_trapezoids: int = 125,
) -> float:
    """Integrate ``func`` over [x_start, x_end] with the trapezoidal rule.

    The interval is split evenly between threads; each uses
    ``sub_trapezoids`` trapezoids over its part.
    """
    if num_threads is None:
        num_threads = _default_threads()
    if num_threads < 1 or sub_trapezoids < 1:
        raise ValueError("num_threads and sub_trapezoids must be at least 1")

    step = (x_end - x_start) / num_threads
    substep = step / sub_trapezoids
    lock = threading.Lock()
    total = [0.0]

    def trap(thread_id: int) -> None:
        x0 = x_start + thread_id * step
        area = 0.0
        yprev = func(x0)
        for i in range(1, sub_trapezoids + 1):
            y = func(x0 + substep * i)
            area += (yprev + y) * substep * 0.5
            yprev = y
        with lock:
            total[0] += area

    threads = [threading.Thread(target=trap, args=(t,)) for t in range(num_threads)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    return total[0]


def schedule_work(i: int) -> float:
    """A workload whose cost grows with ``i``: a sum of ``i + 1`` sines."""
    start = i * (i + 1) // 2
    end = start + i
    return sum(math.sin(j) for j in range(start, end + 1))


def schedule_sum(n: int = 2**14, num_threads: Optional[int] = None) -> float:
    """Sum ``schedule_work(i)`` for 0 <= i <= n, dealing ``i`` round-robin to threads."""
    if num_threads is None:
        num_threads = _default_threads()
    if num_threads < 1:
        raise ValueError("num_threads must be at least 1")

    def worker(t: int) -> float:
        return sum(schedule_work(i) for i in range(t, n + 1, num_threads))

    with ThreadPoolExecutor(max_workers=num_threads) as pool:
        return sum(pool.map(worker, range(num_threads)))