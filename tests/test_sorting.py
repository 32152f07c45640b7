import io
import random

import pytest

from parlab.sorting import benchmark_sort, bubble_sort, generate_values, odd_even_sort


def test_generate_values_length_and_range():
    values = generate_values(500, random.Random(3))
    assert len(values) == 500
    assert all(0 <= v < 2**32 for v in values)


def test_generate_values_reproducible_with_seed():
    first = generate_values(20, random.Random(7))
    second = generate_values(20, random.Random(7))
    assert len(first) == 20
    assert first == second
    assert len(set(first)) > 1


def test_generate_values_negative_size():
    with pytest.raises(ValueError):
        generate_values(-1)


@pytest.mark.parametrize("size", [0, 1, 2, 3, 17, 64])
def test_bubble_sort_matches_sorted(size):
    data = generate_values(size, random.Random(size))
    expected = sorted(data)
    bubble_sort(data)
    assert data == expected


def test_bubble_sort_with_duplicates():
    data = [5, 1, 5, 3, 1, 0]
    bubble_sort(data)
    assert data == [0, 1, 1, 3, 5, 5]


@pytest.mark.parametrize("threads", [1, 2, 3, 8])
@pytest.mark.parametrize("size", [0, 1, 2, 5, 33, 64])
def test_odd_even_sort_matches_sorted(threads, size):
    data = generate_values(size, random.Random(size * 10 + threads))
    expected = sorted(data)
    odd_even_sort(data, threads)
    assert data == expected


def test_odd_even_sort_reverse_input():
    data = list(range(40, 0, -1))
    odd_even_sort(data, 4)
    assert data == list(range(1, 41))


def test_odd_even_sort_rejects_zero_threads():
    with pytest.raises(ValueError):
        odd_even_sort([2, 1], 0)


def test_benchmark_sort_output_format(capsys):
    out = io.StringIO()
    rows = benchmark_sort(bubble_sort, out, min_exponent=1, max_exponent=3, repeats=2)
    lines = out.getvalue().splitlines()
    assert [size for size, _ in rows] == [2, 4, 8]
    assert len(lines) == 3
    for line, (size, timings) in zip(lines, rows):
        assert line.startswith(f"{size}, ")
        assert line.endswith(",")
        assert len(timings) == 2
        assert line.count(",") == 3
    printed = capsys.readouterr().out
    assert "Generating 0 for 2 values" in printed
    assert "Sorting" in printed


def test_benchmark_sort_invalid_range():
    with pytest.raises(ValueError):
        benchmark_sort(bubble_sort, io.StringIO(), min_exponent=4, max_exponent=2)