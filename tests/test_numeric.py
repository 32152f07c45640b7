import io
import math
import random

import pytest

from parlab.numeric import (
    benchmark_monte_carlo,
    find_max,
    leibniz_pi,
    monte_carlo_pi,
    parallel_find_max,
    parallel_monte_carlo_pi,
    schedule_sum,
    schedule_work,
    trapezoid_area,
)


def test_find_max_in_range():
    data = [3, 9, 2, 7]
    assert find_max(data, 0, 4) == 9
    assert find_max(data, 2, 4) == 7


def test_find_max_empty_range_is_zero():
    assert find_max([5, 6], 1, 1) == 0


def test_find_max_out_of_bounds():
    with pytest.raises(IndexError):
        find_max([1, 2, 3], 0, 4)


@pytest.mark.parametrize("threads", [1, 2, 4, 8])
def test_parallel_find_max_matches_builtin(threads):
    rng = random.Random(42)
    data = [rng.randrange(2**32) for _ in range(1024)]
    assert parallel_find_max(data, threads) == max(data)


def test_parallel_find_max_ignores_remainder():
    data = [1, 2, 3, 4, 100]
    assert parallel_find_max(data, 2) == find_max(data, 0, 4)


def test_monte_carlo_pi_close_to_pi():
    estimate = monte_carlo_pi(20000, random.Random(1))
    assert abs(estimate - math.pi) < 0.1
    assert 0.0 <= estimate <= 4.0


def test_monte_carlo_pi_rejects_zero():
    with pytest.raises(ValueError):
        monte_carlo_pi(0)


def test_parallel_monte_carlo_is_reproducible_with_seed():
    a = parallel_monte_carlo_pi(4, 2000, seed=5)
    b = parallel_monte_carlo_pi(4, 2000, seed=5)
    assert a == b
    assert abs(a - math.pi) < 0.2


def test_benchmark_rows(capsys):
    out = io.StringIO()
    rows = benchmark_monte_carlo(out, max_power=1, repeats=2, base_exponent=6)
    lines = out.getvalue().splitlines()
    assert [r[0] for r in rows] == [1, 2]
    assert lines[0].startswith("num_threads_1, ")
    assert lines[1].startswith("num_threads_2, ")
    assert all(len(line.split(", ")) == 3 for line in lines)
    assert "Number of threads = 2" in capsys.readouterr().out


def test_benchmark_rejects_bad_exponents():
    with pytest.raises(ValueError):
        benchmark_monte_carlo(io.StringIO(), max_power=3, repeats=1, base_exponent=2)


def test_leibniz_pi_converges():
    assert abs(leibniz_pi(200000, 4) - math.pi) < 1e-4


def test_leibniz_pi_thread_count_invariant():
    assert leibniz_pi(10001, 1) == pytest.approx(leibniz_pi(10001, 7), rel=1e-12)


def test_trapezoid_cosine_quarter_period():
    assert trapezoid_area(math.cos, 0.0, math.pi / 2, 4, 125) == pytest.approx(1.0, abs=1e-4)


def test_trapezoid_exact_for_linear():
    assert trapezoid_area(lambda x: 2 * x, 0.0, 3.0, 3, 10) == pytest.approx(9.0)


def test_trapezoid_thread_count_invariant_for_linear():
    a = trapezoid_area(lambda x: x + 1, 1.0, 5.0, 1, 8)
    b = trapezoid_area(lambda x: x + 1, 1.0, 5.0, 4, 2)
    assert a == pytest.approx(b)


def test_schedule_work_zero():
    assert schedule_work(0) == 0.0


@pytest.mark.parametrize("threads", [1, 3, 8])
def test_schedule_sum_matches_serial(threads):
    expected = sum(schedule_work(i) for i in range(0, 65))
    assert schedule_sum(64, threads) == pytest.approx(expected, abs=1e-9)


def test_schedule_sum_rejects_no_threads():
    with pytest.raises(ValueError):
        schedule_sum(10, 0)