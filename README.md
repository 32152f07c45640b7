# parlab

Small, self-contained concurrency and parallel-computing exercises:
thread-safe containers and counters, parallel numeric kernels, sorting
algorithms, a Mandelbrot renderer that works in tiles, and a command-line
option parser that the tile tools are built on.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Modules

- `parlab.sync` – shared-state experiments: `Guarded`, `AtomicCounter`,
  `ThreadsafeStack` (its `pop` raises `EmptyStackError` when the stack is
  empty), `SpinFlag` with `spin_lock_task`, the `IncrementMode` variants run
  by `run_increment`, `guarded_task`, a pusher/popper race in
  `stack_exchange`, and a condition-variable hand-off in `condition_demo`
  that returns its messages in order.
- `parlab.numeric` – `find_max` and `parallel_find_max`, Monte Carlo
  estimation of pi (`monte_carlo_pi`, `parallel_monte_carlo_pi`,
  `benchmark_monte_carlo`), the Leibniz series (`leibniz_pi`), the
  trapezoidal rule split across threads (`trapezoid_area`) and an unevenly
  loaded sum dealt round-robin to threads (`schedule_work`, `schedule_sum`).
- `parlab.sorting` – `generate_values`, `bubble_sort`, the odd-even
  transposition sort `odd_even_sort`, and `benchmark_sort`, which writes
  timing rows to a text stream.
- `parlab.mandelbrot` – whole-image strips (`mandelbrot_strip`,
  `parallel_mandelbrot`), coloured RGB tiles of a square region
  (`tile_strip`, `render_tile`) and `stitch_tiles` for joining an N×N grid
  of tiles into one image buffer.
- `parlab.optvalues` – typed option values (`value`, `Value`), the parsing
  helpers `parse_integer`, `parse_bool`, `parse_char`, `parse_float` and
  `parse_list`, and the `OptionError` family of exceptions.
- `parlab.options` – `Options`, which declares options in groups, parses a
  command line into a `ParseResult`, handles defaults, implicit values and
  positional arguments, and formats help text.
- `parlab.tools` – `hello_cluster`, `mandelbrot_main` and `stitch_main`.

## Examples

```python
import math

from parlab.numeric import find_max, trapezoid_area
from parlab.sync import EmptyStackError, ThreadsafeStack

stack = ThreadsafeStack()
stack.push(1)
stack.push(2)
print(stack.pop())   # 2
print(stack.pop())   # 1
try:
    stack.pop()
except EmptyStackError:
    print("stack is empty")

print(find_max([3, 9, 4], 0, 3))   # 9

# Area under cos(x) on [0, pi/2], four threads, 125 trapezoids each
print(trapezoid_area(math.cos, 0.0, math.pi / 2, 4, 125))   # close to 1.0
```

Declaring and parsing options:

```python
from parlab.options import Options
from parlab.optvalues import value

options = Options("prog", "An example program")
options.add_options()("n,num", "A count", value(int))("v,verbose", "Talk more")

result = options.parse(["prog", "-n", "5", "-v"])
print(result["num"].get())        # 5
print(result["verbose"].get())    # True
print(result.count("verbose"))    # 1
print(options.help())
```

An option without a value is a boolean flag. Unknown options raise
`OptionNotExistsError`, and arguments that fail to parse raise
`ArgumentIncorrectTypeError`.

`parlab.tools.hello_cluster()` prints and returns a greeting naming the host
and its number of hardware threads.

## Commands

Render one tile of the Mandelbrot set. The square region is split into an
N×N grid and `--job` picks which tile (from 0 to N*N-1) to render; the output
name is a printf-style pattern that receives the tile number:

```
parlab-mandelbrot --output tile%02d.png --num 2 --size 256 --job 0
parlab-mandelbrot --output tile%02d.png --num 2 --size 256 --job 1
parlab-mandelbrot --output tile%02d.png --num 2 --size 256 --job 2
parlab-mandelbrot --output tile%02d.png --num 2 --size 256 --job 3
```

Short forms are `-o`, `-N`, `-s` and `-j`. All four options are required.

Join the tiles back into one image:

```
parlab-stitch --input tile%02d.png --output mandelbrot.png --num 2
```

Short forms are `-i`, `-o` and `-N`. All three options are required.

Both commands print the error and exit with status 1 when an option is
missing or malformed or a file cannot be read or written.

## What it does not do

- All work runs on ordinary Python threads; there are no GPU, SIMD or
  multi-process kernels, so CPU-bound functions do not run faster with more
  threads.
- The commands have no `--help` option; the help text is available from
  `Options.help()` in code.