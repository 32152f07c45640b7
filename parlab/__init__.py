"""Concurrency and parallel-computing exercises, Mandelbrot tile tools and an option parser."""

__version__ = "0.1.0"

__all__ = ["sync", "numeric", "sorting", "mandelbrot", "optvalues", "options", "tools"]