"""Shared-state synchronisation primitives and the demonstrations built on them."""

from __future__ import annotations

import os
import sys
import threading
import time
from enum import Enum
from typing import Generic, Optional, TextIO, TypeVar

T = TypeVar("T")


class EmptyStackError(Exception):
    """Raised when popping from an empty stack."""


class Guarded:
    """An integer counter whose increments are serialised by a lock."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value = 0

    @property
    def value(self) -> int:
        return self._value

    def increment(self) -> None:
        with self._lock:
            x = self._value
            x = x + 1
            self._value = x


class AtomicCounter:
    """A counter offering an indivisible increment operation."""

    def __init__(self, value: int = 0) -> None:
        self._lock = threading.Lock()
        self._value = value

    @property
    def value(self) -> int:
        with self._lock:
            return self._value

    def increment(self) -> int:
        """Increment the counter and return the value held before."""
        with self._lock:
            previous = self._value
            self._value = previous + 1
            return previous


class ThreadsafeStack(Generic[T]):
    """A LIFO stack safe to share between threads."""

    def __init__(self) -> None:
        self._data: list[T] = []
        self._lock = threading.Lock()

    def push(self, value: T) -> None:
        with self._lock:
            self._data.append(value)

    def pop(self) -> T:
        with self._lock:
            if not self._data:
                raise EmptyStackError("stack is empty")
            return self._data.pop()

    def empty(self) -> bool:
        with self._lock:
            return not self._data

    def copy(self) -> "ThreadsafeStack[T]":
        """Return an independent stack holding the same items."""
        other: ThreadsafeStack[T] = ThreadsafeStack()
        with self._lock:
            other._data = list(self._data)
        return other


class IncrementMode(Enum):
    """How concurrent increments of a shared value are protected."""

    UNSYNCHRONIZED = "unsynchronized"
    MUTEX = "mutex"
    GUARDED = "guarded"
    ATOMIC = "atomic"


def _default_threads() -> int:
    return os.cpu_count() or 1


def run_increment(
    mode: IncrementMode,
    num_threads: Optional[int] = None,
    iterations: int = 1_000_000,
) -> int:
    """Increment one shared value from several threads and return its final value."""
    mode = IncrementMode(mode)
    if num_threads is None:
        num_threads = _default_threads()

    shared = [0]
    lock = threading.Lock()
    counter = AtomicCounter()

    def unsynchronized() -> None:
        for _ in range(iterations):
            shared[0] = shared[0] + 1

    def mutex() -> None:
        for _ in range(iterations):
            lock.acquire()
            shared[0] = shared[0] + 1
            lock.release()

    def guarded() -> None:
        for _ in range(iterations):
            with lock:
                shared[0] = shared[0] + 1

    def atomic() -> None:
        for _ in range(iterations):
            counter.increment()

    target = {
        IncrementMode.UNSYNCHRONIZED: unsynchronized,
        IncrementMode.MUTEX: mutex,
        IncrementMode.GUARDED: guarded,
        IncrementMode.ATOMIC: atomic,
    }[mode]

    threads = [threading.Thread(target=target) for _ in range(num_threads)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    return counter.value if mode is IncrementMode.ATOMIC else shared[0]


def guarded_task(guarded: Guarded, iterations: int = 1_000_000) -> None:
    """Increment a guarded counter the given number of times."""
    for _ in range(iterations):
        guarded.increment()


def stack_exchange(count: int = 1_000_000) -> tuple[list[int], int, bool]:
    """Push ``count`` values from one thread while another pops as many.

    Returns the popped values in pop order, the number of pops that found
    the stack empty, and whether the stack is empty afterwards.
    """
    stack: ThreadsafeStack[int] = ThreadsafeStack()
    popped: list[int] = []
    misses = 0

    def pusher() -> None:
        for i in range(count):
            stack.push(i)
            time.sleep(0)

    def popper() -> None:
        nonlocal misses
        while len(popped) < count:
            try:
                popped.append(stack.pop())
            except EmptyStackError:
                misses += 1
                time.sleep(0)

    t1 = threading.Thread(target=popper)
    t2 = threading.Thread(target=pusher)
    t1.start()
    t2.start()
    t1.join()
    t2.join()
    return popped, misses, stack.empty()


class SpinFlag:
    """A boolean flag with an atomic test-and-set."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._set = False

    def test_and_set(self) -> bool:
        """Set the flag and return whether it was already set."""
        with self._guard:
            previous = self._set
            self._set = True
            return previous

    def clear(self) -> None:
        with self._guard:
            self._set = False


def spin_lock_task(
    task_id: int,
    flag: SpinFlag,
    iterations: int = 10,
    out: Optional[TextIO] = None,
    delay: float = 1.0,
) -> None:
    """Repeatedly spin until the flag is free, report, pause and release it."""
    stream = sys.stdout if out is None else out
    for i in range(iterations):
        while flag.test_and_set():
            time.sleep(0)
        stream.write(f"Thread {task_id} running {i}\n")
        time.sleep(delay)
        flag.clear()


def condition_demo(scale: float = 1.0) -> list[str]:
    """Run two threads that hand a condition variable back and forth.

    All pauses are multiplied by ``scale``. Returns the messages in the
    order the threads produced them.
    """
    condition = threading.Condition(threading.Lock())
    messages: list[str] = []
    say = messages.append

    def task_1() -> None:
        say("Task 1 sleeping for 3 seconds")
        time.sleep(3 * scale)
        with condition:
            say("Task 1 notifying waiting thread")
            condition.notify()
            say("Task 1 waiting for notification")
            condition.wait()
            say("Task 1 notified")
            say("Task 1 sleeping for 3 seconds")
            time.sleep(3 * scale)
            say("Task 1 notifying waiting thread")
            condition.notify()
            say("Task 1 waiting 3 seconds for notification")
            if condition.wait(3 * scale):
                say("Task 1 notified before 3 seconds")
            else:
                say("Task 1 got tired waiting")
            say("Task 1 finished")

    def task_2() -> None:
        with condition:
            say("Task 2 waiting for notification")
            condition.wait()
            say("Task 2 notified")
            say("Task 2 sleeping for 5 seconds")
            time.sleep(5 * scale)
            say("Task 2 notifying waiting thread")
            condition.notify()
            say("Task 2 waiting 5 seconds for notification")
            if condition.wait(5 * scale):
                say("Task 2 notified before 5 seconds")
            else:
                say("Task 2 got tired waiting")
            say("Task 2 sleeping for 5 seconds")
            time.sleep(5 * scale)
            say("Task 2 notifying waiting thread")
            condition.notify()
            say("Task 2 finished")

    t1 = threading.Thread(target=task_1)
    t2 = threading.Thread(target=task_2)
    t1.start()
    t2.start()
    t1.join()
    t2.join()
    return messages