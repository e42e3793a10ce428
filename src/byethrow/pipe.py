"""Left-to-right function composition."""

from __future__ import annotations

from functools import reduce
from typing import Any, Callable, TypeVar, overload

A = TypeVar("A")
B = TypeVar("B")
C = TypeVar("C")
D = TypeVar("D")
G = TypeVar("G")
H = TypeVar("H")


@overload
def pipe(value: A) -> A: ...
@overload
def pipe(value: A, f1: Callable[[A], B], /) -> B: ...
@overload
def pipe(value: A, f1: Callable[[A], B], f2: Callable[[B], C], /) -> C: ...
@overload
def pipe(value: A, f1: Callable[[A], B], f2: Callable[[B], C], f3: Callable[[C], D], /) -> D: ...
@overload
def pipe(
    value: A, f1: Callable[[A], B], f2: Callable[[B], C], f3: Callable[[C], D], f4: Callable[[D], G], /
) -> G: ...
@overload
def pipe(
    value: A,
    f1: Callable[[A], B],
    f2: Callable[[B], C],
    f3: Callable[[C], D],
    f4: Callable[[D], G],
    f5: Callable[[G], H],
    /,
) -> H: ...
@overload
def pipe(value: Any, *fns: Callable[[Any], Any]) -> Any: ...


def pipe(value: Any, *fns: Callable[[Any], Any]) -> Any:
    """Thread ``value`` through ``fns`` left to right.

    Example:
        >>> pipe(3, lambda x: x + 1, str)
        '4'
    """
    return reduce(lambda acc, f: f(acc), fns, value)


def flow(*fns: Callable[[Any], Any]) -> Callable[[Any], Any]:
    """Compose ``fns`` left to right into a single function (``pipe`` without a seed)."""
    return lambda value: pipe(value, *fns)
