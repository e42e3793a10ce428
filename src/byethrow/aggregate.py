"""Operations over containers of outcomes.

Containers are either ordered sequences (list, tuple, any non-mapping
iterable) or string-keyed mappings. The successful result keeps the shape of
the input: a tuple stays a tuple, a mapping becomes a dict with the same keys
in the same order, anything else becomes a list. Input containers are never
mutated.

- ``sequence``: fail-fast. Returns the first failure's error alone.
- ``collect``: exhaustive. Returns the list of every failure's error, in
  input order.
- ``combine``: ``collect`` without a mapping function.

Examples:
    >>> import byethrow as R
    >>> R.sequence([R.succeed(1), R.fail("e1"), R.fail("e2")])
    Failure(error='e1')
    >>> R.collect([R.succeed(1), R.fail("e1"), R.fail("e2")])
    Failure(error=['e1', 'e2'])
    >>> R.collect({"a": R.succeed(1), "b": R.succeed(2)})
    Success(value={'a': 1, 'b': 2})
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Callable, TypeVar, overload

from .result import (
    Failure,
    ResultAsync,
    ResultMaybeAsync,
    Success,
    is_deferred,
    is_failure,
    settle,
)

Entry = tuple[Any, Any]
Builder = Callable[[list[Entry]], Any]
MapFn = Callable[[Any], ResultMaybeAsync[Any, Any]]

T = TypeVar("T")
E = TypeVar("E")
V = TypeVar("V")


def _shape(container: Mapping[str, Any] | Iterable[Any]) -> tuple[list[Entry], Builder]:
    """Split a container into (key, item) entries plus a builder restoring its shape."""
    if isinstance(container, Mapping):
        return list(container.items()), dict
    if isinstance(container, tuple):
        return list(enumerate(container)), lambda pairs: tuple(v for _, v in pairs)
    return list(enumerate(container)), lambda pairs: [v for _, v in pairs]


# ═══════════════════════════════════════════════════════════════════════════════
# Fail-fast
# ═══════════════════════════════════════════════════════════════════════════════


@overload
def sequence(  # type: ignore[overload-overlap]
    container: Mapping[str, ResultMaybeAsync[T, E]], fn: None = ...
) -> ResultMaybeAsync[dict[str, T], E]: ...
@overload
def sequence(  # type: ignore[overload-overlap]
    container: Mapping[str, V], fn: Callable[[V], ResultMaybeAsync[T, E]]
) -> ResultMaybeAsync[dict[str, T], E]: ...
@overload
def sequence(container: Iterable[ResultMaybeAsync[T, E]], fn: None = ...) -> ResultMaybeAsync[Sequence[T], E]: ...
@overload
def sequence(container: Iterable[V], fn: Callable[[V], ResultMaybeAsync[T, E]]) -> ResultMaybeAsync[Sequence[T], E]: ...


def sequence(container: Mapping[str, Any] | Iterable[Any], fn: MapFn | None = None) -> ResultMaybeAsync[Any, Any]:
    """Scan left to right and stop at the first failure.

    With ``fn``, each item is mapped to an outcome only when the scan reaches
    it. Once a deferred element is met, the rest of the scan continues
    asynchronously, still one element at a time and in order, so the error
    returned is always the first failure in input order.
    """
    entries, build = _shape(container)
    values: list[Entry] = []
    for index, (key, item) in enumerate(entries):
        result = fn(item) if fn is not None else item
        if is_deferred(result):
            return ResultAsync(_sequence_rest(result, key, entries[index + 1:], fn, values, build))
        if is_failure(result):
            return Failure(result.error)
        values.append((key, result.value))
    return Success(build(values))


async def _sequence_rest(
    pending: Any,
    key: Any,
    rest: list[Entry],
    fn: MapFn | None,
    values: list[Entry],
    build: Builder,
) -> Any:
    result = await settle(pending)
    if is_failure(result):
        return Failure(result.error)
    values.append((key, result.value))
    for key, item in rest:
        result = await settle(fn(item) if fn is not None else item)
        if is_failure(result):
            return Failure(result.error)
        values.append((key, result.value))
    return Success(build(values))


# ═══════════════════════════════════════════════════════════════════════════════
# Exhaustive
# ═══════════════════════════════════════════════════════════════════════════════


def _partition(results: list[Entry], build: Builder) -> Any:
    errors = [r.error for _, r in results if is_failure(r)]
    if errors:
        return Failure(errors)
    return Success(build([(key, r.value) for key, r in results]))


async def _gather(results: list[Entry], build: Builder) -> Any:
    settled = await asyncio.gather(*(settle(r) for _, r in results))
    return _partition([(key, r) for (key, _), r in zip(results, settled)], build)


@overload
def collect(  # type: ignore[overload-overlap]
    container: Mapping[str, ResultMaybeAsync[T, E]], fn: None = ...
) -> ResultMaybeAsync[dict[str, T], list[E]]: ...
@overload
def collect(  # type: ignore[overload-overlap]
    container: Mapping[str, V], fn: Callable[[V], ResultMaybeAsync[T, E]]
) -> ResultMaybeAsync[dict[str, T], list[E]]: ...
@overload
def collect(container: Iterable[ResultMaybeAsync[T, E]], fn: None = ...) -> ResultMaybeAsync[Sequence[T], list[E]]: ...
@overload
def collect(
    container: Iterable[V], fn: Callable[[V], ResultMaybeAsync[T, E]]
) -> ResultMaybeAsync[Sequence[T], list[E]]: ...


def collect(container: Mapping[str, Any] | Iterable[Any], fn: MapFn | None = None) -> ResultMaybeAsync[Any, list[Any]]:
    """Evaluate every element and gather all failures.

    With ``fn``, every item is mapped up front. Deferred elements are settled
    concurrently; the error list follows input order, not completion order.
    """
    entries, build = _shape(container)
    results = [(key, fn(item) if fn is not None else item) for key, item in entries]
    if any(is_deferred(r) for _, r in results):
        return ResultAsync(_gather(results, build))
    return _partition(results, build)


@overload
def combine(  # type: ignore[overload-overlap]
    container: Mapping[str, ResultMaybeAsync[T, E]]
) -> ResultMaybeAsync[dict[str, T], list[E]]: ...
@overload
def combine(container: Iterable[ResultMaybeAsync[T, E]]) -> ResultMaybeAsync[Sequence[T], list[E]]: ...


def combine(container: Mapping[str, Any] | Iterable[Any]) -> ResultMaybeAsync[Any, list[Any]]:
    """Exhaustive aggregation over a container of outcomes."""
    return collect(container)
