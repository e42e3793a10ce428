"""Single-outcome transformation and chaining.

Every combinator takes a continuation and returns a function from outcome to
outcome, so chains read top to bottom with ``pipe``:

    >>> import byethrow as R
    >>> R.pipe(
    ...     R.succeed("42"),
    ...     R.and_then(lambda s: R.succeed(int(s)) if s.isdigit() else R.fail("not a number")),
    ...     R.map(lambda n: n * 2),
    ... )
    Success(value=84)

Each combinator settles a deferred input before branching on the variant and
settles a deferred continuation result before producing its output. The
output is a ``ResultAsync`` exactly when the input or the continuation's
result was deferred.

Continuations are expected to return outcomes; exceptions they raise are not
caught here (use ``try_``/``fn`` at the boundary for that).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Awaitable, Callable, TypeAlias, TypeVar

from .errors import ErrorCode, NotARecordError
from .result import (
    ResultAsync,
    ResultMaybeAsync,
    Success,
    fail,
    is_deferred,
    is_failure,
    is_success,
    settle_then,
    succeed,
)

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")
F = TypeVar("F")

# Step taking an outcome over (T, E) to an outcome over (U, F)
Combinator: TypeAlias = Callable[[ResultMaybeAsync[T, E]], ResultMaybeAsync[U, F]]


# ─── Functor ─────────────────────────────────────────────────────────────────


def map(fn: Callable[[T], U | Awaitable[U]]) -> Combinator[T, E, U, E]:  # noqa: A001
    """Replace a success value with ``fn(value)``; failures pass through.

    An awaitable returned by ``fn`` makes the outcome deferred.
    """
    def apply(result: ResultMaybeAsync[T, E]) -> ResultMaybeAsync[U, E]:
        return settle_then(result, lambda r: succeed(fn(r.value)) if is_success(r) else r)
    return apply


def map_error(fn: Callable[[E], F | Awaitable[F]]) -> Combinator[T, E, T, F]:
    """Replace a failure's error with ``fn(error)``; successes pass through."""
    def apply(result: ResultMaybeAsync[T, E]) -> ResultMaybeAsync[T, F]:
        return settle_then(result, lambda r: fail(fn(r.error)) if is_failure(r) else r)
    return apply


# ─── Success track ───────────────────────────────────────────────────────────


def and_then(fn: Callable[[T], ResultMaybeAsync[U, F]]) -> Combinator[T, E, U, E | F]:
    """Replace a success with the outcome of ``fn(value)`` (monadic bind)."""
    def apply(result: ResultMaybeAsync[T, E]) -> ResultMaybeAsync[U, E | F]:
        return settle_then(result, lambda r: fn(r.value) if is_success(r) else r)
    return apply


def and_through(fn: Callable[[T], ResultMaybeAsync[Any, F]]) -> Combinator[T, E, T, E | F]:
    """Run ``fn(value)`` for its outcome only.

    A failure from ``fn`` is adopted; a success from ``fn`` is discarded and
    the original success is kept.

        >>> import byethrow as R
        >>> R.pipe(R.succeed(5), R.and_through(lambda _: R.succeed(None)))
        Success(value=5)
    """
    def through(r: Any) -> Any:
        if is_failure(r):
            return r
        return settle_then(fn(r.value), lambda n: n if is_failure(n) else r)

    def apply(result: ResultMaybeAsync[T, E]) -> ResultMaybeAsync[T, E | F]:
        return settle_then(result, through)
    return apply


def bind(
    key: str, fn: Callable[[Mapping[str, Any]], ResultMaybeAsync[U, F]]
) -> Combinator[Mapping[str, Any], E, dict[str, Any], E | F]:
    """Run ``fn(record)`` and merge its value into the record under ``key``.

    The success value must be a mapping. The merged record is a fresh dict;
    an existing ``key`` is overwritten.

        >>> import byethrow as R
        >>> R.pipe(R.do(), R.bind("name", lambda _: R.succeed("Alice")),
        ...        R.bind("age", lambda _: R.succeed(20)))
        Success(value={'name': 'Alice', 'age': 20})
    """
    def attach(record: Mapping[str, Any]) -> Callable[[Any], Any]:
        return lambda fr: fr if is_failure(fr) else Success({**record, key: fr.value})

    def merge(r: Any) -> Any:
        if is_failure(r):
            return r
        if not isinstance(r.value, Mapping):
            raise NotARecordError(f"bind({key!r}) requires a mapping success value, got {type(r.value).__name__}",
                                  ErrorCode.NOT_A_RECORD)
        return settle_then(fn(r.value), attach(r.value))

    def apply(result: ResultMaybeAsync[Mapping[str, Any], E]) -> ResultMaybeAsync[dict[str, Any], E | F]:
        return settle_then(result, merge)
    return apply


# ─── Failure track ───────────────────────────────────────────────────────────


def or_else(fn: Callable[[E], ResultMaybeAsync[U, F]]) -> Combinator[T, E, T | U, F]:
    """Replace a failure with the outcome of ``fn(error)`` (recovery)."""
    def apply(result: ResultMaybeAsync[T, E]) -> ResultMaybeAsync[T | U, F]:
        return settle_then(result, lambda r: fn(r.error) if is_failure(r) else r)
    return apply


def or_through(fn: Callable[[E], ResultMaybeAsync[Any, F]]) -> Combinator[T, E, T, E | F]:
    """Run ``fn(error)`` for its outcome only.

    A success from ``fn`` keeps the original failure; a failure from ``fn``
    replaces it.
    """
    def through(r: Any) -> Any:
        if is_success(r):
            return r
        return settle_then(fn(r.error), lambda n: r if is_success(n) else n)

    def apply(result: ResultMaybeAsync[T, E]) -> ResultMaybeAsync[T, E | F]:
        return settle_then(result, through)
    return apply


# ─── Side effects ────────────────────────────────────────────────────────────


def _after(side_effect: Any, r: Any) -> Any:
    """Return ``r``, waiting for ``side_effect`` first when it is deferred."""
    if is_deferred(side_effect):
        async def settled() -> Any:
            await side_effect
            return r
        return ResultAsync(settled())
    return r


def inspect(fn: Callable[[T], Any]) -> Combinator[T, E, T, E]:
    """Call ``fn(value)`` on success for its side effect; the outcome is unchanged."""
    def apply(result: ResultMaybeAsync[T, E]) -> ResultMaybeAsync[T, E]:
        return settle_then(result, lambda r: _after(fn(r.value), r) if is_success(r) else r)
    return apply


def inspect_error(fn: Callable[[E], Any]) -> Combinator[T, E, T, E]:
    """Call ``fn(error)`` on failure for its side effect; the outcome is unchanged."""
    def apply(result: ResultMaybeAsync[T, E]) -> ResultMaybeAsync[T, E]:
        return settle_then(result, lambda r: _after(fn(r.error), r) if is_failure(r) else r)
    return apply
