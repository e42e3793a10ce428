"""Outcome type and the immediate/deferred duality.

An outcome is a closed two-variant value:

- ``Success(value)``
- ``Failure(error)``

Both are frozen, slotted dataclasses, so equality is structural and the
payload is read-only. ``Result[T, E]`` is the union of the two.

A *deferred* outcome is one that is not available yet. The library tags every
deferred value it hands out as a ``ResultAsync``: an awaitable that settles to
a plain ``Success``/``Failure``, never to another deferred value. Any awaitable
(a coroutine, an ``asyncio.Future``) is accepted as deferred input, so
continuations may be ``async def`` functions.

Examples:
    >>> import byethrow as R
    >>> R.pipe(R.succeed(2), R.map(lambda x: x * 2))
    Success(value=4)

    >>> async def fetch(n: int) -> R.Result[int, str]:
    ...     return R.succeed(n + 1)
    >>> deferred = R.pipe(R.succeed(1), R.and_then(fetch))
    >>> isinstance(deferred, R.ResultAsync)
    True
"""

from __future__ import annotations

import asyncio
import inspect as _inspect
from dataclasses import dataclass
from typing import (
    TYPE_CHECKING,
    Any,
    Awaitable,
    Callable,
    Generator,
    Generic,
    Literal,
    Never,
    TypeAlias,
    TypeGuard,
    TypeVar,
    Union,
    overload,
)

from .errors import ErrorCode, NestedResultError
from .pipe import pipe
from .settings import get_settings

if TYPE_CHECKING:
    from collections.abc import Iterator

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type
U = TypeVar("U")
F = TypeVar("F")


# ═══════════════════════════════════════════════════════════════════════════════
# Variants
# ═══════════════════════════════════════════════════════════════════════════════


class _Outcome:
    """Behaviour shared by both variants."""

    __slots__ = ()

    def pipe(self, *fns: Callable[[Any], Any]) -> Any:
        """Thread this outcome through ``fns`` left to right."""
        return pipe(self, *fns)


@dataclass(frozen=True, slots=True)
class Success(_Outcome, Generic[T]):
    """Success variant carrying ``value``."""

    value: T

    @property
    def type(self) -> Literal["Success"]:
        return "Success"

    def __bool__(self) -> bool:
        return True

    def __iter__(self) -> Iterator[T]:
        """Yields the value once."""
        yield self.value


@dataclass(frozen=True, slots=True)
class Failure(_Outcome, Generic[E]):
    """Failure variant carrying ``error``."""

    error: E

    @property
    def type(self) -> Literal["Failure"]:
        return "Failure"

    def __bool__(self) -> bool:
        return False

    def __iter__(self) -> Iterator[Any]:
        """Yields nothing."""
        return iter(())


Result: TypeAlias = Union[Success[T], Failure[E]]


# ═══════════════════════════════════════════════════════════════════════════════
# Deferred Outcomes
# ═══════════════════════════════════════════════════════════════════════════════


class ResultAsync(Generic[T, E]):
    """Awaitable handle for an outcome that settles later.

    The wrapped awaitable is scheduled once, on the first ``await``; every
    later await shares its settled outcome. Settling always flattens: the
    awaited value is a plain ``Success``/``Failure``.
    """

    __slots__ = ("_source", "_future")

    def __init__(self, source: Awaitable[Any]) -> None:
        self._source = source
        self._future: asyncio.Future[Result[T, E]] | None = None

    def __await__(self) -> Generator[Any, None, Result[T, E]]:
        return self._settle().__await__()

    async def _settle(self) -> Result[T, E]:
        if self._future is None:
            self._future = asyncio.ensure_future(settle(self._source))
        # Cancelling one awaiter leaves the shared task running
        return await asyncio.shield(self._future)

    def pipe(self, *fns: Callable[[Any], Any]) -> Any:
        """Thread this deferred outcome through ``fns`` left to right."""
        return pipe(self, *fns)

    def __repr__(self) -> str:
        if self._future is not None and self._future.done() and not self._future.cancelled():
            return f"ResultAsync({self._future.result()!r})"
        return "ResultAsync(<pending>)"


# A value that is either an outcome or a handle settling to one
ResultMaybeAsync: TypeAlias = Union[Success[T], Failure[E], ResultAsync[T, E], Awaitable[Result[T, E]]]


def is_deferred(value: object) -> TypeGuard[Awaitable[Any]]:
    """Whether ``value`` is a deferred handle rather than an immediate value."""
    return isinstance(value, ResultAsync) or _inspect.isawaitable(value)


async def settle(value: Any) -> Any:
    """Await until a non-deferred value is reached."""
    while is_deferred(value):
        value = await value
    return value


def defer(value: Any) -> Any:
    """Tag a deferred value as ResultAsync; immediate values pass through."""
    if isinstance(value, ResultAsync) or not is_deferred(value):
        return value
    return ResultAsync(value)


def settle_then(value: Any, on_settled: Callable[[Any], Any]) -> Any:
    """Apply ``on_settled`` to ``value`` now, or once it settles.

    The returned shape is deferred when either ``value`` or the callback's
    result is deferred, and immediate otherwise.
    """
    if is_deferred(value):
        async def settled() -> Any:
            return on_settled(await settle(value))
        return ResultAsync(settled())
    return defer(on_settled(value))


# ═══════════════════════════════════════════════════════════════════════════════
# Inspectors
# ═══════════════════════════════════════════════════════════════════════════════


def is_success(result: Result[T, E]) -> TypeGuard[Success[T]]:
    """Tag test for the Success variant."""
    return isinstance(result, Success)


def is_failure(result: Result[T, E]) -> TypeGuard[Failure[E]]:
    """Tag test for the Failure variant."""
    return isinstance(result, Failure)


def is_result(value: object) -> TypeGuard[Result[Any, Any]]:
    """Structural check: a recognised tag plus the matching payload field."""
    tag = getattr(value, "type", None)
    if tag == "Success":
        return hasattr(value, "value")
    if tag == "Failure":
        return hasattr(value, "error")
    return False


# ═══════════════════════════════════════════════════════════════════════════════
# Constructors
# ═══════════════════════════════════════════════════════════════════════════════


def _check_nesting(payload: object) -> None:
    if is_result(payload) and get_settings().forbid_nested:
        raise NestedResultError(f"Refusing to wrap an outcome in another outcome: {payload!r}",
                                ErrorCode.NESTED_RESULT)


@overload
def succeed() -> Success[None]: ...
@overload
def succeed(value: Awaitable[T]) -> ResultAsync[T, Never]: ...
@overload
def succeed(value: T) -> Success[T]: ...


def succeed(value: Any = None) -> Success[Any] | ResultAsync[Any, Never]:
    """Construct a Success; a deferred ``value`` yields a ResultAsync.

    Examples:
        >>> succeed(42)
        Success(value=42)
        >>> succeed()
        Success(value=None)
    """
    if is_deferred(value):
        async def settled() -> Success[Any]:
            payload = await value
            _check_nesting(payload)
            return Success(payload)
        return ResultAsync(settled())
    _check_nesting(value)
    return Success(value)


@overload
def fail() -> Failure[None]: ...
@overload
def fail(error: Awaitable[E]) -> ResultAsync[Never, E]: ...
@overload
def fail(error: E) -> Failure[E]: ...


def fail(error: Any = None) -> Failure[Any] | ResultAsync[Never, Any]:
    """Construct a Failure; a deferred ``error`` yields a ResultAsync."""
    if is_deferred(error):
        async def settled() -> Failure[Any]:
            payload = await error
            _check_nesting(payload)
            return Failure(payload)
        return ResultAsync(settled())
    _check_nesting(error)
    return Failure(error)


def do() -> Success[dict[str, Any]]:
    """Unit record to start a ``bind`` chain."""
    return Success({})
