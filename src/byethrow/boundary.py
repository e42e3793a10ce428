"""Adapters from raising code and external validators into outcomes.

``try_`` and ``fn`` catch ``Exception`` raised (or rejected, for awaitables)
by the wrapped computation and turn it into a ``Failure`` via ``catch``.
``safe=True`` declares the computation total: nothing is caught, and an
exception propagates unchanged.

    >>> import json
    >>> import byethrow as R
    >>> loads = R.fn(json.loads, catch=lambda exc: f"bad json: {exc.msg}")
    >>> loads('{"a": 1}')
    Success(value={'a': 1})
    >>> R.is_failure(loads("{"))
    True
"""

from __future__ import annotations

import inspect as _inspect
from functools import wraps
from typing import Any, Awaitable, Callable, Literal, ParamSpec, TypeVar, overload

from .logger import get_logger
from .result import Result, ResultAsync, ResultMaybeAsync, fail, is_deferred, is_failure, succeed
from .schema import Issue, Schema, validate

P = ParamSpec("P")
T = TypeVar("T")
F = TypeVar("F")

Catch = Callable[[Exception], F]

log = get_logger("byethrow.boundary")

_MISSING: Any = object()


def _check_options(catch: Catch[Any] | None, safe: bool) -> None:
    if safe and catch is not None:
        raise TypeError("Pass either catch= or safe=True, not both")
    if not safe and catch is None:
        raise TypeError("catch= is required unless safe=True")


def _check_no_arguments(target: Callable[..., Any]) -> None:
    """Reject an ``immediate=True`` target that cannot be called without arguments."""
    try:
        signature = _inspect.signature(target)
    except (TypeError, ValueError):
        # Some builtins expose no signature; the call itself decides
        return
    try:
        signature.bind()
    except TypeError as exc:
        raise TypeError(f"try_(immediate=True) needs a callable taking no arguments: {exc}") from exc


def _convert(exc: Exception, catch: Catch[Any]) -> Any:
    log.debug("exception converted to failure", exception=type(exc).__name__, message=str(exc))
    return fail(catch(exc))


async def _guard_async(awaitable: Awaitable[Any], catch: Catch[Any] | None, safe: bool) -> Any:
    try:
        value = await awaitable
    except Exception as exc:
        if safe:
            raise
        return _convert(exc, catch)  # type: ignore[arg-type]
    return succeed(value)


def _guard(call: Callable[[], Any], catch: Catch[Any] | None, safe: bool) -> Any:
    """Invoke ``call`` and wrap what it returns or raises."""
    try:
        output = call()
    except Exception as exc:
        if safe:
            raise
        return _convert(exc, catch)  # type: ignore[arg-type]
    if is_deferred(output):
        return ResultAsync(_guard_async(output, catch, safe))
    return succeed(output)


@overload
def try_(
    target: Awaitable[T], *, catch: Catch[F] | None = ..., safe: bool = ..., immediate: bool = ...
) -> ResultAsync[T, F]: ...
@overload
def try_(  # type: ignore[overload-overlap]
    target: Callable[[], Awaitable[T]], *, catch: Catch[F] | None = ..., safe: bool = ..., immediate: Literal[True]
) -> ResultAsync[T, F]: ...
@overload
def try_(
    target: Callable[[], T], *, catch: Catch[F] | None = ..., safe: bool = ..., immediate: Literal[True]
) -> Result[T, F]: ...
@overload
def try_(  # type: ignore[overload-overlap]
    target: Callable[P, Awaitable[T]], *, catch: Catch[F] | None = ..., safe: bool = ..., immediate: Literal[False] = ...
) -> Callable[P, ResultAsync[T, F]]: ...
@overload
def try_(
    target: Callable[P, T], *, catch: Catch[F] | None = ..., safe: bool = ..., immediate: Literal[False] = ...
) -> Callable[P, Result[T, F]]: ...


def try_(
    target: Callable[..., Any] | Awaitable[Any],
    *,
    catch: Catch[Any] | None = None,
    safe: bool = False,
    immediate: bool = False,
) -> Any:
    """Wrap a raising function or a deferred computation.

    - callable: returns a function with the same parameters that returns an
      outcome instead of raising (a ``ResultAsync`` when the call produced an
      awaitable).
    - awaitable: returns a ``ResultAsync`` for it directly.
    - ``immediate=True``: invokes the zero-argument callable now and returns
      its outcome. A callable that requires arguments raises ``TypeError``.

    Example:
        >>> import byethrow as R
        >>> R.try_(lambda: int("7"), catch=lambda e: str(e), immediate=True)
        Success(value=7)
    """
    _check_options(catch, safe)
    if is_deferred(target):
        return ResultAsync(_guard_async(target, catch, safe))
    if not callable(target):
        raise TypeError(f"try_() expects a callable or an awaitable, got {type(target).__name__}")
    if immediate:
        _check_no_arguments(target)
        return _guard(target, catch, safe)

    @wraps(target)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        return _guard(lambda: target(*args, **kwargs), catch, safe)
    return wrapper


@overload
def fn(  # type: ignore[overload-overlap]
    func: Callable[P, Awaitable[T]], *, catch: Catch[F] | None = ..., safe: bool = ...
) -> Callable[P, ResultAsync[T, F]]: ...
@overload
def fn(func: Callable[P, T], *, catch: Catch[F] | None = ..., safe: bool = ...) -> Callable[P, Result[T, F]]: ...
@overload
def fn(
    func: None = ..., *, catch: Catch[F] | None = ..., safe: bool = ...
) -> Callable[[Callable[P, T]], Callable[P, ResultMaybeAsync[T, F]]]: ...


def fn(func: Callable[P, Any] | None = None, *, catch: Catch[Any] | None = None, safe: bool = False) -> Any:
    """Turn a raising function into one returning outcomes.

    Usable directly or as a decorator:

        >>> import byethrow as R
        >>> @R.fn(catch=lambda exc: "division by zero")
        ... def ratio(a: int, b: int) -> float:
        ...     return a / b
        >>> ratio(1, 0)
        Failure(error='division by zero')
    """
    _check_options(catch, safe)

    def decorate(f: Callable[P, Any]) -> Callable[P, ResultMaybeAsync[Any, Any]]:
        @wraps(f)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> Any:
            return _guard(lambda: f(*args, **kwargs), catch, safe)
        return wrapper

    return decorate if func is None else decorate(func)


@overload
def parse(schema: Schema) -> Callable[[Any], Result[Any, list[Issue]]]: ...
@overload
def parse(schema: Schema, value: Any) -> Result[Any, list[Issue]]: ...


def parse(schema: Schema, value: Any = _MISSING) -> Any:
    """Validate ``value`` against ``schema``; with no value, return a reusable parser.

    The error of a rejection is the list of ``Issue`` objects.

    Raises:
        SchemaError: the validator is asynchronous or otherwise unusable.
    """
    def apply(input_: Any) -> Result[Any, list[Issue]]:
        outcome = validate(schema, input_)
        if is_failure(outcome):
            log.debug("validation rejected", issues=[str(i) for i in outcome.error])
        return outcome

    return apply if value is _MISSING else apply(value)
