"""Escape hatches back to raise-on-failure control flow.

``unwrap``/``unwrap_error`` accept the outcome first (direct form) or return
a function awaiting it (curried form, for ``pipe``):

    >>> import byethrow as R
    >>> R.unwrap(R.succeed(1))
    1
    >>> R.unwrap(R.fail("boom"), 0)
    0
    >>> R.pipe(R.fail("boom"), R.unwrap(0))
    0

A deferred outcome makes the direct form return a coroutine.
"""

from __future__ import annotations

from typing import Any, Callable

from .errors import ResultAssertionError, UnwrapError
from .logger import get_logger
from .result import is_deferred, is_failure, is_result, is_success, settle, settle_then

log = get_logger("byethrow.unwrap")

_MISSING: Any = object()


def _raise(payload: Any, expected: str) -> Any:
    log.debug("unwrap raised", expected=expected, payload=repr(payload))
    if isinstance(payload, Exception):
        raise payload
    raise UnwrapError(payload, expected=expected)


def _apply(result: Any, extract: Callable[[Any], Any]) -> Any:
    if is_deferred(result):
        async def settled() -> Any:
            return extract(await settle(result))
        return settled()
    return extract(result)


def _dispatch(args: tuple[Any, ...], extract: Callable[[Any, Any], Any], name: str) -> Any:
    """Pick the direct or curried form from the shape of ``args``."""
    if len(args) > 2:
        raise TypeError(f"{name}() takes at most 2 positional arguments ({len(args)} given)")
    if args and (is_result(args[0]) or is_deferred(args[0])):
        default = args[1] if len(args) == 2 else _MISSING
        return _apply(args[0], lambda r: extract(r, default))
    if len(args) == 2:
        raise TypeError(f"{name}() expects an outcome as its first argument, got {type(args[0]).__name__}")
    default = args[0] if args else _MISSING
    return lambda result: _apply(result, lambda r: extract(r, default))


def _value(r: Any, default: Any) -> Any:
    if is_success(r):
        return r.value
    return default if default is not _MISSING else _raise(r.error, "Success")


def _error(r: Any, default: Any) -> Any:
    if is_failure(r):
        return r.error
    return default if default is not _MISSING else _raise(r.value, "Failure")


def unwrap(*args: Any) -> Any:
    """Success value, ``default`` on failure, or raise the error.

    Forms: ``unwrap(result)``, ``unwrap(result, default)``, ``unwrap()``,
    ``unwrap(default)``. An error that is an ``Exception`` is raised as-is;
    any other error is raised as ``UnwrapError`` with the error on ``.value``.
    """
    return _dispatch(args, _value, "unwrap")


def unwrap_error(*args: Any) -> Any:
    """Failure error, ``default`` on success, or raise the value (mirror of unwrap)."""
    return _dispatch(args, _error, "unwrap_error")


def assert_success(result: Any) -> Any:
    """Return ``result`` unchanged if it is a Success, raise ResultAssertionError otherwise."""
    def check(r: Any) -> Any:
        if is_failure(r):
            log.debug("assertion failed", expected="Success", error=repr(r.error))
            raise ResultAssertionError.expected("Success", "Failure")
        return r
    return settle_then(result, check)


def assert_failure(result: Any) -> Any:
    """Return ``result`` unchanged if it is a Failure, raise ResultAssertionError otherwise."""
    def check(r: Any) -> Any:
        if is_success(r):
            log.debug("assertion failed", expected="Failure", value=repr(r.value))
            raise ResultAssertionError.expected("Failure", "Success")
        return r
    return settle_then(result, check)
