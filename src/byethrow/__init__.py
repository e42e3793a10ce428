"""byethrow - fallible computations as values, sync or async.

Outcomes (``Success``/``Failure``) replace raised exceptions, and one set of
combinators works the same whether a computation finished immediately or
will finish later (an awaitable). A chain stays synchronous until some step
returns an awaitable; from then on it is a ``ResultAsync`` to be awaited.

Quick Start:
    >>> import byethrow as R
    >>>
    >>> def positive(n: int) -> R.Result[int, str]:
    ...     return R.succeed(n) if n > 0 else R.fail("must be positive")
    >>>
    >>> R.pipe(
    ...     R.succeed(5),
    ...     R.and_then(positive),
    ...     R.map(lambda n: n * 2),
    ...     R.unwrap(),
    ... )
    10

Async continuations:
    >>> async def load(user_id: int) -> R.Result[dict, str]:
    ...     return R.succeed({"id": user_id})
    >>>
    >>> async def main() -> dict:
    ...     return await R.pipe(R.succeed(1), R.and_then(load), R.unwrap())

Boundaries:
    >>> import json
    >>> loads = R.fn(json.loads, catch=lambda exc: "invalid json")
    >>> R.collect([loads("1"), loads("{")])
    Failure(error=['invalid json'])
"""

from .aggregate import collect, combine, sequence
from .boundary import fn, parse, try_
from .combinators import (
    and_then,
    and_through,
    bind,
    inspect,
    inspect_error,
    map,
    map_error,
    or_else,
    or_through,
)
from .errors import (
    ByethrowError,
    ErrorCode,
    NestedResultError,
    NotARecordError,
    ResultAssertionError,
    SchemaError,
    UnwrapError,
)
from .logger import configure_logging, get_logger
from .pipe import flow, pipe
from .result import (
    Failure,
    Result,
    ResultAsync,
    ResultMaybeAsync,
    Success,
    do,
    fail,
    is_deferred,
    is_failure,
    is_result,
    is_success,
    succeed,
)
from .schema import Issue, Validator
from .settings import ByethrowSettings, get_settings
from .unwrap import assert_failure, assert_success, unwrap, unwrap_error

__version__ = "0.1.0"

__all__ = [
    # Outcome type
    "Result", "Success", "Failure", "ResultAsync", "ResultMaybeAsync", "is_deferred",
    # Constructors & inspectors
    "succeed", "fail", "do", "is_success", "is_failure", "is_result",
    # Combinators
    "map", "map_error", "and_then", "and_through", "or_else", "or_through",
    "inspect", "inspect_error", "bind",
    # Aggregators
    "sequence", "collect", "combine",
    # Boundaries
    "try_", "fn", "parse", "Issue", "Validator",
    # Unwrap & assert
    "unwrap", "unwrap_error", "assert_success", "assert_failure",
    # Composition
    "pipe", "flow",
    # Errors
    "ByethrowError", "ErrorCode", "UnwrapError", "ResultAssertionError", "SchemaError",
    "NestedResultError", "NotARecordError",
    # Configuration & logging
    "ByethrowSettings", "get_settings", "configure_logging", "get_logger",
]
