"""Programmer errors raised by byethrow.

Domain failures are values (the ``Failure`` variant) and are never raised by
the algebra. The exceptions here signal misuse of the API: an asynchronous
validator handed to ``parse``, an assertion on the wrong variant, an explicit
``unwrap`` of a failure, or a payload that breaks a constructor rule.
"""

from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    """Machine-readable classification of programmer errors."""
    UNWRAP_FAILURE = "UNWRAP_FAILURE"
    UNWRAP_SUCCESS = "UNWRAP_SUCCESS"
    EXPECTED_SUCCESS = "EXPECTED_SUCCESS"
    EXPECTED_FAILURE = "EXPECTED_FAILURE"
    ASYNC_SCHEMA = "ASYNC_SCHEMA"
    INVALID_SCHEMA = "INVALID_SCHEMA"
    NESTED_RESULT = "NESTED_RESULT"
    NOT_A_RECORD = "NOT_A_RECORD"


class ByethrowError(Exception):
    """Base for every exception raised by byethrow itself."""

    __slots__ = ("code",)

    def __init__(self, message: str, code: ErrorCode) -> None:
        self.code = code
        super().__init__(message)


class UnwrapError(ByethrowError):
    """Raised when unwrapping the wrong variant without a default.

    The offending payload is kept on ``value`` so callers at the boundary can
    still inspect it.
    """

    __slots__ = ("value",)

    def __init__(self, value: object, *, expected: str = "Success") -> None:
        self.value = value
        code = ErrorCode.UNWRAP_FAILURE if expected == "Success" else ErrorCode.UNWRAP_SUCCESS
        super().__init__(str(value), code)


class ResultAssertionError(ByethrowError, AssertionError):
    """Raised by assert_success/assert_failure when the variant disagrees."""

    @classmethod
    def expected(cls, variant: str, received: str) -> ResultAssertionError:
        code = ErrorCode.EXPECTED_SUCCESS if variant == "Success" else ErrorCode.EXPECTED_FAILURE
        return cls(f"Expected a {variant} result, but received a {received}", code)


class SchemaError(ByethrowError, TypeError):
    """Raised by parse for schemas it cannot drive synchronously."""


class NestedResultError(ByethrowError, TypeError):
    """Raised when an outcome is wrapped in another outcome while nesting is forbidden."""


class NotARecordError(ByethrowError, TypeError):
    """Raised by bind when the success value is not a mapping."""
