"""Validation issues and the validator capability consumed by ``parse``.

A validator is anything exposing ``validate(value)`` that synchronously
returns either something carrying ``issues`` (rejection) or something
carrying ``value`` (acceptance), as an attribute or a mapping key. pydantic
models and ``TypeAdapter`` instances are driven directly.
"""

from __future__ import annotations

import inspect
from collections.abc import Mapping, Sequence
from typing import Any, Protocol, Union, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from .errors import ErrorCode, SchemaError
from .result import Failure, Result, Success, is_deferred

_NOTHING = object()


class Issue(BaseModel):
    """One reason a value was rejected by a validator."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        json_schema_extra={
            "title": "Validation Issue",
            "examples": [{"message": "Field required", "path": ["name"], "code": "missing"}],
        },
    )

    message: str
    path: tuple[str | int, ...] = Field(default=(), description="Location of the offending value")
    code: str | None = None

    def __str__(self) -> str:
        where = ".".join(str(p) for p in self.path)
        return f"{where}: {self.message}" if where else self.message


@runtime_checkable
class Validator(Protocol):
    """Minimal synchronous validator capability."""

    def validate(self, value: Any) -> Any: ...


Schema = Union[type[BaseModel], TypeAdapter[Any], Validator]


# ─── Issue normalisation ─────────────────────────────────────────────────────


def _get(source: Any, name: str, default: Any = None) -> Any:
    if isinstance(source, Mapping):
        return source.get(name, default)
    return getattr(source, name, default)


def _path(raw: Any) -> tuple[str | int, ...]:
    if raw is None or isinstance(raw, str):
        return (raw,) if raw else ()
    # Path segments may be plain keys or objects carrying ``key``
    return tuple(_get(seg, "key", seg) if not isinstance(seg, (str, int)) else seg for seg in raw)


def to_issue(raw: Any) -> Issue:
    """Normalise a validator's issue (model, mapping, object or string) into an Issue."""
    if isinstance(raw, Issue):
        return raw
    if isinstance(raw, str):
        return Issue(message=raw)
    message = _get(raw, "message") or _get(raw, "msg") or str(raw)
    path = _get(raw, "path")
    code = _get(raw, "code") or _get(raw, "type")
    return Issue(
        message=str(message),
        path=_path(path if path is not None else _get(raw, "loc")),
        code=str(code) if code is not None else None,
    )


def issues_from_pydantic(exc: ValidationError) -> list[Issue]:
    return [Issue(message=e["msg"], path=tuple(e["loc"]), code=e["type"]) for e in exc.errors()]


# ─── Validation ──────────────────────────────────────────────────────────────


def validate(schema: Schema, value: Any) -> Result[Any, list[Issue]]:
    """Run ``schema`` against ``value`` synchronously.

    Raises:
        SchemaError: the validator answered with an awaitable, or with neither
            issues nor a value.
    """
    # pydantic first: BaseModel also carries a legacy ``validate`` classmethod
    if isinstance(schema, type) and issubclass(schema, BaseModel):
        try:
            return Success(schema.model_validate(value))
        except ValidationError as exc:
            return Failure(issues_from_pydantic(exc))
    if isinstance(schema, TypeAdapter):
        try:
            return Success(schema.validate_python(value))
        except ValidationError as exc:
            return Failure(issues_from_pydantic(exc))
    if not isinstance(schema, Validator):
        raise SchemaError(f"Unsupported schema: {schema!r}", ErrorCode.INVALID_SCHEMA)

    outcome = schema.validate(value)
    if is_deferred(outcome):
        if inspect.iscoroutine(outcome):
            outcome.close()
        raise SchemaError("Schema validation must be synchronous", ErrorCode.ASYNC_SCHEMA)
    issues = _get(outcome, "issues")
    if issues is not None:
        return Failure([to_issue(i) for i in (issues if isinstance(issues, Sequence) and not isinstance(issues, str) else [issues])])
    accepted = _get(outcome, "value", _NOTHING)
    if accepted is _NOTHING:
        raise SchemaError(f"Validator returned neither issues nor a value: {outcome!r}", ErrorCode.INVALID_SCHEMA)
    return Success(accepted)
