"""Tests for sequence, collect and combine."""

from __future__ import annotations

import asyncio

import pytest

import byethrow as R
from byethrow import Failure, ResultAsync, Success


async def later(value: object, delay: float = 0) -> object:
    await asyncio.sleep(delay)
    return value


def parse_int(s: str) -> R.Result[int, str]:
    return R.succeed(int(s)) if s.lstrip("-").isdigit() else R.fail(f"invalid: {s}")


# ═════════════════════════════════════════════════════════════════════════════
# sequence
# ═════════════════════════════════════════════════════════════════════════════


def test_sequence_all_success() -> None:
    assert R.sequence([R.succeed(1), R.succeed(2), R.succeed(3)]) == Success([1, 2, 3])


def test_sequence_first_error_wins() -> None:
    assert R.sequence([R.succeed(1), R.fail("e1"), R.fail("e2")]) == Failure("e1")


def test_sequence_empty() -> None:
    assert R.sequence([]) == Success([])
    assert R.sequence({}) == Success({})


def test_sequence_keeps_shape() -> None:
    assert R.sequence((R.succeed(1), R.succeed(2))) == Success((1, 2))
    assert R.sequence({"a": R.succeed(1), "b": R.succeed(2)}) == Success({"a": 1, "b": 2})


def test_sequence_mapping_fails_fast() -> None:
    assert R.sequence({"a": R.succeed(1), "b": R.fail("b"), "c": R.fail("c")}) == Failure("b")


def test_sequence_with_fn_stops_calling() -> None:
    visited: list[str] = []

    def check(s: str) -> R.Result[int, str]:
        visited.append(s)
        return parse_int(s)

    assert R.sequence(["1", "bad", "3"], check) == Failure("invalid: bad")
    assert visited == ["1", "bad"]


def test_sequence_with_fn_over_mapping() -> None:
    assert R.sequence({"x": "1", "y": "2"}, parse_int) == Success({"x": 1, "y": 2})


def test_sequence_does_not_mutate_input() -> None:
    items = [R.succeed(1), R.succeed(2)]
    R.sequence(items)
    assert items == [R.succeed(1), R.succeed(2)]


@pytest.mark.asyncio
async def test_sequence_deferred_elements() -> None:
    result = R.sequence([R.succeed(1), later(R.succeed(2)), R.succeed(3)])

    assert isinstance(result, ResultAsync)
    assert await result == Success([1, 2, 3])


@pytest.mark.asyncio
async def test_sequence_error_precedence_follows_input_order() -> None:
    result = R.sequence([later(R.fail("slow first"), 0.02), R.fail("fast second")])
    assert await result == Failure("slow first")


@pytest.mark.asyncio
async def test_sequence_continues_in_order_after_deferral() -> None:
    visited: list[str] = []

    async def check(s: str) -> R.Result[int, str]:
        visited.append(f"start {s}")
        await asyncio.sleep(0.01 if s == "1" else 0)
        visited.append(f"end {s}")
        return parse_int(s)

    result = R.sequence(["1", "2", "bad", "4"], check)

    assert await result == Failure("invalid: bad")
    assert visited == ["start 1", "end 1", "start 2", "end 2", "start bad", "end bad"]


# ═════════════════════════════════════════════════════════════════════════════
# collect / combine
# ═════════════════════════════════════════════════════════════════════════════


def test_collect_all_success() -> None:
    assert R.collect([R.succeed(1), R.succeed(2)]) == Success([1, 2])


def test_collect_all_errors() -> None:
    assert R.collect([R.succeed(1), R.fail("e1"), R.fail("e2")]) == Failure(["e1", "e2"])


def test_collect_mapping() -> None:
    assert R.collect({"a": R.succeed(1), "b": R.succeed(2)}) == Success({"a": 1, "b": 2})
    assert R.collect({"a": R.fail("a"), "b": R.succeed(2), "c": R.fail("c")}) == Failure(["a", "c"])


def test_collect_with_fn_visits_every_element() -> None:
    visited: list[str] = []

    def check(s: str) -> R.Result[int, str]:
        visited.append(s)
        return parse_int(s)

    assert R.collect(["1", "x", "3", "y"], check) == Failure(["invalid: x", "invalid: y"])
    assert visited == ["1", "x", "3", "y"]


def test_collect_empty() -> None:
    assert R.collect([]) == Success([])
    assert R.collect({}) == Success({})


def test_combine_matches_collect() -> None:
    items = [R.succeed(1), R.fail("e1"), R.succeed(3), R.fail("e2")]
    assert R.combine(items) == R.collect(items) == Failure(["e1", "e2"])
    assert R.combine((R.succeed(1), R.succeed(2))) == Success((1, 2))


@pytest.mark.asyncio
async def test_collect_error_order_is_input_order() -> None:
    result = R.collect([later(R.fail("slow"), 0.03), R.succeed(1), later(R.fail("fast"), 0)])

    assert isinstance(result, ResultAsync)
    assert await result == Failure(["slow", "fast"])


@pytest.mark.asyncio
async def test_collect_settles_concurrently() -> None:
    in_flight = 0
    peak = 0

    async def work(n: int) -> R.Result[int, str]:
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0.01)
        in_flight -= 1
        return R.succeed(n)

    result = R.collect([1, 2, 3], work)

    assert await result == Success([1, 2, 3])
    assert peak == 3


@pytest.mark.asyncio
async def test_combine_deferred_mapping() -> None:
    result = R.combine({"a": later(R.succeed(1)), "b": R.succeed(2)})
    assert await result == Success({"a": 1, "b": 2})
