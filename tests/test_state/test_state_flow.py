"""Tests for the observable state holder."""

import asyncio

import pytest

from nori_engine.state import StateFlow


def test_value_and_version() -> None:
    flow = StateFlow(1)
    assert flow.value == 1
    assert flow.version == 0

    flow.value = 2
    assert flow.value == 2
    assert flow.version == 1


def test_equal_values_are_ignored_when_distinct() -> None:
    flow = StateFlow([1])
    flow.value = [1]
    assert flow.version == 0


def test_equal_values_count_when_not_distinct() -> None:
    flow = StateFlow([1], distinct=False)
    flow.value = [1]
    assert flow.version == 1


@pytest.mark.asyncio
async def test_subscriber_gets_current_then_new_values() -> None:
    flow = StateFlow("a")
    seen: list[str] = []

    async def collect() -> None:
        async for value in flow.subscribe():
            seen.append(value)
            if value == "c":
                return

    task = asyncio.create_task(collect())
    await asyncio.sleep(0)
    flow.value = "b"
    await asyncio.sleep(0)
    flow.value = "c"
    await asyncio.wait_for(task, 1.0)

    assert seen == ["a", "b", "c"]


@pytest.mark.asyncio
async def test_slow_subscriber_sees_only_latest() -> None:
    flow = StateFlow(0)
    seen: list[int] = []

    async def collect() -> None:
        async for value in flow.subscribe():
            seen.append(value)
            if value == 3:
                return

    task = asyncio.create_task(collect())
    await asyncio.sleep(0)
    flow.value = 1
    flow.value = 2
    flow.value = 3
    await asyncio.wait_for(task, 1.0)

    assert seen == [0, 3]
