"""A tiny observable value holder for publishing state to asyncio consumers."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from typing import Generic, TypeVar

T = TypeVar("T")


class StateFlow(Generic[T]):
    """Holds the latest value and wakes up subscribers when it changes.

    Subscribers are conflated: a slow subscriber sees the latest value, not
    every intermediate one. With distinct=True, assigning a value equal to the
    current one is ignored.
    """

    def __init__(self, initial: T, *, distinct: bool = True) -> None:
        self._value = initial
        self._distinct = distinct
        self._version = 0
        self._changed = asyncio.Event()

    @property
    def value(self) -> T:
        return self._value

    @value.setter
    def value(self, new_value: T) -> None:
        if self._distinct and new_value == self._value:
            return
        self._value = new_value
        self._version += 1
        changed, self._changed = self._changed, asyncio.Event()
        changed.set()

    @property
    def version(self) -> int:
        return self._version

    async def subscribe(self) -> AsyncIterator[T]:
        """Yield the current value, then every new one."""
        seen = self._version
        yield self._value
        while True:
            if self._version == seen:
                await self._changed.wait()
            seen = self._version
            yield self._value

    def __repr__(self) -> str:
        return f"StateFlow({self._value!r})"
